from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ImageCapture(BaseModel):
    id: str
    user_id: str
    image_url: str
    metadata: dict[str, Any] | None = None
    captured_at: datetime


class AudioCapture(BaseModel):
    id: str
    user_id: str
    audio_url: str
    duration_seconds: float | None = None
    metadata: dict[str, Any] | None = None
    recorded_at: datetime


class LocationCapture(BaseModel):
    id: str
    user_id: str
    latitude: float
    longitude: float
    accuracy: float | None = None
    metadata: dict[str, Any] | None = None
    recorded_at: datetime


class CaptureDataResponse(BaseModel):
    images: list[ImageCapture] = Field(default_factory=list)
    audio: list[AudioCapture] = Field(default_factory=list)
    locations: list[LocationCapture] = Field(default_factory=list)
