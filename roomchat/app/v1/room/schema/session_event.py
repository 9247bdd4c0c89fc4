from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from roomchat.app.common.utils.consts import MessageType
from roomchat.app.v1.user.schema.profile import AuthorProfile


class TranscriptMessage(BaseModel):
    id: str
    room_id: str
    user_id: str
    content: str
    message_type: MessageType = MessageType.TEXT
    file_url: str | None = None
    created_at: datetime
    profile: AuthorProfile


class RosterEntry(BaseModel):
    user_id: str
    joined_at: datetime
    profile: AuthorProfile


class SessionEvent(BaseModel):
    kind: Literal["message", "roster"]
    message: TranscriptMessage | None = None
    roster: list[RosterEntry] | None = None


class SessionSnapshot(BaseModel):
    kind: Literal["snapshot"] = "snapshot"
    room_id: str
    room_code: str
    name: str
    transcript: list[TranscriptMessage]
    roster: list[RosterEntry]
