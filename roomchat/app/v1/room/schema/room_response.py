from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from roomchat.app.common.utils.consts import DEFAULT_MAX_PARTICIPANTS


class RoomRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    room_code: str
    description: str | None = None
    created_by: str | None = None
    is_password_protected: bool = False
    is_active: bool = True
    max_participants: int = DEFAULT_MAX_PARTICIPANTS
    created_at: datetime | None = None
    # 응답에는 절대 포함하지 않음
    password_hash: str | None = Field(default=None, exclude=True)


class RoomListResponse(RoomRead):
    participant_count: int = 0


class RoomJoinResponse(BaseModel):
    room: RoomRead
    link: str
