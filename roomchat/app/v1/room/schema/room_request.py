from pydantic import BaseModel, Field

from roomchat.app.common.utils.consts import DEFAULT_MAX_PARTICIPANTS


class RoomCreateRequest(BaseModel):
    # 빈 이름 검증은 서비스에서 ValidationError 로 처리
    name: str
    description: str | None = None
    password: str | None = None
    max_participants: int = Field(DEFAULT_MAX_PARTICIPANTS, le=1000)


class RoomJoinRequest(BaseModel):
    room_code: str
    password: str | None = None


class MessageSendRequest(BaseModel):
    content: str = ""
