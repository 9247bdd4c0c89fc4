import asyncio
import logging
import os

from dotenv import load_dotenv

from roomchat.app.common.data.client import DataClient
from roomchat.app.common.exceptions import (
    NotFoundError,
    PasswordMismatchError,
    PasswordRequiredError,
    RoomFullError,
    UnauthenticatedError,
    ValidationError,
)
from roomchat.app.common.utils.consts import DEFAULT_MAX_PARTICIPANTS, MIN_PARTICIPANTS
from roomchat.app.common.utils.verify_password import hash_password, verify_password
from roomchat.app.v1.room.repository.room_repository import RoomRepository
from roomchat.app.v1.room.schema.room_response import RoomListResponse, RoomRead

logger = logging.getLogger(__name__)

load_dotenv()

# 비밀번호 해시 검증 여부 (기본값: 비어있지 않은 비밀번호면 통과)
ROOM_PASSWORD_VERIFY = os.environ.get("ROOM_PASSWORD_VERIFY", "false").lower() == "true"


class RoomDirectory:

    def __init__(self, client: DataClient, verify_passwords: bool = ROOM_PASSWORD_VERIFY):
        self.client = client
        self.room_repository = RoomRepository(client)
        self.verify_passwords = verify_passwords

    async def list_active_rooms(self) -> list[RoomListResponse]:
        rooms = await self.room_repository.list_active()
        counts = await asyncio.gather(*(self.room_repository.count_active_participants(room.id) for room in rooms))
        return [RoomListResponse(**room.model_dump(), participant_count=count) for room, count in zip(rooms, counts)]

    async def create_room(
        self,
        name: str,
        description: str | None = None,
        password: str | None = None,
        max_participants: int = DEFAULT_MAX_PARTICIPANTS,
    ) -> RoomRead:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Room name is required")
        if max_participants < MIN_PARTICIPANTS:
            raise ValidationError(f"Room capacity must be at least {MIN_PARTICIPANTS}")

        session = await self.client.get_session()
        if session is None:
            raise UnauthenticatedError()

        # 평문 비밀번호는 저장하지 않음
        room = await self.room_repository.create(
            {
                "name": name,
                "description": (description or "").strip() or None,
                "created_by": session.user_id,
                "is_password_protected": bool(password),
                "password_hash": hash_password(password) if password else None,
                "max_participants": max_participants,
            }
        )
        logger.info(f"User {session.user_id} created room {room.room_code}")
        return room

    async def resolve_join(self, room_code: str, password: str | None = None) -> RoomRead:
        """참여 가능 여부를 순서대로 확인합니다: 코드 조회 → 비밀번호 → 정원."""
        if not room_code or not room_code.strip():
            raise ValidationError("Room code is required")

        room = await self.room_repository.find_active_by_code(room_code)
        if room is None:
            raise NotFoundError("Invalid room code or room is inactive")

        if room.is_password_protected:
            if not password:
                raise PasswordRequiredError()
            if self.verify_passwords and not verify_password(password, room.password_hash):
                logger.warning(f"Wrong password for room {room.room_code}")
                raise PasswordMismatchError()

        # 확인과 입장 사이의 경쟁은 허용 (원자적이지 않음)
        count = await self.room_repository.count_active_participants(room.id)
        if count >= room.max_participants:
            raise RoomFullError()

        return room

    @staticmethod
    def room_link(base_url: str, room_code: str) -> str:
        return f"{base_url.rstrip('/')}/chat/{room_code}"
