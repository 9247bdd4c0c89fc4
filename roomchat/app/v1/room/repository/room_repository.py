import logging

from roomchat.app.common.data.client import DataClient, Order, Row
from roomchat.app.common.utils.codes import normalize_room_code
from roomchat.app.common.utils.consts import MessageType, Table
from roomchat.app.v1.room.schema.room_response import RoomRead

logger = logging.getLogger(__name__)


class RoomRepository:

    def __init__(self, client: DataClient):
        self.client = client

    async def list_active(self) -> list[RoomRead]:
        rows = await self.client.select(Table.ROOMS, {"is_active": True}, order=Order.desc("created_at"))
        return [RoomRead.model_validate(row) for row in rows]

    async def find_active_by_code(self, room_code: str) -> RoomRead | None:
        rows = await self.client.select(Table.ROOMS, {"room_code": normalize_room_code(room_code), "is_active": True}, limit=1)
        if not rows:
            logger.warning(f"Room code {room_code!r}가 존재하지 않거나 비활성 상태입니다.")
            return None
        return RoomRead.model_validate(rows[0])

    async def create(self, row: Row) -> RoomRead:
        created = await self.client.insert(Table.ROOMS, row)
        logger.info(f"Room {created['id']} ({created['room_code']}) 생성")
        return RoomRead.model_validate(created)

    # 참여자

    async def count_active_participants(self, room_id: str) -> int:
        return await self.client.count(Table.PARTICIPANTS, {"room_id": room_id, "is_active": True})

    async def active_participants(self, room_id: str) -> list[Row]:
        return await self.client.select(
            Table.PARTICIPANTS,
            {"room_id": room_id, "is_active": True},
            order=Order.asc("joined_at"),
        )

    async def join(self, room_id: str, user_id: str) -> Row:
        # (room_id, user_id) 충돌 시 is_active 만 갱신
        return await self.client.upsert(
            Table.PARTICIPANTS,
            {"room_id": room_id, "user_id": user_id, "is_active": True},
            on_conflict=("room_id", "user_id"),
        )

    async def leave(self, room_id: str, user_id: str) -> None:
        await self.client.update(Table.PARTICIPANTS, {"room_id": room_id, "user_id": user_id}, {"is_active": False})

    # 메시지

    async def recent_messages(self, room_id: str, limit: int) -> list[Row]:
        """최근 ``limit``개의 메시지를 작성 시간 오름차순으로 반환합니다."""
        rows = await self.client.select(
            Table.MESSAGES,
            {"room_id": room_id},
            order=Order.desc("created_at"),
            limit=limit,
        )
        return list(reversed(rows))

    async def add_message(self, room_id: str, user_id: str, content: str, message_type: MessageType = MessageType.TEXT) -> Row:
        return await self.client.insert(
            Table.MESSAGES,
            {
                "room_id": room_id,
                "user_id": user_id,
                "content": content,
                "message_type": message_type.value,
            },
        )
