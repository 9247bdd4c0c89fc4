import asyncio
import logging
from typing import AsyncIterator

from roomchat.app.common.data.client import ChangeEvent, DataClient, Row, Session, Subscription
from roomchat.app.common.exceptions import (
    BackendError,
    ChatError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from roomchat.app.common.utils.consts import MESSAGE_HISTORY_LIMIT, ChangeType, MessageType, SessionState, Table
from roomchat.app.v1.room.repository.room_repository import RoomRepository
from roomchat.app.v1.room.schema.room_response import RoomRead
from roomchat.app.v1.room.schema.session_event import RosterEntry, SessionEvent, SessionSnapshot, TranscriptMessage
from roomchat.app.v1.user.repository.user_repository import UserRepository
from roomchat.app.v1.user.schema.profile import AuthorProfile

logger = logging.getLogger(__name__)


class RoomSession:
    """열린 채팅방 하나에 대한 세션.

    상태는 INITIALIZING → ACTIVE → CLOSED 순으로만 이동합니다.
    transcript 와 roster 는 이 세션만 수정하는 로컬 캐시입니다.
    보낸 메시지는 로컬에 바로 추가하지 않고 구독 이벤트로 돌아올 때 추가됩니다.
    """

    def __init__(self, client: DataClient, history_limit: int = MESSAGE_HISTORY_LIMIT):
        self.client = client
        self.room_repository = RoomRepository(client)
        self.user_repository = UserRepository(client)
        self.history_limit = history_limit

        self.state = SessionState.INITIALIZING
        self.room: RoomRead | None = None
        self.user: Session | None = None
        self.transcript: list[TranscriptMessage] = []
        self.roster: list[RosterEntry] = []

        self._subscriptions: list[Subscription] = []
        self._events: asyncio.Queue[SessionEvent | None] = asyncio.Queue()

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    async def open(self, room_code: str) -> "RoomSession":
        if self.state != SessionState.INITIALIZING:
            raise RuntimeError(f"Session already {self.state.value}")

        try:
            user = await self.client.get_session()
            if user is None:
                raise UnauthenticatedError()

            room = await self.room_repository.find_active_by_code(room_code)
            if room is None:
                raise NotFoundError("The chat room doesn't exist or is inactive")

            # 이미 참여 중이면 갱신만 됨
            await self.room_repository.join(room.id, user.user_id)

            self.room, self.user = room, user
            self.transcript = await self._load_transcript(room.id)
            self.roster = await self._load_roster(room.id)

            await self._subscribe(room.id)
        except asyncio.CancelledError:
            await self._abort()
            raise
        except Exception as e:
            await self._abort()
            if isinstance(e, ChatError):
                raise
            logger.error(f"Error initializing room session {room_code!r}: {e}")
            raise BackendError(str(e))

        self.state = SessionState.ACTIVE
        logger.info(f"User {user.user_id} opened room {room.room_code}")
        return self

    async def send_message(self, text: str) -> None:
        content = (text or "").strip()
        if not content:
            return
        if not self.is_active:
            raise ValidationError("Room session is not active")

        await self.room_repository.add_message(self.room.id, self.user.user_id, content, MessageType.TEXT)

    async def close(self) -> None:
        if self.state == SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        await self._release()
        self._events.put_nowait(None)
        if self.room and self.user:
            logger.info(f"User {self.user.user_id} left room {self.room.room_code}")

    async def events(self) -> AsyncIterator[SessionEvent]:
        """세션이 닫힐 때까지 transcript/roster 변경 이벤트를 내보냅니다."""
        while True:
            event = await self._events.get()
            if event is None:
                return
            yield event

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            room_id=self.room.id,
            room_code=self.room.room_code,
            name=self.room.name,
            transcript=list(self.transcript),
            roster=list(self.roster),
        )

    async def __aenter__(self) -> "RoomSession":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    # ---------------------------------------------------------------- 로딩

    async def _profiles_for(self, user_ids: list[str]) -> dict[str, AuthorProfile]:
        unique_ids = list(dict.fromkeys(user_ids))
        profiles = await asyncio.gather(*(self.user_repository.get_author(user_id) for user_id in unique_ids))
        return dict(zip(unique_ids, profiles))

    async def _load_transcript(self, room_id: str) -> list[TranscriptMessage]:
        rows = await self.room_repository.recent_messages(room_id, self.history_limit)
        profiles = await self._profiles_for([row["user_id"] for row in rows])
        return [self._to_message(row, profiles[row["user_id"]]) for row in rows]

    async def _load_roster(self, room_id: str) -> list[RosterEntry]:
        rows = await self.room_repository.active_participants(room_id)
        profiles = await self._profiles_for([row["user_id"] for row in rows])
        return [RosterEntry(user_id=row["user_id"], joined_at=row["joined_at"], profile=profiles[row["user_id"]]) for row in rows]

    @staticmethod
    def _to_message(row: Row, profile: AuthorProfile) -> TranscriptMessage:
        return TranscriptMessage(
            id=row["id"],
            room_id=row["room_id"],
            user_id=row["user_id"],
            content=row["content"],
            message_type=row.get("message_type") or MessageType.TEXT,
            file_url=row.get("file_url"),
            created_at=row["created_at"],
            profile=profile,
        )

    # ---------------------------------------------------------------- 구독

    async def _subscribe(self, room_id: str):
        self._subscriptions.append(
            await self.client.subscribe(Table.MESSAGES, {"room_id": room_id}, self._on_message, events=[ChangeType.INSERT])
        )
        self._subscriptions.append(await self.client.subscribe(Table.PARTICIPANTS, {"room_id": room_id}, self._on_roster_change))

    async def _on_message(self, event: ChangeEvent):
        if self.state == SessionState.CLOSED:
            return
        row = event.new
        profile = await self.user_repository.get_author(row["user_id"])
        # 프로필 조회 중에 세션이 닫혔을 수 있음
        if self.state == SessionState.CLOSED:
            return

        message = self._to_message(row, profile)
        self.transcript.append(message)
        self._events.put_nowait(SessionEvent(kind="message", message=message))

    async def _on_roster_change(self, event: ChangeEvent):
        if self.state == SessionState.CLOSED:
            return
        try:
            roster = await self._load_roster(self.room.id)
        except Exception as e:
            logger.error(f"Failed to reload roster for room {self.room.room_code}: {e}")
            return
        if self.state == SessionState.CLOSED:
            return

        self.roster = roster
        self._events.put_nowait(SessionEvent(kind="roster", roster=list(roster)))

    async def _release(self):
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            try:
                await self.client.unsubscribe(subscription)
            except Exception as e:
                logger.error(f"Failed to release {subscription!r}: {e}")

    async def _abort(self):
        self.state = SessionState.CLOSED
        await self._release()
        self._events.put_nowait(None)
