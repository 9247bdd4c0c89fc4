from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Iterable

from pydantic import BaseModel, Field

from roomchat.app.common.utils.codes import generate_uuid
from roomchat.app.common.utils.consts import ChangeType

Row = dict[str, Any]


class Session(BaseModel):
    access_token: str
    user_id: str
    email: str | None = None


class Order(BaseModel):
    column: str
    descending: bool = False

    @classmethod
    def asc(cls, column: str) -> "Order":
        return cls(column=column)

    @classmethod
    def desc(cls, column: str) -> "Order":
        return cls(column=column, descending=True)


class ChangeEvent(BaseModel):
    """테이블 행 변경 알림 (INSERT/UPDATE/DELETE)."""

    table: str
    type: ChangeType
    new: Row = Field(default_factory=dict)
    old: Row = Field(default_factory=dict)

    @property
    def record(self) -> Row:
        return self.new or self.old

    def matches(self, filters: Row | None) -> bool:
        record = self.record
        # JSON 왕복 후에도 비교할 수 있도록 문자열로 비교
        return all(column in record and str(record[column]) == str(value) for column, value in (filters or {}).items())


ChangeHandler = Callable[[ChangeEvent], Awaitable[None]]


class Subscription:
    def __init__(self, table: str, filters: Row | None, handler: ChangeHandler, events: Iterable[ChangeType] | None = None):
        self.id = generate_uuid()
        self.table = table
        self.filters = dict(filters or {})
        self.handler = handler
        self.events = frozenset(events) if events else None
        self.closed = False

    def accepts(self, event: ChangeEvent) -> bool:
        if self.closed or event.table != self.table:
            return False
        if self.events is not None and event.type not in self.events:
            return False
        return event.matches(self.filters)

    def __repr__(self) -> str:
        return f"Subscription(id={self.id!r}, table={self.table!r}, filters={self.filters!r})"


class DataClient(ABC):
    """관리형 데이터 서비스에 대한 접근 인터페이스.

    인스턴스 하나는 호출자 한 명의 세션 컨텍스트(access token)에 묶인다.
    모든 실패는 ``BackendError``로 감싸서 올린다.
    """

    # 인증
    @abstractmethod
    async def get_session(self) -> Session | None: ...

    @abstractmethod
    async def sign_in(self, provider: str) -> str:
        """OAuth 공급자 로그인 URL을 반환한다."""

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> Session: ...

    @abstractmethod
    async def sign_out(self) -> None: ...

    # 레코드 CRUD
    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Row | None = None,
        order: Order | None = None,
        limit: int | None = None,
    ) -> list[Row]: ...

    @abstractmethod
    async def count(self, table: str, filters: Row | None = None) -> int: ...

    @abstractmethod
    async def insert(self, table: str, row: Row) -> Row: ...

    @abstractmethod
    async def upsert(self, table: str, row: Row, on_conflict: tuple[str, ...]) -> Row: ...

    @abstractmethod
    async def update(self, table: str, filters: Row, values: Row) -> list[Row]: ...

    # 변경 구독
    @abstractmethod
    async def subscribe(
        self,
        table: str,
        filters: Row | None,
        on_event: ChangeHandler,
        events: Iterable[ChangeType] | None = None,
    ) -> Subscription: ...

    @abstractmethod
    async def unsubscribe(self, subscription: Subscription) -> None: ...

    # Object Storage
    @abstractmethod
    async def upload_object(self, bucket: str, key: str, data: bytes) -> str: ...

    @abstractmethod
    def get_public_url(self, bucket: str, path: str) -> str: ...
