import logging
import os
from typing import Iterable
from urllib.parse import urlencode

from dotenv import load_dotenv
from redis.asyncio import Redis
from sqlalchemy import Table, func, literal_column, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from roomchat.app.common.data.change_feed import RedisChangeFeed
from roomchat.app.common.data.client import (
    ChangeEvent,
    ChangeHandler,
    DataClient,
    Order,
    Row,
    Session,
    Subscription,
)
from roomchat.app.common.exceptions import BackendError, UnauthenticatedError, ValidationError
from roomchat.app.common.utils.consts import ChangeType, SocialProvider, Table as Tables
from roomchat.app.common.utils.redis_utils import is_jti_revoked, mark_jti_revoked
from roomchat.app.common.utils.security import create_access_token, seconds_until_expiry, verify_access_token
from roomchat.app.common.utils.storage import StorageService
from roomchat.app.common.utils.verify_password import verify_password
from roomchat.config.database import Base, SessionLocal
from roomchat.config.database import database_models  # noqa: F401  테이블 메타데이터 등록
from roomchat.config.database.redis import get_redis_cache, room_redis

logger = logging.getLogger(__name__)

load_dotenv()

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"


class SqlDataClient(DataClient):
    """PostgreSQL + Redis Pub/Sub + S3 로 구성한 DataClient 구현체."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = SessionLocal,
        redis: Redis = room_redis,
        storage: StorageService | None = None,
        access_token: str | None = None,
        token_store: Redis | None = None,
    ):
        self.session_factory = session_factory
        self.change_feed = RedisChangeFeed(redis)
        self.storage = storage
        self.access_token = access_token
        self.token_store = token_store or get_redis_cache()

    # ---------------------------------------------------------------- 인증

    async def get_session(self) -> Session | None:
        if not self.access_token:
            return None
        try:
            payload = verify_access_token(self.access_token)
        except UnauthenticatedError:
            return None

        if await is_jti_revoked(payload.get("jti"), client=self.token_store):
            logger.info(f"Revoked token used by user {payload['sub']}")
            return None
        return Session(access_token=self.access_token, user_id=str(payload["sub"]), email=payload.get("email"))

    async def sign_in(self, provider: str) -> str:
        if provider != SocialProvider.GOOGLE.value:
            raise ValidationError(f"Unsupported provider: {provider}")

        query = urlencode(
            {
                "client_id": os.getenv("GOOGLE_CLIENT_ID", ""),
                "redirect_uri": os.getenv("GOOGLE_REDIRECT_URI", ""),
                "response_type": "code",
                "scope": "email profile",
            }
        )
        return f"{GOOGLE_AUTHORIZE_URL}?{query}"

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        rows = await self.select(Tables.AUTH_USERS, {"email": email}, limit=1)
        if not rows or not verify_password(password, rows[0].get("password_hash")):
            logger.warning(f"Failed password sign-in for {email}")
            raise UnauthenticatedError("Invalid email or password")

        user = rows[0]
        self.access_token = create_access_token({"sub": user["id"], "email": user["email"]})
        logger.info(f"User {user['id']} signed in")
        return Session(access_token=self.access_token, user_id=user["id"], email=user["email"])

    async def sign_out(self) -> None:
        if not self.access_token:
            return
        try:
            payload = verify_access_token(self.access_token)
        except UnauthenticatedError:
            payload = None

        if payload and payload.get("jti"):
            await mark_jti_revoked(payload["jti"], seconds_until_expiry(payload), client=self.token_store)
        self.access_token = None

    # ---------------------------------------------------------------- 레코드

    @staticmethod
    def _table(name: str) -> Table:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise BackendError(f"Unknown table: {name}")
        return table

    @staticmethod
    def _column(table: Table, column: str):
        if column not in table.c:
            raise BackendError(f"Unknown column: {table.name}.{column}")
        return table.c[column]

    def _where(self, table: Table, filters: Row | None) -> list:
        return [self._column(table, column) == value for column, value in (filters or {}).items()]

    async def select(
        self,
        table: str,
        filters: Row | None = None,
        order: Order | None = None,
        limit: int | None = None,
    ) -> list[Row]:
        t = self._table(table)
        query = select(t).where(*self._where(t, filters))
        if order is not None:
            column = self._column(t, order.column)
            query = query.order_by(column.desc() if order.descending else column.asc())
        if limit is not None:
            query = query.limit(limit)

        async with self.session_factory() as session:
            try:
                result = await session.execute(query)
                return [dict(row) for row in result.mappings().all()]
            except SQLAlchemyError as e:
                logger.error(f"Database error while selecting from {table}: {e}")
                raise BackendError(str(e))

    async def count(self, table: str, filters: Row | None = None) -> int:
        t = self._table(table)
        query = select(func.count()).select_from(t).where(*self._where(t, filters))

        async with self.session_factory() as session:
            try:
                result = await session.execute(query)
                return int(result.scalar_one())
            except SQLAlchemyError as e:
                logger.error(f"Database error while counting {table}: {e}")
                raise BackendError(str(e))

    async def insert(self, table: str, row: Row) -> Row:
        t = self._table(table)
        query = t.insert().values(**row).returning(*t.c)

        async with self.session_factory() as session:
            try:
                result = await session.execute(query)
                created = dict(result.mappings().one())
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error while inserting into {table}: {e}")
                raise BackendError(str(e))

        await self.change_feed.publish(ChangeEvent(table=table, type=ChangeType.INSERT, new=created))
        return created

    async def upsert(self, table: str, row: Row, on_conflict: tuple[str, ...]) -> Row:
        t = self._table(table)
        query = pg_insert(t).values(**row)
        updates = {column: query.excluded[column] for column in row if column not in on_conflict}
        if not updates:
            # 갱신할 컬럼이 없어도 RETURNING 으로 기존 행을 돌려받기 위함
            updates = {on_conflict[0]: query.excluded[on_conflict[0]]}
        query = query.on_conflict_do_update(index_elements=list(on_conflict), set_=updates).returning(
            *t.c, literal_column("(xmax = 0)").label("_inserted")
        )

        async with self.session_factory() as session:
            try:
                result = await session.execute(query)
                saved = dict(result.mappings().one())
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error while upserting into {table}: {e}")
                raise BackendError(str(e))

        change_type = ChangeType.INSERT if saved.pop("_inserted") else ChangeType.UPDATE
        await self.change_feed.publish(ChangeEvent(table=table, type=change_type, new=saved))
        return saved

    async def update(self, table: str, filters: Row, values: Row) -> list[Row]:
        if not filters:
            raise ValidationError("Refusing to update without filters")
        t = self._table(table)
        query = t.update().where(*self._where(t, filters)).values(**values).returning(*t.c)

        async with self.session_factory() as session:
            try:
                result = await session.execute(query)
                updated = [dict(row) for row in result.mappings().all()]
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database error while updating {table}: {e}")
                raise BackendError(str(e))

        for row in updated:
            await self.change_feed.publish(ChangeEvent(table=table, type=ChangeType.UPDATE, new=row))
        return updated

    # ---------------------------------------------------------------- 구독

    async def subscribe(
        self,
        table: str,
        filters: Row | None,
        on_event: ChangeHandler,
        events: Iterable[ChangeType] | None = None,
    ) -> Subscription:
        self._table(table)
        subscription = Subscription(table, filters, on_event, events)
        await self.change_feed.listen(subscription)
        return subscription

    async def unsubscribe(self, subscription: Subscription) -> None:
        await self.change_feed.release(subscription)

    # ---------------------------------------------------------------- 스토리지

    def _require_storage(self) -> StorageService:
        if self.storage is None:
            self.storage = StorageService()
        return self.storage

    async def upload_object(self, bucket: str, key: str, data: bytes) -> str:
        return await self._require_storage().upload_object(bucket, key, data)

    def get_public_url(self, bucket: str, path: str) -> str:
        return self._require_storage().get_public_url(bucket, path)
