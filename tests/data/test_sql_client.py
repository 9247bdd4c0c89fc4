import os

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from roomchat.app.common.data.client import Order
from roomchat.app.common.data.sql_client import SqlDataClient
from roomchat.app.common.exceptions import BackendError, UnauthenticatedError, ValidationError
from roomchat.app.common.utils.consts import Table
from roomchat.app.common.utils.verify_password import hash_password
from roomchat.config.database import Base

load_dotenv()

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

pytestmark = pytest.mark.skipif(TEST_DATABASE_URL is None, reason="TEST_DATABASE_URL environment variable is not set")


class RecordingRedis:
    """publish 와 jti 저장만 흉내내는 Redis"""

    def __init__(self):
        self.published = []
        self.values = {}

    async def publish(self, channel, data):
        self.published.append((channel, data))

    async def set(self, key, value, ex=None):
        self.values[key] = value

    async def get(self, key):
        return self.values.get(key)


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(TEST_DATABASE_URL)
    # 테이블 생성
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    # 테스트 후 테이블 삭제 및 연결 종료
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def redis():
    return RecordingRedis()


@pytest.fixture
def data_client(session_factory, redis):
    return SqlDataClient(session_factory=session_factory, redis=redis, token_store=redis)


@pytest.mark.asyncio
async def test_insert_applies_defaults_and_publishes(data_client, redis):
    room = await data_client.insert(Table.ROOMS, {"name": "Design Sync", "created_by": "user-a"})

    assert len(room["id"]) == 36
    assert len(room["room_code"]) == 6
    assert "password_hash" not in redis.published[0][1]
    assert room["is_active"] is True
    assert room["max_participants"] == 50
    assert room["created_at"] is not None
    assert redis.published[0][0] == "changes:chat_rooms"


@pytest.mark.asyncio
async def test_select_filters_orders_and_limits(data_client):
    room = await data_client.insert(Table.ROOMS, {"name": "Design Sync", "created_by": "user-a", "room_code": "AB12"})
    for index in range(3):
        await data_client.insert(Table.MESSAGES, {"room_id": room["id"], "user_id": "user-a", "content": f"m{index}"})

    rows = await data_client.select(Table.ROOMS, {"room_code": "AB12", "is_active": True}, limit=1)
    assert rows[0]["id"] == room["id"]

    messages = await data_client.select(Table.MESSAGES, {"room_id": room["id"]}, order=Order.desc("created_at"), limit=2)
    assert len(messages) == 2
    assert await data_client.count(Table.MESSAGES, {"room_id": room["id"]}) == 3


# 같은 (room_id, user_id)로 두 번 upsert 해도 행은 하나
@pytest.mark.asyncio
async def test_upsert_is_idempotent(data_client, redis):
    room = await data_client.insert(Table.ROOMS, {"name": "Design Sync", "created_by": "user-a"})
    row = {"room_id": room["id"], "user_id": "user-b", "is_active": True}

    await data_client.upsert(Table.PARTICIPANTS, row, on_conflict=("room_id", "user_id"))
    await data_client.update(Table.PARTICIPANTS, {"room_id": room["id"]}, {"is_active": False})
    saved = await data_client.upsert(Table.PARTICIPANTS, row, on_conflict=("room_id", "user_id"))

    assert saved["is_active"] is True
    assert await data_client.count(Table.PARTICIPANTS, {"room_id": room["id"]}) == 1
    kinds = [data for channel, data in redis.published if channel == "changes:room_participants"]
    assert '"INSERT"' in kinds[0] and '"UPDATE"' in kinds[-1]


@pytest.mark.asyncio
async def test_capacity_constraint_is_enforced(data_client):
    with pytest.raises(BackendError):
        await data_client.insert(Table.ROOMS, {"name": "Solo", "created_by": "user-a", "max_participants": 1})


@pytest.mark.asyncio
async def test_update_requires_filters(data_client):
    with pytest.raises(ValidationError):
        await data_client.update(Table.ROOMS, {}, {"is_active": False})


@pytest.mark.asyncio
async def test_unknown_table(data_client):
    with pytest.raises(BackendError):
        await data_client.select("no_such_table")


@pytest.mark.asyncio
async def test_password_sign_in_and_sign_out(data_client):
    await data_client.insert(
        Table.AUTH_USERS,
        {"email": "admin@example.com", "password_hash": hash_password("pw"), "provider": "email"},
    )

    with pytest.raises(UnauthenticatedError):
        await data_client.sign_in_with_password("admin@example.com", "wrong")

    session = await data_client.sign_in_with_password("admin@example.com", "pw")
    assert (await data_client.get_session()).user_id == session.user_id

    # 로그아웃한 토큰은 다시 사용할 수 없음
    revoked = SqlDataClient(
        session_factory=data_client.session_factory,
        redis=data_client.change_feed.redis,
        token_store=data_client.token_store,
        access_token=session.access_token,
    )
    await data_client.sign_out()
    assert await data_client.get_session() is None
    assert await revoked.get_session() is None
