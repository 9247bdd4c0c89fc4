import asyncio

import pytest

from roomchat.app.common.exceptions import BackendError, NotFoundError, UnauthenticatedError, ValidationError
from roomchat.app.common.utils.consts import ANONYMOUS_NAME, ChangeType, SessionState, Table
from roomchat.app.common.data.client import ChangeEvent
from roomchat.app.v1.room.service.room_session import RoomSession


@pytest.fixture
def room(backend):
    return backend.seed(Table.ROOMS, name="Design Sync", room_code="AB12", created_by="owner", max_participants=10)


async def open_session(backend, user_id="user-a", code="AB12", **kwargs) -> RoomSession:
    return await RoomSession(backend.client_for(user_id), **kwargs).open(code)


@pytest.mark.asyncio
async def test_open_requires_session(backend, room):
    session = RoomSession(backend.client_for())

    with pytest.raises(UnauthenticatedError):
        await session.open("AB12")

    assert session.state == SessionState.CLOSED
    assert backend.subscriptions == []
    assert backend.rows(Table.PARTICIPANTS) == []


@pytest.mark.asyncio
async def test_open_unknown_room(backend, room):
    session = RoomSession(backend.client_for("user-a"))

    with pytest.raises(NotFoundError):
        await session.open("ZZZZ99")

    assert session.state == SessionState.CLOSED
    assert backend.subscriptions == []


# 기존 메시지는 오래된 순, 프로필 없는 작성자는 Anonymous
@pytest.mark.asyncio
async def test_open_loads_transcript_and_roster(backend, room):
    backend.seed(Table.PROFILES, user_id="user-b", display_name="Bora", avatar_url="https://img/b.png")
    backend.seed(Table.MESSAGES, room_id=room["id"], user_id="user-b", content="first")
    backend.seed(Table.MESSAGES, room_id=room["id"], user_id="ghost", content="second")
    backend.seed(Table.MESSAGES, room_id="other-room", user_id="user-b", content="elsewhere")
    backend.seed(Table.PARTICIPANTS, room_id=room["id"], user_id="user-b")

    session = await open_session(backend, "user-a", " ab12 ")

    assert session.state == SessionState.ACTIVE
    assert [message.content for message in session.transcript] == ["first", "second"]
    assert session.transcript[0].profile.display_name == "Bora"
    assert session.transcript[1].profile.display_name == ANONYMOUS_NAME
    assert [entry.user_id for entry in session.roster] == ["user-b", "user-a"]
    assert len(backend.subscriptions) == 2
    await session.close()


@pytest.mark.asyncio
async def test_transcript_keeps_most_recent_messages(backend, room):
    for index in range(105):
        backend.seed(Table.MESSAGES, room_id=room["id"], user_id="user-b", content=f"m{index}")

    session = await open_session(backend)

    assert len(session.transcript) == 100
    assert session.transcript[0].content == "m5"
    assert session.transcript[-1].content == "m104"
    await session.close()


@pytest.mark.asyncio
async def test_open_twice_keeps_single_membership(backend, room):
    first = await open_session(backend)
    await first.close()
    second = await open_session(backend)

    memberships = [row for row in backend.rows(Table.PARTICIPANTS) if row["user_id"] == "user-a"]
    assert len(memberships) == 1
    assert memberships[0]["is_active"] is True
    await second.close()


@pytest.mark.asyncio
async def test_blank_message_is_ignored(backend, room):
    session = await open_session(backend)

    await session.send_message("   ")
    await session.send_message("")

    assert backend.rows(Table.MESSAGES) == []
    assert session.transcript == []
    await session.close()


# 보낸 메시지는 구독 이벤트를 통해서만 transcript 에 추가됨
@pytest.mark.asyncio
async def test_sent_message_arrives_through_subscription(backend, room):
    backend.seed(Table.PROFILES, user_id="user-a", display_name="Ari")
    session = await open_session(backend)

    await session.send_message("  hello  ")

    stored = backend.rows(Table.MESSAGES)
    assert [row["content"] for row in stored] == ["hello"]
    assert [message.content for message in session.transcript] == ["hello"]
    assert session.transcript[0].profile.display_name == "Ari"

    await session.close()
    events = [event async for event in session.events()]
    assert [event.kind for event in events] == ["message"]
    assert events[0].message.id == stored[0]["id"]


@pytest.mark.asyncio
async def test_other_users_messages_are_delivered(backend, room):
    watcher = await open_session(backend, "user-a")
    sender = await open_session(backend, "user-b")

    await sender.send_message("hi from b")

    assert [message.content for message in watcher.transcript] == ["hi from b"]
    await watcher.close()
    await sender.close()


@pytest.mark.asyncio
async def test_roster_reloads_when_someone_joins(backend, room):
    watcher = await open_session(backend, "user-a")
    assert [entry.user_id for entry in watcher.roster] == ["user-a"]

    other = await open_session(backend, "user-b")

    assert [entry.user_id for entry in watcher.roster] == ["user-a", "user-b"]
    await watcher.close()
    kinds = [event.kind async for event in watcher.events()]
    assert "roster" in kinds
    await other.close()


@pytest.mark.asyncio
async def test_roster_drops_member_who_leaves(backend, room):
    watcher = await open_session(backend, "user-a")
    other = await open_session(backend, "user-b")
    await other.close()

    await other.room_repository.leave(room["id"], "user-b")

    assert [entry.user_id for entry in watcher.roster] == ["user-a"]
    await watcher.close()


@pytest.mark.asyncio
async def test_roster_reload_failure_keeps_previous_roster(backend, room):
    watcher = await open_session(backend, "user-a")
    before = list(watcher.roster)

    backend.fail("select", Table.PARTICIPANTS)
    await backend.dispatch(
        ChangeEvent(table=Table.PARTICIPANTS, type=ChangeType.UPDATE, new={"room_id": room["id"], "user_id": "user-b"})
    )

    assert watcher.roster == before
    assert watcher.state == SessionState.ACTIVE
    await watcher.close()


@pytest.mark.asyncio
async def test_close_releases_subscriptions_and_ignores_late_events(backend, room):
    session = await open_session(backend)

    await session.close()
    await session.close()

    assert backend.subscriptions == []
    assert session.state == SessionState.CLOSED
    await backend.client_for("user-b").insert(Table.MESSAGES, {"room_id": room["id"], "user_id": "user-b", "content": "late"})
    assert session.transcript == []
    with pytest.raises(ValidationError):
        await session.send_message("after close")


@pytest.mark.asyncio
async def test_context_manager_closes_session(backend, room):
    async with await open_session(backend) as session:
        assert session.is_active

    assert session.state == SessionState.CLOSED
    assert backend.subscriptions == []


@pytest.mark.asyncio
async def test_events_ends_after_close(backend, room):
    session = await open_session(backend)
    collected = asyncio.create_task(asyncio.wait_for(_collect(session), timeout=1))

    await session.send_message("one")
    await session.close()

    events = await collected
    assert [event.message.content for event in events] == ["one"]


async def _collect(session):
    return [event async for event in session.events()]


# 초기화 중 실패하면 BackendError, 세션은 닫힘
@pytest.mark.asyncio
async def test_history_failure_aborts_initialization(backend, room):
    backend.fail("select", Table.MESSAGES)
    session = RoomSession(backend.client_for("user-a"))

    with pytest.raises(BackendError):
        await session.open("AB12")

    assert session.state == SessionState.CLOSED
    assert backend.subscriptions == []


@pytest.mark.asyncio
async def test_partial_subscription_is_released_on_failure(backend, room):
    backend.fail("subscribe", Table.PARTICIPANTS)
    session = RoomSession(backend.client_for("user-a"))

    with pytest.raises(BackendError):
        await session.open("AB12")

    assert session.state == SessionState.CLOSED
    assert backend.subscriptions == []


@pytest.mark.asyncio
async def test_profile_failure_falls_back_to_anonymous(backend, room):
    backend.seed(Table.PROFILES, user_id="user-b", display_name="Bora")
    backend.seed(Table.MESSAGES, room_id=room["id"], user_id="user-b", content="hello")
    backend.fail("select", Table.PROFILES)

    session = await open_session(backend)

    assert session.transcript[0].profile.display_name == ANONYMOUS_NAME
    assert all(entry.profile.display_name == ANONYMOUS_NAME for entry in session.roster)
    await session.close()


@pytest.mark.asyncio
async def test_snapshot_reflects_state(backend, room):
    session = await open_session(backend)
    await session.send_message("snap")

    snapshot = session.snapshot()

    assert snapshot.kind == "snapshot"
    assert snapshot.room_code == "AB12"
    assert [message.content for message in snapshot.transcript] == ["snap"]
    assert [entry.user_id for entry in snapshot.roster] == ["user-a"]
    await session.close()
