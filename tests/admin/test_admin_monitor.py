import pytest

from roomchat.app.common.exceptions import PermissionDeniedError, UnauthenticatedError
from roomchat.app.common.utils.consts import Table
from roomchat.app.v1.admin.service.admin_monitor import AdminMonitor


@pytest.fixture
def admin(backend):
    backend.seed(Table.USER_ROLES, user_id="admin-1", role="admin")
    return AdminMonitor(backend.client_for("admin-1", "admin@example.com"))


@pytest.mark.asyncio
async def test_non_admin_is_rejected(backend):
    backend.seed(Table.USER_ROLES, user_id="user-a", role="user")
    monitor = AdminMonitor(backend.client_for("user-a"))

    with pytest.raises(PermissionDeniedError):
        await monitor.list_users()
    with pytest.raises(PermissionDeniedError):
        await monitor.load_capture_data("user-b")


@pytest.mark.asyncio
async def test_user_without_role_is_rejected(backend):
    with pytest.raises(PermissionDeniedError):
        await AdminMonitor(backend.client_for("user-a")).ensure_admin()


@pytest.mark.asyncio
async def test_admin_requires_session(backend):
    with pytest.raises(UnauthenticatedError):
        await AdminMonitor(backend.client_for()).list_users()


# 최근 가입자 순, 이메일은 자리표시자
@pytest.mark.asyncio
async def test_list_users_newest_first(backend, admin):
    backend.seed(Table.PROFILES, user_id="0123456789abcdef", display_name="Old")
    backend.seed(Table.PROFILES, user_id="fedcba9876543210", display_name="New")

    users = await admin.list_users()

    assert [user.profile.display_name for user in users] == ["New", "Old"]
    assert users[0].id == "fedcba9876543210"
    assert users[0].email == "user_fedcba98@example.com"
    assert users[1].email == "user_01234567@example.com"


@pytest.mark.asyncio
async def test_load_capture_data_counts(backend, admin):
    for index in range(5):
        backend.seed(Table.VERIFICATION_AUDIO, user_id="user-b", audio_url=f"b/{index}.webm", duration_seconds=3.0)
    for index in range(3):
        backend.seed(Table.LOCATION_TRACKING, user_id="user-b", latitude=37.5, longitude=127.0 + index)
    backend.seed(Table.VERIFICATION_IMAGES, user_id="someone-else", image_url="x.png")

    captures = await admin.load_capture_data("user-b")

    assert captures.images == []
    assert len(captures.audio) == 5
    assert len(captures.locations) == 3
    # 최신순
    assert captures.locations[0].longitude == 129.0


@pytest.mark.asyncio
async def test_capture_limits(backend, admin):
    for index in range(25):
        backend.seed(Table.VERIFICATION_IMAGES, user_id="user-b", image_url=f"b/{index}.png")

    captures = await admin.load_capture_data("user-b")

    assert len(captures.images) == 20
    assert captures.images[0].image_url == "b/24.png"


# 한 카테고리가 실패해도 나머지는 반환
@pytest.mark.asyncio
async def test_failed_category_is_isolated(backend, admin):
    backend.seed(Table.VERIFICATION_IMAGES, user_id="user-b", image_url="b/1.png")
    backend.seed(Table.LOCATION_TRACKING, user_id="user-b", latitude=1.0, longitude=2.0)
    backend.fail("select", Table.VERIFICATION_AUDIO)

    captures = await admin.load_capture_data("user-b")

    assert len(captures.images) == 1
    assert captures.audio == []
    assert len(captures.locations) == 1


def test_public_urls(admin):
    assert admin.image_url("b/1.png") == "https://storage.example.com/verification-images/b/1.png"
    assert admin.audio_url("b/1.webm") == "https://storage.example.com/verification-audio/b/1.webm"
