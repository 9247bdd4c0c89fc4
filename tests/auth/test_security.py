import re
from datetime import timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from roomchat.app.common.exceptions import BackendError, UnauthenticatedError
from roomchat.app.common.utils.codes import generate_room_code, normalize_room_code
from roomchat.app.common.utils.redis_utils import is_jti_revoked, mark_jti_revoked
from roomchat.app.common.utils.security import create_access_token, seconds_until_expiry, verify_access_token
from roomchat.app.common.utils.verify_password import hash_password, verify_password


class FakeRedis:
    def __init__(self, broken: bool = False):
        self.values = {}
        self.broken = broken

    async def set(self, key, value, ex=None):
        if self.broken:
            raise RedisConnectionError("redis down")
        self.values[key] = (value, ex)

    async def get(self, key):
        if self.broken:
            raise RedisConnectionError("redis down")
        entry = self.values.get(key)
        return entry[0] if entry else None


def test_access_token_round_trip():
    token = create_access_token({"sub": "user-a", "email": "a@example.com"})

    payload = verify_access_token(token)

    assert payload["sub"] == "user-a"
    assert payload["jti"]
    assert 0 < seconds_until_expiry(payload) <= 45 * 60


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "user-a"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(UnauthenticatedError):
        verify_access_token(token)


def test_token_without_subject_is_rejected():
    with pytest.raises(UnauthenticatedError):
        verify_access_token(create_access_token({"email": "a@example.com"}))
    with pytest.raises(UnauthenticatedError):
        verify_access_token("not-a-jwt")


# 비밀번호는 argon2 해시로만 저장
def test_password_hashing():
    hashed = hash_password("secret")

    assert hashed != "secret"
    assert verify_password("secret", hashed) is True
    assert verify_password("wrong", hashed) is False
    assert verify_password("secret", None) is False
    assert verify_password("secret", "garbage") is False


def test_room_code_format():
    codes = {generate_room_code() for _ in range(50)}

    assert all(re.fullmatch(r"[A-Z0-9]{6}", code) for code in codes)
    assert len(codes) > 1
    assert normalize_room_code("  ab12 ") == "AB12"


@pytest.mark.asyncio
async def test_revoked_jti_is_remembered():
    redis = FakeRedis()

    assert await is_jti_revoked("abc", client=redis) is False
    await mark_jti_revoked("abc", 0, client=redis)

    assert await is_jti_revoked("abc", client=redis) is True
    assert redis.values["jti:abc"] == ("revoked", 1)
    assert await is_jti_revoked(None, client=redis) is False


@pytest.mark.asyncio
async def test_redis_failure_becomes_backend_error():
    redis = FakeRedis(broken=True)

    with pytest.raises(BackendError):
        await mark_jti_revoked("abc", 60, client=redis)
    with pytest.raises(BackendError):
        await is_jti_revoked("abc", client=redis)
