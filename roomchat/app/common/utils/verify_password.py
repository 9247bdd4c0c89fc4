from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# Argon2 -> 비밀번호 해쉬화
ph = PasswordHasher()


def hash_password(password: str) -> str:
    try:
        return ph.hash(password)
    except Exception as e:
        raise ValueError(f"Failed to hash password: {e}")


def verify_password(password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return ph.verify(hashed_password, password)
    except (VerificationError, InvalidHashError):
        return False
