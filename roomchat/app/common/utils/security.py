import logging
import os
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from dotenv import load_dotenv

from roomchat.app.common.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)

load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY", "default_secret_key")
ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(minutes=int(os.getenv("ACCESS_TOKEN_MINUTES", "45")))


def create_access_token(data: dict, expires_delta: timedelta = ACCESS_TOKEN_TTL) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": int(expire.timestamp()), "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Access token has expired.")
        raise UnauthenticatedError("Access token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid access token: {e}")
        raise UnauthenticatedError("Invalid access token")

    if not payload.get("sub"):
        logger.warning(f"Token payload without subject: {payload}")
        raise UnauthenticatedError("Invalid access token")
    return payload


def seconds_until_expiry(payload: dict) -> int:
    exp = payload.get("exp")
    if not exp:
        return 0
    return max(int(exp - datetime.now(timezone.utc).timestamp()), 0)
