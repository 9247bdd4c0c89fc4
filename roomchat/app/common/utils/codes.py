import secrets
import string
import uuid

from roomchat.app.common.utils.consts import ROOM_CODE_LENGTH

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_uuid() -> str:
    return str(uuid.uuid4())


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


def normalize_room_code(code: str) -> str:
    # 참여 코드는 항상 대문자로 저장된다
    return code.strip().upper()
