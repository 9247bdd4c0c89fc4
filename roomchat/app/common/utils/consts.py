from enum import Enum


class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class AppRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class SocialProvider(str, Enum):
    GOOGLE = "google"


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class SessionState(str, Enum):
    INITIALIZING = "initializing"
    ACTIVE = "active"
    CLOSED = "closed"


class Table:
    ROOMS = "chat_rooms"
    PARTICIPANTS = "room_participants"
    MESSAGES = "messages"
    PROFILES = "profiles"
    USER_ROLES = "user_roles"
    ADMIN_ALLOWLIST = "admin_allowlist"
    AUTH_USERS = "auth_users"
    VERIFICATION_IMAGES = "verification_images"
    VERIFICATION_AUDIO = "verification_audio"
    LOCATION_TRACKING = "location_tracking"


class Bucket:
    VERIFICATION_IMAGES = "verification-images"
    VERIFICATION_AUDIO = "verification-audio"


ANONYMOUS_NAME = "Anonymous"

DEFAULT_MAX_PARTICIPANTS = 50
MIN_PARTICIPANTS = 2
ROOM_CODE_LENGTH = 6

MESSAGE_HISTORY_LIMIT = 100
IMAGE_CAPTURE_LIMIT = 20
AUDIO_CAPTURE_LIMIT = 20
LOCATION_CAPTURE_LIMIT = 50

# 변경 이벤트로 내보내지 않는 컬럼
PRIVATE_COLUMNS = {
    Table.ROOMS: frozenset({"password_hash"}),
    Table.AUTH_USERS: frozenset({"password_hash"}),
}
