# alembic과 SqlDataClient가 테이블 메타데이터를 인식하도록 모든 엔티티 import
from roomchat.app.v1.admin.entity.location_tracking import LocationTracking
from roomchat.app.v1.admin.entity.verification_audio import VerificationAudio
from roomchat.app.v1.admin.entity.verification_image import VerificationImage
from roomchat.app.v1.room.entity.message import Message
from roomchat.app.v1.room.entity.participant import RoomParticipant
from roomchat.app.v1.room.entity.room import Room
from roomchat.app.v1.user.entity.admin_allowlist import AdminAllowlist
from roomchat.app.v1.user.entity.auth_user import AuthUser
from roomchat.app.v1.user.entity.profile import Profile
from roomchat.app.v1.user.entity.user_role import UserRoleRecord

from sqlalchemy.orm import configure_mappers

# 모든 모델이 import된 후에 configure_mappers 호출
configure_mappers()

__all__ = [
    "AdminAllowlist",
    "AuthUser",
    "LocationTracking",
    "Message",
    "Profile",
    "Room",
    "RoomParticipant",
    "UserRoleRecord",
    "VerificationAudio",
    "VerificationImage",
]
