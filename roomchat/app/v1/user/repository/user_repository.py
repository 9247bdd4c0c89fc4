import logging

from roomchat.app.common.data.client import DataClient, Order
from roomchat.app.common.utils.consts import AppRole, Table
from roomchat.app.v1.user.schema.profile import AuthorProfile, ProfileRead

logger = logging.getLogger(__name__)


class UserRepository:

    def __init__(self, client: DataClient):
        self.client = client

    async def get_profile(self, user_id: str) -> ProfileRead | None:
        rows = await self.client.select(Table.PROFILES, {"user_id": user_id}, limit=1)
        return ProfileRead.model_validate(rows[0]) if rows else None

    async def get_author(self, user_id: str) -> AuthorProfile:
        """표시 이름과 아바타를 조회합니다. 프로필이 없거나 조회에 실패하면 Anonymous."""
        try:
            profile = await self.get_profile(user_id)
        except Exception as e:
            logger.error(f"Profile lookup failed for user {user_id}: {e}")
            return AuthorProfile.anonymous()

        if profile is None or not profile.display_name:
            return AuthorProfile(avatar_url=profile.avatar_url if profile else None)
        return AuthorProfile(display_name=profile.display_name, avatar_url=profile.avatar_url)

    async def list_profiles(self) -> list[ProfileRead]:
        rows = await self.client.select(Table.PROFILES, order=Order.desc("created_at"))
        return [ProfileRead.model_validate(row) for row in rows]

    async def get_role(self, user_id: str) -> AppRole | None:
        rows = await self.client.select(Table.USER_ROLES, {"user_id": user_id}, limit=1)
        if not rows:
            return None
        try:
            return AppRole(rows[0]["role"])
        except ValueError:
            logger.warning(f"Unknown role {rows[0]['role']!r} for user {user_id}")
            return None

    async def is_allowlisted_admin(self, email: str) -> bool:
        rows = await self.client.select(Table.ADMIN_ALLOWLIST, {"email": email, "is_active": True}, limit=1)
        return bool(rows)
