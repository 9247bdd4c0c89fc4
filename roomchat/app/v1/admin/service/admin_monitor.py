import asyncio
import logging
from typing import Awaitable, TypeVar

from roomchat.app.common.data.client import DataClient, Session
from roomchat.app.common.exceptions import PermissionDeniedError, UnauthenticatedError
from roomchat.app.common.utils.consts import (
    AUDIO_CAPTURE_LIMIT,
    IMAGE_CAPTURE_LIMIT,
    LOCATION_CAPTURE_LIMIT,
    AppRole,
    Bucket,
)
from roomchat.app.v1.admin.repository.capture_repository import CaptureRepository
from roomchat.app.v1.admin.schema.capture_response import CaptureDataResponse
from roomchat.app.v1.user.repository.user_repository import UserRepository
from roomchat.app.v1.user.schema.profile import AdminUserResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AdminMonitor:

    def __init__(self, client: DataClient):
        self.client = client
        self.user_repository = UserRepository(client)
        self.capture_repository = CaptureRepository(client)

    async def ensure_admin(self) -> Session:
        session = await self.client.get_session()
        if session is None:
            raise UnauthenticatedError()

        role = await self.user_repository.get_role(session.user_id)
        if role != AppRole.ADMIN:
            logger.warning(f"User {session.user_id} attempted admin access")
            raise PermissionDeniedError("You don't have admin privileges")
        return session

    async def list_users(self) -> list[AdminUserResponse]:
        await self.ensure_admin()
        profiles = await self.user_repository.list_profiles()
        return [AdminUserResponse.from_profile(profile) for profile in profiles]

    async def load_capture_data(self, user_id: str) -> CaptureDataResponse:
        await self.ensure_admin()

        # 카테고리별로 독립적으로 조회 (하나가 실패해도 나머지는 반환)
        images, audio, locations = await asyncio.gather(
            self._isolated("images", user_id, self.capture_repository.recent_images(user_id, IMAGE_CAPTURE_LIMIT)),
            self._isolated("audio", user_id, self.capture_repository.recent_audio(user_id, AUDIO_CAPTURE_LIMIT)),
            self._isolated("locations", user_id, self.capture_repository.recent_locations(user_id, LOCATION_CAPTURE_LIMIT)),
        )
        return CaptureDataResponse(images=images, audio=audio, locations=locations)

    def image_url(self, path: str) -> str:
        return self.client.get_public_url(Bucket.VERIFICATION_IMAGES, path)

    def audio_url(self, path: str) -> str:
        return self.client.get_public_url(Bucket.VERIFICATION_AUDIO, path)

    @staticmethod
    async def _isolated(category: str, user_id: str, load: Awaitable[list[T]]) -> list[T]:
        try:
            return await load
        except Exception as e:
            logger.error(f"Failed to load {category} captures for user {user_id}: {e}")
            return []
