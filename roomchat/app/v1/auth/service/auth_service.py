import logging

from roomchat.app.common.data.client import DataClient, Session
from roomchat.app.common.exceptions import PermissionDeniedError, UnauthenticatedError, ValidationError
from roomchat.app.common.utils.consts import AppRole
from roomchat.app.v1.auth.schema.responseDto import CurrentUserResponse
from roomchat.app.v1.user.repository.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self, client: DataClient):
        self.client = client
        self.user_repository = UserRepository(client)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("Email and password are required")

        # 비밀번호 로그인은 관리자 허용 목록에 있는 계정만 가능
        if not await self.user_repository.is_allowlisted_admin(email):
            logger.warning(f"Password sign-in rejected for non-allowlisted email {email}")
            raise PermissionDeniedError("Unauthorized admin access")

        return await self.client.sign_in_with_password(email, password)

    async def sign_in(self, provider: str) -> str:
        return await self.client.sign_in(provider)

    async def sign_out(self) -> None:
        await self.client.sign_out()

    async def current_user(self) -> Session:
        session = await self.client.get_session()
        if session is None:
            raise UnauthenticatedError()
        return session

    async def is_admin(self, user_id: str) -> bool:
        return await self.user_repository.get_role(user_id) == AppRole.ADMIN

    async def me(self) -> CurrentUserResponse:
        session = await self.current_user()
        return CurrentUserResponse(user_id=session.user_id, email=session.email, is_admin=await self.is_admin(session.user_id))
