from datetime import datetime

from pydantic import BaseModel, ConfigDict

from roomchat.app.common.utils.consts import ANONYMOUS_NAME


class AuthorProfile(BaseModel):
    display_name: str = ANONYMOUS_NAME
    avatar_url: str | None = None

    @classmethod
    def anonymous(cls) -> "AuthorProfile":
        return cls()


class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str | None = None
    avatar_url: str | None = None
    is_verified: bool = False
    created_at: datetime | None = None


class AdminUserResponse(BaseModel):
    id: str
    email: str
    created_at: datetime | None = None
    profile: ProfileRead

    @classmethod
    def from_profile(cls, profile: ProfileRead) -> "AdminUserResponse":
        return cls(
            id=profile.user_id,
            # auth 이메일에 접근할 수 없으므로 자리표시자 사용
            email=f"user_{profile.user_id[:8]}@example.com",
            created_at=profile.created_at,
            profile=profile,
        )
