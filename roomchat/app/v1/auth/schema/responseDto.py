from pydantic import BaseModel


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str


class OAuthUrlResponse(BaseModel):
    url: str


class CurrentUserResponse(BaseModel):
    user_id: str
    email: str | None = None
    is_admin: bool = False
