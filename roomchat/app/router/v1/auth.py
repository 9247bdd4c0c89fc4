import logging

from fastapi import APIRouter, Depends, status

from roomchat.app.common.factory import get_auth_service
from roomchat.app.v1.auth.schema.requestDto import LoginRequest
from roomchat.app.v1.auth.schema.responseDto import CurrentUserResponse, OAuthUrlResponse, TokenResponse
from roomchat.app.v1.auth.service.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


# Admin Login
@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    session = await auth_service.sign_in_with_password(request.email, request.password)
    return TokenResponse(access_token=session.access_token, user_id=session.user_id)


# Social Login URL
@router.get("/{provider}/url", response_model=OAuthUrlResponse)
async def oauth_url(provider: str, auth_service: AuthService = Depends(get_auth_service)):
    return OAuthUrlResponse(url=await auth_service.sign_in(provider))


# Logout
@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(auth_service: AuthService = Depends(get_auth_service)):
    await auth_service.sign_out()


# Current User
@router.get("/me", response_model=CurrentUserResponse)
async def me(auth_service: AuthService = Depends(get_auth_service)):
    return await auth_service.me()
