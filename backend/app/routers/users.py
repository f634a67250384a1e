"""
Users router for registration, login, logout and token refresh.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status

from app.config import get_settings
from app.core.rate_limit import rate_limiter
from app.database.connections import get_database
from app.dependencies.auth import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    CurrentUser,
)
from app.models.user import User
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    RefreshTokenRequest,
    TokenPair,
)
from app.schemas.response import ApiResponse
from app.schemas.user import UserResponse
from app.services.auth_service import AuthService
from app.services.media_service import get_media_uploader, remove_local_file, save_upload

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


async def get_auth_service() -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService(await get_database(), await get_media_uploader())


def to_user_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user.public_dict())


def set_auth_cookies(response: Response, tokens: TokenPair) -> None:
    """Set both tokens as HttpOnly cookies."""
    secure = get_settings().cookie_secure
    response.set_cookie(ACCESS_TOKEN_COOKIE, tokens.access_token, httponly=True, secure=secure)
    response.set_cookie(REFRESH_TOKEN_COOKIE, tokens.refresh_token, httponly=True, secure=secure)


def clear_auth_cookies(response: Response) -> None:
    secure = get_settings().cookie_secure
    response.delete_cookie(ACCESS_TOKEN_COOKIE, httponly=True, secure=secure)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, httponly=True, secure=secure)


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    dependencies=[Depends(rate_limiter("/register", "register_rate_limit_attempts"))],
)
async def register(
    full_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user account (multipart form).

    - **full_name**, **email**, **username**, **password**: required, non-blank
    - **avatar**: required image file
    - **cover_image**: optional image file
    """
    avatar_path = cover_image_path = None
    try:
        avatar_path = await save_upload(avatar)
        cover_image_path = await save_upload(cover_image)

        user = await auth_service.register_user(
            full_name=full_name,
            email=email,
            username=username,
            password=password,
            avatar_path=avatar_path,
            cover_image_path=cover_image_path,
        )
    finally:
        remove_local_file(avatar_path)
        remove_local_file(cover_image_path)
    return ApiResponse[UserResponse](
        status_code=status.HTTP_201_CREATED,
        data=to_user_response(user),
        message="User registered successfully",
    )


@router.post(
    "/login",
    response_model=ApiResponse[LoginData],
    summary="Login and get tokens",
    dependencies=[Depends(rate_limiter("/login", "login_rate_limit_attempts"))],
)
async def login(
    body: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with username or email and password.

    Tokens are returned in the body and also set as HttpOnly cookies.
    """
    user, tokens = await auth_service.login(body)
    set_auth_cookies(response, tokens)
    return ApiResponse[LoginData](
        status_code=status.HTTP_200_OK,
        data=LoginData(
            user=to_user_response(user),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        ),
        message="User logged in successfully",
    )


@router.post(
    "/logout",
    response_model=ApiResponse[dict],
    summary="Logout",
)
async def logout(
    current_user: CurrentUser,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Invalidate the stored refresh token and clear auth cookies."""
    await auth_service.logout(current_user.id)
    clear_auth_cookies(response)
    return ApiResponse[dict](status_code=status.HTTP_200_OK, data={}, message="User logged out")


@router.post(
    "/refresh-token",
    response_model=ApiResponse[TokenPair],
    summary="Refresh access token",
)
async def refresh_access_token(
    request: Request,
    response: Response,
    body: Optional[RefreshTokenRequest] = None,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Exchange a refresh token for a new token pair.

    The refresh token is read from the `refresh_token` cookie, or from the
    JSON body when the cookie is absent. The presented token is retired.
    """
    incoming = request.cookies.get(REFRESH_TOKEN_COOKIE) or (body.refresh_token if body else None)

    tokens = await auth_service.refresh_access_token(incoming)
    set_auth_cookies(response, tokens)
    return ApiResponse[TokenPair](
        status_code=status.HTTP_200_OK,
        data=tokens,
        message="Access token refreshed",
    )


@router.get(
    "/current-user",
    response_model=ApiResponse[UserResponse],
    summary="Get current user info",
)
async def get_current_user(current_user: CurrentUser):
    """Get information about the currently authenticated user."""
    return ApiResponse[UserResponse](
        status_code=status.HTTP_200_OK,
        data=to_user_response(current_user),
        message="Current user fetched successfully",
    )


@router.post(
    "/change-password",
    response_model=ApiResponse[dict],
    summary="Change password",
)
async def change_password(
    body: ChangePasswordRequest,
    current_user: CurrentUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Change the password of the authenticated user."""
    await auth_service.change_password(current_user.id, body.old_password, body.new_password)
    return ApiResponse[dict](
        status_code=status.HTTP_200_OK,
        data={},
        message="Password changed successfully",
    )
