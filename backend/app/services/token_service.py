"""
Token issuance: mints an access/refresh pair and persists the refresh token.
"""
import logging

from fastapi import status
from jose import JWTError
from pymongo.errors import PyMongoError

from app.core.exceptions import ApiError
from app.schemas.auth import TokenPair
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

TOKEN_GENERATION_FAILED = "Something went wrong while generating access and refresh tokens"


async def generate_access_and_refresh_tokens(store: UserStore, user_id: str) -> TokenPair:
    """
    Issue a new token pair for a user and store the refresh token on the record.

    Storing the new refresh token replaces the previous one, so any older
    refresh token stops being accepted.

    Raises:
        ApiError 500: If the user cannot be loaded or the token cannot be stored
    """
    try:
        user = await store.get_by_id(user_id)
        if user is None:
            raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, TOKEN_GENERATION_FAILED)

        access_token = user.generate_access_token()
        refresh_token = user.generate_refresh_token()

        if not await store.set_refresh_token(user_id, refresh_token):
            raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, TOKEN_GENERATION_FAILED)
    except (PyMongoError, JWTError) as e:
        logger.error("Token generation failed for user %s: %s", user_id, e)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, TOKEN_GENERATION_FAILED
        ) from e

    return TokenPair(access_token=access_token, refresh_token=refresh_token)
