"""
API Dependencies
Reusable FastAPI dependencies for endpoint protection.
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import ExpiredToken, InvalidToken, Unauthenticated
from app.models.user import User
from app.services.auth_service import TokenIssuer

logger = logging.getLogger(__name__)

NOT_LOGGED_IN = "You are not logged in. Please log in to get access."


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Return the token from an `Authorization: Bearer <token>` header value.
    Returns None when the header is absent or not in that exact form.
    """
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None
    return parts[1]


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> User:
    """
    Dependency that enforces authentication.
    Verifies the bearer token and loads the user it was issued for.
    Invalid, expired and orphaned tokens all get the same response.
    """
    authorization = request.headers.get("Authorization")
    if not authorization:
        raise Unauthenticated(NOT_LOGGED_IN)

    token = extract_bearer_token(authorization)
    if token is None:
        logger.info("Rejected request with malformed Authorization header")
        raise Unauthenticated()

    try:
        user_id = tokens.verify(token)
    except ExpiredToken:
        logger.info("Rejected expired token")
        raise Unauthenticated()
    except InvalidToken as e:
        logger.info(f"Rejected invalid token: {e}")
        raise Unauthenticated()

    user = await db.get(User, user_id)
    if user is None:
        logger.info(f"Rejected token for missing user {user_id}")
        raise Unauthenticated()

    request.state.user = user
    return user
