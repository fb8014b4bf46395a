"""
Authentication Router
Endpoints for signup, login and token refresh.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import Conflict, ExpiredToken, InvalidCredentials, InvalidToken, Unauthenticated
from app.models.user import User, UserRole
from app.schemas.user import AuthResponse, RefreshRequest, TokenResponse, UserCreate, UserLogin
from app.services import auth_service
from app.services.auth_service import TokenIssuer
from app.api.dependencies import get_token_issuer
from app.api.rate_limit import AUTH_RATE_LIMIT, limiter, rate_limit_exempt

router = APIRouter()
logger = logging.getLogger(__name__)

DUPLICATE_USER = "User with this email or username already exists"


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_RATE_LIMIT, exempt_when=rate_limit_exempt)
async def signup(
    request: Request,
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    Register a new user and log them in.
    """
    result = await db.execute(
        select(User.id).where(or_(User.email == user_data.email, User.username == user_data.username))
    )
    if result.first() is not None:
        raise Conflict(DUPLICATE_USER)

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=auth_service.get_password_hash(user_data.password),
        role=UserRole.STANDARD,
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same username/email
        await db.rollback()
        raise Conflict(DUPLICATE_USER)
    await db.refresh(new_user)

    logger.info(f"Created user {new_user.id} ({new_user.username})")
    return {"token": tokens.issue(new_user.id), "user": new_user}


@router.post("/login", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT, exempt_when=rate_limit_exempt)
async def login(
    request: Request,
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    Authenticate with email and password.
    Unknown email and wrong password produce the same response.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if user is None:
        # Unknown emails cost the same bcrypt round as wrong passwords
        auth_service.dummy_verify()
        logger.info("Failed login attempt")
        raise InvalidCredentials()

    if not auth_service.verify_password(login_data.password, user.hashed_password):
        logger.info("Failed login attempt")
        raise InvalidCredentials()

    logger.info(f"User {user.id} logged in")
    return {"token": tokens.issue(user.id), "user": user}


@router.post("/refresh-token", response_model=TokenResponse)
async def refresh_token(
    refresh_data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    Exchange a still-valid token for one with a fresh expiry.
    The old token keeps working until it expires on its own.
    """
    try:
        user_id = tokens.verify(refresh_data.token)
    except (ExpiredToken, InvalidToken) as e:
        logger.info(f"Refresh rejected: {type(e).__name__}")
        raise Unauthenticated()

    user = await db.get(User, user_id)
    if user is None:
        logger.info(f"Refresh rejected for missing user {user_id}")
        raise Unauthenticated()

    return {"token": tokens.issue(user.id)}
