"""
Authentication Service
Handles password hashing, JWT creation, and validation.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from app.config import Settings
from app.errors import ExpiredToken, InvalidToken

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check if plain password matches hashed version."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unknown or corrupt hash format
        return False


def dummy_verify() -> None:
    """Spend the time of one password check when there is no hash to check against."""
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    """Generate bcrypt hash of password."""
    return pwd_context.hash(password)


class TokenIssuer:
    """
    Issues and verifies signed bearer tokens.

    Holds its own secret so several issuers (e.g. one per test app) can
    live in the same process.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", lifetime: Optional[timedelta] = None):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime or timedelta(days=90)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            lifetime=timedelta(minutes=settings.access_token_expire_minutes),
        )

    def issue(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> str:
        """Create a new JWT for the given user."""
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> uuid.UUID:
        """
        Decode a token and return the user id it was issued for.

        Raises ExpiredToken once `exp` has passed and InvalidToken for any
        signature or format problem.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken("Token has expired") from e
        except jwt.PyJWTError as e:
            raise InvalidToken(str(e)) from e

        try:
            return uuid.UUID(payload["sub"])
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidToken("Malformed subject claim") from e
