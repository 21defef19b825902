"""Password hashing, JWT handling and the request authentication gate."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Annotated

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from renaspress.config import get_settings
from renaspress.database import get_db

if TYPE_CHECKING:
    from renaspress.models.user import User

# Bearer token extraction; missing headers are reported by authenticate() itself
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


class AuthenticationError(HTTPException):
    """401 raised by the authentication gate."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a plain text password against a hashed password.

    Accounts created through social login have no password hash and never match.
    """
    if not hashed_password:
        return False
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token.

    Args:
        data: Payload data to encode in the token. The "sub" (subject) claim
              must be a string (e.g., {"sub": str(user_id)}).
        expires_delta: Optional custom expiration time. Defaults to settings value.

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_access_token_expire_minutes)

    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_user_token(user: "User", expires_delta: timedelta | None = None) -> str:
    """Issue a bearer token carrying the user's id, email and role."""
    return create_access_token(
        {"sub": str(user.id), "email": user.email, "role": user.role},
        expires_delta=expires_delta,
    )


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT access token.

    Returns:
        Decoded token payload if valid, None if invalid or expired
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None


async def authenticate(token: str | None, db: AsyncSession) -> "User":
    """Resolve a bearer token to an active user.

    Raises:
        AuthenticationError: "No token provided", "Invalid token" or
            "User not found or inactive".
    """
    # Import here to avoid circular import
    from renaspress.models.user import User

    if not token:
        raise AuthenticationError("No token provided")

    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Invalid token")

    try:
        user_id = int(payload.get("sub", ""))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token") from None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    return user


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    db: AsyncSession = Depends(get_db),
):
    """FastAPI dependency returning the authenticated, active user."""
    return await authenticate(token, db)


async def get_optional_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    db: AsyncSession = Depends(get_db),
):
    """FastAPI dependency returning the authenticated user, or None.

    Any authentication failure is treated as an anonymous request.
    """
    if not token:
        return None
    try:
        return await authenticate(token, db)
    except AuthenticationError:
        return None


# Type aliases for use in route dependencies
CurrentUser = Annotated["User", Depends(get_current_user)]
OptionalUser = Annotated["User | None", Depends(get_optional_user)]
