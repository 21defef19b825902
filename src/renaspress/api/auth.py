"""Authentication API endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from renaspress.database import get_db
from renaspress.models.user import User
from renaspress.schemas.user import AuthResponse, UserDetailResponse, UserLogin, UserRegister, UserResponse
from renaspress.utils.security import (
    CurrentUser,
    create_user_token,
    hash_password,
    verify_password,
)

router = APIRouter(prefix="/auth", tags=["auth"])

DUPLICATE_EMAIL = "An account with this email already exists"


async def email_taken(db: AsyncSession, email: str, exclude_id: int | None = None) -> bool:
    """Whether another account already uses ``email`` (already lower-cased)."""
    query = select(User.id).where(User.email == email)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    result = await db.execute(query)
    return result.scalar_one_or_none() is not None


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Register a new account.

    Every self-service signup is an author; only admins can create accounts
    with other roles.

    Raises:
        HTTPException 400: If the email is already registered
    """
    if await email_taken(db, user_data.email):
        raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL)

    now = datetime.now(UTC)
    new_user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        role="author",
        provider="credentials",
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(new_user)
    await db.flush()
    await db.refresh(new_user)

    return AuthResponse(
        user=UserResponse.model_validate(new_user),
        token=create_user_token(new_user),
        message="Account created successfully!",
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Authenticate with email and password and return a JWT.

    Raises:
        HTTPException 401: If credentials are invalid
        HTTPException 403: If user account is inactive
    """
    result = await db.execute(select(User).where(User.email == credentials.email.strip().lower()))
    user = result.scalar_one_or_none()

    # Social-login accounts have no password and cannot log in here
    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is inactive")

    return AuthResponse(user=UserResponse.model_validate(user), token=create_user_token(user))


@router.get("/me", response_model=UserDetailResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserDetailResponse:
    """Get the current authenticated user's profile."""
    return UserDetailResponse(user=UserResponse.model_validate(current_user))
