"""User administration API endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from renaspress.api.auth import DUPLICATE_EMAIL, email_taken
from renaspress.database import get_db
from renaspress.models.post import Post
from renaspress.models.user import User
from renaspress.schemas.common import MessageResponse, Pagination
from renaspress.schemas.user import (
    UserCreate,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from renaspress.utils.permissions import (
    can_access_user,
    can_change_user_privileges,
    can_delete_user,
    can_manage_users,
)
from renaspress.utils.security import CurrentUser, hash_password

router = APIRouter(prefix="/users", tags=["users"])


def require_admin(user: User) -> None:
    if not can_manage_users(user):
        raise HTTPException(status_code=403, detail="Admin access required")


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=UserListResponse)
async def list_users(
    current_user: CurrentUser,
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    search: str = Query("", description="Match against name or email"),
    role: str = Query("all", description="Filter by role"),
    db: AsyncSession = Depends(get_db),
) -> UserListResponse:
    """List accounts, newest first. Admin only."""
    require_admin(current_user)

    base_query = select(User)
    if search:
        pattern = f"%{search}%"
        base_query = base_query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    if role != "all":
        base_query = base_query.where(User.role == role)

    count_query = select(func.count()).select_from(base_query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    results = await db.execute(
        base_query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    users = results.scalars().all()

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("", response_model=UserDetailResponse, status_code=201)
async def create_user(
    current_user: CurrentUser,
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserDetailResponse:
    """Create an account with any role. Admin only."""
    require_admin(current_user)

    if await email_taken(db, user_data.email):
        raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL)

    now = datetime.now(UTC)
    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        role=user_data.role,
        provider="credentials",
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    return UserDetailResponse(
        user=UserResponse.model_validate(user), message="User created successfully"
    )


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> UserDetailResponse:
    """Fetch a profile. Admins can view anyone; others only themselves."""
    if not can_access_user(current_user, user_id):
        raise HTTPException(status_code=403, detail="Access denied")

    user = await get_user_or_404(db, user_id)
    return UserDetailResponse(user=UserResponse.model_validate(user))


@router.put("/{user_id}", response_model=UserDetailResponse)
async def update_user(
    user_id: int,
    current_user: CurrentUser,
    user_data: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserDetailResponse:
    """Update a profile.

    Anyone may change their own name, email and password. Role and active
    flag changes require an admin, even on the admin's own account.
    """
    if not can_access_user(current_user, user_id):
        raise HTTPException(status_code=403, detail="Access denied")

    changes = user_data.model_dump(exclude_unset=True)
    privileged = {"role", "is_active"} & changes.keys()
    if privileged and not can_change_user_privileges(current_user):
        raise HTTPException(
            status_code=403, detail="Only admins can change role or active status"
        )

    user = await get_user_or_404(db, user_id)

    if changes.get("name") is not None:
        user.name = changes["name"]

    if changes.get("email") is not None:
        if await email_taken(db, changes["email"], exclude_id=user_id):
            raise HTTPException(status_code=400, detail="This email is already taken")
        user.email = changes["email"]

    if changes.get("role") is not None:
        user.role = changes["role"]

    if changes.get("is_active") is not None:
        user.is_active = changes["is_active"]

    if changes.get("password") is not None:
        user.hashed_password = hash_password(changes["password"])
        user.provider = "credentials"

    user.updated_at = datetime.now(UTC)
    await db.flush()

    return UserDetailResponse(
        user=UserResponse.model_validate(user), message="User updated successfully"
    )


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    current_user: CurrentUser,
    delete_posts: bool = Query(False, description="Also delete the user's posts"),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete an account. Admin only; admins cannot delete themselves.

    Accounts that own posts are kept unless ``delete_posts=true``.
    """
    require_admin(current_user)
    if not can_delete_user(current_user, user_id):
        raise HTTPException(status_code=403, detail="Cannot delete your own account")

    await get_user_or_404(db, user_id)

    if delete_posts:
        await db.execute(delete(Post).where(Post.author_id == user_id))
    else:
        post_count = (
            await db.execute(select(func.count(Post.id)).where(Post.author_id == user_id))
        ).scalar_one()
        if post_count > 0:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"Cannot delete user with {post_count} posts. Please reassign or delete "
                    "posts first, or use delete_posts=true parameter."
                ),
            )

    await db.execute(delete(User).where(User.id == user_id))

    return MessageResponse(message="User deleted successfully")
