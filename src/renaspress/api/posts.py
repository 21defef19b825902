"""Post API endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import String, cast, delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from renaspress.database import get_db
from renaspress.models.post import Post
from renaspress.models.user import User, saved_posts
from renaspress.schemas.common import MessageResponse, Pagination
from renaspress.schemas.post import (
    BulkPublishRequest,
    BulkPublishResponse,
    LikeRequest,
    LikeResponse,
    PostCreate,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    PostTranslateRequest,
    PostTranslation,
    PostTranslationResponse,
    PostTranslationsResponse,
    PostUpdate,
    SavedPostsResponse,
    SavePostRequest,
)
from renaspress.schemas.user import AuthorSummary
from renaspress.services.posts import (
    apply_status,
    bulk_publish_statement,
    generate_slug,
    like_statement,
)
from renaspress.services.translation import TranslationService, get_translation_service
from renaspress.utils.permissions import (
    can_bulk_publish,
    can_create_post,
    can_delete_post,
    can_edit_post,
)
from renaspress.utils.security import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


def post_to_response(post: Post, author: User | None = None, views: int | None = None) -> PostResponse:
    """Convert a Post model to PostResponse.

    Uses ``author`` when given, otherwise requires post.author to be loaded.
    """
    author = author if author is not None else post.author
    return PostResponse(
        id=post.id,
        title=post.title,
        slug=post.slug,
        content=post.content,
        excerpt=post.excerpt,
        status=post.status,
        category=post.category,
        tags=post.tags or [],
        featured_image=post.featured_image,
        media=post.media or [],
        views=post.views if views is None else views,
        likes=post.likes,
        published_at=post.published_at,
        original_language=post.original_language,
        translations=post.translations or {},
        author=AuthorSummary.model_validate(author) if author else None,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def search_clause(search: str):
    """Case-insensitive match on title, content or tags."""
    pattern = f"%{search}%"
    return or_(
        Post.title.ilike(pattern),
        Post.content.ilike(pattern),
        cast(Post.tags, String).ilike(pattern),
    )


async def get_post_or_404(db: AsyncSession, post_id: int, with_author: bool = False) -> Post:
    query = select(Post).where(Post.id == post_id)
    if with_author:
        query = query.options(selectinload(Post.author))
    result = await db.execute(query)
    post = result.scalar_one_or_none()
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


async def paginate_posts(db: AsyncSession, base_query, order_by, page: int, per_page: int):
    count_query = select(func.count()).select_from(base_query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    results = await db.execute(
        base_query.options(selectinload(Post.author))
        .order_by(*order_by)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    posts = results.scalars().all()
    return [post_to_response(post) for post in posts], Pagination.build(page, per_page, total)


@router.get("", response_model=PostListResponse)
async def list_posts(
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(10, ge=1, le=100, description="Items per page"),
    category: str | None = Query(None, description="Category, or 'all'"),
    search: str | None = Query(None, description="Text to look for"),
    slug: str | None = Query(None, description="Exact slug; overrides search"),
    status: str = Query("published", description="Post status"),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    """List posts for the public site, newest publication first."""
    base_query = select(Post).where(Post.status == status)

    if category and category != "all":
        base_query = base_query.where(Post.category == category)

    if slug:
        base_query = base_query.where(Post.slug == slug)
    elif search:
        base_query = base_query.where(search_clause(search))

    posts, pagination = await paginate_posts(
        db,
        base_query,
        (Post.published_at.desc(), Post.created_at.desc(), Post.id.desc()),
        page,
        per_page,
    )
    return PostListResponse(posts=posts, pagination=pagination)


@router.post("", response_model=PostDetailResponse, status_code=201)
async def create_post(
    current_user: CurrentUser,
    post_data: PostCreate,
    db: AsyncSession = Depends(get_db),
) -> PostDetailResponse:
    """Create a post owned by the caller.

    Requires the admin, author or editor role.
    """
    if not can_create_post(current_user):
        raise HTTPException(status_code=403, detail="Insufficient permissions to create posts")

    now = datetime.now(UTC)
    post = Post(
        title=post_data.title,
        content=post_data.content,
        excerpt=post_data.excerpt,
        slug=generate_slug(post_data.title),
        author_id=current_user.id,
        category=post_data.category,
        tags=list(post_data.tags),
        featured_image=post_data.featured_image,
        media=[item.model_dump() for item in post_data.media],
        views=0,
        likes=0,
        original_language=post_data.original_language,
        translations={},
        created_at=now,
        updated_at=now,
    )
    apply_status(post, post_data.status, now=now)
    db.add(post)
    await db.flush()
    await db.refresh(post)

    return PostDetailResponse(
        post=post_to_response(post, author=current_user),
        message="Post created successfully",
    )


@router.get("/saved", response_model=SavedPostsResponse)
async def list_saved_posts(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> SavedPostsResponse:
    """List the posts the caller has saved."""
    results = await db.execute(
        select(Post)
        .join(saved_posts, saved_posts.c.post_id == Post.id)
        .where(saved_posts.c.user_id == current_user.id)
        .options(selectinload(Post.author))
        .order_by(Post.created_at.desc())
    )
    return SavedPostsResponse(posts=[post_to_response(post) for post in results.scalars().all()])


@router.post("/saved", response_model=MessageResponse)
async def toggle_saved_post(
    current_user: CurrentUser,
    request: SavePostRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Save or unsave a post for the caller.

    Saving an already saved post is a no-op.
    """
    await get_post_or_404(db, request.post_id)

    link = (saved_posts.c.user_id == current_user.id) & (
        saved_posts.c.post_id == request.post_id
    )
    if request.action == "save":
        existing = await db.execute(select(saved_posts.c.post_id).where(link))
        if existing.first() is None:
            await db.execute(
                insert(saved_posts).values(user_id=current_user.id, post_id=request.post_id)
            )
        return MessageResponse(message="Post saved successfully")

    await db.execute(delete(saved_posts).where(link))
    return MessageResponse(message="Post unsaved successfully")


@router.get("/user", response_model=PostListResponse)
async def list_my_posts(
    current_user: CurrentUser,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(10, ge=1, le=100, description="Items per page"),
    status: str = Query("all", description="Post status, or 'all'"),
    search: str = Query("", description="Text to look for"),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    """List the caller's own posts in any status, newest first."""
    base_query = select(Post).where(Post.author_id == current_user.id)
    if status != "all":
        base_query = base_query.where(Post.status == status)
    if search:
        base_query = base_query.where(search_clause(search))

    posts, pagination = await paginate_posts(
        db, base_query, (Post.created_at.desc(), Post.id.desc()), page, per_page
    )
    return PostListResponse(posts=posts, pagination=pagination)


@router.post("/bulk-publish", response_model=BulkPublishResponse)
async def bulk_publish(
    current_user: CurrentUser,
    request: BulkPublishRequest,
    db: AsyncSession = Depends(get_db),
) -> BulkPublishResponse:
    """Publish many posts at once. Admin only.

    Posts that are already published, or do not exist, are skipped.
    """
    if not can_bulk_publish(current_user):
        raise HTTPException(status_code=403, detail="Only admins can bulk publish posts")

    result = await db.execute(bulk_publish_statement(request.post_ids))
    published = result.rowcount
    logger.info("User %s bulk published %d post(s)", current_user.id, published)

    return BulkPublishResponse(
        published_count=published,
        message=f"Successfully published {published} post(s)",
    )


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
) -> PostDetailResponse:
    """Fetch a post. Every call counts as one view."""
    post = await get_post_or_404(db, post_id, with_author=True)

    await db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(views=Post.views + 1, updated_at=Post.updated_at)
        .execution_options(synchronize_session=False)
    )

    return PostDetailResponse(post=post_to_response(post, views=post.views + 1))


@router.put("/{post_id}", response_model=PostDetailResponse)
async def update_post(
    post_id: int,
    current_user: CurrentUser,
    post_data: PostUpdate,
    db: AsyncSession = Depends(get_db),
) -> PostDetailResponse:
    """Update a post.

    Admins and editors may edit any post; authors only their own.
    """
    post = await get_post_or_404(db, post_id, with_author=True)

    if not can_edit_post(current_user, post):
        raise HTTPException(status_code=403, detail="Insufficient permissions to edit this post")

    changes = post_data.model_dump(exclude_unset=True)
    now = datetime.now(UTC)

    post.title = post_data.title
    post.content = post_data.content
    if "excerpt" in changes:
        post.excerpt = post_data.excerpt
    if changes.get("category") is not None:
        post.category = post_data.category
    if changes.get("tags") is not None:
        post.tags = list(post_data.tags)
    if changes.get("media") is not None:
        post.media = [item.model_dump() for item in post_data.media]
    if changes.get("featured_image") is not None:
        post.featured_image = post_data.featured_image
    if changes.get("status") is not None:
        apply_status(post, post_data.status, now=now)

    post.updated_at = now
    await db.flush()

    return PostDetailResponse(post=post_to_response(post), message="Post updated successfully")


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete a post. Admins may delete any post; authors only their own."""
    post = await get_post_or_404(db, post_id)

    if not can_delete_post(current_user, post):
        raise HTTPException(
            status_code=403, detail="Insufficient permissions to delete this post"
        )

    # saved_posts rows go with the post via ON DELETE CASCADE
    await db.execute(delete(Post).where(Post.id == post_id))

    return MessageResponse(message="Post deleted successfully")


@router.post("/{post_id}/like", response_model=LikeResponse)
async def like_post(
    post_id: int,
    current_user: CurrentUser,  # noqa: ARG001 - Required for auth enforcement
    request: LikeRequest,
    db: AsyncSession = Depends(get_db),
) -> LikeResponse:
    """Like or unlike a post. The counter never goes below zero."""
    await get_post_or_404(db, post_id)

    result = await db.execute(like_statement(post_id, request.action))
    likes = result.scalar_one()

    verb = "liked" if request.action == "like" else "unliked"
    return LikeResponse(likes=likes, message=f"Post {verb} successfully")


@router.post("/{post_id}/translate", response_model=PostTranslationResponse)
async def translate_post(
    post_id: int,
    request: PostTranslateRequest,
    db: AsyncSession = Depends(get_db),
    translator: TranslationService = Depends(get_translation_service),
) -> PostTranslationResponse:
    """Translate a post and cache the result on it.

    A cached translation is returned without calling the provider. Provider
    failures fall back to the original text.
    """
    try:
        post = await get_post_or_404(db, post_id)
        language = request.target_language

        cached = (post.translations or {}).get(language)
        if cached:
            return PostTranslationResponse(
                message="Translation already exists",
                translation=PostTranslation.model_validate(cached),
            )

        translated = await translator.translate_post_content(
            title=post.title,
            content=post.content,
            excerpt=post.excerpt,
            target_language=language,
        )
    finally:
        await translator.close()

    translation = PostTranslation(**translated, translated_at=datetime.now(UTC))

    # Reassign so the JSON column is marked dirty
    post.translations = {
        **(post.translations or {}),
        language: translation.model_dump(mode="json"),
    }
    await db.flush()

    return PostTranslationResponse(message="Post translated successfully", translation=translation)


@router.get(
    "/{post_id}/translate",
    response_model=PostTranslationResponse | PostTranslationsResponse,
)
async def get_post_translations(
    post_id: int,
    language: str | None = Query(None, description="Language code"),
    db: AsyncSession = Depends(get_db),
) -> PostTranslationResponse | PostTranslationsResponse:
    """Return one cached translation, or all of them when none matches."""
    post = await get_post_or_404(db, post_id)
    translations = post.translations or {}

    if language and language in translations:
        return PostTranslationResponse(
            translation=PostTranslation.model_validate(translations[language])
        )

    return PostTranslationsResponse(
        original_language=post.original_language,
        translations={
            code: PostTranslation.model_validate(value) for code, value in translations.items()
        },
    )
