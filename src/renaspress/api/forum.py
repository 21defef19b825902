"""Community forum API endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from renaspress.database import get_db
from renaspress.models.forum import ForumComment, ForumTopic
from renaspress.models.user import User
from renaspress.schemas.common import Pagination
from renaspress.schemas.forum import (
    CommentCreate,
    CommentCreateResponse,
    CommentResponse,
    LastReply,
    TopicCreate,
    TopicCreateResponse,
    TopicDetailResponse,
    TopicListResponse,
    TopicResponse,
)
from renaspress.schemas.user import AuthorSummary
from renaspress.utils.security import CurrentUser, OptionalUser

router = APIRouter(prefix="/forum", tags=["forum"])


def topic_to_response(topic: ForumTopic, author: User | None = None) -> TopicResponse:
    """Convert a ForumTopic model to TopicResponse.

    Expects author and last_reply_author to be loaded unless ``author`` is given.
    """
    author = author if author is not None else topic.author
    last_reply = None
    if topic.last_reply_at is not None:
        last_author = topic.last_reply_author
        last_reply = LastReply(
            author=AuthorSummary.model_validate(last_author) if last_author else None,
            created_at=topic.last_reply_at,
        )
    return TopicResponse(
        id=topic.id,
        title=topic.title,
        content=topic.content,
        category=topic.category,
        tags=topic.tags or [],
        is_pinned=topic.is_pinned,
        is_locked=topic.is_locked,
        views=topic.views,
        replies=topic.replies,
        last_reply=last_reply,
        author=AuthorSummary.model_validate(author) if author else None,
        created_at=topic.created_at,
        updated_at=topic.updated_at,
    )


def comment_to_response(comment: ForumComment, author: User | None = None) -> CommentResponse:
    if author is None and comment.author_id is not None:
        author = comment.author
    return CommentResponse(
        id=comment.id,
        topic_id=comment.topic_id,
        parent_id=comment.parent_id,
        content=comment.content,
        author=AuthorSummary.model_validate(author) if author else None,
        author_name=comment.author_name,
        likes=comment.likes,
        created_at=comment.created_at,
    )


@router.get("/topics", response_model=TopicListResponse)
async def list_topics(
    category: str = Query("all", description="Category, or 'all'"),
    search: str = Query("", description="Match against title or content"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
) -> TopicListResponse:
    """List topics: pinned first, then by latest activity."""
    base_query = select(ForumTopic)
    if category != "all":
        base_query = base_query.where(ForumTopic.category == category)
    if search:
        pattern = f"%{search}%"
        base_query = base_query.where(
            or_(ForumTopic.title.ilike(pattern), ForumTopic.content.ilike(pattern))
        )

    count_query = select(func.count()).select_from(base_query.subquery())
    total = (await db.execute(count_query)).scalar_one()

    results = await db.execute(
        base_query.options(
            selectinload(ForumTopic.author), selectinload(ForumTopic.last_reply_author)
        )
        .order_by(
            ForumTopic.is_pinned.desc(),
            ForumTopic.last_reply_at.desc(),
            ForumTopic.created_at.desc(),
            ForumTopic.id.desc(),
        )
        .offset((page - 1) * limit)
        .limit(limit)
    )
    topics = results.scalars().all()

    return TopicListResponse(
        topics=[topic_to_response(topic) for topic in topics],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("/topics", response_model=TopicCreateResponse, status_code=201)
async def create_topic(
    current_user: CurrentUser,
    topic_data: TopicCreate,
    db: AsyncSession = Depends(get_db),
) -> TopicCreateResponse:
    """Start a new topic. Requires a signed-in user."""
    now = datetime.now(UTC)
    topic = ForumTopic(
        title=topic_data.title,
        content=topic_data.content,
        category=topic_data.category,
        tags=list(topic_data.tags),
        author_id=current_user.id,
        is_pinned=False,
        is_locked=False,
        views=0,
        replies=0,
        created_at=now,
        updated_at=now,
    )
    db.add(topic)
    await db.flush()
    await db.refresh(topic)

    return TopicCreateResponse(
        topic=topic_to_response(topic, author=current_user),
        message="Topic created successfully",
    )


@router.get("/topics/{topic_id}", response_model=TopicDetailResponse)
async def get_topic(
    topic_id: int,
    page: int = Query(1, ge=1, description="Comment page"),
    limit: int = Query(20, ge=1, le=100, description="Comments per page"),
    db: AsyncSession = Depends(get_db),
) -> TopicDetailResponse:
    """Fetch a topic with a page of its comments. Counts one view."""
    await db.execute(
        update(ForumTopic)
        .where(ForumTopic.id == topic_id)
        .values(views=ForumTopic.views + 1, updated_at=ForumTopic.updated_at)
        .execution_options(synchronize_session=False)
    )

    result = await db.execute(
        select(ForumTopic)
        .where(ForumTopic.id == topic_id)
        .options(selectinload(ForumTopic.author), selectinload(ForumTopic.last_reply_author))
    )
    topic = result.scalar_one_or_none()
    if topic is None:
        raise HTTPException(status_code=404, detail="Topic not found")

    visible = (ForumComment.topic_id == topic_id) & (ForumComment.is_deleted.is_(False))
    total = (
        await db.execute(select(func.count(ForumComment.id)).where(visible))
    ).scalar_one()

    results = await db.execute(
        select(ForumComment)
        .where(visible)
        .options(selectinload(ForumComment.author))
        .order_by(ForumComment.created_at.asc(), ForumComment.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    comments = results.scalars().all()

    return TopicDetailResponse(
        topic=topic_to_response(topic),
        comments=[comment_to_response(comment) for comment in comments],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("/comments", response_model=CommentCreateResponse, status_code=201)
async def create_comment(
    current_user: OptionalUser,
    comment_data: CommentCreate,
    db: AsyncSession = Depends(get_db),
) -> CommentCreateResponse:
    """Reply to a topic, signed in or anonymously.

    Anonymous callers must give ``author_name``. A parent comment must belong
    to the same topic.
    """
    result = await db.execute(select(ForumTopic).where(ForumTopic.id == comment_data.topic_id))
    topic = result.scalar_one_or_none()
    if topic is None:
        raise HTTPException(status_code=404, detail="Topic not found")

    if topic.is_locked:
        raise HTTPException(
            status_code=403, detail="This topic is locked and cannot accept new comments"
        )

    if current_user is None and not (comment_data.author_name or "").strip():
        raise HTTPException(
            status_code=400, detail="Author name is required for anonymous comments"
        )

    if comment_data.parent_id is not None:
        parent = await db.execute(
            select(ForumComment.id).where(
                ForumComment.id == comment_data.parent_id,
                ForumComment.topic_id == comment_data.topic_id,
            )
        )
        if parent.scalar_one_or_none() is None:
            raise HTTPException(status_code=400, detail="Invalid parent comment")

    now = datetime.now(UTC)
    comment = ForumComment(
        content=comment_data.content,
        topic_id=comment_data.topic_id,
        author_id=current_user.id if current_user else None,
        author_name=current_user.name if current_user else comment_data.author_name.strip(),
        parent_id=comment_data.parent_id,
        likes=0,
        is_deleted=False,
        created_at=now,
        updated_at=now,
    )
    db.add(comment)
    await db.flush()
    await db.refresh(comment)

    await db.execute(
        update(ForumTopic)
        .where(ForumTopic.id == comment_data.topic_id)
        .values(
            replies=ForumTopic.replies + 1,
            last_reply_author_id=current_user.id if current_user else None,
            last_reply_at=now,
        )
        .execution_options(synchronize_session=False)
    )

    return CommentCreateResponse(
        comment=comment_to_response(comment, author=current_user),
        message="Comment added successfully",
    )
