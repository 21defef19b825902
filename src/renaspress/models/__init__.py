"""SQLAlchemy ORM models."""

from renaspress.models.forum import ForumComment, ForumTopic
from renaspress.models.post import Post
from renaspress.models.user import User, saved_posts

__all__ = [
    "ForumComment",
    "ForumTopic",
    "Post",
    "User",
    "saved_posts",
]
