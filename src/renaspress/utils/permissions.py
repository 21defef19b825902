"""Role and ownership rules for posts and user accounts.

Every function here is a pure predicate over the acting user and the target
resource. Endpoints decide how to report a denial; nothing here touches the
database or mutates its arguments.
"""

from typing import TYPE_CHECKING

from renaspress.models.user import POST_AUTHOR_ROLES

if TYPE_CHECKING:
    from renaspress.models.post import Post
    from renaspress.models.user import User


def is_admin(user: "User") -> bool:
    return user.role == "admin"


def owns_post(user: "User", post: "Post") -> bool:
    return post.author_id == user.id


def can_create_post(user: "User") -> bool:
    """Admins, authors and editors may write posts; subscribers may not."""
    return user.role in POST_AUTHOR_ROLES


def can_edit_post(user: "User", post: "Post") -> bool:
    """Admins and editors edit anything; authors only their own posts."""
    if user.role in ("admin", "editor"):
        return True
    return user.role == "author" and owns_post(user, post)


def can_delete_post(user: "User", post: "Post") -> bool:
    """Admins delete anything; authors only their own posts. Editors cannot delete."""
    if is_admin(user):
        return True
    return user.role == "author" and owns_post(user, post)


def can_bulk_publish(user: "User") -> bool:
    return is_admin(user)


def can_access_user(actor: "User", target_id: int) -> bool:
    """View or edit a profile: admins for anyone, everyone else only for themselves."""
    return is_admin(actor) or actor.id == target_id


def can_change_user_privileges(actor: "User") -> bool:
    """Only admins may change role or active flag, including on their own account."""
    return is_admin(actor)


def can_manage_users(actor: "User") -> bool:
    """Listing and creating accounts is restricted to admins."""
    return is_admin(actor)


def can_delete_user(actor: "User", target_id: int) -> bool:
    """Admins may delete accounts other than their own."""
    return is_admin(actor) and actor.id != target_id
