"""Tests for role and ownership rules."""

import pytest

from renaspress.models import Post, User
from renaspress.utils.permissions import (
    can_access_user,
    can_bulk_publish,
    can_change_user_privileges,
    can_create_post,
    can_delete_post,
    can_delete_user,
    can_edit_post,
)


def user(id: int, role: str) -> User:
    return User(id=id, name=f"{role} {id}", email=f"{role}{id}@example.com", role=role)


OWNER = user(1, "author")
OTHER_AUTHOR = user(2, "author")
EDITOR = user(3, "editor")
ADMIN = user(4, "admin")
SUBSCRIBER = user(5, "subscriber")
POST = Post(id=10, author_id=OWNER.id, title="t", content="c")


@pytest.mark.parametrize(
    ("actor", "allowed"),
    [(ADMIN, True), (EDITOR, True), (OWNER, True), (SUBSCRIBER, False)],
)
def test_can_create_post(actor: User, allowed: bool) -> None:
    assert can_create_post(actor) is allowed


@pytest.mark.parametrize(
    ("actor", "allowed"),
    [(ADMIN, True), (EDITOR, True), (OWNER, True), (OTHER_AUTHOR, False), (SUBSCRIBER, False)],
)
def test_can_edit_post(actor: User, allowed: bool) -> None:
    assert can_edit_post(actor, POST) is allowed


@pytest.mark.parametrize(
    ("actor", "allowed"),
    [(ADMIN, True), (EDITOR, False), (OWNER, True), (OTHER_AUTHOR, False), (SUBSCRIBER, False)],
)
def test_can_delete_post(actor: User, allowed: bool) -> None:
    assert can_delete_post(actor, POST) is allowed


def test_subscriber_owning_post_cannot_edit() -> None:
    demoted = user(6, "subscriber")
    own_post = Post(id=11, author_id=demoted.id, title="t", content="c")
    assert not can_edit_post(demoted, own_post)
    assert not can_delete_post(demoted, own_post)


def test_only_admin_bulk_publishes() -> None:
    assert can_bulk_publish(ADMIN)
    assert not can_bulk_publish(EDITOR)


def test_user_access_rules() -> None:
    assert can_access_user(OWNER, OWNER.id)
    assert not can_access_user(OWNER, OTHER_AUTHOR.id)
    assert can_access_user(ADMIN, OWNER.id)

    assert can_change_user_privileges(ADMIN)
    assert not can_change_user_privileges(EDITOR)

    assert can_delete_user(ADMIN, OWNER.id)
    assert not can_delete_user(ADMIN, ADMIN.id)
    assert not can_delete_user(EDITOR, OWNER.id)
