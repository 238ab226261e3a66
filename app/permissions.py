"""
Ownership predicates used by the post and comment services.

Both are plain functions over ``(owner_username, user)`` so the services
can evaluate them against whatever owner they already loaded.
"""
from app.models import User, UserRole


def is_owner(owner_username: str, user: User) -> bool:
    """True when *user* created the resource."""
    return owner_username == user.username


def is_owner_or_admin(owner_username: str, user: User) -> bool:
    """
    True when *user* owns the resource or holds the ADMIN role.

    Gates update and delete, and blocks post likes: administrators may
    not like or unlike any post. Comment likes use ``is_owner`` only.
    """
    return user.role == UserRole.ADMIN or is_owner(owner_username, user)
