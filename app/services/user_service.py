"""
User service - signup, login and read access for the User aggregate.

Username and email uniqueness is enforced by unique constraints; the
resulting ``IntegrityError`` is surfaced as ``ConflictError``.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from app.models import Post, User, UserRole
from app.schemas import UserCreate
from app.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _user_to_dict(user: User) -> dict:
    """Serialise a User ORM instance to a plain dict (list view)."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role.value,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


def _post_summary_to_dict(post: Post, username: str) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "username": username,
        "like_count": post.like_count,
        "created_at": post.created_at.isoformat() if post.created_at else None,
        "modified_at": post.modified_at.isoformat() if post.modified_at else None,
    }


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_users(db: AsyncSession) -> list[dict]:
    """Return all users ordered by creation date (newest first)."""
    q = select(User).order_by(User.created_at.desc(), User.id.desc())

    result = await db.execute(q)
    return [_user_to_dict(u) for u in result.scalars().all()]


async def get_user(db: AsyncSession, user_id: int) -> dict:
    """
    Return *user_id* with a summary of their posts (most recent first).

    ``selectinload`` fetches the posts in one extra query.
    """
    q = (
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.posts))
        .execution_options(populate_existing=True)
    )

    result = await db.execute(q)
    user = result.unique().scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")

    data = _user_to_dict(user)
    posts = sorted(user.posts, key=lambda p: (p.created_at, p.id), reverse=True)
    data["posts"] = [_post_summary_to_dict(p, user.username) for p in posts]
    return data


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    """
    Register a new user and return its serialised dict.

    Requesting ``admin`` requires ``admin_token`` to match
    ``settings.ADMIN_TOKEN``.
    """
    role = UserRole.USER
    if data.admin:
        if data.admin_token != settings.ADMIN_TOKEN:
            raise PermissionDeniedError("Invalid admin token")
        role = UserRole.ADMIN

    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
        role=role,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError("A user with this username or email already exists") from exc
    logger.info("user %s registered (role=%s)", user.username, role.value)
    return _user_to_dict(user)


async def authenticate(db: AsyncSession, username: str, password: str) -> str:
    """Return an access token for valid credentials."""
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        raise PermissionDeniedError("invalid username or password")
    return create_access_token(user.username)
