"""
Post service - business logic for the Post aggregate.

Design notes
------------
- Every function takes the request's ``AsyncSession`` first and flushes
  but never commits; the ``get_db`` dependency owns the transaction, so a
  raised ``BlogError`` rolls back everything the request touched.
- Update, delete, like and unlike are all gated by ``is_owner_or_admin``.
  For likes the check is inverted: neither the author nor an
  administrator may like or unlike a post.
- ``Post.like_count`` is a cached count of ``PostLike`` rows and moves in
  lockstep with them inside the same transaction.
- The feed loads comments for all posts with one ``selectinload`` instead
  of one comment query per post.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from app.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from app.models import Comment, Post, PostLike, User
from app.permissions import is_owner_or_admin
from app.schemas import PostCreate, PostUpdate
from app.services.comment_service import comment_to_dict

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def post_to_dict(post: Post) -> dict:
    """Serialise a Post (with ``user`` loaded) to its public view."""
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "username": post.user.username,
        "like_count": post.like_count,
        "created_at": post.created_at.isoformat() if post.created_at else None,
        "modified_at": post.modified_at.isoformat() if post.modified_at else None,
    }


def _post_with_comments_to_dict(post: Post) -> dict:
    return {
        "post": post_to_dict(post),
        "comments": [comment_to_dict(c) for c in post.comments],
    }


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

async def _find_post(db: AsyncSession, post_id: int, *, with_comments: bool = False) -> Post:
    """Load *post_id* with its owner, or raise ``NotFoundError``."""
    options = [joinedload(Post.user)]
    if with_comments:
        options.append(selectinload(Post.comments).joinedload(Comment.user))
    q = select(Post).where(Post.id == post_id).options(*options)
    if with_comments:
        # Re-read a collection the session may already hold from earlier writes.
        q = q.execution_options(populate_existing=True)
    result = await db.execute(q)
    post = result.unique().scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def _find_post_like(db: AsyncSession, user: User, post: Post) -> PostLike | None:
    result = await db.execute(
        select(PostLike).where(PostLike.user_id == user.id, PostLike.post_id == post.id)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def create_post(db: AsyncSession, data: PostCreate, user: User) -> dict:
    post = Post(title=data.title, content=data.content, user=user, like_count=0)
    db.add(post)
    await db.flush()
    logger.info("post %d created by %s", post.id, user.username)
    return post_to_dict(post)


async def get_posts(db: AsyncSession) -> list[dict]:
    """
    Return every post with its comments, newest post first.

    Ties on ``created_at`` fall back to ``id`` so the order is total.
    """
    q = (
        select(Post)
        .options(
            joinedload(Post.user),
            selectinload(Post.comments).joinedload(Comment.user),
        )
        .order_by(Post.created_at.desc(), Post.id.desc())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    return [_post_with_comments_to_dict(p) for p in result.unique().scalars().all()]


async def get_post(db: AsyncSession, post_id: int) -> dict:
    """Return one post with its comments; ``NotFoundError`` if absent."""
    post = await _find_post(db, post_id, with_comments=True)
    return _post_with_comments_to_dict(post)


async def update_post(db: AsyncSession, post_id: int, data: PostUpdate, user: User) -> dict:
    """
    Apply the fields set in *data* to the post.

    Only fields explicitly present in the payload change
    (``model_dump(exclude_unset=True)``).
    """
    post = await _find_post(db, post_id)
    if not is_owner_or_admin(post.user.username, user):
        raise PermissionDeniedError("Only the author can edit this post")

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(post, field, value)

    await db.flush()
    logger.info("post %d updated by %s", post.id, user.username)
    return post_to_dict(post)


async def delete_post(db: AsyncSession, post_id: int, user: User) -> None:
    """Delete the post; comments and likes go with it via ON DELETE CASCADE."""
    post = await _find_post(db, post_id)
    if not is_owner_or_admin(post.user.username, user):
        raise PermissionDeniedError("Only the author can delete this post")

    await db.delete(post)
    await db.flush()
    logger.info("post %d deleted by %s", post_id, user.username)


async def insert_post_like(db: AsyncSession, post_id: int, user: User) -> None:
    post = await _find_post(db, post_id)
    if is_owner_or_admin(post.user.username, user):
        raise PermissionDeniedError("Authors and administrators cannot like posts")
    if await _find_post_like(db, user, post) is not None:
        raise ConflictError("You already liked this post")

    db.add(PostLike(user_id=user.id, post_id=post.id))
    post.like_count += 1
    try:
        await db.flush()
    except IntegrityError as exc:
        # A concurrent request inserted the same (user, post) pair first.
        raise ConflictError("You already liked this post") from exc
    logger.info("post %d liked by %s (likes=%d)", post.id, user.username, post.like_count)


async def delete_post_like(db: AsyncSession, post_id: int, user: User) -> None:
    post = await _find_post(db, post_id)
    if is_owner_or_admin(post.user.username, user):
        raise PermissionDeniedError("Authors and administrators cannot like posts")
    like = await _find_post_like(db, user, post)
    if like is None:
        raise ConflictError("You have not liked this post")

    await db.delete(like)
    post.like_count = max(0, post.like_count - 1)
    await db.flush()
    logger.info("post %d unliked by %s (likes=%d)", post.id, user.username, post.like_count)
