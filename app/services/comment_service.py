"""
Comment service - comments and comment likes, always addressed through
their parent post.

A comment whose ``post_id`` differs from the post id in the request is
treated exactly like a missing comment (``NotFoundError``), so a comment
can never be edited, deleted or liked through another post's URL.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from app.models import Comment, CommentLike, Post, User
from app.permissions import is_owner, is_owner_or_admin
from app.schemas import CommentRequest

logger = logging.getLogger(__name__)


def comment_to_dict(comment: Comment) -> dict:
    """Serialise a Comment (with ``user`` loaded) to its public view."""
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "content": comment.content,
        "username": comment.user.username,
        "like_count": comment.like_count,
        "created_at": comment.created_at.isoformat() if comment.created_at else None,
        "modified_at": comment.modified_at.isoformat() if comment.modified_at else None,
    }


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

async def _ensure_post(db: AsyncSession, post_id: int) -> Post:
    result = await db.execute(select(Post).where(Post.id == post_id))
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def _find_comment(db: AsyncSession, post_id: int, comment_id: int) -> Comment:
    """Load *comment_id* with its owner, checking it belongs to *post_id*."""
    result = await db.execute(
        select(Comment).where(Comment.id == comment_id).options(joinedload(Comment.user))
    )
    comment = result.unique().scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.post_id != post_id:
        raise NotFoundError("Comment does not belong to this post")
    return comment


async def _find_comment_like(db: AsyncSession, user: User, comment: Comment) -> CommentLike | None:
    result = await db.execute(
        select(CommentLike).where(
            CommentLike.user_id == user.id, CommentLike.comment_id == comment.id
        )
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_comments(db: AsyncSession, post_id: int) -> list[dict]:
    """
    Return the comments on *post_id*, oldest first.

    An existing post with no comments yields ``[]``; an unknown post
    raises ``NotFoundError``.
    """
    await _ensure_post(db, post_id)
    q = (
        select(Comment)
        .where(Comment.post_id == post_id)
        .options(joinedload(Comment.user))
        .order_by(Comment.created_at, Comment.id)
    )
    result = await db.execute(q)
    return [comment_to_dict(c) for c in result.unique().scalars().all()]


async def create_comment(
    db: AsyncSession,
    post_id: int,
    data: CommentRequest,
    user: User,
) -> dict:
    await _ensure_post(db, post_id)
    comment = Comment(content=data.content, post_id=post_id, user=user, like_count=0)
    db.add(comment)
    await db.flush()
    logger.info("comment %d created on post %d by %s", comment.id, post_id, user.username)
    return comment_to_dict(comment)


async def update_comment(
    db: AsyncSession,
    post_id: int,
    comment_id: int,
    data: CommentRequest,
    user: User,
) -> dict:
    comment = await _find_comment(db, post_id, comment_id)
    if not is_owner_or_admin(comment.user.username, user):
        raise PermissionDeniedError("Only the author can edit this comment")

    comment.content = data.content
    await db.flush()
    return comment_to_dict(comment)


async def delete_comment(db: AsyncSession, post_id: int, comment_id: int, user: User) -> None:
    comment = await _find_comment(db, post_id, comment_id)
    if not is_owner_or_admin(comment.user.username, user):
        raise PermissionDeniedError("Only the author can delete this comment")

    await db.delete(comment)
    await db.flush()
    logger.info("comment %d deleted by %s", comment_id, user.username)


async def insert_comment_like(
    db: AsyncSession,
    post_id: int,
    comment_id: int,
    user: User,
) -> dict:
    comment = await _find_comment(db, post_id, comment_id)
    if is_owner(comment.user.username, user):
        raise PermissionDeniedError("Authors cannot like their own comment")
    if await _find_comment_like(db, user, comment) is not None:
        raise ConflictError("You already liked this comment")

    db.add(CommentLike(user_id=user.id, comment_id=comment.id))
    comment.like_count += 1
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError("You already liked this comment") from exc
    logger.info("comment %d liked by %s (likes=%d)", comment.id, user.username, comment.like_count)
    return comment_to_dict(comment)


async def delete_comment_like(
    db: AsyncSession,
    post_id: int,
    comment_id: int,
    user: User,
) -> dict:
    comment = await _find_comment(db, post_id, comment_id)
    if is_owner(comment.user.username, user):
        raise PermissionDeniedError("Authors cannot like their own comment")
    like = await _find_comment_like(db, user, comment)
    if like is None:
        raise ConflictError("You have not liked this comment")

    await db.delete(like)
    comment.like_count = max(0, comment.like_count - 1)
    await db.flush()
    logger.info("comment %d unliked by %s (likes=%d)", comment.id, user.username, comment.like_count)
    return comment_to_dict(comment)
