from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models import Comment, CommentLike, Post, PostLike, User
from app.schemas import MetricsResponse

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


async def _count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):
    total_posts = await _count(db, Post)
    total_comments = await _count(db, Comment)

    avg_comments = total_comments / total_posts if total_posts > 0 else 0

    return MetricsResponse(
        total_posts=total_posts,
        total_comments=total_comments,
        total_users=await _count(db, User),
        total_post_likes=await _count(db, PostLike),
        total_comment_likes=await _count(db, CommentLike),
        avg_comments_per_post=round(avg_comments, 2),
    )
