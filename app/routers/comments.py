from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.dependencies import get_current_user
from app.models import User
from app.schemas import ApiResponse, CommentRequest, CommentResponse
from app.services import comment_service

router = APIRouter(prefix="/api/posts/{post_id}/comments", tags=["comments"])

@router.get("", response_model=list[CommentResponse])
async def list_comments(post_id: int, db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comments(db, post_id)

@router.post("", response_model=CommentResponse)
async def create_comment(
    post_id: int,
    data: CommentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.create_comment(db, post_id, data, user)

@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    post_id: int,
    comment_id: int,
    data: CommentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.update_comment(db, post_id, comment_id, data, user)

@router.delete("/{comment_id}", response_model=ApiResponse)
async def delete_comment(
    post_id: int,
    comment_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.delete_comment(db, post_id, comment_id, user)
    return ApiResponse(message="Comment deleted", status_code=200)

@router.post("/{comment_id}/like", response_model=CommentResponse)
async def insert_comment_like(
    post_id: int,
    comment_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.insert_comment_like(db, post_id, comment_id, user)

@router.delete("/{comment_id}/like", response_model=CommentResponse)
async def delete_comment_like(
    post_id: int,
    comment_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.delete_comment_like(db, post_id, comment_id, user)
