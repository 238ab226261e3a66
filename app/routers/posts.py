from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.dependencies import get_current_user
from app.models import User
from app.schemas import ApiResponse, PostCreate, PostResponse, PostUpdate, PostWithComments
from app.services import post_service

router = APIRouter(prefix="/api/posts", tags=["posts"])

@router.post("", response_model=PostResponse)
async def create_post(
    data: PostCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.create_post(db, data, user)

@router.get("", response_model=list[PostWithComments])
async def list_posts(db: AsyncSession = Depends(get_db)):
    return await post_service.get_posts(db)

@router.get("/{post_id}", response_model=PostWithComments)
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return await post_service.get_post(db, post_id)

@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    data: PostUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.update_post(db, post_id, data, user)

@router.delete("/{post_id}", response_model=ApiResponse)
async def delete_post(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_post(db, post_id, user)
    return ApiResponse(message="Post deleted", status_code=200)

@router.post("/{post_id}/like", response_model=ApiResponse)
async def insert_post_like(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await post_service.insert_post_like(db, post_id, user)
    return ApiResponse(message="Post liked", status_code=200)

@router.delete("/{post_id}/like", response_model=ApiResponse)
async def delete_post_like(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_post_like(db, post_id, user)
    return ApiResponse(message="Post like removed", status_code=200)
