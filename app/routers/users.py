from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.schemas import TokenResponse, UserCreate, UserDetail, UserLogin, UserResponse
from app.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])

@router.post("/signup", status_code=201, response_model=UserResponse)
async def signup(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await user_service.create_user(db, data)

@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, db: AsyncSession = Depends(get_db)):
    token = await user_service.authenticate(db, data.username, data.password)
    return TokenResponse(access_token=token)

@router.get("", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await user_service.get_users(db)

@router.get("/{user_id}", response_model=UserDetail)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await user_service.get_user(db, user_id)
