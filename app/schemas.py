from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

from app.models import UserRole


# --- User ---

class UserBase(BaseModel):
    username: str = Field(min_length=4, max_length=50)
    email: str = Field(max_length=255)


class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)
    admin: bool = False
    admin_token: str = ""


class UserLogin(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(UserBase):
    id: int
    role: UserRole
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class UserDetail(UserResponse):
    posts: list["PostResponse"] = []


# --- Comment ---

class CommentRequest(BaseModel):
    content: str = Field(min_length=1)


class CommentResponse(BaseModel):
    id: int
    post_id: int
    content: str
    username: str
    like_count: int
    created_at: datetime
    modified_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


# --- Post ---

class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)


class PostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1)


class PostResponse(BaseModel):
    id: int
    title: str
    content: str
    username: str
    like_count: int
    created_at: datetime
    modified_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class PostWithComments(BaseModel):
    post: PostResponse
    comments: list[CommentResponse] = []


# --- Envelope ---

class ApiResponse(BaseModel):
    """Body for plain acknowledgements and every ``BlogError``."""

    message: str
    status_code: int = Field(serialization_alias="statusCode")


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_posts: int
    total_comments: int
    total_users: int
    total_post_likes: int
    total_comment_likes: int
    avg_comments_per_post: float


# Required for forward-reference resolution (UserDetail.posts)
UserDetail.model_rebuild()
