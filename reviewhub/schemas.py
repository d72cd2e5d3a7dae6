from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.config import ConfigDict

# Request bodies keep every field optional: a missing field is reported as a
# plain 400 by the route, not as a framework validation error.

class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AdminRead(UserRead):
    is_admin: bool


class LoginResponse(BaseModel):
    token: str
    user: AdminRead


class ReviewCreate(BaseModel):
    content: Optional[str] = None


class ReviewRead(BaseModel):
    id: int
    user_id: int
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewListItem(BaseModel):
    id: int
    content: str
    created_at: datetime
    user_name: str


class CommentCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    content: Optional[str] = None


class CommentStatusUpdate(BaseModel):
    status: Optional[str] = None


class CommentRead(BaseModel):
    id: int
    user_id: int
    content: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentListItem(BaseModel):
    id: int
    content: str
    status: str
    created_at: datetime
    user_name: str
    user_email: str


class Message(BaseModel):
    message: str
