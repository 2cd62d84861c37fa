from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from models.user import UserRole, UserStatus


def _validate_username(v):
    if v is None:
        return v
    v = v.strip()
    if len(v) < 3 or any(ch.isspace() for ch in v):
        raise ValueError('Username must be at least 3 characters without spaces')
    return v


# Request schemas
class UserCreate(BaseModel):
    username: str = Field(..., max_length=50)
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.USER
    status: UserStatus = UserStatus.ACTIVE

    @field_validator('username')
    def validate_username(cls, v):
        return _validate_username(v)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, max_length=50)
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None

    @field_validator('username')
    def validate_username(cls, v):
        return _validate_username(v)


class UserLogin(BaseModel):
    username: str
    password: str


# Response schemas
class UserResponse(BaseModel):
    id: int
    username: str
    role: UserRole
    status: UserStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
