from typing import Optional
from datetime import datetime

from pydantic import EmailStr, Field

from app.model.enums import UserRole, AvatarType
from app.schema.base_schema import CamelModel


class UserOut(CamelModel):
    id: str
    school_id: Optional[str] = None
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole
    points: int
    streak: int
    selected_avatar: Optional[AvatarType] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class StudentUpdate(CamelModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: Optional[bool] = None
    selected_avatar: Optional[AvatarType] = None


class PasswordReset(CamelModel):
    new_password: str = Field(min_length=8)


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    selected_avatar: Optional[AvatarType] = None


class StudentSummary(CamelModel):
    id: str
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
