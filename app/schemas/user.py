"""Staff account schemas, plus the login token."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from app.models.user import UserRole


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    full_name: Optional[str] = None


class UserCreate(UserBase):
    """New staff account. Accounts start as EMPLOYEE unless a role is given."""
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.EMPLOYEE


class UserUpdate(BaseModel):
    """Partial update; deactivating keeps the account for past transactions."""
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserResponse(UserBase):
    id: int
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """A user as shown on transactions: approver, seller or asset assignee."""
    id: int
    username: str
    full_name: Optional[str] = None
    display_name: str

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
    role: UserRole


class TokenData(BaseModel):
    username: Optional[str] = None
    role: Optional[UserRole] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)
