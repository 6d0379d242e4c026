"""
Pydantic schemas for authentication and user profile requests and responses
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from uuid import UUID
from datetime import datetime


class RegisterRequest(BaseModel):
    """Request schema for account registration"""
    email: EmailStr
    password: str = Field(..., description="Plain-text password, hashed before storage")


class LoginRequest(BaseModel):
    """Request schema for login"""
    email: str
    password: str


class UserOut(BaseModel):
    """Public user representation"""
    id: UUID
    email: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class AuthResponse(BaseModel):
    """Token plus user, returned by register and login"""
    success: bool = True
    token: str
    user: UserOut


class UserResponse(BaseModel):
    success: bool = True
    data: UserOut


class ProfileUpdate(BaseModel):
    """Schema for updating the profile"""
    email: Optional[EmailStr] = None


class PasswordUpdate(BaseModel):
    """Schema for changing the password"""
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")

    class Config:
        populate_by_name = True


class EmptyResponse(BaseModel):
    success: bool = True
    data: dict = Field(default_factory=dict)
