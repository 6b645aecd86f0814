from pydantic import BaseModel
from typing import Optional
from enum import Enum

from app.models.email import Email


class UserRole(str, Enum):
    """Platform roles"""
    PARTICIPANT = "participant"
    CREATOR = "creator"
    ADMIN = "admin"


class UserUpsert(BaseModel):
    """Schema for first login; unknown fields are stored as sent"""
    email: Email
    name: Optional[str] = None
    image: Optional[str] = None
    address: Optional[str] = None
    role: Optional[UserRole] = None

    class Config:
        extra = "allow"


class UserProfileUpdate(BaseModel):
    """Schema for profile edits (email and role cannot be changed here)"""
    name: Optional[str] = None
    image: Optional[str] = None
    address: Optional[str] = None


class UserUpdate(BaseModel):
    """Schema for role changes and other admin edits"""
    role: Optional[UserRole] = None

    class Config:
        extra = "allow"
