from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum

from app.models.email import Email


class ContestStatus(str, Enum):
    """
    Contest status types

    - PENDING -> APPROVED (admin approval)
    """
    PENDING = "pending"  # Created by a creator, waiting for admin
    APPROVED = "approved"  # Visible and open for participation


def _split_tags(value: Union[str, List[str], None]) -> Optional[List[str]]:
    """Accept tags as a list or as a comma-separated string"""
    if value is None or isinstance(value, list):
        return value
    return [tag.strip() for tag in value.split(",") if tag.strip()]


class ContestCreate(BaseModel):
    """Schema for creating a contest; unknown fields are stored as sent"""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    price: float = Field(0, ge=0)
    prize: Optional[Union[float, str]] = None
    deadline: Optional[datetime] = None
    contest_type: Optional[str] = None
    creator_email: Email
    creator_name: Optional[str] = None
    creator_image: Optional[str] = None

    class Config:
        extra = "allow"

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        return _split_tags(value)


class ContestUpdate(BaseModel):
    """Schema for partial contest updates (admin approval included)"""
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    tags: Optional[List[str]] = None
    price: Optional[float] = Field(None, ge=0)
    deadline: Optional[datetime] = None
    status: Optional[ContestStatus] = None

    class Config:
        extra = "allow"

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        return _split_tags(value)


class WinnerDeclaration(BaseModel):
    """Result fields copied onto a contest and everything that references it"""
    contest_id: str
    result: str = Field(..., min_length=1)
    winner_name: Optional[str] = None
    winner_email: Email
    winner_image: Optional[str] = None
