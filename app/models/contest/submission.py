from pydantic import BaseModel, Field
from typing import Optional

from app.models.email import Email


class SubmissionCreate(BaseModel):
    """Schema for submitting an entry to a contest"""
    contest_id: str
    participant_email: Email
    participant_name: Optional[str] = None
    participant_image: Optional[str] = None
    task: str = Field(..., min_length=1, description="Submitted work (text or link)")

    class Config:
        extra = "allow"
