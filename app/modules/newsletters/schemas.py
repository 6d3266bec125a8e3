from pydantic import BaseModel
from typing import Literal, Optional
from datetime import datetime


class NewsletterCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    drive_folder_id: Optional[str] = None


class NewsletterUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    drive_folder_id: Optional[str] = None


class NewsletterResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    description: Optional[str] = None
    drive_folder_id: str
    status: Literal["draft", "scheduled", "sent"] = "draft"
    created_at: Optional[datetime] = None
    last_sent_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NewsletterWithRoleResponse(NewsletterResponse):
    role: str


class SuccessResponse(BaseModel):
    success: bool = True
