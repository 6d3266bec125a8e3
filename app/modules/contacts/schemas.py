from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ContactCreate(BaseModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ContactResponse(BaseModel):
    id: str
    newsletter_id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    subscribed_at: Optional[datetime] = None
    is_subscribed: bool = True
    unsubscribed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicSubscribeRequest(BaseModel):
    newsletter_id: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class PublicNewsletterResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
