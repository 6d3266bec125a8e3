from pydantic import BaseModel
from typing import Any, Dict, Optional


class UserProfile(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None


class IdentityEvent(BaseModel):
    type: str
    data: Dict[str, Any] = {}


class WebhookResponse(BaseModel):
    success: bool = True
