from pydantic import BaseModel
from typing import Optional


class MemberInvite(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None


class MemberResponse(BaseModel):
    id: str
    role: str
    email: str = ""
    name: str = ""
