from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.members.schemas import MemberInvite, MemberResponse
from app.modules.members.service import MemberService
from app.modules.newsletters.schemas import SuccessResponse
from app.core.access import AccessResult
from app.core.dependencies import require_newsletter_access, require_newsletter_owner
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/newsletters/{newsletter_id}/members", tags=["members"])


def get_member_service(supabase: Client = Depends(get_supabase)) -> MemberService:
    return MemberService(supabase)


@router.get("", response_model=List[MemberResponse])
async def list_members(
    access: AccessResult = Depends(require_newsletter_access),
    service: MemberService = Depends(get_member_service)
):
    """List the owner and members of a newsletter (owner or member)"""
    return service.list_members(access.newsletter)


@router.post("", response_model=SuccessResponse)
async def invite_member(
    invite: MemberInvite,
    access: AccessResult = Depends(require_newsletter_owner),
    service: MemberService = Depends(get_member_service)
):
    """Invite an existing user by email (owner only)"""
    service.invite_member(access.newsletter, invite)
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
async def remove_member(
    member_id: Optional[str] = Query(default=None, alias="memberId"),
    access: AccessResult = Depends(require_newsletter_owner),
    service: MemberService = Depends(get_member_service)
):
    """Remove a member (owner only); the owner cannot be removed"""
    service.remove_member(access.newsletter, member_id)
    return SuccessResponse()
