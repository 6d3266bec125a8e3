from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.newsletters.schemas import (
    NewsletterCreate, NewsletterUpdate, NewsletterResponse, NewsletterWithRoleResponse, SuccessResponse
)
from app.modules.newsletters.service import NewsletterService
from app.core.access import AccessResult
from app.core.dependencies import get_current_user_id, require_newsletter_access, require_newsletter_owner
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/newsletters", tags=["newsletters"])


def get_newsletter_service(supabase: Client = Depends(get_supabase)) -> NewsletterService:
    return NewsletterService(supabase)


@router.post("", response_model=NewsletterResponse, status_code=201)
async def create_newsletter(
    newsletter_data: NewsletterCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: NewsletterService = Depends(get_newsletter_service)
):
    """Create a newsletter; the caller becomes its owner"""
    return service.create_newsletter(newsletter_data, user_data["id"])


@router.get("", response_model=List[NewsletterWithRoleResponse])
async def list_newsletters(
    user_data: Dict = Depends(get_current_user_id),
    service: NewsletterService = Depends(get_newsletter_service)
):
    """List newsletters the caller owns or is a member of"""
    return service.list_newsletters(user_data["id"])


@router.get("/{newsletter_id}", response_model=NewsletterWithRoleResponse)
async def get_newsletter(
    access: AccessResult = Depends(require_newsletter_access),
    service: NewsletterService = Depends(get_newsletter_service)
):
    """Get a newsletter with the caller's role (owner or member)"""
    return service.get_newsletter(access)


@router.patch("/{newsletter_id}", response_model=SuccessResponse)
async def update_newsletter(
    newsletter_id: str,
    newsletter_data: NewsletterUpdate,
    access: AccessResult = Depends(require_newsletter_owner),
    service: NewsletterService = Depends(get_newsletter_service)
):
    """Update newsletter settings (owner only)"""
    service.update_newsletter(newsletter_id, newsletter_data)
    return SuccessResponse()
