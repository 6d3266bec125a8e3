import logging
from fastapi import APIRouter, Depends, Request
from app.config.settings import settings
from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase
from app.modules.contacts.schemas import PublicSubscribeRequest, PublicNewsletterResponse
from app.modules.contacts.service import ContactService
from app.modules.newsletters.schemas import SuccessResponse
from supabase import Client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/public", tags=["public"])


def get_contact_service(supabase: Client = Depends(get_supabase)) -> ContactService:
    return ContactService(supabase)


@router.get("/newsletters/{newsletter_id}", response_model=PublicNewsletterResponse)
async def get_public_newsletter(
    newsletter_id: str,
    service: ContactService = Depends(get_contact_service)
):
    """Name and description for the public signup page"""
    return service.get_public_newsletter(newsletter_id)


@router.post("/subscribe", response_model=SuccessResponse)
@limiter.limit(settings.public_subscribe_rate_limit)
async def public_subscribe(
    request: Request,
    subscription: PublicSubscribeRequest,
    service: ContactService = Depends(get_contact_service)
):
    """Public opt-in. The response is the same for new, returning and existing subscribers."""
    outcome = service.public_subscribe(subscription)
    logger.debug(f"Public subscribe outcome: {outcome.value}")
    return SuccessResponse()
