from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.contacts.schemas import ContactCreate, ContactResponse
from app.modules.contacts.service import ContactService
from app.modules.newsletters.schemas import SuccessResponse
from app.core.access import AccessResult
from app.core.dependencies import require_newsletter_access
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/newsletters/{newsletter_id}/contacts", tags=["contacts"])


def get_contact_service(supabase: Client = Depends(get_supabase)) -> ContactService:
    return ContactService(supabase)


@router.get("", response_model=List[ContactResponse])
async def list_contacts(
    newsletter_id: str,
    search: Optional[str] = None,
    access: AccessResult = Depends(require_newsletter_access),
    service: ContactService = Depends(get_contact_service)
):
    """List contacts ordered by email, optionally filtered by a search term"""
    return service.list_contacts(newsletter_id, search=search)


@router.post("", response_model=ContactResponse, status_code=201)
async def add_contact(
    newsletter_id: str,
    contact_data: ContactCreate,
    access: AccessResult = Depends(require_newsletter_access),
    service: ContactService = Depends(get_contact_service)
):
    """Add a contact (owner or member); duplicate emails are rejected"""
    return service.add_contact(newsletter_id, contact_data)


@router.delete("/{contact_id}", response_model=SuccessResponse)
async def delete_contact(
    newsletter_id: str,
    contact_id: str,
    access: AccessResult = Depends(require_newsletter_access),
    service: ContactService = Depends(get_contact_service)
):
    service.delete_contact(newsletter_id, contact_id)
    return SuccessResponse()


@router.post("/{contact_id}/unsubscribe", response_model=SuccessResponse)
async def unsubscribe_contact(
    newsletter_id: str,
    contact_id: str,
    access: AccessResult = Depends(require_newsletter_access),
    service: ContactService = Depends(get_contact_service)
):
    service.unsubscribe_contact(newsletter_id, contact_id)
    return SuccessResponse()


@router.post("/{contact_id}/resubscribe", response_model=SuccessResponse)
async def resubscribe_contact(
    newsletter_id: str,
    contact_id: str,
    access: AccessResult = Depends(require_newsletter_access),
    service: ContactService = Depends(get_contact_service)
):
    service.resubscribe_contact(newsletter_id, contact_id)
    return SuccessResponse()
