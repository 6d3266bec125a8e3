"""
Contact lifecycle for a newsletter.

Per (newsletter_id, email) a contact is absent, subscribed or unsubscribed.
Subscription state is never stored on the contact itself: an unsubscribes row
means unsubscribed, no row means subscribed. Deleting a contact removes it
(and its unsubscribes row) for good.

Owner/member additions reject duplicates. Public opt-in is idempotent and
answers identically whether the address was new, unsubscribed or already
subscribed, so the public endpoint cannot be used to probe the list.
"""

from enum import Enum
from supabase import Client
from app.modules.contacts.schemas import ContactCreate, ContactResponse, PublicSubscribeRequest, PublicNewsletterResponse
from app.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from app.core.validation import clean_optional, normalize_email
from app.database.queries import fetch_one, is_unique_violation, utc_now_iso
from fastapi import HTTPException
from typing import Any, Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


class SubscribeOutcome(str, Enum):
    CREATED = "created"
    RESUBSCRIBED = "resubscribed"
    ALREADY_SUBSCRIBED = "already_subscribed"


def filter_contacts(contacts: Iterable[ContactResponse], search: Optional[str]) -> List[ContactResponse]:
    """Case-insensitive substring match on email, first name or last name"""
    contacts = list(contacts)
    term = (search or "").strip().lower()
    if not term:
        return contacts
    return [
        c for c in contacts
        if term in c.email.lower()
        or (c.first_name and term in c.first_name.lower())
        or (c.last_name and term in c.last_name.lower())
    ]


class ContactService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Reads

    def _get_contact(self, newsletter_id: str, contact_id: str) -> Dict[str, Any]:
        contact = fetch_one(
            self.supabase.table("contacts")
            .select("*")
            .eq("id", contact_id)
            .eq("newsletter_id", newsletter_id)
        )
        if contact is None:
            raise NotFoundError("Contact not found")
        return contact

    def _find_by_email(self, newsletter_id: str, email: str) -> Optional[Dict[str, Any]]:
        return fetch_one(
            self.supabase.table("contacts")
            .select("*")
            .eq("newsletter_id", newsletter_id)
            .eq("email", email)
        )

    def _get_unsubscribe(self, contact_id: str) -> Optional[Dict[str, Any]]:
        return fetch_one(
            self.supabase.table("unsubscribes")
            .select("*")
            .eq("contact_id", contact_id)
        )

    def _unsubscribed_at(self, contact_ids: List[str]) -> Dict[str, Any]:
        if not contact_ids:
            return {}
        result = self.supabase.table("unsubscribes")\
            .select("contact_id, unsubscribed_at")\
            .in_("contact_id", contact_ids)\
            .execute()
        return {row["contact_id"]: row["unsubscribed_at"] for row in (result.data or [])}

    @staticmethod
    def _to_response(contact: Dict[str, Any], unsubscribes: Dict[str, Any]) -> ContactResponse:
        unsubscribed = contact["id"] in unsubscribes
        return ContactResponse(
            **contact,
            is_subscribed=not unsubscribed,
            unsubscribed_at=unsubscribes.get(contact["id"]),
        )

    def list_contacts(self, newsletter_id: str, search: Optional[str] = None) -> List[ContactResponse]:
        """Contacts ordered by email, each with its derived subscription state"""
        try:
            result = self.supabase.table("contacts")\
                .select("*")\
                .eq("newsletter_id", newsletter_id)\
                .order("email")\
                .execute()
            contacts = result.data or []
            unsubscribes = self._unsubscribed_at([c["id"] for c in contacts])
        except Exception as e:
            logger.error(f"Error fetching contacts for {newsletter_id}: {e}")
            raise InternalError("Failed to fetch contacts")

        return filter_contacts((self._to_response(c, unsubscribes) for c in contacts), search)

    # Owner / member transitions

    def add_contact(self, newsletter_id: str, contact_data: ContactCreate) -> ContactResponse:
        """Create a subscribed contact. Duplicate email for the newsletter is a conflict in any state."""
        email = normalize_email(contact_data.email)
        try:
            if self._find_by_email(newsletter_id, email):
                raise ConflictError("Contact with this email already exists")

            result = self.supabase.table("contacts").insert({
                "newsletter_id": newsletter_id,
                "email": email,
                "first_name": clean_optional(contact_data.first_name),
                "last_name": clean_optional(contact_data.last_name),
            }).execute()

            if not result.data:
                raise InternalError("Failed to add contact")
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError("Contact with this email already exists")
            logger.error(f"Error adding contact to {newsletter_id}: {e}")
            raise InternalError("Failed to add contact")

        logger.info(f"Contact {result.data[0]['id']} added to newsletter {newsletter_id}")
        return self._to_response(result.data[0], {})

    def unsubscribe_contact(self, newsletter_id: str, contact_id: str) -> bool:
        try:
            self._get_contact(newsletter_id, contact_id)
            if self._get_unsubscribe(contact_id):
                raise ConflictError("Contact is already unsubscribed")

            self.supabase.table("unsubscribes").insert({
                "contact_id": contact_id,
                "unsubscribed_at": utc_now_iso(),
            }).execute()
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError("Contact is already unsubscribed")
            logger.error(f"Error unsubscribing contact {contact_id}: {e}")
            raise InternalError("Failed to unsubscribe contact")

        logger.info(f"Contact {contact_id} unsubscribed from newsletter {newsletter_id}")
        return True

    def resubscribe_contact(self, newsletter_id: str, contact_id: str) -> bool:
        """Remove the unsubscribes row if any. Resubscribing a subscribed contact is a no-op."""
        try:
            self._get_contact(newsletter_id, contact_id)
            self.supabase.table("unsubscribes")\
                .delete()\
                .eq("contact_id", contact_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error resubscribing contact {contact_id}: {e}")
            raise InternalError("Failed to resubscribe contact")

        logger.info(f"Contact {contact_id} resubscribed to newsletter {newsletter_id}")
        return True

    def delete_contact(self, newsletter_id: str, contact_id: str) -> bool:
        """Hard delete; the unsubscribes row goes with it"""
        try:
            self._get_contact(newsletter_id, contact_id)
            self.supabase.table("unsubscribes")\
                .delete()\
                .eq("contact_id", contact_id)\
                .execute()
            self.supabase.table("contacts")\
                .delete()\
                .eq("id", contact_id)\
                .eq("newsletter_id", newsletter_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting contact {contact_id}: {e}")
            raise InternalError("Failed to delete contact")

        logger.info(f"Contact {contact_id} deleted from newsletter {newsletter_id}")
        return True

    # Public surface: never return storage error text

    def get_public_newsletter(self, newsletter_id: str) -> PublicNewsletterResponse:
        try:
            newsletter = fetch_one(
                self.supabase.table("newsletters")
                .select("id, name, description")
                .eq("id", newsletter_id)
            )
        except Exception:
            logger.exception(f"Error fetching public newsletter {newsletter_id}")
            raise InternalError()
        if newsletter is None:
            raise NotFoundError("Newsletter not found")
        return PublicNewsletterResponse(**newsletter)

    def public_subscribe(self, request: PublicSubscribeRequest) -> SubscribeOutcome:
        """Idempotent opt-in: create, resubscribe, or leave an existing subscription alone"""
        newsletter_id = clean_optional(request.newsletter_id)
        if not newsletter_id or not clean_optional(request.email):
            raise ValidationError("Newsletter ID and email are required")
        email = normalize_email(request.email)

        try:
            newsletter = fetch_one(
                self.supabase.table("newsletters")
                .select("id")
                .eq("id", newsletter_id)
            )
            if newsletter is None:
                raise NotFoundError("Newsletter not found")

            existing = self._find_by_email(newsletter_id, email)
            if existing is None:
                try:
                    result = self.supabase.table("contacts").insert({
                        "newsletter_id": newsletter_id,
                        "email": email,
                        "first_name": clean_optional(request.first_name),
                        "last_name": clean_optional(request.last_name),
                    }).execute()
                    logger.info(f"Public subscription created contact {result.data[0]['id']} on {newsletter_id}")
                    return SubscribeOutcome.CREATED
                except Exception as e:
                    if not is_unique_violation(e):
                        raise
                    # A concurrent opt-in created the same contact first
                    existing = self._find_by_email(newsletter_id, email)
                    if existing is None:
                        raise

            return self._ensure_subscribed(existing)
        except HTTPException:
            raise
        except Exception:
            logger.exception(f"Public subscription to {newsletter_id} failed")
            raise InternalError()

    def _ensure_subscribed(self, contact: Dict[str, Any]) -> SubscribeOutcome:
        if self._get_unsubscribe(contact["id"]) is None:
            return SubscribeOutcome.ALREADY_SUBSCRIBED
        self.supabase.table("unsubscribes")\
            .delete()\
            .eq("contact_id", contact["id"])\
            .execute()
        logger.info(f"Public subscription resubscribed contact {contact['id']}")
        return SubscribeOutcome.RESUBSCRIBED
