from supabase import Client
from app.modules.newsletters.schemas import (
    NewsletterCreate, NewsletterUpdate, NewsletterResponse, NewsletterWithRoleResponse
)
from app.modules.users.service import UserService
from app.core.access import OWNER_ROLE, MEMBER_ROLE, AccessResult
from app.core.exceptions import InternalError, ValidationError
from app.core.validation import clean_optional
from fastapi import HTTPException
from typing import List, Tuple
import logging

logger = logging.getLogger(__name__)


def _require_settings(name, drive_folder_id) -> Tuple[str, str]:
    name = clean_optional(name)
    drive_folder_id = clean_optional(drive_folder_id)
    if not name or not drive_folder_id:
        raise ValidationError("Name and Drive folder ID are required")
    return name, drive_folder_id


class NewsletterService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_newsletter(self, newsletter_data: NewsletterCreate, user_id: str) -> NewsletterResponse:
        """Create a newsletter owned by user_id, creating the users row first if needed"""
        name, drive_folder_id = _require_settings(newsletter_data.name, newsletter_data.drive_folder_id)
        try:
            UserService(self.supabase).ensure_user(user_id)

            result = self.supabase.table("newsletters").insert({
                "owner_id": user_id,
                "name": name,
                "description": clean_optional(newsletter_data.description),
                "drive_folder_id": drive_folder_id,
                "status": "draft"
            }).execute()

            if not result.data:
                raise InternalError("Failed to create newsletter")

            logger.info(f"Newsletter {result.data[0]['id']} created by {user_id}")
            return NewsletterResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating newsletter: {e}")
            raise InternalError("Failed to create newsletter")

    def list_newsletters(self, user_id: str) -> List[NewsletterWithRoleResponse]:
        """Newsletters the user owns, then newsletters they are a member of"""
        try:
            owned_result = self.supabase.table("newsletters")\
                .select("*")\
                .eq("owner_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            owned = owned_result.data or []

            memberships_result = self.supabase.table("newsletter_users")\
                .select("newsletter_id, role")\
                .eq("user_id", user_id)\
                .execute()
            owned_ids = {n["id"] for n in owned}
            member_roles = {
                m["newsletter_id"]: m.get("role") or MEMBER_ROLE
                for m in (memberships_result.data or [])
                if m["newsletter_id"] not in owned_ids
            }

            member_newsletters = []
            if member_roles:
                member_result = self.supabase.table("newsletters")\
                    .select("*")\
                    .in_("id", list(member_roles))\
                    .order("created_at", desc=True)\
                    .execute()
                member_newsletters = member_result.data or []
        except Exception as e:
            logger.error(f"Error listing newsletters for {user_id}: {e}")
            raise InternalError("Failed to fetch newsletters")

        newsletters = [NewsletterWithRoleResponse(**n, role=OWNER_ROLE) for n in owned]
        newsletters.extend(
            NewsletterWithRoleResponse(**n, role=member_roles[n["id"]]) for n in member_newsletters
        )
        return newsletters

    def get_newsletter(self, access: AccessResult) -> NewsletterWithRoleResponse:
        """Newsletter record already loaded by the access check, tagged with the caller's role"""
        return NewsletterWithRoleResponse(**access.newsletter, role=access.role.name)

    def update_newsletter(self, newsletter_id: str, newsletter_data: NewsletterUpdate) -> bool:
        """Replace name, description and folder. owner_id and status are not updatable here."""
        name, drive_folder_id = _require_settings(newsletter_data.name, newsletter_data.drive_folder_id)
        try:
            self.supabase.table("newsletters")\
                .update({
                    "name": name,
                    "description": clean_optional(newsletter_data.description),
                    "drive_folder_id": drive_folder_id,
                })\
                .eq("id", newsletter_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating newsletter {newsletter_id}: {e}")
            raise InternalError("Failed to update newsletter")
        logger.info(f"Newsletter {newsletter_id} settings updated")
        return True
