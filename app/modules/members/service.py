from supabase import Client
from app.modules.members.schemas import MemberInvite, MemberResponse
from app.modules.users.service import UserService
from app.core.access import OWNER_ROLE, MEMBER_ROLE
from app.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from app.core.validation import normalize_email
from app.database.queries import fetch_one, is_unique_violation
from fastapi import HTTPException
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class MemberService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.users = UserService(supabase)

    def list_members(self, newsletter: Dict[str, Any]) -> List[MemberResponse]:
        """Owner first (synthesized, not stored), then every membership row, with directory details"""
        try:
            result = self.supabase.table("newsletter_users")\
                .select("user_id, role")\
                .eq("newsletter_id", newsletter["id"])\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching members of {newsletter['id']}: {e}")
            raise InternalError("Failed to fetch members")

        owner_id = newsletter["owner_id"]
        members = [{"user_id": owner_id, "role": OWNER_ROLE}]
        members.extend(m for m in (result.data or []) if m["user_id"] != owner_id)

        profiles = self.users.get_profiles([m["user_id"] for m in members])
        response = []
        for member in members:
            profile = profiles.get(member["user_id"])
            response.append(MemberResponse(
                id=member["user_id"],
                role=member["role"],
                email=profile.email if profile else "",
                name=(profile.full_name or "") if profile else "",
            ))
        return response

    def invite_member(self, newsletter: Dict[str, Any], invite: MemberInvite) -> bool:
        """Add an existing directory user as a member (role "user") by email"""
        if not invite.email:
            raise ValidationError("Email is required")
        if invite.role != MEMBER_ROLE:
            raise ValidationError("Invalid role")
        email = normalize_email(invite.email)

        invited = self.users.find_by_email(email)
        if invited is None:
            raise NotFoundError("User with this email not found")

        newsletter_id = newsletter["id"]
        if invited.id == newsletter["owner_id"]:
            raise ConflictError("User is already the owner of this newsletter")

        try:
            existing = fetch_one(
                self.supabase.table("newsletter_users")
                .select("user_id")
                .eq("newsletter_id", newsletter_id)
                .eq("user_id", invited.id)
            )
            if existing:
                raise ConflictError("User is already a member of this newsletter")

            self.users.ensure_user(invited.id)
            self.supabase.table("newsletter_users").insert({
                "newsletter_id": newsletter_id,
                "user_id": invited.id,
                "role": MEMBER_ROLE,
            }).execute()
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError("User is already a member of this newsletter")
            logger.error(f"Error adding member to {newsletter_id}: {e}")
            raise InternalError("Failed to add member")

        logger.info(f"User {invited.id} added to newsletter {newsletter_id}")
        return True

    def remove_member(self, newsletter: Dict[str, Any], member_id: Optional[str]) -> bool:
        """Delete a membership row. The owner has no row and can never be removed."""
        if not member_id:
            raise ValidationError("Member ID is required")
        if member_id == newsletter["owner_id"]:
            raise ValidationError("Cannot remove the owner")

        newsletter_id = newsletter["id"]
        try:
            result = self.supabase.table("newsletter_users")\
                .delete()\
                .eq("newsletter_id", newsletter_id)\
                .eq("user_id", member_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error removing member {member_id} from {newsletter_id}: {e}")
            raise InternalError("Failed to remove member")

        if not result.data:
            raise NotFoundError("Member not found")
        logger.info(f"User {member_id} removed from newsletter {newsletter_id}")
        return True
