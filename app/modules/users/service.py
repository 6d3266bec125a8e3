from supabase import Client
from app.modules.users.schemas import UserProfile
from app.core.exceptions import InternalError
from app.database.queries import fetch_one, is_unique_violation
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def ensure_user(self, user_id: str) -> bool:
        """Create the users row if it does not exist yet. Returns True when a row was created."""
        try:
            existing = fetch_one(
                self.supabase.table("users")
                .select("id")
                .eq("id", user_id)
            )
            if existing:
                return False

            self.supabase.table("users").insert({"id": user_id}).execute()
            logger.info(f"Created user {user_id}")
            return True
        except Exception as e:
            # Another request created the row between the check and the insert
            if is_unique_violation(e):
                return False
            logger.error(f"Failed to ensure user {user_id}: {e}")
            raise InternalError("Failed to create user")

    def find_by_email(self, email: str) -> Optional[UserProfile]:
        """Resolve an email address to a user through the user directory"""
        try:
            row = fetch_one(
                self.supabase.table("user_profiles")
                .select("id, email, full_name")
                .eq("email", email)
            )
        except Exception as e:
            logger.error(f"Error looking up user by email: {e}")
            raise InternalError("Failed to find user")
        return UserProfile(**row) if row else None

    def get_profiles(self, user_ids: List[str]) -> Dict[str, UserProfile]:
        """Map user id -> profile for the ids that exist in the directory"""
        if not user_ids:
            return {}
        try:
            result = self.supabase.table("user_profiles")\
                .select("id, email, full_name")\
                .in_("id", user_ids)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching user profiles: {e}")
            raise InternalError("Failed to fetch user details")
        return {row["id"]: UserProfile(**row) for row in (result.data or [])}
