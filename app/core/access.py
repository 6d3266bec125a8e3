"""
Newsletter access resolution.

Ownership comes from newsletters.owner_id and is never stored as a membership
row. Members are rows in newsletter_users with role "user". The resolver turns
both into a single Role value so callers never have to reconcile the two.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import logging

from supabase import Client

from app.database.queries import fetch_one

logger = logging.getLogger(__name__)

OWNER_ROLE = "owner"
MEMBER_ROLE = "user"


@dataclass(frozen=True)
class Owner:
    @property
    def name(self) -> str:
        return OWNER_ROLE


@dataclass(frozen=True)
class Member:
    role: str = MEMBER_ROLE

    @property
    def name(self) -> str:
        return self.role


Role = Union[Owner, Member]


@dataclass(frozen=True)
class AccessResult:
    found: bool
    role: Optional[Role] = None
    newsletter: Optional[Dict[str, Any]] = None

    @property
    def authorized(self) -> bool:
        return self.found and self.role is not None

    @property
    def is_owner(self) -> bool:
        return isinstance(self.role, Owner)


def resolve_access(supabase: Client, user_id: str, newsletter_id: str) -> AccessResult:
    """Resolve the role of user_id on newsletter_id. Read-only."""
    newsletter = fetch_one(
        supabase.table("newsletters")
        .select("*")
        .eq("id", newsletter_id)
    )
    if newsletter is None:
        return AccessResult(found=False)

    # Owner wins even if a stray membership row exists for the same user
    if newsletter.get("owner_id") == user_id:
        return AccessResult(found=True, role=Owner(), newsletter=newsletter)

    membership = fetch_one(
        supabase.table("newsletter_users")
        .select("role")
        .eq("newsletter_id", newsletter_id)
        .eq("user_id", user_id)
    )
    if membership is None:
        logger.info("Access denied: user %s on newsletter %s", user_id, newsletter_id)
        return AccessResult(found=True, role=None, newsletter=newsletter)

    return AccessResult(
        found=True,
        role=Member(role=membership.get("role") or MEMBER_ROLE),
        newsletter=newsletter,
    )
