"""
Core dependencies for route protection and newsletter access checks
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.access import AccessResult, resolve_access
from app.core.exceptions import InternalError, NotAuthenticatedError, NotAuthorizedError, NotFoundError
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# auto_error is off so a missing header is reported as 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError()
    return auth_service.get_current_user(credentials.credentials)


def check_newsletter_access(newsletter_id: str, user_id: str, supabase: Client) -> AccessResult:
    """Resolve access and turn a missing newsletter or missing role into 404 / 403"""
    try:
        access = resolve_access(supabase, user_id, newsletter_id)
    except Exception as e:
        logger.error(f"Error resolving access to newsletter {newsletter_id}: {e}")
        raise InternalError()
    if not access.found:
        raise NotFoundError("Newsletter not found")
    if not access.authorized:
        raise NotAuthorizedError("Not authorized to access this newsletter")
    return access


def require_newsletter_access(
    newsletter_id: str,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> AccessResult:
    """Dependency: caller must be the owner or a member of the newsletter in the path"""
    return check_newsletter_access(newsletter_id, user_data["id"], supabase)


def require_newsletter_owner(
    newsletter_id: str,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> AccessResult:
    """Dependency: caller must own the newsletter in the path"""
    access = check_newsletter_access(newsletter_id, user_data["id"], supabase)
    if not access.is_owner:
        raise NotAuthorizedError("Only the newsletter owner can perform this action")
    return access
