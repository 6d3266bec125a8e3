import hmac
import logging
from fastapi import APIRouter, Depends, Header
from app.config.settings import settings
from app.core.exceptions import NotAuthenticatedError
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import IdentityEvent, WebhookResponse
from app.modules.users.service import UserService
from supabase import Client
from typing import Optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


def verify_webhook_secret(x_webhook_secret: Optional[str] = Header(default=None)) -> None:
    if not settings.webhook_secret:
        return
    if not x_webhook_secret or not hmac.compare_digest(x_webhook_secret, settings.webhook_secret):
        raise NotAuthenticatedError("Invalid webhook secret")


@router.post("/identity", response_model=WebhookResponse, dependencies=[Depends(verify_webhook_secret)])
async def identity_webhook(
    event: IdentityEvent,
    service: UserService = Depends(get_user_service)
):
    """Receive identity provider events; user.created ensures the local users row"""
    logger.info(f"Identity webhook received: {event.type}")
    if event.type == "user.created":
        user_id = event.data.get("id")
        if not user_id:
            logger.warning("user.created event without an id, ignoring")
            return WebhookResponse()
        service.ensure_user(str(user_id))
    else:
        logger.info(f"Ignoring webhook event type: {event.type}")
    return WebhookResponse()
