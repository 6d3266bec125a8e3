from fastapi import Request
from supabase import create_client, Client
from app.config.settings import settings


def create_supabase_client() -> Client:
    """Build a client from settings. The service_role key is preferred: access rules live in app.core.access, not in RLS."""
    key = settings.supabase_service_role_key or settings.supabase_key
    return create_client(settings.supabase_url, key)


def get_supabase(request: Request) -> Client:
    """Return the store handle held on app.state, creating it on first use."""
    client = getattr(request.app.state, "supabase", None)
    if client is None:
        client = create_supabase_client()
        request.app.state.supabase = client
    return client
