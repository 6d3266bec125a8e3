"""
Small helpers shared by the services that talk to the Supabase query builder.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError

UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"


def fetch_one(query) -> Optional[Dict[str, Any]]:
    """Execute a filtered select and return the first row, or None when nothing matched.

    Used instead of .single(), which raises PGRST116 on an empty result and makes
    "no row found" indistinguishable from other store errors. An id that is not a
    valid UUID cannot match a UUID column, so Postgres' 22P02 is also None.
    """
    try:
        result = query.limit(1).execute()
    except APIError as e:
        if e.code == INVALID_TEXT_REPRESENTATION:
            return None
        raise
    if not result.data:
        return None
    return result.data[0]


def is_unique_violation(exc: Exception) -> bool:
    return isinstance(exc, APIError) and exc.code == UNIQUE_VIOLATION


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
