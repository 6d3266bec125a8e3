import pytest
from fastapi.testclient import TestClient

from app.core.rate_limit import limiter
from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.auth.service import clear_auth_cache
from tests.fakes import FakeSupabase

OWNER_ID = "11111111-1111-1111-1111-111111111111"
MEMBER_ID = "22222222-2222-2222-2222-222222222222"
OUTSIDER_ID = "33333333-3333-3333-3333-333333333333"

USERS = {
    OWNER_ID: ("owner@example.com", "Olivia Owner"),
    MEMBER_ID: ("member@example.com", "Max Member"),
    OUTSIDER_ID: ("outsider@example.com", "Oscar Outsider"),
}


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer token-{user_id}"}


@pytest.fixture(autouse=True)
def _reset_process_state():
    clear_auth_cache()
    limiter.reset()
    yield
    clear_auth_cache()


@pytest.fixture
def store():
    fake = FakeSupabase()
    for user_id, (email, full_name) in USERS.items():
        fake.auth.add_user(f"token-{user_id}", user_id, email)
        fake.seed("user_profiles", id=user_id, email=email, full_name=full_name)
    fake.seed("users", id=OWNER_ID)
    return fake


@pytest.fixture
def client(store):
    app.dependency_overrides[get_supabase] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def newsletter(store):
    """Newsletter "Digest" owned by OWNER_ID, with MEMBER_ID as a member"""
    row = store.seed(
        "newsletters",
        owner_id=OWNER_ID,
        name="Digest",
        description="Weekly digest",
        drive_folder_id="F1",
    )
    store.seed("users", id=MEMBER_ID)
    store.seed("newsletter_users", newsletter_id=row["id"], user_id=MEMBER_ID, role="user")
    return row
