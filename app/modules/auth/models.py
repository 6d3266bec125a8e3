# Supabase Auth
# Login, sign-up and session management happen in the frontend against
# Supabase Auth directly. This service only verifies bearer tokens.

"""
Supabase Auth provides:
- auth.get_user(jwt=...) - Resolve a JWT to the auth.users record

The resolved identity is exposed to routes as a dict:
{id, email, user_metadata, app_metadata, created_at, updated_at}
"""
