# Supabase tables: users, user_profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: text (primary key) - identity provider subject id
- created_at: timestamp (default: now())

Rows are created lazily the first time a user creates a newsletter, or when
the identity provider reports a user.created event. Never updated or deleted
by this service.

user_profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (unique, not null) - synced from auth.users
- full_name: text (nullable)
- created_at: timestamp (default: now())

user_profiles is the user directory: it resolves an invite email to a user id
and supplies display details for the members list. It is maintained by a
trigger on auth.users and only read here.
"""
