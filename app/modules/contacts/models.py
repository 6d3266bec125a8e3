# Supabase tables: contacts, unsubscribes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

contacts:
- id: uuid (primary key, default: gen_random_uuid())
- newsletter_id: uuid (foreign key to newsletters.id, not null)
- email: text (not null) - stored trimmed and lower-cased
- first_name: text (nullable)
- last_name: text (nullable)
- subscribed_at: timestamp (default: now())
- unique constraint on (newsletter_id, email)

unsubscribes:
- contact_id: uuid (primary key, foreign key to contacts.id ON DELETE CASCADE)
- unsubscribed_at: timestamp (default: now())

A contact is subscribed exactly when it has no unsubscribes row.
"""
