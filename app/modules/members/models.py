# Supabase tables: newsletter_users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

newsletter_users:
- newsletter_id: uuid (foreign key to newsletters.id, not null)
- user_id: text (foreign key to users.id, not null)
- role: text (not null, default: 'user') - only 'user' is stored
- primary key on (newsletter_id, user_id)

The owner never has a row here: ownership is newsletters.owner_id.
"""
