# Supabase tables: newsletters
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

newsletters:
- id: uuid (primary key, default: gen_random_uuid())
- owner_id: text (foreign key to users.id, not null) - immutable after creation
- name: text (not null)
- description: text (nullable)
- drive_folder_id: text (not null) - opaque reference to the content folder
- status: text (not null, default: 'draft') - values: draft, scheduled, sent
- created_at: timestamp (default: now())
- last_sent_at: timestamp (nullable)
"""