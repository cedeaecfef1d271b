# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Identities are managed through the Supabase Auth admin API (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id on delete cascade)
- username: text (nullable)
- full_name: text (nullable)
- is_admin: boolean (not null, default: false)

Note: profile rows are provisioned by a database trigger when Supabase Auth
creates a user. This service only reads and updates them; a user without a
row is treated as a non-admin.
"""
