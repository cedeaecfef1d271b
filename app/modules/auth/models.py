# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User login and session issuance (auth.users table)
# - JWT token generation and validation
# - Password hashing and security

"""
Supabase Auth calls used by this service:
- auth.sign_in_with_password() - Exchange email + password for a session (anon key)
- auth.get_user() - Resolve a bearer token to its user (service_role key)

Tokens are never decoded or cached here. Every protected request asks
Supabase to resolve the token again, so revocation and expiry are always
decided by the backend.
"""
