# Supabase Auth (auth.users) backs registration and login
# No table of our own; the role-tagged record is public.profiles (see profiles/models.py)

"""
Calls made against Supabase Auth:
- auth.sign_up(): register with {role, first_name, last_name} in user_metadata
- auth.sign_in_with_password(): login; the access token opens a SessionContext
- auth.get_user(jwt=...): rebuild a session for a token not in the registry
- auth.sign_out(): logout, after the SessionContext is closed

The profile row decides the role. user_metadata.role is only a fallback for
accounts whose profile row was never written.
"""
