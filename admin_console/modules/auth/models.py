# Supabase Auth
# The console signs staff in through Supabase's built-in authentication.
# Admin rights are not taken from auth metadata: they live in profiles.is_admin
# and are read when the console session is built (core/dependencies.py).

"""
Supabase Auth calls used here:
- auth.sign_in_with_password() - staff sign-in and the default-admin shortcut
- auth.get_user() - resolve the bearer token on every console request
- auth.sign_out() - logout

Member registration happens outside the console.
"""
