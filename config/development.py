import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Hosted backend (Supabase project URL and public anon key)
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# Usernames sign in as <username>@EMAIL_DOMAIN
EMAIL_DOMAIN = os.getenv("EMAIL_DOMAIN", "gasc.edu")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Page loads refetch data older than this; idle workspaces are closed
STATE_MAX_AGE_SECONDS = float(os.getenv("STATE_MAX_AGE_SECONDS", "60"))
WORKSPACE_IDLE_SECONDS = float(os.getenv("WORKSPACE_IDLE_SECONDS", "7200"))
