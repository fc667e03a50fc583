import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

EMAIL_DOMAIN = os.getenv("EMAIL_DOMAIN", "gasc.edu")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Page loads refetch data older than this; idle workspaces are closed
STATE_MAX_AGE_SECONDS = float(os.getenv("STATE_MAX_AGE_SECONDS", "60"))
WORKSPACE_IDLE_SECONDS = float(os.getenv("WORKSPACE_IDLE_SECONDS", "7200"))
