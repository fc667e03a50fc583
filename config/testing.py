SECRET_KEY = "test-secret"

SUPABASE_URL = "http://localhost:54321"
SUPABASE_ANON_KEY = "test-anon-key"

EMAIL_DOMAIN = "gasc.edu"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STATE_MAX_AGE_SECONDS = 3600
WORKSPACE_IDLE_SECONDS = 3600
