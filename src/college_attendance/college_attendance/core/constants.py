"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

INSTITUTION_NAME = "Government Arts and Science College"
INSTITUTION_SHORT_NAME = "GASC TPT"
DEFAULT_EMAIL_DOMAIN = "gasc.edu"

DEPARTMENTS = (
    "Tamil",
    "English",
    "History",
    "Economics",
    "Commerce",
    "Business Administration",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Botany",
    "Zoology",
    "Computer Science",
    "Computer Applications",
)

YEARS = ("I Year", "II Year", "III Year")

MIN_PASSWORD_LENGTH = 6

RECENT_ACTIVITY_LIMIT = 5
DEPARTMENT_PREVIEW_LIMIT = 3

RATE_GOOD = 75
RATE_WARNING = 60

REPORT_FILENAME_PREFIX = "GASC_Attendance_Report"
PENDING_ID_PREFIX = "pending-"

# Page loads refetch data older than this
STATE_MAX_AGE_SECONDS = 60
# Signed-in workspaces unused for this long are closed
WORKSPACE_IDLE_SECONDS = 2 * 60 * 60
