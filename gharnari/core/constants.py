"""
Ghar Nari - Shared Constants
============================

Centralized constants for the storage engine.
Import from here instead of defining locally.
"""


# =============================================================================
# Posts
# =============================================================================

WORDS_PER_MINUTE = 200


# =============================================================================
# Field Limits
# =============================================================================

MAX_TITLE_LENGTH = 200
MAX_SLUG_LENGTH = 500
MAX_CONTENT_LENGTH = 50000
MAX_EXCERPT_LENGTH = 500
MAX_AUTHOR_LENGTH = 100
MAX_TAGS = 10
MAX_TAG_LENGTH = 50

MAX_COMMENT_LENGTH = 1000
MAX_EMAIL_LENGTH = 100

MAX_SITE_NAME_LENGTH = 100
MAX_TAGLINE_LENGTH = 200
MAX_WELCOME_LENGTH = 500
MAX_ABOUT_LENGTH = 2000
MAX_BIO_LENGTH = 500


# =============================================================================
# URLs & Uploads
# =============================================================================

ALLOWED_URL_SCHEMES = ("http", "https", "mailto")
IMAGE_URL_SCHEMES = ("http", "https")
UPLOADS_PREFIX = "/uploads/"


# =============================================================================
# Collections & Snapshots
# =============================================================================

POSTS_FILE = "posts.json"
COMMENTS_FILE = "comments.json"
SETTINGS_FILE = "settings.json"
ANALYTICS_FILE = "analytics.json"

BACKUP_PREFIX = "backup-"
EXPORT_PREFIX = "export-"
SNAPSHOT_VERSION = "1.0.0"
DEFAULT_MAX_BACKUPS = 30
SECONDS_PER_DAY = 24 * 60 * 60


# =============================================================================
# Default Site Settings
# =============================================================================

DEFAULT_SETTINGS = {
    "siteName": "Ghar nari",
    "tagline": "जहाँ कहानियाँ जिंदगी बन जाती हैं",
    "welcomeMessage": "Welcome to my literary sanctuary - a space where life's stories unfold",
    "aboutSection": (
        "I'm a passionate writer exploring the depths of human experience through words, "
        "capturing the essence of life, society, and the stories that connect us all."
    ),
    "authorName": "Author Name",
    "authorBio": (
        "A storyteller at heart, weaving narratives from life's beautiful moments - "
        "from home to heart, from society to soul."
    ),
    "socialLinks": {},
}
