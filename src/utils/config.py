import os

APP_TITLE = "Shop Admin"

# backend
API_BASE_URL = os.getenv("SHOPADMIN_API_URL", "http://localhost:3000/api").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("SHOPADMIN_TIMEOUT", "10"))

# large videos can take a while, 30 minutes
UPLOAD_TIMEOUT = float(os.getenv("SHOPADMIN_UPLOAD_TIMEOUT", str(30 * 60)))

# persisted client state (token, profile, currency)
SESSION_DB_PATH = os.getenv("SHOPADMIN_SESSION_DB", "data/session.sqlite")

# use PUT /carousel-images/reorder instead of one update per image
BATCH_REORDER = os.getenv("SHOPADMIN_BATCH_REORDER", "").lower() in ("1", "true", "yes")

DEBUG = bool(os.getenv("DEBUG"))
# rich log output goes here instead of the terminal textual is drawing on
LOG_FILE = os.getenv("SHOPADMIN_LOG_FILE", "")

MB = 1024 * 1024
MAX_CAROUSEL_IMAGE_BYTES = 5 * MB
MAX_SETTINGS_IMAGE_BYTES = 50 * MB
MAX_SETTINGS_VIDEO_BYTES = 500 * MB

CURRENCIES = ("USD", "AED")
