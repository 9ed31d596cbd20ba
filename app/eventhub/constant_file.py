from dotenv import load_dotenv
import os

# Load environment variables from .env
load_dotenv()

# ------------------ Database ------------------
DATABASE_URL = os.getenv("DATABASE_URL")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", 5433)
DB_NAME = os.getenv("DB_NAME")

# ------------------ JWT ------------------
jwt_secret_key = os.getenv("JWT_SECRET_KEY")
jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
access_token_expires_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRES_MINUTES", 15))
refresh_token_expires_days = int(os.getenv("REFRESH_TOKEN_EXPIRES_DAYS", 7))
refresh_token_bytes = 64

# ------------------ Cookies ------------------
access_token_cookie = "Access-Token"
refresh_token_cookie = "Refresh-Token"
cookie_secure = os.getenv("COOKIE_SECURE", "true").lower() in ("1", "true", "yes")

# ------------------ Roles ------------------
ROLE_ADMIN = "Admin"
ROLE_USER = "User"
DEFAULT_ROLES = (ROLE_ADMIN, ROLE_USER)

# ------------------ Seed admin ------------------
admin_email = os.getenv("ADMIN_EMAIL", "tempMail@abc.com")
admin_password = os.getenv("ADMIN_PASSWORD")

# ------------------ Uploads ------------------
upload_base_path = os.getenv("UPLOAD_BASE_PATH", "uploads")
upload_url_prefix = "/uploads"
event_images_dir = "images/eventImages"
max_image_size = 10 * 1024 * 1024

# ------------------ Pagination ------------------
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
FALLBACK_PAGE_SIZE = 10

# ------------------ Logging ------------------
log_level = os.getenv("LOG_LEVEL", "INFO")
log_json = os.getenv("LOG_JSON", "false").lower() in ("1", "true", "yes")
