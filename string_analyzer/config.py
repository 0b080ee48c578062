import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables only for local development
if os.path.exists(".env"):
    load_dotenv()

# ------------------------------------------------------------------------------
# DATABASE
# ------------------------------------------------------------------------------

DEFAULT_DATABASE_URL = "sqlite:///./strings.db"

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "sql").lower()

# ------------------------------------------------------------------------------
# SERVER
# ------------------------------------------------------------------------------

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_database_url() -> str:
    """Resolve DATABASE_URL, normalizing driver prefixes SQLAlchemy expects."""
    url = os.getenv("DATABASE_URL")

    if not url:
        logger.warning("DATABASE_URL not found in environment, using local SQLite database.")
        url = DEFAULT_DATABASE_URL

    # Hosting providers hand out plain mysql:// URLs
    if url.startswith("mysql://"):
        url = url.replace("mysql://", "mysql+pymysql://", 1)

    return url


def configure_logging():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
