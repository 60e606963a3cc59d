# juliecraft/core/config.py

import os
from dotenv import load_dotenv

# ***************************************************************
# 1. Load the .env file (if present) before reading any variable
# ***************************************************************
load_dotenv()


def _get_int(name: str, default: int) -> int:
    """Reads an integer environment variable, falling back to the default."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


# ***************************************************************
# 2. Database
# ***************************************************************
# No default on purpose: an unset URL means the backend is not configured
DATABASE_URL = os.getenv("DATABASE_URL")

# ***************************************************************
# 3. Tokens and passwords
# ***************************************************************
DEFAULT_JWT_SECRET = "change-me-in-production"
JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_DAYS = _get_int("ACCESS_TOKEN_EXPIRE_DAYS", 7)
RESET_CODE_EXPIRE_MINUTES = _get_int("RESET_CODE_EXPIRE_MINUTES", 60)

# ***************************************************************
# 4. Inventory
# ***************************************************************
# Products with stock strictly below this value count as low stock
LOW_STOCK_THRESHOLD = _get_int("LOW_STOCK_THRESHOLD", 10)

# ***************************************************************
# 5. HTTP, logging and mail
# ***************************************************************
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = _get_int("SMTP_PORT", 587)
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@juliecraft.com")
