# app/core/config.py

import os
from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------
# LOGGING
# ---------------------------------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------
# PROFILE API (the backend that owns user profiles)
# ---------------------------------------------------

PROFILE_API_BASE_URL = os.getenv("PROFILE_API_BASE_URL", "http://127.0.0.1:8001").rstrip("/")
PROFILE_API_TIMEOUT = float(os.getenv("PROFILE_API_TIMEOUT", "10"))

# ---------------------------------------------------
# REDIS (questionnaire flags + in-progress sessions)
# ---------------------------------------------------

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
QUESTIONNAIRE_SESSION_TTL = int(os.getenv("QUESTIONNAIRE_SESSION_TTL", "3600"))

# ---------------------------------------------------
# AUTH
# ---------------------------------------------------

ALGORITHM = os.getenv("ALGORITHM", "HS256")


def get_jwt_secret_key() -> str:
    """Read the JWT secret lazily so importing the app never requires it."""
    secret = os.getenv("JWT_SECRET_KEY")
    if not secret:
        raise RuntimeError("Missing JWT_SECRET_KEY environment variable")
    return secret
