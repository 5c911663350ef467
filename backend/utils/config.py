"""Configuration from environment."""
import os

PORT = int(os.environ.get("PORT", "8001"))

TESTING = os.environ.get("TESTING") == "true"

# When TESTING=true, use test DB URL so tests never touch production.
if TESTING:
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./ev_dashboard.db",
    )

# Signed session tokens (HS256 by default).
JWT_SECRET = os.environ.get("JWT_SECRET", "change-me-please")
JWT_ALG = os.environ.get("JWT_ALG", "HS256")
ACCESS_TTL = int(os.environ.get("JWT_ACCESS_TTL", "86400"))  # 24h

SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "session_token")
COOKIE_SECURE = os.environ.get("COOKIE_SECURE", "false").lower() == "true"

CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

SEED_DEMO_DATA = os.environ.get("SEED_DEMO_DATA", "false" if TESTING else "true").lower() == "true"

# IANA zone whose calendar days the dashboard's daily series is bucketed by.
DASHBOARD_TZ = os.environ.get("DASHBOARD_TZ", "UTC")
