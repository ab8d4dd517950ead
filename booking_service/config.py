import os

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable is not set")

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM") or "HS256"
if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is not set")

FRONTEND_URL = os.getenv("FRONTEND_URL") or "http://localhost:5173"

# optional: rate limiting is skipped without redis, events without rabbit
REDIS_URL = os.getenv("REDIS_URL")
RABBIT_URL = os.getenv("RABBIT_URL")

RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE") or "100")

SQL_ECHO = (os.getenv("SQL_ECHO") or "").lower() in ("1", "true", "yes")

SERVICE_NAME = "booking-service"
