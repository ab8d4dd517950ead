import json
import logging
import time
import uuid

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger("booking_service.access")

UNLIMITED_PATHS = ("/docs", "/openapi.json", "/health")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(json.dumps({
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status": 500,
                "duration_ms": round(duration_ms, 2),
            }))
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-Id"] = request_id

        logger.info(json.dumps({
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "user_sub": getattr(request.state, "user_sub", None),
            "user_role": getattr(request.state, "user_role", None),
        }))
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed one-minute window per client ip, counted in redis."""

    def __init__(self, app, redis_client, max_per_minute: int = 100):
        super().__init__(app)
        self.redis = redis_client
        self.max_per_minute = max_per_minute

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in UNLIMITED_PATHS or path.startswith("/docs/"):
            return await call_next(request)

        ip = request.client.host if request.client else "unknown"
        epoch_minute = int(time.time() // 60)
        key = f"rl:ip:{ip}:{epoch_minute}"

        count = await self.redis.incr(key)
        if count == 1:
            await self.redis.expire(key, 70)

        if count > self.max_per_minute:
            return JSONResponse(status_code=429, content={"detail": "Too many requests"})

        return await call_next(request)
