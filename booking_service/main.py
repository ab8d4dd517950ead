import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import FRONTEND_URL, RATE_LIMIT_PER_MINUTE, SERVICE_NAME
from .db import init_db
from .middleware import RateLimitMiddleware, RequestLoggingMiddleware
from .rabbitmq import publisher
from .redis_client import redis_client
from .routes import router
from .schemas import HealthResponse

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "System", "description": "Operational endpoints."},
    {"name": "Rooms", "description": "Rooms and room booking requests."},
    {"name": "Board games", "description": "Board games and game booking requests."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()

    # Never crash the service if RabbitMQ is temporarily unavailable
    try:
        await publisher.connect()
    except Exception as e:
        logger.warning("[%s] RabbitMQ connect failed at startup; continuing without events: %s", SERVICE_NAME, e)

    try:
        yield
    finally:
        try:
            await publisher.close()
        except Exception as e:
            logger.warning("[%s] RabbitMQ close failed: %s", SERVICE_NAME, e)

        if redis_client is not None:
            try:
                await redis_client.aclose()
            except Exception as e:
                logger.warning("[%s] Redis close failed: %s", SERVICE_NAME, e)


app = FastAPI(title="Booking Service", openapi_tags=OPENAPI_TAGS, lifespan=lifespan)
app.include_router(router)

if redis_client is not None:
    app.add_middleware(RateLimitMiddleware, redis_client=redis_client, max_per_minute=RATE_LIMIT_PER_MINUTE)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health():
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        events_enabled=publisher.enabled,
        rate_limit_enabled=redis_client is not None,
    )
