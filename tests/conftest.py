import asyncio
import os
import tempfile

import pytest

# configuration is read at import time, so set it before importing the service
_DB_DIR = tempfile.mkdtemp(prefix="booking-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'booking.db')}"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.pop("REDIS_URL", None)
os.environ.pop("RABBIT_URL", None)

from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402

from booking_service.config import JWT_ALGORITHM, JWT_SECRET  # noqa: E402
from booking_service.db import Base, SessionLocal, engine  # noqa: E402
from booking_service import models  # noqa: E402,F401

ADMIN_ID = 1
STUDENT_ID = 2
OTHER_STUDENT_ID = 3


def run(coro):
    return asyncio.run(coro)


async def _reset():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture(autouse=True)
def clean_db():
    run(_reset())
    yield


@pytest.fixture
def in_session():
    """Run an async callable with a fresh session: in_session(lambda db: ...)."""

    def _run(fn):
        async def _go():
            async with SessionLocal() as db:
                return await fn(db)

        return run(_go())

    return _run


def make_token(user_id, role="student", secret=JWT_SECRET):
    return jwt.encode({"sub": str(user_id), "role": role}, secret, algorithm=JWT_ALGORITHM)


def auth(user_id, role="student"):
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture
def admin_headers():
    return auth(ADMIN_ID, "admin")


@pytest.fixture
def student_headers():
    return auth(STUDENT_ID)


@pytest.fixture
def other_student_headers():
    return auth(OTHER_STUDENT_ID)


@pytest.fixture
def client():
    from booking_service.main import app

    with TestClient(app) as test_client:
        yield test_client
