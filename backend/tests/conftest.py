import os
import tempfile
from pathlib import Path

# Must run before any `app` import: app.database builds its engine at import time.
_DB_PATH = Path(tempfile.gettempdir()) / f"table_reservation_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["AUTH_SECRET"] = "testsecret"

from typing import AsyncIterator, Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.database import async_session, engine  # noqa: E402
from app.models import Base, Restaurant, User, UserRole  # noqa: E402
from app.utils.auth import create_access_token, hash_password  # noqa: E402
from app.utils.time import utc_now_naive  # noqa: E402


@pytest_asyncio.fixture()
async def db() -> AsyncIterator[None]:
    """Fresh schema on the temporary SQLite database for one test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture()
async def client(db: None) -> AsyncIterator[AsyncClient]:
    from app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


MakeUser = Callable[..., Awaitable[tuple[User, dict[str, str]]]]
MakeRestaurant = Callable[..., Awaitable[Restaurant]]


@pytest.fixture()
def make_user(db: None) -> MakeUser:
    counter = {"n": 0}

    async def _make(role: UserRole = UserRole.USER, name: str | None = None) -> tuple[User, dict[str, str]]:
        counter["n"] += 1
        now = utc_now_naive()
        async with async_session() as session:
            async with session.begin():
                user = User(
                    name=name or f"{role.value}-{counter['n']}",
                    email=f"{role.value}{counter['n']}@example.com",
                    password_hash=hash_password("secret123"),
                    role=role,
                    created_at=now,
                    updated_at=now,
                )
                session.add(user)
        token = create_access_token(user_id=user.id, role=role.value, secret="testsecret")
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def make_restaurant(db: None) -> MakeRestaurant:
    async def _make(*, total_seats: int = 20, owner_id: int | None = None, name: str = "Trattoria") -> Restaurant:
        now = utc_now_naive()
        async with async_session() as session:
            async with session.begin():
                restaurant = Restaurant(
                    name=name,
                    cuisine="Italian",
                    location="Downtown",
                    rating=4.5,
                    total_seats=total_seats,
                    owner_id=owner_id,
                    created_at=now,
                    updated_at=now,
                )
                session.add(restaurant)
        return restaurant

    return _make
