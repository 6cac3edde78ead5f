import pytest
import pytest_asyncio

from infrastructure.configuration import Settings
from infrastructure.notifications import (
    DeliveryLog,
    NotificationStore,
    PreferenceStore,
    PushSubscriptionStore,
    UserContactDirectory,
)
from infrastructure.persistence import Database
from infrastructure.persistence.models import UserRow
from tests.factories.notifications import make_payload, make_settings


@pytest_asyncio.fixture
async def database(tmp_path):
    """File-backed SQLite so concurrent sessions get their own connections."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'notifications.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def records(database):
    return NotificationStore(database)


@pytest.fixture
def preferences(database):
    return PreferenceStore(database)


@pytest.fixture
def delivery_log(database):
    return DeliveryLog(database)


@pytest.fixture
def subscriptions(database):
    return PushSubscriptionStore(database)


@pytest.fixture
def contacts(database):
    return UserContactDirectory(database)


@pytest.fixture
def add_user(database):
    """Insert a row into the users table.

    Example:
        await add_user("user-1", email="a@example.com", phone_number="5551234567")
    """

    async def _add(
        user_id="user-1", email=None, phone_number=None, phone_verified=False
    ):
        async with database.session() as session:
            session.add(
                UserRow(
                    id=user_id,
                    email=email,
                    phone_number=phone_number,
                    phone_verified=phone_verified,
                )
            )
            await session.commit()

    return _add


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()
