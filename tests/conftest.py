"""
Shared fixtures for the factory test suite
"""
from unittest.mock import Mock

import pytest

from core.config import Settings, get_settings
from database.adapter import InMemoryAdapter, SQLAlchemyAdapter
from database.base import Base
from database.session import create_db_engine
from factories import Factories
from factories.fakes import FakeDataProvider

# Register the test schema on Base.metadata
from tests.fixtures.models import USER_COLUMNS, User  # noqa: F401


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear the settings cache before each test"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, faker_seed=1234)


@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite engine with the test schema created"""
    engine = create_db_engine("sqlite://", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_adapter(engine) -> SQLAlchemyAdapter:
    """Adapter reflecting tables from the database, not from Base.metadata"""
    return SQLAlchemyAdapter(engine)


@pytest.fixture
def memory_adapter() -> InMemoryAdapter:
    return InMemoryAdapter(
        {"users": USER_COLUMNS, "tags": ["name"]},
        required={"users": ["first_name", "last_name", "email", "created_at", "updated_at"]},
    )


@pytest.fixture
def stub_provider():
    """Fake-data provider stub returning '<category>.<field>'"""
    provider = Mock(spec=FakeDataProvider)
    provider.generate.side_effect = lambda category, field: f"{category}.{field}"
    return provider


@pytest.fixture
def factories(memory_adapter, stub_provider, settings) -> Factories:
    """Registry over the in-memory adapter"""
    return Factories(adapter=memory_adapter, provider=stub_provider, settings=settings)


@pytest.fixture
def sql_factories(sql_adapter, settings) -> Factories:
    """Registry over SQLite with the real Faker provider"""
    return Factories(adapter=sql_adapter, settings=settings)
