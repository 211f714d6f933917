"""
Factories - test data builders

Declarative builders producing fully populated records for tests, either
persisted through a backing store or as in-memory structs.
"""
from typing import Optional

from sqlalchemy import MetaData
from sqlalchemy.engine import Engine

from core.config import Settings, get_settings
from database.adapter import InMemoryAdapter, PersistenceAdapter, SQLAlchemyAdapter
from database.session import create_db_engine
from factories.attribute_set import AttributeSet
from factories.attributes import AttributeSource, Fake, Lazy, Sequence, Static, Timestamp
from factories.builder import Builder, Scaffold
from factories.fakes import FakeDataProvider, FakerProvider
from factories.registry import Factories
from factories.resolution import Clock, ResolutionContext
from factories.structs import FactoryStruct

__version__ = "0.1.0"


def configure(
    engine: Optional[Engine] = None,
    database_url: Optional[str] = None,
    metadata: Optional[MetaData] = None,
    settings: Optional[Settings] = None,
    **kwargs,
) -> Factories:
    """
    Create a registry wired to a SQLAlchemy database.

    Args:
        engine: Existing engine; created from database_url or settings otherwise
        database_url: Database URL used when no engine is given
        metadata: MetaData already declaring the tables (reflected otherwise)
        settings: Settings override
        **kwargs: Passed through to Factories (provider, clock)

    Returns:
        A fresh Factories instance with its own sequence counters
    """
    settings = settings or get_settings()
    if engine is None:
        engine = create_db_engine(database_url or settings.database_url, echo=settings.database_echo)
    adapter = SQLAlchemyAdapter(engine, metadata=metadata)
    return Factories(adapter=adapter, settings=settings, **kwargs)


__all__ = [
    "AttributeSet",
    "AttributeSource",
    "Builder",
    "Clock",
    "Factories",
    "FactoryStruct",
    "Fake",
    "FakeDataProvider",
    "FakerProvider",
    "InMemoryAdapter",
    "Lazy",
    "PersistenceAdapter",
    "ResolutionContext",
    "SQLAlchemyAdapter",
    "Scaffold",
    "Sequence",
    "Static",
    "Timestamp",
    "configure",
]
