"""Database package: SQLAlchemy plumbing and the persistence adapters"""

from database.adapter import InMemoryAdapter, PersistenceAdapter, SQLAlchemyAdapter
from database.base import Base
from database.session import create_db_engine

__all__ = ["Base", "InMemoryAdapter", "PersistenceAdapter", "SQLAlchemyAdapter", "create_db_engine"]
