"""Database engine management"""
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from core.config import get_settings


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Create an engine from explicit arguments or settings"""
    settings = get_settings()
    database_url = database_url or settings.database_url
    echo = settings.database_echo if echo is None else echo

    if database_url.startswith("sqlite"):
        # SQLite: one shared connection so in-memory databases survive across calls
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )

    # Other databases
    return create_engine(database_url, pool_size=10, max_overflow=20, echo=echo)
