"""Base class for SQLAlchemy models backing factory relations"""
from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# Explicit naming so reflected and declared constraints line up across dialects
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))
