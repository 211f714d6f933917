"""
Persistence adapters

A persistence adapter answers schema questions about a relation and writes
resolved records into it, returning the canonical stored row (including any
store-generated values such as autoincrement keys).
"""
import itertools
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy import MetaData, Table, and_, func, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import StatementError

from core.exceptions import SchemaViolation, UnknownRelationError
from core.logging import get_logger

logger = get_logger(__name__)


class PersistenceAdapter(ABC):
    """Interface the factory engine consumes for schema lookups and writes"""

    @abstractmethod
    def has_relation(self, relation: str) -> bool:
        """Whether the backing store knows relation"""

    @abstractmethod
    def schema_for(self, relation: str) -> List[str]:
        """Attribute names of relation, in column order"""

    @abstractmethod
    def primary_key_for(self, relation: str) -> Tuple[str, ...]:
        """Primary key column names of relation (may be empty)"""

    @abstractmethod
    def validate_and_write(self, relation: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate record against the schema, write it and return the stored row"""

    @abstractmethod
    def count(self, relation: str) -> int:
        """Number of rows currently stored in relation"""

    def validate(self, relation: str, record: Mapping[str, Any]) -> None:
        """Reject attribute names the relation does not declare"""
        columns = set(self.schema_for(relation))
        unknown = sorted(name for name in record if name not in columns)
        if unknown:
            raise SchemaViolation(
                f"Unknown columns for {relation}: {', '.join(unknown)}",
                relation=relation,
                columns=unknown,
            )


class SQLAlchemyAdapter(PersistenceAdapter):
    """
    Adapter over a SQLAlchemy engine.

    Tables are taken from ``metadata`` when it already declares them,
    otherwise reflected from the database on first use and cached.
    Every write runs in its own transaction.
    """

    def __init__(self, engine: Engine, metadata: Optional[MetaData] = None):
        self.engine = engine
        self.metadata = metadata if metadata is not None else MetaData()
        self._tables: Dict[str, Table] = {}

    def has_relation(self, relation: str) -> bool:
        if relation in self._tables or relation in self.metadata.tables:
            return True
        return inspect(self.engine).has_table(relation)

    def table(self, relation: str) -> Table:
        """Return the (possibly reflected) Table for relation"""
        table = self._tables.get(relation)
        if table is not None:
            return table

        if relation in self.metadata.tables:
            table = self.metadata.tables[relation]
        elif inspect(self.engine).has_table(relation):
            table = Table(relation, self.metadata, autoload_with=self.engine)
            logger.debug("Reflected relation", extra={"relation": relation, "columns": list(table.columns.keys())})
        else:
            raise UnknownRelationError(relation)

        self._tables[relation] = table
        return table

    def schema_for(self, relation: str) -> List[str]:
        return [column.name for column in self.table(relation).columns]

    def primary_key_for(self, relation: str) -> Tuple[str, ...]:
        return tuple(column.name for column in self.table(relation).primary_key.columns)

    def validate_and_write(self, relation: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        table = self.table(relation)
        self.validate(relation, record)

        try:
            with self.engine.begin() as conn:
                result = conn.execute(table.insert().values(**record))
                row = self._read_back(conn, table, result.inserted_primary_key)
        except StatementError as e:
            raise SchemaViolation(str(getattr(e, "orig", None) or e), relation=relation) from e

        if row is None:
            # No usable primary key to read back by
            return {column.name: record.get(column.name) for column in table.columns}

        logger.debug("Wrote record", extra={"relation": relation})
        return row

    @staticmethod
    def _read_back(conn, table: Table, key_values) -> Optional[Dict[str, Any]]:
        key_columns = list(table.primary_key.columns)
        if not key_columns or key_values is None or any(value is None for value in key_values):
            return None

        stmt = select(table).where(and_(*(column == value for column, value in zip(key_columns, key_values))))
        return dict(conn.execute(stmt).mappings().one())

    def count(self, relation: str) -> int:
        table = self.table(relation)
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(table)).scalar_one()


class InMemoryAdapter(PersistenceAdapter):
    """
    Dict-backed adapter for tests that do not need a database.

    ``schemas`` maps relation names to column names. A relation whose
    columns include ``id`` gets an autoincrement ``id`` primary key unless
    ``primary_keys`` says otherwise. Columns listed in ``required`` must be
    non-null on write.
    """

    def __init__(
        self,
        schemas: Mapping[str, Iterable[str]],
        primary_keys: Optional[Mapping[str, Iterable[str]]] = None,
        required: Optional[Mapping[str, Iterable[str]]] = None,
    ):
        self.schemas = {relation: list(columns) for relation, columns in schemas.items()}
        primary_keys = primary_keys or {}
        self.primary_keys = {
            relation: tuple(primary_keys.get(relation, ("id",) if "id" in columns else ()))
            for relation, columns in self.schemas.items()
        }
        self.required = {relation: set(columns) for relation, columns in (required or {}).items()}
        self.rows: Dict[str, List[Dict[str, Any]]] = {relation: [] for relation in self.schemas}
        self._keys = {relation: itertools.count(1) for relation in self.schemas}

    def _columns(self, relation: str) -> List[str]:
        try:
            return self.schemas[relation]
        except KeyError:
            raise UnknownRelationError(relation) from None

    def has_relation(self, relation: str) -> bool:
        return relation in self.schemas

    def schema_for(self, relation: str) -> List[str]:
        return list(self._columns(relation))

    def primary_key_for(self, relation: str) -> Tuple[str, ...]:
        self._columns(relation)
        return self.primary_keys[relation]

    def validate_and_write(self, relation: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        columns = self._columns(relation)
        self.validate(relation, record)

        row = {column: record.get(column) for column in columns}
        key = self.primary_keys[relation]
        if len(key) == 1 and row[key[0]] is None:
            row[key[0]] = next(self._keys[relation])

        missing = sorted(column for column in self.required.get(relation, ()) if row.get(column) is None)
        if missing:
            raise SchemaViolation(
                f"NOT NULL constraint failed: {relation}.{missing[0]}",
                relation=relation,
                columns=missing,
            )

        self.rows[relation].append(row)
        return dict(row)

    def count(self, relation: str) -> int:
        self._columns(relation)
        return len(self.rows[relation])
