"""
Struct strategy: immutable value objects typed per builder name
"""
import itertools
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, create_model


class FactoryStruct(BaseModel):
    """
    Base for generated struct classes; frozen, extra attributes allowed.

    Columns whose names clash with model attributes (``json``, ``copy``,
    ``schema``, ``to_dict`` and so on) are stored under a trailing
    underscore. Read them as ``struct["json"]`` or ``struct.json_``.
    """

    model_config = ConfigDict(frozen=True, extra="allow", arbitrary_types_allowed=True, protected_namespaces=())

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def __getitem__(self, name: str) -> Any:
        values = self.to_dict()
        if name not in values:
            raise KeyError(name)
        return values[name]


def struct_class_name(factory: str) -> str:
    """CamelCase class name for a factory name, e.g. admin_user -> AdminUserStruct"""
    parts = [part for part in re.split(r"[^0-9a-zA-Z]+", factory) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) + "Struct"


def _field_name(name: str, names: Iterable[str]) -> str:
    field = name
    while hasattr(FactoryStruct, field) or (field != name and field in names):
        field += "_"
    return field


def make_struct_class(factory: str, fields: Iterable[str]) -> Type[FactoryStruct]:
    """Build the struct class for a factory; every declared field is typed Any"""
    names = list(fields)
    definitions = {}
    for name in names:
        field = _field_name(name, names)
        if field == name:
            definitions[field] = (Any, None)
        else:
            definitions[field] = (Any, Field(default=None, alias=name))
    return create_model(struct_class_name(factory), __base__=FactoryStruct, **definitions)


class PrimaryKeySequencer:
    """In-memory primary keys for structs, one counter per relation"""

    def __init__(self):
        self._counters: Dict[str, "itertools.count[int]"] = {}

    def next(self, scope: str) -> int:
        counter = self._counters.setdefault(scope, itertools.count(1))
        return next(counter)

    def reset(self) -> None:
        self._counters.clear()


class StructRegistry:
    """Caches one struct class per builder name"""

    def __init__(self):
        self._classes: Dict[str, Type[FactoryStruct]] = {}

    def class_for(self, factory: str, fields: Iterable[str]) -> Type[FactoryStruct]:
        struct_class = self._classes.get(factory)
        if struct_class is None:
            struct_class = make_struct_class(factory, fields)
            self._classes[factory] = struct_class
        return struct_class

    def wrap(self, factory: str, fields: Iterable[str], record: Mapping[str, Any]) -> FactoryStruct:
        return self.class_for(factory, fields)(**record)


def synthesize_primary_key(
    record: Dict[str, Any],
    primary_key: Tuple[str, ...],
    sequencer: PrimaryKeySequencer,
    scope: str,
) -> Dict[str, Any]:
    """Fill a single-column primary key the record leaves empty"""
    if len(primary_key) != 1:
        return record

    key = primary_key[0]
    if record.get(key) is None:
        # Key goes first, like a table's id column
        record = {key: sequencer.next(scope), **{k: v for k, v in record.items() if k != key}}
    return record


def struct_fields(primary_key: Tuple[str, ...], names: Iterable[str], schema: Optional[Iterable[str]] = None):
    """Declared fields for a struct class: schema order when known"""
    if schema is not None:
        return list(schema)
    return list(dict.fromkeys([*primary_key, *names]))
