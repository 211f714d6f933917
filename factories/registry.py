"""
Factory registry

Process-wide store of builders keyed by name, with the two build
strategies: persisted records (written through the persistence adapter)
and structs (in-memory value objects, never written).

    factories = Factories(adapter=SQLAlchemyAdapter(engine))

    @factories.define("user")
    def user(f):
        f.first_name("Jane")
        f.sequence("email", lambda n: f"jane{n}@doe.org")
        f.timestamps()

    factories.define({"john": "user"}, lambda f: f.first_name("John"))

    factories["user"]                                # persisted
    factories["user", {"email": "x@y.com"}]          # persisted, overridden
    factories.structs["john"]                        # in-memory only

Single-threaded by contract: sequence counters and the registry itself
are plain mutable state without locking.
"""
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from core.config import Settings, get_settings
from core.exceptions import (
    AmbiguousRelationError,
    ConfigurationError,
    DuplicateNameError,
    UnknownAttributeError,
    UnknownFactoryError,
)
from core.logging import get_logger
from database.adapter import PersistenceAdapter
from factories.attribute_set import AttributeSet
from factories.builder import Builder, Scaffold
from factories.fakes import FakeDataProvider, FakerProvider
from factories.inflection import relation_candidates
from factories.resolution import Clock, resolve
from factories.structs import (
    FactoryStruct,
    PrimaryKeySequencer,
    StructRegistry,
    struct_fields,
    synthesize_primary_key,
)

logger = get_logger(__name__)

Block = Callable[[Scaffold], Any]
NameSpec = Union[str, Mapping[str, str]]


def _split_key(key) -> Tuple[str, Dict[str, Any]]:
    """Accept factories["user"] and factories["user", {"email": ...}]"""
    if isinstance(key, tuple):
        if len(key) != 2 or not isinstance(key[1], Mapping):
            raise TypeError("Expected factories[name] or factories[name, overrides]")
        return key[0], dict(key[1])
    return key, {}


class StructBuilder:
    """Ephemeral struct entry point, exposed as ``factories.structs``"""

    def __init__(self, factories: "Factories"):
        self._factories = factories

    def __getitem__(self, key) -> FactoryStruct:
        name, overrides = _split_key(key)
        return self._factories._build_struct(name, overrides)

    def build(self, name: str, /, **overrides) -> FactoryStruct:
        return self._factories._build_struct(name, overrides)

    def build_many(self, name: str, count: int, /, **overrides) -> List[FactoryStruct]:
        return [self._factories._build_struct(name, overrides) for _ in range(count)]


class Factories:
    """Registry of named builders"""

    def __init__(
        self,
        adapter: Optional[PersistenceAdapter] = None,
        provider: Optional[FakeDataProvider] = None,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.adapter = adapter
        self.provider = provider or FakerProvider(locale=self.settings.faker_locale, seed=self.settings.faker_seed)
        self.clock = clock or Clock()
        self.structs = StructBuilder(self)

        self._builders: Dict[str, Builder] = {}
        self._struct_classes = StructRegistry()
        self._primary_keys = PrimaryKeySequencer()

    # Registry

    def __contains__(self, name: str) -> bool:
        return name in self._builders

    def __len__(self) -> int:
        return len(self._builders)

    def __iter__(self) -> Iterator[str]:
        return iter(self._builders)

    def names(self) -> List[str]:
        return list(self._builders)

    def builder(self, name: str) -> Builder:
        """Look up a registered builder"""
        try:
            return self._builders[name]
        except KeyError:
            raise UnknownFactoryError(name, known=self._builders) from None

    def reset_sequences(self) -> None:
        """Rewind every sequence counter and struct primary key counter"""
        seen = set()
        for builder in self._builders.values():
            for sequence in builder.sequences():
                if id(sequence) not in seen:
                    seen.add(id(sequence))
                    sequence.reset()
        self._primary_keys.reset()
        logger.debug("Reset sequences", extra={"sequences": len(seen)})

    # Definition

    def define(
        self,
        name: NameSpec,
        block: Optional[Block] = None,
        *,
        relation: Optional[str] = None,
        trait_of: Optional[str] = None,
    ):
        """
        Define a builder.

        Args:
            name: Factory name, or a one-item mapping ``{"child": "parent"}``
                declaring a trait of an existing factory
            block: Callable receiving the Scaffold. When omitted, define
                returns a decorator taking the block
            relation: Target relation; inferred from the name (pluralized)
                or inherited from the parent trait when omitted
            trait_of: Name of the parent factory

        Returns:
            The stored Builder (or a decorator when block is omitted)

        Raises:
            DuplicateNameError: name already registered
            UnknownFactoryError: trait_of is not registered
            UnknownAttributeError: block declares, or the parent passes down,
                a name outside the schema
            AmbiguousRelationError: relation cannot be inferred
        """
        if isinstance(name, Mapping):
            if len(name) != 1 or trait_of is not None:
                raise TypeError("Trait shorthand takes exactly one {child: parent} pair")
            ((name, trait_of),) = name.items()

        if block is None:
            def decorator(func: Block) -> Block:
                self.define(name, func, relation=relation, trait_of=trait_of)
                return func

            return decorator

        if name in self._builders:
            raise DuplicateNameError(name)

        parent = self.builder(trait_of) if trait_of is not None else None
        relation = self._relation_for(name, relation, parent)
        schema = self.adapter.schema_for(relation) if self.adapter is not None and relation else None

        scaffold = Scaffold(name, relation=relation, schema=schema)
        block(scaffold)

        attributes = parent.attributes.merge(scaffold.attributes) if parent else AttributeSet(scaffold.attributes)
        if schema is not None:
            # Inherited attributes must fit the trait's relation too
            columns = set(schema)
            for attribute in attributes:
                if attribute not in columns:
                    raise UnknownAttributeError(attribute, relation=relation, factory=name)

        builder = Builder(name, attributes, relation=relation, parent=parent)
        self._builders[name] = builder

        logger.debug(
            "Defined factory",
            extra={"factory": name, "relation": relation, "ancestry": builder.ancestry()},
        )
        return builder

    def _relation_for(self, name: str, relation: Optional[str], parent: Optional[Builder]) -> Optional[str]:
        if relation is not None:
            if self.adapter is not None:
                # Surfaces UnknownRelationError for an explicit bad name
                self.adapter.schema_for(relation)
            return relation
        if parent is not None:
            return parent.relation
        if self.adapter is None:
            return None

        candidates = relation_candidates(name)
        for candidate in candidates:
            if self.adapter.has_relation(candidate):
                return candidate
        raise AmbiguousRelationError(name, candidates)

    # Building

    def _check_overrides(self, builder: Builder, overrides: Mapping[str, Any]) -> None:
        if self.adapter is None or builder.relation is None:
            return
        schema = set(self.adapter.schema_for(builder.relation))
        for attribute in overrides:
            if attribute not in schema:
                raise UnknownAttributeError(attribute, relation=builder.relation, factory=builder.name)

    def _resolve(self, builder: Builder, overrides: Mapping[str, Any]) -> Dict[str, Any]:
        self._check_overrides(builder, overrides)
        return resolve(builder.attributes, overrides, self.provider, self.clock, factory=builder.name)

    def _schema(self, builder: Builder) -> Tuple[Optional[List[str]], Tuple[str, ...]]:
        if self.adapter is None or builder.relation is None:
            return None, (self.settings.default_primary_key,)
        return self.adapter.schema_for(builder.relation), self.adapter.primary_key_for(builder.relation)

    def _wrap(self, builder: Builder, record: Mapping[str, Any]) -> FactoryStruct:
        schema, primary_key = self._schema(builder)
        fields = struct_fields(primary_key, builder.attributes.names(), schema)
        return self._struct_classes.wrap(builder.name, fields, record)

    def attributes_for(self, name: str, /, **overrides) -> Dict[str, Any]:
        """Resolved attribute values as a plain dict; nothing is persisted"""
        return self._resolve(self.builder(name), overrides)

    def build(self, name: str, /, **overrides) -> FactoryStruct:
        """
        Resolve a record and persist it through the adapter.

        Returns the adapter's canonical stored row as a struct, including
        store-generated values such as autoincrement keys. The factory name
        is positional-only so columns called ``name`` can be overridden.
        """
        return self._build_record(name, overrides)

    def _build_record(self, name: str, overrides: Mapping[str, Any]) -> FactoryStruct:
        builder = self.builder(name)
        if self.adapter is None:
            raise ConfigurationError("No persistence adapter configured; use structs instead", setting="adapter")
        if builder.relation is None:
            raise ConfigurationError(f"Factory {name} is not bound to a relation", setting="relation")

        record = self._resolve(builder, overrides)
        stored = self.adapter.validate_and_write(builder.relation, record)

        logger.debug("Built record", extra={"factory": name, "relation": builder.relation})
        return self._wrap(builder, stored)

    def build_many(self, name: str, count: int, /, **overrides) -> List[FactoryStruct]:
        return [self._build_record(name, overrides) for _ in range(count)]

    def _build_struct(self, name: str, overrides: Mapping[str, Any]) -> FactoryStruct:
        builder = self.builder(name)
        record = self._resolve(builder, overrides)

        _, primary_key = self._schema(builder)
        record = synthesize_primary_key(record, primary_key, self._primary_keys, builder.relation or builder.name)

        logger.debug("Built struct", extra={"factory": name})
        return self._wrap(builder, record)

    def __getitem__(self, key) -> FactoryStruct:
        name, overrides = _split_key(key)
        return self._build_record(name, overrides)
