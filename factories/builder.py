"""
Builders and the declaration scaffold

A Builder is a named, resolved attribute set bound to a relation. The
Scaffold is what a ``define`` block receives: it collects declarations and
checks attribute names against the relation's schema as they are made.
"""
from functools import partial
from typing import Any, Callable, Collection, List, Optional

from core.exceptions import UnknownAttributeError
from factories.attribute_set import AttributeSet
from factories.attributes import AttributeSource, Fake, Sequence, Timestamp, as_source


class Builder:
    """Named template for one entity's attribute values"""

    def __init__(
        self,
        name: str,
        attributes: AttributeSet,
        relation: Optional[str] = None,
        parent: Optional["Builder"] = None,
    ):
        self.name = name
        self.attributes = attributes
        self.relation = relation
        self.parent = parent

    def ancestry(self) -> List[str]:
        """Builder names from the root ancestor down to this builder"""
        chain = []
        builder: Optional[Builder] = self
        while builder is not None:
            chain.append(builder.name)
            builder = builder.parent
        return list(reversed(chain))

    def sequences(self) -> List[Sequence]:
        return self.attributes.sequences()

    def __repr__(self) -> str:
        return f"Builder({self.name!r}, relation={self.relation!r}, attributes={self.attributes.names()})"


class Scaffold:
    """
    Declaration object passed to ``define`` blocks.

    Usage::

        def user(f):
            f.first_name("Jane")
            f.email(lambda ctx: f"{ctx.first_name.lower()}@doe.org")
            f.sequence("login", lambda n: f"user{n}")
            f.fake("last_name", "name", "last_name")
            f.timestamps()

    ``f.<attr>(value)`` is shorthand for ``f.set("<attr>", value)``;
    callables become lazy values. Both forms also work as decorators.
    """

    def __init__(self, factory: str, relation: Optional[str] = None, schema: Optional[Collection[str]] = None):
        self._factory = factory
        self._relation = relation
        self._schema = set(schema) if schema is not None else None
        self._attributes = AttributeSet()

    def __getattr__(self, name: str) -> Callable[[Any], AttributeSource]:
        if name.startswith("_"):
            raise AttributeError(name)
        return partial(self.set, name)

    def _check(self, name: str) -> None:
        if self._schema is not None and name not in self._schema:
            raise UnknownAttributeError(name, relation=self._relation, factory=self._factory)

    def set(self, name: str, value: Any) -> AttributeSource:
        """Declare name with a static value, a callable or an AttributeSource"""
        self._check(name)
        source = as_source(value)
        self._attributes.add(name, source)
        return source

    def sequence(self, name: str, generator: Optional[Callable[[int], Any]] = None):
        """Declare a sequence; without a generator, returns a decorator"""
        if generator is None:
            return partial(self.sequence, name)
        return self.set(name, Sequence(name, generator))

    def fake(self, name: str, category: str, field: Optional[str] = None) -> AttributeSource:
        """Declare name as fake data; field defaults to the attribute name"""
        return self.set(name, Fake(category, field or name))

    def timestamps(self) -> None:
        """Declare created_at and updated_at, each read fresh per record"""
        self.set("created_at", Timestamp())
        self.set("updated_at", Timestamp())

    @property
    def attributes(self) -> AttributeSet:
        return self._attributes
