"""
Attribute resolution pipeline

Records are resolved attribute by attribute in declaration order. Lazy
sources receive a ResolutionContext that exposes the values resolved so
far, so an attribute may depend on siblings declared before it but never
on ones declared after it.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from core.exceptions import UnresolvedAttributeError
from factories.attribute_set import AttributeSet
from factories.fakes import FakeDataProvider


class Clock:
    """
    Strictly increasing wall clock.

    Two reads from the same clock never return the same instant: when the
    host clock has not advanced since the previous read, the previous value
    plus one microsecond is returned instead.
    """

    def __init__(self, source: Optional[Callable[[], datetime]] = None):
        self._source = source or (lambda: datetime.now(timezone.utc).replace(tzinfo=None))
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        current = self._source()
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return current

    __call__ = now


class ResolutionContext:
    """
    Read-only view of the record being resolved, handed to lazy values.

    Siblings read as attributes (``ctx.first_name``) or items
    (``ctx["first_name"]``). Siblings named after a context method
    (``get``, ``fake``, ``now``, ``resolved``) are only reachable as items.
    """

    def __init__(self, provider: FakeDataProvider, clock: Clock, factory: Optional[str] = None):
        self._provider = provider
        self._clock = clock
        self._factory = factory
        self._resolved: Dict[str, Any] = {}

    def __getitem__(self, name: str) -> Any:
        try:
            return self._resolved[name]
        except KeyError:
            raise UnresolvedAttributeError(name, factory=self._factory) from None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __contains__(self, name: str) -> bool:
        return name in self._resolved

    def get(self, name: str, default: Any = None) -> Any:
        return self._resolved.get(name, default)

    def fake(self, category: str, field: str) -> Any:
        """Generate a value from the fake-data provider"""
        return self._provider.generate(category, field)

    def now(self) -> datetime:
        return self._clock.now()

    def resolved(self) -> Dict[str, Any]:
        """Copy of the values resolved so far, in resolution order"""
        return dict(self._resolved)

    def _set(self, name: str, value: Any) -> None:
        self._resolved[name] = value


def resolve(
    attributes: AttributeSet,
    overrides: Mapping[str, Any],
    provider: FakeDataProvider,
    clock: Clock,
    factory: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Resolve attributes into a plain dict, applying overrides.

    Overridden attributes are never evaluated, so an overridden Sequence
    does not advance. The override value takes the attribute's position
    and is what later lazy attributes see. Names only present in overrides
    are appended at the end.
    """
    context = ResolutionContext(provider, clock, factory=factory)

    for name, source in attributes.items():
        if name in overrides:
            context._set(name, overrides[name])
        else:
            context._set(name, source.resolve(context))

    record = context.resolved()
    for name, value in overrides.items():
        if name not in record:
            record[name] = value
    return record
