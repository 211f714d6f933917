"""
Attribute sources

Each source produces the value of one named attribute when a record is
resolved. Sources are shared by reference between a builder and the traits
derived from it, so a Sequence's counter belongs to the declaration that
created it.
"""
import inspect
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from factories.resolution import ResolutionContext


class AttributeSource(ABC):
    """Resolution strategy for a single attribute"""

    @abstractmethod
    def resolve(self, context: "ResolutionContext") -> Any:
        """Produce the attribute value for one record"""


class Static(AttributeSource):
    """Fixed value reused verbatim on every resolution"""

    def __init__(self, value: Any):
        self.value = value

    def resolve(self, context: "ResolutionContext") -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"Static({self.value!r})"


def _takes_context(func: Callable) -> bool:
    """Whether func takes a required positional argument (or *args) for the context"""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are called bare
        return False

    for parameter in signature.parameters.values():
        if parameter.kind == parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            # datetime.now(tz=None) and friends are called bare
            return parameter.default is parameter.empty
    return False


class Lazy(AttributeSource):
    """
    Callable invoked fresh on every resolution.

    ``compute`` takes either no arguments or the resolution context as its
    one required argument; the context exposes already-resolved siblings
    and the fake-data provider.
    """

    def __init__(self, compute: Callable[..., Any]):
        if not callable(compute):
            raise TypeError(f"Lazy attribute needs a callable, got {type(compute).__name__}")
        self.compute = compute
        self._pass_context = _takes_context(compute)

    def resolve(self, context: "ResolutionContext") -> Any:
        if self._pass_context:
            return self.compute(context)
        return self.compute()

    def __repr__(self) -> str:
        return f"Lazy({getattr(self.compute, '__name__', self.compute)!r})"


class Sequence(AttributeSource):
    """Monotonic counter starting at 1 feeding a value generator"""

    def __init__(self, name: str, generator: Optional[Callable[[int], Any]] = None):
        self.name = name
        self.generator = generator or (lambda n: n)
        self.current = 0

    def resolve(self, context: "ResolutionContext") -> Any:
        self.current += 1
        return self.generator(self.current)

    def reset(self) -> None:
        """Rewind the counter so the next value is generated from 1"""
        self.current = 0

    def __repr__(self) -> str:
        return f"Sequence({self.name!r}, current={self.current})"


class Fake(AttributeSource):
    """Value delegated to the fake-data provider at resolution time"""

    def __init__(self, category: str, field: str):
        self.category = category
        self.field = field

    def resolve(self, context: "ResolutionContext") -> Any:
        return context.fake(self.category, self.field)

    def __repr__(self) -> str:
        return f"Fake({self.category!r}, {self.field!r})"


class Timestamp(AttributeSource):
    """Current time read from the resolution clock"""

    def resolve(self, context: "ResolutionContext") -> Any:
        return context.now()

    def __repr__(self) -> str:
        return "Timestamp()"


def as_source(value: Any) -> AttributeSource:
    """Coerce a declared value: sources pass through, callables become Lazy"""
    if isinstance(value, AttributeSource):
        return value
    if callable(value):
        return Lazy(value)
    return Static(value)
