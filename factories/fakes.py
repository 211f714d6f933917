"""
Fake-data providers

The engine only needs ``generate(category, field)``; the default provider
maps that onto Faker's provider methods, e.g. ``("name", "first_name")``
-> ``Faker().first_name()`` and ``("address", "city")`` -> ``Faker().city()``.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

from faker import Faker

from core.exceptions import UnknownGeneratorError


class FakeDataProvider(ABC):
    """Supplies realistic random values keyed by category and field"""

    @abstractmethod
    def generate(self, category: str, field: str) -> Any:
        """Return a fresh value for category/field"""


class FakerProvider(FakeDataProvider):
    """FakeDataProvider backed by a Faker instance"""

    def __init__(self, locale: Optional[str] = None, seed: Optional[int] = None, faker: Optional[Faker] = None):
        self.faker = faker or Faker(locale)
        if seed is not None:
            self.faker.seed_instance(seed)
        self._generators: Dict[Tuple[str, str], Callable[[], Any]] = {}

    def _lookup(self, category: str, field: str) -> Callable[[], Any]:
        key = (category, field)
        if key not in self._generators:
            for candidate in (field, f"{category}_{field}"):
                if candidate.startswith("_"):
                    continue
                try:
                    generator = getattr(self.faker, candidate)
                except AttributeError:
                    continue
                if callable(generator):
                    self._generators[key] = generator
                    break
            else:
                raise UnknownGeneratorError(category, field)
        return self._generators[key]

    def generate(self, category: str, field: str) -> Any:
        return self._lookup(category, field)()
