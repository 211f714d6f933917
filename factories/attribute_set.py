"""Ordered attribute name -> source mapping with trait merge semantics"""
from typing import Dict, Iterator, List, Mapping, Optional

from factories.attributes import AttributeSource, Sequence


class AttributeSet(Mapping[str, AttributeSource]):
    """
    Declaration-ordered set of attribute sources.

    Declaration order is resolution order. Redeclaring a name replaces its
    source but keeps its original position.
    """

    def __init__(self, sources: Optional[Mapping[str, AttributeSource]] = None):
        self._sources: Dict[str, AttributeSource] = dict(sources or {})

    def __getitem__(self, name: str) -> AttributeSource:
        return self._sources[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def __repr__(self) -> str:
        return f"AttributeSet({self._sources!r})"

    def add(self, name: str, source: AttributeSource) -> None:
        """Declare or redeclare name"""
        self._sources[name] = source

    def names(self) -> List[str]:
        return list(self._sources)

    def sequences(self) -> List[Sequence]:
        return [source for source in self._sources.values() if isinstance(source, Sequence)]

    def merge(self, override: "AttributeSet") -> "AttributeSet":
        """
        New set with all of self's entries followed by override-only entries.

        Shared names take override's source at self's position. Neither
        operand is modified.
        """
        merged = dict(self._sources)
        for name, source in override.items():
            merged[name] = source
        return AttributeSet(merged)
