"""Relation name inference from factory names"""
import re
from typing import List

_IRREGULAR = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "mouse": "mice",
}

_UNCOUNTABLE = {"equipment", "information", "series", "species", "news", "data"}


def pluralize(word: str) -> str:
    """English plural of a snake_case word; only the last segment is inflected"""
    head, sep, last = word.rpartition("_")
    lower = last.lower()

    if lower in _UNCOUNTABLE:
        plural = last
    elif lower in _IRREGULAR:
        plural = _IRREGULAR[lower]
    elif re.search(r"[^aeiou]y$", lower):
        plural = last[:-1] + "ies"
    elif re.search(r"(s|x|z|ch|sh)$", lower):
        plural = last + "es"
    else:
        plural = last + "s"

    return f"{head}{sep}{plural}"


def relation_candidates(name: str) -> List[str]:
    """Relation names to try for a factory, most likely first"""
    candidates = [pluralize(name), name]
    return list(dict.fromkeys(candidates))
