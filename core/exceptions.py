"""
Custom exceptions for the factory engine
All are programmer or configuration errors: raised immediately, never retried
"""
from typing import Any, Dict, Iterable, Optional


class FactoryError(Exception):
    """Base exception for all factory errors"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for reporting"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class DuplicateNameError(FactoryError):
    """Raised when a factory name is defined twice"""

    def __init__(self, name: str):
        super().__init__(
            message=f"Factory already defined: {name}",
            error_code="DUPLICATE_NAME",
            details={"factory": name},
        )


class UnknownFactoryError(FactoryError):
    """Raised when a build, trait or lookup references an unregistered name"""

    def __init__(self, name: str, known: Optional[Iterable[str]] = None):
        super().__init__(
            message=f"Factory not registered: {name}",
            error_code="UNKNOWN_FACTORY",
            details={"factory": name, "known": sorted(known or [])},
        )


class UnknownAttributeError(FactoryError):
    """Raised when an attribute name is absent from the bound schema"""

    def __init__(self, attribute: str, relation: Optional[str] = None, factory: Optional[str] = None):
        where = f" for relation {relation}" if relation else ""
        super().__init__(
            message=f"Unknown attribute {attribute!r}{where}",
            error_code="UNKNOWN_ATTRIBUTE",
            details={"attribute": attribute, "relation": relation, "factory": factory},
        )


class UnresolvedAttributeError(FactoryError):
    """Raised when a lazy value reads a sibling that has not been resolved yet"""

    def __init__(self, attribute: str, factory: Optional[str] = None):
        super().__init__(
            message=f"Attribute {attribute!r} is not resolved yet",
            error_code="UNRESOLVED_ATTRIBUTE",
            details={"attribute": attribute, "factory": factory},
        )


class AmbiguousRelationError(FactoryError):
    """Raised when the relation cannot be inferred from the factory name"""

    def __init__(self, name: str, candidates: Iterable[str]):
        candidates = list(candidates)
        super().__init__(
            message=f"Cannot infer relation for factory {name}, tried: {', '.join(candidates)}",
            error_code="AMBIGUOUS_RELATION",
            details={"factory": name, "candidates": candidates},
        )


class UnknownRelationError(FactoryError):
    """Raised when the backing store has no such relation"""

    def __init__(self, relation: str):
        super().__init__(
            message=f"Relation does not exist: {relation}",
            error_code="UNKNOWN_RELATION",
            details={"relation": relation},
        )


class SchemaViolation(FactoryError):
    """Raised by a persistence adapter when a record cannot be written"""

    def __init__(self, message: str, relation: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="SCHEMA_VIOLATION",
            details={"relation": relation, **details} if relation else details,
        )


class UnknownGeneratorError(FactoryError):
    """Raised when the fake-data provider has no generator for a category/field"""

    def __init__(self, category: str, field: str):
        super().__init__(
            message=f"No fake data generator for {category}.{field}",
            error_code="UNKNOWN_GENERATOR",
            details={"category": category, "field": field},
        )


class ConfigurationError(FactoryError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else {},
        )
