"""
Tests for the factory error taxonomy
"""
import pytest

from core.exceptions import (
    AmbiguousRelationError,
    ConfigurationError,
    DuplicateNameError,
    FactoryError,
    SchemaViolation,
    UnknownAttributeError,
    UnknownFactoryError,
)

pytestmark = pytest.mark.unit


class TestFactoryErrors:
    def test_all_errors_share_base(self):
        errors = [
            DuplicateNameError("user"),
            UnknownFactoryError("user"),
            UnknownAttributeError("boobly", relation="users"),
            AmbiguousRelationError("account", ["accounts", "account"]),
            SchemaViolation("bad row", relation="users"),
            ConfigurationError("missing", setting="adapter"),
        ]

        assert all(isinstance(error, FactoryError) for error in errors)

    def test_to_dict(self):
        error = UnknownAttributeError("boobly", relation="users", factory="user")

        assert error.to_dict() == {
            "error": "UNKNOWN_ATTRIBUTE",
            "message": "Unknown attribute 'boobly' for relation users",
            "details": {"attribute": "boobly", "relation": "users", "factory": "user"},
        }

    def test_unknown_factory_lists_known_names(self):
        error = UnknownFactoryError("jon", known={"john": None, "jane": None})

        assert error.details["known"] == ["jane", "john"]
        assert str(error) == "Factory not registered: jon"

    def test_default_error_code_is_class_name(self):
        assert FactoryError("boom").error_code == "FactoryError"

    def test_schema_violation_details(self):
        error = SchemaViolation("NOT NULL constraint failed", relation="users", columns=["email"])

        assert error.details == {"relation": "users", "columns": ["email"]}
