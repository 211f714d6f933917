"""
Tests for the resolution pipeline: ordering, sibling reads, overrides and the clock
"""
from datetime import datetime, timedelta

import pytest

from core.exceptions import UnresolvedAttributeError
from factories.attribute_set import AttributeSet
from factories.attributes import Lazy, Sequence, Static, Timestamp
from factories.resolution import Clock, ResolutionContext, resolve

pytestmark = pytest.mark.unit


class TestClock:
    def test_strictly_increasing_when_source_stalls(self):
        fixed = datetime(2024, 5, 1, 8, 30)
        clock = Clock(lambda: fixed)

        first, second, third = clock.now(), clock.now(), clock()

        assert first == fixed
        assert second == fixed + timedelta(microseconds=1)
        assert third == fixed + timedelta(microseconds=2)

    def test_follows_source_when_it_advances(self):
        times = iter([datetime(2024, 1, 1), datetime(2024, 1, 2)])
        clock = Clock(lambda: next(times))

        assert clock.now() == datetime(2024, 1, 1)
        assert clock.now() == datetime(2024, 1, 2)

    def test_never_goes_backwards(self):
        times = iter([datetime(2024, 1, 2), datetime(2024, 1, 1)])
        clock = Clock(lambda: next(times))

        first = clock.now()
        assert clock.now() > first

    def test_default_source_is_naive_utc(self):
        assert Clock().now().tzinfo is None


class TestResolutionContext:
    def test_reading_unresolved_attribute_fails(self, stub_provider):
        context = ResolutionContext(stub_provider, Clock())

        with pytest.raises(UnresolvedAttributeError):
            context["email"]
        with pytest.raises(UnresolvedAttributeError):
            context.email

    def test_get_with_default(self, stub_provider):
        context = ResolutionContext(stub_provider, Clock())

        assert context.get("email", "none") == "none"
        assert "email" not in context


class TestResolve:
    def test_declaration_order(self, stub_provider):
        attributes = AttributeSet({"b": Static(2), "a": Static(1)})

        record = resolve(attributes, {}, stub_provider, Clock())

        assert list(record) == ["b", "a"]

    def test_lazy_reads_earlier_sibling(self, stub_provider):
        attributes = AttributeSet(
            {
                "first_name": Static("Jane"),
                "email": Lazy(lambda ctx: f"{ctx['first_name'].lower()}@doe.org"),
            }
        )

        record = resolve(attributes, {}, stub_provider, Clock())

        assert record["email"] == "jane@doe.org"

    def test_lazy_cannot_read_later_sibling(self, stub_provider):
        attributes = AttributeSet(
            {
                "email": Lazy(lambda ctx: ctx.first_name),
                "first_name": Static("Jane"),
            }
        )

        with pytest.raises(UnresolvedAttributeError):
            resolve(attributes, {}, stub_provider, Clock())

    def test_siblings_named_like_context_state_read_as_attributes(self, stub_provider):
        attributes = AttributeSet(
            {
                "provider": Static("stripe"),
                "clock": Static("wall"),
                "factory": Static("acme"),
                "label": Lazy(lambda ctx: f"{ctx.provider}/{ctx.clock}/{ctx.factory}"),
            }
        )

        record = resolve(attributes, {}, stub_provider, Clock(), factory="account")

        assert record["label"] == "stripe/wall/acme"

    def test_siblings_named_like_context_methods_read_as_items(self, stub_provider):
        attributes = AttributeSet(
            {
                "fake": Static(True),
                "now": Static("later"),
                "summary": Lazy(lambda ctx: (ctx["fake"], ctx["now"], ctx.fake("name", "first_name"))),
            }
        )

        record = resolve(attributes, {}, stub_provider, Clock())

        assert record["summary"] == (True, "later", "name.first_name")

    def test_unresolved_error_names_the_factory(self, stub_provider):
        attributes = AttributeSet({"email": Lazy(lambda ctx: ctx.first_name)})

        with pytest.raises(UnresolvedAttributeError) as exc_info:
            resolve(attributes, {}, stub_provider, Clock(), factory="user")

        assert exc_info.value.details == {"attribute": "first_name", "factory": "user"}

    def test_override_replaces_value_without_evaluating_source(self, stub_provider):
        sequence = Sequence("email", lambda n: f"user{n}@x.com")
        attributes = AttributeSet({"email": sequence})

        record = resolve(attributes, {"email": "fixed@x.com"}, stub_provider, Clock())

        assert record == {"email": "fixed@x.com"}
        assert sequence.current == 0

    def test_override_visible_to_later_lazy_attributes(self, stub_provider):
        attributes = AttributeSet(
            {
                "first_name": Static("Jane"),
                "display": Lazy(lambda ctx: ctx.first_name.upper()),
            }
        )

        record = resolve(attributes, {"first_name": "John"}, stub_provider, Clock())

        assert record == {"first_name": "John", "display": "JOHN"}

    def test_override_only_names_appended(self, stub_provider):
        attributes = AttributeSet({"first_name": Static("Jane")})

        record = resolve(attributes, {"id": 42, "first_name": "John"}, stub_provider, Clock())

        assert list(record.items()) == [("first_name", "John"), ("id", 42)]

    def test_timestamps_are_distinct_within_a_record(self, stub_provider):
        fixed = datetime(2024, 1, 1)
        attributes = AttributeSet({"created_at": Timestamp(), "updated_at": Timestamp()})

        record = resolve(attributes, {}, stub_provider, Clock(lambda: fixed))

        assert record["created_at"] != record["updated_at"]
        assert record["created_at"] < record["updated_at"]
