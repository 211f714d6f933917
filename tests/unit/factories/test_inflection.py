"""
Tests for relation name inference
"""
import pytest

from factories.inflection import pluralize, relation_candidates

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "word,expected",
    [
        ("user", "users"),
        ("category", "categories"),
        ("day", "days"),
        ("address", "addresses"),
        ("box", "boxes"),
        ("match", "matches"),
        ("person", "people"),
        ("admin_user", "admin_users"),
        ("blog_category", "blog_categories"),
        ("news", "news"),
    ],
)
def test_pluralize(word, expected):
    assert pluralize(word) == expected


def test_candidates_try_plural_first():
    assert relation_candidates("user") == ["users", "user"]


def test_candidates_deduplicated():
    assert relation_candidates("news") == ["news"]
