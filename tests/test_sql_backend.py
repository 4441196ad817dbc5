"""
Tests for the SQL-backed record store, run against in-memory SQLite.
"""

import pytest

from recipebook.backends.base import StoreError
from recipebook.backends.sql import SqlRecipeStore
from recipebook.models import EntityKind, PrivacyLevel, Recipe


@pytest.fixture
def sql_store():
    return SqlRecipeStore("sqlite:///:memory:")


class TestSqlRecipeStore:
    """Test record CRUD over SQLAlchemy."""

    def test_create_and_list_round_trip(self, sql_store):
        """Test that records come back exactly as stored."""
        recipe = Recipe(
            id="recipe_1", title="Soup", user_id="u1", privacy_level=PrivacyLevel.PRIVATE,
            tags=["warm"], ingredients=["water"],
        )
        sql_store.create(EntityKind.RECIPES, recipe.to_record())

        records = sql_store.list(EntityKind.RECIPES)
        assert len(records) == 1
        assert Recipe.model_validate(records[0]) == recipe

    def test_kinds_are_separate(self, sql_store):
        """Test that the same id can exist in different collections."""
        sql_store.create(EntityKind.RECIPES, {"id": "x", "title": "T"})
        sql_store.create(EntityKind.COMMENTS, {"id": "x", "content": "c"})

        assert sql_store.list(EntityKind.RECIPES)[0]["title"] == "T"
        assert sql_store.list(EntityKind.COMMENTS)[0]["content"] == "c"

    def test_where_order_limit(self, sql_store):
        """Test that list honours filters, ordering and limit."""
        for i, (recipe_id, ts) in enumerate([("r1", "2024-01-01"), ("r1", "2024-01-03"), ("r2", "2024-01-02")]):
            sql_store.create(EntityKind.COMMENTS, {"id": f"c{i}", "recipeId": recipe_id, "createdAt": ts})

        result = sql_store.list(
            EntityKind.COMMENTS,
            where={"recipeId": "r1"},
            order_by={"createdAt": "desc"},
            limit=5,
        )
        assert [r["id"] for r in result] == ["c1", "c0"]

    def test_update_merges_payload(self, sql_store):
        """Test that update merges fields and persists them."""
        sql_store.create(EntityKind.RATINGS, {"id": "x", "rating": 2, "userId": "u"})
        sql_store.update(EntityKind.RATINGS, "x", {"rating": 4})

        assert sql_store.list(EntityKind.RATINGS) == [{"id": "x", "rating": 4, "userId": "u"}]

    def test_duplicate_id_rejected(self, sql_store):
        """Test that creating the same id twice fails."""
        sql_store.create(EntityKind.RATINGS, {"id": "x"})
        with pytest.raises(StoreError):
            sql_store.create(EntityKind.RATINGS, {"id": "x"})

    def test_update_missing_record(self, sql_store):
        """Test that updating an unknown id fails."""
        with pytest.raises(StoreError):
            sql_store.update(EntityKind.RATINGS, "missing", {"rating": 1})

    def test_unknown_kind(self, sql_store):
        """Test that unknown collections raise StoreError."""
        with pytest.raises(StoreError):
            sql_store.list("ingredients")

    def test_missing_url(self):
        """Test that an empty DATABASE_URL is a configuration error."""
        with pytest.raises(RuntimeError):
            SqlRecipeStore("")
