"""
Tests for the in-memory backend collaborators.
"""

import pytest

from recipebook.backends.base import AuthError, StorageError, StoreError, query_records
from recipebook.models import EntityKind


class TestInMemorySessionProvider:
    """Test sign-in, sign-out and listeners."""

    def test_listener_receives_current_state_immediately(self, session):
        """Test that subscribing delivers the current state at once."""
        states = []
        session.on_auth_state_changed(states.append)
        assert len(states) == 1
        assert states[0].user is None

    def test_login_notifies_listeners(self, session):
        """Test that login emits the new identity."""
        states = []
        session.on_auth_state_changed(states.append)
        user = session.login("sam@example.com")

        assert states[-1].user == user
        assert session.me() == user

    def test_same_email_same_user_id(self, session):
        """Test that the user id is stable per email."""
        first = session.login("Sam@Example.com ").id
        session.logout()
        assert session.login("sam@example.com").id == first

    def test_logout_and_unsubscribe(self, session):
        """Test that logout notifies and unsubscribe stops delivery."""
        states = []
        unsubscribe = session.on_auth_state_changed(states.append)
        session.login("sam@example.com")
        unsubscribe()
        session.logout()

        assert states[-1].user is not None
        with pytest.raises(AuthError):
            session.me()

    def test_empty_email_rejected(self, session):
        """Test that an empty email cannot sign in."""
        with pytest.raises(AuthError):
            session.login("   ")


class TestInMemoryRecipeStore:
    """Test record CRUD."""

    def test_create_and_list(self, store):
        """Test that created records are listed per kind."""
        store.create(EntityKind.RECIPES, {"id": "r1", "title": "A"})
        store.create(EntityKind.COMMENTS, {"id": "c1", "recipeId": "r1"})

        assert [r["id"] for r in store.list(EntityKind.RECIPES)] == ["r1"]
        assert [r["id"] for r in store.list(EntityKind.COMMENTS)] == ["c1"]

    def test_list_returns_copies(self, store):
        """Test that mutating listed records does not change the store."""
        store.create(EntityKind.RECIPES, {"id": "r1", "title": "A"})
        store.list(EntityKind.RECIPES)[0]["title"] = "changed"
        assert store.list(EntityKind.RECIPES)[0]["title"] == "A"

    def test_duplicate_and_missing_id(self, store):
        """Test that ids are required and unique."""
        store.create(EntityKind.RATINGS, {"id": "x"})
        with pytest.raises(StoreError):
            store.create(EntityKind.RATINGS, {"id": "x"})
        with pytest.raises(StoreError):
            store.create(EntityKind.RATINGS, {"rating": 3})

    def test_update_merges(self, store):
        """Test that update merges the partial record."""
        store.create(EntityKind.RATINGS, {"id": "x", "rating": 2, "userId": "u"})
        updated = store.update(EntityKind.RATINGS, "x", {"rating": 5})
        assert updated == {"id": "x", "rating": 5, "userId": "u"}

    def test_update_missing_record(self, store):
        """Test that updating an unknown id fails."""
        with pytest.raises(StoreError):
            store.update(EntityKind.RATINGS, "nope", {"rating": 1})

    def test_unknown_kind(self, store):
        """Test that unknown collections raise StoreError."""
        with pytest.raises(StoreError):
            store.list("ingredients")


class TestQueryRecords:
    """Test the shared where/order/limit semantics."""

    RECORDS = [
        {"id": "a", "recipeId": "r1", "createdAt": "2024-01-02"},
        {"id": "b", "recipeId": "r2", "createdAt": "2024-01-03"},
        {"id": "c", "recipeId": "r1", "createdAt": "2024-01-01"},
        {"id": "d", "recipeId": "r1"},
    ]

    def test_where(self):
        """Test equality filtering."""
        assert [r["id"] for r in query_records(self.RECORDS, where={"recipeId": "r2"})] == ["b"]

    def test_order_desc_puts_missing_last(self):
        """Test that descending order lists records without the field last."""
        result = query_records(self.RECORDS, order_by={"createdAt": "desc"})
        assert [r["id"] for r in result] == ["b", "a", "c", "d"]

    def test_order_asc_puts_missing_first(self):
        """Test that ascending order lists records without the field first."""
        result = query_records(self.RECORDS, order_by={"createdAt": "asc"})
        assert [r["id"] for r in result] == ["d", "c", "a", "b"]

    def test_limit_after_filter_and_sort(self):
        """Test that limit applies last."""
        result = query_records(self.RECORDS, where={"recipeId": "r1"}, order_by={"createdAt": "desc"}, limit=1)
        assert [r["id"] for r in result] == ["a"]


class TestInMemoryObjectStorage:
    """Test uploads."""

    def test_upload_returns_public_url(self, storage):
        """Test that uploads are stored and addressable."""
        result = storage.upload(b"img", "recipes/1-a.png")
        assert result.public_url == "memory://recipe-images/recipes/1-a.png"
        assert storage.objects["recipes/1-a.png"] == b"img"

    def test_existing_key_needs_upsert(self, storage):
        """Test that overwriting requires upsert=True."""
        storage.upload(b"one", "k")
        with pytest.raises(StorageError):
            storage.upload(b"two", "k")
        storage.upload(b"two", "k", upsert=True)
        assert storage.objects["k"] == b"two"
