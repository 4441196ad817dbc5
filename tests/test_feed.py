"""
Tests for the recipe feed, including the end-to-end visibility flow across
two users sharing one store.
"""

from unittest.mock import Mock

from conftest import make_recipe

from recipebook.backends.base import StoreError
from recipebook.backends.memory import InMemorySessionProvider
from recipebook.feed import FeedSnapshot, RecipeFeed
from recipebook.forms import RecipeForm
from recipebook.models import EntityKind, PrivacyLevel


def _seed(store, *recipes):
    for recipe in recipes:
        store.create(EntityKind.RECIPES, recipe.to_record())


class TestRecipeFeedAuth:
    """Test how the feed follows the session."""

    def test_no_load_before_sign_in(self, session, store):
        """Test that the feed is empty while nobody is signed in."""
        _seed(store, make_recipe("r1"))
        feed = RecipeFeed(session, store)

        assert feed.viewer is None
        assert feed.recipes == []
        assert feed.snapshot().viewer is None

    def test_loads_on_sign_in(self, session, store):
        """Test that signing in triggers a load."""
        _seed(store, make_recipe("r1"))
        feed = RecipeFeed(session, store)
        session.login("a@example.com")

        assert [r.id for r in feed.recipes] == ["r1"]
        assert feed.viewer.email == "a@example.com"

    def test_sign_out_clears_collection(self, session, store):
        """Test that signing out drops the loaded recipes."""
        _seed(store, make_recipe("r1"))
        feed = RecipeFeed(session, store)
        session.login("a@example.com")
        session.logout()

        assert feed.recipes == []
        assert feed.viewer is None

    def test_close_unsubscribes(self, session, store):
        """Test that a closed feed ignores later sign-ins."""
        _seed(store, make_recipe("r1"))
        feed = RecipeFeed(session, store)
        feed.close()
        session.login("a@example.com")

        assert feed.recipes == []


class TestRecipeFeedLoad:
    """Test loading behaviour."""

    def test_newest_first_with_page_size(self, session, store):
        """Test that the feed asks for createdAt desc and honours page size."""
        _seed(
            store,
            make_recipe("old", created_at="2024-01-01T00:00:00.000+00:00"),
            make_recipe("new", created_at="2024-03-01T00:00:00.000+00:00"),
            make_recipe("mid", created_at="2024-02-01T00:00:00.000+00:00"),
        )
        feed = RecipeFeed(session, store, page_size=2)
        session.login("a@example.com")

        assert [r.id for r in feed.recipes] == ["new", "mid"]

    def test_load_failure_keeps_previous_collection(self, session):
        """Test that a failed reload leaves the last good collection."""
        store = Mock()
        store.list.return_value = [make_recipe("r1").to_record()]
        feed = RecipeFeed(session, store)
        session.login("a@example.com")

        store.list.side_effect = StoreError("offline")
        feed.load()

        assert [r.id for r in feed.recipes] == ["r1"]
        assert feed.load_failed
        assert feed.snapshot().load_failed

    def test_last_load_wins(self, session):
        """Test that each completed load overwrites the collection."""
        store = Mock()
        store.list.return_value = [make_recipe("first").to_record()]
        feed = RecipeFeed(session, store)
        session.login("a@example.com")

        store.list.return_value = [make_recipe("second").to_record()]
        feed.load()

        assert [r.id for r in feed.recipes] == ["second"]

    def test_invalid_records_are_skipped(self, session):
        """Test that malformed recipe records do not break the feed."""
        store = Mock()
        store.list.return_value = [
            {"id": "bad", "title": "", "userId": "u"},
            make_recipe("good").to_record(),
        ]
        feed = RecipeFeed(session, store)
        session.login("a@example.com")

        assert [r.id for r in feed.recipes] == ["good"]

    def test_record_without_privacy_level_is_not_shown(self, session, store):
        """Test that a stored recipe missing privacyLevel never reaches other viewers."""
        store.create(EntityKind.RECIPES, {"id": "r1", "title": "Secret", "userId": "user_a"})
        _seed(store, make_recipe("r2", user_id="user_a"))
        feed = RecipeFeed(session, store)
        session.login("b@example.com")

        assert [r.id for r in feed.recipes] == ["r2"]


class TestRecipeFeedFilters:
    """Test query and category handling."""

    def test_visible_recomputes_each_call(self, session, store):
        """Test that filter changes apply without reloading."""
        _seed(
            store,
            make_recipe("pasta", title="Pasta", cuisine_type="italian"),
            make_recipe("curry", title="Curry", cuisine_type="indian"),
        )
        feed = RecipeFeed(session, store)
        session.login("a@example.com")

        feed.set_query("italian")
        assert [r.id for r in feed.visible()] == ["pasta"]

        feed.set_query("")
        feed.set_category("indian")
        assert [r.id for r in feed.visible()] == ["curry"]

    def test_snapshot_is_frozen_view(self, session, store):
        """Test that the snapshot captures filters and results."""
        _seed(store, make_recipe("r1", title="Soup"))
        feed = RecipeFeed(session, store)
        session.login("a@example.com")
        feed.set_query("soup")

        snapshot = feed.snapshot()
        assert isinstance(snapshot, FeedSnapshot)
        assert snapshot.query == "soup"
        assert snapshot.is_filtered
        assert [r.id for r in snapshot.recipes] == ["r1"]
        assert snapshot.total == 1


class TestEndToEndVisibility:
    """Two users share one store; check what each of them sees."""

    def test_public_and_private_across_users(self, store, storage):
        """Test that A's private recipe is hidden from B but A's public one is not."""
        session_a = InMemorySessionProvider()
        session_b = InMemorySessionProvider()
        session_a.login("a@example.com")
        session_b.login("b@example.com")

        for title, privacy in [("A public", PrivacyLevel.PUBLIC), ("A private", PrivacyLevel.PRIVATE)]:
            form = RecipeForm()
            form.draft.title = title
            form.draft.privacy_level = privacy
            assert form.submit(session_a, store, storage) is not None

        feed_a = RecipeFeed(session_a, store)
        feed_b = RecipeFeed(session_b, store)

        assert sorted(r.title for r in feed_a.recipes) == ["A private", "A public"]
        assert [r.title for r in feed_b.recipes] == ["A public"]

        feed_b.set_category("my-recipes")
        assert feed_b.visible() == []

        feed_a.set_category("my-recipes")
        assert len(feed_a.visible()) == 2

    def test_new_recipe_appears_after_reload(self, session, store, storage):
        """Test that the form callback reloading the feed shows the new recipe."""
        session.login("a@example.com")
        feed = RecipeFeed(session, store)
        form = RecipeForm(on_recipe_added=lambda _recipe: feed.load())
        form.draft.title = "Fresh bread"

        form.submit(session, store, storage)

        assert [r.title for r in feed.recipes] == ["Fresh bread"]
