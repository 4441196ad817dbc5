"""
Top-level view state of the recipe feed.

RecipeFeed ties the collaborators to the filters:

    session emits identity -> load() one page of recipes, newest first
                           -> visibility filter -> stored collection
    visible()              -> search/category filter over the stored collection

The stored collection is overwritten by every completed load (last write wins).
Filters are recomputed on every visible() call, never cached, so they always
reflect the latest collection and filter inputs.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydantic import ValidationError

from recipebook.backends.base import BackendError, RecipeStoreClient, SessionProvider
from recipebook.config import DEFAULT_PAGE_SIZE
from recipebook.models import AuthState, EntityKind, Recipe, UserIdentity
from recipebook.search import CATEGORY_ALL, filter_recipes
from recipebook.visibility import visible_recipes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedSnapshot:
    """Read-only view of the feed handed to the UI."""
    viewer: Optional[UserIdentity]
    is_loading: bool
    query: str
    category: str
    recipes: Tuple[Recipe, ...]
    total: int
    load_failed: bool = False

    @property
    def is_filtered(self) -> bool:
        return bool(self.query.strip()) or self.category != CATEGORY_ALL


class RecipeFeed:
    """
    Recipe collection for the signed-in viewer plus the current filter inputs.

    Args:
        session: Session provider to follow
        store: Record store to load recipes from
        page_size: Maximum number of recipes fetched per load
    """

    def __init__(
        self,
        session: SessionProvider,
        store: RecipeStoreClient,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.session = session
        self.store = store
        self.page_size = page_size
        self.viewer: Optional[UserIdentity] = None
        self.is_loading = True
        self.recipes: List[Recipe] = []
        self.query = ""
        self.category = CATEGORY_ALL
        self.load_failed = False
        self._unsubscribe = session.on_auth_state_changed(self._on_auth_state)

    def _on_auth_state(self, state: AuthState) -> None:
        self.viewer = state.user
        self.is_loading = state.is_loading
        if state.user is not None:
            self.load()
        else:
            self.recipes = []

    @property
    def viewer_id(self) -> Optional[str]:
        return self.viewer.id if self.viewer else None

    def load(self) -> List[Recipe]:
        """
        Fetch the newest page of recipes and keep the ones the viewer may see.

        Remote failures are logged; the previous collection is left in place.
        Records that fail validation are skipped with a warning.

        Returns:
            The stored (visible) collection after the load
        """
        try:
            records = self.store.list(
                EntityKind.RECIPES,
                order_by={"createdAt": "desc"},
                limit=self.page_size,
            )
        except BackendError as e:
            logger.error("Error loading recipes: %s", e)
            self.load_failed = True
            return self.recipes

        recipes: List[Recipe] = []
        for record in records:
            try:
                recipes.append(Recipe.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping invalid recipe %s: %s", record.get("id"), e)

        self.recipes = visible_recipes(recipes, self.viewer_id)
        self.load_failed = False
        logger.debug("Loaded %d recipes (%d visible)", len(recipes), len(self.recipes))
        return self.recipes

    def set_query(self, query: str) -> None:
        self.query = query or ""

    def set_category(self, category: str) -> None:
        self.category = category or CATEGORY_ALL

    def visible(self) -> List[Recipe]:
        """Stored collection filtered by the current query and category."""
        return filter_recipes(self.recipes, self.query, self.category, self.viewer_id)

    def snapshot(self) -> FeedSnapshot:
        recipes = self.visible()
        return FeedSnapshot(
            viewer=self.viewer,
            is_loading=self.is_loading,
            query=self.query,
            category=self.category,
            recipes=tuple(recipes),
            total=len(self.recipes),
            load_failed=self.load_failed,
        )

    def close(self) -> None:
        """Stop following auth changes."""
        self._unsubscribe()
