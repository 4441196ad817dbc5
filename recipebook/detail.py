"""
State behind the recipe detail dialog: comments, ratings and the viewer's
own rating for one recipe.

Every remote failure is logged and swallowed here; the dialog keeps showing
whatever was loaded last and the caller only sees a False/None result.
"""

import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from recipebook.backends.base import BackendError, RecipeStoreClient
from recipebook.comments import CommentThread
from recipebook.events import log_rating_submitted, log_recipe_viewed
from recipebook.models import EntityKind, Recipe, RecipeComment, RecipeRating, UserIdentity
from recipebook.ratings import (
    RatingSummary,
    aggregate_ratings,
    find_viewer_rating,
    rating_distribution,
    upsert_rating,
)

logger = logging.getLogger(__name__)


class RecipeDetail:
    """
    Detail view state for one recipe.

    Args:
        store: Record store
        recipe: Recipe being shown
        viewer: Signed-in user, or None
    """

    def __init__(self, store: RecipeStoreClient, recipe: Recipe, viewer: Optional[UserIdentity]) -> None:
        self.store = store
        self.recipe = recipe
        self.viewer = viewer
        self.thread = CommentThread(store, recipe.id)
        self.ratings: List[RecipeRating] = []

    @property
    def comments(self) -> List[RecipeComment]:
        return self.thread.comments

    def load(self) -> bool:
        """
        Fetch comments and ratings for the recipe.

        Returns:
            True if both loads succeeded
        """
        try:
            self.thread.load()
            records = self.store.list(EntityKind.RATINGS, where={"recipeId": self.recipe.id})
        except BackendError as e:
            logger.error("Error loading comments and ratings for %s: %s", self.recipe.id, e)
            return False

        ratings: List[RecipeRating] = []
        for record in records:
            try:
                ratings.append(RecipeRating.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping invalid rating %s: %s", record.get("id"), e)
        self.ratings = ratings
        return True

    def open(self) -> bool:
        """Load the detail view and record that the viewer opened it."""
        log_recipe_viewed(self.viewer.id if self.viewer else None, self.recipe.id, self.recipe.title)
        return self.load()

    @property
    def summary(self) -> RatingSummary:
        return aggregate_ratings(self.ratings)

    @property
    def distribution(self) -> Dict[int, int]:
        return rating_distribution(self.ratings)

    @property
    def viewer_rating(self) -> int:
        """Viewer's current star value, or 0 when they have not rated."""
        existing = find_viewer_rating(self.ratings, self.viewer.id if self.viewer else None)
        return existing.rating if existing else 0

    def rate(self, value: int) -> bool:
        """
        Set the viewer's rating, then reload.

        Updates the viewer's existing rating record in place, or creates one.

        Returns:
            True if the rating was saved
        """
        if self.viewer is None:
            return False

        existing = find_viewer_rating(self.ratings, self.viewer.id)
        try:
            updated = upsert_rating(self.ratings, self.recipe.id, self.viewer.id, value)
        except ValueError as e:
            logger.warning("Rejected rating %r for %s: %s", value, self.recipe.id, e)
            return False

        try:
            if existing is not None:
                self.store.update(EntityKind.RATINGS, existing.id, {"rating": value})
            else:
                created = find_viewer_rating(updated, self.viewer.id)
                self.store.create(EntityKind.RATINGS, created.to_record())
        except BackendError as e:
            logger.error("Error submitting rating for %s: %s", self.recipe.id, e)
            return False

        log_rating_submitted(self.viewer.id, self.recipe.id, value, existing is not None)
        self.ratings = updated
        self.load()
        return True

    def add_comment(self, text: str) -> Optional[RecipeComment]:
        """
        Post a comment as the viewer.

        Returns:
            The created comment, or None if nobody is signed in, the text was
            blank or the store call failed
        """
        if self.viewer is None:
            return None
        try:
            return self.thread.add(self.viewer, text)
        except BackendError as e:
            logger.error("Error submitting comment on %s: %s", self.recipe.id, e)
            return None
