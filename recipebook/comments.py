"""
Comment thread for a single recipe.

Comments are append-only: there is no edit or delete. The store returns them
newest first and that order is kept as-is.
"""

import logging
import uuid
from typing import List, Optional

from pydantic import ValidationError

from recipebook.backends.base import RecipeStoreClient, StoreError
from recipebook.events import log_comment_added
from recipebook.models import EntityKind, RecipeComment, UserIdentity, utc_now_iso

logger = logging.getLogger(__name__)


def new_comment_id() -> str:
    return f"comment_{uuid.uuid4().hex}"


class CommentThread:
    """Loads and appends comments for one recipe."""

    def __init__(self, store: RecipeStoreClient, recipe_id: str) -> None:
        self.store = store
        self.recipe_id = recipe_id
        self.comments: List[RecipeComment] = []

    def load(self) -> List[RecipeComment]:
        """
        Fetch the recipe's comments, newest first.

        Records that fail validation are skipped with a warning.

        Raises:
            StoreError: If the store call fails
        """
        records = self.store.list(
            EntityKind.COMMENTS,
            where={"recipeId": self.recipe_id},
            order_by={"createdAt": "desc"},
        )
        comments: List[RecipeComment] = []
        for record in records:
            try:
                comments.append(RecipeComment.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping invalid comment %s: %s", record.get("id"), e)
        self.comments = comments
        return comments

    def add(self, viewer: UserIdentity, text: str) -> Optional[RecipeComment]:
        """
        Post a comment as the viewer and reload the thread.

        Args:
            viewer: Signed-in user
            text: Comment text; surrounding whitespace is trimmed

        Returns:
            The created comment, or None if the text was blank

        Raises:
            StoreError: If the comment could not be created. A failed reload
                after a successful create is logged and the thread keeps its
                previous comments.
        """
        content = (text or "").strip()
        if not content:
            return None

        comment = RecipeComment(
            id=new_comment_id(),
            recipe_id=self.recipe_id,
            user_id=viewer.id,
            user_email=viewer.email or None,
            content=content,
            created_at=utc_now_iso(),
        )
        self.store.create(EntityKind.COMMENTS, comment.to_record())
        log_comment_added(viewer.id, self.recipe_id, len(content))
        try:
            self.load()
        except StoreError as e:
            logger.error("Comment %s saved but reloading %s failed: %s", comment.id, self.recipe_id, e)
        return comment
