"""
Add-recipe form handling.

This module holds the raw, all-text form state (RecipeDraft) and turns it into
a Recipe record:

- Numeric fields (prep time, cook time, servings) are parsed leniently; input
  that is not a non-negative integer simply leaves the field unset
- Ingredients and instructions are entered one per line; blank lines are dropped
- Tags are added one at a time, trimmed and de-duplicated
- An empty title is the only error that blocks submission

RecipeForm.submit() runs the whole create flow against the backend
collaborators: resolve the user, upload the image (if any), create the record,
reset the form and notify the caller so it can reload the feed.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from pydantic import ValidationError

from recipebook.backends.base import (
    BackendError,
    ObjectStorageClient,
    RecipeStoreClient,
    SessionProvider,
)
from recipebook.events import log_recipe_created
from recipebook.models import EntityKind, PrivacyLevel, Recipe, utc_now_iso

logger = logging.getLogger(__name__)

IMAGE_KEY_PREFIX = "recipes"


class RecipeValidationError(ValueError):
    """Raised when form input cannot become a recipe (e.g. empty title)."""


@dataclass
class ImageAttachment:
    """An image picked in the form, not yet uploaded."""
    filename: str
    data: bytes
    content_type: Optional[str] = None


@dataclass
class RecipeDraft:
    """Raw form input. Every text field holds exactly what the user typed."""
    title: str = ""
    description: str = ""
    instructions: str = ""
    ingredients: str = ""
    prep_time: str = ""
    cook_time: str = ""
    servings: str = ""
    cuisine_type: str = ""
    meal_type: str = ""
    source_url: str = ""
    privacy_level: PrivacyLevel = PrivacyLevel.PUBLIC
    tags: List[str] = field(default_factory=list)
    image: Optional[ImageAttachment] = None


def parse_optional_int(text: Optional[str]) -> Optional[int]:
    """
    Parse a non-negative integer from form text.

    Args:
        text: Raw input, e.g. "30", " 45 ", "abc", ""

    Returns:
        The integer, or None when the input is empty, not an integer or negative

    Examples:
        >>> parse_optional_int("30")
        30
        >>> parse_optional_int("abc") is None
        True
    """
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value >= 0 else None


def add_tag(tags: List[str], tag: str) -> List[str]:
    """Return tags with `tag` appended, unless it is blank or already present."""
    tag = (tag or "").strip()
    if not tag or tag in tags:
        return list(tags)
    return [*tags, tag]


def remove_tag(tags: List[str], tag: str) -> List[str]:
    return [t for t in tags if t != tag]


def _blank_to_none(text: str) -> Optional[str]:
    text = (text or "").strip()
    return text or None


def new_recipe_id() -> str:
    return f"recipe_{uuid.uuid4().hex}"


def image_key(filename: str, now_ms: Optional[int] = None) -> str:
    """Storage key for an uploaded recipe image: recipes/{epoch_ms}-{filename}."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{IMAGE_KEY_PREFIX}/{now_ms}-{filename}"


def validate_draft(draft: RecipeDraft, owner_id: str) -> Recipe:
    """
    Build a Recipe from form input.

    Args:
        draft: Current form state
        owner_id: Id of the user creating the recipe

    Returns:
        A new Recipe with a fresh id and timestamps; image_url is left unset

    Raises:
        RecipeValidationError: If the title is empty
    """
    if not draft.title or not draft.title.strip():
        raise RecipeValidationError("A recipe needs a title")

    now = utc_now_iso()
    try:
        return Recipe(
            id=new_recipe_id(),
            title=draft.title.strip(),
            description=_blank_to_none(draft.description),
            instructions=draft.instructions,
            ingredients=draft.ingredients,
            prep_time=parse_optional_int(draft.prep_time),
            cook_time=parse_optional_int(draft.cook_time),
            servings=parse_optional_int(draft.servings),
            cuisine_type=_blank_to_none(draft.cuisine_type),
            meal_type=_blank_to_none(draft.meal_type),
            tags=list(draft.tags),
            source_url=_blank_to_none(draft.source_url),
            privacy_level=draft.privacy_level,
            user_id=owner_id,
            created_at=now,
            updated_at=now,
        )
    except ValidationError as e:
        raise RecipeValidationError(str(e)) from e


class RecipeForm:
    """
    State and submit flow of the Add Recipe dialog.

    Args:
        on_recipe_added: Called with the created Recipe after a successful submit
    """

    def __init__(self, on_recipe_added: Optional[Callable[[Recipe], None]] = None) -> None:
        self.draft = RecipeDraft()
        self.on_recipe_added = on_recipe_added
        self.last_error: Optional[str] = None

    def add_tag(self, tag: str) -> None:
        self.draft.tags = add_tag(self.draft.tags, tag)

    def remove_tag(self, tag: str) -> None:
        self.draft.tags = remove_tag(self.draft.tags, tag)

    def attach_image(self, filename: str, data: bytes, content_type: Optional[str] = None) -> None:
        self.draft.image = ImageAttachment(filename=filename, data=data, content_type=content_type)

    def reset(self) -> None:
        self.draft = RecipeDraft()
        self.last_error = None

    def submit(
        self,
        session: SessionProvider,
        store: RecipeStoreClient,
        storage: ObjectStorageClient,
    ) -> Optional[Recipe]:
        """
        Validate and create the recipe.

        On success the draft is reset and on_recipe_added is called. On any
        failure the error is logged, stored in last_error, the draft is left
        as it was and None is returned.

        Returns:
            The created Recipe, or None if nothing was created
        """
        # Title check first so an empty form never touches the backend
        if not self.draft.title.strip():
            logger.warning("Recipe submit blocked: title is empty")
            self.last_error = "Please enter a recipe title."
            return None

        try:
            user = session.me()
            recipe = validate_draft(self.draft, owner_id=user.id)

            image = self.draft.image
            if image is not None:
                result = storage.upload(image.data, image_key(image.filename), upsert=True)
                recipe = recipe.model_copy(update={"image_url": result.public_url})

            store.create(EntityKind.RECIPES, recipe.to_record())
        except RecipeValidationError as e:
            logger.warning("Recipe submit blocked: %s", e)
            self.last_error = str(e)
            return None
        except BackendError as e:
            logger.error("Error creating recipe: %s", e)
            self.last_error = "Could not save the recipe. Please try again."
            return None

        logger.info("Created recipe %s (%s)", recipe.id, recipe.privacy_level.value)
        log_recipe_created(user.id, recipe.id, recipe.privacy_level.value, recipe.image_url is not None)

        self.reset()
        if self.on_recipe_added is not None:
            self.on_recipe_added(recipe)
        return recipe
