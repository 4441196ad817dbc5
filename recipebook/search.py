"""
Text search and category filtering for the recipe feed.

Runs on the already-visible recipe list. A recipe is shown when it matches
the text query AND the selected category:

- Text query: case-insensitive substring match against title, description,
  tags, cuisine type and ingredients. Any single field matching is enough.
  The query is matched as typed, surrounding spaces included; an empty or
  whitespace-only query matches everything.
- Category:
    "all"         -> no filtering
    "my-recipes"  -> recipes owned by the viewer (any privacy level)
    "public"      -> public recipes only
    meal types    -> exact match on meal_type (breakfast, lunch, ...)
    anything else -> exact match on cuisine_type (italian, chinese, ...)

The cuisine branch is open-ended so new cuisines work without code changes.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from recipebook.models import PrivacyLevel, Recipe

logger = logging.getLogger(__name__)

CATEGORY_ALL = "all"
CATEGORY_MY_RECIPES = "my-recipes"
CATEGORY_PUBLIC = "public"

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack", "dessert")

# Categories offered as filter pills, in display order: (key, label)
FILTER_OPTIONS: List[Tuple[str, str]] = [
    (CATEGORY_ALL, "All Recipes"),
    (CATEGORY_MY_RECIPES, "My Recipes"),
    (CATEGORY_PUBLIC, "Public"),
    ("breakfast", "Breakfast"),
    ("lunch", "Lunch"),
    ("dinner", "Dinner"),
    ("dessert", "Dessert"),
    ("italian", "Italian"),
    ("chinese", "Chinese"),
    ("mexican", "Mexican"),
    ("indian", "Indian"),
]


def _searchable_fields(recipe: Recipe) -> List[str]:
    return [
        recipe.title,
        recipe.description or "",
        ", ".join(recipe.tags),
        recipe.cuisine_type or "",
        "\n".join(recipe.ingredients),
    ]


def matches_query(recipe: Recipe, query: str) -> bool:
    """
    Check whether a recipe matches the free-text query.

    Args:
        recipe: Recipe to test
        query: Raw search box text

    Returns:
        True if the query is blank or any searchable field contains it
    """
    query = query or ""
    if not query.strip():
        return True
    needle = query.lower()
    return any(needle in field.lower() for field in _searchable_fields(recipe))


def matches_category(recipe: Recipe, category: str, viewer_id: Optional[str]) -> bool:
    """
    Check whether a recipe falls in the selected category.

    Args:
        recipe: Recipe to test
        category: Category key (see FILTER_OPTIONS)
        viewer_id: Signed-in user id, needed for "my-recipes"

    Returns:
        True if the recipe belongs to the category
    """
    category = (category or CATEGORY_ALL).strip().lower()

    if category == CATEGORY_ALL:
        return True
    if category == CATEGORY_MY_RECIPES:
        return viewer_id is not None and recipe.user_id == viewer_id
    if category == CATEGORY_PUBLIC:
        return recipe.privacy_level == PrivacyLevel.PUBLIC
    if category in MEAL_TYPES:
        return recipe.meal_type == category
    return recipe.cuisine_type == category


def filter_recipes(
    recipes: Iterable[Recipe],
    query: str = "",
    category: str = CATEGORY_ALL,
    viewer_id: Optional[str] = None,
) -> List[Recipe]:
    """
    Apply the text query and the category filter, preserving input order.

    Args:
        recipes: Recipes already passed through the visibility filter
        query: Search box text
        category: Selected category key
        viewer_id: Signed-in user id

    Returns:
        Recipes matching both the query and the category
    """
    result = [
        recipe for recipe in recipes
        if matches_query(recipe, query) and matches_category(recipe, category, viewer_id)
    ]
    logger.debug("Filtered recipes: query=%r category=%r -> %d", query, category, len(result))
    return result
