"""
Client-side visibility rules for the recipe feed.

A viewer sees a recipe when it is public or when they own it. Protected and
private recipes are therefore owner-only; access grants (RecipeAccess) are
stored by the backend but are not consulted here.

This is a display filter, not access control: the store returns every recipe
in the page and the feed hides the ones the viewer should not see.
"""

from typing import Iterable, List, Optional

from recipebook.models import PrivacyLevel, Recipe


def is_visible(recipe: Recipe, viewer_id: Optional[str]) -> bool:
    """
    Check whether a single recipe is visible to the viewer.

    Args:
        recipe: Recipe to check
        viewer_id: Id of the signed-in user, or None when nobody is signed in

    Returns:
        True if the recipe is public or owned by the viewer
    """
    if recipe.privacy_level == PrivacyLevel.PUBLIC:
        return True
    return viewer_id is not None and recipe.user_id == viewer_id


def visible_recipes(recipes: Iterable[Recipe], viewer_id: Optional[str]) -> List[Recipe]:
    """
    Filter recipes down to the ones the viewer may see, preserving order.

    Examples:
        >>> visible_recipes([public_by_a, private_by_a], viewer_id="b")
        [public_by_a]
    """
    return [recipe for recipe in recipes if is_visible(recipe, viewer_id)]
