"""
Rating aggregation for recipes.

Each user holds at most one rating per recipe. Submitting again replaces the
value on the existing record; the record keeps its id and creation time.
"""

import uuid
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from recipebook.models import RecipeRating

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class RatingSummary:
    """Mean and count of a recipe's ratings."""
    mean: float
    count: int

    @property
    def display(self) -> str:
        """Mean rounded to one decimal place, e.g. "4.3"."""
        return f"{self.mean:.1f}"


def new_rating_id() -> str:
    return f"rating_{uuid.uuid4().hex}"


def aggregate_ratings(ratings: Iterable[RecipeRating]) -> RatingSummary:
    """
    Compute the mean rating and count.

    Returns:
        RatingSummary with mean 0.0 when there are no ratings
    """
    values = [r.rating for r in ratings]
    if not values:
        return RatingSummary(mean=0.0, count=0)
    return RatingSummary(mean=sum(values) / len(values), count=len(values))


def find_viewer_rating(ratings: Iterable[RecipeRating], viewer_id: Optional[str]) -> Optional[RecipeRating]:
    """Return the viewer's rating, or None if they have not rated (or nobody is signed in)."""
    if viewer_id is None:
        return None
    for rating in ratings:
        if rating.user_id == viewer_id:
            return rating
    return None


def upsert_rating(
    ratings: List[RecipeRating],
    recipe_id: str,
    viewer_id: str,
    value: int,
) -> List[RecipeRating]:
    """
    Set the viewer's rating for a recipe.

    Args:
        ratings: Current ratings for the recipe
        recipe_id: Recipe being rated
        viewer_id: Signed-in user id
        value: Star value in [1, 5]

    Returns:
        New list with the viewer's rating replaced in place, or appended

    Raises:
        ValueError: If value is outside [1, 5] (pydantic ValidationError)
    """
    result: List[RecipeRating] = []
    replaced = False
    for rating in ratings:
        if not replaced and rating.recipe_id == recipe_id and rating.user_id == viewer_id:
            # model_validate re-runs the range check that model_copy would skip
            rating = RecipeRating.model_validate({**rating.model_dump(), "rating": value})
            replaced = True
        result.append(rating)

    if not replaced:
        result.append(RecipeRating(
            id=new_rating_id(),
            recipe_id=recipe_id,
            user_id=viewer_id,
            rating=value,
        ))
    return result


def rating_distribution(ratings: Iterable[RecipeRating]) -> Dict[int, int]:
    """Count of ratings per star value, with every value from 1 to 5 present."""
    counts = {stars: 0 for stars in range(MIN_RATING, MAX_RATING + 1)}
    for rating in ratings:
        counts[rating.rating] += 1
    return counts


def filled_stars(mean: float) -> int:
    """Number of stars to draw filled for a mean rating (rounded half up)."""
    return max(0, min(MAX_RATING, int(mean + 0.5)))
