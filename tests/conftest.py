"""
Shared fixtures for the recipe book tests.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from recipebook.backends.memory import (
    InMemoryObjectStorage,
    InMemoryRecipeStore,
    InMemorySessionProvider,
)
from recipebook.models import PrivacyLevel, Recipe


@pytest.fixture(autouse=True)
def event_log(tmp_path: Path):
    """Send analytics events to a per-test file instead of ./events.log."""
    log_file = tmp_path / "events.log"
    with patch("recipebook.events.EVENT_LOG_FILE", log_file):
        yield log_file


@pytest.fixture
def session() -> InMemorySessionProvider:
    return InMemorySessionProvider()


@pytest.fixture
def store() -> InMemoryRecipeStore:
    return InMemoryRecipeStore()


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


def make_recipe(
    recipe_id: str,
    user_id: str = "user_a",
    privacy: PrivacyLevel = PrivacyLevel.PUBLIC,
    created_at: str = "2024-01-01T00:00:00.000+00:00",
    **fields,
) -> Recipe:
    """Build a Recipe with sensible defaults for tests."""
    return Recipe(
        id=recipe_id,
        title=fields.pop("title", f"Recipe {recipe_id}"),
        user_id=user_id,
        privacy_level=privacy,
        created_at=created_at,
        updated_at=created_at,
        **fields,
    )
