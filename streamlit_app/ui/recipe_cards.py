"""
Recipe card grid for the feed.
"""

import html
from typing import Callable, Optional, Sequence, Union

import streamlit as st

from recipebook.backends.base import ObjectStorageClient
from recipebook.backends.memory import InMemoryObjectStorage
from recipebook.models import Recipe
from ui.layout import card, format_minutes, privacy_badge_html, tag_pills_html

GRID_COLUMNS = 3
DESCRIPTION_PREVIEW_CHARS = 110


def image_source(url: Optional[str], storage: ObjectStorageClient) -> Optional[Union[str, bytes]]:
    """
    Resolve a recipe image URL to something st.image can show.

    memory:// URLs only exist inside this process, so their bytes are read
    straight from the in-memory storage.
    """
    if not url:
        return None
    if url.startswith("memory://") and isinstance(storage, InMemoryObjectStorage):
        key = url.split("/", 3)[-1]
        return storage.objects.get(key)
    return url


def _preview(text: Optional[str]) -> str:
    if not text:
        return ""
    if len(text) <= DESCRIPTION_PREVIEW_CHARS:
        return text
    return text[:DESCRIPTION_PREVIEW_CHARS].rstrip() + "…"


def _meta_line(recipe: Recipe) -> str:
    parts = []
    total = None
    if recipe.prep_time is not None or recipe.cook_time is not None:
        total = (recipe.prep_time or 0) + (recipe.cook_time or 0)
    if total:
        parts.append(f"⏱️ {format_minutes(total)}")
    if recipe.servings:
        parts.append(f"👥 {recipe.servings}")
    if recipe.cuisine_type:
        parts.append(f"🍴 {recipe.cuisine_type.title()}")
    return " · ".join(parts)


def render_recipe_card(
    recipe: Recipe,
    storage: ObjectStorageClient,
    on_open: Callable[[Recipe], None],
) -> None:
    """
    Render one recipe card with a "View recipe" button.

    Args:
        recipe: Recipe to show
        storage: Object storage, used to resolve in-process image URLs
        on_open: Called with the recipe when the button is clicked
    """
    with card():
        image = image_source(recipe.image_url, storage)
        if image is not None:
            st.image(image, use_container_width=True)
        else:
            st.markdown('<div class="fr-card-placeholder">🍲</div>', unsafe_allow_html=True)

        st.markdown(
            f'<div class="fr-card-title">{html.escape(recipe.title)}</div>'
            f"{privacy_badge_html(recipe.privacy_level)}",
            unsafe_allow_html=True,
        )
        preview = _preview(recipe.description)
        if preview:
            st.caption(preview)
        meta = _meta_line(recipe)
        if meta:
            st.markdown(f'<div class="fr-card-meta">{html.escape(meta)}</div>', unsafe_allow_html=True)
        if recipe.tags:
            st.markdown(tag_pills_html(recipe.tags[:3]), unsafe_allow_html=True)

        if st.button("View recipe", key=f"view_{recipe.id}", use_container_width=True):
            on_open(recipe)


def render_recipe_grid(
    recipes: Sequence[Recipe],
    storage: ObjectStorageClient,
    on_open: Callable[[Recipe], None],
) -> None:
    """Lay recipe cards out in rows of GRID_COLUMNS."""
    for start in range(0, len(recipes), GRID_COLUMNS):
        cols = st.columns(GRID_COLUMNS, gap="large")
        for col, recipe in zip(cols, recipes[start:start + GRID_COLUMNS]):
            with col:
                render_recipe_card(recipe, storage, on_open)
