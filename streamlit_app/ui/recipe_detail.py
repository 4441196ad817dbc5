"""
Recipe Detail dialog: full recipe, rating summary and chart, the viewer's own
rating and the comment thread.

Rating and commenting rerun only the dialog fragment; the RecipeDetail kept in
session state holds what was loaded.
"""

import html
from datetime import datetime

import streamlit as st

from recipebook.detail import RecipeDetail
from recipebook.ratings import MAX_RATING
from ui.charts import build_rating_distribution
from ui.layout import format_minutes, privacy_badge_html, stars_html, tag_pills_html
from ui.recipe_cards import image_source
from utils.state import get_backend, get_detail


def _format_date(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso.replace("Z", "+00:00")).strftime("%b %d, %Y")
    except ValueError:
        return iso


def _render_header(detail: RecipeDetail) -> None:
    recipe = detail.recipe
    image = image_source(recipe.image_url, get_backend().storage)
    if image is not None:
        st.image(image, use_container_width=True)

    summary = detail.summary
    st.markdown(
        f"{privacy_badge_html(recipe.privacy_level)} &nbsp; "
        f"{stars_html(summary.mean)} {summary.display} ({summary.count} ratings)",
        unsafe_allow_html=True,
    )

    facts = []
    if recipe.prep_time is not None:
        facts.append(("Prep", format_minutes(recipe.prep_time)))
    if recipe.cook_time is not None:
        facts.append(("Cook", format_minutes(recipe.cook_time)))
    if recipe.servings is not None:
        facts.append(("Servings", str(recipe.servings)))
    if recipe.cuisine_type:
        facts.append(("Cuisine", recipe.cuisine_type.title()))
    if recipe.meal_type:
        facts.append(("Meal", recipe.meal_type.title()))
    if facts:
        cols = st.columns(len(facts))
        for col, (label, value) in zip(cols, facts):
            col.metric(label, value)

    if recipe.tags:
        st.markdown(tag_pills_html(recipe.tags), unsafe_allow_html=True)
    if recipe.description:
        st.write(recipe.description)


def _render_body(detail: RecipeDetail) -> None:
    recipe = detail.recipe
    col_ing, col_steps = st.columns([2, 3], gap="large")
    with col_ing:
        st.markdown("#### Ingredients")
        if recipe.ingredients:
            st.markdown("\n".join(f"- {item}" for item in recipe.ingredients))
        else:
            st.caption("No ingredients listed.")
    with col_steps:
        st.markdown("#### Instructions")
        if recipe.instructions:
            st.markdown("\n".join(f"{i}. {step}" for i, step in enumerate(recipe.instructions, 1)))
        else:
            st.caption("No instructions yet.")

    if recipe.source_url:
        st.markdown(f"[View original source ↗]({recipe.source_url})")


def _render_rating(detail: RecipeDetail) -> None:
    st.markdown("#### Ratings")
    if detail.summary.count:
        st.altair_chart(build_rating_distribution(detail.distribution), use_container_width=True)
    else:
        st.caption("No ratings yet. Be the first!")

    if detail.viewer is None:
        return

    current = detail.viewer_rating
    st.caption("Your rating" if current else "Rate this recipe")
    cols = st.columns(MAX_RATING)
    for value, col in enumerate(cols, 1):
        label = "★" if value <= current else "☆"
        if col.button(f"{label} {value}", key=f"rate_{detail.recipe.id}_{value}", use_container_width=True):
            if detail.rate(value):
                st.rerun(scope="fragment")
            else:
                st.error("Could not save your rating. Please try again.")


def _render_comments(detail: RecipeDetail) -> None:
    st.markdown(f"#### Comments ({len(detail.comments)})")

    if detail.viewer is not None:
        text_key = f"comment_text_{detail.recipe.id}"
        text = st.text_area("Add a comment", key=text_key, height=80, label_visibility="collapsed",
                            placeholder="Share your thoughts…")
        if st.button("Post comment", disabled=not (text or "").strip()):
            if detail.add_comment(text) is not None:
                del st.session_state[text_key]
                st.rerun(scope="fragment")
            else:
                st.error("Could not post your comment. Please try again.")

    if not detail.comments:
        st.caption("No comments yet.")
    for comment in detail.comments:
        st.markdown(
            '<div class="fr-comment">'
            f'<span class="fr-comment-author">{html.escape(comment.author_name)}</span>'
            f'<span class="fr-comment-date">{_format_date(comment.created_at)}</span>'
            f"<div>{html.escape(comment.content)}</div>"
            "</div>",
            unsafe_allow_html=True,
        )


@st.dialog("Recipe", width="large")
def recipe_detail_dialog() -> None:
    detail = get_detail()
    if detail is None:
        st.caption("This recipe is no longer available.")
        return

    st.markdown(f"## {html.escape(detail.recipe.title)}")
    _render_header(detail)
    st.divider()
    _render_body(detail)
    st.divider()
    _render_rating(detail)
    st.divider()
    _render_comments(detail)
