"""
Add Recipe dialog.

The dialog body runs as a Streamlit fragment: tag buttons and other widgets
only rerun the dialog, so the draft lives in the RecipeForm kept in session
state. A successful submit triggers a full rerun, which closes the dialog and
shows the reloaded feed.
"""

import streamlit as st

from recipebook.models import PrivacyLevel
from recipebook.search import MEAL_TYPES
from utils.state import flash, get_backend, get_recipe_form
from ui.feedback import working_spinner

WIDGET_PREFIX = "draft_"
IMAGE_TYPES = ["png", "jpg", "jpeg", "webp", "gif"]

PRIVACY_HELP = {
    PrivacyLevel.PUBLIC: "Everyone can see this recipe",
    PrivacyLevel.PROTECTED: "Only you can see this recipe for now",
    PrivacyLevel.PRIVATE: "Only you can see this recipe",
}


def _clear_widgets() -> None:
    for key in [k for k in st.session_state.keys() if str(k).startswith(WIDGET_PREFIX)]:
        del st.session_state[key]


@st.dialog("Add New Recipe", width="large")
def add_recipe_dialog() -> None:
    form = get_recipe_form()
    draft = form.draft

    uploaded = st.file_uploader("Recipe image", type=IMAGE_TYPES, key=f"{WIDGET_PREFIX}image")
    if uploaded is not None:
        form.attach_image(uploaded.name, uploaded.getvalue(), uploaded.type)
        st.image(uploaded, width=240)
    else:
        draft.image = None

    draft.title = st.text_input("Title *", key=f"{WIDGET_PREFIX}title", placeholder="Grandma's apple pie")
    draft.description = st.text_area("Description", key=f"{WIDGET_PREFIX}description", height=80)

    col_prep, col_cook, col_serv = st.columns(3)
    with col_prep:
        draft.prep_time = st.text_input("Prep time (min)", key=f"{WIDGET_PREFIX}prep_time")
    with col_cook:
        draft.cook_time = st.text_input("Cook time (min)", key=f"{WIDGET_PREFIX}cook_time")
    with col_serv:
        draft.servings = st.text_input("Servings", key=f"{WIDGET_PREFIX}servings")

    col_cuisine, col_meal = st.columns(2)
    with col_cuisine:
        draft.cuisine_type = st.text_input(
            "Cuisine", key=f"{WIDGET_PREFIX}cuisine_type", placeholder="italian"
        ).strip().lower()
    with col_meal:
        meal = st.selectbox(
            "Meal type",
            options=[""] + list(MEAL_TYPES),
            format_func=lambda v: v.title() if v else "Select…",
            key=f"{WIDGET_PREFIX}meal_type",
        )
        draft.meal_type = meal or ""

    draft.ingredients = st.text_area(
        "Ingredients (one per line)", key=f"{WIDGET_PREFIX}ingredients", height=140
    )
    draft.instructions = st.text_area(
        "Instructions (one step per line)", key=f"{WIDGET_PREFIX}instructions", height=160
    )

    st.markdown("**Tags**")
    col_tag, col_add = st.columns([3, 1])
    with col_tag:
        new_tag = st.text_input("Tag", key=f"{WIDGET_PREFIX}new_tag", label_visibility="collapsed")
    with col_add:
        if st.button("Add tag", use_container_width=True):
            form.add_tag(new_tag)
    if draft.tags:
        tag_cols = st.columns(min(len(draft.tags), 6))
        for i, tag in enumerate(list(draft.tags)):
            with tag_cols[i % len(tag_cols)]:
                if st.button(f"{tag} ✕", key=f"{WIDGET_PREFIX}remove_{tag}"):
                    form.remove_tag(tag)
                    st.rerun(scope="fragment")

    draft.source_url = st.text_input("Source URL", key=f"{WIDGET_PREFIX}source_url")

    levels = list(PrivacyLevel)
    draft.privacy_level = st.radio(
        "Privacy level",
        options=levels,
        format_func=lambda level: level.value.title(),
        horizontal=True,
        key=f"{WIDGET_PREFIX}privacy_level",
    )
    st.caption(PRIVACY_HELP[draft.privacy_level])

    if form.last_error:
        st.error(form.last_error)

    if st.button("Create Recipe", type="primary", use_container_width=True, disabled=not draft.title.strip()):
        backend = get_backend()
        with working_spinner("Saving recipe…"):
            recipe = form.submit(backend.session, backend.store, backend.storage)
        if recipe is not None:
            _clear_widgets()
            flash(f"Added “{recipe.title}”")
            st.rerun()
        else:
            st.rerun(scope="fragment")
