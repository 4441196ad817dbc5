"""
Family Recipes - Streamlit Frontend Main Entry Point.

Single-page app: sign-in screen, then the recipe feed with search box, filter
pills, recipe grid and the Add Recipe / Recipe Detail dialogs.

Run with:
    streamlit run streamlit_app/app.py
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import recipebook
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
from recipebook import config  # noqa: E402

import streamlit as st  # noqa: E402

from recipebook.backends.base import AuthError  # noqa: E402
from recipebook.events import log_search_performed  # noqa: E402
from recipebook.feed import FeedSnapshot  # noqa: E402
from recipebook.search import CATEGORY_MY_RECIPES, FILTER_OPTIONS  # noqa: E402
from ui.feedback import show_empty_state, show_error, show_flash  # noqa: E402
from ui.layout import page_header  # noqa: E402
from ui.recipe_cards import render_recipe_grid  # noqa: E402
from ui.recipe_detail import recipe_detail_dialog  # noqa: E402
from ui.recipe_form import add_recipe_dialog  # noqa: E402
from ui.styles import load_global_styles  # noqa: E402
from utils.state import get_backend, get_feed, open_detail, sign_out  # noqa: E402

config.configure_logging()

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Family Recipes",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="collapsed",
)

load_global_styles()

try:
    backend = get_backend()
except RuntimeError as e:
    show_error("The app is not configured correctly.", hint=str(e))
    st.stop()

feed = get_feed()
show_flash()


def render_sign_in() -> None:
    page_header("🍳 Family Recipes", "Share, discover and rate recipes with your family")
    _, col, _ = st.columns([1, 2, 1])
    with col:
        with st.form("sign_in"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)
        if submitted:
            try:
                backend.session.login(email, password or None)
            except AuthError as e:
                show_error("Sign in failed.", hint=str(e))
            else:
                st.rerun()
        if backend.mode == config.BACKEND_MEMORY:
            st.caption("Demo mode: any email signs you in. Recipes last until the server restarts.")


def _log_search() -> None:
    log_search_performed(feed.viewer_id, feed.query, feed.category, len(feed.visible()))


def render_filters(snapshot: FeedSnapshot) -> None:
    query = st.text_input(
        "Search recipes",
        value=snapshot.query,
        placeholder="Search by title, ingredient, tag or cuisine…",
        label_visibility="collapsed",
    )
    if query != snapshot.query:
        feed.set_query(query)
        _log_search()

    pill_cols = st.columns(len(FILTER_OPTIONS))
    for col, (key, label) in zip(pill_cols, FILTER_OPTIONS):
        selected = snapshot.category == key
        if col.button(
            label,
            key=f"filter_{key}",
            type="primary" if selected else "secondary",
            use_container_width=True,
        ):
            feed.set_category(key)
            _log_search()
            st.rerun()


def render_results(snapshot: FeedSnapshot) -> None:
    recipes = snapshot.recipes
    noun = "recipe" if len(recipes) == 1 else "recipes"
    line = f"Showing {len(recipes)} {noun}"
    if snapshot.query.strip():
        line += f" matching “{snapshot.query.strip()}”"
    st.caption(line)

    if not recipes:
        if snapshot.total == 0 or (snapshot.category == CATEGORY_MY_RECIPES and not snapshot.query.strip()):
            show_empty_state("No recipes yet", "Add your first recipe to get started!")
        else:
            show_empty_state("No recipes found", "Try a different search or filter.")
        return

    def on_open(recipe) -> None:
        open_detail(recipe)
        recipe_detail_dialog()

    render_recipe_grid(list(recipes), backend.storage, on_open)


def render_feed() -> None:
    def header_actions() -> None:
        if st.button("➕ Add Recipe", type="primary", use_container_width=True):
            add_recipe_dialog()
        if st.button("Sign out", use_container_width=True):
            sign_out()
            st.rerun()

    viewer = feed.viewer
    page_header(
        f"Welcome back, {viewer.display_name}!",
        "Discover and share amazing recipes with your family",
        right=header_actions,
    )

    if feed.load_failed:
        show_error("Could not load recipes.", hint="Check your connection and reload the page.")

    # Filter inputs first so the snapshot reflects this run's search box
    render_filters(feed.snapshot())
    render_results(feed.snapshot())


snapshot = feed.snapshot()
if snapshot.is_loading:
    st.caption("Loading…")
elif snapshot.viewer is None:
    render_sign_in()
else:
    render_feed()
