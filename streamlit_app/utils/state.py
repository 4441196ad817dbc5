"""
Session State Management Module.

This module wraps Streamlit's session_state to give the page a small API over
the objects that must survive reruns:

- `backend`: the collaborator clients for this browser session
- `feed`: the RecipeFeed following this session's sign-in state
- `recipe_form`: the Add Recipe form draft
- `recipe_detail`: the RecipeDetail of the open dialog, if any
- `flash`: a one-shot toast message shown on the next rerun

# NOTE: The store and storage are shared by every browser session through
    st.cache_resource; only the session provider (and in rest mode the HTTP
    client) is per session. In memory mode, recipes therefore last until the
    Streamlit server restarts.
"""

from typing import Optional, Tuple

import streamlit as st

from recipebook.backends.factory import Backend, build_backend
from recipebook.config import FeedConfig
from recipebook.detail import RecipeDetail
from recipebook.feed import RecipeFeed
from recipebook.forms import RecipeForm
from recipebook.models import Recipe

# Session state keys
BACKEND_KEY = "backend"
FEED_KEY = "feed"
FORM_KEY = "recipe_form"
DETAIL_KEY = "recipe_detail"
FLASH_KEY = "flash"


@st.cache_resource(show_spinner=False)
def _app_backend() -> Backend:
    """Backend shared by all sessions of this Streamlit server."""
    return build_backend()


def get_backend() -> Backend:
    if BACKEND_KEY not in st.session_state:
        st.session_state[BACKEND_KEY] = _app_backend().for_new_session()
    return st.session_state[BACKEND_KEY]


def get_feed() -> RecipeFeed:
    """
    Get this session's feed, creating it on first use.

    The feed subscribes to the session provider, so it reloads by itself
    whenever the user signs in.
    """
    if FEED_KEY not in st.session_state:
        backend = get_backend()
        st.session_state[FEED_KEY] = RecipeFeed(
            backend.session,
            backend.store,
            page_size=FeedConfig.get_page_size(),
        )
    return st.session_state[FEED_KEY]


def get_recipe_form() -> RecipeForm:
    if FORM_KEY not in st.session_state:
        # Reload the feed after every successful submit
        st.session_state[FORM_KEY] = RecipeForm(on_recipe_added=lambda _recipe: get_feed().load())
    return st.session_state[FORM_KEY]


def open_detail(recipe: Recipe) -> RecipeDetail:
    """
    Open the detail view for a recipe, loading its comments and ratings.

    Args:
        recipe: Recipe clicked in the grid

    Returns:
        The RecipeDetail now stored in session state
    """
    backend = get_backend()
    detail = RecipeDetail(backend.store, recipe, get_feed().viewer)
    detail.open()
    st.session_state[DETAIL_KEY] = detail
    return detail


def get_detail() -> Optional[RecipeDetail]:
    return st.session_state.get(DETAIL_KEY)


def close_detail() -> None:
    st.session_state.pop(DETAIL_KEY, None)


def flash(message: str, kind: str = "success") -> None:
    """Queue a toast for the next rerun. `kind` is "success" or "error"."""
    st.session_state[FLASH_KEY] = (message, kind)


def pop_flash() -> Optional[Tuple[str, str]]:
    return st.session_state.pop(FLASH_KEY, None)


def sign_out() -> None:
    """Sign out and drop per-user view state."""
    get_backend().session.logout()
    close_detail()
    st.session_state.pop(FORM_KEY, None)
