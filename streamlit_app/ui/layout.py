"""
Layout primitives for consistent page structure.

Provides reusable components for page headers, sections, cards, and the small
HTML fragments (stars, privacy badges, tag pills) shared by the recipe grid
and the detail dialog.
"""

import html
from contextlib import contextmanager
from typing import Callable, List, Optional

import streamlit as st

from recipebook.models import PrivacyLevel
from recipebook.ratings import MAX_RATING, filled_stars

PRIVACY_ICONS = {
    PrivacyLevel.PUBLIC: "🌍",
    PrivacyLevel.PROTECTED: "🛡️",
    PrivacyLevel.PRIVATE: "🔒",
}


def page_header(title: str, subtitle: Optional[str] = None, right: Optional[Callable[[], None]] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
        right: Optional callable that renders right-side content (e.g., buttons)
    """
    if right is not None:
        col_title, col_right = st.columns([3, 1])
        with col_title:
            _header_block(title, subtitle)
        with col_right:
            right()
    else:
        _header_block(title, subtitle)


def _header_block(title: str, subtitle: Optional[str]) -> None:
    st.markdown('<div class="fr-page-header">', unsafe_allow_html=True)
    st.markdown(f"# {title}")
    if subtitle:
        st.markdown(f'<div class="subtitle">{html.escape(subtitle)}</div>', unsafe_allow_html=True)
    st.markdown('</div>', unsafe_allow_html=True)


def section(title: str, caption: Optional[str] = None) -> None:
    """
    Render a section header with optional caption.

    Args:
        title: Section title
        caption: Optional caption/help text below title
    """
    st.markdown(f"#### {title}")
    if caption:
        st.caption(caption)


@contextmanager
def card():
    """
    Context manager for a bordered card container.

    Usage:
        with card():
            st.write("Card content")
    """
    with st.container(border=True):
        yield


def stars_html(mean: float) -> str:
    """Five stars with round(mean) of them filled."""
    filled = filled_stars(mean)
    return (
        '<span class="fr-stars">'
        + "★" * filled
        + f'<span class="empty">{"★" * (MAX_RATING - filled)}</span>'
        + "</span>"
    )


def privacy_badge_html(level: PrivacyLevel) -> str:
    icon = PRIVACY_ICONS.get(level, "")
    return f'<span class="fr-badge fr-badge--{level.value}">{icon} {level.value}</span>'


def tag_pills_html(tags: List[str]) -> str:
    return "".join(f'<span class="fr-tag">{html.escape(tag)}</span>' for tag in tags)


def format_minutes(minutes: Optional[int]) -> Optional[str]:
    """Format a duration in minutes, e.g. 90 -> "1h 30m". None stays None."""
    if minutes is None:
        return None
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"{hours}h {mins}m"
    if hours:
        return f"{hours}h"
    return f"{mins}m"
