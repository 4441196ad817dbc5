"""
Standardized feedback utilities for consistent error, empty, and loading states.

Provides reusable components for displaying errors, empty states, toasts and
loading indicators across the app in a consistent manner.
"""

from contextlib import contextmanager
from typing import Optional

import streamlit as st

from utils.state import pop_flash


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Display a standardized error message with optional hint.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_empty_state(title: str, subtitle: Optional[str] = None) -> None:
    """
    Display a standardized empty state.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
    """
    st.info(f"🍽️ **{title}**")
    if subtitle:
        st.caption(subtitle)


def show_flash() -> None:
    """Show the toast queued by the previous run, if any."""
    queued = pop_flash()
    if not queued:
        return
    message, kind = queued
    icon = "✅" if kind == "success" else "⚠️"
    st.toast(message, icon=icon)


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Saving recipe…"):
            form.submit(...)

    Args:
        label: Spinner label text (default: "Working…")
    """
    with st.spinner(label):
        yield
