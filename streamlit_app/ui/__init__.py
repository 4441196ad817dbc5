"""
UI Styling and Components Module.

This module provides global CSS styling, layout primitives and the recipe
grid and dialogs for the Family Recipes Streamlit app.
"""

from ui.styles import load_global_styles
from ui.layout import page_header, section

__all__ = [
    "load_global_styles",
    "page_header",
    "section",
]
