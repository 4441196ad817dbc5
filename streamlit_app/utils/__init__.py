"""
Utility modules for the Streamlit frontend.

This package contains:
- state: Session state management helpers (backend, feed, form, detail view)
"""
