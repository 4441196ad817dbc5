"""
Global CSS Styling for Family Recipes.

This module provides load_global_styles() to inject consistent styling into
the page. Focuses on typography, recipe cards, badges and star ratings.
"""

import streamlit as st


def load_global_styles() -> None:
    """
    Inject global CSS styles for the Family Recipes app.

    This function:
    - Imports Google Fonts (Nunito) for friendly typography
    - Styles buttons as rounded pills in the warm orange theme
    - Defines recipe card, privacy badge, tag pill and star rating classes
    - Keeps the content column readable on large screens
    """
    css = """
    <style>
        @import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;600;700&display=swap');

        /* Global font family */
        html, body, [class*="css"] {
            font-family: 'Nunito', 'sans serif' !important;
        }

        h1, h2, h3, h4, h5, h6 {
            font-weight: 600 !important;
            letter-spacing: 0.02em !important;
        }

        h1 {
            font-size: 2.25rem !important;
            margin-bottom: 0.5rem !important;
        }

        p, .stMarkdown p {
            line-height: 1.6 !important;
            margin-bottom: 0.5rem !important;
        }

        /* Buttons - rounded pills */
        .stButton > button {
            border-radius: 50px !important;
            box-shadow: 0 2px 6px rgba(234, 88, 12, 0.12) !important;
            transition: all 0.3s ease !important;
            font-weight: 600 !important;
        }

        .stButton > button:hover {
            box-shadow: 0 3px 10px rgba(234, 88, 12, 0.2) !important;
            transform: translateY(-1px) !important;
        }

        /* Main app container: consistent width & spacing */
        .main .block-container {
            max-width: 1200px !important;
            padding-top: 1.5rem !important;
            padding-bottom: 2.5rem !important;
        }

        /* Page header */
        .fr-page-header {
            margin-bottom: 1.25rem !important;
        }

        .fr-page-header .subtitle {
            color: #666 !important;
            font-size: 1rem !important;
        }

        /* Recipe card */
        .fr-card {
            border-radius: 12px !important;
            padding: 0.75rem 1rem !important;
            background-color: #ffffff !important;
            border: 1px solid rgba(234, 88, 12, 0.12) !important;
            margin-bottom: 0.5rem !important;
        }

        .fr-card-image {
            width: 100%;
            height: 180px;
            object-fit: cover;
            border-radius: 10px;
            background: linear-gradient(135deg, #ffedd5 0%, #fef3c7 100%);
        }

        .fr-card-placeholder {
            height: 180px;
            border-radius: 10px;
            display: flex;
            align-items: center;
            justify-content: center;
            font-size: 3rem;
            background: linear-gradient(135deg, #ffedd5 0%, #fef3c7 100%);
        }

        .fr-card-title {
            font-weight: 700;
            font-size: 1.1rem;
            margin: 0.5rem 0 0.25rem 0;
        }

        .fr-card-meta {
            color: #666;
            font-size: 0.85rem;
        }

        /* Privacy badges */
        .fr-badge {
            display: inline-block;
            padding: 0.15rem 0.6rem;
            border-radius: 50px;
            font-size: 0.75rem;
            font-weight: 600;
            text-transform: capitalize;
        }

        .fr-badge--public {
            background: #dcfce7;
            color: #166534;
        }

        .fr-badge--protected {
            background: #fef9c3;
            color: #854d0e;
        }

        .fr-badge--private {
            background: #fee2e2;
            color: #991b1b;
        }

        /* Tag pills */
        .fr-tag {
            display: inline-block;
            padding: 0.2rem 0.7rem;
            border-radius: 50px;
            background: #ffedd5;
            color: #c2410c;
            font-size: 0.75rem;
            font-weight: 600;
            margin: 0 0.25rem 0.25rem 0;
        }

        /* Star ratings */
        .fr-stars {
            color: #f59e0b;
            letter-spacing: 0.05em;
        }

        .fr-stars .empty {
            color: #d1d5db;
        }

        /* Comments */
        .fr-comment {
            border-left: 3px solid #fdba74;
            padding: 0.25rem 0.75rem;
            margin-bottom: 0.75rem;
        }

        .fr-comment-author {
            font-weight: 700;
            font-size: 0.9rem;
        }

        .fr-comment-date {
            color: #999;
            font-size: 0.75rem;
            margin-left: 0.5rem;
        }
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)
