"""
Tests for the pure helpers behind the Streamlit UI.

The ui package is imported the way app.py imports it (streamlit_app/ on the
path), so these tests cover the formatting, the chart data and the detail
dialog's failure handling without running a Streamlit session (st is patched).
"""

from unittest.mock import Mock, patch

import pytest

from recipebook.backends.memory import InMemoryObjectStorage
from recipebook.models import PrivacyLevel
from ui.charts import build_rating_distribution, rating_distribution_frame
from ui.layout import format_minutes, privacy_badge_html, stars_html, tag_pills_html
from ui import recipe_detail
from ui.recipe_cards import image_source


class TestFormatting:
    """Test text and HTML fragment helpers."""

    @pytest.mark.parametrize("minutes,expected", [
        (None, None), (0, "0m"), (45, "45m"), (60, "1h"), (90, "1h 30m"),
    ])
    def test_format_minutes(self, minutes, expected):
        """Test human-readable durations."""
        assert format_minutes(minutes) == expected

    def test_stars_html(self):
        """Test that 3.6 renders four filled stars and one empty star."""
        html = stars_html(3.6)
        assert html.count("★") == 5
        assert '<span class="empty">★</span>' in html

    def test_privacy_badge(self):
        """Test that the badge carries the privacy level class."""
        assert "fr-badge--private" in privacy_badge_html(PrivacyLevel.PRIVATE)

    def test_tag_pills_escape_html(self):
        """Test that user-entered tags are escaped."""
        html = tag_pills_html(["<b>hot</b>"])
        assert "&lt;b&gt;hot&lt;/b&gt;" in html
        assert "<b>" not in html


class TestCharts:
    """Test chart data preparation."""

    def test_distribution_frame_orders_five_stars_first(self):
        """Test that rows run from 5 stars down to 1."""
        df = rating_distribution_frame({1: 0, 2: 1, 3: 0, 4: 2, 5: 3})
        assert df["order"].tolist() == [5, 4, 3, 2, 1]
        assert df["count"].tolist() == [3, 2, 0, 1, 0]

    def test_build_chart(self):
        """Test that the chart builds from a distribution."""
        chart = build_rating_distribution({1: 0, 2: 0, 3: 1, 4: 0, 5: 2})
        assert chart.to_dict()["mark"]["type"] == "bar"


class TestImageSource:
    """Test resolving stored image URLs for display."""

    def test_memory_url_reads_bytes(self):
        """Test that memory:// URLs resolve to the uploaded bytes."""
        storage = InMemoryObjectStorage()
        result = storage.upload(b"img", "recipes/1-a.png")
        assert image_source(result.public_url, storage) == b"img"

    def test_http_url_passes_through(self):
        """Test that hosted URLs are handed to st.image unchanged."""
        url = "https://cdn.example.com/a.png"
        assert image_source(url, InMemoryObjectStorage()) == url

    def test_missing_url(self):
        """Test that recipes without an image resolve to None."""
        assert image_source(None, InMemoryObjectStorage()) is None


def _detail_mock(**overrides):
    detail = Mock()
    detail.recipe.id = "recipe_1"
    detail.summary.count = 0
    detail.viewer_rating = 0
    detail.comments = []
    for name, value in overrides.items():
        setattr(detail, name, value)
    return detail


def _columns_clicking(value):
    """st.columns stand-in where only the star button `value` is clicked."""
    return lambda n: [Mock(**{"button.return_value": i == value}) for i in range(1, n + 1)]


class TestDetailDialogFailures:
    """Test that failed writes in the detail dialog leave the error on screen."""

    def test_failed_rating_shows_error_without_rerun(self):
        """Test that a rating that was not saved keeps the run and shows an error."""
        detail = _detail_mock()
        detail.rate.return_value = False
        with patch("ui.recipe_detail.st") as st:
            st.columns.side_effect = _columns_clicking(4)
            recipe_detail._render_rating(detail)

        detail.rate.assert_called_once_with(4)
        st.error.assert_called_once()
        st.rerun.assert_not_called()

    def test_saved_rating_reruns_dialog(self):
        """Test that a saved rating refreshes the dialog without an error."""
        detail = _detail_mock()
        detail.rate.return_value = True
        with patch("ui.recipe_detail.st") as st:
            st.columns.side_effect = _columns_clicking(5)
            recipe_detail._render_rating(detail)

        st.rerun.assert_called_once_with(scope="fragment")
        st.error.assert_not_called()

    def test_failed_comment_keeps_text_and_shows_error(self):
        """Test that a comment that was not posted keeps the typed text visible."""
        detail = _detail_mock()
        detail.add_comment.return_value = None
        with patch("ui.recipe_detail.st") as st:
            st.session_state = {"comment_text_recipe_1": "Lovely"}
            st.text_area.return_value = "Lovely"
            st.button.return_value = True
            recipe_detail._render_comments(detail)

        st.error.assert_called_once()
        st.rerun.assert_not_called()
        assert st.session_state == {"comment_text_recipe_1": "Lovely"}

    def test_posted_comment_clears_text_and_reruns(self):
        """Test that a posted comment clears the box and refreshes the dialog."""
        detail = _detail_mock()
        detail.add_comment.return_value = Mock()
        with patch("ui.recipe_detail.st") as st:
            st.session_state = {"comment_text_recipe_1": "Lovely"}
            st.text_area.return_value = "Lovely"
            st.button.return_value = True
            recipe_detail._render_comments(detail)

        st.rerun.assert_called_once_with(scope="fragment")
        st.error.assert_not_called()
        assert st.session_state == {}
