"""
Chart builders for the recipe detail dialog.

Charts are drawn small and inline, in the same warm palette as the recipe
cards (see styles.py).
"""

from typing import Dict

import altair as alt
import pandas as pd

# Palette shared with the card and badge CSS
COLORS = {
    "star": "#f59e0b",         # Amber
    "muted": "#fdba74",        # Light orange
    "text": "#7c2d12",         # Deep brown
    "background": "#ffffff",
}


def apply_recipe_theme(chart: alt.Chart) -> alt.Chart:
    """
    Strip an Altair chart down to bars and labels for use inside a dialog.

    Args:
        chart: Altair chart to style

    Returns:
        Styled chart without grid, axis lines or view border
    """
    return chart.configure_view(
        stroke=None,
    ).configure_axis(
        grid=False,
        domain=False,
        ticks=False,
        labelColor=COLORS["text"],
        labelFontSize=12,
        labelPadding=6,
    ).configure(
        background=COLORS["background"],
        padding=4,
    )


def rating_distribution_frame(distribution: Dict[int, int]) -> pd.DataFrame:
    """
    Turn a {stars: count} mapping into a chart-ready DataFrame.

    Rows are ordered 5 stars first, matching how review breakdowns usually read.
    """
    rows = [
        {"stars": f"{stars} ★", "count": count, "order": stars}
        for stars, count in distribution.items()
    ]
    df = pd.DataFrame(rows, columns=["stars", "count", "order"])
    return df.sort_values("order", ascending=False).reset_index(drop=True)


def build_rating_distribution(distribution: Dict[int, int]) -> alt.Chart:
    """
    Horizontal bar per star value showing how many ratings it received.

    Bars for star values with no ratings are drawn in the muted color so the
    five rows always line up.
    """
    df = rating_distribution_frame(distribution)
    chart = alt.Chart(df).mark_bar(
        cornerRadiusEnd=4,
        height=14,
    ).encode(
        x=alt.X("count:Q", axis=None),
        y=alt.Y("stars:N", sort=df["stars"].tolist(), title=None),
        color=alt.condition(
            alt.datum.count > 0,
            alt.value(COLORS["star"]),
            alt.value(COLORS["muted"]),
        ),
        tooltip=[
            alt.Tooltip("stars:N", title="Rating"),
            alt.Tooltip("count:Q", title="Votes"),
        ],
    ).properties(
        height=140
    )
    return apply_recipe_theme(chart)
