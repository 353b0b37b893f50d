"""Book-value charts for depreciation schedules.

Recorded book values are drawn as a solid line, projected book values as a
dashed continuation, and residual value as a horizontal floor.
"""

from typing import Optional, Tuple

from matplotlib.figure import Figure
import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter

from .models import DepreciationSchedule

COLORS = {
    "recorded": "#0080C7",
    "projected": "#FF9800",
    "residual": "#666666",
    "grid": "#E0E0E0",
}


def format_currency(value: float, decimals: int = 0, abbreviate: bool = False) -> str:
    """Format value as currency.

    Args:
        value: Numeric value to format
        decimals: Number of decimal places
        abbreviate: If True, use K/M/B notation for large numbers

    Returns:
        Formatted string (e.g., "$1,000" or "$1K" if abbreviate=True)

    Examples:
        >>> format_currency(1000)
        '$1,000'
        >>> format_currency(1500000, abbreviate=True)
        '$1.5M'
        >>> format_currency(-2500.5, decimals=2)
        '-$2,500.50'
    """
    value = float(value)
    if abbreviate:
        sign = "-" if value < 0 else ""
        magnitude = abs(value)
        if magnitude >= 1e9:
            return f"{sign}${magnitude/1e9:.{max(decimals, 1)}f}B"
        if magnitude >= 1e6:
            return f"{sign}${magnitude/1e6:.{max(decimals, 1)}f}M"
        if magnitude >= 1e3:
            return f"{sign}${magnitude/1e3:.{decimals}f}K"
        return f"{sign}${magnitude:.{decimals}f}"
    if value < 0:
        return f"-${abs(value):,.{decimals}f}"
    return f"${value:,.{decimals}f}"


def plot_schedule(
    schedule: DepreciationSchedule,
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (10, 6),
) -> Figure:
    """Plot book value over time for a depreciation schedule.

    Args:
        schedule: Schedule to draw.
        title: Chart title; defaults to the asset id.
        figsize: Figure size in inches.

    Returns:
        The matplotlib Figure (caller is responsible for closing it).
    """
    fig, ax = plt.subplots(figsize=figsize)

    if schedule.entries:
        ax.plot(
            [e.date for e in schedule.entries],
            [float(e.book_value) for e in schedule.entries],
            color=COLORS["recorded"],
            marker="o",
            markersize=3,
            label="Recorded",
        )

    if schedule.projected_entries:
        projected = list(schedule.projected_entries)
        dates = [e.date for e in projected]
        values = [float(e.book_value) for e in projected]
        if schedule.entries:
            # Join the projection onto the last recorded point
            dates.insert(0, schedule.entries[-1].date)
            values.insert(0, float(schedule.entries[-1].book_value))
        ax.plot(dates, values, color=COLORS["projected"], linestyle="--", label="Projected")

    ax.axhline(
        float(schedule.residual_value),
        color=COLORS["residual"],
        linestyle=":",
        linewidth=1,
        label="Residual value",
    )

    ax.set_title(title or f"Book value - {schedule.asset_id}")
    ax.set_ylabel("Book value")
    ax.yaxis.set_major_formatter(
        FuncFormatter(lambda x, pos: format_currency(x, decimals=0, abbreviate=True))
    )
    ax.grid(True, color=COLORS["grid"], linewidth=0.5)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.legend(loc="upper right", frameon=False)
    fig.autofmt_xdate()
    fig.tight_layout()
    return fig
