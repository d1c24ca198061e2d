# dreamydrift/plots.py
from __future__ import annotations

from typing import List, Optional
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from domain.reasons import CATEGORY_COLORS, CATEGORY_LABELS

from .calendar_grid import WEEKDAY_HEADERS, DaySlot, grid_weeks
from .engine import BUCKET_COLORS, BUCKET_LABELS, QUALITY_BUCKETS, WindowStats

EMPTY_DAY_COLOR = "#e7e5e4"


def plot_month_heatmap(
    slots: List[Optional[DaySlot]],
    title: str = "Monthly sleep heatmap",
    ax: Optional[plt.Axes] = None,
):
    """
    Draw a month grid (7 columns, Sunday first) coloured by quality bucket.
    Returns matplotlib Figure.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(5, 4.5))
    else:
        fig = ax.figure

    weeks = grid_weeks(slots)
    n_rows = max(1, len(weeks))
    for row_idx, week in enumerate(weeks):
        y = n_rows - 1 - row_idx
        for col, slot in enumerate(week):
            if slot is None:
                continue
            color = BUCKET_COLORS.get(slot.bucket, EMPTY_DAY_COLOR) if slot.bucket else EMPTY_DAY_COLOR
            ax.add_patch(Rectangle((col + 0.05, y + 0.05), 0.9, 0.9, facecolor=color, edgecolor="none"))
            ax.text(col + 0.5, y + 0.5, str(slot.day_number), ha="center", va="center", fontsize=8)

    ax.set_xlim(0, 7)
    ax.set_ylim(0, n_rows)
    ax.set_xticks([i + 0.5 for i in range(7)])
    ax.set_xticklabels(WEEKDAY_HEADERS)
    ax.xaxis.tick_top()
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)
    ax.set_title(title)

    # Legend (dummy handles, one per bucket)
    for b in QUALITY_BUCKETS:
        ax.plot([], [], marker="s", linestyle="", color=BUCKET_COLORS[b], label=BUCKET_LABELS[b])
    ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=4, frameon=False, fontsize=8)
    return fig


def plot_category_distribution(
    stats: WindowStats,
    title: str = "Reason categories",
    ax: Optional[plt.Axes] = None,
):
    """Donut chart of the non-zero reason categories; None when there is nothing to show."""
    if not stats.category_distribution:
        return None
    if ax is None:
        fig, ax = plt.subplots(figsize=(4, 4))
    else:
        fig = ax.figure

    values = [c.count for c in stats.category_distribution]
    labels = [CATEGORY_LABELS.get(c.category, c.category) for c in stats.category_distribution]
    colors = [CATEGORY_COLORS.get(c.category, EMPTY_DAY_COLOR) for c in stats.category_distribution]
    ax.pie(values, labels=labels, colors=colors, startangle=90, wedgeprops={"width": 0.35})
    ax.set_aspect("equal")
    ax.set_title(title)
    return fig
