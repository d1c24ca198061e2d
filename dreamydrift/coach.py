# dreamydrift/coach.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from domain.checklist import CHECKLIST_ITEM_IDS
from domain.reasons import reason_label

from .engine import WindowStats


@dataclass
class BalanceInsight:
    level: str               # healthy | low | debt
    title: str
    message: str             # suggestion-style sentence


FALLBACK_ANALYSIS_TEXT = (
    "The sleep coach is unavailable right now. Your nights are still recorded; "
    "try winding down 30 minutes earlier tonight and check back tomorrow."
)


def late_night_tier(stats: WindowStats) -> str:
    if stats.late_count == 0:
        return "none"
    if stats.late_count < 3:
        return "few"
    return "many"


def sleep_balance(stats: WindowStats) -> Optional[BalanceInsight]:
    """
    Short-night tiers of the weekly review:
    > 3 short nights is accumulated debt, 1..3 a mild deficit.
    None when nothing has been tracked yet.
    """
    n = stats.insufficient_count
    if n > 3:
        return BalanceInsight(
            level="debt",
            title="Sleep debt is piling up",
            message="A lot of short nights lately. A 15-20 minute nap at lunch or going to bed an hour earlier tonight may help.",
        )
    if n > 0:
        return BalanceInsight(
            level="low",
            title="Running slightly low",
            message="You are holding up, but try not to overdraw. Sleeping in a little on the weekend can help.",
        )
    if stats.total_tracked > 0:
        return BalanceInsight(
            level="healthy",
            title="Fully charged",
            message="Your sleep length looks healthy. Keep it up!",
        )
    return None


def ranked_reason_labels(stats: WindowStats) -> List[str]:
    return [reason_label(r.id) for r in stats.top_reasons]


def checklist_progress(completed_ids: List[str]) -> int:
    """Percent of the pre-sleep checklist done (unknown ids ignored)."""
    if not CHECKLIST_ITEM_IDS:
        return 0
    done = len(set(completed_ids) & set(CHECKLIST_ITEM_IDS))
    # half-up, 1 of 8 -> 13
    return int(done * 100 / len(CHECKLIST_ITEM_IDS) + 0.5)


def summarize_window(stats: WindowStats) -> List[str]:
    """Plain one-line facts about a window, used by the offline review text."""
    lines = [
        f"Late nights (asleep after 00:00): {stats.late_count} / {stats.total_tracked}",
        f"Short nights (< 7h): {stats.insufficient_count} / {stats.total_tracked}",
    ]
    labels = ranked_reason_labels(stats)
    lines.append("Top reasons: " + (", ".join(labels) if labels else "none recorded"))
    return lines
