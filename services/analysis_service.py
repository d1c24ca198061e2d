from __future__ import annotations

from typing import Callable, List, Optional
import datetime as dt

from dreamydrift.coach import FALLBACK_ANALYSIS_TEXT, ranked_reason_labels, sleep_balance, summarize_window
from dreamydrift.engine import SleepRecord, WindowStats, compute_stats
from storage.repo import DriftRepo

# (stats snapshot, ranked reason labels, window size) -> narrative text; may raise
NarrativeFn = Callable[[WindowStats, List[str], int], str]


def summary_narrative(stats: WindowStats, labels: List[str], window_size: int) -> str:
    """Offline generator: the window facts plus the sleep-balance suggestion."""
    if stats.total_tracked == 0:
        return ""
    lines = [f"Last {window_size} nights:"]
    lines += [f"- {line}" for line in summarize_window(stats)]
    balance = sleep_balance(stats)
    if balance is not None:
        lines.append(f"{balance.title}. {balance.message}")
    return "\n".join(lines)


def refresh_analysis(
    repo: DriftRepo,
    generate: NarrativeFn,
    records: List[SleepRecord],
    window_size: int,
    now: Optional[dt.datetime] = None,
) -> str:
    """
    Runs the narrative generator on fresh stats and caches whatever comes back.
    Generator failures (no key, network, quota) degrade to the fallback text,
    which is cached like any other answer.
    """
    stats = compute_stats(records, window_size)
    labels = ranked_reason_labels(stats)
    try:
        text = generate(stats, labels, window_size)
        if not text:
            text = FALLBACK_ANALYSIS_TEXT
    except Exception as e:
        repo.audit_error("generate_analysis", e)
        text = FALLBACK_ANALYSIS_TEXT
    repo.cache_analysis(text, now=now)
    return text


def current_analysis(repo: DriftRepo, now: Optional[dt.datetime] = None) -> Optional[str]:
    cache = repo.latest_analysis(now=now)
    return cache.text if cache is not None else None
