# dreamydrift/engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from domain.reasons import LATE_REASON_CATEGORIES, REASON_CATEGORIES


# ----------------------------
# Data models
# ----------------------------

@dataclass
class SleepRecord:
    """
    One night, keyed by `date` (YYYY-MM-DD, the night being described).
    sleep_time / wake_time are "HH:MM" 24-hour strings.
    """
    date: str
    sleep_time: str
    wake_time: str
    reasons: List[str] = field(default_factory=list)


@dataclass
class SleepQuality:
    is_late: bool
    duration_minutes: int
    bucket: str  # PERFECT | OK | LATE_BUT_RESTED | BAD


@dataclass
class ReasonCount:
    id: str
    count: int
    category: Optional[str]


@dataclass
class CategoryCount:
    category: str
    count: int


@dataclass
class WindowStats:
    late_count: int
    insufficient_count: int
    top_reasons: List[ReasonCount]
    category_distribution: List[CategoryCount]
    total_tracked: int
    window_size: int = 7


# ----------------------------
# Constants
# ----------------------------

MINUTES_PER_DAY = 1440
GOOD_DURATION_MINUTES = 420  # 7h
LATE_HOUR_END = 12  # sleep hour in [0, 12) counts as late

PERFECT = "PERFECT"
OK = "OK"
LATE_BUT_RESTED = "LATE_BUT_RESTED"
BAD = "BAD"

QUALITY_BUCKETS: Tuple[str, ...] = (PERFECT, OK, LATE_BUT_RESTED, BAD)

BUCKET_LABELS: Dict[str, str] = {
    PERFECT: "Perfect",
    OK: "OK",
    LATE_BUT_RESTED: "Late but rested",
    BAD: "Bad",
}

BUCKET_COLORS: Dict[str, str] = {
    PERFECT: "#34d399",
    OK: "#facc15",
    LATE_BUT_RESTED: "#fb923c",
    BAD: "#fb7185",
}

# (is_late, is_good_duration) -> bucket
_BUCKET_TABLE: Dict[Tuple[bool, bool], str] = {
    (False, True): PERFECT,
    (False, False): OK,
    (True, True): LATE_BUT_RESTED,
    (True, False): BAD,
}

MONTH_WINDOW = 30
MONTH_TOP_REASONS = 10
DEFAULT_TOP_REASONS = 5


# ----------------------------
# Time arithmetic
# ----------------------------

def to_minutes(hhmm: str) -> int:
    """
    "HH:MM" -> minutes since midnight, in [0, 1440).
    Raises ValueError on anything else; callers are expected to feed
    widget-constrained values.
    """
    s = str(hhmm).strip()
    hh, sep, mm = s.partition(":")
    if not sep or not hh.isdigit() or not mm.isdigit() or len(mm) != 2:
        raise ValueError(f"invalid HH:MM time: {hhmm!r}")
    h, m = int(hh), int(mm)
    if h >= 24 or m >= 60:
        raise ValueError(f"invalid HH:MM time: {hhmm!r}")
    return h * 60 + m


def duration_minutes(sleep_minutes: int, wake_minutes: int) -> int:
    # equal values are a zero-length night, never 24h
    if sleep_minutes <= wake_minutes:
        return wake_minutes - sleep_minutes
    return (MINUTES_PER_DAY - sleep_minutes) + wake_minutes


def sleep_duration_minutes(sleep_time: str, wake_time: str) -> int:
    return duration_minutes(to_minutes(sleep_time), to_minutes(wake_time))


def format_duration(minutes: int) -> str:
    """480 -> '8h 0m'"""
    hours, mins = divmod(max(0, int(minutes)), 60)
    return f"{hours}h {mins}m"


# ----------------------------
# Quality classifier
# ----------------------------

def is_late_sleep(sleep_time: str) -> bool:
    # Coarse heuristic: any sleep start from 00:00 to 11:59 is "late".
    # Wake time is not considered.
    return to_minutes(sleep_time) // 60 < LATE_HOUR_END


def classify(sleep_time: str, wake_time: str) -> SleepQuality:
    late = is_late_sleep(sleep_time)
    dur = sleep_duration_minutes(sleep_time, wake_time)
    bucket = _BUCKET_TABLE[(late, dur >= GOOD_DURATION_MINUTES)]
    return SleepQuality(is_late=late, duration_minutes=dur, bucket=bucket)


def classify_record(record: SleepRecord) -> SleepQuality:
    return classify(record.sleep_time, record.wake_time)


def normalize_record(record: SleepRecord) -> SleepRecord:
    """
    Reasons only make sense for late nights; drop them otherwise.
    Duplicate reason ids collapse (first occurrence wins).
    """
    reasons: List[str] = []
    if is_late_sleep(record.sleep_time):
        for rid in record.reasons or []:
            rid = str(rid)
            if rid and rid not in reasons:
                reasons.append(rid)
    return SleepRecord(
        date=record.date,
        sleep_time=record.sleep_time,
        wake_time=record.wake_time,
        reasons=reasons,
    )


# ----------------------------
# Aggregation
# ----------------------------

def sort_records_desc(records: List[SleepRecord]) -> List[SleepRecord]:
    # ISO dates sort lexicographically; sorted() is stable for equal dates.
    return sorted(records, key=lambda r: r.date, reverse=True)


def top_reason_limit(window_size: int) -> int:
    return MONTH_TOP_REASONS if window_size == MONTH_WINDOW else DEFAULT_TOP_REASONS


def compute_stats(
    records: List[SleepRecord],
    window_size: int,
    reason_categories: Optional[Mapping[str, str]] = None,
) -> WindowStats:
    """
    Stats over the `window_size` most recent nights (fewer if history is short).
    - reason ids map to categories via `reason_categories`; unknown ids are still
      ranked but carry category None and are left out of the distribution.
    - top reasons: descending count, ties keep first-seen order.
    """
    categories = LATE_REASON_CATEGORIES if reason_categories is None else reason_categories
    window = sort_records_desc(records)[: max(0, int(window_size))]

    late_count = 0
    insufficient_count = 0
    reason_counts: Dict[str, int] = {}
    category_counts: Dict[str, int] = {c: 0 for c in REASON_CATEGORIES}

    for r in window:
        q = classify_record(r)
        if q.is_late:
            late_count += 1
        if q.duration_minutes < GOOD_DURATION_MINUTES:
            insufficient_count += 1
        for rid in r.reasons or []:
            reason_counts[rid] = reason_counts.get(rid, 0) + 1
            cat = categories.get(rid)
            if cat is not None:
                category_counts[cat] = category_counts.get(cat, 0) + 1

    ranked = sorted(reason_counts.items(), key=lambda kv: kv[1], reverse=True)
    top = [
        ReasonCount(id=rid, count=n, category=categories.get(rid))
        for rid, n in ranked[: top_reason_limit(window_size)]
    ]
    distribution = [CategoryCount(category=c, count=n) for c, n in category_counts.items() if n > 0]

    return WindowStats(
        late_count=late_count,
        insufficient_count=insufficient_count,
        top_reasons=top,
        category_distribution=distribution,
        total_tracked=len(window),
        window_size=int(window_size),
    )
