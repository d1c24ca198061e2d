from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

PSYCHOLOGICAL = "PSYCHOLOGICAL"
BEHAVIORAL = "BEHAVIORAL"
PHYSIOLOGICAL = "PHYSIOLOGICAL"
EXTERNAL = "EXTERNAL"

# Display / distribution order.
REASON_CATEGORIES: Tuple[str, ...] = (PSYCHOLOGICAL, BEHAVIORAL, PHYSIOLOGICAL, EXTERNAL)

CATEGORY_LABELS: Dict[str, str] = {
    PSYCHOLOGICAL: "Psychological",
    BEHAVIORAL: "Behavioral",
    PHYSIOLOGICAL: "Physiological",
    EXTERNAL: "External",
}

CATEGORY_COLORS: Dict[str, str] = {
    PSYCHOLOGICAL: "#fca5a5",
    BEHAVIORAL: "#fdba74",
    PHYSIOLOGICAL: "#86efac",
    EXTERNAL: "#cbd5e1",
}


@dataclass(frozen=True)
class LateReason:
    id: str
    label: str
    category: str


LATE_REASONS: List[LateReason] = [
    LateReason("psy_revenge", "Revenge bedtime procrastination", PSYCHOLOGICAL),
    LateReason("psy_mood", "Low or restless mood", PSYCHOLOGICAL),
    LateReason("psy_escape", "Avoiding tomorrow", PSYCHOLOGICAL),
    LateReason("psy_stress", "Stress / anxiety", PSYCHOLOGICAL),
    LateReason("beh_shower", "Late shower", BEHAVIORAL),
    LateReason("beh_phone", "Scrolling the phone", BEHAVIORAL),
    LateReason("beh_binge", "Binge-watching", BEHAVIORAL),
    LateReason("beh_game", "Gaming", BEHAVIORAL),
    LateReason("beh_chat", "Chatting", BEHAVIORAL),
    LateReason("beh_work", "Working overtime", BEHAVIORAL),
    LateReason("beh_learn", "Studying", BEHAVIORAL),
    LateReason("beh_explore", "Down a rabbit hole", BEHAVIORAL),
    LateReason("beh_zone", "Zoning out", BEHAVIORAL),
    LateReason("phy_self", "Masturbation", PHYSIOLOGICAL),
    LateReason("phy_caffeine", "Caffeine", PHYSIOLOGICAL),
    LateReason("phy_hunger", "Hunger", PHYSIOLOGICAL),
    LateReason("phy_excited", "Too wired to sleep", PHYSIOLOGICAL),
    LateReason("ext_social", "Social plans", EXTERNAL),
    LateReason("ext_other", "Other outside factors", EXTERNAL),
]

LATE_REASON_CATEGORIES: Dict[str, str] = {r.id: r.category for r in LATE_REASONS}
LATE_REASON_LABELS: Dict[str, str] = {r.id: r.label for r in LATE_REASONS}


def reasons_by_category() -> Dict[str, List[LateReason]]:
    out: Dict[str, List[LateReason]] = {c: [] for c in REASON_CATEGORIES}
    for r in LATE_REASONS:
        out[r.category].append(r)
    return out


def reason_label(reason_id: str) -> str:
    return LATE_REASON_LABELS.get(reason_id, reason_id)
