from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .reasons import BEHAVIORAL, PHYSIOLOGICAL, PSYCHOLOGICAL


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    text: str
    category: str  # PHYSIOLOGICAL | BEHAVIORAL | PSYCHOLOGICAL


CHECKLIST_ITEMS: List[ChecklistItem] = [
    ChecklistItem("sun", "Got morning sunlight", PHYSIOLOGICAL),
    ChecklistItem("no_caffeine", "No caffeine after 2pm", PHYSIOLOGICAL),
    ChecklistItem("dim_lights", "Dimmed the lights an hour before bed", PHYSIOLOGICAL),
    ChecklistItem("shower", "Warm shower 1-2h before bed", BEHAVIORAL),
    ChecklistItem("bed_early", "In bed before the target time", BEHAVIORAL),
    ChecklistItem("no_stim", "No games / short videos in bed", BEHAVIORAL),
    ChecklistItem("calm_mind", "Wrote down tomorrow's worries", PSYCHOLOGICAL),
    ChecklistItem("relax", "Breathing or stretching", PSYCHOLOGICAL),
]

CHECKLIST_ITEM_IDS: List[str] = [i.id for i in CHECKLIST_ITEMS]


def checklist_by_category() -> Dict[str, List[ChecklistItem]]:
    out: Dict[str, List[ChecklistItem]] = {PHYSIOLOGICAL: [], BEHAVIORAL: [], PSYCHOLOGICAL: []}
    for item in CHECKLIST_ITEMS:
        out[item.category].append(item)
    return out
