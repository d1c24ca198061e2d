from __future__ import annotations

from typing import List

import streamlit as st

from dreamydrift.engine import SleepRecord
from storage.repo import DriftRepo


@st.cache_data(ttl=30, show_spinner=False)
def _cached_sleep_records(_repo: DriftRepo) -> List[SleepRecord]:
    return _repo.get_sleep_records()


@st.cache_data(ttl=30, show_spinner=False)
def _cached_checklist_items(_repo: DriftRepo, date_iso: str) -> List[str]:
    return _repo.completed_checklist_items(date_iso)


def _invalidate_repo_read_caches() -> None:
    _cached_sleep_records.clear()
    _cached_checklist_items.clear()
