from __future__ import annotations

import datetime as dt
from typing import List

import streamlit as st

from dreamydrift.engine import SleepRecord

from .cache import _cached_sleep_records, _invalidate_repo_read_caches

DEFAULT_SLEEP_TIME = dt.time(23, 30)
DEFAULT_WAKE_TIME = dt.time(7, 30)


def _parse_time_hhmm(s: str, fallback: dt.time) -> dt.time:
    try:
        hh, mm = str(s).strip().split(":")
        return dt.time(int(hh), int(mm))
    except Exception:
        return fallback


def load_record_form_state(repo) -> None:
    """Prefill the recorder form from the stored night, or the 23:30/07:30 defaults."""
    date: dt.date = st.session_state["record_date"]
    date_iso = date.isoformat()
    existing = None
    for r in _cached_sleep_records(repo):
        if r.date == date_iso:
            existing = r
            break

    if existing is None:
        st.session_state["record_sleep_time"] = DEFAULT_SLEEP_TIME
        st.session_state["record_wake_time"] = DEFAULT_WAKE_TIME
        st.session_state["record_reasons"] = []
    else:
        st.session_state["record_sleep_time"] = _parse_time_hhmm(existing.sleep_time, DEFAULT_SLEEP_TIME)
        st.session_state["record_wake_time"] = _parse_time_hhmm(existing.wake_time, DEFAULT_WAKE_TIME)
        st.session_state["record_reasons"] = list(existing.reasons or [])
    st.session_state["record_loaded_for"] = date_iso


def save_record_form_state(repo) -> None:
    date: dt.date = st.session_state["record_date"]
    reasons: List[str] = list(st.session_state.get("record_reasons", []))
    record = SleepRecord(
        date=date.isoformat(),
        sleep_time=st.session_state["record_sleep_time"].strftime("%H:%M"),
        wake_time=st.session_state["record_wake_time"].strftime("%H:%M"),
        reasons=reasons,
    )
    repo.upsert_sleep_record(record)
    _invalidate_repo_read_caches()
