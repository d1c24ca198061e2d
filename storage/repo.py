# storage/repo.py
from __future__ import annotations

from typing import Callable, List, Optional
from zoneinfo import ZoneInfo
import datetime as dt
import uuid

from dreamydrift.engine import SleepRecord, normalize_record, sort_records_desc

from .document import (
    AnalysisCache,
    AppData,
    DumpEntry,
    app_data_from_json,
    app_data_to_json,
    empty_app_data,
)
from .local_store import LocalJsonStore

ANALYSIS_TTL = dt.timedelta(hours=24)


# ----------------------------
# Lazy expiry predicates
# ----------------------------

def _epoch_ms(now: dt.datetime) -> int:
    return int(round(now.timestamp() * 1000))


def is_expired(cache: Optional[AnalysisCache], now: dt.datetime) -> bool:
    """A missing cache counts as expired; otherwise stale once older than 24h."""
    if cache is None:
        return True
    return _epoch_ms(now) - int(cache.timestamp) > int(ANALYSIS_TTL.total_seconds() * 1000)


def needs_rollover(last_dump_date: str, today: dt.date) -> bool:
    return str(last_dump_date or "") != today.isoformat()


def new_dump_entry(text: str, now: dt.datetime, ai_response: Optional[str] = None) -> DumpEntry:
    return DumpEntry(id=uuid.uuid4().hex, text=str(text), timestamp=_epoch_ms(now), ai_response=ai_response)


class DriftRepo:
    """
    Single owner of the AppData document.
    Every mutation is load -> transform -> save of the whole document;
    callers never write the document themselves.
    """
    def __init__(self, store: LocalJsonStore, clock: Optional[Callable[[], dt.datetime]] = None):
        self.db = store
        self._tz = ZoneInfo(store.cfg.timezone)
        self._clock = clock

    def now(self) -> dt.datetime:
        if self._clock is not None:
            return self._clock()
        return dt.datetime.now(self._tz)

    def today(self) -> dt.date:
        now = self.now()
        if now.tzinfo is not None:
            now = now.astimezone(self._tz)
        return now.date()

    def local_time(self, epoch_ms: int) -> dt.datetime:
        return dt.datetime.fromtimestamp(int(epoch_ms) / 1000, tz=self._tz)

    def audit_error(self, action: str, err: Exception) -> None:
        try:
            self.db.append_admin_log("error", action, str(err))
        except Exception:
            return

    # ---- document ----
    def load(self) -> AppData:
        today = self.today()
        try:
            raw = self.db.get_item(self.db.cfg.data_key)
        except Exception as e:
            self.audit_error("load", e)
            return empty_app_data(today)
        if not raw:
            return empty_app_data(today)
        try:
            return app_data_from_json(raw, today)
        except Exception as e:
            # corrupted document: start over, overwritten on next save
            self.audit_error("load", e)
            return empty_app_data(today)

    def _save(self, action: str, data: AppData) -> AppData:
        try:
            self.db.set_item(self.db.cfg.data_key, app_data_to_json(data))
        except Exception as e:
            self.audit_error(action, e)
            raise RuntimeError(f"{action} save failed: {e}") from e
        return data

    # ---- sleep records ----
    def upsert_sleep_record(self, record: SleepRecord) -> AppData:
        rec = normalize_record(record)
        data = self.load()
        records = [r for r in data.sleep_records if r.date != rec.date]
        records.append(rec)
        data.sleep_records = sort_records_desc(records)
        return self._save("upsert_sleep_record", data)

    def get_sleep_record(self, date: str) -> Optional[SleepRecord]:
        for r in self.load().sleep_records:
            if r.date == date:
                return r
        return None

    def get_sleep_records(self) -> List[SleepRecord]:
        return self.load().sleep_records

    # ---- checklist ----
    def toggle_checklist_item(self, date: str, item_id: str) -> AppData:
        data = self.load()
        current = list(data.checklist_logs.get(date, []))
        if item_id in current:
            current = [i for i in current if i != item_id]
        else:
            current.append(item_id)
        data.checklist_logs[date] = current
        return self._save("toggle_checklist_item", data)

    def completed_checklist_items(self, date: str) -> List[str]:
        return list(self.load().checklist_logs.get(date, []))

    # ---- dump entries ----
    def append_dump_entry(self, entry: DumpEntry, today: Optional[dt.date] = None) -> AppData:
        today = today or self.today()
        data = self.load()
        entries = data.dump_entries
        if needs_rollover(data.last_dump_date, today):
            entries = []
        data.dump_entries = [entry] + entries
        data.last_dump_date = today.isoformat()
        return self._save("append_dump_entry", data)

    def clear_dump_entries(self) -> AppData:
        data = self.load()
        data.dump_entries = []
        return self._save("clear_dump_entries", data)

    def current_dump_entries(self, today: Optional[dt.date] = None) -> List[DumpEntry]:
        """Read path of the daily rollover: yesterday's notes are purged here."""
        today = today or self.today()
        data = self.load()
        if needs_rollover(data.last_dump_date, today):
            if data.dump_entries:
                data = self.clear_dump_entries()
            return []
        return data.dump_entries

    def attach_dump_response(self, entry_id: str, ai_response: str) -> AppData:
        data = self.load()
        for e in data.dump_entries:
            if e.id == entry_id:
                e.ai_response = str(ai_response)
                return self._save("attach_dump_response", data)
        # entry already rolled over or cleared
        return data

    # ---- analysis cache ----
    def cache_analysis(self, text: str, now: Optional[dt.datetime] = None) -> AppData:
        now = now or self.now()
        data = self.load()
        data.latest_analysis = AnalysisCache(text=str(text), timestamp=_epoch_ms(now))
        return self._save("cache_analysis", data)

    def latest_analysis(self, now: Optional[dt.datetime] = None) -> Optional[AnalysisCache]:
        now = now or self.now()
        cache = self.load().latest_analysis
        if is_expired(cache, now):
            return None
        return cache

    # ---- credential (read by the narrative collaborator only) ----
    def get_api_key(self) -> str:
        try:
            return (self.db.get_item(self.db.cfg.api_key_key) or "").strip()
        except Exception as e:
            self.audit_error("get_api_key", e)
            return ""

    def set_api_key(self, value: str) -> None:
        try:
            self.db.set_item(self.db.cfg.api_key_key, str(value or "").strip())
        except Exception as e:
            self.audit_error("set_api_key", e)
            raise RuntimeError(f"set_api_key save failed: {e}") from e

    def get_recent_admin_logs(self, limit: int = 50) -> List[dict]:
        try:
            return self.db.get_recent_admin_logs(limit=limit)
        except Exception:
            return []
