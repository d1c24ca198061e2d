# storage/document.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import datetime as dt
import json

from dreamydrift.engine import SleepRecord


@dataclass
class DumpEntry:
    id: str
    text: str
    timestamp: int                     # epoch milliseconds
    ai_response: Optional[str] = None


@dataclass
class AnalysisCache:
    text: str
    timestamp: int                     # epoch milliseconds


@dataclass
class AppData:
    sleep_records: List[SleepRecord] = field(default_factory=list)
    checklist_logs: Dict[str, List[str]] = field(default_factory=dict)
    dump_entries: List[DumpEntry] = field(default_factory=list)
    last_dump_date: str = ""
    latest_analysis: Optional[AnalysisCache] = None


def empty_app_data(today: dt.date) -> AppData:
    return AppData(last_dump_date=today.isoformat())


# ----------------------------
# dict <-> model (persisted keys are camelCase)
# ----------------------------

def record_to_dict(r: SleepRecord) -> Dict[str, Any]:
    return {
        "date": r.date,
        "sleepTime": r.sleep_time,
        "wakeTime": r.wake_time,
        "reasons": list(r.reasons or []),
    }


def record_from_dict(item: Dict[str, Any]) -> Optional[SleepRecord]:
    date = str(item.get("date", "") or "").strip()
    sleep_time = str(item.get("sleepTime", item.get("sleep_time", "")) or "").strip()
    wake_time = str(item.get("wakeTime", item.get("wake_time", "")) or "").strip()
    if not date or not sleep_time or not wake_time:
        return None
    reasons = item.get("reasons", [])
    if not isinstance(reasons, list):
        reasons = []
    return SleepRecord(date=date, sleep_time=sleep_time, wake_time=wake_time, reasons=list(dict.fromkeys(str(x) for x in reasons)))


def dump_entry_to_dict(e: DumpEntry) -> Dict[str, Any]:
    out: Dict[str, Any] = {"id": e.id, "text": e.text, "timestamp": int(e.timestamp)}
    if e.ai_response is not None:
        out["aiResponse"] = e.ai_response
    return out


def dump_entry_from_dict(item: Dict[str, Any]) -> Optional[DumpEntry]:
    if "id" not in item:
        return None
    try:
        ts = int(item.get("timestamp", 0) or 0)
    except (TypeError, ValueError, OverflowError):
        ts = 0
    ai = item.get("aiResponse", item.get("ai_response"))
    return DumpEntry(
        id=str(item["id"]),
        text=str(item.get("text", "") or ""),
        timestamp=ts,
        ai_response=None if ai is None else str(ai),
    )


def analysis_from_dict(item: Any) -> Optional[AnalysisCache]:
    if not isinstance(item, dict) or "text" not in item:
        return None
    try:
        ts = int(item.get("timestamp", 0) or 0)
    except (TypeError, ValueError, OverflowError):
        return None
    return AnalysisCache(text=str(item["text"]), timestamp=ts)


def app_data_to_dict(data: AppData) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "sleepRecords": [record_to_dict(r) for r in data.sleep_records],
        "checklistLogs": {d: list(ids) for d, ids in data.checklist_logs.items()},
        "dumpEntries": [dump_entry_to_dict(e) for e in data.dump_entries],
        "lastDumpDate": data.last_dump_date,
    }
    if data.latest_analysis is not None:
        out["latestAnalysis"] = {
            "text": data.latest_analysis.text,
            "timestamp": int(data.latest_analysis.timestamp),
        }
    return out


def app_data_from_dict(obj: Dict[str, Any], today: dt.date) -> AppData:
    """
    Missing fields fall back to their empty form; individual malformed
    entries are skipped rather than failing the whole document.
    """
    data = empty_app_data(today)

    raw_records = obj.get("sleepRecords", [])
    if isinstance(raw_records, list):
        for item in raw_records:
            if isinstance(item, dict):
                r = record_from_dict(item)
                if r is not None:
                    data.sleep_records.append(r)

    raw_logs = obj.get("checklistLogs", {})
    if isinstance(raw_logs, dict):
        for d, ids in raw_logs.items():
            if isinstance(ids, list):
                data.checklist_logs[str(d)] = [str(x) for x in ids]

    raw_dumps = obj.get("dumpEntries", [])
    if isinstance(raw_dumps, list):
        for item in raw_dumps:
            if isinstance(item, dict):
                e = dump_entry_from_dict(item)
                if e is not None:
                    data.dump_entries.append(e)

    last = obj.get("lastDumpDate")
    if last:
        data.last_dump_date = str(last)

    data.latest_analysis = analysis_from_dict(obj.get("latestAnalysis"))
    return data


def app_data_to_json(data: AppData) -> str:
    return json.dumps(app_data_to_dict(data), ensure_ascii=False)


def app_data_from_json(s: str, today: dt.date) -> AppData:
    """Raises ValueError when `s` is not a JSON object."""
    obj = json.loads(s)
    if not isinstance(obj, dict):
        raise ValueError("document root is not an object")
    return app_data_from_dict(obj, today)
