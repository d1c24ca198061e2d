# storage/local_store.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import datetime as dt
import json
import os
import tempfile
import time


# ----------------------------
# Config
# ----------------------------

@dataclass
class StoreConfig:
    data_dir: str = ".dreamydrift"
    data_key: str = "dreamy_drift_data_v1"
    api_key_key: str = "dreamy_drift_api_key"
    admin_logs_key: str = "dreamy_drift_admin_logs"

    # "today" for the dump rollover and default lastDumpDate
    timezone: str = "UTC"

    read_cache_ttl_sec: float = 5.0
    admin_logs_max: int = 500


# ----------------------------
# Utilities
# ----------------------------

def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _safe_key(key: str) -> str:
    k = str(key or "").strip()
    if not k or any(c in k for c in ("/", "\\", "\0")) or k in (".", ".."):
        raise ValueError(f"invalid storage key: {key!r}")
    return k


def _atomic_write_text(path: Path, text: str) -> None:
    """Write to a sibling temp file, then rename over the target."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


# ----------------------------
# Main client
# ----------------------------

class LocalJsonStore:
    """
    Key -> string blob store, one file per key under `data_dir`.
    Mirrors a browser localStorage: values are read and written wholesale.
    """
    def __init__(self, cfg: Optional[StoreConfig] = None):
        self.cfg = cfg or StoreConfig()
        self.root = Path(self.cfg.data_dir)
        self._read_cache: Dict[str, Tuple[float, Optional[str]]] = {}

    def _path(self, key: str) -> Path:
        return self.root / f"{_safe_key(key)}.json"

    def _cache_get(self, key: str) -> Tuple[bool, Optional[str]]:
        item = self._read_cache.get(key)
        if not item:
            return False, None
        exp, value = item
        if time.time() >= exp:
            self._read_cache.pop(key, None)
            return False, None
        return True, value

    def _cache_set(self, key: str, value: Optional[str]) -> Optional[str]:
        ttl = float(self.cfg.read_cache_ttl_sec)
        if ttl > 0:
            self._read_cache[key] = (time.time() + ttl, value)
        return value

    def _cache_invalidate(self, key: str) -> None:
        self._read_cache.pop(key, None)

    # -------- raw values --------

    def get_item(self, key: str) -> Optional[str]:
        """Returns None when the key has never been written."""
        hit, value = self._cache_get(key)
        if hit:
            return value
        path = self._path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            text = None
        return self._cache_set(key, text)

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self._cache_invalidate(key)
        _atomic_write_text(path, str(value))

    def remove_item(self, key: str) -> None:
        self._cache_invalidate(key)
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return

    # -------- audit log --------

    def append_admin_log(self, level: str, action: str, detail: str) -> None:
        payload = {
            "timestamp": _now_iso(),
            "level": str(level or "info"),
            "action": str(action or ""),
            "detail": str(detail or ""),
        }
        try:
            rows = self._read_admin_logs()
            rows.append(payload)
            rows = rows[-max(1, int(self.cfg.admin_logs_max)):]
            self.set_item(self.cfg.admin_logs_key, json.dumps(rows, ensure_ascii=False))
        except Exception:
            # Never fail main flow because audit log append failed.
            return

    def get_recent_admin_logs(self, limit: int = 50) -> List[Dict[str, Any]]:
        out = self._read_admin_logs()
        out.sort(key=lambda r: str(r.get("timestamp", "")), reverse=True)
        return out[: max(0, int(limit))]

    def _read_admin_logs(self) -> List[Dict[str, Any]]:
        raw = self.get_item(self.cfg.admin_logs_key)
        if not raw:
            return []
        try:
            arr = json.loads(raw)
        except ValueError:
            return []
        if not isinstance(arr, list):
            return []
        return [r for r in arr if isinstance(r, dict)]
