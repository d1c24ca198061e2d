from __future__ import annotations

from typing import Tuple

import streamlit as st

from storage.repo import DriftRepo


def _read_secrets_api_key() -> str:
    """
    API key can be configured as:
      - st.secrets["gemini_api_key"]
      - st.secrets["gemini"]["api_key"]
    Missing secrets.toml is treated as "not configured".
    """
    try:
        if "gemini_api_key" in st.secrets:
            return str(st.secrets["gemini_api_key"] or "").strip()
        if "gemini" in st.secrets and "api_key" in st.secrets["gemini"]:
            return str(st.secrets["gemini"]["api_key"] or "").strip()
    except Exception:
        return ""
    return ""


def resolve_api_key(repo: DriftRepo) -> Tuple[str, str]:
    """Returns (api_key, source); the user-stored key wins over app secrets."""
    stored = repo.get_api_key()
    if stored:
        return stored, "stored"
    from_secrets = _read_secrets_api_key()
    if from_secrets:
        return from_secrets, "secrets"
    return "", ""
