"""Coerce raw submitted answers into the shape their archetype expects.

Each helper returns ``None`` for a value of the wrong shape; the scorer then
treats the answer as not attempted.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

log = logging.getLogger(__name__)


def _scalar_text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


def as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = _scalar_text(value)
    if text is None:
        log.warning("malformed text answer of type %s; treated as not attempted", type(value).__name__)
    return text


def as_selection(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, (list, tuple, set)):
        out: List[str] = []
        for v in value:
            text = _scalar_text(v)
            if text is not None and text.strip():
                out.append(text)
        return out
    text = _scalar_text(value)
    if text is None:
        log.warning("malformed selection answer of type %s; treated as not attempted", type(value).__name__)
        return None
    return [text] if text.strip() else []


def as_label_map(value: Any) -> Optional[Dict[str, str]]:
    """Label -> answer with keys stringified, so numeric labels look up either way."""
    if value is None:
        return None
    if not isinstance(value, dict):
        log.warning("malformed composite answer of type %s; treated as not attempted", type(value).__name__)
        return None
    out: Dict[str, str] = {}
    for k, v in value.items():
        text = _scalar_text(v)
        if text is None:
            continue
        key = str(k).strip()
        # a string key wins over the same label given as a number
        if key in out and not isinstance(k, str):
            continue
        out[key] = text
    return out


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()
