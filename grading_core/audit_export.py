"""Helpers to export per-question grading traces in JSON/CSV formats."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple
import csv
import io

from .types import Question, ScoringOutcome

_FIELDS: tuple[str, ...] = (
    "question_id",
    "type",
    "section_id",
    "scored",
    "total",
    "attempted",
    "incorrect",
    "unanswered",
    "items",
)

_INT_FIELDS = {"scored", "total", "attempted", "incorrect", "unanswered"}


def build_events(scored: Iterable[Tuple[Question, ScoringOutcome]]) -> List[Dict[str, Any]]:
    events: List[Dict[str, Any]] = []
    for q, o in scored:
        items = ""
        if o.item_details is not None:
            items = "|".join(f"{label}={int(ok)}" for label, ok in o.item_details.items())
        events.append({
            "question_id": q.id,
            "type": q.type_name,
            "section_id": q.section_id,
            "scored": o.scored,
            "total": o.total,
            "attempted": o.attempted,
            "incorrect": o.attempted - o.scored,
            "unanswered": o.total - o.attempted,
            "items": items,
        })
    return events


def _normalize_event(event: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in _FIELDS:
        val = event.get(key)
        if key in _INT_FIELDS:
            try:
                out[key] = int(val)
            except (TypeError, ValueError):
                out[key] = 0
        else:
            out[key] = "" if val is None else str(val)
    return out


def to_json(events: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Return a JSON-safe payload for audit export."""

    normalized: List[Dict[str, Any]] = [_normalize_event(evt or {}) for evt in events]
    return {"events": normalized}


def to_csv(events: Iterable[Dict[str, Any]]) -> str:
    """Render audit events as CSV with a fixed header."""

    normalized = [_normalize_event(evt or {}) for evt in events]
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for row in normalized:
        writer.writerow(row)
    return buf.getvalue()


__all__ = ["build_events", "to_json", "to_csv"]
