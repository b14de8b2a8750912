# grading_core/insights.py
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .bands import percentage_of
from .config import DEFAULT_SETTINGS, GradingSettings
from .types import Question, ScoringOutcome, Section


def type_breakdown(scored: Iterable[Tuple[Question, ScoringOutcome]]) -> List[Dict[str, object]]:
    """Points per archetype, in order of first appearance."""
    rows: Dict[str, Dict[str, object]] = {}
    for q, o in scored:
        row = rows.setdefault(q.type_name, {"type": q.type_name, "total": 0, "correct": 0})
        row["total"] = int(row["total"]) + o.total
        row["correct"] = int(row["correct"]) + o.scored
    out = []
    for row in rows.values():
        row["percentage"] = percentage_of(int(row["correct"]), int(row["total"]))
        out.append(row)
    return out


def section_performance(
    scored: Sequence[Tuple[Question, ScoringOutcome]],
    sections: Optional[Iterable[Section]],
) -> List[Dict[str, object]]:
    out: List[Dict[str, object]] = []
    for sec in sections or []:
        attempted = 0
        correct = 0
        for q, o in scored:
            if q.section_id != sec.id:
                continue
            attempted += o.attempted
            correct += o.scored
        out.append({
            "section_number": sec.number,
            "section_title": sec.title,
            "questions_attempted": attempted,
            "correct_answers": correct,
            "percentage": percentage_of(correct, attempted),
        })
    return out


def weak_areas(
    breakdown: Iterable[Dict[str, object]],
    threshold: Optional[float] = None,
) -> List[str]:
    cut = DEFAULT_SETTINGS.weak_area_threshold if threshold is None else float(threshold)
    return [
        str(row["type"])
        for row in breakdown
        if int(row.get("total", 0)) > 0 and float(row.get("percentage", 0)) < cut
    ]


def recommendations(
    weak: Sequence[str],
    unanswered: int,
    band_score: float,
    settings: Optional[GradingSettings] = None,
) -> List[str]:
    s = settings or DEFAULT_SETTINGS
    out = [
        f"Practice more {area.replace('-', ' ')} questions to improve your score."
        for area in weak
    ]
    if unanswered > 0:
        out.append(
            f"You left {unanswered} question(s) unanswered. Try to manage your time better."
        )
    if band_score < s.fundamentals_band:
        out.append("Focus on building your fundamentals in this module.")
    return out
