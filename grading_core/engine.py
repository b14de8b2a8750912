# grading_core/engine.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Union
import logging

from .aggregate import AnswerLike, QuestionLike, fold, score_all
from .audit_export import build_events
from .bands import percentage_of, to_band
from .config import DEFAULT_SETTINGS, GradingSettings
from .insights import recommendations, section_performance, type_breakdown, weak_areas
from .types import Section, SessionReport

log = logging.getLogger(__name__)

SectionLike = Union[Section, Dict[str, Any]]


def _coerce_sections(sections: Optional[Iterable[SectionLike]]) -> List[Section]:
    out: List[Section] = []
    for s in sections or []:
        if isinstance(s, Section):
            out.append(s)
        elif isinstance(s, dict):
            out.append(Section.from_dict(s))
    return out


def grade_session(
    session_answers: Iterable[AnswerLike],
    questions: Iterable[QuestionLike],
    sections: Optional[Iterable[SectionLike]] = None,
    settings: Optional[GradingSettings] = None,
) -> SessionReport:
    """Grade one submitted session end to end.

    Scores every question, folds the points-based totals, converts them to a
    band and derives the per-type and per-section views used by result pages.
    Deterministic for identical inputs.
    """
    s = settings or DEFAULT_SETTINGS
    scored = score_all(session_answers, questions, s)
    result = fold(scored)
    band = to_band(result.correct_answers, result.total_questions, s.band_table, s.band_floor)
    breakdown = type_breakdown(scored)
    weak = weak_areas(breakdown, s.weak_area_threshold)
    report = SessionReport(
        result=result,
        percentage=percentage_of(result.correct_answers, result.total_questions),
        band_score=band,
        outcomes={q.id: o for q, o in scored},
        type_breakdown=breakdown,
        section_performance=section_performance(scored, _coerce_sections(sections)),
        weak_areas=weak,
        recommendations=recommendations(weak, result.unanswered, band, s),
        audit_events=build_events(scored),
    )
    log.debug(
        "graded session: %d/%d correct, %d incorrect, %d unanswered, band %.1f",
        result.correct_answers,
        result.total_questions,
        result.incorrect_answers,
        result.unanswered,
        band,
    )
    return report
