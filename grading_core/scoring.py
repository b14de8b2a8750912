from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging
import re

from . import config
from .answers import as_label_map, as_selection, as_text, is_blank
from .config import DEFAULT_SETTINGS, GradingSettings
from .matching import is_equivalent, is_selection_equivalent, policy_for
from .resolver import LabelStyle, is_roman_label, needs_resolution, resolve_label
from .types import AnswerShape, MatchPolicy, Question, QuestionType, ScoringOutcome, SubItem

log = logging.getLogger(__name__)

_LETTER_RX = re.compile(r"\b[A-Za-z]\b")


def _emit_trace(**values: object) -> None:
    if not config.DEBUG_TRACE:
        return
    ordered = []
    for key in config.TRACE_FIELDS:
        if key in values:
            ordered.append(f"{key}={values[key]}")
    if ordered:
        log.info("trace %s", " ".join(str(val) for val in ordered))


def _extract_letter(value: str) -> str:
    """'Paragraph c' -> 'C'; values without a lone letter pass through."""
    m = _LETTER_RX.search(value)
    return m.group(0).upper() if m else value


def _target_options(item: SubItem, question: Question) -> List[str]:
    if item.options:
        return item.options
    return question.options


def _sub_item_key(
    item: SubItem,
    question: Question,
    settings: GradingSettings,
    user_val: str,
) -> str:
    """Correct label for ``item``, rendered the way ``user_val`` names options."""
    options = _target_options(item, question)
    key = item.correct_answer
    if not needs_resolution(key, options, settings.resolver):
        return key
    if question.type is QuestionType.MATCHING_HEADINGS:
        # headings are shown with numerals but legacy answers use letters;
        # a value that reads as a numeral for this list is only compared as one
        style = LabelStyle.ROMAN if is_roman_label(user_val, options) else LabelStyle.LETTER
        return resolve_label(key, options, style, settings.resolver)
    return resolve_label(key, options, settings=settings.resolver)


def _score_composite(value: Any, question: Question, settings: GradingSettings) -> ScoringOutcome:
    items = question.items
    total = len(items)
    details: Dict[str, bool] = {it.label: False for it in items}
    if total == 0:
        log.warning("composite question %s has no sub-items; nothing to score", question.id)
    answers = as_label_map(value)
    if answers is None:
        return ScoringOutcome(scored=0, total=total, attempted=0, item_details=details)

    scored = 0
    attempted = 0
    for item in items:
        raw = answers.get(item.label)
        if is_blank(raw):
            continue
        attempted += 1
        user_val = raw.strip()
        if question.type is not None and question.type.extracts_letter:
            user_val = _extract_letter(user_val)
        key = _sub_item_key(item, question, settings, user_val)
        if is_equivalent(user_val, key, None, question.type, policy=MatchPolicy.STRICT, settings=settings):
            scored += 1
            details[item.label] = True
    return ScoringOutcome(scored=scored, total=total, attempted=attempted, item_details=details)


def _score_selection(value: Any, question: Question) -> ScoringOutcome:
    selected = as_selection(value)
    attempted = 1 if selected else 0
    ok = is_selection_equivalent(selected, question.correct_answer, question.alternative_answers)
    return ScoringOutcome(scored=1 if ok else 0, total=1, attempted=attempted)


def _score_text(value: Any, question: Question, settings: GradingSettings) -> ScoringOutcome:
    text = as_text(value)
    attempted = 0 if is_blank(text) else 1
    ok = attempted == 1 and is_equivalent(
        text,
        question.correct_answer,
        question.alternative_answers,
        question.type,
        options=question.options,
        settings=settings,
    )
    return ScoringOutcome(scored=1 if ok else 0, total=1, attempted=attempted)


def _score_unknown(value: Any, question: Question) -> ScoringOutcome:
    log.warning("question %s has unknown type %r; scored as unscoreable", question.id, question.raw_type)
    if isinstance(value, dict):
        attempted = any(not is_blank(as_text(v)) for v in value.values())
    elif isinstance(value, (list, tuple)):
        attempted = any(not is_blank(as_text(v)) for v in value)
    else:
        attempted = not is_blank(as_text(value))
    return ScoringOutcome(scored=0, total=1, attempted=1 if attempted else 0)


def score_item(
    user_answer: Any,
    question: Question,
    settings: Optional[GradingSettings] = None,
) -> ScoringOutcome:
    """
    Score one question.
    Composite archetypes: user_answer maps sub-item label -> answer, total = sub-item count.
    Multi-select: user_answer is a list, all-or-nothing.
    Everything else: user_answer is a string, total = 1.
    Never raises on malformed answers; they count as not attempted.
    """
    s = settings or DEFAULT_SETTINGS
    qt = question.type
    if qt is None:
        outcome = _score_unknown(user_answer, question)
    elif qt.shape is AnswerShape.LABEL_MAP:
        outcome = _score_composite(user_answer, question, s)
    elif qt.shape is AnswerShape.SELECTION:
        outcome = _score_selection(user_answer, question)
    else:
        outcome = _score_text(user_answer, question, s)
    _emit_trace(
        question_id=question.id,
        type=question.type_name,
        policy=policy_for(qt, s).value,
        scored=outcome.scored,
        total=outcome.total,
        attempted=outcome.attempted,
    )
    return outcome
