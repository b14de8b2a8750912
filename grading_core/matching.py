from __future__ import annotations
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Union

from .config import DEFAULT_SETTINGS, GradingSettings
from .normalizer import normalize
from .resolver import letter_to_index
from .types import MatchPolicy, QuestionType

TypeLike = Union[QuestionType, str, None]


def policy_for(question_type: TypeLike, settings: GradingSettings | None = None) -> MatchPolicy:
    s = settings or DEFAULT_SETTINGS
    qt = QuestionType.parse(question_type)
    if qt is QuestionType.SUMMARY_COMPLETION:
        return MatchPolicy.SUMMARY
    if qt is not None and qt.value in s.strict_types:
        return MatchPolicy.STRICT
    return MatchPolicy.LENIENT


def policy_table(settings: GradingSettings | None = None) -> Dict[QuestionType, MatchPolicy]:
    return {qt: policy_for(qt, settings) for qt in QuestionType}


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _matches_any(norm_user: str, norm_correct: str, alternatives: Iterable[str]) -> bool:
    if norm_user == norm_correct:
        return True
    for alt in alternatives:
        if norm_user == normalize(alt):
            return True
    return False


def _option_text(label: str, options: Sequence[str]) -> Optional[str]:
    idx = letter_to_index(label)
    if idx is None or idx >= len(options) or not options[idx]:
        return None
    return normalize(options[idx])


def _summary_equivalent(
    user: str,
    correct: str,
    alternatives: Sequence[str],
    options: Sequence[str],
) -> bool:
    norm_user = normalize(user)
    if _matches_any(norm_user, normalize(correct), alternatives):
        return True
    if not options:
        return False
    resolved_user = _option_text(user, options)
    if resolved_user is not None and _matches_any(resolved_user, normalize(correct), alternatives):
        return True
    resolved_correct = _option_text(correct, options)
    if resolved_correct is not None and norm_user == resolved_correct:
        return True
    return False


def is_equivalent(
    user_answer: Any,
    correct_answer: Any,
    alternatives: Optional[Sequence[str]] = None,
    question_type: TypeLike = QuestionType.SHORT_ANSWER,
    options: Optional[Sequence[str]] = None,
    settings: GradingSettings | None = None,
    policy: Optional[MatchPolicy] = None,
) -> bool:
    """Equality after normalisation against the key or any alternative.

    Strict and lenient policies both require exact equality; summary
    completion additionally resolves single-letter labels through
    ``options`` in either direction. ``policy`` overrides the one derived
    from ``question_type``.
    """
    alts = [a for a in (alternatives or []) if not _is_empty(a)]
    if _is_empty(user_answer):
        return False
    if _is_empty(correct_answer) and not alts:
        return False
    user = str(user_answer)
    correct = "" if correct_answer is None else str(correct_answer)
    norm_user = normalize(user)
    if not norm_user:
        return False

    if policy is None:
        policy = policy_for(question_type, settings)
    if policy is MatchPolicy.SUMMARY:
        return _summary_equivalent(user, correct, alts, list(options or []))
    return _matches_any(norm_user, normalize(correct), alts)


def accepted_set(correct_answer: Any, alternatives: Optional[Sequence[str]] = None) -> FrozenSet[str]:
    keys = [correct_answer] + list(alternatives or [])
    return frozenset(n for n in (normalize(k) for k in keys if not _is_empty(k)) if n)


def is_selection_equivalent(
    selected: Optional[Sequence[str]],
    correct_answer: Any,
    alternatives: Optional[Sequence[str]] = None,
) -> bool:
    """All-or-nothing: the normalised selection must equal the accepted set exactly."""
    if not selected:
        return False
    expected = accepted_set(correct_answer, alternatives)
    if not expected:
        return False
    chosen: List[str] = [n for n in (normalize(s) for s in selected) if n]
    return frozenset(chosen) == expected
