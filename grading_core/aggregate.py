from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import logging

from .config import GradingSettings
from .scoring import score_item
from .types import Question, ScoringOutcome, SessionResult, SubmittedAnswer

log = logging.getLogger(__name__)

QuestionLike = Union[Question, Dict[str, Any]]
AnswerLike = Union[SubmittedAnswer, Dict[str, Any]]


def coerce_questions(questions: Iterable[QuestionLike]) -> List[Question]:
    out: List[Question] = []
    for q in questions or []:
        if isinstance(q, Question):
            out.append(q)
        elif isinstance(q, dict):
            out.append(Question.from_dict(q))
        else:
            log.warning("skipping question of type %s", type(q).__name__)
    return out


def answer_lookup(answers: Iterable[AnswerLike]) -> Dict[str, Any]:
    """question id -> raw user answer; the first entry for a question wins."""
    lookup: Dict[str, Any] = {}
    for a in answers or []:
        if isinstance(a, dict):
            a = SubmittedAnswer.from_dict(a)
        if not isinstance(a, SubmittedAnswer):
            log.warning("skipping answer entry of type %s", type(a).__name__)
            continue
        if a.question_id in lookup:
            log.debug("duplicate answer for question %s ignored", a.question_id)
            continue
        lookup[a.question_id] = a.user_answer
    return lookup


def score_all(
    session_answers: Iterable[AnswerLike],
    all_questions: Iterable[QuestionLike],
    settings: Optional[GradingSettings] = None,
) -> List[Tuple[Question, ScoringOutcome]]:
    questions = coerce_questions(all_questions)
    lookup = answer_lookup(session_answers)
    return [(q, score_item(lookup.get(q.id), q, settings)) for q in questions]


def fold(scored: Iterable[Tuple[Question, ScoringOutcome]]) -> SessionResult:
    res = SessionResult()
    for _q, o in scored:
        res.total_questions += o.total
        res.correct_answers += o.scored
        # complements inside each question's own budget
        res.unanswered += o.total - o.attempted
        res.incorrect_answers += o.attempted - o.scored
    return res


def aggregate_session(
    session_answers: Iterable[AnswerLike],
    all_questions: Iterable[QuestionLike],
    settings: Optional[GradingSettings] = None,
) -> SessionResult:
    """Points-based totals over every question of the test, answered or not."""
    return fold(score_all(session_answers, all_questions, settings))
