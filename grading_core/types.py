from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE_NOT_GIVEN = "true-false-not-given"
    YES_NO_NOT_GIVEN = "yes-no-not-given"
    MATCHING_HEADINGS = "matching-headings"
    MATCHING_INFORMATION = "matching-information"
    MATCHING_FEATURES = "matching-features"
    SENTENCE_COMPLETION = "sentence-completion"
    SUMMARY_COMPLETION = "summary-completion"
    NOTE_COMPLETION = "note-completion"
    TABLE_COMPLETION = "table-completion"
    FLOW_CHART_COMPLETION = "flow-chart-completion"
    DIAGRAM_LABELING = "diagram-labeling"
    SHORT_ANSWER = "short-answer"
    WRITING_TASK = "writing-task"
    FORM_COMPLETION = "form-completion"
    MULTIPLE_CHOICE_MULTI = "multiple-choice-multi"
    MAP_LABELING = "map-labeling"

    @classmethod
    def parse(cls, raw: Any) -> Optional["QuestionType"]:
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None

    @property
    def shape(self) -> "AnswerShape":
        return _SHAPES[self]

    @property
    def is_composite(self) -> bool:
        return _SHAPES[self] is AnswerShape.LABEL_MAP

    @property
    def extracts_letter(self) -> bool:
        return self in _LETTER_EXTRACT_TYPES


class AnswerShape(str, Enum):
    TEXT = "text"
    SELECTION = "selection"
    LABEL_MAP = "label_map"


class MatchPolicy(str, Enum):
    STRICT = "strict"
    LENIENT = "lenient"
    SUMMARY = "summary"


_SHAPES: Dict[QuestionType, AnswerShape] = {
    QuestionType.MULTIPLE_CHOICE: AnswerShape.TEXT,
    QuestionType.TRUE_FALSE_NOT_GIVEN: AnswerShape.TEXT,
    QuestionType.YES_NO_NOT_GIVEN: AnswerShape.TEXT,
    QuestionType.MATCHING_HEADINGS: AnswerShape.LABEL_MAP,
    QuestionType.MATCHING_INFORMATION: AnswerShape.LABEL_MAP,
    QuestionType.MATCHING_FEATURES: AnswerShape.LABEL_MAP,
    QuestionType.SENTENCE_COMPLETION: AnswerShape.TEXT,
    QuestionType.SUMMARY_COMPLETION: AnswerShape.TEXT,
    QuestionType.NOTE_COMPLETION: AnswerShape.TEXT,
    QuestionType.TABLE_COMPLETION: AnswerShape.LABEL_MAP,
    QuestionType.FLOW_CHART_COMPLETION: AnswerShape.TEXT,
    QuestionType.DIAGRAM_LABELING: AnswerShape.TEXT,
    QuestionType.SHORT_ANSWER: AnswerShape.TEXT,
    QuestionType.WRITING_TASK: AnswerShape.TEXT,
    QuestionType.FORM_COMPLETION: AnswerShape.TEXT,
    QuestionType.MULTIPLE_CHOICE_MULTI: AnswerShape.SELECTION,
    QuestionType.MAP_LABELING: AnswerShape.LABEL_MAP,
}

_LETTER_EXTRACT_TYPES = frozenset({
    QuestionType.MATCHING_HEADINGS,
    QuestionType.MATCHING_INFORMATION,
    QuestionType.MATCHING_FEATURES,
})

_missing = set(QuestionType) - set(_SHAPES)
if _missing:
    raise RuntimeError(f"answer shape undefined for: {sorted(m.value for m in _missing)}")


def _pick(raw: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return default


def _str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


def _option_list(value: Any) -> List[str]:
    # positions matter: option index is the label
    if not isinstance(value, (list, tuple)):
        return []
    return ["" if v is None else str(v) for v in value]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass
class SubItem:
    label: str
    text: str = ""
    correct_answer: str = ""
    options: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["SubItem"]:
        if not isinstance(raw, dict):
            return None
        label = _pick(raw, "label")
        if label is None or not str(label).strip():
            return None
        return cls(
            label=str(label).strip(),
            text=_text(_pick(raw, "text")),
            correct_answer=_text(_pick(raw, "correct_answer", "correctAnswer")),
            options=_option_list(_pick(raw, "options")),
        )


@dataclass
class Question:
    id: str
    type: Optional[QuestionType]
    correct_answer: str = ""
    alternative_answers: List[str] = field(default_factory=list)
    options: List[str] = field(default_factory=list)
    items: List[SubItem] = field(default_factory=list)
    points: float = 1.0
    section_id: Optional[str] = None
    raw_type: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Question":
        raw_type = _text(_pick(raw, "type", "question_type", "questionType"))
        options = _option_list(_pick(raw, "options"))
        if not options:
            summary_cfg = _pick(raw, "summary_config", "summaryConfig")
            if isinstance(summary_cfg, dict):
                options = _option_list(summary_cfg.get("options"))
        raw_items = _pick(raw, "items", default=[])
        items = []
        if isinstance(raw_items, (list, tuple)):
            for r in raw_items:
                it = SubItem.from_dict(r)
                if it is not None:
                    items.append(it)
        try:
            points = float(_pick(raw, "points", default=1))
        except (TypeError, ValueError):
            points = 1.0
        section = _pick(raw, "section_id", "sectionId")
        return cls(
            id=_text(_pick(raw, "id", "_id", "question_id", "questionId")),
            type=QuestionType.parse(raw_type),
            correct_answer=_text(_pick(raw, "correct_answer", "correctAnswer")),
            alternative_answers=_str_list(_pick(raw, "alternative_answers", "alternativeAnswers")),
            options=options,
            items=items,
            points=points,
            section_id=None if section is None else str(section),
            raw_type=raw_type,
        )

    @property
    def type_name(self) -> str:
        return self.type.value if self.type is not None else (self.raw_type or "unknown")


@dataclass
class SubmittedAnswer:
    question_id: str
    user_answer: Any = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SubmittedAnswer":
        return cls(
            question_id=_text(_pick(raw, "question_id", "questionId")),
            user_answer=_pick(raw, "user_answer", "userAnswer"),
        )


@dataclass
class Section:
    id: str
    number: int = 0
    title: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Section":
        try:
            number = int(_pick(raw, "number", "section_number", "sectionNumber", default=0))
        except (TypeError, ValueError):
            number = 0
        return cls(
            id=_text(_pick(raw, "id", "_id")),
            number=number,
            title=_text(_pick(raw, "title")),
        )


@dataclass
class ScoringOutcome:
    scored: int
    total: int
    attempted: int
    item_details: Optional[Dict[str, bool]] = None

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {
            "scored": self.scored,
            "total": self.total,
            "attempted": self.attempted,
        }
        if self.item_details is not None:
            out["item_details"] = dict(self.item_details)
        return out


@dataclass
class SessionResult:
    correct_answers: int = 0
    incorrect_answers: int = 0
    unanswered: int = 0
    total_questions: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "correctAnswers": self.correct_answers,
            "incorrectAnswers": self.incorrect_answers,
            "unanswered": self.unanswered,
            "totalQuestions": self.total_questions,
        }


@dataclass
class SessionReport:
    result: SessionResult
    percentage: int
    band_score: float
    outcomes: Dict[str, ScoringOutcome] = field(default_factory=dict)
    type_breakdown: List[Dict[str, object]] = field(default_factory=list)
    section_performance: List[Dict[str, object]] = field(default_factory=list)
    weak_areas: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    audit_events: List[Dict[str, object]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = dict(self.result.to_dict())
        out.update({
            "percentage": self.percentage,
            "bandScore": self.band_score,
            "outcomes": {qid: o.to_dict() for qid, o in self.outcomes.items()},
            "questionTypeBreakdown": list(self.type_breakdown),
            "sectionPerformance": list(self.section_performance),
            "weakAreas": list(self.weak_areas),
            "recommendations": list(self.recommendations),
        })
        return out
