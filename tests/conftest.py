from __future__ import annotations

import pytest

from grading_core.types import Question, QuestionType, SubItem

HEADINGS = [
    "The areas and artefacts within the pyramid itself",
    "A difficult task for those involved",
    "A king who saved his people",
    "A single certainty among other less definite facts",
    "An overview of the external buildings and areas",
    "A pyramid design that others copied",
    "An idea for changing the design of burial structures",
    "An incredible experience despite the few remains",
    "The answers to some unexpected questions",
]


def build_question(
    qid: str = "q1",
    qtype: QuestionType | str | None = QuestionType.SHORT_ANSWER,
    correct: str = "",
    *,
    alternatives: list[str] | None = None,
    options: list[str] | None = None,
    items: list[tuple[str, str]] | None = None,
    item_options: list[str] | None = None,
    section_id: str | None = None,
) -> Question:
    """Question builder; ``items`` are (label, correct answer) pairs."""

    return Question(
        id=qid,
        type=QuestionType.parse(qtype),
        correct_answer=correct,
        alternative_answers=list(alternatives or []),
        options=list(options or []),
        items=[
            SubItem(label=label, correct_answer=key, options=list(item_options or []))
            for label, key in (items or [])
        ],
        section_id=section_id,
        raw_type=qtype.value if isinstance(qtype, QuestionType) else (qtype or ""),
    )


def build_sample_test() -> tuple[list[Question], list[dict]]:
    """Deterministic mixed test: 1 + 1 + 2 + 1 + 1 + 3 = 9 points."""

    questions = [
        build_question("q1", QuestionType.SHORT_ANSWER, "ropes", section_id="s1"),
        build_question("q2", QuestionType.MULTIPLE_CHOICE, "B", section_id="s1"),
        build_question(
            "q3",
            QuestionType.MAP_LABELING,
            items=[("A", "Label1"), ("B", "CorrectLabel2")],
            section_id="s1",
        ),
        build_question(
            "q4",
            QuestionType.MULTIPLE_CHOICE_MULTI,
            "OptionA",
            alternatives=["OptionB"],
            section_id="s2",
        ),
        build_question("q5", QuestionType.TRUE_FALSE_NOT_GIVEN, "NOT GIVEN", section_id="s2"),
        build_question(
            "q6",
            QuestionType.MATCHING_HEADINGS,
            options=HEADINGS,
            items=[("A", HEADINGS[3]), ("B", HEADINGS[0]), ("C", HEADINGS[8])],
            section_id="s2",
        ),
    ]
    answers = [
        {"questionId": "q1", "userAnswer": "The Ropes."},
        {"questionId": "q2", "userAnswer": "C"},
        {"questionId": "q3", "userAnswer": {"A": "Label1", "B": "WrongLabel"}},
        {"questionId": "q4", "userAnswer": ["OptionB", "OptionA"]},
        # q5 left unanswered
        {"questionId": "q6", "userAnswer": {"A": "iv", "B": "ii"}},
    ]
    return questions, answers


@pytest.fixture
def sample_test() -> tuple[list[Question], list[dict]]:
    return build_sample_test()
