from __future__ import annotations

import pytest

from grading_core.aggregate import aggregate_session, answer_lookup, score_all
from grading_core.types import QuestionType, SubmittedAnswer

from tests.conftest import build_question


def test_sample_totals(sample_test):
    questions, answers = sample_test
    res = aggregate_session(answers, questions)
    assert res.to_dict() == {
        "correctAnswers": 4,
        "incorrectAnswers": 3,
        "unanswered": 2,
        "totalQuestions": 9,
    }


def test_per_question_outcomes(sample_test):
    questions, answers = sample_test
    outcomes = {q.id: o for q, o in score_all(answers, questions)}
    assert [(outcomes[q].scored, outcomes[q].total, outcomes[q].attempted) for q in
            ("q1", "q2", "q3", "q4", "q5", "q6")] == [
        (1, 1, 1),
        (0, 1, 1),
        (1, 2, 2),
        (1, 1, 1),
        (0, 1, 0),
        (1, 3, 2),
    ]
    assert outcomes["q6"].item_details == {"A": True, "B": False, "C": False}


@pytest.mark.parametrize("drop", [0, 2, 5])
def test_accounting_identity(sample_test, drop):
    questions, answers = sample_test
    res = aggregate_session(answers[drop:], questions)
    assert res.correct_answers + res.incorrect_answers + res.unanswered == res.total_questions


def test_no_answers_all_unanswered(sample_test):
    questions, _ = sample_test
    res = aggregate_session([], questions)
    assert (res.correct_answers, res.incorrect_answers, res.unanswered, res.total_questions) == (0, 0, 9, 9)


def test_empty_test():
    res = aggregate_session([{"questionId": "q1", "userAnswer": "x"}], [])
    assert res.total_questions == 0 and res.unanswered == 0


def test_answers_for_unknown_questions_are_ignored():
    q = build_question("q1", QuestionType.SHORT_ANSWER, "ropes")
    res = aggregate_session(
        [{"questionId": "ghost", "userAnswer": "ropes"}, {"questionId": "q1", "userAnswer": "ropes"}],
        [q],
    )
    assert (res.correct_answers, res.total_questions) == (1, 1)


def test_first_duplicate_answer_wins():
    lookup = answer_lookup([
        SubmittedAnswer("q1", "first"),
        {"question_id": "q1", "user_answer": "second"},
    ])
    assert lookup == {"q1": "first"}


def test_accepts_question_dicts():
    raw = {"id": "q1", "type": "short-answer", "correctAnswer": "ropes"}
    res = aggregate_session([{"questionId": "q1", "userAnswer": "Ropes"}], [raw])
    assert res.correct_answers == 1
