from __future__ import annotations

from grading_core.aggregate import score_all
from grading_core.audit_export import build_events, to_csv, to_json


def test_events_follow_question_order(sample_test):
    questions, answers = sample_test
    events = build_events(score_all(answers, questions))
    assert [e["question_id"] for e in events] == ["q1", "q2", "q3", "q4", "q5", "q6"]
    q3 = events[2]
    assert (q3["scored"], q3["incorrect"], q3["unanswered"]) == (1, 1, 0)
    assert q3["items"] == "A=1|B=0"
    assert events[4]["unanswered"] == 1
    assert events[0]["items"] == ""


def test_json_payload_normalizes_fields():
    payload = to_json([{"question_id": "q1", "scored": "1", "total": None}, None])
    first, second = payload["events"]
    assert first["scored"] == 1 and first["total"] == 0
    assert first["section_id"] == ""
    assert second["question_id"] == ""


def test_csv_has_fixed_header(sample_test):
    questions, answers = sample_test
    events = build_events(score_all(answers, questions))
    lines = [line for line in to_csv(events).strip().splitlines() if line]
    assert len(lines) == len(events) + 1
    header = lines[0].split(",")
    assert header[0] == "question_id"
    assert header[-1] == "items"


def test_csv_empty():
    assert to_csv([]).strip() == (
        "question_id,type,section_id,scored,total,attempted,incorrect,unanswered,items"
    )
