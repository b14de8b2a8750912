from __future__ import annotations

import logging

import pytest

from grading_core import config
from grading_core.scoring import score_item
from grading_core.types import QuestionType

from tests.conftest import HEADINGS, build_question


def _invariant(o):
    assert 0 <= o.scored <= o.attempted <= o.total


def test_map_labeling_partial_credit():
    q = build_question(
        "q1", QuestionType.MAP_LABELING, items=[("A", "Label1"), ("B", "CorrectLabel2")]
    )
    o = score_item({"A": "Label1", "B": "WrongLabel"}, q)
    assert (o.scored, o.total, o.attempted) == (1, 2, 2)
    assert o.item_details == {"A": True, "B": False}


def test_composite_blank_and_missing_items_are_unattempted():
    q = build_question(
        "q1", QuestionType.TABLE_COMPLETION, items=[("1", "oxygen"), ("2", "carbon"), ("3", "iron")]
    )
    o = score_item({"1": "Oxygen", "2": "   "}, q)
    assert (o.scored, o.total, o.attempted) == (1, 3, 1)
    assert o.item_details == {"1": True, "2": False, "3": False}


def test_composite_numeric_keys_match_string_labels():
    q = build_question("q1", QuestionType.TABLE_COMPLETION, items=[("1", "oxygen"), ("2", "carbon")])
    o = score_item({1: "oxygen", 2: "carbon"}, q)
    assert (o.scored, o.attempted) == (2, 2)


@pytest.mark.parametrize("bad", ["Label1", ["Label1"], 7, None])
def test_composite_wrong_shape_is_not_attempted(bad):
    q = build_question("q1", QuestionType.MAP_LABELING, items=[("A", "Label1"), ("B", "Label2")])
    o = score_item(bad, q)
    assert (o.scored, o.total, o.attempted) == (0, 2, 0)
    assert o.item_details == {"A": False, "B": False}


def test_composite_is_strict():
    q = build_question("q1", QuestionType.MAP_LABELING, items=[("A", "rope")])
    assert score_item({"A": "ropes"}, q).scored == 0
    assert score_item({"A": "The Rope"}, q).scored == 1


def test_matching_headings_resolves_text_key_to_numeral():
    q = build_question(
        "q1", QuestionType.MATCHING_HEADINGS, options=HEADINGS, items=[("A", HEADINGS[3])]
    )
    o = score_item({"A": "iv"}, q)
    assert o.item_details == {"A": True}
    assert score_item({"A": "iii"}, q).scored == 0


def test_matching_headings_accepts_letter_rendering():
    q = build_question(
        "q1", QuestionType.MATCHING_HEADINGS, options=HEADINGS, items=[("A", HEADINGS[3])]
    )
    assert score_item({"A": "d"}, q).scored == 1
    assert score_item({"A": "e"}, q).scored == 0


def test_matching_headings_numeral_never_matches_letter_rendering():
    q = build_question(
        "q1", QuestionType.MATCHING_HEADINGS, options=HEADINGS, items=[("A", HEADINGS[8])]
    )
    assert score_item({"A": "ix"}, q).scored == 1
    assert score_item({"A": "i"}, q).scored == 0
    assert score_item({"A": "I"}, q).scored == 0


def test_matching_headings_letter_collisions_on_long_lists():
    options = [f"Heading number {n} about a distinct topic" for n in range(24)]
    q = build_question(
        "q1", QuestionType.MATCHING_HEADINGS, options=options, items=[("A", options[21])]
    )
    assert score_item({"A": "xxii"}, q).scored == 1
    assert score_item({"A": "v"}, q).scored == 0


def test_resolved_key_does_not_accept_option_text():
    q = build_question(
        "q1", QuestionType.MATCHING_HEADINGS, options=HEADINGS, items=[("A", HEADINGS[3])]
    )
    assert score_item({"A": HEADINGS[3]}, q).scored == 0
    people = ["Mark VanDam", "Jane Goodall"]
    q = build_question(
        "q2", QuestionType.MATCHING_FEATURES, options=people, items=[("1", "Jane Goodall")]
    )
    assert score_item({"1": "Jane Goodall"}, q).scored == 0
    assert score_item({"1": "B"}, q).scored == 1


def test_matching_headings_short_key_used_verbatim():
    q = build_question(
        "q1", QuestionType.MATCHING_HEADINGS, options=HEADINGS, items=[("A", "vi")]
    )
    assert score_item({"A": "vi"}, q).scored == 1


def test_matching_information_extracts_letter():
    q = build_question(
        "q1",
        QuestionType.MATCHING_INFORMATION,
        items=[("14", "C"), ("15", "A")],
    )
    o = score_item({"14": "Paragraph c", "15": "B"}, q)
    assert o.item_details == {"14": True, "15": False}
    assert (o.scored, o.attempted) == (1, 2)


def test_matching_features_resolves_key_through_item_options():
    people = ["Mark VanDam", "Jane Goodall", "Carl Sagan"]
    q = build_question(
        "q1",
        QuestionType.MATCHING_FEATURES,
        options=["unrelated", "list"],
        items=[("1", "Jane Goodall"), ("2", "Carl Sagan")],
        item_options=people,
    )
    o = score_item({"1": "B", "2": "A"}, q)
    assert o.item_details == {"1": True, "2": False}


def test_composite_falls_back_to_question_options():
    q = build_question(
        "q1",
        QuestionType.MATCHING_FEATURES,
        options=["Mark VanDam", "Jane Goodall"],
        items=[("1", "Mark VanDam")],
    )
    assert score_item({"1": "A"}, q).scored == 1


def test_unresolvable_key_scores_incorrect_and_warns(caplog):
    q = build_question(
        "q1", QuestionType.MATCHING_HEADINGS, options=HEADINGS, items=[("A", "No such heading anywhere")]
    )
    with caplog.at_level(logging.WARNING):
        o = score_item({"A": "iv"}, q)
    assert (o.scored, o.attempted) == (0, 1)
    assert any("unresolved" in r.getMessage() for r in caplog.records)


def test_composite_without_items():
    q = build_question("q1", QuestionType.MAP_LABELING)
    o = score_item({"A": "x"}, q)
    assert (o.scored, o.total, o.attempted) == (0, 0, 0)


def test_multi_select_all_or_nothing():
    q = build_question("q1", QuestionType.MULTIPLE_CHOICE_MULTI, "OptionA", alternatives=["OptionB"])
    full = score_item(["OptionA", "OptionB"], q)
    partial = score_item(["OptionA"], q)
    assert (full.scored, full.total, full.attempted) == (1, 1, 1)
    assert (partial.scored, partial.total, partial.attempted) == (0, 1, 1)
    assert score_item([], q).attempted == 0
    assert score_item({"x": 1}, q).attempted == 0


def test_multi_select_single_string():
    q = build_question("q1", QuestionType.MULTIPLE_CHOICE_MULTI, "OptionA")
    assert score_item("OptionA", q).scored == 1


def test_atomic_scoring():
    q = build_question("q1", QuestionType.SENTENCE_COMPLETION, "ropes")
    assert score_item("The Ropes", q).scored == 1
    o = score_item("rope", q)
    assert (o.scored, o.total, o.attempted) == (0, 1, 1)
    o = score_item("  ", q)
    assert (o.scored, o.attempted) == (0, 0)
    assert score_item(None, q).attempted == 0


def test_atomic_wrong_shape_degrades():
    q = build_question("q1", QuestionType.SHORT_ANSWER, "ropes")
    o = score_item(["ropes"], q)
    assert (o.scored, o.total, o.attempted) == (0, 1, 0)


def test_numeric_answer_is_text():
    q = build_question("q1", QuestionType.FORM_COMPLETION, "1984")
    assert score_item(1984, q).scored == 1


def test_summary_completion_uses_question_options():
    q = build_question(
        "q1", QuestionType.SUMMARY_COMPLETION, "evidence", options=["information", "evidence"]
    )
    assert score_item("B", q).scored == 1


def test_unscoreable_question():
    q = build_question("q1", QuestionType.SHORT_ANSWER, "")
    o = score_item("anything", q)
    assert (o.scored, o.total, o.attempted) == (0, 1, 1)


def test_unknown_type_is_unscoreable(caplog):
    q = build_question("q1", "essay-question", "x")
    assert q.type is None
    with caplog.at_level(logging.WARNING):
        o = score_item("x", q)
    assert (o.scored, o.total, o.attempted) == (0, 1, 1)
    assert any("unknown type" in r.getMessage() for r in caplog.records)


def test_trace_emitted_when_enabled(monkeypatch, caplog):
    monkeypatch.setattr(config, "DEBUG_TRACE", True)
    q = build_question("q9", QuestionType.SHORT_ANSWER, "x")
    with caplog.at_level(logging.INFO, logger="grading_core.scoring"):
        score_item("x", q)
    lines = [r.getMessage() for r in caplog.records if r.getMessage().startswith("trace")]
    assert lines and "question_id=q9" in lines[0] and "scored=1" in lines[0]


@pytest.mark.parametrize(
    "qtype, answer",
    [
        (QuestionType.MAP_LABELING, {"A": "Label1", "B": "", "C": "zzz"}),
        (QuestionType.MATCHING_HEADINGS, {"A": "iv", "B": "Paragraph x"}),
        (QuestionType.MULTIPLE_CHOICE_MULTI, ["A", "B"]),
        (QuestionType.MULTIPLE_CHOICE, "A"),
        (QuestionType.SHORT_ANSWER, {"A": "x"}),
        (None, "x"),
    ],
)
def test_accounting_invariant(qtype, answer):
    q = build_question(
        "q1",
        qtype,
        "A",
        options=HEADINGS,
        items=[("A", HEADINGS[3]), ("B", "Label1"), ("C", "zzz")] if qtype and qtype.is_composite else None,
    )
    _invariant(score_item(answer, q))
