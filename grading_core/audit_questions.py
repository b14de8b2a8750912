from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable, Optional

from .config import DEFAULT_SETTINGS, GradingSettings
from .question_bank import load_questions
from .resolver import find_option_index, letter_to_index, needs_resolution
from .types import Question, QuestionType


def _blank_totals() -> dict[str, int]:
    return {
        "questions": 0,
        "sub_items": 0,
        "composite_without_items": 0,
        "atomic_with_items": 0,
        "unknown_type": 0,
        "unscoreable": 0,
        "blank_sub_item_key": 0,
        "unresolved_sub_item_key": 0,
        "summary_label_without_options": 0,
    }


def audit_questions(
    questions: Iterable[Question],
    settings: Optional[GradingSettings] = None,
) -> dict[str, object]:
    s = settings or DEFAULT_SETTINGS
    coverage: dict[str, int] = {}
    totals = _blank_totals()
    warnings: list[str] = []

    for q in questions:
        totals["questions"] += 1
        coverage[q.type_name] = coverage.get(q.type_name, 0) + 1
        qt = q.type

        if qt is None:
            totals["unknown_type"] += 1
            warnings.append(f"{q.id}: unknown question type {q.raw_type!r}")
            continue

        if qt.is_composite:
            if not q.items:
                totals["composite_without_items"] += 1
                warnings.append(f"{q.id}: {qt.value} has no sub-items")
            for it in q.items:
                totals["sub_items"] += 1
                if not it.correct_answer.strip():
                    totals["blank_sub_item_key"] += 1
                    warnings.append(f"{q.id}/{it.label}: sub-item has no correct answer")
                    continue
                options = it.options or q.options
                if needs_resolution(it.correct_answer, options, s.resolver) and \
                        find_option_index(it.correct_answer, options, s.resolver) is None:
                    totals["unresolved_sub_item_key"] += 1
                    warnings.append(
                        f"{q.id}/{it.label}: correct answer {it.correct_answer[:40]!r} matches no option"
                    )
            continue

        if q.items:
            totals["atomic_with_items"] += 1
            warnings.append(f"{q.id}: {qt.value} carries {len(q.items)} sub-items that are never scored")

        if qt is QuestionType.WRITING_TASK:
            continue
        if not q.correct_answer.strip() and not q.alternative_answers:
            totals["unscoreable"] += 1
            warnings.append(f"{q.id}: no correct answer or alternatives; can never score")
        elif qt is QuestionType.SUMMARY_COMPLETION and not q.options \
                and letter_to_index(q.correct_answer) is not None:
            totals["summary_label_without_options"] += 1
            warnings.append(f"{q.id}: summary answer {q.correct_answer.strip()!r} is a label but no options exist")

    return {"coverage": coverage, "warnings": warnings, "totals": totals}


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, int] = summary["coverage"]  # type: ignore[assignment]
    print("=== Question Coverage ===")
    for qtype in sorted(coverage):
        print(f"  {qtype:<24}{coverage[qtype]:4d}")

    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")

    totals = summary["totals"]
    print("\nTotals:", totals)


def write_summary(summary: dict[str, object], path: Path = Path("question_audit.json")) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Audit a question set for grading data-quality problems.")
    ap.add_argument("questions", help="JSON file with a list of questions (or {\"questions\": [...]})")
    ap.add_argument("--out", default="question_audit.json", help="where to write the JSON summary")
    args = ap.parse_args(argv)

    items = load_questions(args.questions)
    summary = audit_questions(items)
    print_report(summary)
    write_summary(summary, Path(args.out))
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
