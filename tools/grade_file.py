from __future__ import annotations
import argparse, json, logging, sys
from pathlib import Path

from grading_core.audit_export import to_csv
from grading_core.config import load_settings
from grading_core.engine import grade_session
from grading_core.question_bank import load_answers, load_questions, load_sections


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Grade a submitted session from JSON files.")
    ap.add_argument("--questions", required=True, help="questions JSON (list or {\"questions\": [...]})")
    ap.add_argument("--answers", required=True, help="answers JSON (list or {\"answers\": [...]})")
    ap.add_argument("--sections", help="optional sections JSON")
    ap.add_argument("--csv", help="also write the per-question audit trace here")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )

    questions = load_questions(args.questions)
    answers = load_answers(args.answers)
    sections = load_sections(args.sections) if args.sections else None

    report = grade_session(answers, questions, sections, load_settings())
    if args.csv:
        Path(args.csv).write_text(to_csv(report.audit_events), encoding="utf-8")
    json.dump(report.to_dict(), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
