from __future__ import annotations
import json
from pathlib import Path
from typing import Any, List, Union

from .types import Question, Section, SubmittedAnswer

PathLike = Union[str, Path]


def _read_list(path: PathLike, key: str) -> List[Any]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get(key, [])
    return [r for r in raw if isinstance(r, dict)] if isinstance(raw, list) else []


def load_questions(path: PathLike) -> List[Question]:
    return [Question.from_dict(r) for r in _read_list(path, "questions")]


def load_answers(path: PathLike) -> List[SubmittedAnswer]:
    return [SubmittedAnswer.from_dict(r) for r in _read_list(path, "answers")]


def load_sections(path: PathLike) -> List[Section]:
    return [Section.from_dict(r) for r in _read_list(path, "sections")]
