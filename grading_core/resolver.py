"""Map a long-text answer key onto the short label of the option that carries it.

Authors sometimes paste the full option text ("A single certainty among
other less definite facts") as a sub-item's correct answer while learners pick
the option by its label ("iv", "D"). Resolution runs three tiers over the
option list and the first tier that hits wins:

1. exact match of the normalised strings;
2. inclusion, only when both normalised strings reach
   ``inclusion_min_chars``;
3. token overlap, only when the normalised candidate reaches
   ``overlap_min_chars``: tokens of at least ``overlap_min_token_len``
   characters, candidate needs ``overlap_min_tokens`` of them and the shared
   fraction must exceed ``overlap_ratio``.

An unresolved candidate is returned unchanged and logged as a data-quality
warning; it is never an error.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Sequence, Set

from .config import ResolverSettings
from .normalizer import normalize

log = logging.getLogger(__name__)

_ROMAN = (
    (1000, "m"), (900, "cm"), (500, "d"), (400, "cd"),
    (100, "c"), (90, "xc"), (50, "l"), (40, "xl"),
    (10, "x"), (9, "ix"), (5, "v"), (4, "iv"), (1, "i"),
)


class LabelStyle(str, Enum):
    LETTER = "letter"
    ROMAN = "roman"


def index_to_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    n = int(index) + 1
    out = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out = chr(65 + rem) + out
    return out


def index_to_roman(index: int) -> str:
    n = int(index) + 1
    out = []
    for value, numeral in _ROMAN:
        while n >= value:
            out.append(numeral)
            n -= value
    return "".join(out)


def letter_to_index(label: str) -> Optional[int]:
    s = (label or "").strip()
    if len(s) != 1 or not s.isascii() or not s.isalpha():
        return None
    return ord(s.upper()) - 65


def option_label(index: int, style: LabelStyle = LabelStyle.LETTER) -> str:
    if style is LabelStyle.ROMAN:
        return index_to_roman(index)
    return index_to_letter(index)


def is_roman_label(candidate: str, options: Sequence[str]) -> bool:
    norm = normalize(candidate)
    return bool(norm) and any(norm == index_to_roman(idx) for idx in range(len(options)))


def is_option_label(candidate: str, options: Sequence[str]) -> bool:
    """True when ``candidate`` already names one of the options by letter or numeral."""
    norm = normalize(candidate)
    if not norm:
        return False
    if any(norm == index_to_letter(idx).lower() for idx in range(len(options))):
        return True
    return is_roman_label(norm, options)


def _tokens(norm: str, min_len: int) -> Set[str]:
    return {t for t in norm.split(" ") if len(t) >= min_len}


def _exact_index(norm: str, norm_opts: List[str]) -> Optional[int]:
    for idx, opt in enumerate(norm_opts):
        if opt == norm:
            return idx
    return None


def _inclusion_index(norm: str, norm_opts: List[str], s: ResolverSettings) -> Optional[int]:
    if len(norm) < s.inclusion_min_chars:
        return None
    for idx, opt in enumerate(norm_opts):
        if len(opt) < s.inclusion_min_chars:
            continue
        if norm in opt or opt in norm:
            return idx
    return None


def _overlap_index(norm: str, norm_opts: List[str], s: ResolverSettings) -> Optional[int]:
    if len(norm) < s.overlap_min_chars:
        return None
    cand = _tokens(norm, s.overlap_min_token_len)
    if len(cand) < s.overlap_min_tokens:
        return None
    for idx, opt in enumerate(norm_opts):
        shared = len(cand & _tokens(opt, s.overlap_min_token_len))
        if shared / len(cand) > s.overlap_ratio:
            return idx
    return None


def find_option_index(
    candidate: str,
    options: Sequence[str],
    settings: ResolverSettings | None = None,
) -> Optional[int]:
    """Index of the option ``candidate`` refers to, or None."""
    s = settings or ResolverSettings()
    if not options:
        return None
    norm = normalize(candidate)
    if not norm:
        return None
    norm_opts = [normalize(o) for o in options]
    idx = _exact_index(norm, norm_opts)
    if idx is None:
        idx = _inclusion_index(norm, norm_opts, s)
    if idx is None:
        idx = _overlap_index(norm, norm_opts, s)
    return idx


def needs_resolution(
    candidate: str,
    options: Sequence[str],
    settings: ResolverSettings | None = None,
) -> bool:
    s = settings or ResolverSettings()
    text = (candidate or "").strip()
    if len(text) <= s.min_candidate_len or not options:
        return False
    return not is_option_label(text, options)


def resolve_label(
    candidate: str,
    options: Sequence[str],
    style: LabelStyle = LabelStyle.LETTER,
    settings: ResolverSettings | None = None,
) -> str:
    """Label of the option matching ``candidate``; ``candidate`` itself when none does."""
    if not needs_resolution(candidate, options, settings):
        return candidate
    idx = find_option_index(candidate, options, settings)
    if idx is None:
        log.warning(
            "unresolved answer key %r: no option among %d matches; scoring against raw text",
            (candidate or "")[:80],
            len(options),
        )
        return candidate
    return option_label(idx, style)
