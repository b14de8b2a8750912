"""Answer text canonicalisation shared by every comparison in the engine."""
from __future__ import annotations

import re
from typing import Any

_TAG_RX = re.compile(r"<[^>]*>")
_PUNCT_RX = re.compile(r"[.,;!?]")
_SPACE_RX = re.compile(r"\s+")
_ARTICLE_RX = re.compile(r"^(?:(?:the|a|an)\s+)+")


def normalize(text: Any) -> str:
    """Return the comparison form of ``text``.

    Markup is stripped, case folded to lower, the sentence punctuation marks
    ``. , ; ! ?`` dropped, whitespace collapsed and leading articles removed.
    ``None`` yields ``""``. The result is a fixed point: normalising it again
    changes nothing.
    """
    if text is None:
        return ""
    s = str(text)
    if not s:
        return ""
    s = _TAG_RX.sub("", s)
    s = s.lower()
    s = _PUNCT_RX.sub("", s)
    s = _SPACE_RX.sub(" ", s).strip()
    return _ARTICLE_RX.sub("", s)
