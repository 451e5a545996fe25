"""Text normalization shared by routing, indexing and filtering.

Everything that compares strings goes through :func:`normalize` first, so
"Tacógrafo", "TACOGRAFO" and "tacógrafo." all end up as ``tacografo``.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List, Optional

_MARKS_RE = re.compile("[\u0300-\u036f]")
_NON_WORD_RE = re.compile(r"[^\w\s]|_", re.UNICODE)
_WS_RE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    if not text:
        return ""
    # lowercase before decomposing: some lowercase forms carry combining marks
    s = unicodedata.normalize("NFD", text.lower())
    s = _MARKS_RE.sub("", s)
    s = _NON_WORD_RE.sub(" ", s)
    return _WS_RE.sub(" ", s).strip()


def tokenize(text: Optional[str]) -> List[str]:
    n = normalize(text)
    if not n:
        return []
    return [t for t in n.split(" ") if len(t) >= 2]


def has_word(text: str, term: str) -> bool:
    """Whole-word match of ``term`` (possibly several words) in normalized ``text``."""
    if not term:
        return False
    return f" {term} " in f" {text} "


def count_hits(text: str, terms: Iterable[str]) -> int:
    return sum(1 for t in dict.fromkeys(terms) if has_word(text, t))
