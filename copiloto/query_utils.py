"""Small, deterministic query expansion.

The goal is not "semantic" rewriting, but to reduce brittleness in
driver questions (typos like "respostar", slang like "taco" for the
tachograph, verb forms like "multado" that never appear in the manual).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from . import vocab
from .text import has_word, normalize


def expand_aliases(
    normalized_query: str,
    aliases: Optional[Sequence[Tuple[str, str]]] = None,
) -> Tuple[str, List[Dict[str, str]]]:
    """Append the canonical term of every alias found as a whole word.

    Returns the expanded query and the list of ``{"alias", "canon"}``
    matches, deduplicated and in rule order.
    """
    out = normalized_query
    matched: Dict[Tuple[str, str], Dict[str, str]] = {}

    for alias, canon in aliases if aliases is not None else vocab.ALIASES:
        alias_n = normalize(alias)
        canon_n = normalize(canon)
        if not has_word(out, alias_n):
            continue
        matched.setdefault((alias_n, canon_n), {"alias": alias_n, "canon": canon_n})
        if not has_word(out, canon_n):
            out = f"{out} {canon_n}".strip()

    return out, list(matched.values())


def expand_query_tokens(
    tokens: Iterable[str],
    rules: Optional[Sequence[Tuple[Sequence[str], Sequence[str]]]] = None,
) -> List[str]:
    """Inflate query tokens with related vocabulary in a single pass.

    Only the original tokens can trigger a rule; tokens added by one rule
    never trigger another.
    """
    original = list(dict.fromkeys(tokens))
    present = set(original)
    out = list(original)
    seen = set(original)

    for triggers, additions in rules if rules is not None else vocab.TOKEN_EXPANSIONS:
        if not present.intersection(triggers):
            continue
        for t in additions:
            if t in seen:
                continue
            seen.add(t)
            out.append(t)

    return out
