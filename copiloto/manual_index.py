import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from . import vocab
from .errors import DataIntegrityError
from .hits import ManualHit
from .logger import preview
from .query_utils import expand_query_tokens
from .text import has_word, normalize, tokenize

logger = logging.getLogger(__name__)

MODES = ("base", "expanded")


@dataclass(frozen=True)
class ManualEntry:
    module_id: str
    module_title: str
    section_title: str
    text: str


@dataclass(frozen=True)
class ManualIndexRow:
    entry: ManualEntry
    haystack: str      # normalized titles + body + synonym-enriched copies
    title_stack: str   # normalized titles only
    section_key: str   # normalized section title


@dataclass(frozen=True)
class ManualWeights:
    token_in_body: int = 2
    token_in_title: int = 6
    full_query: int = 8
    rest_for_time: int = 4
    fine_procedure: int = 4
    fine_contact: int = 3
    fine_authority: int = 3
    fine_payment: int = 2
    fine_section: int = 10


def build_row(
    entry: ManualEntry,
    synonyms: Optional[Sequence[Tuple[Any, str]]] = None,
) -> ManualIndexRow:
    t = normalize(entry.module_title)
    st = normalize(entry.section_title)
    body = normalize(entry.text)

    enrich = [body]
    for pattern, repl in synonyms if synonyms is not None else vocab.HAYSTACK_SYNONYMS:
        if pattern.search(body):
            enrich.append(pattern.sub(repl, body))

    return ManualIndexRow(
        entry=entry,
        haystack=" ".join(f"{t} {st} {' '.join(enrich)}".split()),
        title_stack=" ".join(f"{t} {st}".split()),
        section_key=st,
    )


class ManualIndex:
    """
    In-memory lexical index over manual sections.
    One row per (module, section); rows are built once and never change.
    """

    def __init__(self, entries: Iterable[ManualEntry], weights: Optional[ManualWeights] = None):
        self.weights = weights or ManualWeights()
        self.rows: List[ManualIndexRow] = [build_row(e) for e in entries]
        logger.info("manual index built: %d sections", len(self.rows))

    def __len__(self) -> int:
        return len(self.rows)

    @staticmethod
    def load_manual_json(path: Path) -> List[ManualEntry]:
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise DataIntegrityError(f"manual: invalid JSON in {path}: {exc}") from exc
        return ManualIndex.entries_from_records(data)

    @staticmethod
    def entries_from_records(data: Any) -> List[ManualEntry]:
        if not isinstance(data, list):
            raise DataIntegrityError("manual: root must be a list of modules")

        entries: List[ManualEntry] = []
        ids = set()
        for i, m in enumerate(data):
            if not isinstance(m, dict):
                raise DataIntegrityError(f"manual: module #{i} is not an object")
            module_id = str(m.get("id") or "").strip()
            title = str(m.get("title") or "").strip()
            sections = m.get("sections")
            if not module_id or not title or not isinstance(sections, list):
                raise DataIntegrityError(f"manual: invalid module #{i} (id, title, sections required)")
            if module_id in ids:
                raise DataIntegrityError(f"manual: duplicate module id: {module_id}")
            ids.add(module_id)

            for s in sections:
                s = s if isinstance(s, dict) else {}
                section_title = str(s.get("title") or "").strip()
                paragraphs = s.get("paragraphs")
                if not section_title or not isinstance(paragraphs, list):
                    raise DataIntegrityError(f"manual: invalid section in module {module_id}")
                entries.append(
                    ManualEntry(
                        module_id=module_id,
                        module_title=title,
                        section_title=section_title,
                        text="\n".join(str(p) for p in paragraphs),
                    )
                )

        if not entries:
            raise DataIntegrityError("manual: no sections loaded")
        return entries

    def _score(self, row: ManualIndexRow, q_tokens: List[str], q_norm: str) -> int:
        if not q_tokens:
            return 0
        w = self.weights
        score = 0

        for tok in q_tokens:
            if tok in row.haystack:
                score += w.token_in_body
            if tok in row.title_stack:
                score += w.token_in_title
        if q_norm and q_norm in row.haystack:
            score += w.full_query

        toks = set(q_tokens)
        if (
            toks.intersection(vocab.CONDUCTION_TOKENS)
            and toks.intersection(vocab.HOURS_TOKENS)
            and "descanso" in row.haystack
        ):
            score += w.rest_for_time

        if toks.intersection(vocab.FINE_TOKENS):
            if "procedimiento" in row.haystack:
                score += w.fine_procedure
            if "contactar" in row.haystack:
                score += w.fine_contact
            if "operador" in row.haystack or "trafico" in row.haystack:
                score += w.fine_authority
            if "pago" in row.haystack or "pagar" in row.haystack:
                score += w.fine_payment
            if "multas" in row.title_stack:
                score += w.fine_section

        return score

    def _restrict(self, fragments: Optional[Sequence[str]]) -> List[ManualIndexRow]:
        inc = [f for f in (normalize(x) for x in fragments or []) if f]
        if not inc:
            return self.rows
        return [r for r in self.rows if all(f in r.section_key for f in inc)]

    def search(
        self,
        query: str,
        top_k: int = 6,
        mode: str = "expanded",
        restrict_section: Optional[Sequence[str]] = None,
    ) -> List[ManualHit]:
        if mode not in MODES:
            raise ValueError(f"unknown search mode: {mode!r}")

        q_norm = normalize(query)
        q_tokens = tokenize(query)
        if mode == "expanded":
            q_tokens = expand_query_tokens(q_tokens, vocab.TOKEN_EXPANSIONS)
        if not q_tokens:
            return []

        scored = []
        for row in self._restrict(restrict_section):
            score = self._score(row, q_tokens, q_norm)
            if score > 0:
                scored.append((score, row))
        # stable: equal scores keep corpus order
        scored.sort(key=lambda x: x[0], reverse=True)

        results: List[ManualHit] = []
        seen = set()
        for score, row in scored:
            key = (row.entry.module_id, row.section_key)
            if key in seen:
                continue
            seen.add(key)
            e = row.entry
            results.append(
                ManualHit(
                    module_id=e.module_id,
                    module_title=e.module_title,
                    section_title=e.section_title,
                    text=e.text,
                    score=score,
                )
            )
            if len(results) >= max(top_k, 1):
                break
        return results


def build_manual_index(manual_path: str, weights: Optional[ManualWeights] = None) -> ManualIndex:
    path = Path(manual_path)
    if not path.exists():
        raise FileNotFoundError(f"manual.json not found: {path}")
    return ManualIndex(ManualIndex.load_manual_json(path), weights=weights)


# ----------------------------
# retrieval policy
# ----------------------------

def _best(hits: List[ManualHit]) -> int:
    return hits[0].score if hits else 0


@dataclass(frozen=True)
class RetrievalResult:
    hits: List[ManualHit]
    strategy: str
    intent: str

    @property
    def top_score(self) -> int:
        return _best(self.hits)


def detect_intent(query: str) -> str:
    q = normalize(query)
    if any(has_word(q, t) for t in vocab.FINE_INTENT_TERMS):
        return "fine_penalty"
    return "other"


def is_weak(hits: List[ManualHit], threshold: int = 10) -> bool:
    return not hits or _best(hits) < threshold


def retrieve(
    index: ManualIndex,
    query: str,
    top_k: int = 6,
    weak_score: int = 10,
) -> RetrievalResult:
    """Base pass, expanded pass when weak, and a fines rescue when still weak.

    The rescue appends the canonical fines vocabulary and searches only
    the fines section, first by its numbered title, then by "multas" alone.
    """
    intent = detect_intent(query)
    strategy = "base"
    hits = index.search(query, top_k, mode="base")

    if is_weak(hits, weak_score):
        hits2 = index.search(query, top_k, mode="expanded")
        s1, s2 = _best(hits), _best(hits2)
        if s2 > s1 or (s2 == s1 and len(hits2) > len(hits)):
            hits = hits2
            strategy = "expanded"

    if intent == "fine_penalty" and is_weak(hits, weak_score):
        rescue_q = f"{query} {vocab.FINE_RESCUE_SUFFIX}"
        forced = index.search(
            rescue_q, top_k, mode="expanded", restrict_section=vocab.FINE_RESCUE_SECTION
        )
        if forced:
            hits, strategy = forced, "rescue"
        else:
            forced = index.search(
                rescue_q, top_k, mode="expanded", restrict_section=vocab.FINE_RESCUE_SECTION_LOOSE
            )
            if forced:
                hits, strategy = forced, "rescue_loose"

    logger.debug(
        "manual retrieval strategy=%s intent=%s hits=%d top=%d q=%r",
        strategy, intent, len(hits), _best(hits), preview(query),
    )
    return RetrievalResult(hits=hits, strategy=strategy, intent=intent)
