"""Cached translation through the chat endpoint.

The knowledge base is in Spanish: questions are translated into Spanish
before routing and answers back into the driver's language.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .config import TRANSLATION_TTL_SECONDS
from .lang import LANG_ENGLISH_NAMES
from .llm import ChatFn, system_user
from .logger import preview

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


@dataclass
class _Entry:
    value: str
    expires_at: float


class TranslationCache:
    """TTL map keyed by (target language, source text).

    Expired entries are dropped when their key is looked up again; there
    is no sweep and no size cap, so keys that are never asked for again
    stay in memory until the process exits. The key space is bounded by
    the distinct questions and answers a deployment sees.
    """

    def __init__(
        self,
        ttl_seconds: float = TRANSLATION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[CacheKey, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() > entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: CacheKey, value: str) -> None:
        if not value:
            return
        with self._lock:
            self._entries[key] = _Entry(value=value, expires_at=self.clock() + self.ttl_seconds)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def translation_instruction(source: str, target: str) -> str:
    return "\n".join(
        [
            "You are a strict professional translator.",
            f"Translate the text FROM {LANG_ENGLISH_NAMES.get(source, source)} "
            f"INTO {LANG_ENGLISH_NAMES.get(target, target)}.",
            "",
            "Rules:",
            "- Output ONLY the translation. Do NOT explain. Do NOT repeat the original.",
            "- Do not add or remove information.",
            "- Keep formatting, line breaks and bullet structure.",
            "- Keep acronyms, codes and numbers unchanged (CMR, UK, AS24, IDS, DTCO, etc).",
            "- If the text ends with a references block, keep every line after its heading unchanged.",
        ]
    )


QUERY_INSTRUCTION_SUFFIX = (
    "\n- The text is a search query: return a short phrase, not an explanation."
)


class Translator:
    def __init__(self, chat: ChatFn, cache: Optional[TranslationCache] = None):
        self.chat = chat
        self.cache = cache if cache is not None else TranslationCache()

    def translate(self, text: str, target: str, source: str = "es", query: bool = False) -> str:
        text = (text or "").strip()
        if not text:
            return ""
        if target == source:
            return text

        key = (target, text)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        instruction = translation_instruction(source, target)
        if query:
            instruction += QUERY_INSTRUCTION_SUFFIX

        out = self.chat(system_user(instruction, text), temperature=0.0).strip()
        if not out:
            logger.warning("empty translation %s->%s, keeping original: %r", source, target, preview(text))
            out = text

        self.cache.set(key, out)
        return out

    def to_spanish(self, text: str, lang: str) -> str:
        return self.translate(text, target="es", source=lang, query=True)

    def from_spanish(self, text: str, lang: str) -> str:
        return self.translate(text, target=lang, source="es")
