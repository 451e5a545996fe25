"""Language detection and localized fixed strings.

Supported languages: es (default, and the language of the knowledge
base), pt, ro and ar.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional

from . import vocab
from .text import normalize

LANGS = ("es", "pt", "ro", "ar")
DEFAULT_LANG = "es"

_ARABIC_RE = re.compile("[\u0600-\u06ff\u0750-\u077f\u08a0-\u08ff]")
_ARABIC_WIDE_RE = re.compile(
    "[\u0600-\u06ff\u0750-\u077f\u08a0-\u08ff\ufb50-\ufdff\ufe70-\ufeff]"
)
_RO_CHARS_RE = re.compile("[ăâîșşțţ]", re.IGNORECASE)
_PT_CHARS_RE = re.compile("[ãõç]", re.IGNORECASE)
_PT_WORDS_RE = re.compile(
    r"\b(" + "|".join(re.escape(t) for t in vocab.PT_STRONG_TERMS) + r")\b",
    re.IGNORECASE,
)


def contains_arabic(text: str) -> bool:
    return bool(_ARABIC_WIDE_RE.search(text or ""))


def _detect_primary(question: str) -> str:
    q = (question or "").strip()
    if not q:
        return DEFAULT_LANG
    if _ARABIC_RE.search(q):
        return "ar"
    lower = q.lower()
    if _RO_CHARS_RE.search(lower):
        return "ro"
    if _PT_CHARS_RE.search(lower) or _PT_WORDS_RE.search(lower):
        return "pt"
    return DEFAULT_LANG


def _detect_without_diacritics(question: str, detected: str) -> str:
    """Second look for ro/pt questions typed without diacritics.

    Overrides "es" only with at least 3 signal words and a lead of 1
    over the other language.
    """
    if detected != DEFAULT_LANG:
        return detected

    q = f" {normalize(question)} "
    ro_hits = sum(1 for s in vocab.RO_FALLBACK_SIGNALS if f" {s} " in q)
    pt_hits = sum(1 for s in vocab.PT_FALLBACK_SIGNALS if f" {s} " in q)

    if ro_hits >= 3 and ro_hits >= pt_hits + 1:
        return "ro"
    if pt_hits >= 3 and pt_hits >= ro_hits + 1:
        return "pt"
    return detected


def detect_lang(question: str, forced: Optional[str] = None) -> str:
    if forced:
        if forced not in LANGS:
            raise ValueError(f"unsupported language: {forced!r}")
        return forced
    return _detect_without_diacritics(question, _detect_primary(question))


def is_rtl(lang: str) -> bool:
    return lang == "ar"


_NATIVE_NAMES = {
    "es": "Español",
    "pt": "Português",
    "ro": "Română",
    "ar": "العربية",
}

LANG_ENGLISH_NAMES = {
    "es": "Spanish",
    "pt": "Portuguese",
    "ro": "Romanian",
    "ar": "Arabic",
}


def lang_name(lang: str) -> str:
    return _NATIVE_NAMES.get(lang, _NATIVE_NAMES[DEFAULT_LANG])


@dataclass(frozen=True)
class UIStrings:
    no_info: str
    refs: str
    clarify: str


UI_STRINGS: Dict[str, UIStrings] = {
    "es": UIStrings(
        no_info="No encuentro esa información en el manual.",
        refs="Referencias",
        clarify=(
            "Tu pregunta mezcla temas del manual y de gasolineras. "
            "¿Preguntas por el manual (tacógrafo, horas, documentos...) "
            "o por dónde repostar?"
        ),
    ),
    "pt": UIStrings(
        no_info="Não encontro essa informação no manual.",
        refs="Referências",
        clarify=(
            "A tua pergunta mistura temas do manual e de postos de combustível. "
            "Perguntas pelo manual (tacógrafo, horas, documentos...) "
            "ou por onde abastecer?"
        ),
    ),
    "ro": UIStrings(
        no_info="Nu găsesc această informație în manual.",
        refs="Referințe",
        clarify=(
            "Întrebarea ta amestecă subiecte din manual și stații de alimentare. "
            "Întrebi despre manual (tahograf, ore, documente...) "
            "sau unde să alimentezi?"
        ),
    ),
    "ar": UIStrings(
        no_info="لا أجد هذه المعلومة في الدليل.",
        refs="المراجع",
        clarify=(
            "سؤالك يجمع بين مواضيع الدليل ومحطات الوقود. "
            "هل تسأل عن الدليل (جهاز التاكوغراف، الساعات، الوثائق...) "
            "أم عن مكان التزود بالوقود؟"
        ),
    ),
}


def ui_strings(lang: str) -> UIStrings:
    return UI_STRINGS.get(lang, UI_STRINGS[DEFAULT_LANG])
