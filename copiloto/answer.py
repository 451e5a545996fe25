#answers per route
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import Settings
from .errors import CollaboratorError, InputError
from .gas_index import GasIndex, GasStation, GasStatus, build_gas_index, parse_gas_filters, sort_for_display
from .hits import GasHit, Hit, ManualHit
from .lang import contains_arabic, detect_lang, lang_name, ui_strings
from .llm import ChatFn, make_chat, system_user
from .logger import preview
from .manual_index import ManualIndex, build_manual_index, retrieve
from .router import Route, route_question
from .translate import TranslationCache, Translator

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    settings: Settings
    manual: ManualIndex
    gas: GasIndex
    chat: ChatFn
    translator: Translator


def build_engine(settings: Settings, chat: Optional[ChatFn] = None) -> Engine:
    chat = chat or make_chat(settings)
    cache = TranslationCache(ttl_seconds=settings.translation_ttl_seconds)
    return Engine(
        settings=settings,
        manual=build_manual_index(settings.manual_path),
        gas=build_gas_index(settings.gas_path),
        chat=chat,
        translator=Translator(chat, cache),
    )


@dataclass
class Answer:
    answer: str
    route: Route
    hits: List[Hit] = field(default_factory=list)
    lang: str = "es"
    debug: Optional[Dict[str, Any]] = None


# ----------------------------
# manual
# ----------------------------

def build_context(hits: Sequence[ManualHit]) -> str:
    blocks = []
    for i, h in enumerate(hits, start=1):
        blocks.append(
            f"FUENTE {i}\n"
            f"Módulo {h.module_id}: {h.module_title}\n"
            f"Sección: {h.section_title}\n"
            f"Contenido:\n{h.text}"
        )
    return "\n\n---\n\n".join(blocks)


def manual_system_prompt(lang: str) -> str:
    s = ui_strings(lang)
    return "\n".join(
        [
            "Eres un asistente de operación para conductores.",
            "Responde SIEMPRE usando exclusivamente el CONTEXTO proporcionado (está en español).",
            f"Idioma de salida OBLIGATORIO: {lang_name(lang)}.",
            f"Si no hay información suficiente en el contexto, responde EXACTAMENTE con: '{s.no_info}'.",
            f"Devuelve siempre al final una sección '{s.refs}' con Módulo + Sección usados.",
            "No inventes datos. No uses conocimiento externo.",
        ]
    )


def answer_from_manual(engine: Engine, question: str, search_query: str, lang: str) -> Answer:
    s = ui_strings(lang)
    result = retrieve(
        engine.manual,
        search_query,
        top_k=engine.settings.manual_top_k,
        weak_score=engine.settings.weak_score,
    )
    debug = {"strategy": result.strategy, "intent": result.intent, "top_score": result.top_score}

    # nothing to ground an answer on: fixed sentence, no generation call
    if not result.hits:
        return Answer(answer=s.no_info, route=Route.MANUAL, hits=[], lang=lang, debug=debug)

    user = f"PREGUNTA:\n{question}\n\nCONTEXTO:\n{build_context(result.hits)}"
    answer = engine.chat(system_user(manual_system_prompt(lang), user), temperature=0.2)
    if not answer:
        raise CollaboratorError("answer generation returned empty content")

    if lang != "es" and answer != s.no_info:
        if not (lang == "ar" and contains_arabic(answer)):
            answer = engine.translator.from_spanish(answer, lang)

    return Answer(answer=answer, route=Route.MANUAL, hits=list(result.hits), lang=lang, debug=debug)


# ----------------------------
# fuel stations
# ----------------------------

GAS_STRINGS: Dict[str, Dict[str, str]] = {
    "es": {
        "title": "Gasolineras autorizadas para repostar (listado oficial):",
        "country": "País",
        "network": "Red",
        "status": "Estado",
        "result": "Resultado",
        "stations": "estaciones",
        "all": "TODOS",
        "all_f": "TODAS",
        "ok": "OBLIGADO (ok)",
        "cond": "CONDICIONADO (condicionado)",
        "none": "- (sin resultados)",
        "instruction": "Instrucción",
        "shown": "Mostrando {cap} de {total}. Indica país o red para acotar.",
        "source": "Fuente: Listado oficial de gasolineras autorizadas (gasolineras.csv)",
        "no_match": "No hay gasolineras que coincidan con tu consulta en el listado oficial.",
        "hint": "Sugerencia: indica país (España/Francia/Italia/...) o red (AS24/IDS/SOLRED).",
    },
    "pt": {
        "title": "Postos autorizados para abastecer (lista oficial):",
        "country": "País",
        "network": "Rede",
        "status": "Estado",
        "result": "Resultado",
        "stations": "postos",
        "all": "TODOS",
        "all_f": "TODAS",
        "ok": "OBRIGATÓRIO (ok)",
        "cond": "CONDICIONADO (condicionado)",
        "none": "- (sem resultados)",
        "instruction": "Instrução",
        "shown": "A mostrar {cap} de {total}. Indica país ou rede para filtrar.",
        "source": "Fonte: Lista oficial de postos autorizados (gasolineras.csv)",
        "no_match": "Não há postos que coincidam com a tua consulta na lista oficial.",
        "hint": "Sugestão: indica país (Espanha/França/Itália/...) ou rede (AS24/IDS/SOLRED).",
    },
    "ro": {
        "title": "Stații autorizate pentru alimentare (listă oficială):",
        "country": "Țară",
        "network": "Rețea",
        "status": "Stare",
        "result": "Rezultat",
        "stations": "stații",
        "all": "TOATE",
        "all_f": "TOATE",
        "ok": "OBLIGATORIU (ok)",
        "cond": "CONDIȚIONAT (condiționat)",
        "none": "- (fără rezultate)",
        "instruction": "Instrucțiune",
        "shown": "Se afișează {cap} din {total}. Indică țara sau rețeaua.",
        "source": "Sursă: Lista oficială de stații autorizate (gasolineras.csv)",
        "no_match": "Nu există stații care să corespundă căutării tale în lista oficială.",
        "hint": "Sugestie: indică țara (Spania/Franța/Italia/...) sau rețeaua (AS24/IDS/SOLRED).",
    },
    "ar": {
        "title": "محطات الوقود المعتمدة للتزوّد (القائمة الرسمية):",
        "country": "البلد",
        "network": "الشبكة",
        "status": "الحالة",
        "result": "النتيجة",
        "stations": "محطات",
        "all": "الكل",
        "all_f": "الكل",
        "ok": "إلزامي (ok)",
        "cond": "مشروط (condicionado)",
        "none": "- (لا توجد نتائج)",
        "instruction": "التعليمات",
        "shown": "عرض {cap} من {total}. حدّد البلد أو الشبكة.",
        "source": "المصدر: القائمة الرسمية للمحطات المعتمدة (gasolineras.csv)",
        "no_match": "لا توجد محطات تطابق طلبك في القائمة الرسمية.",
        "hint": "اقتراح: حدّد البلد (إسبانيا/فرنسا/إيطاليا/...) أو الشبكة (AS24/IDS/SOLRED).",
    },
}


def gas_strings(lang: str) -> Dict[str, str]:
    return GAS_STRINGS.get(lang, GAS_STRINGS["es"])


def render_station(g: GasStation, lang: str) -> str:
    s = gas_strings(lang)
    label = s["ok"] if g.status == GasStatus.OK else s["cond"]
    return f"- {g.id} · {g.name} · {g.network} · {g.country} · {label}\n  {s['instruction']}: {g.instructions}"


def answer_from_gasolineras(engine: Engine, search_query: str, lang: str) -> Answer:
    """List authorised stations matching the question. Pure rendering, no LLM call."""
    s = gas_strings(lang)
    filters = parse_gas_filters(search_query)
    stations = engine.gas.filter(filters)
    strategy = "filter"
    scores: Dict[str, int] = {}

    if not stations and filters.free_text:
        scored = engine.gas.search(search_query, top_k=engine.settings.gas_top_k)
        stations = [h.station for h in scored]
        scores = {h.station.id: h.score for h in scored}
        strategy = "search"

    debug = {"strategy": strategy, "filters": {
        "country": filters.country,
        "status": filters.status.value if filters.status else None,
        "network": filters.network,
        "free_text": filters.free_text,
    }}

    if not stations:
        text = "\n".join([s["no_match"], "", s["hint"], s["source"]])
        return Answer(answer=text, route=Route.GASOLINERAS, hits=[], lang=lang, debug=debug)

    ordered = sort_for_display(stations)
    cap = engine.settings.gas_display_cap
    shown = ordered[:cap]

    status_label = s["all"]
    if filters.status:
        status_label = s["ok"] if filters.status == GasStatus.OK else s["cond"]

    lines = [
        s["title"],
        "",
        f"{s['country']}: {filters.country.upper() if filters.country else s['all']}",
        f"{s['network']}: {filters.network.upper() if filters.network else s['all_f']}",
        f"{s['status']}: {status_label}",
        f"{s['result']}: {len(ordered)} {s['stations']}",
        "",
    ]

    groups = [(GasStatus.OK, s["ok"]), (GasStatus.CONDITIONED, s["cond"])]
    for status, label in groups:
        if filters.status and filters.status != status:
            continue
        items = [render_station(g, lang) for g in shown if g.status == status]
        lines.append(f"{label}:")
        lines.append("\n".join(items) if items else s["none"])
        lines.append("")

    if len(ordered) > cap:
        lines.append(s["shown"].format(cap=cap, total=len(ordered)))
        lines.append("")
    lines.append(s["source"])

    hits = [GasHit(station=g, score=scores.get(g.id)) for g in shown]
    return Answer(answer="\n".join(lines), route=Route.GASOLINERAS, hits=hits, lang=lang, debug=debug)


# ----------------------------
# main function
# ----------------------------

def answer_question(
    engine: Engine,
    question: Optional[str],
    forced_lang: Optional[str] = None,
    debug: bool = False,
) -> Answer:
    """
    Detect language -> translate to Spanish -> route -> retrieve -> answer.
    An ambiguous route returns a clarification prompt and no hits.
    """
    if question is None or not str(question).strip():
        raise InputError("No question provided")
    question = str(question).strip()

    lang = detect_lang(question, forced_lang)
    search_query = engine.translator.to_spanish(question, lang)
    decision = route_question(search_query)

    if decision.route == Route.AMBIGUOUS:
        out = Answer(answer=ui_strings(lang).clarify, route=Route.AMBIGUOUS, hits=[], lang=lang, debug={})
    elif decision.route == Route.GASOLINERAS:
        out = answer_from_gasolineras(engine, search_query, lang)
    else:
        out = answer_from_manual(engine, question, search_query, lang)

    info = dict(out.debug or {})
    info.update({"lang": lang, "search_query": search_query, "decision": decision.to_dict()})
    if debug:
        logger.info("debug question=%r info=%s", preview(question), info)
        out.debug = info
    else:
        out.debug = None
    logger.info(
        "answered route=%s lang=%s hits=%d q=%r",
        out.route.value, lang, len(out.hits), preview(question),
    )
    return out
