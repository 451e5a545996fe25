"""Static vocabulary tables.

All terms are already normalized (lowercase, no diacritics). The tables
are plain data so that tests and callers can pass their own versions to
the functions that consume them.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

# ----------------------------
# alias rules: (alias, canonical)
# ----------------------------

ALIASES: List[Tuple[str, str]] = [
    ("respostar", "repostar"),
    ("respotar", "repostar"),
    ("gasofa", "gasolinera"),
    ("diesel", "gasoil"),
    ("taco", "tacografo"),
    ("disco", "tacografo"),
    ("trafico", "gestores de pedidos"),
    ("gestor", "gestores de pedidos"),
    ("msg", "mensajes"),
]

# ----------------------------
# router term lists
# ----------------------------

GAS_TERMS: List[str] = [
    "repostar", "respostar", "respotar", "repostaje",
    "gasolinera", "gasolineras", "estacion", "estaciones",
    "combustible", "gasoil", "diesel", "llenar", "llenado", "litros", "deposito",
    "as24", "ids", "solred", "cepsa", "esso", "q8", "smart diesel",
]

MANUAL_TERMS: List[str] = [
    "tacografo", "dtco", "tarjeta", "horas", "conducir", "conduccion",
    "descanso", "pausa", "documentos", "documentacion", "cmr", "cap", "dni",
    "checklist", "border", "uk", "reino unido", "eurotunel", "calais",
    "mensajes", "tablet", "gestores de pedidos",
]

LOCATION_TERMS: List[str] = [
    "donde", "cerca", "ubicacion", "localizar", "estaciones", "listado",
    "mapa", "ruta", "autopista", "area", "servicio", "precio",
]

# ----------------------------
# query token inflation: (triggers, additions)
# a rule fires when any trigger is among the original query tokens
# ----------------------------

TOKEN_EXPANSIONS: List[Tuple[Tuple[str, ...], Tuple[str, ...]]] = [
    # conduction time
    (("horas",), ("tiempos", "duracion", "maximo", "diaria", "semanal")),
    (("hora",), ("tiempos", "duracion", "maximo")),
    (("tiempo", "tiempos"), ("horas", "duracion", "maximo")),
    (("conducir", "conduccion", "conductor"), ("tacografo", "descanso", "pausa")),
    (("descanso", "pausa"), ("conduccion", "tacografo", "4h30", "45")),
    (("tacografo",), ("dtco", "tarjeta", "conduccion", "descanso", "pausa")),
    # documents
    (("documentos", "documentacion"), ("cmr", "hoja", "tarjeta", "dni", "cap")),
    (("uk", "reino", "unido", "border"), ("calais", "eurotunel", "checklist", "food", "defense")),
    # fines and penalties
    (
        ("multado", "multada", "multaron", "multar", "multan", "multando"),
        ("multa", "multas", "sancion", "sanciones", "infraccion", "infracciones", "inmovilizacion"),
    ),
    (
        ("multa", "multas"),
        ("sancion", "sanciones", "infraccion", "infracciones", "denuncia", "ticket", "inmovilizacion"),
    ),
    (
        ("sancion", "sanciones"),
        ("multa", "multas", "infraccion", "infracciones", "inmovilizacion", "pago"),
    ),
    (("infraccion", "infracciones"), ("multa", "multas", "sancion", "sanciones")),
    (
        ("inmovilizacion",),
        ("multa", "multas", "sancion", "sanciones", "operador", "trafico", "pago"),
    ),
    (
        ("pagar", "pago"),
        ("multa", "multas", "sancion", "sanciones", "gestion", "empresa", "colaboradora"),
    ),
]

# ----------------------------
# haystack enrichment: every matching rule adds a rewritten copy of the body
# ----------------------------

HAYSTACK_SYNONYMS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\btiempos?\b"), "tiempos horas"),
    (re.compile(r"\bhoras?\b"), "horas tiempos"),
    (re.compile(r"\bconduccion\b"), "conduccion conducir"),
    (re.compile(r"\bconducir\b"), "conducir conduccion"),
    (re.compile(r"\bmultas?\b"), "multa multas sancion sanciones infraccion infracciones"),
    (re.compile(r"\bsancion(es)?\b"), "sancion sanciones multa multas infraccion infracciones"),
    (re.compile(r"\binfraccion(es)?\b"), "infraccion infracciones multa multas sancion sanciones"),
]

# ----------------------------
# manual scoring signals
# ----------------------------

CONDUCTION_TOKENS = ("conducir", "conduccion")
HOURS_TOKENS = ("horas", "tiempos")
FINE_TOKENS = (
    "multa", "multas", "multado", "multada",
    "sancion", "sanciones", "infraccion", "infracciones",
)

# whole-word terms that mark a fine/penalty question
FINE_INTENT_TERMS: List[str] = [
    "multa", "multas", "multado", "multada", "multaron", "multar",
    "sancion", "sanciones", "infraccion", "infracciones",
    "denuncia", "ticket", "inmovilizacion", "inmovilizado",
]

FINE_RESCUE_SUFFIX = "multa sancion infraccion inmovilizacion operador trafico pago"
FINE_RESCUE_SECTION = ["03 09", "multas"]
FINE_RESCUE_SECTION_LOOSE = ["multas"]

# ----------------------------
# fuel stations
# ----------------------------

COUNTRY_ALIASES: Dict[str, str] = {
    "espana": "España",
    "spain": "España",
    "francia": "Francia",
    "france": "Francia",
    "italia": "Italia",
    "italy": "Italia",
    "belgica": "Bélgica",
    "belgium": "Bélgica",
    "luxemburgo": "Luxemburgo",
    "luxembourg": "Luxemburgo",
    "croacia": "Croacia",
    "croatia": "Croacia",
    "rumania": "Rumanía",
    "romania": "Rumanía",
    "bulgaria": "Bulgaria",
    "polonia": "Polonia",
    "poland": "Polonia",
}

NETWORK_ALIASES: Dict[str, str] = {
    "as24": "AS24",
    "ids": "IDS",
    "solred": "SOLRED",
    "repsol": "SOLRED",
    "cepsa": "CEPSA",
    "esso": "ESSO",
    "q8": "Q8",
}

STATUS_OK_TERMS = ("obligado", "obligatorio")
STATUS_CONDITIONED_TERMS = ("condicionado",)

GAS_STOPWORDS = frozenset(
    list(COUNTRY_ALIASES)
    + list(NETWORK_ALIASES)
    + list(STATUS_OK_TERMS)
    + list(STATUS_CONDITIONED_TERMS)
    + [
        "donde", "puedo", "puede", "hay", "repostar", "repostaje", "respostar",
        "gasolinera", "gasolineras", "estacion", "estaciones",
        "llenar", "llenado", "combustible", "diesel", "gasoil", "deposito", "litros",
        "cerca", "ubicacion", "localizar", "listado", "lista", "mapa", "ruta",
        "autopista", "area", "servicio", "precio", "autorizadas", "autorizada",
        "en", "de", "del", "al", "la", "el", "los", "las", "un", "una", "y", "o",
        "para", "por", "con", "que", "me", "mi", "se", "es", "son", "quiero", "necesito",
    ]
)

# ----------------------------
# language signals
# ----------------------------

# "por favor" is left out: Spanish questions use it too
PT_STRONG_TERMS = (
    "você", "vocês", "obrigado", "obrigada",
    "faço", "fiz", "estou", "também", "não",
)

RO_FALLBACK_SIGNALS = (
    "care", "este", "numarul", "maxim", "ore", "conducere", "saptamanal",
    "dupa", "cat", "timp", "obligatoriu", "pauza", "minute", "sofer", "conducator",
)

PT_FALLBACK_SIGNALS = (
    "qual", "quais", "quanto", "tempo", "obrigatorio", "pausa", "minutos",
    "conducao", "motorista", "camiao", "caminhao",
)
