import sys
from pathlib import Path
from typing import List

# Add project root to PYTHONPATH
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from copiloto.config import load_settings
from copiloto.gas_index import build_gas_index, parse_gas_filters, sort_for_display
from copiloto.manual_index import build_manual_index, retrieve
from copiloto.router import Route, route_question


# --- Demo queries covering both domains and the ambiguous case ---
QUERIES = [
    "¿Cuántas horas puedo conducir al día?",
    "me han multado, qué hago",
    "¿Qué documentos necesito para cruzar a UK?",
    "¿Dónde puedo respostar en Francia?",
    "gasolineras AS24 obligado en Italia",
    "tacógrafo y repostar",
]


def print_manual(query: str, index, k: int, weak_score: int, max_preview: int = 160):
    result = retrieve(index, query, top_k=k, weak_score=weak_score)
    print(f"DEBUG: strategy={result.strategy} intent={result.intent} top={result.top_score}")
    for i, h in enumerate(result.hits, start=1):
        preview = h.text.replace("\n", " ")
        preview = (preview[:max_preview] + "...") if len(preview) > max_preview else preview
        print(f"{i}. score={h.score:<3d} {h.id}")
        print(f"   {preview}\n")


def print_stations(query: str, gas, cap: int):
    filters = parse_gas_filters(query)
    stations = sort_for_display(gas.filter(filters))
    print(f"DEBUG: filters={filters} matched={len(stations)}")
    for g in stations[:cap]:
        print(f"- {g.id:<6} {g.status.value:<12} {g.country:<10} {g.network:<7} {g.name}")


def run(queries: List[str]):
    settings = load_settings()
    manual = build_manual_index(settings.manual_path)
    gas = build_gas_index(settings.gas_path)

    for q in queries:
        decision = route_question(q)
        print("\n" + "-" * 90)
        print("QUERY:", q)
        print("ROUTE:", decision.route.value, "| EXPANDED:", decision.expanded)

        if decision.route == Route.MANUAL:
            print_manual(q, manual, k=settings.manual_top_k, weak_score=settings.weak_score)
        elif decision.route == Route.GASOLINERAS:
            print_stations(q, gas, cap=settings.gas_display_cap)
        else:
            print("(ambiguous: the assistant asks the driver to clarify)")


def main():
    run(QUERIES)


if __name__ == "__main__":
    main()
