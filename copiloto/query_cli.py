import argparse
import json

from .answer import answer_question, build_engine
from .config import load_settings
from .errors import CollaboratorError, InputError
from .hits import hits_to_payload
from .lang import LANGS
from .logger import setup_logging
from .router import route_question


def print_result(q: str, out, debug: bool = False):
    print("\nQ:", q)
    print("Route:", out.route.value, "| Lang:", out.lang)
    print("\nAnswer:")
    print(out.answer)

    if out.hits:
        print("\nTop results:")
        for i, h in enumerate(hits_to_payload(out.hits), start=1):
            print(f"{i}. {json.dumps(h, ensure_ascii=False)}")

    if debug and out.debug:
        print("\nDebug:", json.dumps(out.debug, ensure_ascii=False, indent=2))


def print_route(q: str):
    decision = route_question(q)
    print(json.dumps(decision.to_dict(), ensure_ascii=False, indent=2))


def run_one(engine, q: str, args) -> int:
    try:
        out = answer_question(engine, q, forced_lang=args.lang, debug=args.debug)
    except InputError as e:
        print("Input error:", e)
        return 2
    except CollaboratorError as e:
        print(f"LLM error (status={e.status}): {e.message}")
        return 1
    print_result(q, out, debug=args.debug)
    return 0


# Argument Parsing
def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Ask the driver assistant from the terminal.")
    parser.add_argument("--query", type=str, default=None, help="Run a single query and exit")
    parser.add_argument("--lang", choices=list(LANGS), default=None, help="Force the answer language")
    parser.add_argument("--debug", action="store_true", help="Print routing/retrieval details")
    parser.add_argument(
        "--route-only",
        action="store_true",
        help="Only print the routing decision (no LLM calls)",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging("DEBUG" if args.debug else settings.log_level)

    if args.route_only:
        if not args.query:
            parser.error("--route-only requires --query")
        print_route(args.query)
        return 0

    engine = build_engine(settings)

    if args.query:
        return run_one(engine, args.query.strip(), args)

    print("Copiloto ready. Type 'exit' to quit.\n")
    while True:
        try:
            q = input("Q> ").strip()
        except EOFError:
            print("\n(EOF) No interactive input available. Tip: use --query \"...\"")
            break

        if q.lower() in {"exit", "quit"}:
            break
        if not q:
            continue
        run_one(engine, q, args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
