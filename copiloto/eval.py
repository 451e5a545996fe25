import argparse
import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config import load_settings
from .logger import setup_logging
from .manual_index import ManualIndex, build_manual_index, retrieve
from .router import route_question
from .text import normalize


@dataclass
class EvalItem:
    qid: str
    question: str
    route: Optional[str]
    gold_sections: List[str]


def load_eval_jsonl(path: Path) -> List[EvalItem]:
    items: List[EvalItem] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            obj = json.loads(line)
            qid = str(obj.get("qid", f"line_{line_num}"))
            q = str(obj["question"])
            gold = obj.get("gold_sections", [])
            if not isinstance(gold, list):
                raise ValueError(f"gold_sections must be a list on line {line_num}")
            items.append(
                EvalItem(
                    qid=qid,
                    question=q,
                    route=obj.get("route"),
                    gold_sections=[normalize(str(x)) for x in gold],
                )
            )
    if not items:
        raise RuntimeError("No eval items loaded.")
    return items


def precision_at_k(retrieved: List[str], gold: List[str], k: int) -> float:
    if k <= 0:
        return 0.0
    topk = retrieved[:k]
    if not topk:
        return 0.0
    gold_set = set(gold)
    hits = sum(1 for sid in topk if sid in gold_set)
    return hits / float(k)


def hit_at_k(retrieved: List[str], gold: List[str], k: int) -> int:
    topk = retrieved[:k]
    gold_set = set(gold)
    return 1 if any(sid in gold_set for sid in topk) else 0


def classify_failure(
    retrieved: List[str], gold: List[str], route_ok: bool = True
) -> Tuple[str, List[str]]:
    """
    Simple failure taxonomy based on routing and retrieval only.
    """
    if not route_ok:
        return ("WRONG_ROUTE", ["Add the missing domain term or alias to vocab.py."])

    if not gold:
        return ("NO_GOLD_LABELS", ["Add gold_sections for this question."])

    if not retrieved:
        return ("NO_RETRIEVAL_RESULTS", ["Check the question normalization; the query may have no tokens."])

    gold_set = set(gold)
    if not any(sid in gold_set for sid in retrieved[:5]):
        return (
            "LOW_CONTEXT_RELEVANCE",
            [
                "Add a token expansion rule for the question's vocabulary.",
                "Add a haystack synonym for the section's wording.",
            ],
        )

    # gold is in the top 5 but a distractor ranks first
    if retrieved[0] not in gold_set:
        return (
            "CONTEXT_TOO_NOISY",
            [
                "Two-letter tokens match inside longer words; check the query tokens.",
                "Put the key term in the gold section title so it outranks body matches.",
            ],
        )

    return ("OK", [])


def evaluate(index: ManualIndex, items: List[EvalItem], top_k: int = 6, weak_score: int = 10):
    report_rows: List[Dict[str, Any]] = []
    failure_rows: List[Dict[str, Any]] = []

    for item in items:
        decision = route_question(item.question)
        route_ok = item.route is None or decision.route.value == item.route

        retrieved_ids: List[str] = []
        if decision.route.value == "manual" or item.gold_sections:
            result = retrieve(index, item.question, top_k=top_k, weak_score=weak_score)
            retrieved_ids = [normalize(h.section_title) for h in result.hits]

        p3 = precision_at_k(retrieved_ids, item.gold_sections, 3)
        p5 = precision_at_k(retrieved_ids, item.gold_sections, 5)
        h5 = hit_at_k(retrieved_ids, item.gold_sections, 5)

        report_rows.append(
            {
                "qid": item.qid,
                "question": item.question,
                "route": decision.route.value,
                "route_ok": str(int(route_ok)),
                "precision@3": f"{p3:.4f}",
                "precision@5": f"{p5:.4f}",
                "hit@5": str(h5),
                "gold_sections": "|".join(item.gold_sections),
                "top5_sections": "|".join(retrieved_ids[:5]),
            }
        )

        # route-only items (no gold sections) only fail on routing
        if not item.gold_sections and route_ok:
            continue
        failure_type, suggested_fixes = classify_failure(retrieved_ids, item.gold_sections, route_ok)
        if failure_type != "OK":
            failure_rows.append(
                {
                    "qid": item.qid,
                    "failure_type": failure_type,
                    "question": item.question,
                    "expected_route": item.route,
                    "route": decision.route.value,
                    "gold_sections": item.gold_sections,
                    "top5_sections": retrieved_ids[:5],
                    "suggested_fixes": suggested_fixes,
                }
            )

    return report_rows, failure_rows


def summarize(report_rows: List[Dict[str, Any]]) -> Dict[str, float]:
    n = len(report_rows)
    return {
        "route_accuracy": sum(int(r["route_ok"]) for r in report_rows) / n,
        "avg_precision@3": sum(float(r["precision@3"]) for r in report_rows) / n,
        "avg_precision@5": sum(float(r["precision@5"]) for r in report_rows) / n,
        "hit@5_rate": sum(int(r["hit@5"]) for r in report_rows) / n,
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Offline routing/retrieval evaluation (no LLM calls).")
    parser.add_argument("--questions", default=str(Path("eval") / "eval_questions.jsonl"))
    parser.add_argument("--out-dir", default="eval")
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging(settings.log_level)

    index = build_manual_index(settings.manual_path)
    items = load_eval_jsonl(Path(args.questions))
    report_rows, failure_rows = evaluate(
        index, items, top_k=settings.manual_top_k, weak_score=settings.weak_score
    )

    out_dir = Path(args.out_dir)
    report_csv = out_dir / "report.csv"
    failures_jsonl = out_dir / "failures.jsonl"

    # write report.csv
    out_dir.mkdir(parents=True, exist_ok=True)
    with open(report_csv, "w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(report_rows[0].keys()))
        w.writeheader()
        w.writerows(report_rows)

    # write failures.jsonl
    with open(failures_jsonl, "w", encoding="utf-8") as f:
        for row in failure_rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")

    summary = summarize(report_rows)
    print("Wrote:", report_csv)
    print("Wrote:", failures_jsonl)
    print(f"Route accuracy  = {summary['route_accuracy']:.4f}")
    print(f"Avg precision@3 = {summary['avg_precision@3']:.4f}")
    print(f"Avg precision@5 = {summary['avg_precision@5']:.4f}")
    print(f"Hit@5 rate      = {summary['hit@5_rate']:.4f}")


if __name__ == "__main__":
    main()
