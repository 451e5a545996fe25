import csv
import json
import logging

import pytest

from copiloto import eval as ev
from copiloto.config import DATA_DIR
from copiloto.manual_index import build_manual_index


@pytest.fixture(autouse=True)
def _detach_log_handler():
    yield
    logger = logging.getLogger("copiloto")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True


def _write_items(tmp_path):
    rows = [
        {"qid": "q1", "question": "me han multado, qué hago", "route": "manual",
         "gold_sections": ["03.09 Multas y sanciones"]},
        {"qid": "q2", "question": "¿Dónde puedo repostar en Francia?", "route": "gasolineras"},
        {"qid": "q3", "question": "tacógrafo repostar", "route": "manual"},
    ]
    p = tmp_path / "eval_questions.jsonl"
    with p.open("w", encoding="utf-8") as f:
        for r in rows:
            f.write(json.dumps(r, ensure_ascii=False) + "\n")
    return p


def test_metrics():
    assert ev.precision_at_k(["a", "b", "c"], ["b"], 3) == pytest.approx(1 / 3)
    assert ev.precision_at_k([], ["b"], 3) == 0.0
    assert ev.precision_at_k(["b"], ["b"], 0) == 0.0
    assert ev.hit_at_k(["x", "y", "b"], ["b"], 5) == 1
    assert ev.hit_at_k(["x", "y", "b"], ["b"], 2) == 0


def test_failure_taxonomy():
    assert ev.classify_failure(["a"], ["a"], route_ok=False)[0] == "WRONG_ROUTE"
    assert ev.classify_failure(["a"], [])[0] == "NO_GOLD_LABELS"
    assert ev.classify_failure([], ["a"])[0] == "NO_RETRIEVAL_RESULTS"
    assert ev.classify_failure(["x", "y"], ["a"])[0] == "LOW_CONTEXT_RELEVANCE"
    assert ev.classify_failure(["x", "a"], ["a"])[0] == "CONTEXT_TOO_NOISY"
    assert ev.classify_failure(["a", "x"], ["a"]) == ("OK", [])


def test_load_normalizes_gold_sections(tmp_path):
    items = ev.load_eval_jsonl(_write_items(tmp_path))
    assert [i.qid for i in items] == ["q1", "q2", "q3"]
    assert items[0].gold_sections == ["03 09 multas y sanciones"]
    assert items[1].gold_sections == []


def test_evaluate_on_packaged_manual(tmp_path):
    index = build_manual_index(str(DATA_DIR / "manual.json"))
    report, failures = ev.evaluate(index, ev.load_eval_jsonl(_write_items(tmp_path)))

    assert [r["route_ok"] for r in report] == ["1", "1", "0"]
    assert report[0]["hit@5"] == "1"
    assert [f["qid"] for f in failures] == ["q3"]
    assert failures[0]["failure_type"] == "WRONG_ROUTE"
    assert ev.summarize(report)["route_accuracy"] == pytest.approx(2 / 3)


def test_main_writes_report_and_failures(tmp_path):
    questions = _write_items(tmp_path)
    out_dir = tmp_path / "out"
    ev.main(["--questions", str(questions), "--out-dir", str(out_dir)])

    with open(out_dir / "report.csv", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 3
    lines = (out_dir / "failures.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0])["failure_type"] == "WRONG_ROUTE"
