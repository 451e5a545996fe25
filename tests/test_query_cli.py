import json
import logging

import pytest

from copiloto import query_cli


@pytest.fixture(autouse=True)
def _detach_log_handler():
    # main() binds a handler to the captured stderr of the running test
    yield
    logger = logging.getLogger("copiloto")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True


def test_route_only_prints_decision(capsys):
    code = query_cli.main(["--route-only", "--query", "quiero respostar"])
    assert code == 0

    out = json.loads(capsys.readouterr().out)
    assert out["route"] == "gasolineras"
    assert out["matched"] == [{"alias": "respostar", "canon": "repostar"}]


def test_route_only_requires_query():
    with pytest.raises(SystemExit):
        query_cli.main(["--route-only"])


def test_single_fuel_query_needs_no_llm(capsys):
    code = query_cli.main(["--query", "¿Dónde puedo repostar en Francia?"])
    assert code == 0

    out = capsys.readouterr().out
    assert "Route: gasolineras | Lang: es" in out
    assert "FR-01" in out


def test_empty_query_is_input_error(capsys):
    assert query_cli.main(["--query", "   "]) == 2
    assert "Input error" in capsys.readouterr().out
