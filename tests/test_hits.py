from copiloto.gas_index import GasStation, GasStatus
from copiloto.hits import GasHit, ManualHit, hits_to_payload


def test_payload_per_hit_kind():
    station = GasStation(
        id="ES-01", country="España", network="SOLRED", name="Repsol", status=GasStatus.OK, instructions="LLENAR"
    )
    manual = ManualHit("01", "Tacógrafo", "01.01 Uso", "Inserta la tarjeta.", 12)
    assert manual.id == "01::01.01 Uso"
    assert manual.kind == "manual"

    payload = hits_to_payload([manual, GasHit(station, score=9), GasHit(station)])
    assert payload[0] == {"id": "01::01.01 Uso", "score": 12, "metadata": {"title": "Tacógrafo", "section": "01.01 Uso"}}
    assert payload[1]["status"] == "ok"
    assert payload[1]["score"] == 9
    assert "score" not in payload[2]
    assert payload[2]["id"] == "ES-01"
