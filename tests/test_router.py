from copiloto.router import Route, route_question


def test_location_plus_fuel_routes_to_stations():
    d = route_question("¿Dónde puedo repostar en Francia?")
    assert d.route == Route.GASOLINERAS
    assert d.normalized == "donde puedo repostar en francia"


def test_both_domains_is_ambiguous():
    assert route_question("tacógrafo repostar").route == Route.AMBIGUOUS


def test_location_override_beats_conflict():
    assert route_question("¿dónde repostar con la tarjeta?").route == Route.GASOLINERAS


def test_manual_question():
    assert route_question("¿Cuántas horas puedo conducir?").route == Route.MANUAL


def test_location_alone_is_not_fuel():
    assert route_question("¿dónde está el tacógrafo?").route == Route.MANUAL


def test_no_signal_defaults_to_manual():
    assert route_question("hola buenos días").route == Route.MANUAL


def test_alias_feeds_routing():
    d = route_question("quiero respostar")
    assert d.route == Route.GASOLINERAS
    assert d.expanded == "quiero respostar repostar"
    assert d.to_dict()["matched"] == [{"alias": "respostar", "canon": "repostar"}]
    assert d.to_dict()["route"] == "gasolineras"
