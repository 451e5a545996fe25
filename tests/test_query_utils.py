from copiloto.query_utils import expand_aliases, expand_query_tokens
from copiloto.text import normalize


def test_alias_expansion_adds_canonical_term():
    expanded, matched = expand_aliases(normalize("quiero respostar"))
    assert expanded == "quiero respostar repostar"
    assert {"alias": "respostar", "canon": "repostar"} in matched


def test_alias_expansion_does_not_repeat_present_canon():
    expanded, matched = expand_aliases("respostar repostar")
    assert expanded == "respostar repostar"
    assert matched == [{"alias": "respostar", "canon": "repostar"}]


def test_alias_expansion_multiword_canon_and_whole_words():
    expanded, _ = expand_aliases("taco y trafico")
    assert expanded == "taco y trafico tacografo gestores de pedidos"

    # "gestor" must not match inside "gestores"
    _, matched = expand_aliases("gestores")
    assert matched == []


def test_alias_expansion_custom_table():
    expanded, matched = expand_aliases("llenar el tanque", aliases=[("tanque", "deposito")])
    assert expanded == "llenar el tanque deposito"
    assert matched == [{"alias": "tanque", "canon": "deposito"}]


def test_token_expansion_is_single_pass():
    out = expand_query_tokens(["multado"])
    assert out == [
        "multado", "multa", "multas", "sancion", "sanciones",
        "infraccion", "infracciones", "inmovilizacion",
    ]
    # "multa" was added, not original, so its own rule never fires
    assert "denuncia" not in out


def test_token_expansion_keeps_order_and_dedups():
    rules = [(("horas",), ("tiempos", "horas")), (("tiempos",), ("maximo",))]
    assert expand_query_tokens(["horas", "horas", "conducir"], rules) == ["horas", "conducir", "tiempos"]
