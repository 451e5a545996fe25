import pytest

from copiloto.answer import answer_question, build_context, build_engine
from copiloto.config import Settings
from copiloto.errors import CollaboratorError, InputError
from copiloto.hits import GasHit, ManualHit
from copiloto.router import Route

TRANSLATOR_PREFIX = "You are a strict professional translator."


class FakeChat:
    """Answers generation calls with a fixed reply and translations from a dict."""

    def __init__(self, reply="Puedes conducir 9 horas al día.", translations=None):
        self.reply = reply
        self.translations = translations or {}
        self.calls = []

    def __call__(self, messages, temperature=0.0):
        self.calls.append((messages, temperature))
        if messages[0]["content"].startswith(TRANSLATOR_PREFIX):
            return self.translations.get(messages[1]["content"], "")
        return self.reply


def _engine(chat=None, **overrides):
    return build_engine(Settings(**overrides), chat=chat or FakeChat())


def test_empty_question_raises_before_any_call():
    chat = FakeChat()
    engine = _engine(chat)
    for q in [None, "", "   \n"]:
        with pytest.raises(InputError):
            answer_question(engine, q)
    assert chat.calls == []


def test_fuel_question_lists_only_matching_country():
    chat = FakeChat()
    out = answer_question(_engine(chat), "¿Dónde puedo repostar en Francia?")
    assert out.route == Route.GASOLINERAS
    assert out.lang == "es"
    assert len(out.hits) == 7
    assert all(isinstance(h, GasHit) and h.station.country == "Francia" for h in out.hits)
    assert "País: FRANCIA" in out.answer
    assert "FR-01" in out.answer
    assert chat.calls == []


def test_fuel_display_is_capped():
    out = answer_question(_engine(gas_display_cap=3), "¿Dónde puedo repostar en Francia?")
    assert len(out.hits) == 3
    assert "Mostrando 3 de 7." in out.answer


def test_fuel_free_text_falls_back_to_scoring():
    out = answer_question(_engine(), "gasolinera oradea smart", debug=True)
    assert out.route == Route.GASOLINERAS
    assert out.debug["strategy"] == "search"
    assert [h.station.id for h in out.hits] == ["RO-02"]
    assert out.hits[0].score is not None


def test_fuel_no_match_gives_hint():
    out = answer_question(_engine(), "gasolineras xyzzy")
    assert out.hits == []
    assert out.answer.startswith("No hay gasolineras que coincidan")


def test_mixed_question_asks_to_clarify():
    chat = FakeChat()
    out = answer_question(_engine(chat), "tacógrafo y repostar")
    assert out.route == Route.AMBIGUOUS
    assert out.hits == []
    assert out.answer.startswith("Tu pregunta mezcla")
    assert chat.calls == []


def test_manual_without_evidence_says_not_found():
    chat = FakeChat()
    out = answer_question(_engine(chat), "xyzzy qwerty")
    assert out.route == Route.MANUAL
    assert out.hits == []
    assert out.answer == "No encuentro esa información en el manual."
    assert chat.calls == []


def test_manual_answer_uses_retrieved_context():
    chat = FakeChat()
    out = answer_question(_engine(chat), "¿Cuántas horas puedo conducir?")
    assert out.route == Route.MANUAL
    assert out.answer == "Puedes conducir 9 horas al día."
    assert out.hits and all(isinstance(h, ManualHit) for h in out.hits)
    assert out.debug is None

    (messages, temperature), = chat.calls
    assert temperature == 0.2
    assert "Español" in messages[0]["content"]
    assert "FUENTE 1" in messages[1]["content"]
    assert "CONTEXTO" in messages[1]["content"]


def test_portuguese_question_is_translated_both_ways():
    chat = FakeChat(
        translations={
            "Quantas horas posso conduzir?": "¿Cuántas horas puedo conducir?",
            "Puedes conducir 9 horas al día.": "Podes conduzir 9 horas por dia.",
        }
    )
    out = answer_question(_engine(chat), "Quantas horas posso conduzir?", forced_lang="pt", debug=True)
    assert out.lang == "pt"
    assert out.route == Route.MANUAL
    assert out.answer == "Podes conduzir 9 horas por dia."
    assert out.debug["search_query"] == "¿Cuántas horas puedo conducir?"
    assert len(chat.calls) == 3


def test_arabic_answer_is_not_translated_again():
    chat = FakeChat(
        reply="يمكنك القيادة 9 ساعات",
        translations={"ما هي ساعات القيادة؟": "¿Cuántas horas puedo conducir?"},
    )
    out = answer_question(_engine(chat), "ما هي ساعات القيادة؟")
    assert out.lang == "ar"
    assert out.answer == "يمكنك القيادة 9 ساعات"
    assert len(chat.calls) == 2


def test_empty_generation_is_a_collaborator_error():
    with pytest.raises(CollaboratorError):
        answer_question(_engine(FakeChat(reply="")), "¿Cuántas horas puedo conducir?")


def test_build_context_format():
    hits = [
        ManualHit("01", "Tacógrafo", "01.01 Uso", "Inserta la tarjeta.", 12),
        ManualHit("02", "Documentación", "02.01 Documentos", "Lleva el CMR.", 8),
    ]
    ctx = build_context(hits)
    assert ctx.startswith("FUENTE 1\nMódulo 01: Tacógrafo\nSección: 01.01 Uso\nContenido:\nInserta la tarjeta.")
    assert "\n\n---\n\nFUENTE 2\n" in ctx
