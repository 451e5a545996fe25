import pytest

from copiloto.config import DATA_DIR, Settings, SettingsError, load_settings


def test_defaults_without_environment():
    s = load_settings({})
    assert s == Settings()
    assert s.manual_top_k == 6
    assert s.weak_score == 10
    assert s.translation_ttl_seconds == 6 * 60 * 60
    assert s.manual_path == str(DATA_DIR / "manual.json")
    assert s.llm_api_key is None


def test_environment_overrides():
    s = load_settings(
        {
            "LLM_URL": "http://localhost:11434/v1/",
            "OPENAI_API_KEY": "sk-test",
            "MANUAL_TOP_K": "3",
            "GAS_DISPLAY_CAP": " 20 ",
            "LOG_LEVEL": "debug",
        }
    )
    assert s.llm_url == "http://localhost:11434/v1"
    assert s.llm_api_key == "sk-test"
    assert s.manual_top_k == 3
    assert s.gas_display_cap == 20
    assert s.log_level == "DEBUG"

    assert load_settings({"LLM_API_KEY": "a", "OPENAI_API_KEY": "b"}).llm_api_key == "a"


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_invalid_numbers_raise(value):
    with pytest.raises(SettingsError):
        load_settings({"WEAK_SCORE": value})
