import pytest
import requests

import copiloto.llm as llm
from copiloto.errors import CollaboratorError


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


def test_chat_completion_returns_stripped_content(monkeypatch):
    seen = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        seen.update(url=url, headers=headers, json=json, timeout=timeout)
        return FakeResponse(body={"choices": [{"message": {"content": "  hola  "}}]})

    monkeypatch.setattr(llm.requests, "post", fake_post)
    out = llm.chat_completion(
        llm.system_user("sys", "user"), 0.2, url="http://llm.local/v1", model="m", api_key="k", timeout=5
    )
    assert out == "hola"
    assert seen["url"] == "http://llm.local/v1/chat/completions"
    assert seen["headers"]["authorization"] == "Bearer k"
    assert seen["json"]["temperature"] == 0.2
    assert seen["json"]["messages"][0] == {"role": "system", "content": "sys"}
    assert seen["timeout"] == 5


def test_non_2xx_raises_with_status(monkeypatch):
    monkeypatch.setattr(llm.requests, "post", lambda *a, **k: FakeResponse(503, text="overloaded"))
    with pytest.raises(CollaboratorError) as exc:
        llm.chat_completion(llm.system_user("s", "u"))
    assert exc.value.status == 503
    assert "overloaded" in exc.value.message


def test_transport_failure_has_no_status(monkeypatch):
    def boom(*a, **k):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(llm.requests, "post", boom)
    with pytest.raises(CollaboratorError) as exc:
        llm.chat_completion(llm.system_user("s", "u"))
    assert exc.value.status is None


def test_malformed_body_raises(monkeypatch):
    monkeypatch.setattr(llm.requests, "post", lambda *a, **k: FakeResponse(body={"choices": []}))
    with pytest.raises(CollaboratorError):
        llm.chat_completion(llm.system_user("s", "u"))

    monkeypatch.setattr(
        llm.requests, "post", lambda *a, **k: FakeResponse(body={"choices": [{"message": {"content": None}}]})
    )
    with pytest.raises(CollaboratorError):
        llm.chat_completion(llm.system_user("s", "u"))
