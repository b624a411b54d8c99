from __future__ import annotations

import json
from typing import Any, List, Optional

import pytest
import requests

from table_translator.errors import TranslationApiError
from table_translator.translation.client import TranslationClient, Translator

API_URL = "http://translate.local/translate"


class _FakeResponse:
    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text


class _FakeSession:
    def __init__(self, response: Optional[_FakeResponse] = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, params=None, timeout=None) -> _FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def _ok(original: List[str], translated: List[str]) -> _FakeResponse:
    return _FakeResponse(200, json.dumps({"original_text": original, "translated_text": translated}))


def test_sends_texts_as_repeated_list_parameters() -> None:
    session = _FakeSession(_ok(["Hello", "World"], ["Bonjour", "Monde"]))
    client = TranslationClient(API_URL, session=session)

    assert client.translate(["Hello", "World"]) == ["Bonjour", "Monde"]
    (call,) = session.calls
    assert call["url"] == API_URL
    assert call["params"] == [("list", "Hello"), ("list", "World")]
    assert call["timeout"] is None


def test_repeated_parameters_encode_on_the_wire() -> None:
    prepared = requests.Request(
        "GET", API_URL + "?lang=fr", params=[("list", "a b"), ("list", "ç")]
    ).prepare()
    assert prepared.url == API_URL + "?lang=fr&list=a+b&list=%C3%A7"


def test_configured_timeout_is_passed_through() -> None:
    session = _FakeSession(_ok(["a"], ["b"]))
    TranslationClient(API_URL, timeout=12.5, session=session).translate(["a"])
    assert session.calls[0]["timeout"] == 12.5


def test_non_200_status_includes_body() -> None:
    session = _FakeSession(_FakeResponse(503, "upstream overloaded"))
    client = TranslationClient(API_URL, session=session)

    with pytest.raises(TranslationApiError, match="non-200 status code: 503, body: upstream overloaded") as info:
        client.translate(["Hello"])
    assert info.value.status_code == 503
    assert info.value.body == "upstream overloaded"


def test_malformed_body_is_an_error() -> None:
    session = _FakeSession(_FakeResponse(200, "<html>oops</html>"))
    with pytest.raises(TranslationApiError, match="error decoding response"):
        TranslationClient(API_URL, session=session).translate(["Hello"])


def test_missing_translated_text_is_an_error() -> None:
    session = _FakeSession(_FakeResponse(200, json.dumps({"original_text": ["Hello"]})))
    with pytest.raises(TranslationApiError):
        TranslationClient(API_URL, session=session).translate(["Hello"])


def test_transport_error_is_wrapped() -> None:
    session = _FakeSession(error=requests.ConnectionError("refused"))
    with pytest.raises(TranslationApiError, match="error making translation request"):
        TranslationClient(API_URL, session=session).translate(["Hello"])


def test_empty_input_makes_no_request() -> None:
    session = _FakeSession()
    assert TranslationClient(API_URL, session=session).translate([]) == []
    assert session.calls == []


def test_context_manager_closes_session() -> None:
    session = _FakeSession()
    with TranslationClient(API_URL, session=session) as client:
        assert isinstance(client, Translator)
    assert session.closed is True
