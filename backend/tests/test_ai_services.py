from __future__ import annotations

import json
import time

import httpx
import pytest

from infoco.core.errors import ExternalServiceError
from infoco.core.settings import settings
from infoco.services.analysis import SYSTEM_INSTRUCTION, AnalysisService, context_from_store
from infoco.services.gemini import INVALID_BODY_MESSAGE, INVALID_KEY_MESSAGE, TIMEOUT_MESSAGE, GeminiClient
from infoco.services.news import NewsService, parse_articles
from infoco.store.entities import EntityStore
from infoco.store.state import MemoryStateStore

ARTICLES = {
    "articles": [
        {
            "title": "TCU publica nova orientação sobre licitações",
            "summary": "Resumo da orientação.",
            "url": "https://example.com/tcu",
            "sourceTitle": "Consultor Jurídico",
        }
    ]
}


def _reply(text: str, chunks=None) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "candidates": [
                {
                    "content": {"parts": [{"text": text}]},
                    "groundingMetadata": {"groundingChunks": chunks or []},
                }
            ]
        },
    )


def _client(handler) -> GeminiClient:
    return GeminiClient(
        "test-key",
        base_url="https://ai.test/v1beta",
        model="gemini-test",
        transport=httpx.MockTransport(handler),
    )


def test_generate_posts_prompt_and_reads_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return _reply("Olá")

    result = _client(handler).generate("Quantas tarefas?", system_instruction="Seja breve.", temperature=0.2)

    assert result.text == "Olá"
    assert seen["url"] == "https://ai.test/v1beta/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "Quantas tarefas?"
    assert seen["body"]["systemInstruction"]["parts"][0]["text"] == "Seja breve."
    assert seen["body"]["generationConfig"] == {"temperature": 0.2}


def test_missing_key_is_a_generic_failure(monkeypatch):
    monkeypatch.setattr(settings, "gemini_api_key", None)
    client = GeminiClient(transport=httpx.MockTransport(lambda request: _reply("never")))

    with pytest.raises(ExternalServiceError) as exc:
        client.generate("oi")

    assert exc.value.status_code == 500
    assert "API_KEY" in exc.value.message


def test_rejected_key_maps_to_401():
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "API key not valid. Please pass a valid API key."}})

    with pytest.raises(ExternalServiceError) as exc:
        _client(handler).generate("oi")

    assert exc.value.status_code == 401
    assert exc.value.message == INVALID_KEY_MESSAGE


def test_deadline_maps_to_504():
    def handler(request):
        return httpx.Response(504, json={"error": {"message": "Deadline expired before operation could complete."}})

    with pytest.raises(ExternalServiceError) as exc:
        _client(handler).generate("oi")
    assert exc.value.status_code == 504


def test_transport_timeout_maps_to_504():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(ExternalServiceError) as exc:
        _client(handler).generate("oi")
    assert exc.value.status_code == 504
    assert exc.value.message == TIMEOUT_MESSAGE


def test_other_failures_map_to_500():
    def handler(request):
        return httpx.Response(500, json={"error": {"message": "Internal error encountered."}})

    with pytest.raises(ExternalServiceError) as exc:
        _client(handler).generate("oi")
    assert exc.value.status_code == 500
    assert "Internal error encountered." in exc.value.message


@pytest.mark.parametrize("body", ["<html>gateway</html>", "[1, 2]"])
def test_non_json_success_body_is_reported(body):
    client = _client(lambda request: httpx.Response(200, text=body))

    with pytest.raises(ExternalServiceError) as exc:
        AnalysisService(client).analyze("Oi?", {"employees": []})

    assert exc.value.status_code == 500
    assert exc.value.message == INVALID_BODY_MESSAGE


def test_analysis_sends_question_with_context():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return _reply("  **5** funcionários.  ")

    store = EntityStore(MemoryStateStore())
    answer = AnalysisService(_client(handler)).analyze("Quantos funcionários?", context_from_store(store))

    assert answer == "**5** funcionários."
    prompt = seen["body"]["contents"][0]["parts"][0]["text"]
    assert "Quantos funcionários?" in prompt
    assert "Fernando Luiz" in prompt
    assert "financeData" in prompt
    assert seen["body"]["systemInstruction"]["parts"][0]["text"] == SYSTEM_INSTRUCTION


@pytest.mark.parametrize("user_input, context", [("", {"employees": []}), (None, {"tasks": []}), ("Oi?", None)])
def test_analysis_rejects_missing_input(user_input, context):
    service = AnalysisService(_client(lambda request: _reply("never")))
    with pytest.raises(ExternalServiceError) as exc:
        service.analyze(user_input, context)
    assert exc.value.status_code == 400


@pytest.mark.parametrize("user_input, context", [("Oi?", {}), ("  ", {"tasks": []})])
def test_analysis_accepts_empty_context_and_blank_question(user_input, context):
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return _reply("Nenhum dado disponível.")

    assert AnalysisService(_client(handler)).analyze(user_input, context) == "Nenhum dado disponível."
    assert len(seen) == 1


def test_analysis_empty_answer_is_an_error():
    service = AnalysisService(_client(lambda request: httpx.Response(200, json={"candidates": []})))
    with pytest.raises(ExternalServiceError) as exc:
        service.analyze("Oi?", {"employees": []})
    assert exc.value.status_code == 500


def test_parse_articles_plain_json():
    articles = parse_articles(json.dumps(ARTICLES))
    assert articles == [
        {
            "title": "TCU publica nova orientação sobre licitações",
            "summary": "Resumo da orientação.",
            "url": "https://example.com/tcu",
            "source_title": "Consultor Jurídico",
        }
    ]


def test_parse_articles_from_fenced_block():
    text = "Aqui estão as notícias:\n```json\n" + json.dumps(ARTICLES) + "\n```\nFim."
    assert parse_articles(text)[0]["source_title"] == "Consultor Jurídico"


def test_parse_articles_rejects_prose():
    with pytest.raises(ExternalServiceError) as exc:
        parse_articles("Não encontrei notícias hoje.")
    assert exc.value.status_code == 500


def test_news_feed_is_cached_until_expiry():
    calls = []

    def handler(request):
        calls.append(json.loads(request.content))
        return _reply(json.dumps(ARTICLES), chunks=[{"web": {"uri": "https://example.com", "title": "Example"}}])

    service = NewsService(_client(handler), cache_seconds=3600)

    first = service.fetch()
    second = service.fetch()
    assert len(calls) == 1
    assert second == first
    assert first["sources"][0]["web"]["title"] == "Example"
    assert calls[0]["tools"] == [{"google_search": {}}]

    service._cache = (time.monotonic() - 1, first)
    service.fetch()
    assert len(calls) == 2

    service.fetch(force_refresh=True)
    assert len(calls) == 3


def test_news_without_cache_always_fetches():
    calls = []

    def handler(request):
        calls.append(1)
        return _reply(json.dumps(ARTICLES))

    service = NewsService(_client(handler), cache_seconds=0)
    service.fetch()
    service.fetch()
    assert len(calls) == 2
