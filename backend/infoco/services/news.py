from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, List, Optional

from infoco.core.errors import ExternalServiceError
from infoco.core.settings import settings
from infoco.services.gemini import GeminiClient

logger = logging.getLogger(__name__)

NEWS_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=7200"

NEWS_PROMPT = """Você é um agregador de notícias para um sistema de gestão. Sua tarefa é encontrar as notícias mais recentes e relevantes usando a Busca Google com base nas seguintes palavras-chave: 'licitações e contratos', 'AGU', 'TCU', 'TCM'.
Formate a saída como um único objeto JSON. O objeto deve conter uma chave chamada 'articles', que é um array de notícias. Não inclua nenhum texto, explicação ou formatação de markdown antes ou depois do objeto JSON.
Cada item no array 'articles' deve ser um objeto JSON com as seguintes chaves:
- 'title': O título completo do artigo.
- 'summary': Um resumo conciso de uma frase do artigo.
- 'url': A URL direta para o artigo.
- 'sourceTitle': O título do site de origem (ex: 'G1', 'Consultor Jurídico').
Retorne entre 5 e 7 artigos. A resposta deve ser apenas o objeto JSON."""

_FENCED_JSON = re.compile(r"```json\s*\n(.*?)\n\s*```", re.DOTALL)


def _normalize_article(raw: Dict[str, Any]) -> Dict[str, str]:
    return {
        "title": str(raw.get("title") or ""),
        "summary": str(raw.get("summary") or ""),
        "url": str(raw.get("url") or ""),
        "source_title": str(raw.get("sourceTitle") or raw.get("source_title") or ""),
    }


def parse_articles(text: str) -> List[Dict[str, str]]:
    """Read the article list from model output, falling back to a fenced json block."""
    text = (text or "").strip()
    try:
        payload = json.loads(text)
    except ValueError:
        logger.warning("news_response_not_plain_json")
        match = _FENCED_JSON.search(text)
        if match is None:
            raise ExternalServiceError("A resposta da IA não estava em um formato JSON reconhecível.")
        try:
            payload = json.loads(match.group(1))
        except ValueError as exc:
            raise ExternalServiceError(
                "A resposta da IA não estava em um formato JSON válido, mesmo após a extração."
            ) from exc

    articles = payload.get("articles") if isinstance(payload, dict) else None
    return [_normalize_article(a) for a in (articles or []) if isinstance(a, dict)]


class NewsService:
    def __init__(self, client: Optional[GeminiClient] = None, cache_seconds: Optional[int] = None) -> None:
        self.client = client or GeminiClient()
        self.cache_ttl_seconds = max(int(cache_seconds if cache_seconds is not None else settings.news_cache_seconds), 0)
        self._cache: tuple[float, Dict[str, Any]] | None = None

    def _cache_hit(self) -> Optional[Dict[str, Any]]:
        if self._cache is None:
            return None
        expires_at, payload = self._cache
        if expires_at <= time.monotonic():
            return None
        return payload

    def fetch(self, *, force_refresh: bool = False) -> Dict[str, Any]:
        if not force_refresh:
            cached = self._cache_hit()
            if cached is not None:
                return cached

        result = self.client.generate(NEWS_PROMPT, tools=[{"google_search": {}}], temperature=0.2)
        payload = {"articles": parse_articles(result.text), "sources": result.grounding_chunks}
        if self.cache_ttl_seconds:
            self._cache = (time.monotonic() + self.cache_ttl_seconds, payload)
        logger.info("news_fetched articles=%s sources=%s", len(payload["articles"]), len(payload["sources"]))
        return payload

    def clear(self) -> None:
        self._cache = None


_news_service: Optional[NewsService] = None


def get_news_service() -> NewsService:
    global _news_service
    if _news_service is None:
        _news_service = NewsService()
    return _news_service
