from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from infoco.core.errors import ExternalServiceError
from infoco.core.settings import settings

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "A chave da API (API_KEY) não foi encontrada no ambiente '{environment}'. Verifique se a variável "
    "de ambiente 'API_KEY' está configurada e reinicie o serviço."
)
INVALID_KEY_MESSAGE = "A chave da API (API_KEY) fornecida é inválida ou não tem permissão para usar o modelo."
TIMEOUT_MESSAGE = "A solicitação para o serviço de IA demorou muito para responder (timeout). Tente novamente."
INVALID_BODY_MESSAGE = "Erro do serviço de IA: resposta inválida"


@dataclass
class GenerationResult:
    text: str
    grounding_chunks: list[dict[str, Any]] = field(default_factory=list)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"HTTP {response.status_code}"


def classify_failure(message: str) -> ExternalServiceError:
    if "API key not valid" in message:
        return ExternalServiceError(INVALID_KEY_MESSAGE, status_code=401)
    if "deadline" in message.lower():
        return ExternalServiceError(TIMEOUT_MESSAGE, status_code=504)
    return ExternalServiceError(f"Erro do serviço de IA: {message}", status_code=500)


class GeminiClient:
    """Thin wrapper over the ``generateContent`` REST call."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.model = model or settings.gemini_model
        self.timeout_seconds = max(float(timeout_seconds or settings.ai_http_timeout_seconds), 1.0)
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def generate(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        tools: Optional[list[dict[str, Any]]] = None,
        temperature: Optional[float] = None,
    ) -> GenerationResult:
        if not self.enabled:
            logger.error("gemini_api_key_missing environment=%s", settings.environment)
            raise ExternalServiceError(MISSING_KEY_MESSAGE.format(environment=settings.environment))

        body: dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if tools:
            body["tools"] = tools
        if temperature is not None:
            body["generationConfig"] = {"temperature": temperature}

        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = client.post(url, headers={"x-goog-api-key": self.api_key or ""}, json=body)
        except httpx.TimeoutException as exc:
            logger.warning("gemini_request_timeout model=%s", self.model)
            raise ExternalServiceError(TIMEOUT_MESSAGE, status_code=504) from exc
        except httpx.HTTPError as exc:
            logger.warning("gemini_request_failed model=%s error=%s", self.model, exc)
            raise ExternalServiceError(f"Erro do serviço de IA: {exc}") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("gemini_http_error status=%s message=%s", response.status_code, message)
            raise classify_failure(message)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning(
                "gemini_invalid_body status=%s content_type=%s",
                response.status_code,
                response.headers.get("content-type"),
            )
            raise ExternalServiceError(INVALID_BODY_MESSAGE, status_code=500) from exc
        if not isinstance(payload, dict):
            raise ExternalServiceError(INVALID_BODY_MESSAGE, status_code=500)
        candidates = payload.get("candidates") or []
        if not candidates:
            return GenerationResult(text="")
        candidate = candidates[0] or {}
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        chunks = (candidate.get("groundingMetadata") or {}).get("groundingChunks") or []
        return GenerationResult(text=text, grounding_chunks=list(chunks))
