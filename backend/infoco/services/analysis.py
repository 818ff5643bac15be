from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from infoco.core.errors import ExternalServiceError
from infoco.services.gemini import GeminiClient
from infoco.store.entities import EntityStore

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """Você é um assistente de análise de dados para um sistema de gestão chamado Infoco.
Sua tarefa é analisar os dados em formato JSON fornecidos no prompt e responder à pergunta do usuário de forma clara, concisa e útil.
Atenha-se estritamente aos dados fornecidos. Os dados contêm três arrays principais: 'employees', 'tasks', e 'financeData'.
- 'employees': Contém informações sobre os funcionários da empresa.
- 'tasks': Contém uma lista de tarefas atribuídas aos funcionários, incluindo status e horas.
- 'financeData': Contém dados financeiros relacionados aos municípios.
Sempre formate sua resposta usando markdown para melhor legibilidade (use **negrito** para destacar termos importantes, *itálico*, e listas de itens com hífens ou asteriscos).
Se a pergunta não puder ser respondida com os dados fornecidos, informe educadamente que a informação não está disponível. Não invente informações.
Seja direto e objetivo na resposta."""

MISSING_INPUT_MESSAGE = "Faltando userInput ou contextData no corpo da requisição"
EMPTY_RESPONSE_MESSAGE = "A resposta do serviço de IA estava vazia."


def context_from_store(store: EntityStore) -> Dict[str, Any]:
    return {
        "employees": store.collection("employees").all(),
        "tasks": store.collection("tasks").all(),
        "financeData": store.collection("finance").all(),
    }


def build_prompt(user_input: str, context: Dict[str, Any]) -> str:
    data = json.dumps(context, indent=2, ensure_ascii=False, default=str)
    return f"**DADOS PARA ANÁLISE (JSON):**\n{data}\n\n---\n\n**PERGUNTA DO USUÁRIO:**\n{user_input}"


class AnalysisService:
    def __init__(self, client: Optional[GeminiClient] = None) -> None:
        self.client = client or GeminiClient()

    def analyze(self, user_input: str, context: Optional[Dict[str, Any]]) -> str:
        if not user_input or context is None:
            raise ExternalServiceError(MISSING_INPUT_MESSAGE, status_code=400)

        result = self.client.generate(build_prompt(user_input, context), system_instruction=SYSTEM_INSTRUCTION)
        text = (result.text or "").strip()
        if not text:
            logger.error("analysis_empty_response")
            raise ExternalServiceError(EMPTY_RESPONSE_MESSAGE)
        return text


def get_analysis_service() -> AnalysisService:
    return AnalysisService()
