from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from infoco.core.deps import get_current_principal, get_entity_store
from infoco.core.errors import ExternalServiceError
from infoco.core.observability import record_ai_call
from infoco.schemas.ai import AnalyzeRequest, AnalyzeResponse, NewsFeed
from infoco.schemas.user import Principal
from infoco.services.analysis import AnalysisService, context_from_store, get_analysis_service
from infoco.services.news import NEWS_CACHE_CONTROL, NewsService, get_news_service
from infoco.shared.contracts import API_PREFIXES
from infoco.store.entities import EntityStore

router = APIRouter(prefix=API_PREFIXES["ai"], tags=["ai"])
logger = logging.getLogger(__name__)


def _error_response(exc: ExternalServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(
    payload: AnalyzeRequest,
    store: EntityStore = Depends(get_entity_store),
    service: AnalysisService = Depends(get_analysis_service),
    principal: Principal = Depends(get_current_principal),
):
    context = payload.context_data if payload.context_data is not None else context_from_store(store)
    try:
        text = service.analyze(payload.user_input, context)
    except ExternalServiceError as exc:
        record_ai_call("analyze", str(exc.status_code))
        logger.warning("analyze_failed status=%s by=%s", exc.status_code, principal.email)
        return _error_response(exc)
    record_ai_call("analyze", "ok")
    return AnalyzeResponse(response=text)


@router.get("/news", response_model=NewsFeed)
def news(
    service: NewsService = Depends(get_news_service),
    _: Principal = Depends(get_current_principal),
):
    try:
        feed = service.fetch()
    except ExternalServiceError as exc:
        record_ai_call("news", str(exc.status_code))
        return _error_response(exc)
    record_ai_call("news", "ok")
    return JSONResponse(
        content=NewsFeed.model_validate(feed).model_dump(mode="json"),
        headers={"Cache-Control": NEWS_CACHE_CONTROL},
    )
