from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_input: str = Field(default="", alias="userInput")
    context_data: Optional[Dict[str, Any]] = Field(default=None, alias="contextData")


class AnalyzeResponse(BaseModel):
    response: str


class NewsArticle(BaseModel):
    title: str
    summary: str
    url: str
    source_title: str


class NewsFeed(BaseModel):
    articles: List[NewsArticle]
    sources: List[Dict[str, Any]] = []
