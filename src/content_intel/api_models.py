"""Pydantic models for REST API requests and responses."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class APIResponse(BaseModel):
    """Standard API response format."""

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable message")
    data: Optional[Dict[str, Any]] = Field(None, description="Response data if any")


class ArticleIn(BaseModel):
    """A candidate search result. Unknown fields are passed through untouched."""

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = Field(None, description="Article headline")
    excerpt: Optional[str] = Field(None, description="Short teaser text")
    content: Optional[str] = Field(None, description="Article body")


class EnhanceSearchRequest(BaseModel):
    """Request model for reranking search results."""

    query: str = Field(..., description="Raw search query")
    articles: List[ArticleIn] = Field(
        default_factory=list, description="Candidate articles to rerank"
    )
    cache_query: bool = Field(
        True, description="Remember the query for similar-query suggestions"
    )


class TextRequest(BaseModel):
    """Request model for endpoints operating on a single text."""

    text: str = Field(..., description="Text to process")
    max_length: Optional[int] = Field(
        None, ge=4, description="Maximum output length in characters"
    )


class ReadingTimeRequest(BaseModel):
    """Request model for reading-time estimates."""

    text: str = Field(..., description="Text to measure")
    words_per_minute: Optional[int] = Field(None, ge=1, description="Reading speed")


class AnalyzeRequest(BaseModel):
    """Request model for full article analysis."""

    title: str = Field("", description="Article headline")
    content: str = Field(..., description="Article body")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content cannot be empty")
        return v
