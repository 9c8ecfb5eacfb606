"""
Pydantic models for the WebPrint service API.

Request field names follow the front-end's JSON (camelCase).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .helpers import DEFAULT_SCALE, clamp_scale, normalize_page_format


class PrintPDFRequest(BaseModel):
    """Web page URL to PDF request."""

    # Optional so a missing URL is reported as an invalid URL (400), not a 422
    url: Optional[str] = Field(None, description="Absolute http(s) URL of the page to print")
    format: str = Field("A4", description="Paper size: Letter, Legal, Tabloid, Ledger, A0-A6")
    scale: float = Field(DEFAULT_SCALE, description="Print scale, clamped to [0.1, 2.0]")
    landscape: bool = Field(False, description="Landscape orientation")
    printBackground: bool = Field(True, description="Print background colors/images")
    useLLM: bool = Field(False, description="Ask the completions provider for a filename")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        return normalize_page_format(v)

    @field_validator("scale", mode="before")
    @classmethod
    def clamp_scale_value(cls, v: Any) -> float:
        """Out-of-range or unparseable scales are clamped, never rejected."""
        return clamp_scale(v)


class SuggestTitleRequest(BaseModel):
    """Request body for a title suggestion."""

    url: Optional[str] = Field(None, description="Absolute http(s) URL of the page")


class SuggestTitleResponse(BaseModel):
    """Suggested (sanitized) title."""

    title: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    timestamp: datetime
    llm_configured: bool


@dataclass
class RenderedDocument:
    """A printed page, held only until the response is sent."""

    pdf_bytes: bytes
    filename: str
    page_title: str = ""
