"""
WebPrint Service - FastAPI application.

Provides endpoints for printing a web page to PDF and for suggesting a
document title from page content.
"""

import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, StreamingResponse

from . import __version__
from .config import get_settings, log_config_on_startup
from .errors import InvalidInputError
from .helpers import content_disposition, require_http_url, sanitize_filename
from .models import HealthResponse, PrintPDFRequest, SuggestTitleRequest, SuggestTitleResponse
from .renderer import render_pdf
from .title_client import fetch_page_html, suggest_title

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(
    title="WebPrint Service",
    version=__version__,
    description="Print web pages to PDF using Playwright/Chromium"
)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.on_event("startup")
async def announce_startup():
    log_config_on_startup()


# ============================================================================
# Companion page & health
# ============================================================================

@app.get("/", include_in_schema=False)
async def index():
    """Serve the companion front-end page."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe; also reports whether title suggestions are enabled."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        llm_configured=get_settings().llm_enabled,
    )


# ============================================================================
# API Endpoints
# ============================================================================

@app.post("/api/suggest-title", response_model=SuggestTitleResponse)
async def suggest_title_endpoint(request: SuggestTitleRequest):
    """
    Suggest a filename title for a web page.

    Fetches the raw HTML and asks the completions provider for a title.
    Provider failures are reported as 500, unlike the PDF flow where
    they fall back to the page title.

    Returns:
        {"title": ...}; "document" when no suggestion is available
    """
    try:
        url = require_http_url(request.url)
    except InvalidInputError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        html = await fetch_page_html(url)
        title = await suggest_title(html, url)
    except Exception as e:
        logger.error(f"Title suggestion failed for {url}: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return SuggestTitleResponse(title=sanitize_filename(title) if title else "document")


@app.post("/api/print-pdf")
async def print_pdf(request: PrintPDFRequest):
    """
    Print a web page to PDF.

    Returns:
        StreamingResponse with the PDF as an attachment

    Errors:
        400 (plain text) for an invalid URL, 500 (plain text) when
        rendering fails
    """
    try:
        request.url = require_http_url(request.url)
    except InvalidInputError as e:
        return PlainTextResponse(str(e), status_code=400)

    try:
        document = await render_pdf(request)
    except Exception as e:
        logger.error(f"PDF generation failed for {request.url}: {e}")
        return PlainTextResponse(f"Failed to generate PDF: {e}", status_code=500)

    return StreamingResponse(
        BytesIO(document.pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": content_disposition(document.filename)
        }
    )


def main() -> None:
    """Run the service with uvicorn on the configured host/port."""
    import uvicorn

    logger.info(f"Server listening on http://localhost:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
