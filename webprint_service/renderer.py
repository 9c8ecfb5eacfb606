"""
Page renderer - prints a live web page to PDF with Playwright/Chromium.

Each call launches its own browser and closes it before returning,
whether rendering succeeded or not.
"""

import logging
import time
from typing import Optional

from .config import WebPrintSettings, get_settings
from .errors import RenderError
from .helpers import (
    ACCEPT_LANGUAGE,
    DEFAULT_FILENAME,
    EXTRACT_TEXT_SCRIPT,
    MAIN_TEXT_SELECTORS,
    PDF_MARGINS,
    PRINT_STYLESHEET,
    clamp_scale,
    sanitize_filename,
    select_main_text,
)
from .models import PrintPDFRequest, RenderedDocument
from .title_client import suggest_title

logger = logging.getLogger(__name__)

# Chromium's sandbox is unavailable in most containers. This is a
# deployment constraint, not a security boundary.
CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


def _remaining_ms(deadline: float) -> int:
    """Milliseconds left before a monotonic deadline; raises once it has passed."""
    remaining = int((deadline - time.monotonic()) * 1000)
    if remaining <= 0:
        raise RenderError("navigation timeout")
    return remaining


async def choose_filename_base(
    page_title: str,
    main_text: str,
    url: str,
    use_llm: bool,
    settings: Optional[WebPrintSettings] = None,
) -> str:
    """
    Decide the filename base: the page title, or an LLM suggestion.

    A failed suggestion never fails the render; the page title is kept.
    """
    filename_base = page_title or DEFAULT_FILENAME
    if not use_llm:
        return filename_base

    try:
        llm_title = await suggest_title(main_text or page_title, url, settings=settings)
    except Exception as e:
        logger.warning(f"Title suggestion failed, keeping page title: {e}")
        return filename_base

    if llm_title:
        logger.info(f"Using suggested title: {llm_title!r}")
        return llm_title
    return filename_base


async def render_pdf(
    request: PrintPDFRequest,
    settings: Optional[WebPrintSettings] = None,
) -> RenderedDocument:
    """
    Load a page in headless Chromium and print it to PDF.

    Args:
        request: Validated print request (URL, paper size, scale, flags)
        settings: Settings override (defaults to the cached settings)

    Returns:
        RenderedDocument with the PDF bytes and a sanitized filename

    Raises:
        RenderError: Browser launch, navigation, or PDF generation failed
    """
    settings = settings or get_settings()
    timeout = settings.navigation_timeout_ms

    # Import here to avoid loading Playwright on startup
    from playwright.async_api import Error as PlaywrightError
    from playwright.async_api import TimeoutError as PlaywrightTimeoutError
    from playwright.async_api import async_playwright

    logger.info(f"Starting render for {request.url} (format={request.format}, scale={request.scale})")

    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(
                headless=settings.playwright_headless,
                args=CHROMIUM_ARGS,
            )
        except PlaywrightError as e:
            logger.error(f"Browser launch failed: {e}")
            raise RenderError(f"Browser launch failed: {e}") from e

        try:
            page = await browser.new_page()
            await page.set_extra_http_headers({"Accept-Language": ACCEPT_LANGUAGE})

            # One budget covers the navigation and every load-state wait
            deadline = time.monotonic() + timeout / 1000
            try:
                await page.goto(request.url, wait_until="load", timeout=_remaining_ms(deadline))
                await page.wait_for_load_state("domcontentloaded", timeout=_remaining_ms(deadline))
                await page.wait_for_load_state("networkidle", timeout=_remaining_ms(deadline))
            except PlaywrightTimeoutError as e:
                logger.error(f"Navigation to {request.url} timed out after {timeout}ms")
                raise RenderError("navigation timeout") from e
            except PlaywrightError as e:
                logger.error(f"Navigation to {request.url} failed: {e}")
                raise RenderError(f"Navigation failed: {e}") from e

            await page.add_style_tag(content=PRINT_STYLESHEET)

            page_title = await page.title()
            extracted = await page.evaluate(EXTRACT_TEXT_SCRIPT, list(MAIN_TEXT_SELECTORS)) or {}
            main_text = select_main_text(
                extracted.get("candidates", []),
                extracted.get("body", ""),
            )

            filename_base = await choose_filename_base(
                page_title, main_text, request.url, request.useLLM, settings=settings
            )
            filename = sanitize_filename(filename_base) + ".pdf"

            try:
                pdf_bytes = await page.pdf(
                    format=request.format,
                    landscape=request.landscape,
                    print_background=request.printBackground,
                    scale=clamp_scale(request.scale),
                    margin=PDF_MARGINS,
                )
            except PlaywrightError as e:
                logger.error(f"PDF generation failed for {request.url}: {e}")
                raise RenderError(f"PDF generation failed: {e}") from e

        except RenderError:
            raise
        except Exception as e:
            logger.error(f"Rendering {request.url} failed: {e}")
            raise RenderError(f"Rendering failed: {e}") from e
        finally:
            await browser.close()

    logger.info(f"Rendered {request.url} (title={page_title!r}) -> {filename} ({len(pdf_bytes)} bytes)")
    return RenderedDocument(pdf_bytes=pdf_bytes, filename=filename, page_title=page_title)
