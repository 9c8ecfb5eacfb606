"""
Title suggestions via an OpenAI-compatible chat completions API.

The feature is optional: without OPENAI_API_KEY every call returns None
without touching the network. Provider failures raise UpstreamError and
callers decide whether that is fatal.
"""

import logging
from typing import Optional

import httpx

from .config import WebPrintSettings, get_settings
from .errors import UpstreamError
from .helpers import ACCEPT_LANGUAGE

logger = logging.getLogger(__name__)

MAX_PROMPT_TEXT_LENGTH = 6000

SYSTEM_PROMPT = (
    "You create concise, descriptive document titles (max 8 words), "
    "no punctuation except hyphens."
)

USER_PROMPT_TEMPLATE = (
    "Suggest a PDF filename title for the following web page. "
    "Avoid emojis, quotes, or trailing periods.\n"
    "URL: {url}\n"
    "Content (truncated): {content}"
)

# Browser-like headers so the plain fetch sees the same page a reader would
FETCH_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; WebPrint/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": ACCEPT_LANGUAGE,
}


def build_title_messages(text: str, url: str) -> list:
    """Build the system/user chat messages for a title request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": USER_PROMPT_TEMPLATE.format(
                url=url,
                content=(text or "")[:MAX_PROMPT_TEXT_LENGTH],
            ),
        },
    ]


async def suggest_title(
    text: str,
    url: str,
    settings: Optional[WebPrintSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """
    Ask the completions provider for a short document title.

    Args:
        text: Page text or HTML; only the first 6000 characters are sent
        url: Source URL, included in the prompt
        settings: Settings override (defaults to the cached settings)
        client: Optional shared HTTP client

    Returns:
        Stripped title, or None if the feature is disabled or the
        provider returned no content

    Raises:
        UpstreamError: Provider answered with a non-2xx status or could
            not be reached
    """
    settings = settings or get_settings()
    if not settings.llm_enabled:
        return None

    payload = {
        "model": settings.openai_model,
        "messages": build_title_messages(text, url),
        "temperature": 0.2,
        "max_tokens": 24,
    }
    headers = {
        "Authorization": f"Bearer {settings.openai_api_key}",
        "Content-Type": "application/json",
    }

    try:
        if client is not None:
            response = await client.post(
                settings.completions_url,
                headers=headers,
                json=payload,
                timeout=settings.llm_timeout_seconds,
            )
        else:
            async with httpx.AsyncClient() as http_client:
                response = await http_client.post(
                    settings.completions_url,
                    headers=headers,
                    json=payload,
                    timeout=settings.llm_timeout_seconds,
                )
    except httpx.HTTPError as e:
        logger.error(f"Completions request failed: {e}")
        raise UpstreamError(f"LLM error: {e}") from e

    if not response.is_success:
        logger.error(f"Completions provider error: {response.status_code} - {response.text[:200]}")
        raise UpstreamError(f"LLM error: {response.text}")

    try:
        data = response.json()
    except ValueError as e:
        raise UpstreamError(f"LLM error: invalid JSON response: {e}") from e

    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        return None
    message = choices[0].get("message") or {}
    title = (message.get("content") or "").strip()

    return title or None


async def fetch_page_html(
    url: str,
    settings: Optional[WebPrintSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Fetch a page's raw HTML with a plain GET, following redirects.

    Raises:
        UpstreamError: Non-2xx response or transport failure
    """
    settings = settings or get_settings()

    try:
        if client is not None:
            response = await client.get(
                url,
                headers=FETCH_HEADERS,
                follow_redirects=True,
                timeout=settings.fetch_timeout_seconds,
            )
        else:
            async with httpx.AsyncClient(follow_redirects=True) as http_client:
                response = await http_client.get(
                    url,
                    headers=FETCH_HEADERS,
                    timeout=settings.fetch_timeout_seconds,
                )
    except httpx.HTTPError as e:
        logger.error(f"Failed to fetch {url}: {e}")
        raise UpstreamError(f"Failed to fetch page: {e}") from e

    if not response.is_success:
        logger.error(f"Fetching {url} returned HTTP {response.status_code}")
        raise UpstreamError(f"Failed to fetch page: HTTP {response.status_code}")

    return response.text
