"""
Helper functions for URL validation, filename sanitizing, and print setup.

Everything here is pure: no browser, no network. The renderer and the
endpoint layer compose these pieces.
"""

import math
import re
from typing import Any, Iterable, Optional
from urllib.parse import quote, urlparse

from .errors import InvalidInputError

DEFAULT_FILENAME = "document"
MAX_FILENAME_LENGTH = 120

MIN_SCALE = 0.1
MAX_SCALE = 2.0
DEFAULT_SCALE = 1.0

MAX_MAIN_TEXT_LENGTH = 12000

# Paper sizes understood by Chromium's print-to-PDF
PAGE_FORMATS = (
    "Letter", "Legal", "Tabloid", "Ledger",
    "A0", "A1", "A2", "A3", "A4", "A5", "A6",
)

PDF_MARGINS = {"top": "12mm", "right": "12mm", "bottom": "16mm", "left": "12mm"}

ACCEPT_LANGUAGE = "en-US,en;q=0.9"

# Ordered candidates for the element holding the page's main text
MAIN_TEXT_SELECTORS = (
    "article",
    "main",
    "section",
    'div[role="main"]',
    "#content",
    ".content",
    ".post",
    ".article",
)

# Injected before printing: exact colors, no split headers/media,
# and no banners, dialogs, or cookie/subscribe prompts.
PRINT_STYLESHEET = """
* { print-color-adjust: exact; -webkit-print-color-adjust: exact; }
header, nav, aside, iframe, video { page-break-inside: avoid; }
[role="banner"], [role="navigation"], [role="dialog"], [role="alert"],
.cookie, .consent, .subscribe, .signup {
  display: none !important;
}
a[href^="#"]::after, a[href^="javascript:"]::after { content: ""; }
"""

# Runs in the page. Returns the innerText of the first match for each
# selector, plus the body text as a fallback.
EXTRACT_TEXT_SCRIPT = """
(selectors) => {
  const candidates = selectors.map((selector) => {
    const el = document.querySelector(selector);
    return el ? (el.innerText || '') : '';
  });
  const body = document.body ? (document.body.innerText || '') : '';
  return { candidates, body };
}
"""

_RESERVED_CHARS = re.compile(r'[\\/:*?"<>|]+')
# Control characters (newlines, tabs) are illegal in HTTP header values
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]+")


def is_valid_http_url(value: Any) -> bool:
    """
    Check that a value is an absolute http:// or https:// URL.

    Never raises; anything unparseable is simply not a valid URL.

    Example:
        >>> is_valid_http_url("https://example.com/post")
        True
        >>> is_valid_http_url("ftp://example.com")
        False
    """
    if not isinstance(value, str):
        return False

    candidate = value.strip()
    try:
        parsed = urlparse(candidate)
        # Accessing .port validates the port component
        parsed.port
    except ValueError:
        return False

    if parsed.scheme not in ("http", "https"):
        return False
    if not parsed.hostname:
        return False
    if any(ch.isspace() for ch in parsed.netloc):
        return False
    return True


def require_http_url(value: Any) -> str:
    """
    Return the URL stripped of surrounding whitespace, or raise.

    Raises:
        InvalidInputError: If the value is not an absolute HTTP(S) URL
    """
    if not is_valid_http_url(value):
        raise InvalidInputError("Invalid URL")
    return value.strip()


def sanitize_filename(name: Optional[str], max_len: int = MAX_FILENAME_LENGTH) -> str:
    """
    Sanitize text for use as a filename.

    Runs of the reserved characters ``\\ / : * ? " < > |`` collapse to a
    single hyphen and runs of control characters become a space;
    whitespace is trimmed and the result truncated.
    Spaces and other characters pass through untouched.

    Args:
        name: Raw title text (may be empty or None)
        max_len: Maximum length of the result

    Returns:
        Sanitized name, or "document" when nothing usable remains

    Example:
        >>> sanitize_filename('Q&A: "What/Why"')
        'Q&A- -What-Why-'
    """
    cleaned = _CONTROL_CHARS.sub(" ", name or DEFAULT_FILENAME)
    cleaned = _RESERVED_CHARS.sub("-", cleaned).strip()
    # Truncation can expose trailing whitespace; strip again
    cleaned = cleaned[:max_len].strip()
    # Nothing but hyphens left means the name was all reserved characters
    if not cleaned.strip("-").strip():
        cleaned = DEFAULT_FILENAME
    return cleaned[:max_len]


def clamp_scale(value: Any) -> float:
    """
    Coerce a print scale into Chromium's accepted range [0.1, 2.0].

    Non-numeric, zero, and NaN values fall back to 1.0 first.
    """
    try:
        scale = float(value)
    except (TypeError, ValueError):
        scale = DEFAULT_SCALE

    if not scale or math.isnan(scale):
        scale = DEFAULT_SCALE

    return max(MIN_SCALE, min(MAX_SCALE, scale))


def normalize_page_format(value: str) -> str:
    """
    Map a page-size name onto its canonical spelling ("a4" -> "A4").

    Raises:
        ValueError: If the name is not a known paper size
    """
    lookup = {fmt.lower(): fmt for fmt in PAGE_FORMATS}
    canonical = lookup.get(str(value).strip().lower())
    if canonical is None:
        raise ValueError(
            f"format must be one of: {', '.join(PAGE_FORMATS)}"
        )
    return canonical


def select_main_text(
    candidates: Iterable[Optional[str]],
    fallback: Optional[str] = "",
    limit: int = MAX_MAIN_TEXT_LENGTH,
) -> str:
    """
    Pick the longest candidate text, falling back to the whole body.

    Candidates are in selector order; on equal length the earlier one wins.

    Args:
        candidates: innerText per selector (empty when nothing matched)
        fallback: Full document text, used when every candidate is empty
        limit: Maximum length of the returned text

    Returns:
        Best-guess main text, truncated to ``limit`` characters
    """
    best = ""
    for text in candidates:
        if text and len(text) > len(best):
            best = text

    if not best:
        best = fallback or ""

    return best[:limit]


def content_disposition(filename: str) -> str:
    """
    Build an attachment Content-Disposition header value.

    HTTP headers are latin-1, so non-ASCII names get an ASCII fallback
    plus an RFC 5987 ``filename*`` parameter.
    """
    try:
        filename.encode("ascii")
    except UnicodeEncodeError:
        fallback = filename.encode("ascii", "ignore").decode("ascii").strip()
        if not fallback or fallback == ".pdf":
            fallback = f"{DEFAULT_FILENAME}.pdf"
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
    return f'attachment; filename="{filename}"'
