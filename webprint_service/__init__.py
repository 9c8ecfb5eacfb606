"""
WebPrint Service - Turns a web page URL into a print-formatted PDF.

Pages are rendered with Playwright/Chromium; an OpenAI-compatible chat
completions API can optionally suggest a cleaner filename for the download.
"""

__version__ = "0.1.0"
