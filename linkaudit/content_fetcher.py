# content_fetcher.py
"""
Content fetcher: retrieve a page (safe defaults) and reduce it to plain text
for the full-mode scorers.

Primary function:
    fetch_page_text(url: str) -> str      raises ContentFetchFailed

ContentFetcher wraps this for the async analyzer and can delegate to a
remote LinkAudit /fetch-content endpoint instead of fetching directly.
"""

import asyncio
import logging
import re
from typing import Any, Dict, Optional

import requests
from bs4 import BeautifulSoup, UnicodeDammit

from linkaudit import config
from linkaudit.errors import ContentFetchFailed

logger = logging.getLogger("content_fetcher")

# Pages shorter than this that talk about javascript are probably rendered client side
JS_PAGE_MIN_CHARS = 500
JS_HINTS = ("javascript", "please enable js", "loading...")
STRIP_TAGS = ["script", "style", "noscript", "template"]
CHARSET_RE = re.compile(r'charset=["\']?([\w.:-]+)', re.I)


def decode_body(body: bytes, content_type: str = "") -> str:
    """
    Decode a page body. A charset from the Content-Type header wins; without
    one the document's own <meta charset> is used, then UTF-8.
    """
    m = CHARSET_RE.search(content_type or "")
    known = [m.group(1)] if m else []
    dammit = UnicodeDammit(body, known_definite_encodings=known, user_encodings=["utf-8"], is_html=True)
    if dammit.unicode_markup is None:
        return body.decode("utf-8", errors="replace")
    return dammit.unicode_markup


def safe_fetch(url: str, timeout: float = None, max_bytes: int = None) -> Dict[str, Any]:
    """
    Fetch page safely with timeouts and size limit.
    Returns dict: {fetched: bool, status: int, text: str or None, error: str or None}
    """
    timeout = config.FETCH_TIMEOUT if timeout is None else timeout
    max_bytes = config.FETCH_MAX_BYTES if max_bytes is None else max_bytes
    headers = {
        "User-Agent": config.USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }
    try:
        with requests.get(url, headers=headers, timeout=timeout, stream=True) as r:
            size = 0
            chunks = []
            for chunk in r.iter_content(8192):
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    return {"fetched": False, "status": r.status_code, "text": None, "error": "response-too-large"}
                chunks.append(chunk)
            if r.status_code >= 400:
                return {"fetched": False, "status": r.status_code, "text": None, "error": f"HTTP {r.status_code}"}
            text = decode_body(b"".join(chunks), r.headers.get("Content-Type", ""))
            return {"fetched": True, "status": r.status_code, "text": text, "error": None}
    except (requests.RequestException, LookupError) as e:
        logger.debug("safe_fetch error: %s", e)
        return {"fetched": False, "status": None, "text": None, "error": str(e)}


def extract_text(html: str) -> str:
    """Visible body text with scripts/styles removed and whitespace collapsed."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(STRIP_TAGS):
        tag.decompose()
    root = soup.body or soup
    return re.sub(r'\s+', ' ', root.get_text(" ")).strip()


def looks_js_rendered(text: str) -> bool:
    lowered = text.lower()
    return len(text) < JS_PAGE_MIN_CHARS and any(h in lowered for h in JS_HINTS)


def fetch_page_text(url: str, timeout: float = None) -> str:
    """
    Main entry point.
    Returns the page's plain text or raises ContentFetchFailed.
    """
    fetch = safe_fetch(url, timeout=timeout)
    if not fetch["fetched"]:
        raise ContentFetchFailed(url, fetch["error"] or "unknown error")

    text = extract_text(fetch["text"] or "")
    if looks_js_rendered(text):
        raise ContentFetchFailed(url, "page needs JavaScript rendering")
    if not text:
        raise ContentFetchFailed(url, "page has no text content")
    return text


class ContentFetcher:
    """Async page-text source used by the analyzer in full mode."""

    def __init__(self, backend_url: Optional[str] = None, timeout: float = None):
        self.backend_url = (backend_url or config.FETCH_BACKEND_URL or "").rstrip("/") or None
        self.timeout = config.FETCH_TIMEOUT if timeout is None else timeout

    def _fetch_remote(self, url: str) -> str:
        try:
            r = requests.post(f"{self.backend_url}/fetch-content", json={"url": url}, timeout=self.timeout)
        except requests.RequestException as e:
            raise ContentFetchFailed(url, f"backend unreachable: {e}") from e
        if r.status_code != 200:
            raise ContentFetchFailed(url, f"backend returned HTTP {r.status_code}")
        return r.text

    def fetch_sync(self, url: str) -> str:
        if self.backend_url:
            return self._fetch_remote(url)
        return fetch_page_text(url, timeout=self.timeout)

    async def fetch_page_text(self, url: str) -> str:
        return await asyncio.to_thread(self.fetch_sync, url)
