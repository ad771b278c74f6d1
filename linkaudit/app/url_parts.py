"""
url_parts.py

Splits a URL string into the parts the signal extractors work on.

Public function:
    decompose(raw: str) -> ParsedUrl

Example:
    >>> decompose("HTTPS://Example.com?a=1&a=2").href
    'https://example.com/?a=1&a=2'
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from linkaudit.errors import InvalidUrl

SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')

# Characters left as they are when the path and query are percent-encoded
PATH_SAFE = "/%:@!$&'()*+,;=[]|^~"
QUERY_SAFE = PATH_SAFE + "?{}`"


@dataclass(frozen=True)
class Param:
    key: str
    value: str


@dataclass(frozen=True)
class ParsedUrl:
    scheme: str
    host: str
    port: Optional[int]
    path: str
    path_segments: Tuple[str, ...]
    query: str
    query_params: Tuple[Param, ...]
    fragment: str
    href: str

    @property
    def netloc(self) -> str:
        return urlsplit(self.href).netloc

    @property
    def origin(self) -> str:
        return f"{self.scheme}://{self.netloc}"

    @property
    def host_labels(self) -> Tuple[str, ...]:
        return tuple(self.host.split('.'))


def _build_netloc(userinfo: str, host: str, port: Optional[int]) -> str:
    netloc = f"[{host}]" if ':' in host else host
    if port is not None:
        netloc = f"{netloc}:{port}"
    if userinfo:
        netloc = f"{userinfo}@{netloc}"
    return netloc


def decompose(raw: str) -> ParsedUrl:
    """
    Parse an absolute URL. Scheme and host are lower-cased, an empty path
    becomes "/", query parameters keep their order and duplicates.

    Raises InvalidUrl when there is no scheme, no host or a broken port.
    """
    url = (raw or "").strip()
    if not SCHEME_RE.match(url):
        raise InvalidUrl(raw, "missing scheme")

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise InvalidUrl(raw, str(e)) from e

    host = (parts.hostname or "").rstrip('.')
    if not host:
        raise InvalidUrl(raw, "missing host")
    if any(ch.isspace() for ch in host):
        raise InvalidUrl(raw, "whitespace in host")

    scheme = parts.scheme.lower()
    userinfo = parts.netloc.rpartition('@')[0] if '@' in parts.netloc else ""
    path = quote(parts.path or '/', safe=PATH_SAFE)
    query = quote(parts.query, safe=QUERY_SAFE)
    fragment = quote(parts.fragment, safe=QUERY_SAFE + "#")
    href = urlunsplit((scheme, _build_netloc(userinfo, host, port), path, query, fragment))

    params = tuple(Param(k, v) for k, v in parse_qsl(query, keep_blank_values=True))
    segments = tuple(s for s in path.split('/') if s)

    return ParsedUrl(
        scheme=scheme,
        host=host,
        port=port,
        path=path,
        path_segments=segments,
        query=query,
        query_params=params,
        fragment=fragment,
        href=href,
    )
