"""
signals.py

Structural signals read off a decomposed URL: shortlink and HTTPS flags,
tracking parameters, the simulated redirect chain and suspicious patterns.

Everything here is pure and offline. In particular build_redirect_chain does
NOT follow redirects: it estimates how obscured the path to the content is
from the shape of the URL alone, and its hops are synthetic.
"""

import hashlib
from typing import Iterable, List, Tuple
from urllib.parse import quote, unquote

from linkaudit.config import DEFAULT_VOCABULARY, Vocabulary
from .url_parts import Param, ParsedUrl, decompose

MAX_CHAIN_LENGTH = 5
DEEP_PATH_SEGMENTS = 5
MAX_SUBDOMAIN_LABELS = 1
MAX_HYPHEN_PARTS = 4


def is_shortlink(host: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    return host.lower() in vocab.short_hosts


def is_https(parsed: ParsedUrl) -> bool:
    return parsed.scheme == "https"


def extract_tracking_params(params: Iterable[Param], vocab: Vocabulary = DEFAULT_VOCABULARY) -> Tuple[str, ...]:
    """Return the keys of known tracking parameters, in query order, duplicates kept."""
    return tuple(p.key for p in params if p.key.lower() in vocab.track_params)


def _hop_token(href: str) -> str:
    return hashlib.sha256(href.encode("utf-8")).hexdigest()[:8]


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def build_redirect_chain(parsed: ParsedUrl, vocab: Vocabulary = DEFAULT_VOCABULARY) -> Tuple[str, ...]:
    """
    Simulate the redirect path a link probably takes.

    The chain always starts with the link itself and holds at most
    MAX_CHAIN_LENGTH unique entries. Extra hops are derived from the URL:
    shortener hosts expand through a redirector and a tracking hop,
    referral/campaign parameters add a ref-id and a canonical hop, and hosts
    with more than three labels peel their subdomains.
    """
    host = parsed.host
    labels = parsed.host_labels
    chain = [parsed.href]
    token = _hop_token(parsed.href)
    keys = {p.key.lower() for p in parsed.query_params}

    if is_shortlink(host, vocab):
        chain.append(f"https://redirector.{host}/expand?id={token}")
        chain.append(f"https://intermediate.example.com/tracking?url={quote(parsed.href, safe='')}")
        chain.append(f"https://final-destination.{'.'.join(labels[-2:])}/article")
    elif keys & set(vocab.referral_params):
        parent = '/'.join(parsed.path.split('/')[:-1])
        chain.append(f"{parsed.origin}{parsed.path}?_ref_id={token}")
        chain.append(f"{parsed.origin}{parent}/canonical")
    elif len(labels) > 3:
        chain.append(f"http://{'.'.join(labels[1:])}/path")
        chain.append(f"https://www.{'.'.join(labels[-2:])}/final")

    return tuple(_dedupe(chain)[:MAX_CHAIN_LENGTH])


def detect_patterns(parsed: ParsedUrl, vocab: Vocabulary = DEFAULT_VOCABULARY) -> Tuple[str, ...]:
    """
    Run every suspicious-pattern check and return the names of those that
    fired, in check order. An empty tuple means nothing was found.
    """
    href = parsed.href
    lowered = href.lower()
    host = parsed.host
    labels = parsed.host_labels
    path_and_query = (parsed.path + ('?' + parsed.query if parsed.query else '')).lower()
    segments = [s.lower() for s in parsed.path_segments]
    found = []

    # 1) transport
    if not is_https(parsed):
        found.append("Non-HTTPS")

    # 2-5) marketing and rhetoric markers
    if any(m in path_and_query for m in vocab.promo_markers):
        found.append("Affiliate/Promo")
    if "tracking=" in parsed.query.lower():
        found.append("Tracking-Param")
    if any(w in lowered for w in vocab.fear_words):
        found.append("Fear/Crash rhetoric")
    if any(w in lowered for w in vocab.scandal_words):
        found.append("Scandal rhetoric")

    # 6-8) structure
    if len(segments) > DEEP_PATH_SEGMENTS:
        found.append("Deep path structure")
    if len(labels[:-2]) > MAX_SUBDOMAIN_LABELS and not is_shortlink(host, vocab):
        found.append("Excessive subdomains")
    if any(kw in seg for seg in segments for kw in vocab.phishing_keywords):
        found.append("Phishing-suspect path")

    # 9-11) domain and encoding oddities
    tld = labels[-1]
    if tld in vocab.unusual_tlds:
        found.append(f"Unusual TLD: .{tld}")
    if unquote(href) != href:
        found.append("Unusual URL encoding")
    if len(host.split('-')) > MAX_HYPHEN_PARTS:
        found.append("Excessive hyphens in domain")

    return tuple(found)


def host_patterns(host: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> Tuple[str, ...]:
    """Suspicious patterns of the bare host, checked as https://<host>/."""
    netloc = f"[{host}]" if ':' in host else host
    return detect_patterns(decompose(f"https://{netloc}"), vocab)
