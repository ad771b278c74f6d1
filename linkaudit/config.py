# config.py
"""
Runtime settings and static heuristic vocabularies for LinkAudit.

Settings come from the environment (see the LINKAUDIT_* variables below) and
are read once at import. Vocabularies are immutable and passed into the
engine explicitly, so tests can swap them for their own.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Mode(str, Enum):
    LIGHT = "light"
    FULL = "full"


# Environment-driven settings
DEFAULT_MODE = Mode(os.getenv("LINKAUDIT_MODE", "light"))
FETCH_TIMEOUT = float(os.getenv("LINKAUDIT_FETCH_TIMEOUT", "10"))
FETCH_MAX_BYTES = int(os.getenv("LINKAUDIT_FETCH_MAX_BYTES", str(10 * 1024 * 1024)))
FETCH_BACKEND_URL = os.getenv("LINKAUDIT_FETCH_BACKEND_URL") or None
DB_FILE = os.getenv("LINKAUDIT_DB", "linkaudit.db")
HISTORY_LIMIT = int(os.getenv("LINKAUDIT_HISTORY_LIMIT", "20"))
API_KEY = os.getenv("LINKAUDIT_API_KEY", None)
REDIS_URL = os.getenv("REDIS_URL")
LOG_LEVEL = os.getenv("LINKAUDIT_LOG_LEVEL", "INFO").upper()

USER_AGENT = "LinkAudit-Bot/1.0 (+https://example.com/botinfo)"


@dataclass(frozen=True)
class FrameGroup:
    """One branch of the framing cascade: cue words, score and label."""
    label: str
    value: int
    cues: Tuple[str, ...]
    # fact-based framing is not a manipulative frame and is not counted
    # towards the "several frames at once" penalty
    counts_as_frame: bool = True


@dataclass(frozen=True)
class Vocabulary:
    short_hosts: Tuple[str, ...]
    track_params: Tuple[str, ...]
    referral_params: Tuple[str, ...]
    clickbait_words: Tuple[str, ...]
    polarizers: Tuple[str, ...]
    absolutist_words: Tuple[str, ...]
    framing_groups: Tuple[FrameGroup, ...]
    promo_markers: Tuple[str, ...]
    fear_words: Tuple[str, ...]
    scandal_words: Tuple[str, ...]
    phishing_keywords: Tuple[str, ...]
    unusual_tlds: Tuple[str, ...]
    trusted_tlds: Tuple[str, ...]


DEFAULT_VOCABULARY = Vocabulary(
    short_hosts=("t.co", "bit.ly", "goo.gl", "tinyurl.com", "ow.ly", "buff.ly"),
    track_params=(
        "utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content",
        "ref", "ref_src", "aff_id", "tracking",
    ),
    referral_params=("ref", "ref_src", "campaign"),
    clickbait_words=(
        "schockierend", "skandal", "enthüllt", "insider", "sensationell",
        "unglaublich", "alarmierend", "revolutionär", "krass",
        "shocking", "scandal", "revealed", "sensational", "unbelievable",
        "alarming", "revolutionary", "crazy", "must-see",
    ),
    polarizers=(
        "immer", "nie", "jeder", "niemand", "verschwörung", "lüge",
        "corrupt", "betrug", "fake", "woke", "extrem",
    ),
    absolutist_words=("only", "always", "never", "absolutely", "nur", "immer", "nie", "absolut"),
    framing_groups=(
        FrameGroup("us-vs-them", 80, ("against", "versus", "vs", "battle", "fight", "gegen", "kampf", "schlacht")),
        FrameGroup("authority argument", 75, ("revealed", "secret", "proves", "enthüllt", "geheimnis", "beweist")),
        FrameGroup("fear-urgency", 90, ("shock", "alarm", "danger", "warning", "schock", "gefahr", "warnung")),
        FrameGroup("salvation promise", 70, ("saves", "solution", "future", "rettet", "lösung", "zukunft")),
        FrameGroup(
            "fact-based", 30,
            ("experts", "study", "studies", "science", "experten", "studie", "wissenschaft"),
            counts_as_frame=False,
        ),
    ),
    promo_markers=("promo", "aff_id", "affiliate"),
    fear_words=("crash", "panic", "katastrophe", "catastrophe"),
    scandal_words=("scandal", "skandal"),
    phishing_keywords=(
        "login", "verify", "account", "update", "secure-", "secure.",
        "credentials", "password", "bank", "paypal", "appleid",
    ),
    unusual_tlds=("xyz", "top", "link", "click", "vip", "work", "cf", "ga", "ml", "gq", "tk"),
    trusted_tlds=("org", "edu", "gov", "de", "com", "net", "io", "app"),
)

DEMO_LINKS = (
    "https://example.com/news/shocking-report?utm_source=twitter&utm_medium=social&utm_campaign=viral",
    "https://t.co/xyz123?ref_src=twsrc%5Etfw",
    "https://bit.ly/market-crash-insider",
    "https://trusted.org/research/climate-outlook?utm_source=newsletter",
    "http://lowtrustsite.info/promo?aff_id=999&tracking=abc&utm_campaign=aggressive",
    "https://medium.com/@author/nuanced-analysis-on-policy",
)
