"""
heuristics.py

Explainable dimension scorers. Each scorer starts from a fixed baseline,
adds or subtracts fixed amounts for keyword and structure matches, clamps to
0..100 and attaches a descriptive label.

Risk dimensions (higher = less trustworthy):
    score_emotion, score_framing, score_bias
Trust dimensions (higher = more trustworthy):
    score_tracking, score_reputation

Labels are informational only; the aggregator reads nothing but `value`.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple
from urllib.parse import unquote

from linkaudit.config import DEFAULT_VOCABULARY, Vocabulary
from .signals import extract_tracking_params, host_patterns
from .url_parts import Param, ParsedUrl

Band = Tuple[Callable[[int], bool], str]

UPPERCASE_RUN_RE = re.compile(r'[A-Z]{3,}')
EXCLAMATION_RE = re.compile(r'!{2,}')
# Vocabulary entries at least this long match inside other words
MIN_INFIX_LEN = 4

# Baselines and weights (0-100 scale)
EMOTION_BASE = 50
EMOTION_CLICKBAIT = 15
EMOTION_POLARIZER = 10
EMOTION_SHOUTING = 10

FRAMING_BASE = 40
FRAMING_DEFAULT_LABEL = "factual"
FRAMING_MULTI_FRAME = 10

BIAS_BASE = 40
BIAS_POLARIZER = 15
BIAS_CLICKBAIT = 5
BIAS_ABSOLUTIST = 10

TRACKING_BASE = 80
TRACKING_PER_PARAM = 15
TRACKING_FULL_UTM = 10
TRACKING_CAMPAIGN = 5
TRACKING_NONE_BONUS = 15
TRACKING_SINGLE_BONUS = 5

REPUTATION_BASE = 60

EMOTION_BANDS: List[Band] = [
    (lambda v: v >= 85, "extreme"),
    (lambda v: v >= 70, "alarming"),
    (lambda v: v >= 55, "euphoric"),
    (lambda v: v <= 25, "very flat"),
    (lambda v: v <= 40, "flat"),
]
BIAS_BANDS: List[Band] = [
    (lambda v: v >= 85, "very strong"),
    (lambda v: v >= 70, "strong"),
    (lambda v: v >= 50, "medium"),
]
TRACKING_BANDS: List[Band] = [
    (lambda v: v >= 80, "minimal"),
    (lambda v: v >= 60, "moderate"),
    (lambda v: v >= 30, "aggressive"),
]
REPUTATION_BANDS: List[Band] = [
    (lambda v: v >= 80, "high"),
    (lambda v: v >= 55, "solid"),
    (lambda v: v >= 35, "low"),
]


@dataclass(frozen=True)
class ScoreResult:
    value: int
    label: str


@dataclass(frozen=True)
class TrackingResult(ScoreResult):
    tracked: Tuple[str, ...] = ()


def clamp(value: float) -> int:
    return int(max(0, min(100, value)))


def pick_label(value: int, bands: Sequence[Band], default: str) -> str:
    """Return the label of the first band whose predicate holds."""
    for predicate, label in bands:
        if predicate(value):
            return label
    return default


def _has_word(text: str, word: str) -> bool:
    # compounds ("finanzskandal", "klimalüge") and url slugs match anywhere;
    # very short entries ("nie", "vs") only at the start of a word
    if len(word) >= MIN_INFIX_LEN:
        return word in text
    return re.search(r'(?<!\w)' + re.escape(word), text) is not None


def count_words(text: str, words: Iterable[str]) -> int:
    """Number of distinct vocabulary entries that occur in text."""
    return sum(1 for w in set(words) if _has_word(text, w))


def _first_value(params: Sequence[Param], key: str) -> str:
    return next((p.value for p in params if p.key == key), "")


def heuristic_title(parsed: ParsedUrl) -> str:
    """
    Guess a page title from the URL alone: host, the last two path segments
    and a campaign/term hint from the query.
    """
    parts = [unquote(s) for s in parsed.path_segments[-2:]]
    title = re.sub(r'[-_]', ' ', ' '.join(parts)).strip()
    hint = _first_value(parsed.query_params, "utm_campaign") or _first_value(parsed.query_params, "utm_term")
    base = f"{parsed.host} - {title or 'content'}"
    return f"{base} ({hint})" if hint else base


def score_emotion(text: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> ScoreResult:
    t = text.lower()
    score = EMOTION_BASE
    score += EMOTION_CLICKBAIT * count_words(t, vocab.clickbait_words)
    score += EMOTION_POLARIZER * count_words(t, vocab.polarizers)
    # shouting is checked on the original casing
    if UPPERCASE_RUN_RE.search(text) or EXCLAMATION_RE.search(text):
        score += EMOTION_SHOUTING
    value = clamp(score)
    return ScoreResult(value, pick_label(value, EMOTION_BANDS, "neutral"))


def score_framing(text: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> ScoreResult:
    t = text.lower()
    matched = [g for g in vocab.framing_groups if any(_has_word(t, cue) for cue in g.cues)]

    if matched:
        value, label = matched[0].value, matched[0].label
    else:
        value, label = FRAMING_BASE, FRAMING_DEFAULT_LABEL

    if sum(1 for g in matched if g.counts_as_frame) > 1:
        value += FRAMING_MULTI_FRAME
    return ScoreResult(clamp(value), label)


def score_bias(text: str, vocab: Vocabulary = DEFAULT_VOCABULARY) -> ScoreResult:
    t = text.lower()
    score = BIAS_BASE
    score += BIAS_POLARIZER * count_words(t, vocab.polarizers)
    score += BIAS_CLICKBAIT * count_words(t, vocab.clickbait_words)
    if any(_has_word(t, w) for w in vocab.absolutist_words):
        score += BIAS_ABSOLUTIST
    value = clamp(score)
    return ScoreResult(value, pick_label(value, BIAS_BANDS, "low"))


def score_tracking(params: Sequence[Param], vocab: Vocabulary = DEFAULT_VOCABULARY) -> TrackingResult:
    tracked = extract_tracking_params(params, vocab)
    keys = {k.lower() for k in tracked}

    score = TRACKING_BASE - TRACKING_PER_PARAM * len(tracked)
    if {"utm_campaign", "utm_source", "utm_medium"} <= keys:
        score -= TRACKING_FULL_UTM
    if any(t in k for k in keys for t in ("utm_campaign", "utm_term", "utm_content")):
        score -= TRACKING_CAMPAIGN
    if not tracked:
        score += TRACKING_NONE_BONUS
    elif len(tracked) == 1:
        score += TRACKING_SINGLE_BONUS

    value = clamp(score)
    return TrackingResult(value, pick_label(value, TRACKING_BANDS, "very aggressive"), tracked)


def score_reputation(host: str, https: bool, shortlink: bool,
                     vocab: Vocabulary = DEFAULT_VOCABULARY) -> ScoreResult:
    """
    Offline stand-in for a domain reputation lookup, built from the TLD,
    transport, shortener use and the shape of the host name.
    """
    host = host.lower()
    tld = host.split('.')[-1]
    score = REPUTATION_BASE
    score += 15 if tld in vocab.trusted_tlds else -20
    score += 10 if https else -30
    if shortlink:
        score -= 25

    if len(host.split('.')) > 3:
        score -= 10
    if len(host.split('-')) > 3:
        score -= 5
    if len(host) > 25:
        score -= 5

    score -= 5 * len(host_patterns(host, vocab))

    value = clamp(score)
    return ScoreResult(value, pick_label(value, REPUTATION_BANDS, "very low"))
