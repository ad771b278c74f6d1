"""
scanner.py
Main orchestration of the link trust analysis.

    result = analyze_url("https://bit.ly/market-crash-insider")
    result.scores.overall, result.labels.verdict

Light mode works from the URL alone. Full mode additionally asks the content
fetcher for the page text; if that fails for any reason the analysis carries
on with the heuristic title and marks the result with
text_source == "title-fallback".
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from linkaudit.config import DEFAULT_VOCABULARY, Mode, Vocabulary
from linkaudit.content_fetcher import ContentFetcher
from .aggregate import aggregate, origin_score
from .heuristics import (
    heuristic_title,
    score_bias,
    score_emotion,
    score_framing,
    score_reputation,
    score_tracking,
)
from .signals import build_redirect_chain, detect_patterns, is_https, is_shortlink
from .url_parts import Param, decompose

logger = logging.getLogger("scanner")

TEXT_FROM_TITLE = "title"
TEXT_FROM_PAGE = "page"
TEXT_FROM_FALLBACK = "title-fallback"


@dataclass(frozen=True)
class ParsedSummary:
    host: str
    https: bool
    shortlink: bool
    params: Tuple[Param, ...]


@dataclass(frozen=True)
class Scores:
    origin: int
    emotion: int
    framing: int
    bias: int
    reputation: int
    tracking: int
    overall: int


@dataclass(frozen=True)
class Labels:
    emotion: str
    framing: str
    bias: str
    reputation: str
    tracking: str
    verdict: str


@dataclass(frozen=True)
class AnalysisResult:
    url: str
    mode: Mode
    parsed: ParsedSummary
    scores: Scores
    labels: Labels
    chain: Tuple[str, ...]
    suspicious: Tuple[str, ...]
    title_guess: str
    tracked_keys: Tuple[str, ...]
    text_source: str


class Analyzer:
    """Runs the extractors and scorers for one URL at a time.

    Holds no per-analysis state, so a single instance can serve concurrent
    analyses of different URLs.
    """

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY, fetcher=None):
        self.vocabulary = vocabulary
        self._fetcher = fetcher

    @property
    def fetcher(self):
        if self._fetcher is None:
            self._fetcher = ContentFetcher()
        return self._fetcher

    async def _text_sample(self, url: str, title: str, mode: Mode) -> Tuple[str, str]:
        if mode is not Mode.FULL:
            return title, TEXT_FROM_TITLE
        try:
            text = await self.fetcher.fetch_page_text(url)
        except Exception as e:
            logger.warning("Content fetch failed for %s, using heuristic title: %s", url, e)
            return title, TEXT_FROM_FALLBACK
        if not text or not text.strip():
            logger.warning("Content fetch for %s returned no text, using heuristic title", url)
            return title, TEXT_FROM_FALLBACK
        return text, TEXT_FROM_PAGE

    async def analyze(self, url: str, mode: Union[Mode, str] = Mode.LIGHT) -> AnalysisResult:
        """
        Analyze one URL. Raises InvalidUrl (before any scoring) when the URL
        cannot be decomposed; no other failure aborts the analysis.
        """
        mode = Mode(mode)
        vocab = self.vocabulary
        logger.debug("Analyzing %s (mode=%s)", url, mode.value)

        # 1. Decompose
        parsed = decompose(url)

        # 2. Structural signals
        shortlink = is_shortlink(parsed.host, vocab)
        https = is_https(parsed)
        suspicious = detect_patterns(parsed, vocab)
        chain = build_redirect_chain(parsed, vocab)

        # 3. Text sample
        title = heuristic_title(parsed)
        text, text_source = await self._text_sample(parsed.href, title, mode)

        # 4-6. Dimension scores
        emotion = score_emotion(text, vocab)
        framing = score_framing(text, vocab)
        bias = score_bias(text, vocab)
        reputation = score_reputation(parsed.host, https, shortlink, vocab)
        tracking = score_tracking(parsed.query_params, vocab)

        # 7-8. Origin and aggregate
        origin = origin_score(len(chain), shortlink)
        agg = aggregate(origin, emotion.value, framing.value, bias.value,
                        reputation.value, tracking.value, mode)
        logger.info("Analyzed %s: overall=%d verdict=%s", parsed.href, agg.overall, agg.verdict)

        return AnalysisResult(
            url=url,
            mode=mode,
            parsed=ParsedSummary(parsed.host, https, shortlink, parsed.query_params),
            scores=Scores(
                origin=origin,
                emotion=emotion.value,
                framing=framing.value,
                bias=bias.value,
                reputation=reputation.value,
                tracking=tracking.value,
                overall=agg.overall,
            ),
            labels=Labels(
                emotion=emotion.label,
                framing=framing.label,
                bias=bias.label,
                reputation=reputation.label,
                tracking=tracking.label,
                verdict=agg.verdict,
            ),
            chain=chain,
            suspicious=suspicious,
            title_guess=title,
            tracked_keys=tracking.tracked,
            text_source=text_source,
        )

    def analyze_sync(self, url: str, mode: Union[Mode, str] = Mode.LIGHT) -> AnalysisResult:
        return asyncio.run(self.analyze(url, mode))


_default_analyzer: Optional[Analyzer] = None


def analyze_url(url: str, mode: Union[Mode, str] = Mode.LIGHT) -> AnalysisResult:
    """Analyze with the default vocabulary and content fetcher (blocking)."""
    global _default_analyzer
    if _default_analyzer is None:
        _default_analyzer = Analyzer()
    return _default_analyzer.analyze_sync(url, mode)
