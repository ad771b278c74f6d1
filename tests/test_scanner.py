import asyncio
import dataclasses
from dataclasses import replace

import pytest

from linkaudit.app.report import to_dict
from linkaudit.app.scanner import Analyzer
from linkaudit.app.url_parts import decompose
from linkaudit.config import DEFAULT_VOCABULARY, DEMO_LINKS, Mode
from linkaudit.errors import ContentFetchFailed, InvalidUrl

TRUSTED = "https://trusted.org/research/climate-outlook?utm_source=newsletter"
LOW_TRUST = "http://lowtrustsite.info/promo?aff_id=999&tracking=abc&utm_campaign=aggressive"
SHORT = "https://bit.ly/market-crash-insider"


def test_trusted_link_light_mode(analyzer):
    r = analyzer.analyze_sync(TRUSTED, "light")
    assert r.parsed.https is True
    assert r.parsed.shortlink is False
    assert r.tracked_keys == ("utm_source",)
    assert r.chain == (decompose(TRUSTED).href,)
    assert r.scores.origin == 80
    assert r.suspicious == ()
    assert r.title_guess == "trusted.org - research climate outlook"
    assert r.text_source == "title"
    assert (r.scores.reputation, r.scores.tracking) == (85, 70)
    assert (r.scores.overall, r.labels.verdict) == (68, "solid")
    assert analyzer.fetcher.calls == []


def test_low_trust_link(analyzer):
    r = analyzer.analyze_sync(LOW_TRUST)
    assert r.parsed.https is False
    assert {"Non-HTTPS", "Affiliate/Promo", "Tracking-Param"} <= set(r.suspicious)
    assert r.scores.reputation == 10
    assert r.scores.tracking == 30
    assert r.tracked_keys == ("aff_id", "tracking", "utm_campaign")
    assert (r.scores.overall, r.labels.verdict) == (49, "caution")


def test_shortlink(analyzer):
    r = analyzer.analyze_sync(SHORT)
    assert r.parsed.shortlink is True
    assert len(r.chain) == 4
    assert r.scores.origin == 35
    assert "Fear/Crash rhetoric" in r.suspicious
    assert r.scores.emotion == 65
    assert (r.scores.overall, r.labels.verdict) == (46, "caution")


def test_full_mode_scores_fetched_page_text(make_fetcher):
    fetcher = make_fetcher(text="SHOCKING scandal!!! Experts are corrupt and always lie.")
    r = Analyzer(fetcher=fetcher).analyze_sync(TRUSTED, Mode.FULL)
    assert fetcher.calls == [decompose(TRUSTED).href]
    assert r.text_source == "page"
    assert r.mode is Mode.FULL
    assert r.scores.emotion == 100
    assert r.labels.emotion == "extreme"


@pytest.mark.parametrize("error", [ContentFetchFailed(TRUSTED, "timeout"), RuntimeError("boom")])
def test_full_mode_falls_back_to_title_when_fetch_fails(make_fetcher, error):
    light = Analyzer(fetcher=make_fetcher()).analyze_sync(TRUSTED, "light")
    full = Analyzer(fetcher=make_fetcher(error=error)).analyze_sync(TRUSTED, "full")
    assert full.text_source == "title-fallback"
    assert full.title_guess == light.title_guess
    assert (full.scores.emotion, full.scores.framing, full.scores.bias) == \
        (light.scores.emotion, light.scores.framing, light.scores.bias)
    assert full.scores.overall == 68


def test_full_mode_falls_back_on_blank_text(make_fetcher):
    r = Analyzer(fetcher=make_fetcher(text="   ")).analyze_sync(TRUSTED, "full")
    assert r.text_source == "title-fallback"


def test_invalid_url_fails_before_fetching(make_fetcher):
    fetcher = make_fetcher(text="unused")
    with pytest.raises(InvalidUrl):
        Analyzer(fetcher=fetcher).analyze_sync("definitely not a url", "full")
    assert fetcher.calls == []


def test_unknown_mode_is_rejected(analyzer):
    with pytest.raises(ValueError):
        analyzer.analyze_sync(TRUSTED, "turbo")


def test_analysis_is_repeatable(make_fetcher):
    a = Analyzer(fetcher=make_fetcher(text="Crazy offer against the odds"))
    first = a.analyze_sync(SHORT, "full")
    second = a.analyze_sync(SHORT, "full")
    assert first == second
    assert to_dict(first) == to_dict(second)


def test_result_is_immutable(analyzer):
    r = analyzer.analyze_sync(TRUSTED)
    with pytest.raises(dataclasses.FrozenInstanceError):
        r.url = "https://other.example"
    with pytest.raises(dataclasses.FrozenInstanceError):
        r.scores.overall = 100


def test_concurrent_analyses_are_independent(analyzer):
    async def run():
        return await asyncio.gather(analyzer.analyze(TRUSTED), analyzer.analyze(SHORT))

    trusted, short = asyncio.run(run())
    assert trusted == analyzer.analyze_sync(TRUSTED)
    assert short == analyzer.analyze_sync(SHORT)


def test_vocabulary_is_injectable(make_fetcher):
    vocab = replace(DEFAULT_VOCABULARY, clickbait_words=("outlook",))
    r = Analyzer(vocabulary=vocab, fetcher=make_fetcher()).analyze_sync(TRUSTED)
    assert r.scores.emotion == 65


@pytest.mark.parametrize("url", DEMO_LINKS)
@pytest.mark.parametrize("mode", ["light", "full"])
def test_demo_links_stay_in_range(analyzer, url, mode):
    r = analyzer.analyze_sync(url, mode)
    for value in dataclasses.astuple(r.scores):
        assert 0 <= value <= 100
    assert 1 <= len(r.chain) <= 5
    assert r.chain[0] == decompose(url).href
