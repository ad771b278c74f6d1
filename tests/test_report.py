import json

from linkaudit.app.report import explain, to_dict, to_json


def test_export_shape(analyzer):
    r = analyzer.analyze_sync("http://lowtrustsite.info/promo?aff_id=999&tracking=abc&utm_campaign=aggressive")
    d = to_dict(r)
    assert set(d) == {"url", "mode", "parsed", "scores", "labels", "chain", "suspicious",
                      "titleGuess", "trackedKeys", "textSource"}
    assert d["parsed"]["params"][0] == {"key": "aff_id", "value": "999"}
    assert set(d["scores"]) == {"origin", "emotion", "framing", "bias", "reputation", "tracking", "overall"}
    assert d["labels"]["verdict"] == "caution"
    assert d["trackedKeys"] == ["aff_id", "tracking", "utm_campaign"]
    assert json.loads(to_json(r)) == d


def test_explanations_cover_every_dimension(analyzer):
    r = analyzer.analyze_sync("https://bit.ly/market-crash-insider")
    lines = explain(r)
    assert lines[0].startswith("Overall trust score 46")
    assert any("hides the direct origin" in line for line in lines)
    assert lines[-1] == "Suspicious patterns: Fear/Crash rhetoric."


def test_explanations_mention_fallback(analyzer):
    r = analyzer.analyze_sync("https://trusted.org/research/climate-outlook", "full")
    assert r.text_source == "title-fallback"
    assert "could not be fetched" in explain(r)[-1]
    assert not any(line.startswith("Suspicious patterns") for line in explain(r))
