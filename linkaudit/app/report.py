"""
report.py

Turns an AnalysisResult into its exported JSON shape and into short,
human readable explanations (one per trust dimension).
"""

import json
from typing import Any, Dict, List

from .scanner import TEXT_FROM_FALLBACK, AnalysisResult


def to_dict(result: AnalysisResult) -> Dict[str, Any]:
    return {
        "url": result.url,
        "mode": result.mode.value,
        "parsed": {
            "host": result.parsed.host,
            "https": result.parsed.https,
            "shortlink": result.parsed.shortlink,
            "params": [{"key": p.key, "value": p.value} for p in result.parsed.params],
        },
        "scores": {
            "origin": result.scores.origin,
            "emotion": result.scores.emotion,
            "framing": result.scores.framing,
            "bias": result.scores.bias,
            "reputation": result.scores.reputation,
            "tracking": result.scores.tracking,
            "overall": result.scores.overall,
        },
        "labels": {
            "emotion": result.labels.emotion,
            "framing": result.labels.framing,
            "bias": result.labels.bias,
            "reputation": result.labels.reputation,
            "tracking": result.labels.tracking,
            "verdict": result.labels.verdict,
        },
        "chain": list(result.chain),
        "suspicious": list(result.suspicious),
        "titleGuess": result.title_guess,
        "trackedKeys": list(result.tracked_keys),
        "textSource": result.text_source,
    }


def to_json(result: AnalysisResult, indent: int = 2) -> str:
    return json.dumps(to_dict(result), indent=indent, ensure_ascii=False)


def explain(result: AnalysisResult) -> List[str]:
    s, lb = result.scores, result.labels
    hops = len(result.chain)
    lines = [
        f"Overall trust score {s.overall} classifies this link as '{lb.verdict}'.",
        f"Origin ({s.origin}): the link is estimated to pass through {hops} step{'s' if hops != 1 else ''}. "
        + ("A link shortener hides the direct origin." if result.parsed.shortlink else "No link shortener detected."),
        f"Emotional tone ({s.emotion}): {lb.emotion}. High values point to sensational wording or clickbait.",
        f"Framing ({s.framing}): {lb.framing} perspective.",
        f"Bias indicators ({s.bias}): {lb.bias}. Polarizing terms raise this value.",
        f"Domain reputation ({s.reputation}): {lb.reputation}. The URL "
        + ("uses HTTPS." if result.parsed.https else "does not use HTTPS.")
        + " Reputation is estimated offline from the domain shape.",
        f"Tracking ({s.tracking}): {lb.tracking}. "
        + (f"Tracking parameters found: {', '.join(result.tracked_keys)}." if result.tracked_keys
           else "No known tracking parameters found."),
    ]
    if result.suspicious:
        lines.append(f"Suspicious patterns: {', '.join(result.suspicious)}.")
    if result.text_source == TEXT_FROM_FALLBACK:
        lines.append("Page text could not be fetched; text dimensions were scored on the URL-derived title.")
    return lines
