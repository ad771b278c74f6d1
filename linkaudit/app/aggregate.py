"""
aggregate.py

Combines the six dimension scores into one overall 0-100 trust score and a
verdict. Emotion, framing and bias are risk dimensions and are inverted
(100 - value) before weighting; origin, reputation and tracking are used
as they are.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Union

from linkaudit.config import Mode
from .heuristics import Band, clamp, pick_label

ORIGIN_BASE = 80
ORIGIN_PER_HOP = 10
ORIGIN_SHORTLINK = 15


@dataclass(frozen=True)
class Weights:
    origin: float
    emotion: float
    framing: float
    bias: float
    reputation: float
    tracking: float


WEIGHTS: Dict[Mode, Weights] = {
    Mode.LIGHT: Weights(origin=0.20, emotion=0.20, framing=0.15, bias=0.15, reputation=0.20, tracking=0.10),
    Mode.FULL: Weights(origin=0.18, emotion=0.18, framing=0.16, bias=0.16, reputation=0.18, tracking=0.14),
}

VERDICT_BANDS: List[Band] = [
    (lambda v: v >= 80, "highly trustworthy"),
    (lambda v: v >= 55, "solid"),
    (lambda v: v >= 35, "caution"),
]


@dataclass(frozen=True)
class AggregateResult:
    overall: int
    verdict: str


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def origin_score(chain_length: int, shortlink: bool) -> int:
    """Each simulated hop beyond the first and a shortener both lower confidence in the origin."""
    score = ORIGIN_BASE - ORIGIN_PER_HOP * (chain_length - 1) - (ORIGIN_SHORTLINK if shortlink else 0)
    return clamp(score)


def verdict_for(overall: int) -> str:
    return pick_label(overall, VERDICT_BANDS, "low")


def aggregate(origin: int, emotion: int, framing: int, bias: int, reputation: int, tracking: int,
              mode: Union[Mode, str] = Mode.LIGHT) -> AggregateResult:
    w = WEIGHTS[Mode(mode)]
    overall = round_half_up(
        origin * w.origin +
        (100 - emotion) * w.emotion +
        (100 - framing) * w.framing +
        (100 - bias) * w.bias +
        reputation * w.reputation +
        tracking * w.tracking
    )
    return AggregateResult(overall, verdict_for(overall))
