"""Damage scoring of two builds and the verdict between them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .numeric import finite_or_zero
from .stats import Stats

WINNER_A = "A"
WINNER_B = "B"
TIE = "TIE"


@dataclass(frozen=True, slots=True)
class DamageScore:
    """Weighted damage of one build, per axis and summed."""

    per_axis: Stats
    score: float

    def to_dict(self) -> Dict[str, object]:
        return {"per_axis": self.per_axis.to_dict(), "score": self.score}


@dataclass(frozen=True, slots=True)
class Comparison:
    a: DamageScore
    b: DamageScore
    winner: str


def score(total: Stats, weights: Stats) -> DamageScore:
    """Apply percentage ``weights`` to ``total``.

    ``per_axis[a] = total[a] * weights[a] / 100`` and the score is the sum of
    the four contributions. Overflowing terms and sums count as zero.
    """

    per_axis = Stats(
        hp=finite_or_zero(total.hp * weights.hp / 100),
        attack=finite_or_zero(total.attack * weights.attack / 100),
        defense=finite_or_zero(total.defense * weights.defense / 100),
        speed=finite_or_zero(total.speed * weights.speed / 100),
    )
    return DamageScore(per_axis=per_axis, score=finite_or_zero(per_axis.total()))


def decide_winner(score_a: float, score_b: float) -> str:
    # Exact float equality: inputs are low precision user decimals.
    if score_a > score_b:
        return WINNER_A
    if score_a < score_b:
        return WINNER_B
    return TIE


def compare(total_a: Stats, weights_a: Stats, total_b: Stats, weights_b: Stats) -> Comparison:
    """Score both builds off their own totals and pick the winner."""

    result_a = score(total_a, weights_a)
    result_b = score(total_b, weights_b)
    return Comparison(a=result_a, b=result_b, winner=decide_winner(result_a.score, result_b.score))


__all__ = [
    "Comparison",
    "DamageScore",
    "TIE",
    "WINNER_A",
    "WINNER_B",
    "compare",
    "decide_winner",
    "score",
]
