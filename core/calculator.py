"""End-to-end evaluation of one artifact comparison."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from . import config
from .aggregator import CreatureBaseStats, aggregate, sum_artifact_flats
from .bonuses import ArtifactFlat, LeaderChoice, artifact_flat_from_id
from .comparator import DamageScore, compare
from .numeric import format_stat, format_stats
from .stats import Stats


@dataclass(frozen=True, slots=True)
class BuildDescriptor:
    """One artifact build: its damage weights and flat equipment picks."""

    weights: Stats = field(default_factory=Stats)
    flat_picks: Tuple[ArtifactFlat, ...] = ()

    @classmethod
    def from_mapping(cls, payload: object) -> "BuildDescriptor":
        if not isinstance(payload, Mapping):
            return cls()
        raw_flats = payload.get("flats") or ()
        if isinstance(raw_flats, (str, ArtifactFlat)):
            raw_flats = (raw_flats,)
        elif not isinstance(raw_flats, (list, tuple)):
            raw_flats = ()
        picks = tuple(artifact_flat_from_id(pick) for pick in raw_flats)
        return cls(
            weights=Stats.from_mapping(payload.get("weights")),
            flat_picks=picks[: config.ARTIFACT_FLAT_SLOTS],
        )

    @property
    def flat_equipment_bonus(self) -> Stats:
        return sum_artifact_flats(self.flat_picks)


@dataclass(frozen=True, slots=True)
class ComparisonRequest:
    creature: Optional[CreatureBaseStats]
    leader: LeaderChoice = field(default_factory=LeaderChoice)
    siege_active: bool = False
    flat_user_bonus: Stats = field(default_factory=Stats)
    build_a: BuildDescriptor = field(default_factory=BuildDescriptor)
    build_b: BuildDescriptor = field(default_factory=BuildDescriptor)


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    total_a: Stats
    total_b: Stats
    a: DamageScore
    b: DamageScore
    winner: str

    @property
    def score_a(self) -> float:
        return self.a.score

    @property
    def score_b(self) -> float:
        return self.b.score

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_a": self.total_a.to_dict(),
            "total_b": self.total_b.to_dict(),
            "score_a": self.score_a,
            "score_b": self.score_b,
            "winner": self.winner,
            "damage_a": self.a.per_axis.to_dict(),
            "damage_b": self.b.per_axis.to_dict(),
            "formatted": {
                "total_a": format_stats(self.total_a.to_dict()),
                "total_b": format_stats(self.total_b.to_dict()),
                "score_a": format_stat(self.score_a),
                "score_b": format_stat(self.score_b),
            },
        }


def evaluate(request: ComparisonRequest) -> Optional[ComparisonResult]:
    """Aggregate both builds and compare them.

    Returns ``None`` while no creature has been supplied, so a missing lookup
    is never mistaken for a creature with zero stats.
    """

    if request.creature is None:
        return None

    total_a = aggregate(
        request.creature,
        request.leader,
        request.siege_active,
        request.flat_user_bonus,
        request.build_a.flat_equipment_bonus,
    )
    total_b = aggregate(
        request.creature,
        request.leader,
        request.siege_active,
        request.flat_user_bonus,
        request.build_b.flat_equipment_bonus,
    )
    comparison = compare(total_a, request.build_a.weights, total_b, request.build_b.weights)
    return ComparisonResult(
        total_a=total_a,
        total_b=total_b,
        a=comparison.a,
        b=comparison.b,
        winner=comparison.winner,
    )


def _parse_flag(flag: object) -> bool:
    if isinstance(flag, str):
        return flag.strip().lower() in {"1", "true", "yes", "on"}
    return bool(flag)


def request_from_payload(
    payload: Mapping[str, object],
    creature: Optional[CreatureBaseStats] = None,
) -> ComparisonRequest:
    """Build a :class:`ComparisonRequest` from a loose JSON mapping.

    ``creature`` takes precedence over any inline ``creature``/``monster``
    entry of the payload.
    """

    if creature is None:
        raw_creature = payload.get("creature") or payload.get("monster")
        if isinstance(raw_creature, Mapping):
            creature = CreatureBaseStats.from_mapping(raw_creature)

    return ComparisonRequest(
        creature=creature,
        leader=LeaderChoice.from_mapping(payload.get("leader")),
        siege_active=_parse_flag(payload.get("siege", False)),
        flat_user_bonus=Stats.from_mapping(payload.get("bonus")),
        build_a=BuildDescriptor.from_mapping(payload.get("artifact_a")),
        build_b=BuildDescriptor.from_mapping(payload.get("artifact_b")),
    )


__all__ = [
    "BuildDescriptor",
    "ComparisonRequest",
    "ComparisonResult",
    "evaluate",
    "request_from_payload",
]
