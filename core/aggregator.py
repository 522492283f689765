"""Stat aggregation: base stats plus every bonus source into build totals."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from . import config
from .bonuses import ArtifactFlat, LeaderChoice, artifact_flat_from_id
from .numeric import finite_or_zero, parse_decimal
from .stats import ALL_STATS, Stats, ZERO_STATS, sum_stats


@dataclass(frozen=True, slots=True)
class CreatureBaseStats:
    """Max-level stats of a creature with no bonuses applied."""

    max_hp: float
    max_attack: float
    max_defense: float
    speed: float
    id: Optional[int] = None
    name: str = ""
    element: Optional[str] = None
    awaken_level: Optional[int] = None
    leader_skill: Optional[int] = None

    @classmethod
    def from_swarfarm(cls, payload: Mapping[str, object]) -> "CreatureBaseStats":
        """Build the record from a Swarfarm monster document."""

        raw_id = payload.get("id")
        raw_awaken = payload.get("awaken_level")
        raw_leader = payload.get("leader_skill")
        element = payload.get("element")
        return cls(
            max_hp=parse_decimal(payload.get("max_lvl_hp")),
            max_attack=parse_decimal(payload.get("max_lvl_attack")),
            max_defense=parse_decimal(payload.get("max_lvl_defense")),
            speed=parse_decimal(payload.get("speed")),
            id=None if raw_id is None else int(parse_decimal(raw_id)),
            name=str(payload.get("name") or ""),
            element=None if element is None else str(element),
            awaken_level=None if raw_awaken is None else int(parse_decimal(raw_awaken)),
            leader_skill=_leader_skill_id(raw_leader),
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object]) -> "CreatureBaseStats":
        """Accept either the Swarfarm field names or the local ones."""

        if "max_lvl_hp" in payload:
            return cls.from_swarfarm(payload)
        return cls(
            max_hp=parse_decimal(payload.get("max_hp", payload.get("maxHp"))),
            max_attack=parse_decimal(payload.get("max_attack", payload.get("maxAttack"))),
            max_defense=parse_decimal(payload.get("max_defense", payload.get("maxDefense"))),
            speed=parse_decimal(payload.get("speed")),
            name=str(payload.get("name") or ""),
            element=None if payload.get("element") is None else str(payload.get("element")),
        )

    def as_stats(self) -> Stats:
        return Stats(
            hp=self.max_hp,
            attack=self.max_attack,
            defense=self.max_defense,
            speed=self.speed,
        )

    @property
    def display_name(self) -> str:
        if self.element:
            return f"{self.name} ({self.element})"
        return self.name

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "element": self.element,
            "display_name": self.display_name,
            "awaken_level": self.awaken_level,
            "leader_skill": self.leader_skill,
            "base": self.as_stats().to_dict(),
        }


def _leader_skill_id(raw: object) -> Optional[int]:
    # Swarfarm returns either the id or the embedded leader skill document.
    if raw is None:
        return None
    if isinstance(raw, dict):
        raw = raw.get("id")
        if raw is None:
            return None
    return int(parse_decimal(raw))


def leader_contribution(leader: Optional[LeaderChoice]) -> Stats:
    """Return the leader multiplier vector, non-zero on at most one axis."""

    if leader is None or not leader.is_active:
        return ZERO_STATS
    stat = leader.attribute.stat
    if stat is None:
        return ZERO_STATS
    return Stats(**{stat.value: leader.amount / 100.0})


def sum_artifact_flats(picks: Iterable[ArtifactFlat | str | None]) -> Stats:
    """Sum the flat bonuses of every artifact slot of a build."""

    return sum_stats(
        config.ARTIFACT_FLAT_BONUSES[artifact_flat_from_id(pick)] for pick in picks
    )


def aggregate(
    base: CreatureBaseStats,
    leader: Optional[LeaderChoice] = None,
    siege_active: bool = False,
    flat_user_bonus: Optional[Stats] = None,
    flat_equipment_bonus: Optional[Stats] = None,
) -> Stats:
    """Compute the effective stats of a single build.

    ``total = base * (1 + towers + leader + siege) + flat_user + flat_equipment``
    evaluated independently per axis. Non-finite operands count as zero.
    """

    base_stats = base.as_stats()
    leader_bonus = leader_contribution(leader)
    siege = config.SIEGE_BONUS if siege_active else ZERO_STATS
    user_bonus = flat_user_bonus or ZERO_STATS
    equipment_bonus = flat_equipment_bonus or ZERO_STATS

    totals: Dict[str, float] = {}
    for stat in ALL_STATS:
        multiplier = (
            1.0
            + config.TOWERS.get(stat)
            + finite_or_zero(leader_bonus.get(stat))
            + siege.get(stat)
        )
        totals[stat.value] = finite_or_zero(
            finite_or_zero(base_stats.get(stat)) * multiplier
            + finite_or_zero(user_bonus.get(stat))
            + finite_or_zero(equipment_bonus.get(stat))
        )
    return Stats(**totals)


__all__ = [
    "CreatureBaseStats",
    "aggregate",
    "leader_contribution",
    "sum_artifact_flats",
]
