"""Stat axes and the four-field stat vector used by the comparator."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional

from .numeric import parse_decimal


class Stat(str, Enum):
    """Enumeration of the stat axes a build is evaluated on."""

    HP = "hp"
    ATTACK = "attack"
    DEFENSE = "defense"
    SPEED = "speed"


ALL_STATS: List[Stat] = [Stat.HP, Stat.ATTACK, Stat.DEFENSE, Stat.SPEED]


_STAT_ALIASES: Dict[str, Stat] = {
    "hp": Stat.HP,
    "attack": Stat.ATTACK,
    "atk": Stat.ATTACK,
    "defense": Stat.DEFENSE,
    "def": Stat.DEFENSE,
    "speed": Stat.SPEED,
    "spd": Stat.SPEED,
}


def stat_from_id(identifier: str) -> Stat:
    """Return the axis associated with ``identifier``.

    Both the canonical names and the short UI labels (``atk``, ``def``,
    ``spd``) are accepted regardless of capitalisation. A :class:`KeyError`
    is raised if the identifier is unknown.
    """

    stat = _STAT_ALIASES.get(str(identifier).strip().lower())
    if stat is None:
        raise KeyError(f"Unknown stat: {identifier}")
    return stat


def normalise_stat(value: Stat | str) -> Stat:
    """Coerce ``value`` into a :class:`Stat` instance."""

    if isinstance(value, Stat):
        return value
    return stat_from_id(value)


@dataclass(frozen=True, slots=True)
class Stats:
    """Additive quantity over the four stat axes.

    The same shape carries base stats, flat bonuses, percentage multipliers
    and damage weights.
    """

    hp: float = 0.0
    attack: float = 0.0
    defense: float = 0.0
    speed: float = 0.0

    @classmethod
    def zero(cls) -> "Stats":
        return cls()

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[Stat | str, object]]) -> "Stats":
        """Build a vector from a loose mapping, ignoring unknown keys.

        Every value goes through :func:`parse_decimal`, so text such as
        ``"12,5"`` is accepted and anything unparseable becomes zero.
        """

        values: Dict[str, float] = {}
        if not isinstance(mapping, Mapping):
            return cls()
        for key, raw in mapping.items():
            try:
                stat = normalise_stat(key)
            except KeyError:
                continue
            values[stat.value] = parse_decimal(raw)
        return cls(**values)

    def get(self, stat: Stat | str) -> float:
        return float(getattr(self, normalise_stat(stat).value))

    def to_dict(self) -> Dict[str, float]:
        return {stat.value: self.get(stat) for stat in ALL_STATS}

    def total(self) -> float:
        return self.hp + self.attack + self.defense + self.speed

    def __add__(self, other: object) -> "Stats":
        if not isinstance(other, Stats):
            return NotImplemented
        return Stats(
            hp=self.hp + other.hp,
            attack=self.attack + other.attack,
            defense=self.defense + other.defense,
            speed=self.speed + other.speed,
        )


ZERO_STATS = Stats()


def sum_stats(vectors) -> Stats:
    """Return the per-axis sum of ``vectors`` (zero for an empty iterable)."""

    total = ZERO_STATS
    for vector in vectors:
        total = total + vector
    return total


__all__ = [
    "ALL_STATS",
    "Stat",
    "Stats",
    "ZERO_STATS",
    "normalise_stat",
    "stat_from_id",
    "sum_stats",
]
