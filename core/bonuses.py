"""Bonus selections a user can make for a comparison."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional

from .numeric import parse_decimal
from .stats import Stat


class LeaderAttribute(str, Enum):
    """Stat axis boosted by the party leader's skill."""

    NONE = "None"
    HP = "HP"
    ATTACK = "ATK"
    DEFENSE = "DEF"
    SPEED = "SPD"

    @property
    def stat(self) -> Optional[Stat]:
        return _LEADER_STATS.get(self)


_LEADER_STATS: Dict[LeaderAttribute, Stat] = {
    LeaderAttribute.HP: Stat.HP,
    LeaderAttribute.ATTACK: Stat.ATTACK,
    LeaderAttribute.DEFENSE: Stat.DEFENSE,
    LeaderAttribute.SPEED: Stat.SPEED,
}

# UI labels, canonical stat names and the attribute names used by Swarfarm.
_LEADER_LOOKUP: Dict[str, LeaderAttribute] = {
    "": LeaderAttribute.NONE,
    "none": LeaderAttribute.NONE,
    "hp": LeaderAttribute.HP,
    "atk": LeaderAttribute.ATTACK,
    "attack": LeaderAttribute.ATTACK,
    "attack power": LeaderAttribute.ATTACK,
    "def": LeaderAttribute.DEFENSE,
    "defense": LeaderAttribute.DEFENSE,
    "spd": LeaderAttribute.SPEED,
    "speed": LeaderAttribute.SPEED,
    "attack speed": LeaderAttribute.SPEED,
}


def leader_attribute_from_id(identifier: object) -> LeaderAttribute:
    """Resolve ``identifier`` into a :class:`LeaderAttribute`.

    Unknown identifiers resolve to ``NONE``: a leader the calculator does
    not understand contributes nothing instead of failing the comparison.
    """

    if isinstance(identifier, LeaderAttribute):
        return identifier
    if identifier is None:
        return LeaderAttribute.NONE
    return _LEADER_LOOKUP.get(str(identifier).strip().lower(), LeaderAttribute.NONE)


@dataclass(frozen=True, slots=True)
class LeaderChoice:
    """Selected leader skill: one attribute and its percentage."""

    attribute: LeaderAttribute = LeaderAttribute.NONE
    amount: float = 0.0

    @classmethod
    def none(cls) -> "LeaderChoice":
        return cls()

    @classmethod
    def from_mapping(cls, payload: object) -> "LeaderChoice":
        if not isinstance(payload, Mapping):
            return cls()
        attribute = leader_attribute_from_id(payload.get("attribute", payload.get("attr")))
        return cls(attribute=attribute, amount=parse_decimal(payload.get("amount")))

    @property
    def is_active(self) -> bool:
        return (
            self.attribute is not LeaderAttribute.NONE
            and math.isfinite(self.amount)
            and self.amount > 0
        )

    def to_dict(self) -> Dict[str, object]:
        return {"attribute": self.attribute.value, "amount": float(self.amount)}


class ArtifactFlat(str, Enum):
    """Flat stat line an artifact slot can roll."""

    NONE = ""
    DEF = "DEF"
    ATK = "ATK"
    HP = "HP"

    @property
    def label(self) -> str:
        return _FLAT_LABELS[self]


_FLAT_LABELS: Dict[ArtifactFlat, str] = {
    ArtifactFlat.NONE: "",
    ArtifactFlat.DEF: "DEF (+100)",
    ArtifactFlat.ATK: "ATK (+100)",
    ArtifactFlat.HP: "HP (+1500)",
}


def artifact_flat_from_id(identifier: object) -> ArtifactFlat:
    """Resolve ``identifier`` into an :class:`ArtifactFlat`, ``NONE`` if unknown."""

    if isinstance(identifier, ArtifactFlat):
        return identifier
    if identifier is None:
        return ArtifactFlat.NONE
    key = str(identifier).strip().upper()
    for option in ArtifactFlat:
        if option.value == key:
            return option
    return ArtifactFlat.NONE


__all__ = [
    "ArtifactFlat",
    "LeaderAttribute",
    "LeaderChoice",
    "artifact_flat_from_id",
    "leader_attribute_from_id",
]
