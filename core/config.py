"""Centralised configuration for the artifact comparator backend."""
from __future__ import annotations

import os
from typing import Dict, FrozenSet, List, Mapping, Tuple

from .bonuses import ArtifactFlat, LeaderAttribute
from .stats import Stats

# ---------------------------------------------------------------------------
# Permanent and situational percentage buffs

TOWERS: Stats = Stats(hp=0.20, attack=0.41, defense=0.20, speed=0.15)

SIEGE_BONUS: Stats = Stats(hp=0.20, attack=0.20, defense=0.20, speed=0.0)

# ---------------------------------------------------------------------------
# Presentation-layer choices. The calculator accepts any finite percentage;
# these lists only drive the form controls.

LEADER_VALUES: Dict[LeaderAttribute, Tuple[int, ...]] = {
    LeaderAttribute.HP: (15, 17, 18, 21, 22, 24, 25, 28, 30, 33, 38, 40, 44, 45, 50),
    LeaderAttribute.ATTACK: (15, 18, 20, 21, 22, 23, 25, 28, 30, 31, 33, 35, 38, 40, 44, 45),
    LeaderAttribute.DEFENSE: (20, 21, 22, 25, 27, 28, 30, 33, 38, 40, 44, 50),
    LeaderAttribute.SPEED: (10, 13, 15, 16, 17, 19, 20, 21, 23, 24, 28, 30, 33),
}

ARTIFACT_FLAT_BONUSES: Mapping[ArtifactFlat, Stats] = {
    ArtifactFlat.NONE: Stats(),
    ArtifactFlat.DEF: Stats(defense=100),
    ArtifactFlat.ATK: Stats(attack=100),
    ArtifactFlat.HP: Stats(hp=1500),
}

ARTIFACT_FLAT_OPTIONS: List[ArtifactFlat] = [
    ArtifactFlat.NONE,
    ArtifactFlat.DEF,
    ArtifactFlat.ATK,
    ArtifactFlat.HP,
]

# Flat equipment slots per build.
ARTIFACT_FLAT_SLOTS: int = 2

PLACEHOLDER_SELECT = "Selecionar…"

# ---------------------------------------------------------------------------
# Swarfarm upstream

SWARFARM_API_ROOT: str = os.environ.get(
    "SWARFARM_API_ROOT", "https://swarfarm.com/api/v2"
).rstrip("/")

USER_AGENT = "artifact-comparator"

REQUEST_TIMEOUT: float = 10.0

PROXY_ALLOWLIST: FrozenSet[str] = frozenset({"bestiary", "monsters", "bestiary/monsters"})

LIST_CACHE_TTL: float = 60 * 60 * 24
MONSTER_CACHE_TTL: float = 60 * 60 * 24
PROXY_CACHE_MAX_AGE: int = 60 * 60

MONSTER_CACHE_CONTROL = "public, s-maxage=86400, stale-while-revalidate=3600"
LIST_CACHE_CONTROL = "public, s-maxage=86400"
NO_STORE_CACHE_CONTROL = "no-store, no-cache, must-revalidate, max-age=0"

# Monster picker limits.
SEARCH_DEFAULT_LIMIT: int = 150
SEARCH_MATCH_LIMIT: int = 200


def options_snapshot() -> Dict[str, object]:
    """Return the form configuration consumed by the page and ``/api/options``."""

    return {
        "leader_values": {
            attribute.value: list(values) for attribute, values in LEADER_VALUES.items()
        },
        "leader_attributes": [attribute.value for attribute in LeaderAttribute],
        "artifact_flats": [
            {
                "value": option.value,
                "label": option.label,
                "bonus": ARTIFACT_FLAT_BONUSES[option].to_dict(),
            }
            for option in ARTIFACT_FLAT_OPTIONS
        ],
        "artifact_flat_slots": ARTIFACT_FLAT_SLOTS,
        "towers": TOWERS.to_dict(),
        "siege_bonus": SIEGE_BONUS.to_dict(),
    }
