"""Tests for stat aggregation of a single build."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from core import config
from core.aggregator import (
    CreatureBaseStats,
    aggregate,
    leader_contribution,
    sum_artifact_flats,
)
from core.bonuses import ArtifactFlat, LeaderAttribute, LeaderChoice
from core.stats import ALL_STATS, Stats


def _creature(hp: float = 10000, attack: float = 1000, defense: float = 1000, speed: float = 100):
    return CreatureBaseStats(max_hp=hp, max_attack=attack, max_defense=defense, speed=speed)


@pytest.mark.parametrize(
    "creature",
    [
        _creature(),
        _creature(0, 0, 0, 0),
        _creature(11850, 823, 681, 101),
        _creature(1.5, 2.25, 3.75, 99.9),
    ],
)
def test_towers_only_without_any_bonus(creature):
    total = aggregate(creature, LeaderChoice.none(), False, Stats(), Stats())
    base = creature.as_stats()
    for stat in ALL_STATS:
        assert total.get(stat) == base.get(stat) * (1 + config.TOWERS.get(stat))


def test_siege_adds_twenty_percent_of_base_except_speed():
    creature = _creature()
    without = aggregate(creature, siege_active=False)
    with_siege = aggregate(creature, siege_active=True)
    assert with_siege.hp - without.hp == pytest.approx(0.2 * creature.max_hp)
    assert with_siege.attack - without.attack == pytest.approx(0.2 * creature.max_attack)
    assert with_siege.defense - without.defense == pytest.approx(0.2 * creature.max_defense)
    assert with_siege.speed == without.speed


def test_leader_example_from_reference_build():
    total = aggregate(
        _creature(),
        LeaderChoice(LeaderAttribute.ATTACK, 30),
        False,
        Stats(),
        Stats(),
    )
    assert total.hp == pytest.approx(12000)
    assert total.attack == pytest.approx(1710)
    assert total.defense == pytest.approx(1200)
    assert total.speed == pytest.approx(115)


@pytest.mark.parametrize(
    "attribute",
    [LeaderAttribute.HP, LeaderAttribute.ATTACK, LeaderAttribute.DEFENSE, LeaderAttribute.SPEED],
)
def test_leader_contribution_is_single_axis(attribute):
    contribution = leader_contribution(LeaderChoice(attribute, 33))
    assert [stat for stat in ALL_STATS if contribution.get(stat) != 0] == [attribute.stat]
    assert contribution.get(attribute.stat) == pytest.approx(0.33)


@pytest.mark.parametrize(
    "choice",
    [
        LeaderChoice.none(),
        LeaderChoice(LeaderAttribute.NONE, 50),
        LeaderChoice(LeaderAttribute.HP, 0),
        LeaderChoice(LeaderAttribute.HP, -15),
        LeaderChoice(LeaderAttribute.SPEED, float("nan")),
        LeaderChoice(LeaderAttribute.ATTACK, float("inf")),
        None,
    ],
)
def test_inactive_leader_contributes_nothing(choice):
    assert leader_contribution(choice) == Stats()


def test_leader_amount_outside_the_ui_values_is_accepted():
    assert 37 not in config.LEADER_VALUES[LeaderAttribute.DEFENSE]
    contribution = leader_contribution(LeaderChoice(LeaderAttribute.DEFENSE, 37))
    assert contribution.defense == pytest.approx(0.37)


def test_flat_bonuses_are_added_after_multipliers():
    total = aggregate(
        _creature(),
        flat_user_bonus=Stats(hp=500, attack=50, defense=25, speed=10),
        flat_equipment_bonus=Stats(attack=100),
    )
    assert total.hp == pytest.approx(10000 * 1.2 + 500)
    assert total.attack == pytest.approx(1000 * 1.41 + 50 + 100)
    assert total.defense == pytest.approx(1000 * 1.2 + 25)
    assert total.speed == pytest.approx(100 * 1.15 + 10)


def test_non_finite_operands_count_as_zero():
    creature = _creature(hp=float("nan"))
    total = aggregate(creature, flat_user_bonus=Stats(attack=float("inf")))
    assert total.hp == 0.0
    assert total.attack == pytest.approx(1410)


def test_sum_artifact_flats_adds_every_slot():
    assert sum_artifact_flats([ArtifactFlat.ATK, ArtifactFlat.HP]) == Stats(hp=1500, attack=100)
    assert sum_artifact_flats(["DEF", "DEF"]) == Stats(defense=200)
    assert sum_artifact_flats(["", None, "bogus"]) == Stats()
    assert sum_artifact_flats([]) == Stats()


def test_creature_from_swarfarm_document():
    creature = CreatureBaseStats.from_swarfarm(
        {
            "id": 1234,
            "name": "Lushen",
            "element": "Wind",
            "awaken_level": 1,
            "speed": 103,
            "max_lvl_hp": 9225,
            "max_lvl_attack": 900,
            "max_lvl_defense": 461,
            "leader_skill": None,
        }
    )
    assert creature.as_stats() == Stats(hp=9225, attack=900, defense=461, speed=103)
    assert creature.display_name == "Lushen (Wind)"
    assert creature.id == 1234
    assert creature.leader_skill is None


def test_creature_display_name_without_element():
    assert _creature().display_name == ""
    creature = CreatureBaseStats(1, 1, 1, 1, name="Rainbowmon", element=None)
    assert creature.display_name == "Rainbowmon"
