"""Tests for end-to-end evaluation of comparison requests."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from core.aggregator import CreatureBaseStats
from core.bonuses import ArtifactFlat, LeaderAttribute, LeaderChoice
from core.calculator import (
    BuildDescriptor,
    ComparisonRequest,
    evaluate,
    request_from_payload,
)
from core.stats import Stats

CREATURE = CreatureBaseStats(max_hp=10000, max_attack=1000, max_defense=1000, speed=100)


def test_no_creature_produces_no_result():
    request = ComparisonRequest(
        creature=None,
        build_a=BuildDescriptor(weights=Stats(attack=100)),
        build_b=BuildDescriptor(weights=Stats(hp=50)),
    )
    assert evaluate(request) is None


def test_zero_stat_creature_is_still_evaluated():
    request = ComparisonRequest(creature=CreatureBaseStats(0, 0, 0, 0))
    result = evaluate(request)
    assert result is not None
    assert result.total_a == Stats()
    assert result.winner == "TIE"


def test_reference_example_end_to_end():
    request = ComparisonRequest(
        creature=CREATURE,
        leader=LeaderChoice(LeaderAttribute.ATTACK, 30),
        build_a=BuildDescriptor(weights=Stats(attack=100)),
        build_b=BuildDescriptor(weights=Stats(hp=50)),
    )
    result = evaluate(request)
    assert result is not None
    assert result.total_a == result.total_b
    assert result.total_a.attack == pytest.approx(1710)
    assert result.score_a == pytest.approx(1710)
    assert result.score_b == pytest.approx(6000)
    assert result.winner == "B"


def test_flat_equipment_applies_per_build():
    request = ComparisonRequest(
        creature=CREATURE,
        build_a=BuildDescriptor(
            weights=Stats(attack=100),
            flat_picks=(ArtifactFlat.ATK, ArtifactFlat.HP),
        ),
        build_b=BuildDescriptor(weights=Stats(attack=100)),
    )
    result = evaluate(request)
    assert result is not None
    assert result.total_a.attack - result.total_b.attack == pytest.approx(100)
    assert result.total_a.hp - result.total_b.hp == pytest.approx(1500)
    assert result.winner == "A"


def test_result_dict_carries_totals_scores_and_display_strings():
    result = evaluate(
        ComparisonRequest(
            creature=CREATURE,
            build_a=BuildDescriptor(weights=Stats(hp=50)),
            build_b=BuildDescriptor(weights=Stats(hp=50)),
        )
    )
    assert result is not None
    payload = result.to_dict()
    assert set(payload) >= {"total_a", "total_b", "score_a", "score_b", "winner"}
    assert payload["winner"] == "TIE"
    assert payload["formatted"]["total_a"]["hp"] == "12.000"
    assert payload["formatted"]["score_a"] == "6.000"


def test_request_from_payload_parses_loose_text():
    request = request_from_payload(
        {
            "creature": {"max_hp": "10000", "max_attack": "1.000", "max_defense": 1000, "speed": 100},
            "leader": {"attribute": "ATK", "amount": "30"},
            "siege": "true",
            "bonus": {"hp": "1.500,5", "atk": "abc"},
            "artifact_a": {"weights": {"hp": "12,5", "atk": ""}, "flats": ["ATK", "HP", "DEF"]},
            "artifact_b": {"weights": {"spd": "20"}, "flats": "DEF"},
        }
    )
    assert request.creature is not None
    # "1.000" has no comma, so the dot is the decimal separator.
    assert request.creature.max_attack == pytest.approx(1.0)
    assert request.leader == LeaderChoice(LeaderAttribute.ATTACK, 30)
    assert request.siege_active is True
    assert request.flat_user_bonus == Stats(hp=1500.5)
    assert request.build_a.weights == Stats(hp=12.5)
    assert request.build_a.flat_picks == (ArtifactFlat.ATK, ArtifactFlat.HP)
    assert request.build_b.flat_picks == (ArtifactFlat.DEF,)
    assert request.build_b.weights == Stats(speed=20)


def test_request_from_payload_without_creature():
    request = request_from_payload({"leader": "garbage", "bonus": 12, "artifact_a": []})
    assert request.creature is None
    assert request.leader == LeaderChoice.none()
    assert request.flat_user_bonus == Stats()
    assert request.build_a == BuildDescriptor()
    assert evaluate(request) is None


def test_explicit_creature_wins_over_inline_payload():
    request = request_from_payload({"creature": {"max_hp": 1}}, creature=CREATURE)
    assert request.creature is CREATURE


@pytest.mark.parametrize("flag, expected", [("", False), ("0", False), ("on", True), (1, True), (None, False)])
def test_siege_flag_parsing(flag, expected):
    assert request_from_payload({"siege": flag}).siege_active is expected
