"""
Tests for the aggregation of battle results.
"""

import pytest

from shinobi_sim.combat.state import BattleResult
from shinobi_sim.core.constants import ApproachType, EnemyArchetype
from shinobi_sim.simulation.models import AggregatedStats
from shinobi_sim.simulation.statistics import (
    aggregate_results,
    create_histogram,
    generate_summary,
    percentile,
    standard_deviation,
)


@pytest.fixture
def results():
    return [
        BattleResult(
            won=True,
            turns=4,
            total_damage_dealt=100,
            total_damage_received=50,
            total_attacks=4,
            crit_count=1,
            miss_count=1,
            player_final_hp=80,
            total_chakra_used=20,
            skills_used={"basic_atk": 2, "fireball": 1},
        ),
        BattleResult(
            won=False,
            turns=6,
            total_damage_dealt=60,
            total_damage_received=150,
            total_attacks=6,
            evasion_count=2,
            skills_used={"basic_atk": 3},
        ),
    ]


def stats(build, archetype, win_rate):
    return AggregatedStats(player_build_name=build, enemy_archetype=archetype, win_rate=win_rate)


def test_empty_results_are_zeroed():
    aggregated = aggregate_results([], "Nobody", EnemyArchetype.TANK)
    assert aggregated.total_battles == 0
    assert aggregated.win_rate == 0.0
    assert aggregated.skill_usage_count == {}
    assert aggregated.approach_stats is None


def test_aggregate_results(results):
    """
    Test that win, turn, damage, accuracy and chakra statistics are computed over all battles.
    """
    aggregated = aggregate_results(results, "Tester", EnemyArchetype.CASTER)
    assert aggregated.total_battles == 2
    assert aggregated.wins == 1
    assert aggregated.losses == 1
    assert aggregated.win_rate == 0.5
    assert aggregated.average_turns_to_win == 4
    assert aggregated.average_turns_to_lose == 6
    assert aggregated.min_turns == 4
    assert aggregated.max_turns == 6
    assert aggregated.turns_std_dev == 1.0
    assert aggregated.damage_efficiency == pytest.approx(0.8)
    assert aggregated.crit_rate == pytest.approx(0.1)
    assert aggregated.miss_rate == pytest.approx(0.1)
    assert aggregated.evasion_rate == pytest.approx(0.2)
    assert aggregated.average_remaining_hp_on_win == 80
    assert aggregated.chakra_efficiency == 8.0
    assert aggregated.skill_usage_count == {"basic_atk": 5, "fireball": 1}
    assert aggregated.skill_win_contribution == {"basic_atk": 1, "fireball": 1}


def test_efficiencies_fall_back_to_damage_dealt():
    aggregated = aggregate_results(
        [BattleResult(won=True, turns=1, total_damage_dealt=30)], "Tester", EnemyArchetype.TANK
    )
    assert aggregated.damage_efficiency == 30.0
    assert aggregated.chakra_efficiency == 30.0


def test_approach_statistics():
    aggregated = aggregate_results(
        [
            BattleResult(won=True, turns=3, approach_used=ApproachType.STEALTH_AMBUSH, approach_succeeded=True),
            BattleResult(won=False, turns=9, approach_used=ApproachType.STEALTH_AMBUSH, approach_succeeded=False),
            BattleResult(won=True, turns=5),
        ],
        "Tester",
        EnemyArchetype.ASSASSIN,
    )
    stealth = aggregated.approach_stats[ApproachType.STEALTH_AMBUSH]
    assert list(aggregated.approach_stats) == [ApproachType.STEALTH_AMBUSH]
    assert stealth.attempts == 2
    assert stealth.successes == 1
    assert stealth.success_rate == 0.5
    assert stealth.win_rate_with_approach == 0.5


def test_generate_summary():
    all_stats = [
        stats("Alpha", EnemyArchetype.TANK, 0.8),
        stats("Alpha", EnemyArchetype.CASTER, 0.4),
        stats("Beta", EnemyArchetype.TANK, 0.5),
        stats("Beta", EnemyArchetype.CASTER, 0.9),
    ]
    summary = generate_summary(all_stats, [EnemyArchetype.TANK, EnemyArchetype.CASTER], top=2)
    assert summary.best_build_per_archetype[EnemyArchetype.TANK].build_name == "Alpha"
    assert summary.best_build_per_archetype[EnemyArchetype.CASTER].build_name == "Beta"
    assert summary.overall_best_build.build_name == "Beta"
    assert summary.overall_best_build.win_rate == pytest.approx(0.7)
    assert [m.win_rate for m in summary.best_matchups] == [0.9, 0.8]
    assert [m.win_rate for m in summary.worst_matchups] == [0.4, 0.5]


def test_summary_ties_keep_first_build():
    summary = generate_summary(
        [stats("Alpha", EnemyArchetype.TANK, 0.5), stats("Beta", EnemyArchetype.TANK, 0.5)],
        [EnemyArchetype.TANK],
    )
    assert summary.overall_best_build.build_name == "Alpha"
    assert summary.best_build_per_archetype[EnemyArchetype.TANK].build_name == "Alpha"


def test_summary_of_nothing():
    summary = generate_summary([], [EnemyArchetype.TANK])
    assert summary.best_build_per_archetype == {}
    assert summary.overall_best_build.build_name == ""
    assert summary.worst_matchups == []


def test_standard_deviation():
    assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == 2.0
    assert standard_deviation([]) == 0.0


def test_histogram():
    assert create_histogram([1, 2, 3, 4], buckets=3) == [1, 1, 2]
    assert create_histogram([5, 5], buckets=4) == [2, 0, 0, 0]
    assert create_histogram([], buckets=2) == [0, 0]


def test_percentile():
    values = list(range(1, 11))
    assert percentile(values, 50) == 5
    assert percentile(values, 90) == 9
    assert percentile(values, 0) == 1
    assert percentile([], 50) == 0.0
