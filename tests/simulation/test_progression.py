"""
Tests for the progression simulator.
"""

import pytest

from shinobi_sim.core.constants import Clan, SkillTier
from shinobi_sim.core.error_handling import InvalidConfigurationError
from shinobi_sim.core.rng import Rng
from shinobi_sim.simulation.models import LevelRecord, ProgressionConfig, ProgressionRunResult
from shinobi_sim.simulation.progression import (
    aggregate_progression_runs,
    eligible_skills,
    pick_new_skill,
    run_progression_run,
    run_progression_simulation,
)


@pytest.fixture
def config():
    return ProgressionConfig(max_level=3, max_battles=12, runs_to_simulate=3, survival_level=3, seed=9)


def make_run(run_id, final_level, by_level, acquired=()):
    wins = sum(record.wins for record in by_level.values())
    total = sum(record.total for record in by_level.values())
    return ProgressionRunResult(
        run_id=run_id,
        clan=Clan.UCHIHA,
        final_level=final_level,
        total_battles=total,
        wins=wins,
        losses=total - wins,
        win_rate=wins / total,
        win_rate_by_level=by_level,
        skills_acquired=list(acquired),
    )


def test_eligible_skills_respect_clan_and_intelligence(game_data):
    pool = list(game_data.skills.skills)
    for skill in eligible_skills(Clan.LEE, 12, ["basic_atk"], pool, game_data):
        assert skill.id != "basic_atk"
        assert skill.required_int <= 12
        assert skill.required_clan in (None, Clan.LEE)


def test_pick_new_skill_prefers_highest_tier(game_data):
    candidates = list(game_data.skills)
    picked = pick_new_skill(candidates, Rng(1))
    assert picked.tier.rank == max(skill.tier.rank for skill in candidates)
    assert pick_new_skill([], Rng(1)) is None


def test_run_stops_at_first_loss(game_data, config):
    """
    Test that a run ends on its first defeat and never passes the level cap.
    """
    run = run_progression_run(Clan.UZUMAKI, config, 0, game_data, Rng(4))
    assert 1 <= run.total_battles <= config.max_battles
    assert run.losses <= 1
    if run.losses:
        assert not run.battles[-1].won
    assert run.final_level <= config.max_level
    levels = [battle.level_at_battle for battle in run.battles]
    assert levels == sorted(levels)
    assert len(run.skills_acquired) <= config.max_skills - 1
    assert sum(record.total for record in run.win_rate_by_level.values()) == run.total_battles


def test_run_levels_only_on_wins(game_data, config):
    run = run_progression_run(Clan.LEE, config, 0, game_data, Rng(8))
    for battle in run.battles:
        if not battle.won:
            assert not battle.leveled_up
            assert battle.skill_gained is None


def test_aggregate_runs_finds_breakpoints():
    runs = [
        make_run(0, 2, {1: LevelRecord(wins=2, total=2), 2: LevelRecord(wins=1, total=2)}, ["fireball"]),
        make_run(1, 3, {1: LevelRecord(wins=1, total=1), 2: LevelRecord(wins=0, total=1)}),
    ]
    summary = aggregate_progression_runs(runs, Clan.UCHIHA, survival_level=3)
    assert summary.total_runs == 2
    assert summary.average_final_level == 2.5
    assert summary.max_final_level == 3
    assert summary.survival_rate == 0.5
    assert summary.win_rate_by_level == {1: 1.0, 2: pytest.approx(1 / 3)}
    assert [bp.level for bp in summary.level_breakpoints] == [2]
    assert summary.skill_acquisition_stats == {"fireball": 0.5}


def test_aggregate_no_runs():
    summary = aggregate_progression_runs([], Clan.HYUGA)
    assert summary.total_runs == 0
    assert summary.level_breakpoints == []


def test_progression_simulation(game_data, config):
    summary = run_progression_simulation(Clan.HYUGA, config, game_data)
    assert summary.clan == Clan.HYUGA
    assert summary.total_runs == 3
    assert 1 <= summary.max_final_level <= 3


def test_invalid_progression_config():
    with pytest.raises(InvalidConfigurationError):
        ProgressionConfig(start_level=5, max_level=2)
    with pytest.raises(InvalidConfigurationError):
        ProgressionConfig(starting_skill_ids=[])
