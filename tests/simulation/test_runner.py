"""
Tests for the batch runner and its export helpers.
"""

import pytest

from shinobi_sim.core.constants import SIMULATOR_VERSION, Clan, ElementType, EnemyArchetype
from shinobi_sim.generation.builds import PlayerBuildConfig
from shinobi_sim.simulation.models import SimulationConfig
from shinobi_sim.simulation.runner import print_summary, run_custom_simulation, to_plain_data


@pytest.fixture
def config():
    return SimulationConfig(battles_per_config=4, max_turns_per_battle=30, seed=5)


def test_custom_simulation(game_data, config):
    build = game_data.get_build("Uchiha Preset")
    output = run_custom_simulation([build], [EnemyArchetype.TANK, EnemyArchetype.CASTER], config, game_data)
    assert len(output.results) == 2
    assert output.metadata.version == SIMULATOR_VERSION
    assert output.metadata.total_battles == 8
    assert output.skipped_pairs == []
    assert output.results[0].aggregated.total_battles == 4
    assert set(output.summary.best_build_per_archetype) == {EnemyArchetype.TANK, EnemyArchetype.CASTER}


def test_seeded_simulation_is_reproducible(game_data, config):
    build = game_data.get_build("Speed Demon")
    first = run_custom_simulation([build], [EnemyArchetype.ASSASSIN], config, game_data)
    second = run_custom_simulation([build], [EnemyArchetype.ASSASSIN], config, game_data)
    assert first.results[0].aggregated.win_rate == second.results[0].aggregated.win_rate
    assert first.results[0].aggregated.average_turns == second.results[0].aggregated.average_turns


def test_broken_pair_is_skipped(game_data, config):
    """
    Test that a build with an unknown skill is logged and skipped instead of aborting the run.
    """
    broken = PlayerBuildConfig(name="Broken", clan=Clan.LEE, skill_ids=("no_such_jutsu",), element=ElementType.PHYSICAL)
    output = run_custom_simulation([broken], [EnemyArchetype.TANK], config, game_data)
    assert output.results == []
    assert output.skipped_pairs == ["Broken vs TANK"]
    assert output.summary.overall_best_build.build_name == ""


def test_to_plain_data_uses_string_keys(game_data, config):
    build = game_data.get_build("Uzumaki Preset")
    output = run_custom_simulation([build], [EnemyArchetype.GENJUTSU], config, game_data)
    plain = to_plain_data(output)
    assert plain["metadata"]["version"] == SIMULATOR_VERSION
    assert plain["summary"]["best_build_per_archetype"]["GENJUTSU"]["build_name"] == "Uzumaki Preset"
    assert plain["results"][0]["enemy_archetype"] == "GENJUTSU"
    assert to_plain_data({EnemyArchetype.TANK: (1, 2)}) == {"TANK": [1, 2]}


def test_print_summary_renders(game_data, config, capsys):
    build = game_data.get_build("Hyuga Preset")
    print_summary(run_custom_simulation([build], [EnemyArchetype.BALANCED], config, game_data))
    assert "Hyuga Preset" in capsys.readouterr().out
