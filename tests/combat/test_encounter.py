"""
Tests for live encounters.
"""

import pytest
from conftest import ScriptedRng, make_enemy, make_player, make_skill

from shinobi_sim.character.stats import PrimaryAttributes
from shinobi_sim.combat.approach import resolve_simulated_approach
from shinobi_sim.combat.encounter import build_combat_state, run_encounter
from shinobi_sim.combat.npc_ai import AISkillChooser
from shinobi_sim.combat.terrain import get_terrain
from shinobi_sim.core.constants import ApproachType, DamageType, TerrainType
from shinobi_sim.core.rng import Rng


@pytest.fixture
def fast_player():
    return make_player([make_skill()], PrimaryAttributes(speed=40))


def test_bypass_skips_combat(fast_player):
    outcome = run_encounter(
        fast_player,
        make_enemy([make_skill()]),
        ApproachType.SHADOW_BYPASS,
        get_terrain(TerrainType.FOG_BANK),
        AISkillChooser(),
        ScriptedRng([0.0]),
    )
    assert outcome.won
    assert outcome.skipped
    assert outcome.result is None
    assert outcome.xp_multiplier == 0.0
    assert outcome.player_final_chakra == fast_player.derived().max_chakra - 30


def test_unmet_requirement_raises(fast_player):
    with pytest.raises(ValueError):
        run_encounter(
            fast_player,
            make_enemy([make_skill()], is_elite=True),
            ApproachType.SHADOW_BYPASS,
            None,
            AISkillChooser(),
            ScriptedRng(),
        )


def test_frontal_encounter_runs_battle():
    strike = make_skill(damage_type=DamageType.TRUE, damage_mult=3.0)
    player = make_player([strike], PrimaryAttributes(strength=20))
    enemy = make_enemy([make_skill()])
    outcome = run_encounter(
        player, enemy, ApproachType.FRONTAL_ASSAULT, None, AISkillChooser(), Rng(3)
    )
    assert not outcome.skipped
    assert outcome.result is not None
    assert outcome.won == outcome.result.won
    assert outcome.player_final_hp == player.current_hp


def test_combat_state_carries_opening():
    opening = resolve_simulated_approach(ApproachType.STEALTH_AMBUSH, PrimaryAttributes(), ScriptedRng([0.0]))
    state = build_combat_state(opening)
    assert state.guaranteed_first
    assert state.first_hit_pending
    assert state.first_hit_multiplier == 2.5
    assert state.approach_succeeded
