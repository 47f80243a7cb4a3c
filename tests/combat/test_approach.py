"""
Tests for the pre-combat approaches.
"""

from conftest import ScriptedRng, make_enemy, make_player, make_skill

from shinobi_sim.character.stats import PrimaryAttributes
from shinobi_sim.combat.approach import (
    apply_approach,
    meets_approach_requirements,
    resolve_live_approach,
    resolve_simulated_approach,
    simulated_success_chance,
)
from shinobi_sim.combat.encounter import build_combat_state
from shinobi_sim.combat.npc_ai import AISkillChooser
from shinobi_sim.combat.terrain import get_terrain
from shinobi_sim.combat.turn_engine import TurnEngine
from shinobi_sim.core.constants import ApproachType, EffectType, PrimaryStat, Side, TerrainType
from shinobi_sim.core.utils import IdSequence


def test_frontal_assault_always_succeeds_without_rolling():
    rng = ScriptedRng([0.99])
    result = resolve_simulated_approach(ApproachType.FRONTAL_ASSAULT, PrimaryAttributes(), rng)
    assert result.success
    assert result.success_chance == 100.0
    assert rng.values == [0.99]


def test_simulated_chance_scales_and_caps():
    assert simulated_success_chance(ApproachType.STEALTH_AMBUSH, PrimaryAttributes()) == 55.0
    assert simulated_success_chance(ApproachType.GENJUTSU_SETUP, PrimaryAttributes()) == 55.0
    assert simulated_success_chance(ApproachType.STEALTH_AMBUSH, PrimaryAttributes(speed=100)) == 95.0


def test_simulated_stealth_success():
    """
    Test that a simulated ambush opens with the big first hit and guaranteed initiative.
    """
    result = resolve_simulated_approach(ApproachType.STEALTH_AMBUSH, PrimaryAttributes(), ScriptedRng([0.0]))
    assert result.success
    assert result.first_hit_multiplier == 2.5
    assert result.initiative_bonus == 100
    assert result.guaranteed_first


def test_simulated_failure_grants_nothing():
    result = resolve_simulated_approach(ApproachType.STEALTH_AMBUSH, PrimaryAttributes(), ScriptedRng([0.99]))
    assert not result.success
    assert result.first_hit_multiplier == 1.0
    assert not result.guaranteed_first


def test_simulated_genjutsu_confuses_enemy():
    result = resolve_simulated_approach(ApproachType.GENJUTSU_SETUP, PrimaryAttributes(), ScriptedRng([0.0]))
    assert [effect.type for effect in result.enemy_debuffs] == [EffectType.CONFUSION]
    assert result.enemy_debuffs[0].duration == 3


def test_simulated_trap_cuts_enemy_hp():
    result = resolve_simulated_approach(ApproachType.ENVIRONMENTAL_TRAP, PrimaryAttributes(), ScriptedRng([0.0]))
    enemy = make_enemy()
    apply_approach(result, make_player(), enemy, IdSequence())
    assert enemy.current_hp == 136


def test_simulated_bypass_does_not_skip():
    result = resolve_simulated_approach(ApproachType.SHADOW_BYPASS, PrimaryAttributes(), ScriptedRng([0.0]))
    assert result.success
    assert not result.skip_combat


def test_requirements_check_minimum_stat():
    allowed, reason = meets_approach_requirements(ApproachType.GENJUTSU_SETUP, PrimaryAttributes())
    assert not allowed
    assert reason == "Requires CAL 15 (you have 10)"
    assert meets_approach_requirements(ApproachType.GENJUTSU_SETUP, PrimaryAttributes(calmness=15)) == (True, "")


def test_trap_requires_terrain():
    smart = PrimaryAttributes(intelligence=14)
    assert not meets_approach_requirements(ApproachType.ENVIRONMENTAL_TRAP, smart)[0]
    assert not meets_approach_requirements(ApproachType.ENVIRONMENTAL_TRAP, smart, get_terrain(TerrainType.ROOFTOPS))[0]
    assert meets_approach_requirements(ApproachType.ENVIRONMENTAL_TRAP, smart, get_terrain(TerrainType.SWAMP))[0]


def test_bypass_blocked_for_elites_and_bosses():
    fast = PrimaryAttributes(speed=40)
    assert meets_approach_requirements(ApproachType.SHADOW_BYPASS, fast)[0]
    allowed, reason = meets_approach_requirements(ApproachType.SHADOW_BYPASS, fast, is_elite_or_boss=True)
    assert not allowed
    assert reason == "Cannot bypass Elite or Boss encounters"


def test_live_chance_includes_terrain_stealth():
    """
    Test that the live ambush adds the terrain stealth modifier to its chance.
    """
    stats = PrimaryAttributes(speed=12)
    open_ground = resolve_live_approach(
        ApproachType.STEALTH_AMBUSH, stats, get_terrain(TerrainType.OPEN_GROUND), ScriptedRng([0.99])
    )
    fog = resolve_live_approach(ApproachType.STEALTH_AMBUSH, stats, get_terrain(TerrainType.FOG_BANK), ScriptedRng([0.99]))
    assert open_ground.success_chance == 45.0
    assert fog.success_chance == 85.0


def test_live_stealth_rolls_each_debuff():
    result = resolve_live_approach(
        ApproachType.STEALTH_AMBUSH,
        PrimaryAttributes(speed=12),
        get_terrain(TerrainType.FOG_BANK),
        ScriptedRng([0.0, 0.99]),
    )
    assert result.success
    assert result.first_hit_multiplier == 2.0
    assert not result.guaranteed_first
    assert [effect.type for effect in result.player_buffs] == [EffectType.BUFF]
    # the 15% stun did not trigger
    assert result.enemy_debuffs == []


def test_live_trap_reduces_enemy_hp_and_debuffs():
    result = resolve_live_approach(
        ApproachType.ENVIRONMENTAL_TRAP,
        PrimaryAttributes(intelligence=14),
        get_terrain(TerrainType.SWAMP),
        ScriptedRng([0.0]),
    )
    enemy = make_enemy()
    apply_approach(result, make_player(), enemy, IdSequence())
    assert enemy.current_hp == 136
    assert [buff.type for buff in enemy.buffs] == [EffectType.DEBUFF]


def test_failed_approach_still_costs_chakra():
    player = make_player(stats=PrimaryAttributes(calmness=15))
    result = resolve_live_approach(ApproachType.GENJUTSU_SETUP, player.primary, None, ScriptedRng([0.99]))
    assert not result.success
    apply_approach(result, player, make_enemy(), IdSequence())
    assert player.current_chakra == 90
    assert player.buffs == []


def test_costs_never_kill_or_go_negative():
    player = make_player()
    player.current_chakra = 5
    result = resolve_live_approach(
        ApproachType.SHADOW_BYPASS, PrimaryAttributes(speed=40), None, ScriptedRng([0.0])
    )
    result = result.model_copy(update={"hp_cost": 1000})
    apply_approach(result, player, make_enemy(), IdSequence())
    assert player.current_chakra == 0
    assert player.current_hp == 1


def landed_ambush(player, enemy):
    result = resolve_live_approach(
        ApproachType.STEALTH_AMBUSH,
        player.primary,
        get_terrain(TerrainType.FOG_BANK),
        ScriptedRng([0.0, 0.0]),
    )
    state = build_combat_state(result)
    apply_approach(result, player, enemy, state.ids)
    return state


def test_live_stealth_stun_costs_enemy_first_action():
    """
    Test that the ambush stun survives the first start-of-turn tick and skips the enemy's first action.
    """
    player = make_player([make_skill("wait", damage_mult=0)], PrimaryAttributes(speed=12))
    enemy = make_enemy([make_skill("strike")])
    state = landed_ambush(player, enemy)
    TurnEngine(ScriptedRng(default=0.99)).run_battle(
        player, enemy, AISkillChooser(), AISkillChooser(), state=state, max_turns=2
    )
    enemy_actions = [log.action for log in state.logs if log.actor is Side.ENEMY]
    assert enemy_actions[0] == "Stunned"
    assert enemy_actions[1] != "Stunned"


def test_live_stealth_dex_buff_covers_first_action():
    player = make_player([make_skill("wait", damage_mult=0)], PrimaryAttributes(speed=12))
    enemy = make_enemy([make_skill("wait", damage_mult=0)])
    state = landed_ambush(player, enemy)
    TurnEngine(ScriptedRng(default=0.99)).run_battle(
        player, enemy, AISkillChooser(), AISkillChooser(), state=state, max_turns=1
    )
    assert [buff.target_stat for buff in player.buffs] == [PrimaryStat.DEXTERITY]
    assert player.effective_primary().dexterity > player.primary.dexterity
