"""
Tests for the turn engine.
"""

import pytest
from conftest import ScriptedRng, make_enemy, make_player, make_skill

from shinobi_sim.character.stats import PrimaryAttributes
from shinobi_sim.combat.npc_ai import AISkillChooser
from shinobi_sim.combat.state import CombatState
from shinobi_sim.combat.turn_engine import TurnEngine
from shinobi_sim.core.constants import (
    AttackMethod,
    DamageType,
    EffectTarget,
    EffectType,
    PrimaryStat,
    Side,
)
from shinobi_sim.core.error_handling import InvalidConfigurationError
from shinobi_sim.core.formulas import CombatRules
from shinobi_sim.core.rng import Rng
from shinobi_sim.core.utils import IdSequence
from shinobi_sim.effects.buff import Buff
from shinobi_sim.skills.skill import EffectDefinition


class FixedChooser:
    """Always picks the skill with the given id."""

    def __init__(self, skill_id):
        self.skill_id = skill_id

    def choose_skill(self, actor, opponent, state):
        return actor.get_skill(self.skill_id)


@pytest.fixture
def strike():
    return make_skill("true_strike", damage_type=DamageType.TRUE, attack_method=AttackMethod.AUTO)


@pytest.fixture
def wait():
    return make_skill("wait", damage_mult=0)


def opening_state(**kwargs):
    return CombatState(guaranteed_first=True, **kwargs)


def add_buff(combatant, effect_type, value=None, duration=3, **kwargs):
    effect = EffectDefinition(
        type=effect_type,
        applies_to=EffectTarget.TARGET,
        duration=duration,
        value=value,
        **kwargs,
    )
    combatant.add_buff(Buff.from_effect(effect, "Test", IdSequence("test")))


@pytest.mark.parametrize("seed", range(10))
def test_battles_end_within_turn_cap(seed, game_data):
    """
    Test that every battle reports between 1 and the cap turns, and a finished battle has one loser.
    """
    basic = game_data.skills.basic_attack
    player = make_player([basic], PrimaryAttributes.uniform(14))
    enemy = make_enemy([basic], PrimaryAttributes.uniform(14))
    result = TurnEngine(Rng(seed)).run_battle(
        player, enemy, AISkillChooser(), AISkillChooser(), max_turns=30
    )
    assert 1 <= result.turns <= 30
    if result.ended_by_turn_cap:
        assert player.is_alive() and enemy.is_alive()
        assert not result.won
    else:
        assert player.is_alive() != enemy.is_alive()
        assert result.won == (not enemy.is_alive())


def test_turn_cap_ends_stalemate(wait):
    player = make_player([wait])
    enemy = make_enemy([wait])
    result = TurnEngine(ScriptedRng()).run_battle(
        player, enemy, FixedChooser("wait"), FixedChooser("wait"), max_turns=7
    )
    assert result.turns == 7
    assert result.ended_by_turn_cap
    assert not result.won


def test_stun_skips_action(strike, wait):
    player = make_player([wait])
    enemy = make_enemy([strike])
    add_buff(enemy, EffectType.STUN, duration=2)
    state = opening_state()
    TurnEngine(ScriptedRng(default=0.99)).run_battle(
        player, enemy, FixedChooser("wait"), FixedChooser("true_strike"), state=state, max_turns=2
    )
    enemy_actions = [log.action for log in state.logs if log.actor is Side.ENEMY]
    assert enemy_actions[0] == "Stunned"
    assert enemy_actions[1] == "True Strike"


def test_confused_actor_may_hurt_itself(strike, wait):
    player = make_player([wait])
    enemy = make_enemy([strike], PrimaryAttributes(strength=20))
    add_buff(enemy, EffectType.CONFUSION, duration=2)
    hp_before = enemy.current_hp
    TurnEngine(ScriptedRng([0.0])).run_battle(
        player, enemy, FixedChooser("wait"), FixedChooser("true_strike"), state=opening_state(), max_turns=1
    )
    assert enemy.current_hp == hp_before - 10
    assert player.current_hp == player.base_derived().max_hp


def test_first_hit_multiplier_applies_once(strike, wait):
    player = make_player([strike])
    enemy = make_enemy([wait])
    state = opening_state(first_hit_multiplier=2.0, first_hit_pending=True)
    result = TurnEngine(ScriptedRng(default=0.99)).run_battle(
        player, enemy, FixedChooser("true_strike"), FixedChooser("wait"), state=state, max_turns=2
    )
    # 20 in turn 1, 10 in turn 2
    assert result.total_damage_dealt == 30
    assert enemy.current_hp == enemy.base_derived().max_hp - 30


def test_reflection_hits_attacker(strike, wait):
    player = make_player([strike])
    enemy = make_enemy([wait])
    add_buff(enemy, EffectType.REFLECTION, value=0.5)
    result = TurnEngine(ScriptedRng(default=0.99)).run_battle(
        player, enemy, FixedChooser("true_strike"), FixedChooser("wait"), state=opening_state(), max_turns=1
    )
    assert player.current_hp == player.base_derived().max_hp - 5
    assert result.total_damage_received == 5


def test_lethal_dot_ends_battle_before_actions(strike):
    player = make_player([strike])
    enemy = make_enemy([strike])
    add_buff(enemy, EffectType.POISON, value=1000, damage_type=DamageType.TRUE)
    state = opening_state()
    result = TurnEngine(ScriptedRng(default=0.99)).run_battle(
        player, enemy, FixedChooser("true_strike"), FixedChooser("true_strike"), state=state
    )
    assert result.won
    assert result.turns == 1
    assert player.current_hp == player.base_derived().max_hp
    assert result.total_attacks == 0


def test_enemy_dot_counts_as_damage_dealt(wait):
    player = make_player([wait])
    enemy = make_enemy([wait])
    add_buff(enemy, EffectType.BURN, value=7, damage_type=DamageType.TRUE, duration=5)
    result = TurnEngine(ScriptedRng()).run_battle(
        player, enemy, FixedChooser("wait"), FixedChooser("wait"), state=opening_state(), max_turns=2
    )
    assert result.total_damage_dealt == 14


def test_toggle_dropped_when_upkeep_unaffordable():
    toggle = make_skill(
        "focus",
        damage_mult=0,
        chakra_cost=10,
        is_toggle=True,
        upkeep_cost=5,
        effects=(
            EffectDefinition(
                type=EffectType.BUFF,
                applies_to=EffectTarget.SELF,
                duration=-1,
                value=0.3,
                target_stat=PrimaryStat.SPEED,
            ),
        ),
    )
    wait = make_skill("wait", damage_mult=0)
    player = make_player([toggle], PrimaryAttributes(intelligence=0))
    player.current_chakra = 10
    enemy = make_enemy([wait])
    TurnEngine(ScriptedRng()).run_battle(
        player, enemy, FixedChooser("focus"), FixedChooser("wait"), state=opening_state(), max_turns=1
    )
    assert player.current_chakra == 0
    assert player.buffs == []


def test_toggle_kept_while_upkeep_paid():
    toggle = make_skill(
        "focus",
        damage_mult=0,
        chakra_cost=10,
        is_toggle=True,
        upkeep_cost=5,
        effects=(
            EffectDefinition(
                type=EffectType.BUFF,
                applies_to=EffectTarget.SELF,
                duration=-1,
                value=0.3,
                target_stat=PrimaryStat.SPEED,
            ),
        ),
    )
    wait = make_skill("wait", damage_mult=0)
    player = make_player([toggle, wait], PrimaryAttributes(intelligence=0))
    player.current_chakra = 20
    enemy = make_enemy([wait])
    result = TurnEngine(ScriptedRng()).run_battle(
        player, enemy, FixedChooser("focus"), FixedChooser("wait"), state=opening_state(), max_turns=2
    )
    # cast 10, upkeep 5 twice; the active toggle is never cast again
    assert player.current_chakra == 0
    assert len(player.buffs) == 1
    assert result.total_chakra_used == 20
    assert result.skills_used == {"focus": 1, "wait": 1}


def test_heal_is_instant_and_not_kept(wait):
    heal = make_skill(
        "mend",
        damage_mult=0,
        effects=(EffectDefinition(type=EffectType.HEAL, applies_to=EffectTarget.SELF, duration=1, value=30),),
    )
    player = make_player([heal])
    player.current_hp = 100
    enemy = make_enemy([wait])
    TurnEngine(ScriptedRng()).run_battle(
        player, enemy, FixedChooser("mend"), FixedChooser("wait"), state=opening_state(), max_turns=1
    )
    assert player.current_hp == 130
    assert player.buffs == []


def test_chakra_drain_is_instant(wait):
    drain = make_skill(
        "drain",
        damage_mult=0,
        effects=(
            EffectDefinition(type=EffectType.CHAKRA_DRAIN, applies_to=EffectTarget.TARGET, duration=1, value=40),
        ),
    )
    player = make_player([drain])
    enemy = make_enemy([wait], PrimaryAttributes(intelligence=0))
    max_chakra = enemy.current_chakra
    TurnEngine(ScriptedRng(default=0.0)).run_battle(
        player, enemy, FixedChooser("drain"), FixedChooser("wait"), state=opening_state(), max_turns=1
    )
    assert enemy.current_chakra == max_chakra - 40
    assert enemy.buffs == []


def test_skill_on_cooldown_falls_back(strike, game_data):
    slow = make_skill("slow_strike", damage_type=DamageType.TRUE, attack_method=AttackMethod.AUTO, cooldown=3)
    player = make_player([slow, game_data.skills.basic_attack])
    enemy = make_enemy([make_skill("wait", damage_mult=0)])
    state = opening_state()
    engine = TurnEngine(ScriptedRng(default=0.99))
    engine.run_battle(player, enemy, FixedChooser("slow_strike"), FixedChooser("wait"), state=state, max_turns=2)
    player_actions = [log.action for log in state.logs if log.actor is Side.PLAYER]
    assert player_actions[0] == "Slow Strike"
    assert player_actions[1] in ("Taijutsu", "Taijutsu MISSED", "Taijutsu EVADED")


def test_invalid_rules_rejected():
    with pytest.raises(InvalidConfigurationError):
        CombatRules(max_turns=0)
    with pytest.raises(InvalidConfigurationError):
        CombatRules(dot_order=(Side.PLAYER, Side.PLAYER))
