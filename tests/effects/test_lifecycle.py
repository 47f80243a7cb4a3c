"""
Tests for start-of-turn buff processing.
"""

import pytest

from shinobi_sim.character.stats import PrimaryAttributes, derive_stats
from shinobi_sim.core.constants import DamageProperty, DamageType, EffectTarget, EffectType, PrimaryStat
from shinobi_sim.core.utils import IdSequence
from shinobi_sim.effects.buff import Buff
from shinobi_sim.effects.lifecycle import calculate_dot_damage, process_dot_and_regen, tick_durations
from shinobi_sim.skills.skill import EffectDefinition


@pytest.fixture
def ids():
    return IdSequence()


def make_buff(ids, effect_type, duration=3, value=None, **kwargs):
    applies_to = EffectTarget.SELF if effect_type in (EffectType.REGEN, EffectType.SHIELD, EffectType.BUFF) else EffectTarget.TARGET
    return Buff.from_effect(
        EffectDefinition(type=effect_type, applies_to=applies_to, duration=duration, value=value, **kwargs),
        "Test",
        ids,
    )


def test_tick_keeps_permanent_and_drops_last_turn(ids):
    """
    Test that permanent buffs survive, and buffs on their last turn expire.
    """
    permanent = make_buff(ids, EffectType.BUFF, duration=-1, value=0.2, target_stat=PrimaryStat.SPEED)
    expiring = make_buff(ids, EffectType.STUN, duration=1)
    lasting = make_buff(ids, EffectType.STUN, duration=3)
    ticked = tick_durations([permanent, expiring, lasting])
    assert [buff.id for buff in ticked] == [permanent.id, lasting.id]
    assert ticked[0].duration == -1
    assert ticked[1].duration == 2
    assert lasting.duration == 3


def test_true_dot_ignores_defense():
    derived = derive_stats(PrimaryAttributes.uniform(200))
    assert calculate_dot_damage(12, DamageType.TRUE, None, derived) == 12


def test_dot_feels_half_the_defense():
    derived = derive_stats(PrimaryAttributes(strength=100))
    # flat 30 halved to 15, capped at 40% of 100; percent 1/3 halved
    assert calculate_dot_damage(100, DamageType.PHYSICAL, DamageProperty.NORMAL, derived) == 71


def test_dot_damage_at_least_one():
    derived = derive_stats(PrimaryAttributes.uniform(500))
    assert calculate_dot_damage(1, DamageType.ELEMENTAL, DamageProperty.NORMAL, derived) == 1


def test_dot_and_regen_processed(ids):
    derived = derive_stats(PrimaryAttributes())
    buffs = [
        make_buff(ids, EffectType.POISON, duration=2, value=10, damage_type=DamageType.TRUE),
        make_buff(ids, EffectType.REGEN, duration=1, value=5),
    ]
    tick = process_dot_and_regen(buffs, 100, derived.max_hp, derived)
    assert tick.dot_damage == 10
    assert tick.healed == 5
    assert tick.new_hp == 95
    assert [buff.type for buff in tick.updated_buffs] == [EffectType.POISON]


def test_shield_absorbs_dot(ids):
    derived = derive_stats(PrimaryAttributes())
    buffs = [
        make_buff(ids, EffectType.SHIELD, value=50),
        make_buff(ids, EffectType.BURN, value=10, damage_type=DamageType.TRUE),
    ]
    tick = process_dot_and_regen(buffs, 100, derived.max_hp, derived)
    assert tick.new_hp == 100
    assert tick.dot_damage == 0
    shield = next(buff for buff in tick.updated_buffs if buff.type == EffectType.SHIELD)
    assert shield.value == 40


def test_regen_capped_at_max_hp(ids):
    derived = derive_stats(PrimaryAttributes())
    tick = process_dot_and_regen([make_buff(ids, EffectType.REGEN, value=50)], derived.max_hp - 5, derived.max_hp, derived)
    assert tick.new_hp == derived.max_hp
    assert tick.healed == 5
