"""
Tests for the damage mitigation pipeline.
"""

import pytest

from shinobi_sim.core.constants import EffectTarget, EffectType
from shinobi_sim.core.utils import IdSequence
from shinobi_sim.effects.buff import Buff
from shinobi_sim.effects.mitigation import apply_mitigation
from shinobi_sim.skills.skill import EffectDefinition


@pytest.fixture
def ids():
    return IdSequence()


def make_buff(ids, effect_type, value=None, duration=3):
    applies_to = EffectTarget.TARGET if effect_type == EffectType.CURSE else EffectTarget.SELF
    return Buff.from_effect(
        EffectDefinition(type=effect_type, applies_to=applies_to, duration=duration, value=value),
        "Test",
        ids,
    )


def test_no_buffs_passes_damage_through(ids):
    result = apply_mitigation([], 42)
    assert result.final_damage == 42
    assert result.reflected_damage == 0


def test_invulnerability_blocks_everything(ids):
    buffs = [make_buff(ids, EffectType.INVULNERABILITY), make_buff(ids, EffectType.REFLECTION, 0.5)]
    result = apply_mitigation(buffs, 100)
    assert result.final_damage == 0
    assert result.reflected_damage == 0


def test_reflection_computed_before_curse(ids):
    """
    Test that reflection uses the incoming damage while curse amplifies what lands.
    """
    buffs = [make_buff(ids, EffectType.REFLECTION, 0.3), make_buff(ids, EffectType.CURSE, 0.5)]
    result = apply_mitigation(buffs, 100)
    assert result.reflected_damage == 30
    assert result.final_damage == 150


def test_shield_absorbs_partially(ids):
    shield = make_buff(ids, EffectType.SHIELD, 50)
    result = apply_mitigation([shield], 30)
    assert result.final_damage == 0
    assert result.updated_buffs[0].value == 20
    # The input buff is not mutated.
    assert shield.value == 50


def test_shield_breaks_when_depleted(ids):
    result = apply_mitigation([make_buff(ids, EffectType.SHIELD, 50)], 80)
    assert result.final_damage == 30
    assert result.updated_buffs == []


def test_shield_exactly_depleted_breaks(ids):
    result = apply_mitigation([make_buff(ids, EffectType.SHIELD, 40)], 40)
    assert result.final_damage == 0
    assert result.updated_buffs == []
