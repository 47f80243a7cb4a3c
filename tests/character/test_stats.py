"""
Tests for stat derivation.
"""

import pytest
from conftest import make_player

from shinobi_sim.character.stats import (
    EquipmentItem,
    PrimaryAttributes,
    StatModifiers,
    aggregate_equipment_bonuses,
    apply_buffs_to_primary,
    derive_stats,
)
from shinobi_sim.core.constants import DamageType, EffectTarget, EffectType, PrimaryStat
from shinobi_sim.core.utils import IdSequence
from shinobi_sim.effects.buff import Buff
from shinobi_sim.skills.skill import EffectDefinition


def test_max_hp_from_willpower():
    """
    Test that max HP is 50 + willpower * 12.
    """
    derived = derive_stats(PrimaryAttributes(willpower=20))
    assert derived.max_hp == 290


def test_max_chakra_and_regen():
    derived = derive_stats(PrimaryAttributes(chakra=15, intelligence=12))
    assert derived.max_chakra == 30 + 15 * 8
    assert derived.chakra_regen == 2


def test_percent_defense_is_soft_capped():
    derived = derive_stats(PrimaryAttributes(strength=200))
    assert derived.physical_defense_percent == pytest.approx(0.5)
    assert derived.physical_defense_flat == 60


def test_percent_defense_never_exceeds_cap():
    modifiers = StatModifiers(physical_defense_percent=0.6)
    derived = derive_stats(PrimaryAttributes(strength=200), modifiers)
    assert derived.physical_defense_percent == pytest.approx(0.75)


def test_true_damage_has_no_defense():
    derived = derive_stats(PrimaryAttributes.uniform(50))
    assert derived.defense_for(DamageType.TRUE) == (0, 0.0)


def test_crit_chance_capped():
    derived = derive_stats(PrimaryAttributes(dexterity=500))
    assert derived.crit_chance == 75.0


def test_equipment_bonuses_feed_primary_stats():
    items = [
        EquipmentItem(name="Forehead Protector", stat_bonuses={PrimaryStat.WILLPOWER: 5}, flat_hp=10),
        EquipmentItem(name="Flak Jacket", stat_bonuses={PrimaryStat.WILLPOWER: 5}),
    ]
    modifiers = aggregate_equipment_bonuses(items)
    derived = derive_stats(PrimaryAttributes(willpower=10), modifiers)
    assert modifiers.stat_bonuses == {PrimaryStat.WILLPOWER: 10}
    assert derived.max_hp == 50 + 20 * 12 + 10


def test_player_equipment_changes_derived_stats():
    """
    Test that equipped items reach the derived stats and the restored HP of a player.
    """
    jacket = EquipmentItem(name="Flak Jacket", stat_bonuses={PrimaryStat.WILLPOWER: 5}, flat_hp=10)
    bare = make_player()
    geared = make_player(equipment=[jacket])
    assert bare.derived().max_hp == 170
    assert geared.derived().max_hp == 50 + 15 * 12 + 10
    assert geared.current_hp == geared.derived().max_hp


def test_equipment_adds_to_existing_modifiers():
    base = StatModifiers(flat_hp=4, hp_mult=1.5, stat_bonuses={PrimaryStat.SPEED: 2})
    ring = EquipmentItem(name="Ring", stat_bonuses={PrimaryStat.SPEED: 1}, flat_hp=10, crit_chance=2.5)
    modifiers = aggregate_equipment_bonuses([ring], base)
    assert modifiers.flat_hp == 14
    assert modifiers.hp_mult == 1.5
    assert modifiers.crit_chance == 2.5
    assert modifiers.stat_bonuses == {PrimaryStat.SPEED: 3}
    assert base.stat_bonuses == {PrimaryStat.SPEED: 2}


def test_buffs_and_debuffs_scale_primary_stats():
    ids = IdSequence()
    buff = Buff.from_effect(
        EffectDefinition(
            type=EffectType.BUFF,
            applies_to=EffectTarget.SELF,
            duration=2,
            value=0.5,
            target_stat=PrimaryStat.STRENGTH,
        ),
        "Test",
        ids,
    )
    debuff = Buff.from_effect(
        EffectDefinition(
            type=EffectType.DEBUFF,
            applies_to=EffectTarget.TARGET,
            duration=2,
            value=0.25,
            target_stat=PrimaryStat.SPEED,
        ),
        "Test",
        ids,
    )
    effective = apply_buffs_to_primary(PrimaryAttributes(strength=10, speed=10), [buff, debuff])
    assert effective.strength == 15
    assert effective.speed == 7


def test_negative_attribute_rejected():
    with pytest.raises(ValueError):
        PrimaryAttributes(willpower=-1)


def test_from_sequence_needs_nine_values():
    with pytest.raises(ValueError):
        PrimaryAttributes.from_sequence([1, 2, 3])
