"""
Buff lifecycle.

Start-of-turn processing of active buffs: damage over time, regeneration and
duration ticking.
"""

import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from ..core.constants import PERMANENT_DURATION, DamageProperty, DamageType, EffectType
from ..core.formulas import DEFAULT_RULES, CombatRules
from .buff import Buff
from .mitigation import apply_mitigation

if TYPE_CHECKING:
    from ..character.stats import DerivedStats


class DotTick(BaseModel):
    """Outcome of one round of DoT and regeneration on a combatant."""

    new_hp: int = Field(
        description="HP after DoT and regeneration, within [0, max_hp].",
    )
    dot_damage: int = Field(
        0,
        description="Total DoT damage that reached the combatant's HP.",
    )
    healed: int = Field(
        0,
        description="Total HP restored by REGEN effects.",
    )
    updated_buffs: list[Buff] = Field(
        default_factory=list,
        description="Buffs after shield consumption and duration ticking.",
    )
    messages: list[str] = Field(
        default_factory=list,
    )


def tick_durations(buffs: list[Buff]) -> list[Buff]:
    """
    Advances every buff by one turn.

    Permanent buffs are kept unchanged, buffs with more than one turn left
    are kept with their duration decremented, everything else expires.

    Args:
        buffs (list[Buff]): Active buffs.

    Returns:
        list[Buff]: The surviving buffs, as new objects where decremented.

    """
    ticked: list[Buff] = []
    for buff in buffs:
        if buff.duration == PERMANENT_DURATION:
            ticked.append(buff)
        elif buff.duration > 1:
            ticked.append(buff.model_copy(update={"duration": buff.duration - 1}))
    return ticked


def calculate_dot_damage(
    value: float,
    damage_type: DamageType | None,
    damage_property: DamageProperty | None,
    defender_derived: "DerivedStats",
    rules: CombatRules = DEFAULT_RULES,
) -> int:
    """
    Computes the damage of one DoT tick after the defender's defenses.

    DoTs only feel part of the defense: flat defense is halved and may not
    remove more than 40% of the tick, percent defense is halved. Untyped
    DoTs are PHYSICAL/NORMAL.

    Args:
        value (float): Damage of the tick before defense.
        damage_type (DamageType | None): Damage type of the tick.
        damage_property (DamageProperty | None): Damage property of the tick.
        defender_derived (DerivedStats): Derived stats of the affected combatant.
        rules (CombatRules): Combat rules holding the DoT factors.

    Returns:
        int: The tick damage, at least 1.

    """
    damage_type = damage_type or DamageType.PHYSICAL
    damage_property = damage_property or DamageProperty.NORMAL
    if damage_type == DamageType.TRUE:
        return max(1, math.floor(value))

    flat_def, percent_def = defender_derived.defense_for(damage_type)
    damage = float(value)

    if damage_property in (DamageProperty.NORMAL, DamageProperty.ARMOR_BREAK):
        damage -= min(
            flat_def * rules.dot_flat_defense_factor,
            damage * rules.dot_flat_damage_cap,
        )
    if damage_property in (DamageProperty.NORMAL, DamageProperty.PIERCING):
        damage -= math.floor(damage * percent_def * rules.dot_percent_defense_factor)

    return max(1, math.floor(damage))


def process_dot_and_regen(
    buffs: list[Buff],
    current_hp: int,
    max_hp: int,
    derived: "DerivedStats",
    rules: CombatRules = DEFAULT_RULES,
) -> DotTick:
    """
    Applies every DoT and REGEN buff once, then ticks durations.

    Each DoT tick goes through the combatant's own mitigation pipeline, so
    shields absorb DoT and a curse amplifies it. Reflection has nobody to
    hit and is ignored here.

    Args:
        buffs (list[Buff]): Active buffs of the combatant.
        current_hp (int): HP before processing.
        max_hp (int): Upper bound for regeneration.
        derived (DerivedStats): Derived stats used for DoT defense.
        rules (CombatRules): Combat rules holding the DoT factors.

    Returns:
        DotTick: New HP, damage taken, HP healed and the updated buffs.

    """
    hp = current_hp
    updated = list(buffs)
    messages: list[str] = []
    dot_total = 0
    healed_total = 0

    for buff in buffs:
        if buff.type.is_damage_over_time and buff.value:
            raw = calculate_dot_damage(
                buff.value,
                buff.effect.damage_type,
                buff.effect.damage_property,
                derived,
                rules,
            )
            mitigation = apply_mitigation(updated, raw)
            updated = mitigation.updated_buffs
            hp -= mitigation.final_damage
            dot_total += mitigation.final_damage
            if mitigation.final_damage > 0:
                messages.append(f"{buff.name} deals {mitigation.final_damage}")
            else:
                messages.append(f"{buff.name} blocked")
        elif buff.type == EffectType.REGEN and buff.value:
            before = max(0, hp)
            hp = min(max_hp, before + math.floor(buff.value))
            healed_total += hp - before
            messages.append(f"{buff.name} restores {hp - before}")

    return DotTick(
        new_hp=max(0, min(max_hp, hp)),
        dot_damage=dot_total,
        healed=healed_total,
        updated_buffs=tick_durations(updated),
        messages=messages,
    )
