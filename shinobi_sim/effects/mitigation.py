"""
Damage mitigation pipeline.

Applies the defender's active buffs to an incoming hit in a fixed order:

1. INVULNERABILITY blocks everything.
2. REFLECTION returns a share of the hit, computed before any curse bonus.
3. CURSE amplifies the hit.
4. SHIELD absorbs what it can and breaks when depleted.
"""

import math

from pydantic import BaseModel, Field

from ..core.constants import EffectType
from .buff import Buff, find_effect, has_effect


class MitigationResult(BaseModel):
    """Outcome of running a hit through the mitigation pipeline."""

    final_damage: int = Field(
        description="Damage that actually reaches the target's HP.",
    )
    reflected_damage: int = Field(
        0,
        description="Damage sent back to the attacker.",
    )
    updated_buffs: list[Buff] = Field(
        default_factory=list,
        description="The target's buffs after shield consumption.",
    )
    messages: list[str] = Field(
        default_factory=list,
        description="Short descriptions of what happened.",
    )


def apply_mitigation(target_buffs: list[Buff], incoming_damage: int) -> MitigationResult:
    """
    Runs incoming damage through the target's protective buffs.

    The input list is left untouched; a damaged shield is replaced by a copy
    with reduced capacity and a broken shield is dropped.

    Args:
        target_buffs (list[Buff]): Active buffs of the target.
        incoming_damage (int): Damage before mitigation.

    Returns:
        MitigationResult: Final and reflected damage plus the updated buffs.

    """
    buffs = list(target_buffs)
    messages: list[str] = []
    damage = incoming_damage

    if has_effect(buffs, EffectType.INVULNERABILITY):
        return MitigationResult(
            final_damage=0,
            updated_buffs=buffs,
            messages=["Invulnerable"],
        )

    reflected = 0
    reflection = find_effect(buffs, EffectType.REFLECTION)
    if reflection is not None and reflection.value:
        reflected = math.floor(damage * reflection.value)
        if reflected > 0:
            messages.append(f"Reflected {reflected}")

    curse = find_effect(buffs, EffectType.CURSE)
    if curse is not None and curse.value:
        bonus = math.floor(damage * curse.value)
        damage += bonus
        if bonus > 0:
            messages.append(f"Curse +{bonus}")

    shield = find_effect(buffs, EffectType.SHIELD)
    if shield is not None and damage > 0:
        capacity = shield.value or 0
        index = buffs.index(shield)
        if capacity > damage:
            buffs[index] = shield.model_copy(update={"value": capacity - damage})
            messages.append(f"Shield absorbed {damage}")
            damage = 0
        else:
            buffs.pop(index)
            absorbed = math.floor(capacity)
            damage -= absorbed
            messages.append(f"Shield broke after absorbing {absorbed}")

    return MitigationResult(
        final_damage=max(0, math.floor(damage)),
        reflected_damage=reflected,
        updated_buffs=buffs,
        messages=messages,
    )
