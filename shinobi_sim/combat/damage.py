"""
Damage calculator.

Resolves a single skill use into a final damage number: hit and evasion
rolls, base damage from the scaling stat, elemental effectiveness, critical
hits and defense mitigation by damage type and property.
"""

import math

from pydantic import BaseModel, Field

from ..character.stats import DerivedStats, PrimaryAttributes
from ..core.constants import (
    ELEMENTAL_CYCLE,
    AttackMethod,
    Clan,
    DamageProperty,
    ElementType,
)
from ..core.formulas import DEFAULT_RULES, CombatRules
from ..core.rng import Rng
from ..skills.skill import Skill


class DamageResult(BaseModel):
    """Outcome of one damage roll."""

    raw_damage: int = Field(
        0,
        description="Damage after element and crit, before defense.",
    )
    flat_reduction: float = Field(
        0.0,
        description="Damage removed by flat defense.",
    )
    percent_reduction: int = Field(
        0,
        description="Damage removed by percent defense.",
    )
    final_damage: int = Field(
        0,
        description="Damage after defense; 0 on a miss or evasion, else at least 1.",
    )
    is_crit: bool = False
    is_miss: bool = False
    is_evaded: bool = False
    element_multiplier: float = 1.0

    @property
    def landed(self) -> bool:
        return not (self.is_miss or self.is_evaded)


def element_multiplier(skill_element: ElementType, defender_element: ElementType) -> float:
    """
    Returns the effectiveness of an element against another.

    Only the five cyclic elements take part: each beats the next one in the
    cycle (1.5) and is resisted by the previous one (0.5). PHYSICAL and
    MENTAL are always neutral.

    Args:
        skill_element (ElementType): Element of the attacking skill.
        defender_element (ElementType): Element of the defender.

    Returns:
        float: 1.5, 0.5 or 1.0.

    """
    if not skill_element.is_cyclic:
        return 1.0
    if ELEMENTAL_CYCLE[skill_element] == defender_element:
        return 1.5
    if ELEMENTAL_CYCLE.get(defender_element) == skill_element:
        return 0.5
    return 1.0


def hit_chance(
    skill: Skill,
    attacker_derived: DerivedStats,
    defender_primary: PrimaryAttributes,
    rules: CombatRules = DEFAULT_RULES,
) -> float:
    """Returns the clamped hit chance (percent) of a non-AUTO skill."""
    if skill.attack_method == AttackMethod.MELEE:
        base = attacker_derived.melee_hit_rate
    else:
        base = attacker_derived.ranged_hit_rate
    chance = base - defender_primary.speed * rules.defender_speed_hit_penalty
    return max(rules.min_hit_chance, min(rules.max_hit_chance, chance))


def _base_damage(
    skill: Skill, attacker_primary: PrimaryAttributes, rules: CombatRules
) -> int:
    scaling_value = attacker_primary.get(skill.scaling_stat) or rules.missing_scaling_value
    return math.floor(scaling_value * skill.damage_mult)


def _apply_defense(
    damage: int,
    skill: Skill,
    defender_derived: DerivedStats,
    multiplier: float,
    rules: CombatRules,
) -> tuple[float, int, int]:
    """Returns (flat reduction, percent reduction, final damage)."""
    flat_def, percent_def = defender_derived.defense_for(skill.damage_type)

    # Super-effective hits ignore half of the percent defense.
    if multiplier > 1.0:
        percent_def *= 0.5
    if skill.penetration:
        percent_def *= 1 - skill.penetration

    flat_reduction = 0.0
    percent_reduction = 0
    remaining: float = damage

    if skill.damage_property in (DamageProperty.NORMAL, DamageProperty.ARMOR_BREAK):
        flat_reduction = min(flat_def, remaining * rules.flat_defense_damage_cap)
        remaining -= flat_reduction
    if skill.damage_property in (DamageProperty.NORMAL, DamageProperty.PIERCING):
        percent_reduction = math.floor(remaining * percent_def)
        remaining -= percent_reduction

    return flat_reduction, percent_reduction, max(1, math.floor(remaining))


def calculate_damage(
    attacker_primary: PrimaryAttributes,
    attacker_derived: DerivedStats,
    defender_primary: PrimaryAttributes,
    defender_derived: DerivedStats,
    skill: Skill,
    attacker_element: ElementType,
    defender_element: ElementType,
    rng: Rng,
    terrain_evasion_bonus: float = 0.0,
    rules: CombatRules = DEFAULT_RULES,
) -> DamageResult:
    """
    Rolls the damage of one skill use.

    Args:
        attacker_primary (PrimaryAttributes): Effective attributes of the attacker.
        attacker_derived (DerivedStats): Derived stats of the attacker.
        defender_primary (PrimaryAttributes): Effective attributes of the defender.
        defender_derived (DerivedStats): Derived stats of the defender.
        skill (Skill): The skill being used.
        attacker_element (ElementType): Element of the attacker (unused by the formula,
            the skill's own element decides effectiveness).
        defender_element (ElementType): Element of the defender.
        rng (Rng): Random source for the hit, evasion and crit rolls.
        terrain_evasion_bonus (float): Evasion added by the battlefield.
        rules (CombatRules): Combat rules.

    Returns:
        DamageResult: The rolled result.

    """
    if skill.attack_method != AttackMethod.AUTO:
        chance = hit_chance(skill, attacker_derived, defender_primary, rules)
        if rng.random() * 100 > chance:
            return DamageResult(is_miss=True)
        evasion = max(0.0, defender_derived.evasion + terrain_evasion_bonus)
        if rng.random() < evasion:
            return DamageResult(is_evaded=True)

    multiplier = element_multiplier(skill.element, defender_element)
    raw = math.floor(_base_damage(skill, attacker_primary, rules) * multiplier)

    crit_chance = attacker_derived.crit_chance + skill.crit_bonus
    if multiplier > 1.0:
        crit_chance += rules.super_effective_crit_bonus
    is_crit = rng.random() * 100 < crit_chance
    if is_crit:
        if skill.attack_method == AttackMethod.RANGED:
            crit_mult = attacker_derived.crit_damage_ranged
        else:
            crit_mult = attacker_derived.crit_damage_melee
        raw = math.floor(raw * crit_mult)

    flat_reduction, percent_reduction, final = _apply_defense(
        raw, skill, defender_derived, multiplier, rules
    )
    return DamageResult(
        raw_damage=raw,
        flat_reduction=flat_reduction,
        percent_reduction=percent_reduction,
        final_damage=final,
        is_crit=is_crit,
        element_multiplier=multiplier,
    )


def expected_damage(
    attacker_primary: PrimaryAttributes,
    defender_derived: DerivedStats,
    skill: Skill,
    defender_element: ElementType,
    rules: CombatRules = DEFAULT_RULES,
) -> int:
    """
    Planning value of a skill's damage.

    Same pipeline as `calculate_damage` with the hit landing and no crit.
    Utility skills are worth 0.
    """
    if skill.is_utility:
        return 0
    multiplier = element_multiplier(skill.element, defender_element)
    raw = math.floor(_base_damage(skill, attacker_primary, rules) * multiplier)
    return _apply_defense(raw, skill, defender_derived, multiplier, rules)[2]


def check_guts(
    current_hp: int, incoming_damage: int, guts_chance: float, rng: Rng
) -> tuple[bool, int]:
    """
    Applies damage with a chance to survive a lethal hit at 1 HP.

    Args:
        current_hp (int): HP before the hit.
        incoming_damage (int): Damage of the hit.
        guts_chance (float): Survival probability (0..1).
        rng (Rng): Random source.

    Returns:
        tuple[bool, int]: Whether the combatant survived, and the new HP.

    """
    remaining = current_hp - incoming_damage
    if remaining > 0:
        return True, remaining
    if rng.random() < guts_chance:
        return True, 1
    return False, 0


def resist_status(status_chance: float, status_resistance: float, rng: Rng) -> bool:
    """
    Rolls whether a status effect lands.

    Despite its name this returns True when the effect is APPLIED: the
    effective chance is the effect's chance reduced by the target's status
    resistance.
    """
    return rng.random() < status_chance * (1 - status_resistance)


def can_learn_skill(skill: Skill, intelligence: int, clan: Clan | None = None) -> tuple[bool, str]:
    """
    Checks the intelligence and clan requirements of a skill.

    Returns:
        tuple[bool, str]: Whether the skill can be learned, and why not.

    """
    if skill.required_int and intelligence < skill.required_int:
        return False, f"Requires {skill.required_int} Intelligence (you have {intelligence})"
    if skill.required_clan is not None and skill.required_clan != clan:
        return False, f"Requires the {skill.required_clan.display_name} clan"
    return True, ""

