"""
Stat model.

Converts the nine primary attributes into the derived combat stats. Derived
stats are a view recomputed on demand from primary attributes, equipment
and active buffs; they are never stored as the source of truth.
"""

import math
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from ..core.constants import DamageType, EffectType, PrimaryStat
from ..core.formulas import DEFAULT_FORMULAS, StatFormulas


class PrimaryAttributes(BaseModel):
    """The nine primary attributes of a combatant."""

    willpower: int = 10
    chakra: int = 10
    strength: int = 10
    spirit: int = 10
    intelligence: int = 10
    calmness: int = 10
    speed: int = 10
    accuracy: int = 10
    dexterity: int = 10

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        for stat in PrimaryStat:
            if self.get(stat) < 0:
                raise ValueError(f"{stat.value} must be non-negative")

    @classmethod
    def uniform(cls, value: int) -> "PrimaryAttributes":
        """Creates attributes with every stat set to the same value."""
        return cls(**{stat.value: value for stat in PrimaryStat})

    @classmethod
    def from_sequence(cls, values: Iterable[int]) -> "PrimaryAttributes":
        """Creates attributes from values listed in `PrimaryStat` order."""
        values = list(values)
        if len(values) != len(PrimaryStat):
            raise ValueError(f"expected {len(PrimaryStat)} values, got {len(values)}")
        return cls(**{stat.value: value for stat, value in zip(PrimaryStat, values)})

    def get(self, stat: PrimaryStat) -> int:
        return getattr(self, stat.value)

    def with_stat(self, stat: PrimaryStat, value: int) -> "PrimaryAttributes":
        return self.model_copy(update={stat.value: value})

    def scaled(self, multiplier: float) -> "PrimaryAttributes":
        """Multiplies every stat, flooring the results."""
        return PrimaryAttributes(
            **{stat.value: math.floor(self.get(stat) * multiplier) for stat in PrimaryStat}
        )

    def plus(self, bonuses: dict[PrimaryStat, int]) -> "PrimaryAttributes":
        """Adds per-stat bonuses, never going below zero."""
        return PrimaryAttributes(
            **{
                stat.value: max(0, self.get(stat) + bonuses.get(stat, 0))
                for stat in PrimaryStat
            }
        )


class StatModifiers(BaseModel):
    """
    Contextual modifiers of stat derivation.

    Holds the aggregated equipment bonuses and the resource multipliers granted
    by the exploration layer. Every multiplier defaults to 1.0.
    """

    model_config = ConfigDict(frozen=True)

    stat_bonuses: dict[PrimaryStat, int] = Field(default_factory=dict)
    flat_hp: int = 0
    flat_chakra: int = 0
    flat_physical_defense: int = 0
    flat_elemental_defense: int = 0
    flat_mental_defense: int = 0
    physical_defense_percent: float = 0.0
    elemental_defense_percent: float = 0.0
    mental_defense_percent: float = 0.0
    crit_chance: float = 0.0
    crit_damage: float = 0.0
    hp_mult: float = 1.0
    damage_out: float = 1.0
    speed_mult: float = 1.0
    chakra_cost_mult: float = 1.0
    defense_mult: float = 1.0
    xp_gain_mult: float = 1.0


NO_MODIFIERS = StatModifiers()

# Modifier fields that equipment adds to rather than multiplies.
_ADDITIVE_FIELDS = (
    "flat_hp",
    "flat_chakra",
    "flat_physical_defense",
    "flat_elemental_defense",
    "flat_mental_defense",
    "physical_defense_percent",
    "elemental_defense_percent",
    "mental_defense_percent",
    "crit_chance",
    "crit_damage",
)


class EquipmentItem(BaseModel):
    """A piece of equipment granting stat bonuses."""

    model_config = ConfigDict(frozen=True)

    name: str
    stat_bonuses: dict[PrimaryStat, int] = Field(default_factory=dict)
    flat_hp: int = 0
    flat_chakra: int = 0
    flat_physical_defense: int = 0
    flat_elemental_defense: int = 0
    flat_mental_defense: int = 0
    physical_defense_percent: float = 0.0
    elemental_defense_percent: float = 0.0
    mental_defense_percent: float = 0.0
    crit_chance: float = 0.0
    crit_damage: float = 0.0


class DerivedStats(BaseModel):
    """Derived combat stats."""

    model_config = ConfigDict(frozen=True)

    max_hp: int
    max_chakra: int
    hp_regen: int
    chakra_regen: int

    physical_defense_flat: int
    elemental_defense_flat: int
    mental_defense_flat: int
    physical_defense_percent: float
    elemental_defense_percent: float
    mental_defense_percent: float

    status_resistance: float
    guts_chance: float

    melee_hit_rate: float
    ranged_hit_rate: float
    evasion: float

    crit_chance: float
    crit_damage_melee: float
    crit_damage_ranged: float

    initiative: float

    def defense_for(self, damage_type: DamageType) -> tuple[int, float]:
        """
        Returns the (flat, percent) defense that mitigates a damage type.

        TRUE damage is never mitigated.
        """
        if damage_type == DamageType.PHYSICAL:
            return self.physical_defense_flat, self.physical_defense_percent
        if damage_type == DamageType.ELEMENTAL:
            return self.elemental_defense_flat, self.elemental_defense_percent
        if damage_type == DamageType.MENTAL:
            return self.mental_defense_flat, self.mental_defense_percent
        return 0, 0.0


def aggregate_equipment_bonuses(
    items: Iterable[EquipmentItem],
    base: StatModifiers = NO_MODIFIERS,
) -> StatModifiers:
    """
    Sums the bonuses of every equipped item on top of existing modifiers.

    Args:
        items (Iterable[EquipmentItem]): Equipped items.
        base (StatModifiers): Modifiers the bonuses are added to. Its multipliers are kept.

    Returns:
        StatModifiers: The base modifiers plus the summed equipment bonuses.

    """
    stat_bonuses: dict[PrimaryStat, int] = dict(base.stat_bonuses)
    totals: dict[str, float] = {key: getattr(base, key) for key in _ADDITIVE_FIELDS}
    for item in items:
        for stat, bonus in item.stat_bonuses.items():
            stat_bonuses[stat] = stat_bonuses.get(stat, 0) + bonus
        for key in totals:
            totals[key] += getattr(item, key)
    updates: dict[str, Any] = {
        key: int(value) if key.startswith("flat_") else value for key, value in totals.items()
    }
    return base.model_copy(update={"stat_bonuses": stat_bonuses, **updates})


def apply_equipment(primary: PrimaryAttributes, modifiers: StatModifiers) -> PrimaryAttributes:
    """Returns the primary attributes with equipment stat bonuses added."""
    if not modifiers.stat_bonuses:
        return primary
    return primary.plus(modifiers.stat_bonuses)


def apply_buffs_to_primary(primary: PrimaryAttributes, buffs: Iterable[Any]) -> PrimaryAttributes:
    """
    Applies BUFF and DEBUFF effects to the primary attributes.

    Each buff scales its target stat by (1 + value), each debuff by
    (1 - value); results are floored.

    Args:
        primary (PrimaryAttributes): Attributes before buffs.
        buffs (Iterable[Buff]): Active buffs of the combatant.

    Returns:
        PrimaryAttributes: The effective attributes.

    """
    effective = primary
    for buff in buffs:
        if buff.type not in (EffectType.BUFF, EffectType.DEBUFF):
            continue
        if buff.target_stat is None or not buff.value:
            continue
        current = effective.get(buff.target_stat)
        if buff.type == EffectType.BUFF:
            scaled = math.floor(current * (1 + buff.value))
        else:
            scaled = math.floor(current * (1 - buff.value))
        effective = effective.with_stat(buff.target_stat, max(0, scaled))
    return effective


def derive_stats(
    primary: PrimaryAttributes,
    modifiers: StatModifiers | None = None,
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> DerivedStats:
    """
    Computes derived combat stats from primary attributes.

    Pure and deterministic. Equipment stat bonuses are added to the primary
    attributes before any formula is evaluated.

    Args:
        primary (PrimaryAttributes): The combatant's primary attributes.
        modifiers (StatModifiers | None): Equipment bonuses and resource multipliers.
        formulas (StatFormulas): Balance coefficients.

    Returns:
        DerivedStats: The derived stats.

    """
    mods = modifiers or NO_MODIFIERS
    f = formulas
    p = apply_equipment(primary, mods)

    max_hp = math.floor(
        (f.hp_base + p.willpower * f.hp_per_willpower + mods.flat_hp) * mods.hp_mult
    )
    max_chakra = f.chakra_base + p.chakra * f.chakra_per_chakra + mods.flat_chakra
    hp_regen = math.floor(
        max_hp * f.hp_regen_percent * (p.willpower / f.hp_regen_willpower_divisor)
    )
    chakra_regen = math.floor(p.intelligence * f.chakra_regen_per_int)

    physical_flat = math.floor(
        (math.floor(p.strength * f.flat_phys_def_per_str) + mods.flat_physical_defense)
        * mods.defense_mult
    )
    elemental_flat = math.floor(
        (math.floor(p.spirit * f.flat_elem_def_per_spirit) + mods.flat_elemental_defense)
        * mods.defense_mult
    )
    mental_flat = math.floor(
        (math.floor(p.calmness * f.flat_mental_def_per_calm) + mods.flat_mental_defense)
        * mods.defense_mult
    )

    def percent(stat: int, cap: int, bonus: float) -> float:
        ratio = stat / (stat + cap) if stat + cap > 0 else 0.0
        return min(f.max_percent_defense, ratio + bonus) * mods.defense_mult

    physical_percent = percent(p.strength, f.physical_def_soft_cap, mods.physical_defense_percent)
    elemental_percent = percent(p.spirit, f.elemental_def_soft_cap, mods.elemental_defense_percent)
    mental_percent = percent(p.calmness, f.mental_def_soft_cap, mods.mental_defense_percent)

    status_resistance = p.calmness / (p.calmness + f.status_resist_soft_cap)
    guts_chance = p.willpower / (p.willpower + f.guts_soft_cap)

    effective_speed = p.speed * mods.speed_mult
    melee_hit_rate = f.base_hit_chance + effective_speed * f.hit_per_stat
    ranged_hit_rate = f.base_hit_chance + p.accuracy * f.hit_per_stat
    evasion = (
        effective_speed / (effective_speed + f.evasion_soft_cap)
        if effective_speed + f.evasion_soft_cap > 0
        else 0.0
    )

    crit_chance = min(
        f.max_crit_chance,
        f.base_crit_chance + p.dexterity * f.crit_per_dex + mods.crit_chance,
    )
    crit_damage_melee = f.base_crit_mult + mods.crit_damage
    crit_damage_ranged = (
        f.base_crit_mult + p.accuracy * f.ranged_crit_bonus_per_acc + mods.crit_damage
    )

    initiative = f.init_base + effective_speed * f.init_per_speed

    return DerivedStats(
        max_hp=max_hp,
        max_chakra=max_chakra,
        hp_regen=hp_regen,
        chakra_regen=chakra_regen,
        physical_defense_flat=physical_flat,
        elemental_defense_flat=elemental_flat,
        mental_defense_flat=mental_flat,
        physical_defense_percent=physical_percent,
        elemental_defense_percent=elemental_percent,
        mental_defense_percent=mental_percent,
        status_resistance=status_resistance,
        guts_chance=guts_chance,
        melee_hit_rate=melee_hit_rate,
        ranged_hit_rate=ranged_hit_rate,
        evasion=evasion,
        crit_chance=crit_chance,
        crit_damage_melee=crit_damage_melee,
        crit_damage_ranged=crit_damage_ranged,
        initiative=initiative,
    )
