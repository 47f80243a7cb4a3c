"""
Skill definitions.

A `Skill` is an immutable template shared by every holder. Each combatant owns
`SkillInstance` copies that carry the only mutable per-holder state, the
remaining cooldown.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.constants import (
    AttackMethod,
    Clan,
    DamageProperty,
    DamageType,
    EffectTarget,
    EffectType,
    ElementType,
    PrimaryStat,
    SkillTier,
)


class EffectDefinition(BaseModel):
    """A status effect template attached to a skill."""

    model_config = ConfigDict(frozen=True)

    type: EffectType = Field(
        description="The kind of effect.",
    )
    applies_to: EffectTarget = Field(
        description="Whether the effect lands on the caster or on the target.",
    )
    duration: int = Field(
        description="Duration in turns, -1 for permanent (toggle) effects.",
    )
    chance: float = Field(
        1.0,
        description="Probability (0..1) that the effect is applied on a hit.",
    )
    value: float | None = Field(
        default=None,
        description=(
            "Magnitude of the effect. Stat ratio for BUFF/DEBUFF, damage per "
            "turn for DoT, capacity for SHIELD, ratio for REFLECTION/CURSE."
        ),
    )
    target_stat: PrimaryStat | None = Field(
        default=None,
        description="Primary stat modified by BUFF/DEBUFF effects.",
    )
    damage_type: DamageType | None = Field(
        default=None,
        description="Damage type of DoT ticks.",
    )
    damage_property: DamageProperty | None = Field(
        default=None,
        description="Damage property of DoT ticks.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not 0.0 <= self.chance <= 1.0:
            raise ValueError(f"chance must be within [0, 1], got {self.chance}")
        if self.duration == 0 or self.duration < -1:
            raise ValueError(f"duration must be positive or -1, got {self.duration}")
        if self.type in (EffectType.BUFF, EffectType.DEBUFF) and self.target_stat is None:
            raise ValueError(f"{self.type} effects need a target_stat")

    @property
    def is_permanent(self) -> bool:
        return self.duration == -1


class Skill(BaseModel):
    """Immutable skill template."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique registry id.")
    name: str = Field(description="Display name.")
    tier: SkillTier = Field(description="Progression tier.")
    description: str = Field("", description="Short flavour description.")
    chakra_cost: int = Field(0, description="Chakra spent on use.")
    hp_cost: int = Field(0, description="HP spent on use.")
    cooldown: int = Field(0, description="Turns before the skill can be used again.")
    damage_mult: float = Field(description="Multiplier applied to the scaling stat.")
    scaling_stat: PrimaryStat = Field(description="Primary stat that drives damage.")
    damage_type: DamageType = Field(description="Defense pool that mitigates the hit.")
    damage_property: DamageProperty = Field(
        DamageProperty.NORMAL,
        description="Which part of the defense the hit bypasses.",
    )
    attack_method: AttackMethod = Field(description="MELEE, RANGED or AUTO (never misses).")
    element: ElementType = Field(description="Element used for effectiveness.")
    required_int: int = Field(0, description="Minimum intelligence to learn the skill.")
    required_clan: Clan | None = Field(None, description="Clan restriction, if any.")
    effects: tuple[EffectDefinition, ...] = Field(
        default=(),
        description="Status effects applied when the skill lands.",
    )
    crit_bonus: float = Field(0.0, description="Additional crit chance in percent points.")
    penetration: float = Field(0.0, description="Fraction of percent defense ignored.")
    is_toggle: bool = Field(False, description="Toggle skills keep their buffs while upkeep is paid.")
    upkeep_cost: int = Field(0, description="Chakra paid each turn while the toggle is active.")

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if self.chakra_cost < 0 or self.hp_cost < 0 or self.cooldown < 0:
            raise ValueError(f"costs and cooldown of '{self.id}' must be non-negative")
        if not 0.0 <= self.penetration <= 1.0:
            raise ValueError(f"penetration of '{self.id}' must be within [0, 1]")

    @property
    def is_utility(self) -> bool:
        """Skills without a damage multiplier only apply their effects."""
        return self.damage_mult <= 0

    def has_effect(self, *types: EffectType) -> bool:
        return any(effect.type in types for effect in self.effects)

    @property
    def colored_name(self) -> str:
        return f"[{self.tier.color}]{self.name}[/]"


class SkillInstance(BaseModel):
    """A combatant's own copy of a skill, tracking its cooldown."""

    skill: Skill = Field(description="The shared skill template.")
    current_cooldown: int = Field(0, description="Turns until the skill is ready.")

    @property
    def id(self) -> str:
        return self.skill.id

    @property
    def name(self) -> str:
        return self.skill.name

    def is_ready(self) -> bool:
        return self.current_cooldown <= 0

    def can_afford(self, chakra: int, hp: int) -> bool:
        """A skill is affordable when chakra covers it and the HP cost leaves at least 1 HP."""
        return chakra >= self.skill.chakra_cost and hp > self.skill.hp_cost

    def start_cooldown(self) -> None:
        # The end-of-turn decrement runs in the same turn, hence the +1.
        self.current_cooldown = self.skill.cooldown + 1

    def tick_cooldown(self) -> None:
        self.current_cooldown = max(0, self.current_cooldown - 1)
