"""
Combatants.

A `Combatant` owns its primary attributes, current HP and chakra, element,
its own skill copies and its active buffs. `Player` and `Enemy` add the data
each side carries outside of combat.
"""

from pydantic import BaseModel, Field

from ..core.constants import Clan, EffectType, ElementType, EnemyArchetype, Side
from ..core.formulas import DEFAULT_FORMULAS, StatFormulas
from ..core.utils import make_bar
from ..effects.buff import Buff, has_effect
from ..skills.skill import SkillInstance
from .stats import (
    NO_MODIFIERS,
    DerivedStats,
    EquipmentItem,
    PrimaryAttributes,
    StatModifiers,
    aggregate_equipment_bonuses,
    apply_buffs_to_primary,
    derive_stats,
)


class Combatant(BaseModel):
    """State shared by both sides of a battle."""

    name: str = Field(
        description="Display name.",
    )
    side: Side = Field(
        description="Which side of the battle the combatant fights on.",
    )
    primary: PrimaryAttributes = Field(
        description="Primary attributes before buffs.",
    )
    element: ElementType = Field(
        ElementType.PHYSICAL,
        description="Elemental affinity used when defending.",
    )
    skills: list[SkillInstance] = Field(
        default_factory=list,
        description="Owned skill copies with their own cooldowns.",
    )
    buffs: list[Buff] = Field(
        default_factory=list,
        description="Active status effects.",
    )
    current_hp: int = Field(
        0,
        description="Current HP, within [0, max_hp].",
    )
    current_chakra: int = Field(
        0,
        description="Current chakra, within [0, max_chakra].",
    )
    modifiers: StatModifiers = Field(
        default=NO_MODIFIERS,
        description="Equipment bonuses and resource multipliers.",
    )

    # ============================================================================
    # Stats
    # ============================================================================

    def effective_primary(self) -> PrimaryAttributes:
        """Primary attributes after BUFF and DEBUFF effects."""
        return apply_buffs_to_primary(self.primary, self.buffs)

    def stat_modifiers(self) -> StatModifiers:
        """Modifiers used when deriving stats."""
        return self.modifiers

    def derived(self, formulas: StatFormulas = DEFAULT_FORMULAS) -> DerivedStats:
        """Derived stats of the current effective attributes."""
        return derive_stats(self.effective_primary(), self.stat_modifiers(), formulas)

    def base_derived(self, formulas: StatFormulas = DEFAULT_FORMULAS) -> DerivedStats:
        """Derived stats ignoring active buffs."""
        return derive_stats(self.primary, self.stat_modifiers(), formulas)

    def restore(self, formulas: StatFormulas = DEFAULT_FORMULAS) -> None:
        """Fills HP and chakra and clears every status effect."""
        derived = self.base_derived(formulas)
        self.buffs = []
        self.current_hp = derived.max_hp
        self.current_chakra = derived.max_chakra
        for instance in self.skills:
            instance.current_cooldown = 0

    # ============================================================================
    # Resources
    # ============================================================================

    def set_hp(self, value: int, max_hp: int) -> None:
        self.current_hp = max(0, min(max_hp, value))

    def set_chakra(self, value: int, max_chakra: int) -> None:
        self.current_chakra = max(0, min(max_chakra, value))

    def is_alive(self) -> bool:
        return self.current_hp > 0

    def hp_ratio(self, formulas: StatFormulas = DEFAULT_FORMULAS) -> float:
        max_hp = self.derived(formulas).max_hp
        return self.current_hp / max_hp if max_hp > 0 else 0.0

    # ============================================================================
    # Status
    # ============================================================================

    def is_stunned(self) -> bool:
        return has_effect(self.buffs, EffectType.STUN)

    def is_confused(self) -> bool:
        return has_effect(self.buffs, EffectType.CONFUSION)

    def add_buff(self, buff: Buff) -> None:
        self.buffs.append(buff)

    # ============================================================================
    # Skills
    # ============================================================================

    def get_skill(self, skill_id: str) -> SkillInstance | None:
        return next((s for s in self.skills if s.id == skill_id), None)

    def usable_skills(self) -> list[SkillInstance]:
        """Skills that are off cooldown and affordable right now."""
        return [
            s
            for s in self.skills
            if s.is_ready() and s.can_afford(self.current_chakra, self.current_hp)
        ]

    def tick_cooldowns(self) -> None:
        for instance in self.skills:
            instance.tick_cooldown()

    def has_active_toggle(self, instance: SkillInstance) -> bool:
        return any(
            buff.is_permanent and buff.source == instance.name for buff in self.buffs
        )

    # ============================================================================
    # Display
    # ============================================================================

    def status_line(self, formulas: StatFormulas = DEFAULT_FORMULAS) -> str:
        derived = self.derived(formulas)
        hp_bar = make_bar(self.current_hp, derived.max_hp, color="green")
        chakra_bar = make_bar(self.current_chakra, derived.max_chakra, color="blue")
        effects = " ".join(str(buff) for buff in self.buffs)
        return (
            f"{self.side.emoji} {self.side.colorize(self.name):<30} "
            f"HP {self.current_hp:>4}/{derived.max_hp:<4} {hp_bar} "
            f"CK {self.current_chakra:>4}/{derived.max_chakra:<4} {chakra_bar} {effects}"
        )


class Player(Combatant):
    """The player's shinobi."""

    side: Side = Side.PLAYER
    clan: Clan = Field(
        description="The player's clan.",
    )
    level: int = Field(
        1,
        description="Character level.",
    )
    experience: int = Field(
        0,
        description="Experience points towards the next level.",
    )
    currency: int = Field(
        0,
        description="Ryo carried.",
    )
    equipment: list[EquipmentItem] = Field(
        default_factory=list,
        description="Equipped items.",
    )
    inventory: list[str] = Field(
        default_factory=list,
        description="Names of carried items.",
    )

    def stat_modifiers(self) -> StatModifiers:
        """Modifiers with the bonuses of every equipped item added."""
        if not self.equipment:
            return self.modifiers
        return aggregate_equipment_bonuses(self.equipment, self.modifiers)


class Enemy(Combatant):
    """An enemy shinobi."""

    side: Side = Side.ENEMY
    tier: str = Field(
        "Genin",
        description="Rank label.",
    )
    archetype: EnemyArchetype | None = Field(
        None,
        description="Template the enemy was generated from.",
    )
    is_boss: bool = Field(
        False,
        description="Boss flag.",
    )
    is_elite: bool = Field(
        False,
        description="Elite or ambush flag.",
    )
    drop_rate_bonus: float = Field(
        0.0,
        description="Bonus drop-rate multiplier granted on defeat.",
    )
