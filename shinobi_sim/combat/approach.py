"""
Pre-combat approaches.

An approach is rolled once before a battle and may grant the player an
opening: acting first, a first-hit multiplier, buffs on the player, debuffs
on the enemy, lost enemy HP, or skipping the fight altogether.

Two profiles exist. The simulation profile is the balance-testing variant;
the live profile is the one used by the interactive encounter. Their stealth
tunings differ and are kept separate on purpose.
"""

import math
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..character.combatant import Enemy, Player
from ..character.stats import PrimaryAttributes
from ..core.constants import ApproachType, EffectTarget, EffectType, PrimaryStat, TerrainType
from ..core.formulas import (
    DEFAULT_FORMULAS,
    LIVE_APPROACH,
    SIMULATION_APPROACH,
    ApproachTuning,
    StatFormulas,
)
from ..core.rng import Rng
from ..core.utils import IdSequence
from ..effects.buff import Buff
from ..skills.skill import EffectDefinition
from .terrain import TerrainDefinition, stealth_bonus

# Simulation profile: success chance = base + stat * factor, capped.
SIMULATION_APPROACH_MAX_CHANCE = 95.0
SIMULATION_APPROACH_CHANCES: Mapping[ApproachType, tuple[float, PrimaryStat, float]] = MappingProxyType(
    {
        ApproachType.STEALTH_AMBUSH: (40.0, PrimaryStat.SPEED, 1.5),
        ApproachType.GENJUTSU_SETUP: (35.0, PrimaryStat.INTELLIGENCE, 2.0),
        ApproachType.ENVIRONMENTAL_TRAP: (45.0, PrimaryStat.DEXTERITY, 1.2),
        ApproachType.SHADOW_BYPASS: (20.0, PrimaryStat.CALMNESS, 1.5),
    }
)
SIMULATION_GENJUTSU_CONFUSION_TURNS = 3
SIMULATION_TRAP_HP_MULTIPLIER = 0.8


class ApproachResult(BaseModel):
    """Rolled outcome of an approach, ready to be applied to the combatants."""

    approach: ApproachType
    success: bool
    success_chance: float = Field(
        description="Success chance in percent.",
    )
    skip_combat: bool = False
    guaranteed_first: bool = False
    initiative_bonus: int = 0
    first_hit_multiplier: float = 1.0
    enemy_hp_multiplier: float = Field(
        1.0,
        description="Enemy HP becomes floor(hp * multiplier).",
    )
    enemy_hp_reduction: float = Field(
        0.0,
        description="Enemy loses floor(hp * reduction) HP, never going below 1.",
    )
    player_buffs: list[EffectDefinition] = Field(default_factory=list)
    enemy_debuffs: list[EffectDefinition] = Field(default_factory=list)
    chakra_cost: int = 0
    hp_cost: int = 0
    xp_multiplier: float = 1.0

    @property
    def description(self) -> str:
        outcome = "succeeded" if self.success else "failed"
        return f"{self.approach.display_name} {outcome} ({self.success_chance:.0f}%)"


def _no_opening(approach: ApproachType, success: bool, chance: float) -> ApproachResult:
    return ApproachResult(approach=approach, success=success, success_chance=chance)


# ============================================================================
# Simulation profile
# ============================================================================


def simulated_success_chance(approach: ApproachType, primary: PrimaryAttributes) -> float:
    """Returns the simulation success chance of an approach, in percent."""
    if approach == ApproachType.FRONTAL_ASSAULT:
        return 100.0
    base, stat, factor = SIMULATION_APPROACH_CHANCES[approach]
    return min(SIMULATION_APPROACH_MAX_CHANCE, base + primary.get(stat) * factor)


def resolve_simulated_approach(
    approach: ApproachType,
    primary: PrimaryAttributes,
    rng: Rng,
    tuning: ApproachTuning = SIMULATION_APPROACH,
) -> ApproachResult:
    """
    Rolls an approach with the balance-testing profile.

    Args:
        approach (ApproachType): The chosen approach.
        primary (PrimaryAttributes): The player's attributes.
        rng (Rng): Random source.
        tuning (ApproachTuning): Stealth coefficients.

    Returns:
        ApproachResult: The rolled outcome. Bypass never affects the battle.

    """
    chance = simulated_success_chance(approach, primary)
    if approach == ApproachType.FRONTAL_ASSAULT:
        return _no_opening(approach, True, chance)

    success = rng.random() * 100 < chance
    if not success:
        return _no_opening(approach, False, chance)

    if approach == ApproachType.STEALTH_AMBUSH:
        return ApproachResult(
            approach=approach,
            success=True,
            success_chance=chance,
            guaranteed_first=tuning.stealth_guaranteed_first,
            initiative_bonus=tuning.stealth_initiative_bonus,
            first_hit_multiplier=tuning.stealth_first_hit_multiplier,
        )
    if approach == ApproachType.GENJUTSU_SETUP:
        return ApproachResult(
            approach=approach,
            success=True,
            success_chance=chance,
            guaranteed_first=True,
            enemy_debuffs=[
                EffectDefinition(
                    type=EffectType.CONFUSION,
                    applies_to=EffectTarget.TARGET,
                    duration=SIMULATION_GENJUTSU_CONFUSION_TURNS,
                )
            ],
        )
    if approach == ApproachType.ENVIRONMENTAL_TRAP:
        return ApproachResult(
            approach=approach,
            success=True,
            success_chance=chance,
            enemy_hp_multiplier=SIMULATION_TRAP_HP_MULTIPLIER,
        )
    return _no_opening(approach, True, chance)


# ============================================================================
# Live profile
# ============================================================================


class ApproachEffects(BaseModel):
    """What an approach does on success or failure."""

    model_config = ConfigDict(frozen=True)

    initiative_bonus: int = 0
    guaranteed_first: bool = False
    first_hit_multiplier: float = 1.0
    player_buffs: tuple[EffectDefinition, ...] = ()
    enemy_debuffs: tuple[EffectDefinition, ...] = ()
    skip_combat: bool = False
    enemy_hp_reduction: float = 0.0
    chakra_cost: int = 0
    hp_cost: int = 0
    xp_multiplier: float = 1.0


NO_EFFECTS = ApproachEffects()


class ApproachDefinition(BaseModel):
    """A live approach: how its success chance is computed and what it does."""

    model_config = ConfigDict(frozen=True)

    type: ApproachType
    name: str
    description: str = ""
    base_chance: float
    scaling_stat: PrimaryStat = PrimaryStat.STRENGTH
    scaling_factor: float = 0.0
    terrain_bonus: bool = False
    max_chance: float = 100.0
    min_stat: tuple[PrimaryStat, int] | None = None
    allowed_terrains: frozenset[TerrainType] | None = None
    success_effects: ApproachEffects = NO_EFFECTS
    failure_effects: ApproachEffects = NO_EFFECTS

    def success_chance(self, primary: PrimaryAttributes, terrain_stealth: int = 0) -> float:
        chance = self.base_chance + primary.get(self.scaling_stat) * self.scaling_factor
        if self.terrain_bonus:
            chance += terrain_stealth
        return min(self.max_chance, max(0.0, chance))


def _stealth_definition(tuning: ApproachTuning) -> ApproachDefinition:
    return ApproachDefinition(
        type=ApproachType.STEALTH_AMBUSH,
        name="Silent Strike",
        description="Move through the shadows and strike first.",
        base_chance=40,
        scaling_stat=PrimaryStat.DEXTERITY,
        scaling_factor=1.5,
        terrain_bonus=True,
        max_chance=95,
        min_stat=(PrimaryStat.SPEED, 12),
        success_effects=ApproachEffects(
            initiative_bonus=tuning.stealth_initiative_bonus,
            guaranteed_first=tuning.stealth_guaranteed_first,
            first_hit_multiplier=tuning.stealth_first_hit_multiplier,
            player_buffs=(
                EffectDefinition(
                    type=EffectType.BUFF,
                    applies_to=EffectTarget.SELF,
                    target_stat=PrimaryStat.DEXTERITY,
                    value=tuning.stealth_dex_buff,
                    duration=1,
                ),
            ),
            enemy_debuffs=(
                EffectDefinition(
                    type=EffectType.STUN,
                    applies_to=EffectTarget.TARGET,
                    duration=1,
                    chance=tuning.stealth_stun_chance,
                ),
            ),
            xp_multiplier=1.15,
        ),
    )


APPROACH_DEFINITIONS: Mapping[ApproachType, ApproachDefinition] = MappingProxyType(
    {
        ApproachType.FRONTAL_ASSAULT: ApproachDefinition(
            type=ApproachType.FRONTAL_ASSAULT,
            name="Frontal Assault",
            description="Face the enemy directly.",
            base_chance=100,
        ),
        ApproachType.STEALTH_AMBUSH: _stealth_definition(LIVE_APPROACH),
        ApproachType.GENJUTSU_SETUP: ApproachDefinition(
            type=ApproachType.GENJUTSU_SETUP,
            name="Mind Trap",
            description="Weave an illusion before engaging.",
            base_chance=35,
            scaling_stat=PrimaryStat.INTELLIGENCE,
            scaling_factor=2.0,
            max_chance=95,
            min_stat=(PrimaryStat.CALMNESS, 15),
            success_effects=ApproachEffects(
                initiative_bonus=10,
                player_buffs=(
                    EffectDefinition(
                        type=EffectType.BUFF,
                        applies_to=EffectTarget.SELF,
                        target_stat=PrimaryStat.CALMNESS,
                        value=0.2,
                        duration=3,
                    ),
                ),
                enemy_debuffs=(
                    EffectDefinition(
                        type=EffectType.CONFUSION,
                        applies_to=EffectTarget.TARGET,
                        duration=2,
                    ),
                    EffectDefinition(
                        type=EffectType.DEBUFF,
                        applies_to=EffectTarget.TARGET,
                        target_stat=PrimaryStat.SPEED,
                        value=0.30,
                        duration=3,
                    ),
                ),
                chakra_cost=20,
                xp_multiplier=1.2,
            ),
            failure_effects=ApproachEffects(chakra_cost=20),
        ),
        ApproachType.ENVIRONMENTAL_TRAP: ApproachDefinition(
            type=ApproachType.ENVIRONMENTAL_TRAP,
            name="Terrain Trap",
            description="Spring a trap that wounds the enemy before combat.",
            base_chance=45,
            scaling_stat=PrimaryStat.ACCURACY,
            scaling_factor=1.2,
            max_chance=90,
            min_stat=(PrimaryStat.INTELLIGENCE, 14),
            allowed_terrains=frozenset(
                {TerrainType.SWAMP, TerrainType.ALLEYWAY, TerrainType.WATERFALL}
            ),
            success_effects=ApproachEffects(
                initiative_bonus=5,
                enemy_debuffs=(
                    EffectDefinition(
                        type=EffectType.DEBUFF,
                        applies_to=EffectTarget.TARGET,
                        target_stat=PrimaryStat.STRENGTH,
                        value=0.15,
                        duration=3,
                    ),
                ),
                enemy_hp_reduction=0.20,
                xp_multiplier=1.25,
            ),
        ),
        ApproachType.SHADOW_BYPASS: ApproachDefinition(
            type=ApproachType.SHADOW_BYPASS,
            name="Shadow Passage",
            description="Slip past the encounter entirely. No XP.",
            base_chance=30,
            scaling_stat=PrimaryStat.SPEED,
            scaling_factor=1.0,
            terrain_bonus=True,
            max_chance=95,
            min_stat=(PrimaryStat.SPEED, 35),
            success_effects=ApproachEffects(skip_combat=True, chakra_cost=30, xp_multiplier=0.0),
            failure_effects=ApproachEffects(chakra_cost=30),
        ),
    }
)


def meets_approach_requirements(
    approach: ApproachType,
    primary: PrimaryAttributes,
    terrain: TerrainDefinition | None = None,
    is_elite_or_boss: bool = False,
) -> tuple[bool, str]:
    """
    Checks whether the player may attempt an approach.

    Returns:
        tuple[bool, str]: Whether the approach is available, and why not.

    """
    definition = APPROACH_DEFINITIONS[approach]
    if approach == ApproachType.SHADOW_BYPASS and is_elite_or_boss:
        return False, "Cannot bypass Elite or Boss encounters"
    if definition.min_stat is not None:
        stat, value = definition.min_stat
        if primary.get(stat) < value:
            return False, f"Requires {stat.short_name} {value} (you have {primary.get(stat)})"
    if definition.allowed_terrains is not None:
        if terrain is None or terrain.type not in definition.allowed_terrains:
            return False, "Not available on this terrain"
    return True, ""


def resolve_live_approach(
    approach: ApproachType,
    primary: PrimaryAttributes,
    terrain: TerrainDefinition | None,
    rng: Rng,
) -> ApproachResult:
    """
    Rolls an approach with the live profile.

    Success when a d100 roll is at most the success chance. Each approach
    buff or debuff then rolls its own chance.

    Args:
        approach (ApproachType): The chosen approach.
        primary (PrimaryAttributes): The player's effective attributes.
        terrain (TerrainDefinition | None): Battlefield, for the stealth bonus.
        rng (Rng): Random source.

    Returns:
        ApproachResult: The rolled outcome.

    """
    definition = APPROACH_DEFINITIONS[approach]
    chance = definition.success_chance(primary, stealth_bonus(terrain))
    success = rng.d100() <= chance
    effects = definition.success_effects if success else definition.failure_effects

    def rolled(effect_list: tuple[EffectDefinition, ...]) -> list[EffectDefinition]:
        return [e for e in effect_list if e.chance >= 1.0 or rng.chance(e.chance)]

    return ApproachResult(
        approach=approach,
        success=success,
        success_chance=chance,
        skip_combat=success and effects.skip_combat,
        guaranteed_first=success and effects.guaranteed_first,
        initiative_bonus=effects.initiative_bonus,
        first_hit_multiplier=effects.first_hit_multiplier if success else 1.0,
        enemy_hp_reduction=effects.enemy_hp_reduction if success else 0.0,
        player_buffs=rolled(effects.player_buffs) if success else [],
        enemy_debuffs=rolled(effects.enemy_debuffs) if success else [],
        chakra_cost=effects.chakra_cost,
        hp_cost=effects.hp_cost,
        xp_multiplier=effects.xp_multiplier if success else 1.0,
    )


# ============================================================================
# Application
# ============================================================================


def apply_approach(
    result: ApproachResult,
    player: Player,
    enemy: Enemy,
    ids: IdSequence,
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> None:
    """
    Applies an approach outcome to freshly prepared combatants.

    Costs come off the player first (chakra floored at 0, HP at 1), then the
    enemy loses HP and both sides receive their approach buffs.
    """
    source = APPROACH_DEFINITIONS[result.approach].name
    player.set_chakra(player.current_chakra - result.chakra_cost, player.derived(formulas).max_chakra)
    player.current_hp = max(1, player.current_hp - result.hp_cost)

    if result.enemy_hp_multiplier != 1.0:
        enemy.current_hp = math.floor(enemy.current_hp * result.enemy_hp_multiplier)
    if result.enemy_hp_reduction > 0:
        lost = math.floor(enemy.current_hp * result.enemy_hp_reduction)
        enemy.current_hp = max(1, enemy.current_hp - lost)

    for effect in result.player_buffs:
        player.add_buff(_opening_buff(effect, source, ids))
    for effect in result.enemy_debuffs:
        enemy.add_buff(_opening_buff(effect, source, ids))


def _opening_buff(effect: EffectDefinition, source: str, ids: IdSequence) -> Buff:
    # Applied before turn 1, whose start-of-turn tick would otherwise consume
    # one turn before the holder ever acts.
    buff = Buff.from_effect(effect, source, ids)
    if not buff.is_permanent:
        buff.duration += 1
    return buff
