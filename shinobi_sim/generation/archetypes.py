"""
Enemy archetypes used by the balance simulator.

Archetypes are fixed enemy templates, so that every build is measured
against the same opponents. Generation is a pure function of the archetype,
the floor and the difficulty.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..character.combatant import Enemy
from ..character.stats import PrimaryAttributes
from ..core.constants import EffectTarget, EffectType, ElementType, EnemyArchetype
from ..core.formulas import DEFAULT_FORMULAS, SIMULATION_SCALING, ScalingProfile, StatFormulas
from ..core.utils import IdSequence
from ..effects.buff import Buff
from ..skills.skill import EffectDefinition
from .scaling import scale_attributes, scaling_multiplier, tier_for_floor

if TYPE_CHECKING:
    from .game_data import GameData


class StartingBuff(BaseModel):
    """A buff an archetype enters every battle with."""

    model_config = ConfigDict(frozen=True)

    name: str
    effect: EffectDefinition


class ArchetypeConfig(BaseModel):
    """Template of a simulated enemy."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        description="Display name of the generated enemy.",
    )
    description: str = ""
    base_stats: PrimaryAttributes = Field(
        description="Attributes before floor and difficulty scaling.",
    )
    element: ElementType
    skill_ids: tuple[str, ...] = Field(
        description="Registry ids of the archetype's skills.",
    )
    starting_buffs: tuple[StartingBuff, ...] = ()


ARCHETYPE_CONFIGS: Mapping[EnemyArchetype, ArchetypeConfig] = MappingProxyType(
    {
        EnemyArchetype.TANK: ArchetypeConfig(
            name="Stone Wall Tank",
            description="High HP and physical defense with retaliation damage.",
            base_stats=PrimaryAttributes(
                willpower=35,
                chakra=18,
                strength=32,
                spirit=16,
                intelligence=10,
                calmness=16,
                speed=10,
                accuracy=14,
                dexterity=10,
            ),
            element=ElementType.EARTH,
            skill_ids=("basic_atk", "mud_wall", "sand_coffin"),
            starting_buffs=(
                StartingBuff(
                    name="Stone Skin Thorns",
                    effect=EffectDefinition(
                        type=EffectType.REFLECTION,
                        applies_to=EffectTarget.SELF,
                        duration=99,
                        value=0.15,
                    ),
                ),
            ),
        ),
        EnemyArchetype.ASSASSIN: ArchetypeConfig(
            name="Shadow Assassin",
            description="High speed and crit, glass cannon physical attacker.",
            base_stats=PrimaryAttributes(
                willpower=12,
                chakra=14,
                strength=18,
                spirit=8,
                intelligence=12,
                calmness=10,
                speed=28,
                accuracy=16,
                dexterity=24,
            ),
            element=ElementType.LIGHTNING,
            skill_ids=("basic_atk", "shuriken"),
        ),
        EnemyArchetype.CASTER: ArchetypeConfig(
            name="Elemental Caster",
            description="High spirit for elemental damage, ranged attacks.",
            base_stats=PrimaryAttributes(
                willpower=12,
                chakra=18,
                strength=6,
                spirit=22,
                intelligence=14,
                calmness=10,
                speed=12,
                accuracy=10,
                dexterity=10,
            ),
            element=ElementType.FIRE,
            skill_ids=("basic_atk", "phoenix_flower"),
        ),
        EnemyArchetype.GENJUTSU: ArchetypeConfig(
            name="Mind Weaver",
            description="Mental attacks specialist, weaker defenses.",
            base_stats=PrimaryAttributes(
                willpower=12,
                chakra=18,
                strength=6,
                spirit=10,
                intelligence=22,
                calmness=22,
                speed=10,
                accuracy=8,
                dexterity=10,
            ),
            element=ElementType.MENTAL,
            skill_ids=("basic_atk", "hell_viewing"),
        ),
        EnemyArchetype.BALANCED: ArchetypeConfig(
            name="Veteran Shinobi",
            description="Well-rounded stats, adaptable fighter.",
            base_stats=PrimaryAttributes.uniform(16),
            element=ElementType.WATER,
            skill_ids=("basic_atk", "water_dragon", "shuriken"),
        ),
    }
)


def all_archetypes() -> list[EnemyArchetype]:
    return list(EnemyArchetype)


def generate_archetype_enemy(
    archetype: EnemyArchetype,
    floor: int,
    difficulty: int,
    data: "GameData",
    ids: IdSequence | None = None,
    profile: ScalingProfile = SIMULATION_SCALING,
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> Enemy:
    """
    Generates a simulated enemy from an archetype.

    Args:
        archetype (EnemyArchetype): The template to use.
        floor (int): Floor number, drives the tier label and the scaling.
        difficulty (int): Difficulty between 0 and 100.
        data (GameData): Registries to resolve the skills and the template.
        ids (IdSequence | None): Id source of the battle the enemy joins,
            used for its starting buffs.
        profile (ScalingProfile): Scaling tuning, the simulator's by default.
        formulas (StatFormulas): Formulas used to fill HP and chakra.

    Returns:
        Enemy: A fully-statted enemy at full HP and chakra.

    Raises:
        SkillNotFoundError: If the template lists an unknown skill.

    """
    config = data.archetypes[archetype]
    multiplier = scaling_multiplier(floor, difficulty, profile)
    skills = data.skills.instantiate(config.skill_ids, context=f"archetype {archetype.value}")
    if not skills:
        skills = data.skills.instantiate([data.skills.basic_attack.id])

    ids = ids or IdSequence("archetype")
    buffs = [
        Buff(
            id=ids.next_id("archetype"),
            name=starting.name,
            duration=starting.effect.duration,
            source="archetype",
            effect=starting.effect,
            value=starting.effect.value,
        )
        for starting in config.starting_buffs
    ]

    enemy = Enemy(
        name=config.name,
        tier=tier_for_floor(floor),
        archetype=archetype,
        primary=scale_attributes(config.base_stats, multiplier),
        element=config.element,
        skills=skills,
    )
    enemy.restore(formulas)
    enemy.buffs = buffs
    return enemy
