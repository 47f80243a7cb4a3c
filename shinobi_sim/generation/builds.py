"""
Player builds for the balance simulator.

A build is a clan, a level, optional stat overrides and a fixed skill
loadout. Clan presets exercise every clan's intended play style; extreme
builds push single stats to the edge to expose balance outliers.
"""

from typing import TYPE_CHECKING, Iterable

from pydantic import BaseModel, ConfigDict, Field

from ..character.combatant import Player
from ..character.stats import PrimaryAttributes
from ..core.constants import Clan, ElementType, NiceEnum, PrimaryStat
from ..core.formulas import DEFAULT_FORMULAS, StatFormulas
from ..skills.registry import SkillRegistry
from ..skills.skill import Skill
from .clans import clan_stats_at_level

if TYPE_CHECKING:
    from .game_data import GameData


# ============================================================================
# Intelligence tiers
# ============================================================================


class IntelligenceTier(NiceEnum):
    """Skill tiers unlocked by intelligence."""

    BASIC = "BASIC"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"
    FORBIDDEN = "FORBIDDEN"

    @classmethod
    def from_intelligence(cls, intelligence: int) -> "IntelligenceTier":
        if intelligence >= 26:
            return cls.FORBIDDEN
        if intelligence >= 21:
            return cls.LEGENDARY
        if intelligence >= 16:
            return cls.EPIC
        if intelligence >= 11:
            return cls.RARE
        return cls.BASIC


# ============================================================================
# Skill filtering
# ============================================================================


def get_available_skills(intelligence: int, clan: Clan | None, registry: SkillRegistry) -> list[Skill]:
    """Skills whose intelligence and clan requirements are met, in registry order."""
    return [
        skill
        for skill in registry
        if skill.required_int <= intelligence
        and (skill.required_clan is None or skill.required_clan == clan)
    ]


def damage_potential(skill: Skill) -> float:
    """Rough damage score used to rank skills when building a loadout."""
    score = skill.damage_mult
    if skill.crit_bonus:
        score *= 1.2
    if skill.penetration:
        score *= 1.3
    return score


def skills_by_damage_potential(skills: Iterable[Skill]) -> list[Skill]:
    return sorted(skills, key=damage_potential, reverse=True)


def generate_optimal_loadout(
    intelligence: int,
    clan: Clan,
    data: "GameData",
    max_skills: int = 5,
) -> list[Skill]:
    """
    Builds the strongest loadout available at an intelligence level.

    The basic attack always comes first, followed by the clan's signature
    skill when it is learnable, then the remaining slots are filled with the
    highest damage potential skills. Skills with neither damage nor effects
    are skipped.

    Args:
        intelligence (int): The character's intelligence.
        clan (Clan): The character's clan, for clan-locked skills.
        data (GameData): Registries to draw from.
        max_skills (int): Size of the loadout.

    Returns:
        list[Skill]: The loadout templates.

    """
    registry = data.skills
    loadout: list[Skill] = [registry.basic_attack]

    clan_skill = registry.get(data.clans[clan].start_skill_id)
    if clan_skill.required_int <= intelligence and clan_skill not in loadout:
        loadout.append(clan_skill)

    for skill in skills_by_damage_potential(get_available_skills(intelligence, clan, registry)):
        if len(loadout) >= max_skills:
            break
        if any(owned.id == skill.id for owned in loadout):
            continue
        if skill.damage_mult == 0 and not skill.effects:
            continue
        loadout.append(skill)
    return loadout


# ============================================================================
# Build configurations
# ============================================================================


class PlayerBuildConfig(BaseModel):
    """A player build tested by the simulator."""

    model_config = ConfigDict(frozen=True)

    name: str
    clan: Clan
    level: int = 10
    custom_stats: PrimaryAttributes | None = Field(
        None,
        description="Complete attribute set replacing the clan's stats.",
    )
    stat_overrides: dict[PrimaryStat, int] = Field(
        default_factory=dict,
        description="Single stats forced on top of the clan's stats at this level.",
    )
    skill_ids: tuple[str, ...]
    element: ElementType

    def stats(self, data: "GameData") -> PrimaryAttributes:
        if self.custom_stats is not None:
            return self.custom_stats
        return clan_stats_at_level(data.clans[self.clan], self.level, self.stat_overrides)


def generate_clan_presets(level: int = 10) -> list[PlayerBuildConfig]:
    """One build per clan, tuned towards the clan's play style."""
    return [
        PlayerBuildConfig(
            name="Uzumaki Preset",
            clan=Clan.UZUMAKI,
            level=level,
            stat_overrides={PrimaryStat.SPIRIT: 28, PrimaryStat.INTELLIGENCE: 20},
            skill_ids=("basic_atk", "rasengan", "rasenshuriken", "shadow_clone", "shuriken"),
            element=ElementType.WIND,
        ),
        PlayerBuildConfig(
            name="Uchiha Preset",
            clan=Clan.UCHIHA,
            level=level,
            stat_overrides={PrimaryStat.INTELLIGENCE: 22},
            skill_ids=("basic_atk", "fireball", "chidori", "kirin", "rasenshuriken"),
            element=ElementType.FIRE,
        ),
        PlayerBuildConfig(
            name="Hyuga Preset",
            clan=Clan.HYUGA,
            level=level,
            stat_overrides={PrimaryStat.CALMNESS: 24},
            skill_ids=("basic_atk", "gentle_fist", "primary_lotus", "chidori", "shuriken"),
            element=ElementType.PHYSICAL,
        ),
        PlayerBuildConfig(
            name="Lee Disciple Preset",
            clan=Clan.LEE,
            level=level,
            skill_ids=("basic_atk", "primary_lotus", "shuriken", "mud_wall", "shadow_clone"),
            element=ElementType.PHYSICAL,
        ),
        PlayerBuildConfig(
            name="Yamanaka Preset",
            clan=Clan.YAMANAKA,
            level=level,
            stat_overrides={PrimaryStat.INTELLIGENCE: 22, PrimaryStat.CALMNESS: 32},
            skill_ids=("basic_atk", "mind_destruction", "kirin", "rasenshuriken", "shuriken"),
            element=ElementType.MENTAL,
        ),
    ]


def generate_extreme_builds(level: int = 10) -> list[PlayerBuildConfig]:
    """Builds with lopsided stats for edge-case testing."""
    return [
        PlayerBuildConfig(
            name="Glass Cannon",
            clan=Clan.UCHIHA,
            level=level,
            custom_stats=PrimaryAttributes.from_sequence((8, 20, 10, 40, 18, 10, 20, 16, 30)),
            skill_ids=("basic_atk", "fireball", "chidori", "amaterasu"),
            element=ElementType.FIRE,
        ),
        PlayerBuildConfig(
            name="Immortal Tank",
            clan=Clan.UZUMAKI,
            level=level,
            custom_stats=PrimaryAttributes.from_sequence((50, 30, 35, 12, 12, 20, 8, 14, 10)),
            skill_ids=("basic_atk", "bone_drill", "demon_slash", "primary_lotus", "mud_wall"),
            element=ElementType.PHYSICAL,
        ),
        PlayerBuildConfig(
            name="Speed Demon",
            clan=Clan.LEE,
            level=level,
            custom_stats=PrimaryAttributes.from_sequence((20, 10, 25, 8, 8, 12, 45, 18, 35)),
            skill_ids=("basic_atk", "shuriken", "primary_lotus"),
            element=ElementType.PHYSICAL,
        ),
        PlayerBuildConfig(
            name="Mind Controller",
            clan=Clan.YAMANAKA,
            level=level,
            custom_stats=PrimaryAttributes.from_sequence((15, 25, 8, 18, 40, 45, 12, 12, 15)),
            skill_ids=("basic_atk", "hell_viewing", "mind_destruction", "temple_nirvana", "tsukuyomi"),
            element=ElementType.MENTAL,
        ),
        PlayerBuildConfig(
            name="Balanced Build",
            clan=Clan.HYUGA,
            level=level,
            custom_stats=PrimaryAttributes.uniform(20),
            skill_ids=("basic_atk", "gentle_fist", "shuriken", "water_dragon"),
            element=ElementType.WATER,
        ),
    ]


def all_builds(level: int = 10) -> list[PlayerBuildConfig]:
    return generate_clan_presets(level) + generate_extreme_builds(level)


def create_build_from_config(
    build: PlayerBuildConfig,
    data: "GameData",
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> Player:
    """
    Instantiates a build as a fresh player at full HP and chakra.

    Fixed loadouts are taken as written: intelligence and clan requirements
    are not checked here.

    Raises:
        SkillNotFoundError: If the build lists an unknown skill.

    """
    skills = data.skills.instantiate(build.skill_ids, context=f"build {build.name}")
    if not skills:
        skills = data.skills.instantiate([data.skills.basic_attack.id])
    player = Player(
        name=build.name,
        clan=build.clan,
        level=build.level,
        primary=build.stats(data),
        element=build.element,
        skills=skills,
    )
    player.restore(formulas)
    return player
