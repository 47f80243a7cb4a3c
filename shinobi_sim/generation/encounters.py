"""
Enemies met during a live run.

Unlike the simulator's archetypes, live encounters draw the archetype, the
element and the name from the random source. Stats remain a pure function
of the floor, the difficulty and the drawn archetype.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from pydantic import BaseModel, ConfigDict

from ..character.combatant import Enemy
from ..character.stats import PrimaryAttributes
from ..core.constants import ELEMENTAL_CYCLE, ElementType, EncounterKind, EnemyArchetype, PrimaryStat
from ..core.formulas import DEFAULT_FORMULAS, LIVE_SCALING, StatFormulas
from ..core.rng import Rng
from .scaling import scale_attributes, scale_single, scaling_multiplier, story_arc_for_floor

if TYPE_CHECKING:
    from .game_data import GameData


class EnemyTemplate(BaseModel):
    """A named enemy with its signature skill."""

    model_config = ConfigDict(frozen=True)

    name: str
    element: ElementType
    skill_id: str


LIVE_BASE_STATS: Mapping[EnemyArchetype, PrimaryAttributes] = MappingProxyType(
    {
        EnemyArchetype.TANK: PrimaryAttributes.from_sequence((22, 10, 18, 8, 8, 12, 8, 8, 8)),
        EnemyArchetype.ASSASSIN: PrimaryAttributes.from_sequence((10, 12, 16, 8, 10, 8, 22, 14, 18)),
        EnemyArchetype.CASTER: PrimaryAttributes.from_sequence((10, 18, 6, 22, 16, 10, 12, 10, 10)),
        EnemyArchetype.GENJUTSU: PrimaryAttributes.from_sequence((10, 16, 6, 12, 18, 22, 10, 8, 12)),
        EnemyArchetype.BALANCED: PrimaryAttributes.from_sequence((14, 12, 12, 12, 12, 12, 12, 12, 12)),
    }
)

BOSS_BASE_STATS = PrimaryAttributes.from_sequence((40, 30, 25, 25, 20, 18, 18, 15, 15))

BOSS_TABLE: Mapping[int, EnemyTemplate] = MappingProxyType(
    {
        8: EnemyTemplate(name="Demon Brothers", element=ElementType.PHYSICAL, skill_id="demon_slash"),
        17: EnemyTemplate(name="Haku", element=ElementType.WATER, skill_id="water_prison"),
        25: EnemyTemplate(name="Zabuza Momochi", element=ElementType.WATER, skill_id="water_dragon"),
        35: EnemyTemplate(name="Orochimaru", element=ElementType.WIND, skill_id="poison_fog"),
        45: EnemyTemplate(name="Gaara", element=ElementType.EARTH, skill_id="sand_coffin"),
        55: EnemyTemplate(name="Kimimaro", element=ElementType.PHYSICAL, skill_id="bone_drill"),
        65: EnemyTemplate(name="Sasuke Uchiha", element=ElementType.LIGHTNING, skill_id="chidori"),
        75: EnemyTemplate(name="Pain", element=ElementType.WIND, skill_id="shinra_tensei"),
        85: EnemyTemplate(name="Obito Uchiha", element=ElementType.FIRE, skill_id="kamui_impact"),
        100: EnemyTemplate(name="Madara Uchiha", element=ElementType.FIRE, skill_id="tengai_shinsei"),
    }
)

DEFAULT_BOSS = EnemyTemplate(name="Edo Tensei Legend", element=ElementType.FIRE, skill_id="rasengan")

AMBUSH_TEMPLATES: tuple[EnemyTemplate, ...] = (
    EnemyTemplate(name="Zabuza Momochi", element=ElementType.WATER, skill_id="demon_slash"),
    EnemyTemplate(name="Kimimaro", element=ElementType.PHYSICAL, skill_id="bone_drill"),
    EnemyTemplate(name="Hanzo the Salamander", element=ElementType.FIRE, skill_id="poison_fog"),
)

ENEMY_PREFIXES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "WEAK": ("Exhausted", "Clumsy", "Novice"),
        "NORMAL": ("Mist", "Rock", "Cloud", "Sound", "Rogue"),
        "STRONG": ("Veteran", "Vicious", "Elite", "Merciless"),
        "DEADLY": ("Demonic", "Cursed", "Blood-Thirsty"),
    }
)

ARC_PREFIXES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "WAVES_ARC": ("Mist", "Demon Brother", "Mercenary"),
        "EXAMS_ARC": ("Sand", "Sound", "Rain", "Grass"),
        "ROGUE_ARC": ("Sound Four", "Curse Mark", "Rogue"),
        "WAR_ARC": ("Reanimated", "White Zetsu", "Masked"),
    }
)

ENEMY_JOBS = ("Ninja", "Samurai", "Puppeteer", "Monk")

ARCHETYPE_SIGNATURE_SKILLS: Mapping[EnemyArchetype, str] = MappingProxyType(
    {
        EnemyArchetype.CASTER: "fireball",
        EnemyArchetype.ASSASSIN: "shuriken",
        EnemyArchetype.GENJUTSU: "hell_viewing",
    }
)

ELITE_MULTIPLIERS: Mapping[PrimaryStat, float] = MappingProxyType(
    {
        PrimaryStat.WILLPOWER: 1.4,
        PrimaryStat.STRENGTH: 1.3,
        PrimaryStat.SPIRIT: 1.3,
    }
)

# Chance that a hard (difficulty > 50) normal enemy also knows Rasengan.
RASENGAN_CHANCE = 0.3


def _name_pool(floor: int, difficulty: int) -> tuple[str, ...]:
    arc = story_arc_for_floor(floor)
    if arc in ARC_PREFIXES:
        return ARC_PREFIXES[arc]
    if difficulty > 75:
        return ENEMY_PREFIXES["DEADLY"]
    if difficulty > 40:
        return ENEMY_PREFIXES["STRONG"]
    if difficulty < 10:
        return ENEMY_PREFIXES["WEAK"]
    return ENEMY_PREFIXES["NORMAL"]


def _pick_archetype(kind: EncounterKind, rng: Rng) -> EnemyArchetype:
    if kind == EncounterKind.AMBUSH:
        return EnemyArchetype.ASSASSIN
    if kind == EncounterKind.ELITE:
        return EnemyArchetype.TANK if rng.random() > 0.5 else EnemyArchetype.CASTER
    return rng.pick(
        (
            EnemyArchetype.TANK,
            EnemyArchetype.ASSASSIN,
            EnemyArchetype.BALANCED,
            EnemyArchetype.CASTER,
            EnemyArchetype.GENJUTSU,
        )
    )


def generate_boss(
    floor: int,
    difficulty: int,
    data: "GameData",
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> Enemy:
    """Generates the boss guarding a floor. Unlisted floors get a default legend."""
    template = BOSS_TABLE.get(floor, DEFAULT_BOSS)
    multiplier = scaling_multiplier(floor, difficulty, LIVE_SCALING)
    boss = Enemy(
        name=template.name,
        tier="Kage Level",
        element=template.element,
        is_boss=True,
        primary=scale_attributes(BOSS_BASE_STATS, multiplier),
        skills=data.skills.instantiate(
            ["basic_atk", "fireball", template.skill_id], context=f"boss {template.name}"
        ),
        drop_rate_bonus=50 + difficulty,
    )
    boss.restore(formulas)
    return boss


def generate_encounter_enemy(
    floor: int,
    kind: EncounterKind,
    difficulty: int,
    data: "GameData",
    rng: Rng,
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> Enemy:
    """
    Generates an enemy for a live encounter.

    Args:
        floor (int): Current floor.
        kind (EncounterKind): NORMAL, ELITE, AMBUSH or BOSS.
        difficulty (int): Difficulty between 0 and 100.
        data (GameData): Registries to resolve the skills.
        rng (Rng): Random source for the archetype, element and name.
        formulas (StatFormulas): Formulas used to fill HP and chakra.

    Returns:
        Enemy: A fully-statted enemy at full HP and chakra.

    """
    if kind == EncounterKind.BOSS:
        return generate_boss(floor, difficulty, data, formulas)

    archetype = _pick_archetype(kind, rng)
    multiplier = scaling_multiplier(floor, difficulty, LIVE_SCALING)
    primary = scale_attributes(LIVE_BASE_STATS[archetype], multiplier)

    skill_ids = ["basic_atk"]
    element = rng.pick(list(ELEMENTAL_CYCLE))
    if kind == EncounterKind.AMBUSH:
        template = rng.pick(AMBUSH_TEMPLATES)
        name = template.name
        element = template.element
        skill_ids.append(template.skill_id)
    else:
        prefix = rng.pick(_name_pool(floor, difficulty))
        name = f"{prefix} {rng.pick(ENEMY_JOBS)}"
        if archetype in ARCHETYPE_SIGNATURE_SKILLS:
            skill_ids.append(ARCHETYPE_SIGNATURE_SKILLS[archetype])
        if difficulty > 50 and rng.random() < RASENGAN_CHANCE:
            skill_ids.append("rasengan")

    is_elite = kind in (EncounterKind.ELITE, EncounterKind.AMBUSH)
    if is_elite:
        for stat, factor in ELITE_MULTIPLIERS.items():
            primary = primary.with_stat(stat, scale_single(primary.get(stat), factor))

    if kind == EncounterKind.AMBUSH:
        tier = "S-Rank Rogue"
    elif is_elite:
        tier = "Jonin"
    else:
        tier = "Chunin"

    enemy = Enemy(
        name=name,
        tier=tier,
        archetype=archetype,
        is_elite=is_elite,
        element=element,
        primary=primary,
        skills=data.skills.instantiate(skill_ids, context=f"encounter {name}"),
    )
    enemy.restore(formulas)
    return enemy
