"""
Battlefield terrain.

Terrains shift stealth and initiative, grant or remove evasion, amplify one
element and may hurt both combatants at the end of every turn.
"""

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..core.constants import ElementType, TerrainType
from ..core.rng import Rng


class TerrainHazard(BaseModel):
    """Environmental damage rolled at the end of each turn."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(
        description="Flavour of the hazard (POISON, DROWN, ...).",
    )
    value: int = Field(
        description="HP lost when the hazard triggers.",
    )
    chance: float = Field(
        0.3,
        description="Probability (0..1) that the hazard triggers each turn.",
    )
    affects_player: bool = True
    affects_enemy: bool = True

    @property
    def description(self) -> str:
        return {
            "BURN": "scorched by flames",
            "DROWN": "pulled under by currents",
            "POISON": "affected by toxic fumes",
            "LIGHTNING": "struck by static discharge",
            "FALLING": "hit by falling debris",
        }.get(self.kind, "damaged by the environment")


class TerrainDefinition(BaseModel):
    """Combat modifiers of a terrain."""

    model_config = ConfigDict(frozen=True)

    type: TerrainType
    name: str
    description: str = ""
    stealth_modifier: int = 0
    initiative_modifier: int = 0
    evasion_modifier: float = 0.0
    element_amplify: ElementType | None = None
    element_amplify_percent: float = 25.0
    hazard: TerrainHazard | None = None


TERRAIN_DEFINITIONS: Mapping[TerrainType, TerrainDefinition] = MappingProxyType(
    {
        TerrainType.OPEN_GROUND: TerrainDefinition(
            type=TerrainType.OPEN_GROUND,
            name="Open Ground",
            description="Flat, exposed terrain with no cover.",
            stealth_modifier=-10,
        ),
        TerrainType.TRAINING_FIELD: TerrainDefinition(
            type=TerrainType.TRAINING_FIELD,
            name="Training Field",
            description="Practice grounds with training posts.",
        ),
        TerrainType.ROOFTOPS: TerrainDefinition(
            type=TerrainType.ROOFTOPS,
            name="Village Rooftops",
            description="High ground with good sightlines.",
            stealth_modifier=10,
            initiative_modifier=5,
            evasion_modifier=0.05,
        ),
        TerrainType.ALLEYWAY: TerrainDefinition(
            type=TerrainType.ALLEYWAY,
            name="Narrow Alleyway",
            description="Tight corridors between buildings.",
            stealth_modifier=25,
            initiative_modifier=8,
            evasion_modifier=-0.05,
        ),
        TerrainType.FOG_BANK: TerrainDefinition(
            type=TerrainType.FOG_BANK,
            name="Thick Fog",
            description="Dense mist obscures everything.",
            stealth_modifier=30,
            initiative_modifier=-5,
            evasion_modifier=0.12,
            element_amplify=ElementType.WATER,
            element_amplify_percent=25,
        ),
        TerrainType.SWAMP: TerrainDefinition(
            type=TerrainType.SWAMP,
            name="Murky Swamp",
            description="Fetid water and sucking mud.",
            stealth_modifier=15,
            initiative_modifier=-8,
            evasion_modifier=-0.05,
            element_amplify=ElementType.WATER,
            element_amplify_percent=15,
            hazard=TerrainHazard(kind="POISON", value=5, chance=0.25),
        ),
        TerrainType.WATERFALL: TerrainDefinition(
            type=TerrainType.WATERFALL,
            name="Thundering Waterfall",
            description="Roaring water drowns out all sound.",
            stealth_modifier=20,
            initiative_modifier=-3,
            evasion_modifier=0.15,
            element_amplify=ElementType.WATER,
            element_amplify_percent=35,
            hazard=TerrainHazard(kind="DROWN", value=8, chance=0.15),
        ),
    }
)


def get_terrain(terrain_type: TerrainType) -> TerrainDefinition:
    return TERRAIN_DEFINITIONS[terrain_type]


def evasion_bonus(terrain: TerrainDefinition | None) -> float:
    return terrain.evasion_modifier if terrain else 0.0


def initiative_bonus(terrain: TerrainDefinition | None) -> int:
    return terrain.initiative_modifier if terrain else 0


def stealth_bonus(terrain: TerrainDefinition | None) -> int:
    return terrain.stealth_modifier if terrain else 0


def element_amplification(terrain: TerrainDefinition | None, element: ElementType) -> float:
    """
    Returns the damage multiplier the terrain grants to an element.

    Args:
        terrain (TerrainDefinition | None): The battlefield, if any.
        element (ElementType): Element of the attacker.

    Returns:
        float: 1 + percent/100 when the element is amplified, else 1.0.

    """
    if terrain is None or terrain.element_amplify is None:
        return 1.0
    if terrain.element_amplify != element:
        return 1.0
    return 1 + terrain.element_amplify_percent / 100


def roll_hazard(
    terrain: TerrainDefinition | None, current_hp: int, is_player: bool, rng: Rng
) -> tuple[int, str | None]:
    """
    Rolls the end-of-turn hazard for one combatant.

    Hazards never kill: HP is floored at 1. A combatant already at 0 HP is
    left untouched.

    Args:
        terrain (TerrainDefinition | None): The battlefield, if any.
        current_hp (int): HP before the hazard.
        is_player (bool): Whether the combatant is the player.
        rng (Rng): Random source.

    Returns:
        tuple[int, str | None]: New HP and a log line when the hazard triggered.

    """
    if terrain is None or terrain.hazard is None or current_hp <= 0:
        return current_hp, None
    hazard = terrain.hazard
    if (is_player and not hazard.affects_player) or (not is_player and not hazard.affects_enemy):
        return current_hp, None
    if not rng.chance(hazard.chance):
        return current_hp, None
    new_hp = max(1, current_hp - hazard.value)
    return new_hp, f"was {hazard.description} for {hazard.value} damage"
