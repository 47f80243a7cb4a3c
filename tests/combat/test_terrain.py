"""
Tests for battlefield terrain.
"""

from conftest import ScriptedRng

from shinobi_sim.combat.terrain import (
    TERRAIN_DEFINITIONS,
    element_amplification,
    evasion_bonus,
    get_terrain,
    initiative_bonus,
    roll_hazard,
    stealth_bonus,
)
from shinobi_sim.core.constants import ElementType, TerrainType


def test_every_terrain_defined():
    assert set(TERRAIN_DEFINITIONS) == set(TerrainType)


def test_fog_amplifies_water_only():
    fog = get_terrain(TerrainType.FOG_BANK)
    assert element_amplification(fog, ElementType.WATER) == 1.25
    assert element_amplification(fog, ElementType.FIRE) == 1.0
    assert element_amplification(None, ElementType.WATER) == 1.0


def test_modifiers_default_to_zero_without_terrain():
    assert evasion_bonus(None) == 0.0
    assert initiative_bonus(None) == 0
    assert stealth_bonus(None) == 0
    rooftops = get_terrain(TerrainType.ROOFTOPS)
    assert evasion_bonus(rooftops) == 0.05
    assert initiative_bonus(rooftops) == 5
    assert stealth_bonus(rooftops) == 10


def test_hazard_never_kills():
    """
    Test that a triggered hazard leaves the combatant with at least 1 HP.
    """
    swamp = get_terrain(TerrainType.SWAMP)
    new_hp, message = roll_hazard(swamp, 3, True, ScriptedRng([0.0]))
    assert new_hp == 1
    assert message == "was affected by toxic fumes for 5 damage"


def test_hazard_miss_and_safe_terrain():
    swamp = get_terrain(TerrainType.SWAMP)
    assert roll_hazard(swamp, 50, False, ScriptedRng([0.99])) == (50, None)
    assert roll_hazard(get_terrain(TerrainType.OPEN_GROUND), 50, True, ScriptedRng([0.0])) == (50, None)


def test_hazard_skips_fallen_combatant():
    rng = ScriptedRng([0.0])
    assert roll_hazard(get_terrain(TerrainType.WATERFALL), 0, True, rng) == (0, None)
    assert rng.values == [0.0]
