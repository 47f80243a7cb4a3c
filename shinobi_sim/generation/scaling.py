"""
Floor and difficulty scaling shared by every enemy generator.
"""

import math

from ..character.stats import PrimaryAttributes
from ..core.formulas import SIMULATION_SCALING, ScalingProfile


def scaling_multiplier(floor: int, difficulty: int, profile: ScalingProfile = SIMULATION_SCALING) -> float:
    """
    Computes the stat multiplier of an enemy.

    Args:
        floor (int): Floor number, 1 or more.
        difficulty (int): Difficulty between 0 and 100.
        profile (ScalingProfile): Which tuning to use. The simulator and the
            live game are tuned independently.

    Returns:
        float: (1 + floor * per_floor) * (base + difficulty / divisor).

    """
    return profile.multiplier(floor, difficulty)


def scale_attributes(base: PrimaryAttributes, multiplier: float) -> PrimaryAttributes:
    """Multiplies every attribute and floors the result."""
    return base.scaled(multiplier)


def scale_single(value: int, multiplier: float) -> int:
    return math.floor(value * multiplier)


def tier_for_floor(floor: int) -> str:
    if floor <= 10:
        return "Genin"
    if floor <= 25:
        return "Chunin"
    if floor <= 50:
        return "Jonin"
    if floor <= 75:
        return "S-Rank"
    return "Kage Level"


def story_arc_for_floor(floor: int) -> str:
    """Returns the name of the story arc a floor belongs to."""
    if floor <= 10:
        return "ACADEMY_ARC"
    if floor <= 25:
        return "WAVES_ARC"
    if floor <= 50:
        return "EXAMS_ARC"
    if floor <= 75:
        return "ROGUE_ARC"
    return "WAR_ARC"
