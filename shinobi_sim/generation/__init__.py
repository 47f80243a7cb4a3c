"""
Enemy, clan and build generation, and the read-only game data.
"""

from .archetypes import ARCHETYPE_CONFIGS, ArchetypeConfig, all_archetypes, generate_archetype_enemy
from .builds import (
    IntelligenceTier,
    PlayerBuildConfig,
    all_builds,
    create_build_from_config,
    generate_clan_presets,
    generate_extreme_builds,
    generate_optimal_loadout,
    get_available_skills,
)
from .clans import CLAN_CONFIGS, ClanConfig, clan_stats_at_level, create_clan_player, level_up
from .encounters import generate_boss, generate_encounter_enemy
from .game_data import GameData, load_game_data
from .scaling import scaling_multiplier, tier_for_floor

__all__ = [
    # Game data
    "GameData",
    "load_game_data",
    # Scaling
    "scaling_multiplier",
    "tier_for_floor",
    # Enemies
    "ArchetypeConfig",
    "ARCHETYPE_CONFIGS",
    "all_archetypes",
    "generate_archetype_enemy",
    "generate_encounter_enemy",
    "generate_boss",
    # Clans
    "ClanConfig",
    "CLAN_CONFIGS",
    "clan_stats_at_level",
    "create_clan_player",
    "level_up",
    # Builds
    "IntelligenceTier",
    "PlayerBuildConfig",
    "get_available_skills",
    "generate_optimal_loadout",
    "generate_clan_presets",
    "generate_extreme_builds",
    "all_builds",
    "create_build_from_config",
]
