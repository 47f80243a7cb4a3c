"""
Read-only game data.

Every table the generators, the simulator and the engine look up is loaded
once into a `GameData` bundle and passed around explicitly.
"""

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from ..combat.terrain import TERRAIN_DEFINITIONS, TerrainDefinition
from ..core.constants import Clan, EnemyArchetype, TerrainType
from ..core.error_handling import UnknownBuildError
from ..skills.registry import SkillRegistry, build_default_registry
from .archetypes import ARCHETYPE_CONFIGS, ArchetypeConfig
from .builds import PlayerBuildConfig, all_builds
from .clans import CLAN_CONFIGS, ClanConfig


class GameData(BaseModel):
    """Bundle of the immutable registries."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    skills: SkillRegistry
    archetypes: Mapping[EnemyArchetype, ArchetypeConfig]
    clans: Mapping[Clan, ClanConfig]
    terrains: Mapping[TerrainType, TerrainDefinition]
    builds: Mapping[str, PlayerBuildConfig]

    @field_validator("archetypes", "clans", "terrains", "builds")
    @classmethod
    def _read_only(cls, value: Mapping) -> Mapping:
        return MappingProxyType(dict(value))

    def get_build(self, name: str) -> PlayerBuildConfig:
        """
        Returns a registered build by name.

        Raises:
            UnknownBuildError: If no build has that name.

        """
        try:
            return self.builds[name]
        except KeyError:
            raise UnknownBuildError(name) from None


def load_game_data(level: int = 10) -> GameData:
    """
    Loads the default game data.

    Args:
        level (int): Level of the registered builds.

    Returns:
        GameData: The registries, ready to be shared.

    """
    return GameData(
        skills=build_default_registry(),
        archetypes=ARCHETYPE_CONFIGS,
        clans=CLAN_CONFIGS,
        terrains=TERRAIN_DEFINITIONS,
        builds={build.name: build for build in all_builds(level)},
    )
