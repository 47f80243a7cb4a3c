"""
Player clans: starting attributes, growth per level and signature skill.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from pydantic import BaseModel, ConfigDict, Field

from ..character.combatant import Player
from ..character.stats import PrimaryAttributes
from ..core.constants import Clan, ElementType, PrimaryStat
from ..core.formulas import DEFAULT_FORMULAS, StatFormulas

if TYPE_CHECKING:
    from .game_data import GameData


class ClanConfig(BaseModel):
    """Template of a clan."""

    model_config = ConfigDict(frozen=True)

    clan: Clan
    base_stats: PrimaryAttributes = Field(
        description="Attributes at level 1.",
    )
    growth: PrimaryAttributes = Field(
        description="Attributes gained on every level-up.",
    )
    element: ElementType = Field(
        description="Element affinity of the clan's members.",
    )
    start_skill_id: str = Field(
        description="Signature skill granted at creation.",
    )


CLAN_CONFIGS: Mapping[Clan, ClanConfig] = MappingProxyType(
    {
        Clan.UZUMAKI: ClanConfig(
            clan=Clan.UZUMAKI,
            base_stats=PrimaryAttributes.from_sequence((25, 22, 12, 10, 10, 14, 10, 8, 8)),
            growth=PrimaryAttributes.from_sequence((4, 3, 1, 3, 1, 1, 1, 1, 1)),
            element=ElementType.WIND,
            start_skill_id="shadow_clone",
        ),
        Clan.UCHIHA: ClanConfig(
            clan=Clan.UCHIHA,
            base_stats=PrimaryAttributes.from_sequence((12, 14, 10, 22, 16, 12, 18, 14, 18)),
            growth=PrimaryAttributes.from_sequence((1, 2, 1, 3, 2, 1, 2, 2, 3)),
            element=ElementType.FIRE,
            start_skill_id="fireball",
        ),
        Clan.HYUGA: ClanConfig(
            clan=Clan.HYUGA,
            base_stats=PrimaryAttributes.from_sequence((14, 12, 16, 8, 14, 16, 16, 22, 18)),
            growth=PrimaryAttributes.from_sequence((2, 1, 2, 1, 2, 2, 2, 3, 2)),
            element=ElementType.PHYSICAL,
            start_skill_id="gentle_fist",
        ),
        Clan.LEE: ClanConfig(
            clan=Clan.LEE,
            base_stats=PrimaryAttributes.from_sequence((20, 4, 28, 2, 6, 10, 26, 12, 12)),
            growth=PrimaryAttributes.from_sequence((3, 0, 3, 0, 0, 1, 4, 1, 2)),
            element=ElementType.PHYSICAL,
            start_skill_id="primary_lotus",
        ),
        Clan.YAMANAKA: ClanConfig(
            clan=Clan.YAMANAKA,
            base_stats=PrimaryAttributes.from_sequence((12, 18, 6, 14, 22, 24, 10, 10, 12)),
            growth=PrimaryAttributes.from_sequence((1, 2, 0, 2, 3, 4, 1, 1, 2)),
            element=ElementType.MENTAL,
            start_skill_id="mind_destruction",
        ),
    }
)


def clan_stats_at_level(
    config: ClanConfig,
    level: int,
    overrides: Mapping[PrimaryStat, int] | None = None,
) -> PrimaryAttributes:
    """
    Computes the attributes of a clan member at a given level.

    Each stat is base + growth * (level - 1). Overrides replace single stats
    after growth has been applied.

    Args:
        config (ClanConfig): The clan template.
        level (int): Character level, 1 or more.
        overrides (Mapping[PrimaryStat, int] | None): Stats to force.

    Returns:
        PrimaryAttributes: The computed attributes.

    """
    levels = max(0, level - 1)
    values = {
        stat: config.base_stats.get(stat) + config.growth.get(stat) * levels
        for stat in PrimaryStat
    }
    if overrides:
        values.update(overrides)
    return PrimaryAttributes(**{stat.value: value for stat, value in values.items()})


def level_up(player: Player, config: ClanConfig, formulas: StatFormulas = DEFAULT_FORMULAS) -> None:
    """Raises the player's level by one, adds the clan growth and fully heals."""
    player.level += 1
    player.primary = PrimaryAttributes(
        **{
            stat.value: player.primary.get(stat) + config.growth.get(stat)
            for stat in PrimaryStat
        }
    )
    derived = player.base_derived(formulas)
    player.current_hp = derived.max_hp
    player.current_chakra = derived.max_chakra


def create_clan_player(
    clan: Clan,
    data: "GameData",
    level: int = 1,
    name: str | None = None,
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> Player:
    """
    Creates a player of the given clan with the basic attack and the clan's
    signature skill, at full HP and chakra.
    """
    config = data.clans[clan]
    player = Player(
        name=name or f"{clan.display_name} Shinobi",
        clan=clan,
        level=level,
        primary=clan_stats_at_level(config, level),
        element=config.element,
        skills=data.skills.instantiate(
            [data.skills.basic_attack.id, config.start_skill_id], context=f"clan {clan.value}"
        ),
    )
    player.restore(formulas)
    return player
