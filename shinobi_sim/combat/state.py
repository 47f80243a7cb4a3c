"""
Battle state and battle results.

`CombatState` is the per-battle context the turn engine threads through a
battle: the turn counter, the approach opening, the terrain, the buff id
sequence and the running metrics. `BattleResult` is what a finished battle
reports.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..core.constants import ApproachType, Side
from ..core.utils import IdSequence
from .terrain import TerrainDefinition


class TurnLog(BaseModel):
    """One action of one side during a turn."""

    turn: int
    actor: Side
    action: str
    damage: int = 0
    is_crit: bool = False
    is_miss: bool = False
    is_evaded: bool = False
    player_hp: int = 0
    enemy_hp: int = 0


class BattleMetrics(BaseModel):
    """Running counters of a battle, from the player's point of view."""

    total_damage_dealt: int = 0
    total_damage_received: int = 0
    total_attacks: int = 0
    crits: int = 0
    misses: int = 0
    evasions: int = 0
    guts_triggers_player: int = 0
    guts_triggers_enemy: int = 0
    chakra_used: int = 0
    skills_used: dict[str, int] = Field(default_factory=dict)

    def record_skill(self, skill_id: str) -> None:
        self.skills_used[skill_id] = self.skills_used.get(skill_id, 0) + 1


class CombatState(BaseModel):
    """Context of one battle, owned by a single engine invocation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    turn: int = 0
    is_first_turn: bool = True
    first_hit_multiplier: float = Field(
        1.0,
        description="Damage multiplier of the player's first landed hit in turn 1.",
    )
    first_hit_pending: bool = Field(
        True,
        description="Cleared once the first-hit multiplier has been consumed.",
    )
    guaranteed_first: bool = Field(
        False,
        description="The player acts first regardless of initiative.",
    )
    player_initiative_bonus: int = 0
    player_goes_first: bool | None = Field(
        None,
        description="Turn order, decided once at the start of the battle.",
    )
    terrain: TerrainDefinition | None = None
    approach: ApproachType | None = None
    approach_succeeded: bool = False
    ids: IdSequence = Field(default_factory=IdSequence)
    metrics: BattleMetrics = Field(default_factory=BattleMetrics)
    logs: list[TurnLog] = Field(default_factory=list)
    guts_used: set[Side] = Field(
        default_factory=set,
        description="Sides whose guts already triggered during the current turn.",
    )

    def first_hit_for(self, side: Side) -> float:
        """Returns the first-hit multiplier the given side may still benefit from."""
        if side is Side.PLAYER and self.is_first_turn and self.first_hit_pending:
            return self.first_hit_multiplier
        return 1.0


class BattleResult(BaseModel):
    """Outcome of a finished battle."""

    battle_id: int = 0
    won: bool = Field(
        description="True when the enemy was defeated. False on a loss or at the turn cap.",
    )
    turns: int
    ended_by_turn_cap: bool = False

    total_damage_dealt: int = 0
    total_damage_received: int = 0

    total_attacks: int = 0
    crit_count: int = 0
    miss_count: int = 0
    evasion_count: int = 0

    guts_triggers_player: int = 0
    guts_triggers_enemy: int = 0
    player_final_hp: int = 0
    player_final_chakra: int = 0
    enemy_final_hp: int = 0

    total_chakra_used: int = 0
    skills_used: dict[str, int] = Field(default_factory=dict)

    approach_used: ApproachType | None = None
    approach_succeeded: bool | None = None

    logs: list[TurnLog] = Field(default_factory=list)
