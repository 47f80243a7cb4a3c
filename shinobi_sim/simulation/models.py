"""
Configuration and result models of the batch simulator.
"""

from typing import Any

from pydantic import BaseModel, Field

from ..combat.state import BattleResult
from ..core.constants import ApproachType, Clan, EnemyArchetype
from ..core.error_handling import InvalidConfigurationError
from ..core.formulas import ConfigModel
from ..generation.builds import PlayerBuildConfig
from ..skills.registry import BASIC_ATTACK_ID

# ============================================================================
# Configuration
# ============================================================================


class SimulationConfig(ConfigModel):
    """Parameters of a batch simulation."""

    battles_per_config: int = Field(
        1000,
        description="Battles run for every (build, archetype) pair.",
    )
    max_turns_per_battle: int = Field(
        100,
        description="Turn cap of a single battle.",
    )
    player_level: int = Field(
        10,
        description="Level of the generated builds.",
    )
    floor_number: int = Field(
        10,
        description="Floor used to scale the enemies.",
    )
    difficulty: int = Field(
        50,
        description="Difficulty (0-100) used to scale the enemies.",
    )
    enable_approaches: bool = Field(
        True,
        description="Cycle battles through the listed approaches.",
    )
    approaches: list[ApproachType] = Field(
        default_factory=lambda: [
            ApproachType.FRONTAL_ASSAULT,
            ApproachType.STEALTH_AMBUSH,
            ApproachType.GENJUTSU_SETUP,
            ApproachType.ENVIRONMENTAL_TRAP,
        ],
        description="Approaches exercised when approaches are enabled.",
    )
    seed: int | str | None = Field(
        None,
        description="Seed of the root random stream. None draws a fresh one.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.battles_per_config < 0:
            raise InvalidConfigurationError("battles_per_config must be non-negative")
        if self.max_turns_per_battle < 1:
            raise InvalidConfigurationError("max_turns_per_battle must be at least 1")
        if self.player_level < 1 or self.floor_number < 1:
            raise InvalidConfigurationError("player_level and floor_number must be at least 1")
        if not 0 <= self.difficulty <= 100:
            raise InvalidConfigurationError("difficulty must be within [0, 100]")
        if self.enable_approaches and not self.approaches:
            raise InvalidConfigurationError("approaches are enabled but none are listed")


class ProgressionConfig(ConfigModel):
    """Parameters of a progression simulation."""

    start_level: int = 1
    max_level: int = 50
    battles_per_level_up: int = 2
    battles_per_skill_gain: int = 3
    max_battles: int = 200
    runs_to_simulate: int = 100
    max_skills: int = 6
    starting_skill_ids: list[str] = Field(default_factory=lambda: [BASIC_ATTACK_ID])
    skill_pool: list[str] = Field(
        default_factory=list,
        description="Skills that can be acquired. Empty means every registered skill.",
    )
    survival_level: int = Field(
        50,
        description="Final level that counts a run as survived.",
    )
    seed: int | str | None = None

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.start_level < 1 or self.max_level < self.start_level:
            raise InvalidConfigurationError("levels must satisfy 1 <= start_level <= max_level")
        if self.battles_per_level_up < 1 or self.battles_per_skill_gain < 1:
            raise InvalidConfigurationError("battle intervals must be at least 1")
        if self.max_battles < 0 or self.runs_to_simulate < 0:
            raise InvalidConfigurationError("max_battles and runs_to_simulate must be non-negative")
        if not self.starting_skill_ids:
            raise InvalidConfigurationError("starting_skill_ids must not be empty")


# ============================================================================
# Aggregates
# ============================================================================


class ApproachStats(BaseModel):
    """Outcome of one approach across a batch."""

    attempts: int = 0
    successes: int = 0
    success_rate: float = 0.0
    wins_with_approach: int = 0
    win_rate_with_approach: float = 0.0


class AggregatedStats(BaseModel):
    """Statistics of every battle of one (build, archetype) pair."""

    player_build_name: str
    enemy_archetype: EnemyArchetype

    total_battles: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    turn_cap_battles: int = 0

    average_turns_to_win: float = 0.0
    average_turns_to_lose: float = 0.0
    average_turns: float = 0.0
    min_turns: int = 0
    max_turns: int = 0
    turns_std_dev: float = 0.0

    total_damage_dealt: int = 0
    total_damage_received: int = 0
    average_damage_dealt_per_battle: float = 0.0
    average_damage_received_per_battle: float = 0.0
    damage_efficiency: float = Field(
        0.0,
        description="Damage dealt / damage received, or damage dealt when nothing was received.",
    )

    total_attacks: int = 0
    total_crits: int = 0
    total_misses: int = 0
    total_evasions: int = 0
    crit_rate: float = 0.0
    miss_rate: float = 0.0
    evasion_rate: float = 0.0

    guts_triggers_total: int = 0
    guts_triggers_per_battle: float = 0.0
    average_remaining_hp_on_win: float = 0.0

    total_chakra_used: int = 0
    average_chakra_used_per_battle: float = 0.0
    chakra_efficiency: float = Field(
        0.0,
        description="Damage dealt per chakra spent, or damage dealt when no chakra was spent.",
    )

    skill_usage_count: dict[str, int] = Field(default_factory=dict)
    skill_win_contribution: dict[str, int] = Field(
        default_factory=dict,
        description="Number of won battles in which each skill was used.",
    )
    approach_stats: dict[ApproachType, ApproachStats] | None = None


class SimulationRunResult(BaseModel):
    """Battles and aggregate of one (build, archetype) pair."""

    config: SimulationConfig
    player_build: PlayerBuildConfig
    enemy_archetype: EnemyArchetype
    battles: list[BattleResult]
    aggregated: AggregatedStats
    duration: float = Field(
        0.0,
        description="Wall time of the pair, in milliseconds.",
    )


class BuildWinRate(BaseModel):
    build_name: str
    win_rate: float


class Matchup(BaseModel):
    build: str
    enemy: EnemyArchetype
    win_rate: float


class SimulationSummary(BaseModel):
    """Headline numbers of a whole simulation."""

    best_build_per_archetype: dict[EnemyArchetype, BuildWinRate] = Field(default_factory=dict)
    overall_best_build: BuildWinRate = Field(
        default_factory=lambda: BuildWinRate(build_name="", win_rate=0.0),
        description="Build with the highest win rate averaged over archetypes.",
    )
    best_matchups: list[Matchup] = Field(default_factory=list)
    worst_matchups: list[Matchup] = Field(default_factory=list)


class SimulationMetadata(BaseModel):
    version: str
    timestamp: str
    total_duration: float
    total_battles: int


class SimulationOutput(BaseModel):
    """Everything a simulation produced, ready for an exporter."""

    metadata: SimulationMetadata
    config: SimulationConfig
    player_builds: list[PlayerBuildConfig]
    enemy_archetypes: list[EnemyArchetype]
    results: list[SimulationRunResult]
    summary: SimulationSummary
    skipped_pairs: list[str] = Field(
        default_factory=list,
        description="Pairs that raised an error and were left out.",
    )


# ============================================================================
# Progression
# ============================================================================


class ProgressionBattle(BaseModel):
    battle_number: int
    level_at_battle: int
    skills_at_battle: list[str]
    enemy_archetype: EnemyArchetype
    won: bool
    turns: int
    damage_dealt: int
    damage_received: int
    leveled_up: bool = False
    skill_gained: str | None = None


class LevelRecord(BaseModel):
    wins: int = 0
    total: int = 0


class ProgressionRunResult(BaseModel):
    """One simulated run from the start level until defeat or the cap."""

    run_id: int
    clan: Clan
    final_level: int
    total_battles: int
    wins: int
    losses: int
    win_rate: float
    win_rate_by_level: dict[int, LevelRecord] = Field(default_factory=dict)
    skills_acquired: list[str] = Field(default_factory=list)
    battles: list[ProgressionBattle] = Field(default_factory=list)


class LevelBreakpoint(BaseModel):
    level: int
    win_rate_drop: float


class ProgressionSummary(BaseModel):
    """Aggregate of many progression runs of one clan."""

    clan: Clan
    total_runs: int = 0
    average_final_level: float = 0.0
    max_final_level: int = 0
    survival_rate: float = 0.0
    average_win_rate: float = 0.0
    win_rate_by_level: dict[int, float] = Field(default_factory=dict)
    level_breakpoints: list[LevelBreakpoint] = Field(default_factory=list)
    skill_acquisition_stats: dict[str, float] = Field(
        default_factory=dict,
        description="Share of runs that acquired each skill.",
    )
