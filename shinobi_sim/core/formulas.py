"""
Balance configuration for the simulator.

Every coefficient that drives stat derivation, damage resolution, skill
scoring, enemy scaling and approach bonuses lives in one of the frozen models
below. Rebalancing means building a new instance, never editing a formula.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import Side
from .error_handling import InvalidConfigurationError


class ConfigModel(BaseModel):
    """
    Base of every configuration model.

    Invalid values raise `InvalidConfigurationError`, so callers see the
    simulator's own error rather than pydantic's `ValidationError`.
    """

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            problems = "; ".join(error["msg"] for error in exc.errors())
            raise InvalidConfigurationError(f"Invalid {type(self).__name__}: {problems}") from exc


class StatFormulas(ConfigModel):
    """Coefficients used to turn primary attributes into derived stats."""

    model_config = ConfigDict(frozen=True)

    # Resources.
    hp_base: int = 50
    hp_per_willpower: int = 12
    chakra_base: int = 30
    chakra_per_chakra: int = 8
    hp_regen_percent: float = 0.02
    hp_regen_willpower_divisor: float = 20.0
    chakra_regen_per_int: float = 0.2

    # Defense.
    physical_def_soft_cap: int = 200
    elemental_def_soft_cap: int = 200
    mental_def_soft_cap: int = 150
    flat_phys_def_per_str: float = 0.3
    flat_elem_def_per_spirit: float = 0.3
    flat_mental_def_per_calm: float = 0.25
    max_percent_defense: float = 0.75

    # Accuracy and evasion.
    evasion_soft_cap: int = 250
    base_hit_chance: float = 92.0
    hit_per_stat: float = 0.3

    # Critical hits.
    base_crit_chance: float = 8.0
    crit_per_dex: float = 0.5
    max_crit_chance: float = 75.0
    base_crit_mult: float = 1.75
    ranged_crit_bonus_per_acc: float = 0.008

    # Survival.
    guts_soft_cap: int = 200
    status_resist_soft_cap: int = 80

    # Turn order.
    init_base: int = 10
    init_per_speed: float = 1.0


class CombatRules(ConfigModel):
    """Rules of damage resolution and turn processing."""

    model_config = ConfigDict(frozen=True)

    min_hit_chance: float = 30.0
    max_hit_chance: float = 98.0
    defender_speed_hit_penalty: float = 0.5
    missing_scaling_value: int = 10
    super_effective_crit_bonus: float = 20.0
    flat_defense_damage_cap: float = 0.6
    dot_flat_defense_factor: float = 0.5
    dot_flat_damage_cap: float = 0.4
    dot_percent_defense_factor: float = 0.5
    confusion_self_hit_chance: float = 0.5
    confusion_self_damage_per_str: float = 0.5
    initiative_jitter: float = 10.0
    max_turns: int = 100
    enemy_guts: bool = False
    dot_order: tuple[Side, Side] = Field(
        default=(Side.ENEMY, Side.PLAYER),
        description=(
            "Order in which both sides take DoT/regen at the start of a turn. "
            "The side listed first can die before the other side is processed."
        ),
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.max_turns < 1:
            raise InvalidConfigurationError("max_turns must be at least 1")
        if set(self.dot_order) != {Side.PLAYER, Side.ENEMY}:
            raise InvalidConfigurationError("dot_order must list both sides exactly once")


class AIWeights(ConfigModel):
    """Weights of the skill-scoring function."""

    model_config = ConfigDict(frozen=True)

    damage: float = 1.0
    super_effective: float = 50.0
    resisted: float = -30.0
    finish: float = 200.0
    stun: float = 40.0
    dot: float = 25.0
    debuff: float = 20.0
    shield: float = 30.0
    shield_low_hp_factor: float = 2.0
    crit_bonus: float = 2.0
    efficiency: float = 0.5
    unavailable: float = -10000.0
    true_damage: float = 30.0
    piercing: float = 15.0
    auto_hit: float = 20.0
    low_hp_ratio: float = 0.5
    defensive_override_ratio: float = 0.25


class ScalingProfile(ConfigModel):
    """
    Floor and difficulty scaling of enemy stats.

    multiplier = (1 + floor * per_floor) * (difficulty_base + difficulty / difficulty_divisor)
    """

    model_config = ConfigDict(frozen=True)

    name: str
    per_floor: float
    difficulty_base: float
    difficulty_divisor: float

    def multiplier(self, floor: int, difficulty: int) -> float:
        floor_mult = 1 + floor * self.per_floor
        diff_mult = self.difficulty_base + difficulty / self.difficulty_divisor
        return floor_mult * diff_mult


class ApproachTuning(ConfigModel):
    """Coefficients of the stealth ambush opening."""

    model_config = ConfigDict(frozen=True)

    name: str
    stealth_first_hit_multiplier: float
    stealth_initiative_bonus: int
    stealth_guaranteed_first: bool
    stealth_dex_buff: float = 0.0
    stealth_stun_chance: float = 0.0


DEFAULT_FORMULAS = StatFormulas()
DEFAULT_RULES = CombatRules()
DEFAULT_AI_WEIGHTS = AIWeights()

# Balance-testing simulator scaling.
SIMULATION_SCALING = ScalingProfile(
    name="simulation",
    per_floor=0.08,
    difficulty_base=0.50,
    difficulty_divisor=200.0,
)

# Scaling of enemies met during a live run.
LIVE_SCALING = ScalingProfile(
    name="live",
    per_floor=0.08,
    difficulty_base=0.75,
    difficulty_divisor=100.0,
)

# The two stealth tunings are tuned independently; keep them apart.
SIMULATION_STEALTH_FIRST_HIT_MULTIPLIER = 2.5
SIMULATION_STEALTH_INITIATIVE_BONUS = 100
LIVE_STEALTH_FIRST_HIT_MULTIPLIER = 2.0
LIVE_STEALTH_INITIATIVE_BONUS = 50
LIVE_STEALTH_DEX_BUFF = 0.15
LIVE_STEALTH_STUN_CHANCE = 0.15

SIMULATION_APPROACH = ApproachTuning(
    name="simulation",
    stealth_first_hit_multiplier=SIMULATION_STEALTH_FIRST_HIT_MULTIPLIER,
    stealth_initiative_bonus=SIMULATION_STEALTH_INITIATIVE_BONUS,
    stealth_guaranteed_first=True,
)

LIVE_APPROACH = ApproachTuning(
    name="live",
    stealth_first_hit_multiplier=LIVE_STEALTH_FIRST_HIT_MULTIPLIER,
    stealth_initiative_bonus=LIVE_STEALTH_INITIATIVE_BONUS,
    stealth_guaranteed_first=False,
    stealth_dex_buff=LIVE_STEALTH_DEX_BUFF,
    stealth_stun_chance=LIVE_STEALTH_STUN_CHANCE,
)
