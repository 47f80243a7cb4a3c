"""
Core system module of the shinobi combat simulator.

Contains the enumerations, balance configuration, random source, logging and
error handling shared by every other subsystem.
"""

from .constants import (
    ELEMENTAL_CYCLE,
    PERMANENT_DURATION,
    AIStrategy,
    ApproachType,
    AttackMethod,
    Clan,
    DamageProperty,
    DamageType,
    EffectTarget,
    EffectType,
    ElementType,
    EncounterKind,
    EnemyArchetype,
    NiceEnum,
    PrimaryStat,
    Side,
    SkillTier,
    TerrainType,
)
from .error_handling import (
    InvalidConfigurationError,
    ShinobiSimError,
    SkillNotFoundError,
    UnknownBuildError,
)
from .formulas import (
    DEFAULT_AI_WEIGHTS,
    DEFAULT_FORMULAS,
    DEFAULT_RULES,
    LIVE_APPROACH,
    LIVE_SCALING,
    SIMULATION_APPROACH,
    SIMULATION_SCALING,
    AIWeights,
    ApproachTuning,
    CombatRules,
    ConfigModel,
    ScalingProfile,
    StatFormulas,
)
from .logging import get_logger, setup_logging
from .rng import Rng
from .utils import IdSequence, ccapture, cprint, crule, make_bar

__all__ = [
    # Enumerations
    "NiceEnum",
    "PrimaryStat",
    "ElementType",
    "ELEMENTAL_CYCLE",
    "DamageType",
    "DamageProperty",
    "AttackMethod",
    "EffectType",
    "EffectTarget",
    "SkillTier",
    "Clan",
    "EnemyArchetype",
    "EncounterKind",
    "ApproachType",
    "AIStrategy",
    "TerrainType",
    "Side",
    "PERMANENT_DURATION",
    # Configuration
    "ConfigModel",
    "StatFormulas",
    "CombatRules",
    "AIWeights",
    "ScalingProfile",
    "ApproachTuning",
    "DEFAULT_FORMULAS",
    "DEFAULT_RULES",
    "DEFAULT_AI_WEIGHTS",
    "SIMULATION_SCALING",
    "LIVE_SCALING",
    "SIMULATION_APPROACH",
    "LIVE_APPROACH",
    # Errors
    "ShinobiSimError",
    "SkillNotFoundError",
    "UnknownBuildError",
    "InvalidConfigurationError",
    # Utilities
    "Rng",
    "IdSequence",
    "cprint",
    "crule",
    "ccapture",
    "make_bar",
    "setup_logging",
    "get_logger",
]
