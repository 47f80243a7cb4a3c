"""
Combat: damage resolution, skill selection AI, approaches, terrain and the
turn engine shared by live encounters and the batch simulator.
"""

from .approach import (
    APPROACH_DEFINITIONS,
    ApproachResult,
    apply_approach,
    meets_approach_requirements,
    resolve_live_approach,
    resolve_simulated_approach,
)
from .damage import (
    DamageResult,
    calculate_damage,
    can_learn_skill,
    check_guts,
    element_multiplier,
    expected_damage,
    resist_status,
)
from .encounter import EncounterOutcome, build_combat_state, run_encounter
from .npc_ai import (
    AISkillChooser,
    SkillScore,
    get_all_skill_scores,
    score_skill,
    select_best_skill,
    select_skill_by_strategy,
)
from .state import BattleMetrics, BattleResult, CombatState, TurnLog
from .terrain import TERRAIN_DEFINITIONS, TerrainDefinition, TerrainHazard, get_terrain
from .turn_engine import SkillChooser, TurnEngine

__all__ = [
    # Damage
    "DamageResult",
    "calculate_damage",
    "element_multiplier",
    "expected_damage",
    "check_guts",
    "resist_status",
    "can_learn_skill",
    # Skill selection
    "SkillScore",
    "score_skill",
    "get_all_skill_scores",
    "select_best_skill",
    "select_skill_by_strategy",
    "AISkillChooser",
    # Approaches and terrain
    "ApproachResult",
    "APPROACH_DEFINITIONS",
    "resolve_simulated_approach",
    "resolve_live_approach",
    "meets_approach_requirements",
    "apply_approach",
    "TerrainDefinition",
    "TerrainHazard",
    "TERRAIN_DEFINITIONS",
    "get_terrain",
    # Engine
    "TurnLog",
    "BattleMetrics",
    "BattleResult",
    "CombatState",
    "SkillChooser",
    "TurnEngine",
    "EncounterOutcome",
    "build_combat_state",
    "run_encounter",
]
