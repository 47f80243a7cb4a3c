"""
Status effects: active buffs, the mitigation pipeline and the buff lifecycle.
"""

from .buff import Buff, find_effect, has_effect
from .lifecycle import DotTick, calculate_dot_damage, process_dot_and_regen, tick_durations
from .mitigation import MitigationResult, apply_mitigation

__all__ = [
    "Buff",
    "has_effect",
    "find_effect",
    "MitigationResult",
    "apply_mitigation",
    "DotTick",
    "tick_durations",
    "calculate_dot_damage",
    "process_dot_and_regen",
]
