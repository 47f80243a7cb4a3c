"""
Skill templates, per-combatant skill copies and the skill registry.
"""

from .registry import (
    BASIC_ATTACK_ID,
    SKILL_DEFINITIONS,
    SkillRegistry,
    build_default_registry,
)
from .skill import EffectDefinition, Skill, SkillInstance

__all__ = [
    "EffectDefinition",
    "Skill",
    "SkillInstance",
    "SkillRegistry",
    "SKILL_DEFINITIONS",
    "BASIC_ATTACK_ID",
    "build_default_registry",
]
