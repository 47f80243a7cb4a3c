"""
Combatants and the stat model.
"""

from .combatant import Combatant, Enemy, Player
from .stats import (
    NO_MODIFIERS,
    DerivedStats,
    EquipmentItem,
    PrimaryAttributes,
    StatModifiers,
    aggregate_equipment_bonuses,
    apply_buffs_to_primary,
    apply_equipment,
    derive_stats,
)

__all__ = [
    # Stat model
    "PrimaryAttributes",
    "DerivedStats",
    "StatModifiers",
    "EquipmentItem",
    "NO_MODIFIERS",
    "derive_stats",
    "apply_buffs_to_primary",
    "apply_equipment",
    "aggregate_equipment_bonuses",
    # Combatants
    "Combatant",
    "Player",
    "Enemy",
]
