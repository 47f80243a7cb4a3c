"""
Active status effects.

A `Buff` is one instance of an `EffectDefinition` living on a combatant. Its
`value` is mutable only for SHIELD buffs, whose remaining absorption capacity
shrinks as damage is absorbed.
"""

from pydantic import BaseModel, Field

from ..core.constants import PERMANENT_DURATION, EffectType, PrimaryStat
from ..core.utils import IdSequence
from ..skills.skill import EffectDefinition


class Buff(BaseModel):
    """An active status effect owned by the combatant it affects."""

    id: str = Field(
        description="Unique id within the owner's buff list for the whole battle.",
    )
    name: str = Field(
        description="Display name of the buff.",
    )
    duration: int = Field(
        description="Remaining turns, -1 for permanent (toggle) buffs.",
    )
    source: str = Field(
        "",
        description="Name of the skill or approach that created the buff.",
    )
    effect: EffectDefinition = Field(
        description="The effect template this buff instantiates.",
    )
    value: float | None = Field(
        default=None,
        description="Current magnitude; starts as the effect value.",
    )

    @classmethod
    def from_effect(cls, effect: EffectDefinition, source: str, ids: IdSequence) -> "Buff":
        """
        Instantiates an effect template as a new buff.

        Args:
            effect (EffectDefinition): The effect template.
            source (str): Name of what created the buff.
            ids (IdSequence): Id generator of the current battle.

        Returns:
            Buff: A buff with a fresh unique id.

        """
        return cls(
            id=ids.next_id(effect.type.value.lower()),
            name=effect.type.display_name,
            duration=effect.duration,
            source=source,
            effect=effect,
            value=effect.value,
        )

    @property
    def type(self) -> EffectType:
        return self.effect.type

    @property
    def target_stat(self) -> PrimaryStat | None:
        return self.effect.target_stat

    @property
    def is_permanent(self) -> bool:
        return self.duration == PERMANENT_DURATION

    def __str__(self) -> str:
        turns = "∞" if self.is_permanent else str(self.duration)
        return f"{self.type.emoji} {self.name} ({turns})"


def has_effect(buffs: list[Buff], effect_type: EffectType) -> bool:
    """Returns True if any buff in the list has the given type."""
    return any(buff.type == effect_type for buff in buffs)


def find_effect(buffs: list[Buff], effect_type: EffectType) -> Buff | None:
    """Returns the first buff of the given type, if any."""
    return next((buff for buff in buffs if buff.type == effect_type), None)
