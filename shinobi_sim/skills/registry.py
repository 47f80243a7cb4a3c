"""
Skill registry.

The registry is built once from `SKILL_DEFINITIONS` and exposes a read-only
mapping. Combatants never look skills up by id during a battle: ids are
resolved into `SkillInstance` copies when the combatant is created.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from ..core.constants import (
    AttackMethod,
    Clan,
    DamageProperty,
    DamageType,
    EffectTarget,
    EffectType,
    ElementType,
    PrimaryStat,
    SkillTier,
)
from ..core.error_handling import SkillNotFoundError
from .skill import EffectDefinition, Skill, SkillInstance

BASIC_ATTACK_ID = "basic_atk"


def _on_self(effect_type: EffectType, duration: int, **kwargs) -> EffectDefinition:
    return EffectDefinition(type=effect_type, applies_to=EffectTarget.SELF, duration=duration, **kwargs)


def _on_target(effect_type: EffectType, duration: int, **kwargs) -> EffectDefinition:
    return EffectDefinition(type=effect_type, applies_to=EffectTarget.TARGET, duration=duration, **kwargs)


_P = DamageType.PHYSICAL
_E = DamageType.ELEMENTAL
_M = DamageType.MENTAL
_T = DamageType.TRUE

SKILL_DEFINITIONS: tuple[Skill, ...] = (
    # =========================================================================
    # Common
    # =========================================================================
    Skill(
        id=BASIC_ATTACK_ID,
        name="Taijutsu",
        tier=SkillTier.COMMON,
        description="A disciplined flurry of punches and kicks.",
        damage_mult=1.0,
        scaling_stat=PrimaryStat.STRENGTH,
        damage_type=_P,
        attack_method=AttackMethod.MELEE,
        element=ElementType.PHYSICAL,
    ),
    Skill(
        id="shuriken",
        name="Shuriken",
        tier=SkillTier.COMMON,
        description="Thrown steel that favours precise hands.",
        cooldown=1,
        damage_mult=0.8,
        scaling_stat=PrimaryStat.ACCURACY,
        damage_type=_P,
        attack_method=AttackMethod.RANGED,
        element=ElementType.PHYSICAL,
        crit_bonus=25,
    ),
    Skill(
        id="mud_wall",
        name="Mud Wall",
        tier=SkillTier.COMMON,
        chakra_cost=15,
        cooldown=4,
        damage_mult=0.5,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        attack_method=AttackMethod.AUTO,
        element=ElementType.EARTH,
        required_int=8,
        effects=(_on_self(EffectType.BUFF, 3, value=0.3, target_stat=PrimaryStat.STRENGTH),),
    ),
    Skill(
        id="phoenix_flower",
        name="Phoenix Flower",
        tier=SkillTier.COMMON,
        chakra_cost=20,
        cooldown=2,
        damage_mult=1.5,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        attack_method=AttackMethod.RANGED,
        element=ElementType.FIRE,
        required_int=10,
        effects=(
            _on_target(
                EffectType.BURN, 2, chance=0.5, value=5,
                damage_type=_E, damage_property=DamageProperty.NORMAL,
            ),
        ),
    ),
    # =========================================================================
    # Rare
    # =========================================================================
    Skill(
        id="rasengan",
        name="Rasengan",
        tier=SkillTier.RARE,
        chakra_cost=35,
        cooldown=3,
        damage_mult=2.8,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        damage_property=DamageProperty.PIERCING,
        attack_method=AttackMethod.MELEE,
        element=ElementType.WIND,
        required_int=14,
        effects=(
            _on_target(EffectType.DEBUFF, 3, chance=0.5, value=0.2, target_stat=PrimaryStat.STRENGTH),
        ),
    ),
    Skill(
        id="fireball",
        name="Fireball Jutsu",
        tier=SkillTier.RARE,
        chakra_cost=25,
        cooldown=3,
        damage_mult=2.4,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        attack_method=AttackMethod.RANGED,
        element=ElementType.FIRE,
        required_int=12,
        effects=(
            _on_target(
                EffectType.BURN, 3, chance=0.8, value=15,
                damage_type=_E, damage_property=DamageProperty.NORMAL,
            ),
        ),
    ),
    Skill(
        id="gentle_fist",
        name="Gentle Fist",
        tier=SkillTier.RARE,
        chakra_cost=15,
        cooldown=2,
        damage_mult=1.4,
        scaling_stat=PrimaryStat.ACCURACY,
        damage_type=_T,
        attack_method=AttackMethod.MELEE,
        element=ElementType.PHYSICAL,
        required_int=12,
        effects=(_on_target(EffectType.CHAKRA_DRAIN, 1, chance=0.6, value=15),),
    ),
    Skill(
        id="sharingan_2",
        name="Sharingan (2-Tomoe)",
        tier=SkillTier.RARE,
        chakra_cost=10,
        cooldown=5,
        damage_mult=0,
        scaling_stat=PrimaryStat.INTELLIGENCE,
        damage_type=_P,
        attack_method=AttackMethod.AUTO,
        element=ElementType.FIRE,
        required_int=14,
        required_clan=Clan.UCHIHA,
        is_toggle=True,
        upkeep_cost=5,
        effects=(
            _on_self(EffectType.BUFF, -1, value=0.3, target_stat=PrimaryStat.SPEED),
            _on_self(EffectType.BUFF, -1, value=0.25, target_stat=PrimaryStat.DEXTERITY),
        ),
    ),
    Skill(
        id="water_prison",
        name="Water Prison",
        tier=SkillTier.RARE,
        chakra_cost=30,
        cooldown=5,
        damage_mult=1.2,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        attack_method=AttackMethod.RANGED,
        element=ElementType.WATER,
        required_int=14,
        effects=(_on_target(EffectType.STUN, 2, chance=0.7),),
    ),
    Skill(
        id="hell_viewing",
        name="Hell Viewing Technique",
        tier=SkillTier.RARE,
        chakra_cost=25,
        cooldown=4,
        damage_mult=1.5,
        scaling_stat=PrimaryStat.CALMNESS,
        damage_type=_M,
        attack_method=AttackMethod.AUTO,
        element=ElementType.MENTAL,
        required_int=16,
        effects=(
            _on_target(EffectType.DEBUFF, 3, chance=1.0, value=0.3, target_stat=PrimaryStat.STRENGTH),
        ),
    ),
    Skill(
        id="mind_destruction",
        name="Mind Body Disturbance",
        tier=SkillTier.RARE,
        chakra_cost=30,
        cooldown=4,
        damage_mult=1.8,
        scaling_stat=PrimaryStat.CALMNESS,
        damage_type=_M,
        damage_property=DamageProperty.PIERCING,
        attack_method=AttackMethod.AUTO,
        element=ElementType.MENTAL,
        required_int=18,
        effects=(_on_target(EffectType.CONFUSION, 3, chance=1.0),),
    ),
    # =========================================================================
    # Epic
    # =========================================================================
    Skill(
        id="shadow_clone",
        name="Shadow Clone Jutsu",
        tier=SkillTier.EPIC,
        chakra_cost=50,
        cooldown=6,
        damage_mult=0,
        scaling_stat=PrimaryStat.CHAKRA,
        damage_type=_P,
        attack_method=AttackMethod.AUTO,
        element=ElementType.PHYSICAL,
        required_int=18,
        effects=(
            _on_self(EffectType.BUFF, 3, value=0.5, target_stat=PrimaryStat.STRENGTH),
            _on_self(EffectType.BUFF, 3, value=0.3, target_stat=PrimaryStat.SPEED),
        ),
    ),
    Skill(
        id="primary_lotus",
        name="Primary Lotus",
        tier=SkillTier.EPIC,
        hp_cost=25,
        cooldown=4,
        damage_mult=3.8,
        scaling_stat=PrimaryStat.STRENGTH,
        damage_type=_P,
        damage_property=DamageProperty.PIERCING,
        attack_method=AttackMethod.MELEE,
        element=ElementType.PHYSICAL,
        required_int=6,
        effects=(_on_self(EffectType.BUFF, 2, value=0.3, target_stat=PrimaryStat.STRENGTH),),
    ),
    Skill(
        id="chidori",
        name="Chidori",
        tier=SkillTier.EPIC,
        chakra_cost=35,
        cooldown=4,
        damage_mult=3.2,
        scaling_stat=PrimaryStat.SPEED,
        damage_type=_E,
        damage_property=DamageProperty.PIERCING,
        attack_method=AttackMethod.MELEE,
        element=ElementType.LIGHTNING,
        required_int=16,
        crit_bonus=15,
        penetration=0.2,
    ),
    Skill(
        id="chidori_stream",
        name="Chidori Stream",
        tier=SkillTier.EPIC,
        chakra_cost=40,
        cooldown=4,
        damage_mult=2.5,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        attack_method=AttackMethod.AUTO,
        element=ElementType.LIGHTNING,
        required_int=18,
        effects=(_on_target(EffectType.STUN, 1, chance=0.8),),
    ),
    Skill(
        id="sand_coffin",
        name="Sand Coffin",
        tier=SkillTier.EPIC,
        chakra_cost=40,
        cooldown=5,
        damage_mult=2.4,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        damage_property=DamageProperty.ARMOR_BREAK,
        attack_method=AttackMethod.RANGED,
        element=ElementType.EARTH,
        required_int=16,
        effects=(_on_target(EffectType.STUN, 1, chance=0.7),),
    ),
    Skill(
        id="water_dragon",
        name="Water Dragon Jutsu",
        tier=SkillTier.EPIC,
        chakra_cost=30,
        cooldown=4,
        damage_mult=2.6,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        attack_method=AttackMethod.RANGED,
        element=ElementType.WATER,
        required_int=18,
    ),
    Skill(
        id="false_surroundings",
        name="False Surroundings",
        tier=SkillTier.EPIC,
        chakra_cost=45,
        cooldown=5,
        damage_mult=0,
        scaling_stat=PrimaryStat.CALMNESS,
        damage_type=_M,
        attack_method=AttackMethod.AUTO,
        element=ElementType.MENTAL,
        required_int=20,
        effects=(_on_target(EffectType.CONFUSION, 3, chance=0.8),),
    ),
    Skill(
        id="temple_nirvana",
        name="Temple of Nirvana",
        tier=SkillTier.EPIC,
        chakra_cost=50,
        cooldown=6,
        damage_mult=0,
        scaling_stat=PrimaryStat.CALMNESS,
        damage_type=_M,
        damage_property=DamageProperty.PIERCING,
        attack_method=AttackMethod.AUTO,
        element=ElementType.MENTAL,
        required_int=22,
        effects=(_on_target(EffectType.STUN, 2, chance=1.0),),
    ),
    # =========================================================================
    # Legendary
    # =========================================================================
    Skill(
        id="demon_slash",
        name="Demon Slash",
        tier=SkillTier.LEGENDARY,
        cooldown=2,
        damage_mult=2.0,
        scaling_stat=PrimaryStat.STRENGTH,
        damage_type=_P,
        damage_property=DamageProperty.PIERCING,
        attack_method=AttackMethod.MELEE,
        element=ElementType.PHYSICAL,
        required_int=10,
        effects=(
            _on_target(
                EffectType.BLEED, 3, chance=1.0, value=15,
                damage_type=_P, damage_property=DamageProperty.PIERCING,
            ),
        ),
    ),
    Skill(
        id="bone_drill",
        name="Dance of Clematis",
        tier=SkillTier.LEGENDARY,
        hp_cost=10,
        cooldown=3,
        damage_mult=2.0,
        scaling_stat=PrimaryStat.STRENGTH,
        damage_type=_T,
        attack_method=AttackMethod.MELEE,
        element=ElementType.PHYSICAL,
        required_int=8,
        crit_bonus=30,
    ),
    Skill(
        id="poison_fog",
        name="Ibuse Poison Fog",
        tier=SkillTier.LEGENDARY,
        chakra_cost=20,
        cooldown=3,
        damage_mult=1.5,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        attack_method=AttackMethod.RANGED,
        element=ElementType.FIRE,
        required_int=14,
        effects=(
            _on_target(
                EffectType.POISON, 4, chance=1.0, value=18,
                damage_type=_T, damage_property=DamageProperty.NORMAL,
            ),
        ),
    ),
    Skill(
        id="tsukuyomi",
        name="Tsukuyomi",
        tier=SkillTier.LEGENDARY,
        chakra_cost=80,
        hp_cost=15,
        cooldown=6,
        damage_mult=3.5,
        scaling_stat=PrimaryStat.CALMNESS,
        damage_type=_T,
        attack_method=AttackMethod.AUTO,
        element=ElementType.MENTAL,
        required_int=24,
        required_clan=Clan.UCHIHA,
        effects=(_on_target(EffectType.STUN, 1, chance=1.0),),
    ),
    # =========================================================================
    # Forbidden
    # =========================================================================
    Skill(
        id="c4_karura",
        name="C4 Karura",
        tier=SkillTier.FORBIDDEN,
        chakra_cost=100,
        cooldown=6,
        damage_mult=3.0,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_T,
        attack_method=AttackMethod.AUTO,
        element=ElementType.EARTH,
        required_int=22,
    ),
    Skill(
        id="rasenshuriken",
        name="Rasenshuriken",
        tier=SkillTier.FORBIDDEN,
        chakra_cost=120,
        cooldown=5,
        damage_mult=4.0,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_T,
        damage_property=DamageProperty.PIERCING,
        attack_method=AttackMethod.RANGED,
        element=ElementType.WIND,
        required_int=20,
    ),
    Skill(
        id="amaterasu",
        name="Amaterasu",
        tier=SkillTier.FORBIDDEN,
        chakra_cost=80,
        hp_cost=20,
        cooldown=5,
        damage_mult=1.5,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        damage_property=DamageProperty.PIERCING,
        attack_method=AttackMethod.AUTO,
        element=ElementType.FIRE,
        required_int=22,
        required_clan=Clan.UCHIHA,
        effects=(
            _on_target(
                EffectType.BURN, 5, chance=1.0, value=50,
                damage_type=_T, damage_property=DamageProperty.NORMAL,
            ),
        ),
    ),
    Skill(
        id="kirin",
        name="Kirin",
        tier=SkillTier.FORBIDDEN,
        chakra_cost=150,
        cooldown=8,
        damage_mult=4.5,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_E,
        damage_property=DamageProperty.ARMOR_BREAK,
        attack_method=AttackMethod.AUTO,
        element=ElementType.LIGHTNING,
        required_int=24,
    ),
    Skill(
        id="shinra_tensei",
        name="Shinra Tensei",
        tier=SkillTier.FORBIDDEN,
        chakra_cost=80,
        cooldown=5,
        damage_mult=3.0,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_T,
        attack_method=AttackMethod.AUTO,
        element=ElementType.WIND,
        required_int=26,
        effects=(_on_target(EffectType.STUN, 1, chance=0.5),),
    ),
    Skill(
        id="kamui_impact",
        name="Kamui",
        tier=SkillTier.FORBIDDEN,
        chakra_cost=60,
        cooldown=4,
        damage_mult=3.5,
        scaling_stat=PrimaryStat.INTELLIGENCE,
        damage_type=_T,
        attack_method=AttackMethod.AUTO,
        element=ElementType.PHYSICAL,
        required_int=24,
        effects=(
            _on_target(EffectType.DEBUFF, 2, chance=1.0, value=0.5, target_stat=PrimaryStat.SPEED),
        ),
    ),
    Skill(
        id="tengai_shinsei",
        name="Tengai Shinsei",
        tier=SkillTier.FORBIDDEN,
        chakra_cost=150,
        cooldown=8,
        damage_mult=5.0,
        scaling_stat=PrimaryStat.SPIRIT,
        damage_type=_T,
        attack_method=AttackMethod.AUTO,
        element=ElementType.EARTH,
        required_int=28,
    ),
)


class SkillRegistry:
    """Read-only lookup of skill templates by id."""

    def __init__(self, skills: Iterable[Skill]) -> None:
        table: dict[str, Skill] = {}
        for skill in skills:
            if skill.id in table:
                raise ValueError(f"Duplicate skill id '{skill.id}'")
            table[skill.id] = skill
        self._skills: Mapping[str, Skill] = MappingProxyType(table)

    def __contains__(self, skill_id: object) -> bool:
        return skill_id in self._skills

    def __len__(self) -> int:
        return len(self._skills)

    def __iter__(self):
        return iter(self._skills.values())

    @property
    def skills(self) -> Mapping[str, Skill]:
        return self._skills

    def get(self, skill_id: str, context: str = "") -> Skill:
        """
        Returns the skill with the given id.

        Raises:
            SkillNotFoundError: If the id is not registered.

        """
        try:
            return self._skills[skill_id]
        except KeyError:
            raise SkillNotFoundError(skill_id, context) from None

    def instantiate(self, skill_ids: Iterable[str], context: str = "") -> list[SkillInstance]:
        """Resolves ids into fresh per-combatant skill copies."""
        return [SkillInstance(skill=self.get(skill_id, context)) for skill_id in skill_ids]

    @property
    def basic_attack(self) -> Skill:
        return self.get(BASIC_ATTACK_ID)


def build_default_registry() -> SkillRegistry:
    """Builds the registry of every skill known to the game."""
    return SkillRegistry(SKILL_DEFINITIONS)
