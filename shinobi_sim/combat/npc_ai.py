"""
Skill selection AI.

Scores every skill a combatant owns against the current opponent and picks
the best one. The same scorer drives the enemy and the simulated player.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..character.combatant import Combatant
from ..core.constants import AIStrategy, AttackMethod, DamageType, EffectType
from ..core.formulas import (
    DEFAULT_AI_WEIGHTS,
    DEFAULT_FORMULAS,
    DEFAULT_RULES,
    AIWeights,
    CombatRules,
    StatFormulas,
)
from ..core.logging import log_debug
from ..skills.skill import SkillInstance
from .damage import element_multiplier, expected_damage
from .state import CombatState

_DEFENSIVE_EFFECTS = (EffectType.SHIELD, EffectType.HEAL, EffectType.REGEN)
_CONTROL_EFFECTS = (EffectType.STUN, EffectType.CONFUSION, EffectType.SILENCE)


class SkillScore(BaseModel):
    """Score of one skill in the current situation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    skill: SkillInstance
    score: float
    reasons: list[str] = Field(default_factory=list)
    expected_damage: int = 0
    usable: bool = True


def _unavailable(instance: SkillInstance, reason: str, weights: AIWeights) -> SkillScore:
    return SkillScore(skill=instance, score=weights.unavailable, reasons=[reason], usable=False)


def score_skill(
    instance: SkillInstance,
    attacker: Combatant,
    defender: Combatant,
    is_first_turn: bool = False,
    first_hit_multiplier: float = 1.0,
    weights: AIWeights = DEFAULT_AI_WEIGHTS,
    formulas: StatFormulas = DEFAULT_FORMULAS,
    rules: CombatRules = DEFAULT_RULES,
) -> SkillScore:
    """
    Scores a skill for the current combat situation.

    Unusable skills (on cooldown, unaffordable, an already active toggle)
    get the `unavailable` sentinel score.

    Args:
        instance (SkillInstance): The attacker's copy of the skill.
        attacker (Combatant): The combatant choosing a skill.
        defender (Combatant): Its opponent.
        is_first_turn (bool): Whether the first-hit multiplier may apply.
        first_hit_multiplier (float): The opening damage multiplier.
        weights (AIWeights): Scoring weights.
        formulas (StatFormulas): Stat formulas for derived stats.
        rules (CombatRules): Combat rules for the damage estimate.

    Returns:
        SkillScore: The score and the reasons behind it.

    """
    skill = instance.skill
    if not instance.is_ready():
        return _unavailable(instance, "On cooldown", weights)
    if attacker.current_chakra < skill.chakra_cost:
        return _unavailable(instance, "Not enough chakra", weights)
    if attacker.current_hp <= skill.hp_cost:
        return _unavailable(instance, "Would kill self", weights)
    if skill.is_toggle and attacker.has_active_toggle(instance):
        return _unavailable(instance, "Toggle already active", weights)

    reasons: list[str] = []
    score = 0.0

    defender_derived = defender.derived(formulas)
    damage = expected_damage(
        attacker.effective_primary(), defender_derived, skill, defender.element, rules
    )
    if is_first_turn and first_hit_multiplier > 1.0 and damage > 0:
        damage = int(damage * first_hit_multiplier)
        reasons.append(f"First hit bonus ({first_hit_multiplier}x)")

    score += damage * weights.damage
    reasons.append(f"Expected damage: {damage}")

    if not skill.is_utility:
        multiplier = element_multiplier(skill.element, defender.element)
        if multiplier > 1.0:
            score += weights.super_effective
            reasons.append("Super effective")
        elif multiplier < 1.0:
            score += weights.resisted
            reasons.append("Resisted")

    if damage > 0 and damage >= defender.current_hp:
        score += weights.finish
        reasons.append("Can finish the enemy")

    for effect in skill.effects:
        if effect.type == EffectType.STUN:
            score += weights.stun
            reasons.append("Has stun")
        elif effect.type.is_damage_over_time:
            score += weights.dot
            reasons.append("Has DoT")
        elif effect.type == EffectType.DEBUFF:
            score += weights.debuff
            reasons.append("Has debuff")
        elif effect.type == EffectType.SHIELD:
            if attacker.hp_ratio(formulas) < weights.low_hp_ratio:
                score += weights.shield * weights.shield_low_hp_factor
                reasons.append("Shield (low HP)")
            else:
                score += weights.shield
                reasons.append("Has shield")

    if skill.crit_bonus:
        score += skill.crit_bonus * weights.crit_bonus
        reasons.append(f"Crit bonus: +{skill.crit_bonus:g}%")
    if skill.damage_type == DamageType.TRUE:
        score += weights.true_damage
        reasons.append("TRUE damage")
    if skill.penetration:
        score += weights.piercing
        reasons.append("Piercing")
    if skill.attack_method == AttackMethod.AUTO:
        score += weights.auto_hit
        reasons.append("Cannot miss")

    # HP costs are not part of efficiency.
    if skill.chakra_cost > 0 and damage > 0:
        efficiency = damage / skill.chakra_cost
        score += efficiency * weights.efficiency
        reasons.append(f"Efficiency: {efficiency:.2f}/chakra")

    return SkillScore(skill=instance, score=score, reasons=reasons, expected_damage=damage)


def get_all_skill_scores(
    attacker: Combatant,
    defender: Combatant,
    is_first_turn: bool = False,
    first_hit_multiplier: float = 1.0,
    weights: AIWeights = DEFAULT_AI_WEIGHTS,
    formulas: StatFormulas = DEFAULT_FORMULAS,
    rules: CombatRules = DEFAULT_RULES,
) -> list[SkillScore]:
    """Scores every skill of the attacker, best first. Ties keep skill order."""
    scores = [
        score_skill(
            instance, attacker, defender, is_first_turn, first_hit_multiplier, weights, formulas, rules
        )
        for instance in attacker.skills
    ]
    return sorted(scores, key=lambda s: s.score, reverse=True)


def select_best_skill(
    attacker: Combatant,
    defender: Combatant,
    is_first_turn: bool = False,
    first_hit_multiplier: float = 1.0,
    weights: AIWeights = DEFAULT_AI_WEIGHTS,
    formulas: StatFormulas = DEFAULT_FORMULAS,
    rules: CombatRules = DEFAULT_RULES,
) -> SkillInstance:
    """
    Picks the highest-scoring usable skill.

    Falls back to the first owned skill when nothing is usable.

    Raises:
        ValueError: If the attacker has no skills at all.

    """
    if not attacker.skills:
        raise ValueError(f"{attacker.name} has no skills")
    scores = get_all_skill_scores(
        attacker, defender, is_first_turn, first_hit_multiplier, weights, formulas, rules
    )
    for scored in scores:
        if scored.usable:
            return scored.skill
    return attacker.skills[0]


def _first_usable_with(scores: list[SkillScore], effect_types: tuple[EffectType, ...]) -> SkillInstance | None:
    for scored in scores:
        if scored.usable and scored.skill.skill.has_effect(*effect_types):
            return scored.skill
    return None


def select_skill_by_strategy(
    attacker: Combatant,
    defender: Combatant,
    strategy: AIStrategy,
    is_first_turn: bool = False,
    first_hit_multiplier: float = 1.0,
    weights: AIWeights = DEFAULT_AI_WEIGHTS,
    formulas: StatFormulas = DEFAULT_FORMULAS,
    rules: CombatRules = DEFAULT_RULES,
) -> SkillInstance:
    """
    Picks a skill following a named strategy.

    Below the defensive override ratio of max HP every strategy turns
    DEFENSIVE. A strategy that finds no skill of its preferred kind falls
    back to the default ranking.

    Args:
        attacker (Combatant): The combatant choosing a skill.
        defender (Combatant): Its opponent.
        strategy (AIStrategy): The requested strategy.
        is_first_turn (bool): Whether the first-hit multiplier may apply.
        first_hit_multiplier (float): The opening damage multiplier.
        weights (AIWeights): Scoring weights.
        formulas (StatFormulas): Stat formulas for derived stats.
        rules (CombatRules): Combat rules for the damage estimate.

    Returns:
        SkillInstance: The chosen skill.

    """
    if not attacker.skills:
        raise ValueError(f"{attacker.name} has no skills")
    if attacker.hp_ratio(formulas) < weights.defensive_override_ratio:
        strategy = AIStrategy.DEFENSIVE

    scores = get_all_skill_scores(
        attacker, defender, is_first_turn, first_hit_multiplier, weights, formulas, rules
    )
    ranked = [s for s in scores if s.usable]
    default = ranked[0].skill if ranked else attacker.skills[0]

    if strategy == AIStrategy.DEFENSIVE:
        return _first_usable_with(scores, _DEFENSIVE_EFFECTS) or default
    if strategy == AIStrategy.CONTROL:
        return _first_usable_with(scores, _CONTROL_EFFECTS) or default
    if strategy == AIStrategy.BURST:
        burst = sorted(ranked, key=lambda s: s.skill.skill.damage_mult, reverse=True)
        return burst[0].skill if burst else default
    return default


class AISkillChooser:
    """Skill chooser backed by the scoring AI."""

    def __init__(
        self,
        strategy: AIStrategy | None = None,
        weights: AIWeights = DEFAULT_AI_WEIGHTS,
        formulas: StatFormulas = DEFAULT_FORMULAS,
        rules: CombatRules = DEFAULT_RULES,
    ) -> None:
        self.strategy = strategy
        self.weights = weights
        self.formulas = formulas
        self.rules = rules

    def choose_skill(self, actor: Combatant, opponent: Combatant, state: CombatState) -> SkillInstance:
        multiplier = state.first_hit_for(actor.side)
        is_first_turn = multiplier > 1.0
        if self.strategy is None:
            choice = select_best_skill(
                actor, opponent, is_first_turn, multiplier, self.weights, self.formulas, self.rules
            )
        else:
            choice = select_skill_by_strategy(
                actor,
                opponent,
                self.strategy,
                is_first_turn,
                multiplier,
                self.weights,
                self.formulas,
                self.rules,
            )
        log_debug(
            f"{actor.name} chose {choice.name}",
            {"turn": state.turn, "strategy": str(self.strategy), "skill": choice.id},
        )
        return choice
