"""
Tests for the skill selection AI.
"""

from conftest import make_enemy, make_player, make_skill

from shinobi_sim.character.stats import PrimaryAttributes
from shinobi_sim.combat.npc_ai import (
    get_all_skill_scores,
    score_skill,
    select_best_skill,
    select_skill_by_strategy,
)
from shinobi_sim.core.constants import AIStrategy, DamageType, EffectTarget, EffectType, ElementType
from shinobi_sim.core.formulas import DEFAULT_AI_WEIGHTS
from shinobi_sim.skills.skill import EffectDefinition


def test_unaffordable_skill_gets_sentinel_score():
    expensive = make_skill("expensive", chakra_cost=1000)
    player = make_player([expensive])
    score = score_skill(player.skills[0], player, make_enemy())
    assert not score.usable
    assert score.score == DEFAULT_AI_WEIGHTS.unavailable
    assert score.reasons == ["Not enough chakra"]


def test_skill_on_cooldown_unavailable():
    player = make_player([make_skill()])
    player.skills[0].current_cooldown = 2
    assert score_skill(player.skills[0], player, make_enemy()).reasons == ["On cooldown"]


def test_hp_cost_that_would_kill_unavailable():
    player = make_player([make_skill(hp_cost=500)])
    assert score_skill(player.skills[0], player, make_enemy()).reasons == ["Would kill self"]


def test_super_effective_preferred():
    fire = make_skill("fire", element=ElementType.FIRE)
    water = make_skill("water", element=ElementType.WATER)
    player = make_player([water, fire])
    enemy = make_enemy(element=ElementType.WIND)
    assert select_best_skill(player, enemy).id == "fire"


def test_finishing_blow_bonus():
    player = make_player([make_skill(damage_mult=3.0)])
    enemy = make_enemy()
    enemy.current_hp = 5
    score = score_skill(player.skills[0], player, enemy)
    assert "Can finish the enemy" in score.reasons


def test_first_hit_bonus_scales_expected_damage():
    player = make_player([make_skill()])
    enemy = make_enemy()
    plain = score_skill(player.skills[0], player, enemy)
    opening = score_skill(player.skills[0], player, enemy, is_first_turn=True, first_hit_multiplier=2.5)
    assert opening.expected_damage > plain.expected_damage


def test_scores_sorted_best_first():
    player = make_player([make_skill("weak", damage_mult=0.5), make_skill("strong", damage_mult=3.0)])
    scores = get_all_skill_scores(player, make_enemy())
    assert [s.skill.id for s in scores] == ["strong", "weak"]


def test_falls_back_to_first_skill_when_nothing_usable():
    player = make_player([make_skill("a", chakra_cost=999), make_skill("b", chakra_cost=999)])
    assert select_best_skill(player, make_enemy()).id == "a"


def test_low_hp_forces_defensive_strategy():
    guard = make_skill(
        "guard",
        damage_mult=0,
        effects=(EffectDefinition(type=EffectType.SHIELD, applies_to=EffectTarget.SELF, duration=2, value=30),),
    )
    player = make_player([make_skill("strike", damage_mult=3.0), guard], PrimaryAttributes(strength=30))
    player.current_hp = 10
    choice = select_skill_by_strategy(player, make_enemy(), AIStrategy.AGGRESSIVE)
    assert choice.id == "guard"


def test_burst_picks_highest_multiplier():
    player = make_player(
        [make_skill("fast", damage_mult=1.2, crit_bonus=40), make_skill("heavy", damage_mult=2.0)],
    )
    assert select_skill_by_strategy(player, make_enemy(), AIStrategy.BURST).id == "heavy"


def test_hp_cost_earns_no_efficiency_bonus():
    """
    Test that efficiency divides by chakra cost only, so paying HP scores like paying nothing.
    """
    player = make_player([make_skill("free"), make_skill("blood", hp_cost=10)])
    enemy = make_enemy()
    free, blood = (score_skill(instance, player, enemy) for instance in player.skills)
    assert blood.score == free.score
    assert not any(reason.startswith("Efficiency") for reason in blood.reasons)


def test_chakra_cost_earns_efficiency_bonus():
    player = make_player([make_skill("free"), make_skill("jutsu", chakra_cost=10)])
    enemy = make_enemy()
    free, jutsu = (score_skill(instance, player, enemy) for instance in player.skills)
    assert jutsu.score > free.score
    assert any(reason.endswith("/chakra") for reason in jutsu.reasons)


def test_true_damage_bonus_applies_to_utility_skills():
    trick = make_skill("trick", damage_mult=0, damage_type=DamageType.TRUE)
    player = make_player([trick])
    assert "TRUE damage" in score_skill(player.skills[0], player, make_enemy()).reasons
