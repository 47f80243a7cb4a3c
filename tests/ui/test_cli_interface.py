"""
Tests for the console skill chooser.
"""

from conftest import make_enemy, make_player, make_skill

from shinobi_sim.combat.state import CombatState
from shinobi_sim.core.constants import ApproachType
from shinobi_sim.ui.cli_interface import HumanSkillChooser


class FakeSession:
    """Stands in for a prompt session, replaying canned answers."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = 0

    def prompt(self, message):
        self.prompts += 1
        return self.answers.pop(0)


def test_get_digit_choice():
    assert HumanSkillChooser.get_digit_choice("3") == 3
    assert HumanSkillChooser.get_digit_choice("12") == -1
    assert HumanSkillChooser.get_digit_choice("x") == -1
    assert HumanSkillChooser.get_digit_choice(None) == -1


def test_choose_skill_reprompts_until_usable():
    """
    Test that invalid and unaffordable picks are refused until a usable skill is chosen.
    """
    player = make_player([make_skill("big", chakra_cost=999), make_skill("small")])
    session = FakeSession(["9", "1", "2"])
    chooser = HumanSkillChooser(session=session)
    chosen = chooser.choose_skill(player, make_enemy(), CombatState(turn=1))
    assert chosen.id == "small"
    assert session.prompts == 3


def test_choose_skill_with_nothing_usable_returns_first():
    player = make_player([make_skill("big", chakra_cost=999)])
    chooser = HumanSkillChooser(session=FakeSession(["1"]))
    assert chooser.choose_skill(player, make_enemy(), CombatState()).id == "big"


def test_choose_approach():
    approaches = [ApproachType.FRONTAL_ASSAULT, ApproachType.STEALTH_AMBUSH]
    chooser = HumanSkillChooser(session=FakeSession(["0", "2"]))
    assert chooser.choose_approach(approaches) == ApproachType.STEALTH_AMBUSH
