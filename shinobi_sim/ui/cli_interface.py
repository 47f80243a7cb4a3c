"""
User interface module for the simulator.

Provides the console skill chooser used by live encounters: the player's
skills are rendered as a rich table and the choice is read with
prompt_toolkit.
"""

from typing import Any, Sequence

from prompt_toolkit import ANSI, PromptSession
from rich.table import Table

from ..character.combatant import Combatant
from ..combat.state import CombatState
from ..core.constants import ApproachType
from ..core.formulas import DEFAULT_FORMULAS, StatFormulas
from ..core.utils import ccapture
from ..skills.skill import SkillInstance


class HumanSkillChooser:
    """
    Command-line skill selection for the player's side of a battle.

    Every turn prints both combatants and a numbered table of skills. Skills
    on cooldown or too expensive are listed but cannot be picked.
    """

    def __init__(
        self,
        session: PromptSession | None = None,
        formulas: StatFormulas = DEFAULT_FORMULAS,
    ) -> None:
        # one session keeps history
        self.session = session or PromptSession(erase_when_done=True)
        self.formulas = formulas

    def choose_skill(self, actor: Combatant, opponent: Combatant, state: CombatState) -> SkillInstance:
        """Asks the player for a skill until a usable one is picked."""
        usable = actor.usable_skills()
        table = Table(title=f"Turn {state.turn}", pad_edge=False)
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Skill", style="bold")
        table.add_column("Tier")
        table.add_column("Element")
        table.add_column("Cost", justify="right")
        table.add_column("Cooldown", justify="right")
        for i, instance in enumerate(actor.skills, 1):
            skill = instance.skill
            cost = f"{skill.chakra_cost} CK" + (f" {skill.hp_cost} HP" if skill.hp_cost else "")
            cooldown = str(instance.current_cooldown) if instance.current_cooldown else "ready"
            name = skill.colored_name if instance in usable else f"[dim]{skill.name}[/]"
            table.add_row(
                str(i),
                name,
                skill.tier.colored_name,
                f"{skill.element.emoji} {skill.element.colored_name}",
                cost,
                cooldown,
            )
        prompt = (
            "\n"
            + ccapture(opponent.status_line(self.formulas))
            + "\n"
            + ccapture(actor.status_line(self.formulas))
            + "\n"
            + ccapture(table)
            + "\nSkill > "
        )
        while True:
            answer = self.session.prompt(ANSI(prompt))
            index = self.get_digit_choice(answer) - 1
            if 0 <= index < len(actor.skills) and actor.skills[index] in usable:
                return actor.skills[index]
            # Nothing usable: hand any skill back and let the engine fall back.
            if not usable and actor.skills:
                return actor.skills[0]

    def choose_approach(self, approaches: Sequence[ApproachType]) -> ApproachType:
        """Asks the player how to open an encounter."""
        table = Table(title="Approach", pad_edge=False)
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Name", style="bold")
        for i, approach in enumerate(approaches, 1):
            table.add_row(str(i), approach.display_name)
        prompt = "\n" + ccapture(table) + "\nApproach > "
        while True:
            answer = self.session.prompt(ANSI(prompt))
            index = self.get_digit_choice(answer) - 1
            if 0 <= index < len(approaches):
                return approaches[index]

    @staticmethod
    def get_digit_choice(answer: Any) -> int:
        """
        Convert a single digit string input to its integer value.

        Args:
            answer (Any): User input string to parse.

        Returns:
            int: The integer value of the digit (0-9), or -1 if invalid input.

        """
        if isinstance(answer, str) and len(answer) == 1 and answer.isdigit():
            return int(answer)
        return -1
