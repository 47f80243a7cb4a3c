"""
Main entry point for the shinobi combat simulator.

Runs a small seeded balance simulation and a short progression simulation,
then prints their summaries. With `--play` it instead opens a live encounter
where the player picks the approach and every skill.
"""

import logging
import sys

from .combat.approach import meets_approach_requirements
from .combat.encounter import run_encounter
from .combat.terrain import get_terrain
from .core.constants import ApproachType, Clan, EncounterKind, TerrainType
from .core.logging import setup_logging
from .core.rng import Rng
from .core.utils import cprint, crule
from .generation.clans import create_clan_player
from .generation.encounters import generate_encounter_enemy
from .generation.game_data import load_game_data
from .simulation.models import ProgressionConfig, SimulationConfig
from .simulation.progression import run_full_progression_simulation
from .simulation.runner import print_progression_summary, print_summary, run_full_simulation
from .ui.cli_interface import HumanSkillChooser

DEMO_SEED = 42


def run_demo() -> None:
    crule("Shinobi Combat Simulator", style="bold green")
    config = SimulationConfig(battles_per_config=50, seed=DEMO_SEED)
    output = run_full_simulation(config)
    print_summary(output)

    progression = ProgressionConfig(runs_to_simulate=10, seed=DEMO_SEED)
    print_progression_summary(run_full_progression_simulation(progression))


def play() -> None:
    crule("Live encounter", style="bold green")
    data = load_game_data()
    rng = Rng()
    player = create_clan_player(Clan.UZUMAKI, data, level=5)
    enemy = generate_encounter_enemy(5, EncounterKind.NORMAL, 50, data, rng)
    terrain = get_terrain(TerrainType.FOG_BANK)
    chooser = HumanSkillChooser()

    cprint(f"{player.name} meets {enemy.name} in the {terrain.name}.", style="bold blue")
    available = [
        a
        for a in ApproachType
        if meets_approach_requirements(a, player.effective_primary(), terrain, enemy.is_elite)[0]
    ]
    approach = chooser.choose_approach(available)
    outcome = run_encounter(player, enemy, approach, terrain, chooser, rng)
    verdict = "Victory" if outcome.won else "Defeat"
    cprint(
        f"{verdict} ({outcome.approach.approach.display_name}, "
        f"{'success' if outcome.approach.success else 'failure'}), "
        f"HP {outcome.player_final_hp}, XP x{outcome.xp_multiplier:.2f}",
        style="bold",
    )


def main() -> None:
    setup_logging(logging.INFO)
    if "--play" in sys.argv[1:]:
        play()
    else:
        run_demo()


if __name__ == "__main__":
    main()
