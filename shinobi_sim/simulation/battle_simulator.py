"""
Headless battles.

Every battle gets freshly generated combatants and its own child random
stream, so battles share no mutable state. Child streams are drawn from the
simulator's stream one after another, so a seeded batch replays exactly only
when its battles are simulated in the same order.
"""

from ..combat.approach import apply_approach, resolve_simulated_approach
from ..combat.encounter import build_combat_state
from ..combat.npc_ai import AISkillChooser
from ..combat.state import BattleResult, CombatState
from ..combat.turn_engine import SkillChooser, TurnEngine
from ..core.constants import ApproachType, EnemyArchetype
from ..core.formulas import (
    DEFAULT_FORMULAS,
    DEFAULT_RULES,
    SIMULATION_APPROACH,
    SIMULATION_SCALING,
    ApproachTuning,
    CombatRules,
    ScalingProfile,
    StatFormulas,
)
from ..core.logging import log_debug
from ..core.rng import Rng
from ..generation.archetypes import generate_archetype_enemy
from ..generation.builds import PlayerBuildConfig, create_build_from_config
from ..generation.game_data import GameData
from .models import SimulationConfig


class BattleSimulator:
    """Runs headless battles between builds and archetypes."""

    def __init__(
        self,
        data: GameData,
        rng: Rng,
        rules: CombatRules = DEFAULT_RULES,
        formulas: StatFormulas = DEFAULT_FORMULAS,
        scaling: ScalingProfile = SIMULATION_SCALING,
        tuning: ApproachTuning = SIMULATION_APPROACH,
        player_chooser: SkillChooser | None = None,
        enemy_chooser: SkillChooser | None = None,
    ) -> None:
        self.data = data
        self.rng = rng
        self.rules = rules
        self.formulas = formulas
        self.scaling = scaling
        self.tuning = tuning
        self.player_chooser = player_chooser or AISkillChooser(rules=rules, formulas=formulas)
        self.enemy_chooser = enemy_chooser or AISkillChooser(rules=rules, formulas=formulas)

    def simulate_battle(
        self,
        build: PlayerBuildConfig,
        archetype: EnemyArchetype,
        config: SimulationConfig,
        battle_id: int = 0,
        approach: ApproachType | None = None,
        rng: Rng | None = None,
    ) -> BattleResult:
        """
        Runs one battle with fresh combatants.

        Args:
            build (PlayerBuildConfig): The player's build.
            archetype (EnemyArchetype): The enemy template.
            config (SimulationConfig): Floor, difficulty and turn cap.
            battle_id (int): Index reported in the result.
            approach (ApproachType | None): Opening to roll before the battle.
            rng (Rng | None): Random stream of this battle. A child of the
                simulator's stream is spawned when omitted.

        Returns:
            BattleResult: The outcome of the battle.

        """
        rng = rng or self.rng.spawn(battle_id)
        player = create_build_from_config(build, self.data, self.formulas)

        opening = None
        if approach is not None:
            opening = resolve_simulated_approach(approach, player.effective_primary(), rng, self.tuning)
        state = CombatState() if opening is None else build_combat_state(opening)
        enemy = generate_archetype_enemy(
            archetype,
            config.floor_number,
            config.difficulty,
            self.data,
            ids=state.ids,
            profile=self.scaling,
            formulas=self.formulas,
        )
        if opening is not None:
            apply_approach(opening, player, enemy, state.ids, self.formulas)

        engine = TurnEngine(rng, self.rules, self.formulas)
        return engine.run_battle(
            player,
            enemy,
            self.player_chooser,
            self.enemy_chooser,
            state=state,
            battle_id=battle_id,
            max_turns=config.max_turns_per_battle,
        )

    def run_battles(
        self,
        build: PlayerBuildConfig,
        archetype: EnemyArchetype,
        config: SimulationConfig,
        approach: ApproachType | None = None,
    ) -> list[BattleResult]:
        """
        Runs `config.battles_per_config` independent battles.

        With `approach` set every battle uses it. Otherwise, when approaches
        are enabled in the config, battle `i` uses approach
        `i % len(config.approaches)`.
        """
        results = []
        for battle_id in range(config.battles_per_config):
            battle_approach = approach
            if battle_approach is None and config.enable_approaches:
                battle_approach = config.approaches[battle_id % len(config.approaches)]
            results.append(
                self.simulate_battle(build, archetype, config, battle_id, battle_approach)
            )
        log_debug(
            f"Ran {len(results)} battles",
            {"build": build.name, "archetype": archetype.value},
        )
        return results
