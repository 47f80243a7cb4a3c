"""
Live encounters.

An encounter rolls the chosen approach, applies its costs and opening
effects, and then hands the combatants to the shared turn engine.
"""

from pydantic import BaseModel, ConfigDict

from ..character.combatant import Enemy, Player
from ..core.constants import ApproachType
from ..core.formulas import DEFAULT_FORMULAS, DEFAULT_RULES, CombatRules, StatFormulas
from ..core.rng import Rng
from ..core.utils import IdSequence
from .approach import ApproachResult, apply_approach, meets_approach_requirements, resolve_live_approach
from .npc_ai import AISkillChooser
from .state import BattleResult, CombatState
from .terrain import TerrainDefinition
from .turn_engine import SkillChooser, TurnEngine


class EncounterOutcome(BaseModel):
    """What the caller needs after an encounter."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    won: bool
    skipped: bool = False
    approach: ApproachResult
    player_final_hp: int
    player_final_chakra: int
    xp_multiplier: float = 1.0
    result: BattleResult | None = None


def build_combat_state(
    approach: ApproachResult,
    terrain: TerrainDefinition | None = None,
    ids: IdSequence | None = None,
) -> CombatState:
    """Creates the battle context carrying an approach opening."""
    return CombatState(
        terrain=terrain,
        approach=approach.approach,
        approach_succeeded=approach.success,
        guaranteed_first=approach.guaranteed_first,
        player_initiative_bonus=approach.initiative_bonus,
        first_hit_multiplier=approach.first_hit_multiplier,
        first_hit_pending=approach.first_hit_multiplier > 1.0,
        ids=ids or IdSequence(),
    )


def run_encounter(
    player: Player,
    enemy: Enemy,
    approach: ApproachType,
    terrain: TerrainDefinition | None,
    player_chooser: SkillChooser,
    rng: Rng,
    enemy_chooser: SkillChooser | None = None,
    rules: CombatRules = DEFAULT_RULES,
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> EncounterOutcome:
    """
    Resolves a live encounter.

    Args:
        player (Player): The player, mutated in place.
        enemy (Enemy): The enemy, mutated in place.
        approach (ApproachType): The approach the player picked.
        terrain (TerrainDefinition | None): The battlefield.
        player_chooser (SkillChooser): Human or AI skill selection.
        rng (Rng): Random source of the encounter.
        enemy_chooser (SkillChooser | None): The enemy's selection, the
            scoring AI by default.
        rules (CombatRules): Combat rules.
        formulas (StatFormulas): Stat formulas.

    Returns:
        EncounterOutcome: The result of the approach and of the battle.

    Raises:
        ValueError: If the player does not meet the approach requirements.

    """
    allowed, reason = meets_approach_requirements(
        approach, player.effective_primary(), terrain, enemy.is_boss or enemy.is_elite
    )
    if not allowed:
        raise ValueError(f"{approach.display_name} unavailable: {reason}")

    opening = resolve_live_approach(approach, player.effective_primary(), terrain, rng)
    state = build_combat_state(opening, terrain)
    apply_approach(opening, player, enemy, state.ids, formulas)

    if opening.skip_combat:
        return EncounterOutcome(
            won=True,
            skipped=True,
            approach=opening,
            player_final_hp=player.current_hp,
            player_final_chakra=player.current_chakra,
            xp_multiplier=opening.xp_multiplier,
        )

    engine = TurnEngine(rng, rules, formulas)
    result = engine.run_battle(
        player,
        enemy,
        player_chooser,
        enemy_chooser or AISkillChooser(rules=rules, formulas=formulas),
        state=state,
    )
    return EncounterOutcome(
        won=result.won,
        approach=opening,
        player_final_hp=player.current_hp,
        player_final_chakra=player.current_chakra,
        xp_multiplier=opening.xp_multiplier,
        result=result,
    )
