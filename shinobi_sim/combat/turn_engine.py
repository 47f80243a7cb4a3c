"""
Turn engine.

Runs a whole battle between a player and an enemy. The engine is shared by
the interactive encounter and the batch simulator; the only difference
between the two is the `SkillChooser` injected for each side.

Turn structure:

1. DoT and regeneration, in `CombatRules.dot_order` (enemy first by
   default). The side processed first can die before the other side is
   processed at all.
2. Each side acts in the turn order decided once at the start of the battle:
   STUN skips the action, CONFUSION may make the actor hurt itself, otherwise
   the chooser picks a skill and the engine executes it.
3. End of turn: chakra regeneration, toggle upkeep, cooldown decrement and
   terrain hazards.

The battle ends as soon as one side drops to 0 HP, or at the turn cap.
"""

import math
from typing import Protocol

from catchery import log_warning

from ..character.combatant import Combatant, Enemy, Player
from ..character.stats import DerivedStats
from ..core.constants import EffectTarget, EffectType, Side
from ..core.formulas import DEFAULT_FORMULAS, DEFAULT_RULES, CombatRules, StatFormulas
from ..core.logging import log_debug
from ..core.rng import Rng
from ..effects.buff import Buff
from ..effects.lifecycle import process_dot_and_regen
from ..effects.mitigation import apply_mitigation
from ..skills.registry import BASIC_ATTACK_ID
from ..skills.skill import Skill, SkillInstance
from .damage import calculate_damage, check_guts, resist_status
from .state import BattleResult, CombatState, TurnLog
from .terrain import element_amplification, evasion_bonus, initiative_bonus, roll_hazard


class SkillChooser(Protocol):
    """Anything able to pick the skill a combatant uses this turn."""

    def choose_skill(self, actor: Combatant, opponent: Combatant, state: CombatState) -> SkillInstance:
        ...


class TurnEngine:
    """Resolves battles turn by turn."""

    def __init__(
        self,
        rng: Rng,
        rules: CombatRules = DEFAULT_RULES,
        formulas: StatFormulas = DEFAULT_FORMULAS,
    ) -> None:
        self.rng = rng
        self.rules = rules
        self.formulas = formulas

    # ============================================================================
    # Battle loop
    # ============================================================================

    def run_battle(
        self,
        player: Player,
        enemy: Enemy,
        player_chooser: SkillChooser,
        enemy_chooser: SkillChooser,
        state: CombatState | None = None,
        battle_id: int = 0,
        max_turns: int | None = None,
    ) -> BattleResult:
        """
        Runs a battle to completion.

        The combatants are mutated in place: HP, chakra, buffs and cooldowns
        reflect the end of the battle when this returns.

        Args:
            player (Player): The player's combatant, already prepared.
            enemy (Enemy): The enemy's combatant, already prepared.
            player_chooser (SkillChooser): Picks the player's skills.
            enemy_chooser (SkillChooser): Picks the enemy's skills.
            state (CombatState | None): Battle context carrying the approach
                opening and the terrain. A fresh one is created when omitted.
            battle_id (int): Index reported in the result.
            max_turns (int | None): Turn cap, `CombatRules.max_turns` by default.

        Returns:
            BattleResult: The outcome and the battle metrics.

        """
        state = state or CombatState()
        cap = max_turns or self.rules.max_turns
        if state.first_hit_multiplier <= 1.0:
            state.first_hit_pending = False
        if state.player_goes_first is None:
            state.player_goes_first = self.decide_turn_order(player, enemy, state)

        choosers: dict[Side, SkillChooser] = {Side.PLAYER: player_chooser, Side.ENEMY: enemy_chooser}
        combatants: dict[Side, Combatant] = {Side.PLAYER: player, Side.ENEMY: enemy}

        while state.turn < cap:
            state.turn += 1
            state.guts_used.clear()

            if self._process_start_of_turn(combatants, state):
                break

            order = [Side.PLAYER, Side.ENEMY] if state.player_goes_first else [Side.ENEMY, Side.PLAYER]
            for side in order:
                actor, opponent = combatants[side], combatants[side.other]
                if not actor.is_alive():
                    continue
                self.take_action(actor, opponent, choosers[side], state)
                if not player.is_alive() or not enemy.is_alive():
                    break
            if not player.is_alive() or not enemy.is_alive():
                break

            self._process_end_of_turn(combatants, state)
            state.is_first_turn = False

        return self._build_result(player, enemy, state, battle_id)

    def decide_turn_order(self, player: Combatant, enemy: Combatant, state: CombatState) -> bool:
        """
        Returns True when the player acts first.

        A guaranteed opening always wins. Otherwise both sides roll
        initiative plus a random jitter; ties go to the player.
        """
        if state.guaranteed_first:
            return True
        terrain_init = initiative_bonus(state.terrain)
        jitter = self.rules.initiative_jitter
        player_init = (
            player.derived(self.formulas).initiative
            + state.player_initiative_bonus
            + terrain_init
            + self.rng.random() * jitter
        )
        enemy_init = enemy.derived(self.formulas).initiative + terrain_init + self.rng.random() * jitter
        return player_init >= enemy_init

    # ============================================================================
    # Turn phases
    # ============================================================================

    def _process_start_of_turn(self, combatants: dict[Side, Combatant], state: CombatState) -> bool:
        """Applies DoT and regeneration. Returns True when somebody died."""
        for side in self.rules.dot_order:
            combatant = combatants[side]
            derived = combatant.derived(self.formulas)
            tick = process_dot_and_regen(
                combatant.buffs, combatant.current_hp, derived.max_hp, derived, self.rules
            )
            combatant.buffs = tick.updated_buffs
            if side is Side.PLAYER:
                state.metrics.total_damage_received += tick.dot_damage
            else:
                state.metrics.total_damage_dealt += tick.dot_damage

            if tick.new_hp <= 0:
                # Lethal tick: remove whatever HP is left and give guts its roll.
                self._apply_damage(combatant, combatant.current_hp, derived, state)
            else:
                combatant.current_hp = tick.new_hp

            for message in tick.messages:
                self._log(state, side, message, combatants)
            if not combatant.is_alive():
                return True
        return False

    def _process_end_of_turn(self, combatants: dict[Side, Combatant], state: CombatState) -> None:
        for combatant in combatants.values():
            derived = combatant.derived(self.formulas)
            combatant.set_chakra(combatant.current_chakra + derived.chakra_regen, derived.max_chakra)
            self._pay_toggle_upkeep(combatant, state)
            combatant.tick_cooldowns()
        for side in (Side.PLAYER, Side.ENEMY):
            combatant = combatants[side]
            new_hp, message = roll_hazard(state.terrain, combatant.current_hp, side is Side.PLAYER, self.rng)
            if message is not None:
                combatant.current_hp = new_hp
                self._log(state, side, f"{combatant.name} {message}", combatants)

    def _pay_toggle_upkeep(self, combatant: Combatant, state: CombatState) -> None:
        for instance in combatant.skills:
            skill = instance.skill
            if not skill.is_toggle or not combatant.has_active_toggle(instance):
                continue
            if combatant.current_chakra >= skill.upkeep_cost:
                combatant.current_chakra -= skill.upkeep_cost
                if combatant.side is Side.PLAYER:
                    state.metrics.chakra_used += skill.upkeep_cost
            else:
                combatant.buffs = [
                    buff
                    for buff in combatant.buffs
                    if not (buff.is_permanent and buff.source == skill.name)
                ]
                log_debug(
                    f"{skill.name} dropped: upkeep not affordable",
                    {"combatant": combatant.name, "turn": state.turn},
                )

    # ============================================================================
    # Actions
    # ============================================================================

    def take_action(
        self,
        actor: Combatant,
        opponent: Combatant,
        chooser: SkillChooser,
        state: CombatState,
    ) -> None:
        """Resolves the action of one side: status checks, choice and execution."""
        combatants = {actor.side: actor, opponent.side: opponent}
        if actor.is_stunned():
            self._log(state, actor.side, "Stunned", combatants)
            return

        if actor.is_confused() and self.rng.chance(self.rules.confusion_self_hit_chance):
            strength = actor.effective_primary().strength
            self_damage = math.floor(strength * self.rules.confusion_self_damage_per_str)
            actor.current_hp = max(0, actor.current_hp - self_damage)
            self._log(state, actor.side, "Hurt itself in confusion", combatants, damage=self_damage)
            return

        choice = chooser.choose_skill(actor, opponent, state)
        instance = self.ensure_usable(actor, choice)
        if instance is None:
            log_warning(
                f"{actor.name} has no skills to use",
                {"combatant": actor.name, "turn": state.turn},
            )
            self._log(state, actor.side, "No skills available", combatants)
            return
        self.execute_skill(actor, opponent, instance, state)

    def ensure_usable(self, actor: Combatant, choice: SkillInstance | None) -> SkillInstance | None:
        """
        Returns the chosen skill, or a fallback when it cannot be used.

        Fallback order: the first ready and affordable skill, the basic
        attack, the first owned skill.
        """
        if choice is not None and self._is_usable(actor, choice):
            return choice
        fallback = next((s for s in actor.skills if self._is_usable(actor, s)), None)
        if fallback is None:
            fallback = actor.get_skill(BASIC_ATTACK_ID)
        if fallback is None and actor.skills:
            fallback = actor.skills[0]
        log_debug(
            f"{actor.name} cannot use {choice.name if choice else 'nothing'}, falling back",
            {"fallback": fallback.id if fallback else None},
        )
        return fallback

    @staticmethod
    def _is_usable(actor: Combatant, instance: SkillInstance) -> bool:
        if not instance.is_ready():
            return False
        if not instance.can_afford(actor.current_chakra, actor.current_hp):
            return False
        return not (instance.skill.is_toggle and actor.has_active_toggle(instance))

    def execute_skill(
        self,
        actor: Combatant,
        opponent: Combatant,
        instance: SkillInstance,
        state: CombatState,
    ) -> None:
        """
        Executes a skill: costs, damage, mitigation, reflection and effects.

        A miss or an evasion still spends the skill and starts its cooldown,
        but applies no effect.
        """
        skill = instance.skill
        side = actor.side
        is_player = side is Side.PLAYER
        combatants = {actor.side: actor, opponent.side: opponent}
        actor_derived = actor.derived(self.formulas)
        opponent_derived = opponent.derived(self.formulas)

        actor.current_chakra = max(0, actor.current_chakra - skill.chakra_cost)
        if skill.hp_cost:
            actor.current_hp = max(1, actor.current_hp - skill.hp_cost)
        instance.start_cooldown()
        if is_player:
            state.metrics.chakra_used += skill.chakra_cost
            state.metrics.record_skill(skill.id)
            state.metrics.total_attacks += 1

        dealt = 0
        is_crit = False
        if not skill.is_utility:
            result = calculate_damage(
                actor.effective_primary(),
                actor_derived,
                opponent.effective_primary(),
                opponent_derived,
                skill,
                actor.element,
                opponent.element,
                self.rng,
                evasion_bonus(state.terrain),
                self.rules,
            )
            if result.is_miss or result.is_evaded:
                if is_player:
                    if result.is_miss:
                        state.metrics.misses += 1
                    else:
                        state.metrics.evasions += 1
                outcome = "MISSED" if result.is_miss else "EVADED"
                self._log(
                    state,
                    side,
                    f"{skill.name} {outcome}",
                    combatants,
                    is_miss=result.is_miss,
                    is_evaded=result.is_evaded,
                )
                return

            is_crit = result.is_crit
            if is_player and is_crit:
                state.metrics.crits += 1

            damage = result.final_damage
            first_hit = state.first_hit_for(side)
            if first_hit > 1.0:
                damage = math.floor(damage * first_hit)
                state.first_hit_pending = False
            amplification = element_amplification(state.terrain, actor.element)
            if amplification > 1.0:
                damage = math.floor(damage * amplification)

            mitigation = apply_mitigation(opponent.buffs, damage)
            opponent.buffs = mitigation.updated_buffs
            dealt = mitigation.final_damage
            self._apply_damage(opponent, dealt, opponent_derived, state)
            self._record_damage(state, side, dealt)

            # A defeated defender reflects nothing.
            if mitigation.reflected_damage > 0 and opponent.is_alive():
                self._apply_damage(actor, mitigation.reflected_damage, actor_derived, state)
                self._record_damage(state, opponent.side, mitigation.reflected_damage)

        self._apply_effects(actor, opponent, skill, state, actor_derived, opponent_derived)
        self._log(state, side, skill.name, combatants, damage=dealt, is_crit=is_crit)

    def _apply_effects(
        self,
        actor: Combatant,
        opponent: Combatant,
        skill: Skill,
        state: CombatState,
        actor_derived: DerivedStats,
        opponent_derived: DerivedStats,
    ) -> None:
        for effect in skill.effects:
            if effect.applies_to is EffectTarget.SELF:
                if effect.chance < 1.0 and not self.rng.chance(effect.chance):
                    continue
                recipient, recipient_derived = actor, actor_derived
            else:
                if not resist_status(effect.chance, opponent_derived.status_resistance, self.rng):
                    continue
                recipient, recipient_derived = opponent, opponent_derived

            if effect.type == EffectType.HEAL:
                recipient.set_hp(
                    recipient.current_hp + math.floor(effect.value or 0), recipient_derived.max_hp
                )
            elif effect.type == EffectType.CHAKRA_DRAIN:
                recipient.set_chakra(
                    recipient.current_chakra - math.floor(effect.value or 0),
                    recipient_derived.max_chakra,
                )
            else:
                recipient.add_buff(Buff.from_effect(effect, skill.name, state.ids))

    # ============================================================================
    # Damage bookkeeping
    # ============================================================================

    def _guts_eligible(self, side: Side) -> bool:
        return side is Side.PLAYER or self.rules.enemy_guts

    def _apply_damage(
        self, target: Combatant, damage: int, target_derived: DerivedStats, state: CombatState
    ) -> None:
        """Removes HP, rolling guts on a lethal hit for eligible combatants."""
        remaining = target.current_hp - damage
        if remaining > 0:
            target.current_hp = remaining
            return
        if not self._guts_eligible(target.side) or target.side in state.guts_used:
            target.current_hp = 0
            return
        survived, new_hp = check_guts(target.current_hp, damage, target_derived.guts_chance, self.rng)
        target.current_hp = new_hp
        if survived:
            state.guts_used.add(target.side)
            if target.side is Side.PLAYER:
                state.metrics.guts_triggers_player += 1
            else:
                state.metrics.guts_triggers_enemy += 1

    @staticmethod
    def _record_damage(state: CombatState, source: Side, damage: int) -> None:
        if source is Side.PLAYER:
            state.metrics.total_damage_dealt += damage
        else:
            state.metrics.total_damage_received += damage

    @staticmethod
    def _log(
        state: CombatState,
        actor: Side,
        action: str,
        combatants: dict[Side, Combatant],
        damage: int = 0,
        is_crit: bool = False,
        is_miss: bool = False,
        is_evaded: bool = False,
    ) -> None:
        state.logs.append(
            TurnLog(
                turn=state.turn,
                actor=actor,
                action=action,
                damage=damage,
                is_crit=is_crit,
                is_miss=is_miss,
                is_evaded=is_evaded,
                player_hp=combatants[Side.PLAYER].current_hp if Side.PLAYER in combatants else 0,
                enemy_hp=combatants[Side.ENEMY].current_hp if Side.ENEMY in combatants else 0,
            )
        )

    # ============================================================================
    # Result
    # ============================================================================

    @staticmethod
    def _build_result(player: Player, enemy: Enemy, state: CombatState, battle_id: int) -> BattleResult:
        metrics = state.metrics
        won = not enemy.is_alive()
        ended_by_cap = player.is_alive() and enemy.is_alive()
        return BattleResult(
            battle_id=battle_id,
            won=won,
            turns=max(1, state.turn),
            ended_by_turn_cap=ended_by_cap,
            total_damage_dealt=metrics.total_damage_dealt,
            total_damage_received=metrics.total_damage_received,
            total_attacks=metrics.total_attacks,
            crit_count=metrics.crits,
            miss_count=metrics.misses,
            evasion_count=metrics.evasions,
            guts_triggers_player=metrics.guts_triggers_player,
            guts_triggers_enemy=metrics.guts_triggers_enemy,
            player_final_hp=player.current_hp,
            player_final_chakra=player.current_chakra,
            enemy_final_hp=enemy.current_hp,
            total_chakra_used=metrics.chakra_used,
            skills_used=dict(metrics.skills_used),
            approach_used=state.approach,
            approach_succeeded=state.approach_succeeded if state.approach is not None else None,
            logs=list(state.logs),
        )
