"""
Progression simulation.

A run starts a clan member at the start level with the starting skills and
fights one random archetype after another. The character levels up every few
battles and learns a new skill every few battles. The first defeat ends the
run, so the final level measures how far a clan gets before the curve wins.
"""

from typing import Sequence

from ..core.constants import Clan, PrimaryStat
from ..core.formulas import DEFAULT_FORMULAS, DEFAULT_RULES, CombatRules, StatFormulas
from ..core.logging import log_debug, log_info
from ..core.rng import Rng
from ..generation.archetypes import all_archetypes
from ..generation.builds import PlayerBuildConfig
from ..generation.clans import clan_stats_at_level
from ..generation.game_data import GameData, load_game_data
from ..skills.skill import Skill
from .battle_simulator import BattleSimulator
from .models import (
    LevelBreakpoint,
    LevelRecord,
    ProgressionBattle,
    ProgressionConfig,
    ProgressionRunResult,
    ProgressionSummary,
    SimulationConfig,
)

# Win rate drop between consecutive levels reported as a breakpoint.
BREAKPOINT_DROP = 0.10


def skill_pool(config: ProgressionConfig, data: GameData) -> list[str]:
    """Skills that can be learned during a run."""
    if config.skill_pool:
        return list(config.skill_pool)
    basic = data.skills.basic_attack.id
    return [skill_id for skill_id in data.skills.skills if skill_id != basic]


def eligible_skills(
    clan: Clan,
    intelligence: int,
    known: Sequence[str],
    pool: Sequence[str],
    data: GameData,
) -> list[Skill]:
    """
    Filters the pool down to skills the character can learn now.

    A skill is eligible when it is unknown, its intelligence requirement is
    met and it is either not clan-locked or locked to the character's clan.
    """
    eligible = []
    for skill_id in pool:
        if skill_id in known:
            continue
        skill = data.skills.get(skill_id, context="progression skill pool")
        if intelligence < skill.required_int:
            continue
        if skill.required_clan is not None and skill.required_clan != clan:
            continue
        eligible.append(skill)
    return eligible


def pick_new_skill(candidates: Sequence[Skill], rng: Rng) -> Skill | None:
    """Picks at random among the candidates of the highest tier."""
    if not candidates:
        return None
    top_rank = max(skill.tier.rank for skill in candidates)
    return rng.pick([skill for skill in candidates if skill.tier.rank == top_rank])


def run_progression_run(
    clan: Clan,
    config: ProgressionConfig,
    run_id: int,
    data: GameData,
    rng: Rng,
    rules: CombatRules = DEFAULT_RULES,
    formulas: StatFormulas = DEFAULT_FORMULAS,
) -> ProgressionRunResult:
    """
    Simulates one run of a clan.

    Every battle is fought at floor = level and difficulty
    min(100, 30 + level) against a random archetype. The run stops at the
    first defeat, after `config.max_battles` battles, or once the character
    levels past `config.max_level`.

    Args:
        clan (Clan): The clan of the character.
        config (ProgressionConfig): Run parameters.
        run_id (int): Index reported in the result.
        data (GameData): Registries.
        rng (Rng): Random stream of this run.
        rules (CombatRules): Combat rules.
        formulas (StatFormulas): Stat formulas.

    Returns:
        ProgressionRunResult: Battles, level reached and skills learned.

    """
    clan_config = data.clans[clan]
    pool = skill_pool(config, data)
    archetypes = all_archetypes()
    simulator = BattleSimulator(data, rng, rules=rules, formulas=formulas)

    level = config.start_level
    skill_ids = list(config.starting_skill_ids)
    until_level_up = config.battles_per_level_up
    until_skill_gain = config.battles_per_skill_gain
    battles: list[ProgressionBattle] = []
    by_level: dict[int, LevelRecord] = {}

    while len(battles) < config.max_battles and level <= config.max_level:
        archetype = rng.pick(archetypes)
        build = PlayerBuildConfig(
            name=f"{clan.value}_Lv{level}",
            clan=clan,
            level=level,
            custom_stats=clan_stats_at_level(clan_config, level),
            skill_ids=tuple(skill_ids),
            element=clan_config.element,
        )
        battle_config = SimulationConfig(
            battles_per_config=1,
            player_level=level,
            floor_number=level,
            difficulty=min(100, 30 + level),
            enable_approaches=False,
        )
        result = simulator.simulate_battle(build, archetype, battle_config, battle_id=len(battles))

        record = by_level.setdefault(level, LevelRecord())
        record.total += 1
        if result.won:
            record.wins += 1

        until_level_up -= 1
        until_skill_gain -= 1
        leveled_up = False
        gained = None
        if result.won:
            if until_level_up <= 0:
                level += 1
                until_level_up = config.battles_per_level_up
                leveled_up = True
            if until_skill_gain <= 0:
                until_skill_gain = config.battles_per_skill_gain
                if len(skill_ids) < config.max_skills:
                    intelligence = clan_stats_at_level(clan_config, level).get(PrimaryStat.INTELLIGENCE)
                    new_skill = pick_new_skill(
                        eligible_skills(clan, intelligence, skill_ids, pool, data), rng
                    )
                    if new_skill is not None:
                        skill_ids.append(new_skill.id)
                        gained = new_skill.id

        battles.append(
            ProgressionBattle(
                battle_number=len(battles) + 1,
                level_at_battle=build.level,
                skills_at_battle=list(build.skill_ids),
                enemy_archetype=archetype,
                won=result.won,
                turns=result.turns,
                damage_dealt=result.total_damage_dealt,
                damage_received=result.total_damage_received,
                leveled_up=leveled_up,
                skill_gained=gained,
            )
        )
        if not result.won:
            break

    wins = sum(1 for battle in battles if battle.won)
    return ProgressionRunResult(
        run_id=run_id,
        clan=clan,
        final_level=min(level, config.max_level),
        total_battles=len(battles),
        wins=wins,
        losses=len(battles) - wins,
        win_rate=wins / len(battles) if battles else 0.0,
        win_rate_by_level=by_level,
        skills_acquired=[s for s in skill_ids if s not in config.starting_skill_ids],
        battles=battles,
    )


def aggregate_progression_runs(
    runs: Sequence[ProgressionRunResult],
    clan: Clan,
    survival_level: int = 50,
) -> ProgressionSummary:
    """
    Summarizes the runs of one clan.

    Args:
        runs (Sequence[ProgressionRunResult]): The runs to summarize.
        clan (Clan): The clan the runs belong to.
        survival_level (int): Final level that counts a run as survived.

    Returns:
        ProgressionSummary: Levels reached, survival rate, win rate by level,
        breakpoints sorted by drop (largest first) and the share of runs that
        learned each skill.

    """
    if not runs:
        return ProgressionSummary(clan=clan)

    total = len(runs)
    totals: dict[int, LevelRecord] = {}
    for run in runs:
        for level, record in run.win_rate_by_level.items():
            merged = totals.setdefault(level, LevelRecord())
            merged.wins += record.wins
            merged.total += record.total
    win_rate_by_level = {
        level: record.wins / record.total if record.total else 0.0
        for level, record in sorted(totals.items())
    }

    breakpoints = []
    levels = list(win_rate_by_level)
    for previous, current in zip(levels, levels[1:]):
        drop = win_rate_by_level[previous] - win_rate_by_level[current]
        if drop > BREAKPOINT_DROP:
            breakpoints.append(LevelBreakpoint(level=current, win_rate_drop=drop))
    breakpoints.sort(key=lambda bp: bp.win_rate_drop, reverse=True)

    acquired: dict[str, int] = {}
    for run in runs:
        for skill_id in run.skills_acquired:
            acquired[skill_id] = acquired.get(skill_id, 0) + 1

    return ProgressionSummary(
        clan=clan,
        total_runs=total,
        average_final_level=sum(run.final_level for run in runs) / total,
        max_final_level=max(run.final_level for run in runs),
        survival_rate=sum(1 for run in runs if run.final_level >= survival_level) / total,
        average_win_rate=sum(run.win_rate for run in runs) / total,
        win_rate_by_level=win_rate_by_level,
        level_breakpoints=breakpoints,
        skill_acquisition_stats={skill_id: count / total for skill_id, count in acquired.items()},
    )


def run_progression_simulation(
    clan: Clan,
    config: ProgressionConfig,
    data: GameData | None = None,
    rng: Rng | None = None,
) -> ProgressionSummary:
    """Runs `config.runs_to_simulate` independent runs of one clan and summarizes them."""
    data = data or load_game_data()
    rng = rng or Rng(config.seed)
    runs = [
        run_progression_run(clan, config, run_id, data, rng.spawn(f"{clan.value}:{run_id}"))
        for run_id in range(config.runs_to_simulate)
    ]
    log_debug(
        "Progression runs complete",
        {"clan": clan.value, "runs": len(runs)},
    )
    return aggregate_progression_runs(runs, clan, config.survival_level)


def run_full_progression_simulation(
    config: ProgressionConfig | None = None,
    data: GameData | None = None,
) -> list[ProgressionSummary]:
    """Runs the progression simulation for every clan."""
    config = config or ProgressionConfig()
    data = data or load_game_data()
    rng = Rng(config.seed)
    summaries = []
    for clan in Clan:
        log_info(f"Running progression for {clan.display_name}", {"runs": config.runs_to_simulate})
        summaries.append(run_progression_simulation(clan, config, data, rng.spawn(clan.value)))
    return summaries
