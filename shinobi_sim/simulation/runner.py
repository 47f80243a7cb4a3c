"""
Batch runner and reporting.

Runs every (build, archetype) pair, aggregates the battles and renders the
summaries as rich tables. A pair that raises is logged and skipped so one
broken build does not abort a long simulation.
"""

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Sequence

from catchery import log_critical
from pydantic import BaseModel
from rich.table import Table

from ..core.constants import SIMULATOR_VERSION, EnemyArchetype
from ..core.error_handling import ShinobiSimError
from ..core.logging import log_info
from ..core.rng import Rng
from ..core.utils import cprint, crule, make_bar
from ..generation.archetypes import all_archetypes
from ..generation.builds import PlayerBuildConfig
from ..generation.game_data import GameData, load_game_data
from .battle_simulator import BattleSimulator
from .models import (
    ProgressionSummary,
    SimulationConfig,
    SimulationMetadata,
    SimulationOutput,
    SimulationRunResult,
)
from .statistics import aggregate_results, generate_summary


def run_full_simulation(
    config: SimulationConfig | None = None,
    data: GameData | None = None,
) -> SimulationOutput:
    """Runs every registered build against every archetype."""
    config = config or SimulationConfig()
    data = data or load_game_data(config.player_level)
    return run_custom_simulation(list(data.builds.values()), all_archetypes(), config, data)


def run_custom_simulation(
    builds: Sequence[PlayerBuildConfig],
    archetypes: Sequence[EnemyArchetype],
    config: SimulationConfig | None = None,
    data: GameData | None = None,
) -> SimulationOutput:
    """
    Runs the given builds against the given archetypes.

    Each pair gets its own child random stream of the root stream seeded
    with `config.seed`, so a seeded simulation is reproducible pair by pair.

    Args:
        builds (Sequence[PlayerBuildConfig]): Player builds to test.
        archetypes (Sequence[EnemyArchetype]): Enemy templates to face.
        config (SimulationConfig | None): Batch parameters.
        data (GameData | None): Registries, the defaults when omitted.

    Returns:
        SimulationOutput: Per-pair results, summary, metadata and the pairs
        that were skipped because they raised.

    """
    config = config or SimulationConfig()
    data = data or load_game_data(config.player_level)
    root = Rng(config.seed)
    started = time.perf_counter()

    results: list[SimulationRunResult] = []
    skipped: list[str] = []
    for build in builds:
        for archetype in archetypes:
            pair = f"{build.name} vs {archetype.value}"
            simulator = BattleSimulator(data, root.spawn(pair))
            pair_started = time.perf_counter()
            try:
                battles = simulator.run_battles(build, archetype, config)
            except ShinobiSimError as e:
                log_critical(
                    f"Error simulating {pair}: {str(e)}",
                    {"build": build.name, "archetype": archetype.value, "error": str(e)},
                    e,
                )
                skipped.append(pair)
                continue
            results.append(
                SimulationRunResult(
                    config=config,
                    player_build=build,
                    enemy_archetype=archetype,
                    battles=battles,
                    aggregated=aggregate_results(battles, build.name, archetype),
                    duration=(time.perf_counter() - pair_started) * 1000,
                )
            )
        log_info(f"Simulated {build.name}", {"archetypes": len(archetypes)})

    total_duration = (time.perf_counter() - started) * 1000
    return SimulationOutput(
        metadata=SimulationMetadata(
            version=SIMULATOR_VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
            total_duration=total_duration,
            total_battles=sum(len(r.battles) for r in results),
        ),
        config=config,
        player_builds=list(builds),
        enemy_archetypes=list(archetypes),
        results=results,
        summary=generate_summary([r.aggregated for r in results], archetypes),
        skipped_pairs=skipped,
    )


# ============================================================================
# Export
# ============================================================================


def to_plain_data(value: Any) -> Any:
    """
    Flattens models, enums and enum-keyed dictionaries to plain data.

    The result only holds dicts with string keys, lists, strings, numbers,
    booleans and None, ready for a JSON or CSV writer.
    """
    if isinstance(value, BaseModel):
        return to_plain_data(value.model_dump(mode="json"))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(to_plain_data(key)): to_plain_data(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain_data(item) for item in value]
    return value


# ============================================================================
# Reporting
# ============================================================================


def _percent(rate: float) -> str:
    return f"{rate * 100:.1f}%"


def print_summary(output: SimulationOutput) -> None:
    """Prints the per-pair win rates and the headline numbers."""
    crule(f"[bold]Simulation results[/] ({output.metadata.total_battles} battles)")

    table = Table(title="Win rates", pad_edge=False)
    table.add_column("Build", style="bold")
    table.add_column("Enemy", style="magenta")
    table.add_column("Win rate", justify="right")
    table.add_column("", no_wrap=True)
    table.add_column("Avg turns", justify="right")
    table.add_column("Crit", justify="right")
    table.add_column("Dmg eff.", justify="right")
    for result in output.results:
        stats = result.aggregated
        table.add_row(
            stats.player_build_name,
            stats.enemy_archetype.display_name,
            _percent(stats.win_rate),
            make_bar(round(stats.win_rate * 100), 100, 10, "green"),
            f"{stats.average_turns:.1f}",
            _percent(stats.crit_rate),
            f"{stats.damage_efficiency:.2f}",
        )
    cprint(table)

    summary = output.summary
    best = summary.overall_best_build
    cprint(f"Overall best build: [bold]{best.build_name or '-'}[/] ({_percent(best.win_rate)})")
    for archetype, entry in summary.best_build_per_archetype.items():
        cprint(f"  vs {archetype.display_name}: {entry.build_name} ({_percent(entry.win_rate)})")
    if summary.worst_matchups:
        cprint("Worst matchups:")
        for matchup in summary.worst_matchups:
            cprint(f"  {matchup.build} vs {matchup.enemy.display_name}: {_percent(matchup.win_rate)}")
    if output.skipped_pairs:
        cprint(f"[red]Skipped pairs:[/] {', '.join(output.skipped_pairs)}")


def print_progression_summary(summaries: Sequence[ProgressionSummary]) -> None:
    """Prints levels reached, survival and breakpoints of every clan."""
    crule("[bold]Progression results[/]")
    table = Table(pad_edge=False)
    table.add_column("Clan", style="bold")
    table.add_column("Runs", justify="right")
    table.add_column("Avg level", justify="right")
    table.add_column("Max level", justify="right")
    table.add_column("Survival", justify="right")
    table.add_column("Win rate", justify="right")
    table.add_column("Breakpoints")
    for summary in summaries:
        table.add_row(
            summary.clan.display_name,
            str(summary.total_runs),
            f"{summary.average_final_level:.1f}",
            str(summary.max_final_level),
            _percent(summary.survival_rate),
            _percent(summary.average_win_rate),
            ", ".join(
                f"Lv{bp.level} -{_percent(bp.win_rate_drop)}"
                for bp in summary.level_breakpoints[:3]
            ),
        )
    cprint(table)
