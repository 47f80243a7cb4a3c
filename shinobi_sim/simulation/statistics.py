"""
Aggregation of battle results.
"""

import math
from statistics import mean, pstdev
from typing import Iterable, Sequence

from ..combat.state import BattleResult
from ..core.constants import ApproachType, EnemyArchetype
from .models import (
    AggregatedStats,
    ApproachStats,
    BuildWinRate,
    Matchup,
    SimulationSummary,
)


def _average(values: Sequence[float]) -> float:
    return mean(values) if values else 0.0


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def aggregate_results(
    results: Sequence[BattleResult],
    build_name: str,
    archetype: EnemyArchetype,
) -> AggregatedStats:
    """
    Aggregates the battles of one (build, archetype) pair.

    An empty result list yields an all-zero record.

    Args:
        results (Sequence[BattleResult]): The battles to aggregate.
        build_name (str): Name of the player's build.
        archetype (EnemyArchetype): The enemy template.

    Returns:
        AggregatedStats: Win rate, turn, damage, accuracy, survival,
        resource, skill and approach statistics.

    """
    if not results:
        return AggregatedStats(player_build_name=build_name, enemy_archetype=archetype)

    total = len(results)
    won = [r for r in results if r.won]
    lost = [r for r in results if not r.won]
    turns = [r.turns for r in results]

    damage_dealt = sum(r.total_damage_dealt for r in results)
    damage_received = sum(r.total_damage_received for r in results)
    attacks = sum(r.total_attacks for r in results)
    crits = sum(r.crit_count for r in results)
    misses = sum(r.miss_count for r in results)
    evasions = sum(r.evasion_count for r in results)
    guts = sum(r.guts_triggers_player for r in results)
    chakra = sum(r.total_chakra_used for r in results)

    usage: dict[str, int] = {}
    contribution: dict[str, int] = {}
    for result in results:
        for skill_id, count in result.skills_used.items():
            usage[skill_id] = usage.get(skill_id, 0) + count
            if result.won:
                contribution[skill_id] = contribution.get(skill_id, 0) + 1

    return AggregatedStats(
        player_build_name=build_name,
        enemy_archetype=archetype,
        total_battles=total,
        wins=len(won),
        losses=len(lost),
        win_rate=len(won) / total,
        turn_cap_battles=sum(1 for r in results if r.ended_by_turn_cap),
        average_turns_to_win=_average([r.turns for r in won]),
        average_turns_to_lose=_average([r.turns for r in lost]),
        average_turns=_average(turns),
        min_turns=min(turns),
        max_turns=max(turns),
        turns_std_dev=standard_deviation(turns),
        total_damage_dealt=damage_dealt,
        total_damage_received=damage_received,
        average_damage_dealt_per_battle=damage_dealt / total,
        average_damage_received_per_battle=damage_received / total,
        damage_efficiency=damage_dealt / damage_received if damage_received > 0 else float(damage_dealt),
        total_attacks=attacks,
        total_crits=crits,
        total_misses=misses,
        total_evasions=evasions,
        crit_rate=_ratio(crits, attacks),
        miss_rate=_ratio(misses, attacks),
        evasion_rate=_ratio(evasions, attacks),
        guts_triggers_total=guts,
        guts_triggers_per_battle=guts / total,
        average_remaining_hp_on_win=_average([r.player_final_hp for r in won]),
        total_chakra_used=chakra,
        average_chakra_used_per_battle=chakra / total,
        chakra_efficiency=damage_dealt / chakra if chakra > 0 else float(damage_dealt),
        skill_usage_count=usage,
        skill_win_contribution=contribution,
        approach_stats=approach_statistics(results),
    )


def approach_statistics(results: Iterable[BattleResult]) -> dict[ApproachType, ApproachStats] | None:
    """Groups battles by approach. None when no battle used an approach."""
    grouped: dict[ApproachType, list[BattleResult]] = {}
    for result in results:
        if result.approach_used is not None:
            grouped.setdefault(result.approach_used, []).append(result)
    if not grouped:
        return None

    stats = {}
    for approach, battles in grouped.items():
        attempts = len(battles)
        successes = sum(1 for b in battles if b.approach_succeeded)
        wins = sum(1 for b in battles if b.won)
        stats[approach] = ApproachStats(
            attempts=attempts,
            successes=successes,
            success_rate=_ratio(successes, attempts),
            wins_with_approach=wins,
            win_rate_with_approach=_ratio(wins, attempts),
        )
    return stats


def generate_summary(
    all_stats: Sequence[AggregatedStats],
    archetypes: Iterable[EnemyArchetype],
    top: int = 5,
) -> SimulationSummary:
    """
    Picks the headline numbers of a simulation.

    Ties keep the first build encountered.

    Args:
        all_stats (Sequence[AggregatedStats]): One record per pair.
        archetypes (Iterable[EnemyArchetype]): Archetypes that were tested.
        top (int): Number of best and worst matchups to report.

    Returns:
        SimulationSummary: Best build per archetype, best build overall and
        the best and worst matchups.

    """
    best_per_archetype: dict[EnemyArchetype, BuildWinRate] = {}
    for archetype in archetypes:
        candidates = [s for s in all_stats if s.enemy_archetype == archetype]
        if candidates:
            best = max(candidates, key=lambda s: s.win_rate)
            best_per_archetype[archetype] = BuildWinRate(
                build_name=best.player_build_name, win_rate=best.win_rate
            )

    rates_by_build: dict[str, list[float]] = {}
    for stats in all_stats:
        rates_by_build.setdefault(stats.player_build_name, []).append(stats.win_rate)
    overall = BuildWinRate(build_name="", win_rate=0.0)
    for build_name, rates in rates_by_build.items():
        average = _average(rates)
        if average > overall.win_rate:
            overall = BuildWinRate(build_name=build_name, win_rate=average)

    ranked = sorted(all_stats, key=lambda s: s.win_rate, reverse=True)
    matchups = [
        Matchup(build=s.player_build_name, enemy=s.enemy_archetype, win_rate=s.win_rate)
        for s in ranked
    ]
    return SimulationSummary(
        best_build_per_archetype=best_per_archetype,
        overall_best_build=overall,
        best_matchups=matchups[:top],
        worst_matchups=list(reversed(matchups[-top:])) if matchups else [],
    )


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation, 0 for an empty sequence."""
    return pstdev(values) if values else 0.0


def create_histogram(values: Sequence[float], buckets: int = 10) -> list[int]:
    """
    Counts values into equally wide buckets between their min and max.

    The maximum falls into the last bucket. Identical values all land in the
    first bucket.
    """
    histogram = [0] * buckets
    if not values:
        return histogram
    low, high = min(values), max(values)
    width = (high - low or 1) / buckets
    for value in values:
        index = min(buckets - 1, math.floor((value - low) / width))
        histogram[index] += 1
    return histogram


def percentile(values: Sequence[float], p: float) -> float:
    """Nearest-rank percentile, 0 for an empty sequence."""
    if not values:
        return 0.0
    ordered = sorted(values)
    index = math.ceil(p / 100 * len(ordered)) - 1
    return ordered[max(0, index)]
