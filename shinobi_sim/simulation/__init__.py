"""
Headless batch simulation: build vs archetype matrices, progression runs,
aggregation and reporting.
"""

from .battle_simulator import BattleSimulator
from .models import (
    AggregatedStats,
    ApproachStats,
    ProgressionConfig,
    ProgressionRunResult,
    ProgressionSummary,
    SimulationConfig,
    SimulationOutput,
    SimulationRunResult,
    SimulationSummary,
)
from .progression import (
    aggregate_progression_runs,
    run_full_progression_simulation,
    run_progression_run,
    run_progression_simulation,
)
from .runner import (
    print_progression_summary,
    print_summary,
    run_custom_simulation,
    run_full_simulation,
    to_plain_data,
)
from .statistics import (
    aggregate_results,
    create_histogram,
    generate_summary,
    percentile,
    standard_deviation,
)

__all__ = [
    # Models
    "SimulationConfig",
    "ProgressionConfig",
    "AggregatedStats",
    "ApproachStats",
    "SimulationRunResult",
    "SimulationSummary",
    "SimulationOutput",
    "ProgressionRunResult",
    "ProgressionSummary",
    # Battles
    "BattleSimulator",
    # Statistics
    "aggregate_results",
    "generate_summary",
    "standard_deviation",
    "create_histogram",
    "percentile",
    # Runners
    "run_full_simulation",
    "run_custom_simulation",
    "run_progression_run",
    "run_progression_simulation",
    "run_full_progression_simulation",
    "aggregate_progression_runs",
    # Reporting
    "to_plain_data",
    "print_summary",
    "print_progression_summary",
]
