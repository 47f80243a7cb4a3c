"""
Exceptions raised by the simulator.

The combat core raises on bad data and never swallows errors. Only the batch
runner catches `ShinobiSimError`, logging the failed build/archetype pair
and moving on so one broken pair does not abort a long run.
"""


class ShinobiSimError(Exception):
    """Base class of every error raised by the simulator."""


class SkillNotFoundError(ShinobiSimError, KeyError):
    """A skill id is not present in the skill registry."""

    def __init__(self, skill_id: str, context: str = "") -> None:
        self.skill_id = skill_id
        self.context = context
        where = f" (while resolving {context})" if context else ""
        super().__init__(f"Unknown skill '{skill_id}'{where}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownBuildError(ShinobiSimError, KeyError):
    """A build name is not present in the build catalogue."""

    def __init__(self, build_name: str) -> None:
        self.build_name = build_name
        super().__init__(f"Unknown build '{build_name}'")

    def __str__(self) -> str:
        return self.args[0]


class InvalidConfigurationError(ShinobiSimError, ValueError):
    """A configuration model holds values outside their valid range."""
