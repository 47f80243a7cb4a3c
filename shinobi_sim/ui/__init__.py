"""
User interface module for the shinobi combat simulator.

Provides the command-line skill and approach prompts used by live
encounters.
"""

from .cli_interface import HumanSkillChooser

__all__ = ["HumanSkillChooser"]
