"""
Shinobi combat simulator.

A turn-based combat engine for ninja duels, the enemy and build generators
that feed it, and a headless batch simulator that measures build balance.
"""

from .core.constants import SIMULATOR_VERSION as __version__

__all__ = ["__version__"]
