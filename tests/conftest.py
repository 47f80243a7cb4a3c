"""
Shared fixtures for the simulator tests.
"""

import pytest

from shinobi_sim.character.combatant import Enemy, Player
from shinobi_sim.character.stats import PrimaryAttributes
from shinobi_sim.core.constants import (
    AttackMethod,
    Clan,
    DamageType,
    ElementType,
    PrimaryStat,
    SkillTier,
)
from shinobi_sim.core.rng import Rng
from shinobi_sim.generation.game_data import load_game_data
from shinobi_sim.skills.skill import Skill, SkillInstance


class ScriptedRng(Rng):
    """Rng returning queued values first, then a fixed default."""

    def __init__(self, values=(), default: float = 0.5) -> None:
        super().__init__(0)
        self.values = list(values)
        self.default = default

    def random(self) -> float:
        if self.values:
            return self.values.pop(0)
        return self.default

    def spawn(self, label):
        return self


def make_skill(skill_id: str = "test_strike", **overrides) -> Skill:
    """Builds a plain PHYSICAL melee skill scaling with strength."""
    fields = dict(
        id=skill_id,
        name=skill_id.replace("_", " ").title(),
        tier=SkillTier.COMMON,
        damage_mult=1.0,
        scaling_stat=PrimaryStat.STRENGTH,
        damage_type=DamageType.PHYSICAL,
        attack_method=AttackMethod.MELEE,
        element=ElementType.PHYSICAL,
    )
    fields.update(overrides)
    return Skill(**fields)


def make_player(skills=(), stats: PrimaryAttributes | None = None, **overrides) -> Player:
    player = Player(
        name=overrides.pop("name", "Tester"),
        clan=overrides.pop("clan", Clan.UZUMAKI),
        primary=stats or PrimaryAttributes(),
        skills=[SkillInstance(skill=s) for s in skills],
        **overrides,
    )
    player.restore()
    return player


def make_enemy(skills=(), stats: PrimaryAttributes | None = None, **overrides) -> Enemy:
    enemy = Enemy(
        name=overrides.pop("name", "Dummy"),
        primary=stats or PrimaryAttributes(),
        skills=[SkillInstance(skill=s) for s in skills],
        **overrides,
    )
    enemy.restore()
    return enemy


@pytest.fixture(scope="session")
def game_data():
    return load_game_data()


@pytest.fixture
def scripted_rng():
    return ScriptedRng
