"""
Constants and enumerations for the simulator.

Defines the enumerations shared by every subsystem: primary stats, elements,
damage types and properties, attack methods, effect types, skill tiers, clans,
enemy archetypes, approaches and terrains.
"""

from enum import Enum

# Version reported in simulation metadata.
SIMULATOR_VERSION = "0.1.0"


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").lower().capitalize()


class PrimaryStat(NiceEnum):
    """The nine primary attributes of a combatant."""

    WILLPOWER = "willpower"
    CHAKRA = "chakra"
    STRENGTH = "strength"
    SPIRIT = "spirit"
    INTELLIGENCE = "intelligence"
    CALMNESS = "calmness"
    SPEED = "speed"
    ACCURACY = "accuracy"
    DEXTERITY = "dexterity"

    @property
    def short_name(self) -> str:
        """Returns the three letter abbreviation of the stat."""
        return self.name[:3]


class ElementType(NiceEnum):
    """Defines the elemental affinities of skills and combatants."""

    FIRE = "FIRE"
    WIND = "WIND"
    LIGHTNING = "LIGHTNING"
    EARTH = "EARTH"
    WATER = "WATER"
    PHYSICAL = "PHYSICAL"
    MENTAL = "MENTAL"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this element."""
        return {
            ElementType.FIRE: "🔥",
            ElementType.WIND: "🌪️",
            ElementType.LIGHTNING: "⚡",
            ElementType.EARTH: "🪨",
            ElementType.WATER: "💧",
            ElementType.PHYSICAL: "👊",
            ElementType.MENTAL: "💫",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this element."""
        return {
            ElementType.FIRE: "bold red",
            ElementType.WIND: "bold green",
            ElementType.LIGHTNING: "bold yellow",
            ElementType.EARTH: "bold dark_orange3",
            ElementType.WATER: "bold blue",
            ElementType.PHYSICAL: "bold white",
            ElementType.MENTAL: "bold magenta",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies element color formatting to a message."""
        return f"[{self.color}]{message}[/]"

    @property
    def is_cyclic(self) -> bool:
        """True for the five elements that take part in the advantage cycle."""
        return self in ELEMENTAL_CYCLE


# Each element beats the one it maps to.
ELEMENTAL_CYCLE: dict[ElementType, ElementType] = {
    ElementType.FIRE: ElementType.WIND,
    ElementType.WIND: ElementType.LIGHTNING,
    ElementType.LIGHTNING: ElementType.EARTH,
    ElementType.EARTH: ElementType.WATER,
    ElementType.WATER: ElementType.FIRE,
}


class DamageType(NiceEnum):
    """Defines which defense pool mitigates a hit."""

    PHYSICAL = "PHYSICAL"
    ELEMENTAL = "ELEMENTAL"
    MENTAL = "MENTAL"
    TRUE = "TRUE"


class DamageProperty(NiceEnum):
    """Defines which part of the defense a hit bypasses."""

    NORMAL = "NORMAL"
    PIERCING = "PIERCING"
    ARMOR_BREAK = "ARMOR_BREAK"


class AttackMethod(NiceEnum):
    """Defines how a skill reaches its target."""

    MELEE = "MELEE"
    RANGED = "RANGED"
    AUTO = "AUTO"


class EffectType(NiceEnum):
    """Defines the kinds of status effects a skill can apply."""

    BUFF = "BUFF"
    DEBUFF = "DEBUFF"
    SHIELD = "SHIELD"
    REFLECTION = "REFLECTION"
    REGEN = "REGEN"
    INVULNERABILITY = "INVULNERABILITY"
    HEAL = "HEAL"
    STUN = "STUN"
    CONFUSION = "CONFUSION"
    SILENCE = "SILENCE"
    DOT = "DOT"
    BURN = "BURN"
    POISON = "POISON"
    BLEED = "BLEED"
    CURSE = "CURSE"
    CHAKRA_DRAIN = "CHAKRA_DRAIN"

    @property
    def is_damage_over_time(self) -> bool:
        return self in (
            EffectType.DOT,
            EffectType.BURN,
            EffectType.POISON,
            EffectType.BLEED,
        )

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this effect type."""
        return {
            EffectType.BUFF: "⬆️",
            EffectType.DEBUFF: "⬇️",
            EffectType.SHIELD: "🛡️",
            EffectType.REFLECTION: "🪞",
            EffectType.REGEN: "💚",
            EffectType.INVULNERABILITY: "✨",
            EffectType.HEAL: "❤️",
            EffectType.STUN: "💤",
            EffectType.CONFUSION: "😵",
            EffectType.SILENCE: "🤐",
            EffectType.DOT: "☠️",
            EffectType.BURN: "🔥",
            EffectType.POISON: "🧪",
            EffectType.BLEED: "🩸",
            EffectType.CURSE: "🖤",
            EffectType.CHAKRA_DRAIN: "🌀",
        }.get(self, "❔")


class EffectTarget(NiceEnum):
    """Who receives an effect when its skill lands."""

    SELF = "SELF"
    TARGET = "TARGET"


class SkillTier(NiceEnum):
    """Rarity-like progression tiers of skills, lowest first."""

    COMMON = "COMMON"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"
    FORBIDDEN = "FORBIDDEN"

    @property
    def rank(self) -> int:
        return list(SkillTier).index(self)

    @property
    def color(self) -> str:
        return {
            SkillTier.COMMON: "white",
            SkillTier.RARE: "bold blue",
            SkillTier.EPIC: "bold magenta",
            SkillTier.LEGENDARY: "bold yellow",
            SkillTier.FORBIDDEN: "bold red",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return f"[{self.color}]{self.display_name}[/]"


class Clan(NiceEnum):
    """Player clans."""

    UZUMAKI = "UZUMAKI"
    UCHIHA = "UCHIHA"
    HYUGA = "HYUGA"
    LEE = "LEE"
    YAMANAKA = "YAMANAKA"

    @property
    def display_name(self) -> str:
        if self is Clan.LEE:
            return "Lee Disciple"
        return self.name.capitalize()


class EnemyArchetype(NiceEnum):
    """Enemy stat and skill templates."""

    TANK = "TANK"
    ASSASSIN = "ASSASSIN"
    CASTER = "CASTER"
    GENJUTSU = "GENJUTSU"
    BALANCED = "BALANCED"


class EncounterKind(NiceEnum):
    """Kinds of encounters produced by the live enemy generator."""

    NORMAL = "NORMAL"
    ELITE = "ELITE"
    AMBUSH = "AMBUSH"
    BOSS = "BOSS"


class ApproachType(NiceEnum):
    """Pre-combat engagement options."""

    FRONTAL_ASSAULT = "FRONTAL_ASSAULT"
    STEALTH_AMBUSH = "STEALTH_AMBUSH"
    GENJUTSU_SETUP = "GENJUTSU_SETUP"
    ENVIRONMENTAL_TRAP = "ENVIRONMENTAL_TRAP"
    SHADOW_BYPASS = "SHADOW_BYPASS"


class AIStrategy(NiceEnum):
    """Named skill-selection strategies."""

    AGGRESSIVE = "AGGRESSIVE"
    DEFENSIVE = "DEFENSIVE"
    BURST = "BURST"
    CONTROL = "CONTROL"


class TerrainType(NiceEnum):
    """Battlefield terrains with combat modifiers."""

    OPEN_GROUND = "OPEN_GROUND"
    TRAINING_FIELD = "TRAINING_FIELD"
    ROOFTOPS = "ROOFTOPS"
    ALLEYWAY = "ALLEYWAY"
    FOG_BANK = "FOG_BANK"
    SWAMP = "SWAMP"
    WATERFALL = "WATERFALL"


class Side(NiceEnum):
    """The two sides of a battle."""

    PLAYER = "PLAYER"
    ENEMY = "ENEMY"

    @property
    def color(self) -> str:
        return "bold blue" if self is Side.PLAYER else "bold red"

    @property
    def emoji(self) -> str:
        return "👤" if self is Side.PLAYER else "👹"

    def colorize(self, message: str) -> str:
        """Applies side color formatting to a message."""
        return f"[{self.color}]{message}[/]"

    @property
    def other(self) -> "Side":
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


# Sentinel duration of permanent (toggle) buffs.
PERMANENT_DURATION = -1
