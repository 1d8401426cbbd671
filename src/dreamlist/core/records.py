"""
Dream Records

This module defines the immutable value types that make up a single entry in a
dream list: the creature that appears in the dream, the effects it produces,
and the dream record itself.

Key concepts:
- Every type here is frozen; a changed dream is a new Dream instance
- Creature.name and Effect.resource_name are stable serialization identities
- Equality is structural, effects are compared as sets
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Color(str, Enum):
    """Colors available to creatures that carry one."""

    WHITE = "white"
    YELLOW = "yellow"
    PINK = "pink"
    RED = "red"
    BLUE = "blue"


class CreatureKind(str, Enum):
    """Tag of the creature variant."""

    UNICORN = "unicorn"
    CRUSTY = "crusty"
    SHARK = "shark"
    DRAGON = "dragon"


# Kinds whose variant carries an associated color
COLORED_KINDS = frozenset({CreatureKind.UNICORN, CreatureKind.DRAGON})


class Effect(str, Enum):
    """Closed set of effects a dream can have."""

    FIRE_BREATHING = "fire_breathing"
    LASER_FOCUS = "laser_focus"
    FIREFLIES = "fireflies"
    MAGIC = "magic"
    RAIN = "rain"
    SNOW = "snow"
    SNEEZING = "sneezing"

    @property
    def resource_name(self) -> str:
        """Stable name used when the effect is persisted."""
        return _EFFECT_RESOURCE_NAMES[self]

    @classmethod
    def from_resource_name(cls, resource_name: str) -> "Effect":
        for effect, name in _EFFECT_RESOURCE_NAMES.items():
            if name == resource_name:
                return effect
        raise ValueError(
            f"Unknown effect resource name {resource_name!r}. "
            f"Must be one of: {sorted(_EFFECT_RESOURCE_NAMES.values())}"
        )


_EFFECT_RESOURCE_NAMES = {
    Effect.FIRE_BREATHING: "Fire Breathing",
    Effect.LASER_FOCUS: "Laser Focus",
    Effect.FIREFLIES: "Fireflies",
    Effect.MAGIC: "Magic",
    Effect.RAIN: "Rain",
    Effect.SNOW: "Snow",
    Effect.SNEEZING: "Sneezing",
}


class Creature(BaseModel):
    """
    Tagged creature variant.

    Unicorns and dragons carry a color, crusties and sharks do not. The
    `name` includes the color so that two creatures with the same tag but a
    different color have different names.

    Examples:
        >>> Creature.unicorn(Color.PINK).name
        'Pink Unicorn'
        >>> Creature.from_name("Shark").kind
        <CreatureKind.SHARK: 'shark'>
    """

    model_config = ConfigDict(frozen=True)

    kind: CreatureKind
    color: Optional[Color] = None

    @model_validator(mode="after")
    def _check_color_matches_kind(self) -> "Creature":
        if self.kind in COLORED_KINDS and self.color is None:
            raise ValueError(f"Creature kind '{self.kind.value}' requires a color")
        if self.kind not in COLORED_KINDS and self.color is not None:
            raise ValueError(f"Creature kind '{self.kind.value}' does not take a color")
        return self

    @classmethod
    def unicorn(cls, color: Color) -> "Creature":
        return cls(kind=CreatureKind.UNICORN, color=color)

    @classmethod
    def dragon(cls, color: Color) -> "Creature":
        return cls(kind=CreatureKind.DRAGON, color=color)

    @classmethod
    def crusty(cls) -> "Creature":
        return cls(kind=CreatureKind.CRUSTY)

    @classmethod
    def shark(cls) -> "Creature":
        return cls(kind=CreatureKind.SHARK)

    @property
    def name(self) -> str:
        """Stable identity name, e.g. 'Pink Unicorn' or 'Shark'."""
        kind_name = self.kind.value.capitalize()
        if self.color is None:
            return kind_name
        return f"{self.color.value.capitalize()} {kind_name}"

    @classmethod
    def from_name(cls, name: str) -> "Creature":
        """
        Rebuild a creature from its stable name.

        Raises:
            ValueError: If the name does not describe a known creature
        """
        words = name.strip().lower().split()
        try:
            if len(words) == 1:
                return cls(kind=CreatureKind(words[0]))
            if len(words) == 2:
                return cls(kind=CreatureKind(words[1]), color=Color(words[0]))
        except ValueError as exc:
            raise ValueError(f"Unknown creature name {name!r}") from exc
        raise ValueError(f"Unknown creature name {name!r}")

    def __str__(self) -> str:
        return self.name


class Dream(BaseModel):
    """
    A single entry of the dream list.

    Attributes:
        description: Free text shown for the dream
        creature: The creature that appears in the dream
        effects: Set of effects, no duplicates, compared as a set
        number_of_creatures: How many of the creature appear (non-negative)
    """

    model_config = ConfigDict(frozen=True)

    description: str
    creature: Creature
    effects: FrozenSet[Effect] = Field(default_factory=frozenset)
    number_of_creatures: int = Field(default=1, ge=0)

    def sorted_effects(self) -> List[Effect]:
        """Effects ordered by resource name, the order used for persistence."""
        return sorted(self.effects, key=lambda effect: effect.resource_name)

    def __str__(self) -> str:
        effects = ", ".join(effect.resource_name for effect in self.sorted_effects())
        return f"Dream({self.description!r}: {self.number_of_creatures} x {self.creature.name} [{effects}])"


__all__ = [
    "Color",
    "CreatureKind",
    "Creature",
    "Effect",
    "Dream",
]
