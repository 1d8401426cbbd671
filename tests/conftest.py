"""
Shared fixtures for dream list tests.
"""

import pytest

from dreamlist.core.model import DreamListModel
from dreamlist.core.records import Color, Creature, Dream, Effect
from dreamlist.core.errors import StoreWriteError
from dreamlist.persistence.encoder import PersistenceEncoder
from dreamlist.persistence.store import InMemoryStore


class FlakyStore(InMemoryStore):
    """In-memory store that rejects writes to selected keys."""

    def __init__(self, failing_keys=(), initial=None):
        super().__init__(initial)
        self.failing_keys = set(failing_keys)
        self.attempts = []

    def set(self, key, value):
        self.attempts.append(key)
        if key in self.failing_keys:
            raise StoreWriteError(key, "Backend is full")
        super().set(key, value)


@pytest.fixture
def dream_one() -> Dream:
    return Dream(
        description="Dream 1",
        creature=Creature.unicorn(Color.PINK),
        effects={Effect.FIRE_BREATHING},
        number_of_creatures=1,
    )


@pytest.fixture
def dream_two() -> Dream:
    return Dream(
        description="Dream 2",
        creature=Creature.unicorn(Color.YELLOW),
        effects={Effect.LASER_FOCUS, Effect.MAGIC},
        number_of_creatures=2,
    )


@pytest.fixture
def single_dream_model(dream_one) -> DreamListModel:
    return DreamListModel(favorite_creature=Creature.unicorn(Color.PINK), dreams=(dream_one,))


@pytest.fixture
def initial_model() -> DreamListModel:
    return DreamListModel.initial()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def encoder() -> PersistenceEncoder:
    return PersistenceEncoder()


@pytest.fixture
def flaky_store():
    """Factory for stores that fail on the given keys."""

    def _make(*failing_keys, initial=None) -> FlakyStore:
        return FlakyStore(failing_keys, initial=initial)

    return _make
