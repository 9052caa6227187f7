"""
Pytest fixtures for engine tests.

Provides the shipped reference data and a scriptable randomness source.
"""

import random
import sys
from pathlib import Path

import pytest

# Make the repository root importable when running pytest from anywhere
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.engine.definitions import load_static_definitions


class ScriptedRandom(random.Random):
    """
    random.Random whose random() replays scripted values before falling back to the seed.
    capacity pins randint(), which sessions use only to sample the hidden capacity.
    """

    def __init__(self, values=(), capacity=None, seed=0):
        super().__init__(seed)
        self._values = list(values)
        self._capacity = capacity

    def random(self):
        if self._values:
            return self._values.pop(0)
        return super().random()

    def randint(self, a, b):
        if self._capacity is not None:
            return self._capacity
        return super().randint(a, b)


@pytest.fixture(scope="session")
def definitions():
    return load_static_definitions()


@pytest.fixture(scope="session")
def ship_defs(definitions):
    return definitions[0]


@pytest.fixture(scope="session")
def wormhole_defs(definitions):
    return definitions[1]


@pytest.fixture(scope="session")
def special_defs(definitions):
    return definitions[2]


@pytest.fixture(scope="session")
def restriction_levels(definitions):
    return definitions[3]
