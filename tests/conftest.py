from __future__ import annotations

import pytest


class ScriptedRng:
    """Stands in for random.Random, returning pre-chosen die faces in order."""

    def __init__(self, values):
        self._values = iter(values)

    def randint(self, a, b):
        value = next(self._values)
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value

    def choice(self, seq):
        value = next(self._values)
        assert value in seq, f"scripted value {value} not in {seq}"
        return value


@pytest.fixture
def scripted():
    return ScriptedRng
