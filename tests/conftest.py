"""Global test fixtures and utilities for adhd_focus tests"""
import pytest
import random
from datetime import datetime, timezone

from adhd_focus.models import UserGameState, new_user_state


class ScriptedRandom:
    """Stand-in for random.Random that returns a fixed sequence of draws"""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls]
        self.calls += 1
        return value


# ============================================================================
# User & State Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"


@pytest.fixture
def fresh_state():
    """State of a brand new account"""
    return new_user_state()


@pytest.fixture
def level_one_state():
    """95 XP at level 1, one step away from level 2"""
    return UserGameState(xp=95, level=1)


# ============================================================================
# Clock & Randomness Fixtures
# ============================================================================

@pytest.fixture
def now():
    """Fixed event time, mid-afternoon UTC"""
    return datetime(2024, 3, 15, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def seeded_rng():
    """Deterministic random source"""
    return random.Random(1234)


@pytest.fixture
def scripted_rng():
    """Factory for scripted random sources"""
    return ScriptedRandom
