import pytest

from tetromino_rl.game import ManualClock, PollingScheduler
from tests.helpers import basic_game, extended_game


@pytest.fixture
def basic():
    return basic_game()


@pytest.fixture
def extended():
    return extended_game()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return PollingScheduler(clock)
