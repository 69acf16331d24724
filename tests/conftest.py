"""
Pytest fixtures for GIGMASTER engine tests.

Provides scenarios, snapshots and an isolated event bus.
"""

import pytest
from pathlib import Path

# Add project root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from gigmaster.state import (
    EventBus,
    GameState,
    ScenarioDefinition,
    ConsequenceState,
    reset_event_bus,
)
from gigmaster.systems import ConsequenceChainEngine, ScenarioSession


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Keep the process-wide bus from leaking between tests."""
    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture
def bus():
    """Private event bus for sessions under test."""
    return EventBus()


@pytest.fixture
def money_scenario():
    """Single earnMoney goal with a 10-week limit."""
    return ScenarioDefinition.model_validate({
        "id": "test-money",
        "goals": [{"id": "g1", "type": "earnMoney", "target": 1000}],
        "special_rules": {"time_limit": 10},
    })


@pytest.fixture
def two_goal_scenario():
    """Streams plus independence, one-year limit."""
    return ScenarioDefinition.model_validate({
        "id": "test-streams",
        "goals": [
            {"id": "streams", "type": "totalStreams", "target": 100000},
            {"id": "indie", "type": "stayIndependent", "target": True},
        ],
        "special_rules": {"time_limit": 52},
    })


@pytest.fixture
def sandbox_scenario():
    """No goals at all."""
    return ScenarioDefinition(id="test-sandbox")


@pytest.fixture
def band_state():
    """Week-5 snapshot with a one-member band."""
    return GameState(week=5, money=1000, band_members=[{}], albums=[])


@pytest.fixture
def engine():
    """Chain engine over the default catalog."""
    return ConsequenceChainEngine()


@pytest.fixture
def empty_consequences():
    return ConsequenceState(active_chains=[], current_week=1)


@pytest.fixture
def session(money_scenario, bus):
    """Session on the money scenario with a private bus."""
    return ScenarioSession(money_scenario, bus=bus)
