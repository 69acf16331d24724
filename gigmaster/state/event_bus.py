"""
Session notifications for GIGMASTER.

ScenarioSession publishes what a tick changed: chains starting, advancing
or completing, goals newly met, the verdict, and resets. Presentation code
(HUD progress bars, the end-of-run screen, the event-selection system that
turns continuation events into narrative) listens here instead of diffing
TickResults. Goal, verdict and chain evaluation never publish.

Usage:
    session = ScenarioSession(get_scenario("indie-breakout"))
    get_event_bus().on(EventType.VERDICT_REACHED, show_end_screen)

    def show_end_screen(event: GameEvent):
        # event.data: status, reason
        render_verdict(event.scenario_id, event.week, event.data["status"])

Payloads:
    chain.*          chain_id, from_stage, to_stage, trigger, expired
    goal.completed   goal_id
    verdict.reached  status, reason
    scenario.reset   (none)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """What a session tick can announce."""

    # Consequence chains
    CHAIN_STARTED = "chain.started"
    CHAIN_ADVANCED = "chain.advanced"
    CHAIN_COMPLETED = "chain.completed"

    # Goals and verdicts
    GOAL_COMPLETED = "goal.completed"
    VERDICT_REACHED = "verdict.reached"

    # Session lifecycle
    SCENARIO_RESET = "scenario.reset"


@dataclass
class GameEvent:
    """
    One session notification.

    Attributes:
        type: What happened
        data: Payload keys listed in the module docstring
        scenario_id: Scenario of the session that emitted it
        week: Snapshot week of the tick (0 for resets)
        timestamp: Wall-clock emit time; not part of replay output
    """

    type: EventType
    data: dict = field(default_factory=dict)
    scenario_id: str = ""
    week: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous publish/subscribe for session notifications.

    Listeners run inside emit(), in subscription order, so they see events
    in the same order the tick produced them. A failing listener is logged
    and skipped; the tick carries on. Sessions default to the process-wide
    bus; replays and tests pass their own EventBus to stay isolated.
    """

    def __init__(self, history_limit: int = 100):
        self._listeners: dict[EventType, list[EventHandler]] = {}
        self._history: list[GameEvent] = []
        self._history_limit = history_limit

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to an event type. Subscribing twice is a no-op."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        if handler not in self._listeners[event_type]:
            self._listeners[event_type].append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from an event type."""
        if event_type in self._listeners and handler in self._listeners[event_type]:
            self._listeners[event_type].remove(handler)

    def emit(
        self,
        event_type: EventType,
        scenario_id: str = "",
        week: int = 0,
        **data,
    ) -> GameEvent:
        """
        Record an event and hand it to its listeners.

        Args:
            event_type: What happened
            scenario_id: Emitting session's scenario
            week: Snapshot week of the tick
            **data: Payload (chain_id, goal_id, status, ...)

        Returns:
            The recorded GameEvent
        """
        event = GameEvent(
            type=event_type,
            data=data,
            scenario_id=scenario_id,
            week=week,
        )

        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        for handler in list(self._listeners.get(event_type, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Error in handler for %s", event_type.value)

        return event

    def clear(self) -> None:
        """Clear all listeners and history. Useful for testing."""
        self._listeners.clear()
        self._history.clear()

    def get_history(
        self,
        event_type: EventType | None = None,
        scenario_id: str | None = None,
    ) -> list[GameEvent]:
        """Recent events, optionally filtered by type and emitting scenario."""
        return [
            e for e in self._history
            if (event_type is None or e.type == event_type)
            and (scenario_id is None or e.scenario_id == scenario_id)
        ]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, []))


# Global singleton instance
_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the process-wide event bus, creating it on first use."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Drop the process-wide event bus. Useful for testing."""
    global _event_bus
    _event_bus = None
