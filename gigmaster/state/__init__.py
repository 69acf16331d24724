"""State models for GIGMASTER scenarios and consequence chains."""

from .schema import (
    GoalType,
    VerdictStatus,
    GoalDefinition,
    SpecialRules,
    ScenarioDefinition,
    Album,
    Song,
    BandMember,
    GameState,
    GoalProgressEntry,
    FinalStats,
    Verdict,
    StageDuration,
    ChainStage,
    ChainDefinition,
    ActiveChain,
    ConsequenceState,
)
from .event_bus import (
    EventBus,
    EventType,
    GameEvent,
    get_event_bus,
    reset_event_bus,
)

__all__ = [
    # Schema
    "GoalType",
    "VerdictStatus",
    "GoalDefinition",
    "SpecialRules",
    "ScenarioDefinition",
    "Album",
    "Song",
    "BandMember",
    "GameState",
    "GoalProgressEntry",
    "FinalStats",
    "Verdict",
    "StageDuration",
    "ChainStage",
    "ChainDefinition",
    "ActiveChain",
    "ConsequenceState",
    # Event Bus
    "EventBus",
    "EventType",
    "GameEvent",
    "get_event_bus",
    "reset_event_bus",
]
