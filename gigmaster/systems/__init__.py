"""
Game systems for GIGMASTER.

Goal tracking, verdict evaluation and consequence chains are pure functions
over explicit inputs. ScenarioSession is the host-side sequencer that threads
their state from tick to tick.
"""

from .goals import (
    GOAL_RULES,
    GoalRule,
    GoalProgressTracker,
    GoalProgressUpdate,
    check_goal,
    get_goal_progress,
    get_goal_percentage,
)
from .victory import VictoryEvaluator, evaluate_verdict
from .consequences import ConsequenceChainEngine, STAGE_EXPIRED_TRIGGER
from .session import ScenarioSession, TickResult, ChainTransition, TransitionKind

__all__ = [
    "GOAL_RULES",
    "GoalRule",
    "GoalProgressTracker",
    "GoalProgressUpdate",
    "check_goal",
    "get_goal_progress",
    "get_goal_percentage",
    "VictoryEvaluator",
    "evaluate_verdict",
    "ConsequenceChainEngine",
    "STAGE_EXPIRED_TRIGGER",
    # Host tick sequencing
    "ScenarioSession",
    "TickResult",
    "ChainTransition",
    "TransitionKind",
]
