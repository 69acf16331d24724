"""Replay of recorded playthroughs for debugging and regression checks."""

from .runner import (
    ReplayTick,
    ReplayScript,
    ReplayTranscript,
    load_replay,
    run_replay,
)

__all__ = [
    "ReplayTick",
    "ReplayScript",
    "ReplayTranscript",
    "load_replay",
    "run_replay",
]
