"""
Goal progress tracking for GIGMASTER scenarios.

Every goal type maps to one row of GOAL_RULES: a completion predicate over
the game-state snapshot and, where the type has a natural scalar, a
progress reading. Adding a goal type means adding a row.

Progress is rebuilt from the snapshot on every update. Nothing carries over
between calls, so a missed tick can never leave stale progress behind.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable

from ..config import RulesConfig, resolve_rules
from ..state.schema import (
    GameState,
    GoalDefinition,
    GoalProgressEntry,
    GoalType,
    ScenarioDefinition,
)


def _at_least(value: float, target: Any) -> bool:
    if target is None:
        return False
    return value >= target


def _count_hits(state: GameState, rules: RulesConfig) -> int:
    return sum(1 for song in state.songs if song.popularity > rules["hit_popularity"])


def _count_top_ten(state: GameState, rules: RulesConfig) -> int:
    return sum(
        1 for song in state.songs
        if song.chart_position is not None and song.chart_position <= rules["top_ten_position"]
    )


@dataclass(frozen=True)
class GoalRule:
    """Completion predicate plus optional progress reading for one goal type."""
    check: Callable[[GameState, Any, RulesConfig], bool]
    progress: Callable[[GameState], float] | None = None
    clamp: bool = False  # Progress may not exceed the target


GOAL_RULES: dict[GoalType, GoalRule] = {
    GoalType.TOTAL_STREAMS: GoalRule(
        check=lambda s, t, r: _at_least(s.total_streams, t),
        progress=lambda s: s.total_streams,
        clamp=True,
    ),
    GoalType.STAY_INDEPENDENT: GoalRule(
        check=lambda s, t, r: not s.has_signed_label,
    ),
    GoalType.SIGN_MAJOR_LABEL: GoalRule(
        check=lambda s, t, r: s.has_signed_label and s.label_tier == "major",
    ),
    GoalType.NUMBER_ONE_ALBUM: GoalRule(
        check=lambda s, t, r: any(a.chart_position == 1 for a in s.albums),
    ),
    GoalType.TOUR_REGIONS: GoalRule(
        check=lambda s, t, r: _at_least(len(s.tour_regions), t),
        progress=lambda s: len(s.tour_regions),
    ),
    GoalType.GO_VIRAL: GoalRule(
        check=lambda s, t, r: bool(s.is_viral),
    ),
    GoalType.SURVIVE_WEEKS: GoalRule(
        check=lambda s, t, r: _at_least(s.week, t),
        progress=lambda s: s.week,
    ),
    GoalType.MAINTAIN_FAME: GoalRule(
        check=lambda s, t, r: _at_least(s.fame, t),
        progress=lambda s: s.fame,
    ),
    GoalType.TOTAL_HITS: GoalRule(
        check=lambda s, t, r: _at_least(_count_hits(s, r), t),
    ),
    GoalType.SOCIAL_FOLLOWERS: GoalRule(
        check=lambda s, t, r: _at_least(s.social_media_followers, t),
        progress=lambda s: s.social_media_followers,
    ),
    GoalType.PLAYLIST_PLACEMENTS: GoalRule(
        check=lambda s, t, r: _at_least(len(s.playlist_placements), t),
        progress=lambda s: len(s.playlist_placements),
    ),
    GoalType.TOP_TEN_HITS: GoalRule(
        check=lambda s, t, r: _at_least(_count_top_ten(s, r), t),
    ),
    GoalType.WITHIN_WEEKS: GoalRule(
        check=lambda s, t, r: t is not None and s.week <= t,
    ),
    GoalType.EARN_MONEY: GoalRule(
        check=lambda s, t, r: _at_least(s.money, t),
        progress=lambda s: s.money,
    ),
    GoalType.MAX_BAND_SIZE: GoalRule(
        check=lambda s, t, r: _at_least(len(s.band_members), t),
        progress=lambda s: len(s.band_members),
    ),
    GoalType.GRAMMAR_WINS: GoalRule(
        check=lambda s, t, r: _at_least(s.grammy_wins, t),
    ),
}


def check_goal(
    goal: GoalDefinition,
    state: GameState,
    rules: RulesConfig | None = None,
) -> bool:
    """
    Whether a goal is satisfied by the snapshot.

    Unknown goal types are never satisfied; they do not raise.
    """
    goal_type = goal.goal_type
    if goal_type is None:
        return False
    return bool(GOAL_RULES[goal_type].check(state, goal.target, resolve_rules(rules)))


def get_goal_progress(goal: GoalDefinition, state: GameState) -> float:
    """
    Current raw value toward a goal.

    Stream counts are clamped to the target. Binary goals and types without
    a natural scalar report 0.
    """
    goal_type = goal.goal_type
    if goal_type is None or goal.is_binary:
        return 0

    rule = GOAL_RULES[goal_type]
    if rule.progress is None:
        return 0

    value = rule.progress(state)
    if rule.clamp:
        value = min(value, goal.target)
    return value


def get_goal_percentage(
    entry: GoalProgressEntry | None,
    rules: RulesConfig | None = None,
) -> int:
    """
    Percentage for a progress bar, 0-100.

    Only a completed goal shows 100; incomplete goals are capped below it so
    rounding never reports done early. Binary or targetless goals show 0.
    """
    if entry is None:
        return 0
    if entry.completed:
        return 100

    target = entry.target
    if not target or isinstance(target, bool):
        return 0

    cap = resolve_rules(rules)["percentage_cap"]
    # Half-up rounding, so 0.5% shows as 1%
    percent = math.floor(entry.progress / target * 100 + 0.5)
    return max(0, min(percent, cap))


@dataclass
class GoalProgressUpdate:
    """Result of a full recompute."""
    progress: dict[str, GoalProgressEntry] = field(default_factory=dict)
    completed_goal_ids: list[str] = field(default_factory=list)  # Scenario goal order

    @property
    def completed_count(self) -> int:
        return len(self.completed_goal_ids)


class GoalProgressTracker:
    """
    Computes per-goal completion and progress for one scenario.

    Holds only the scenario and rules; progress is derived fresh from each
    snapshot, so calling update twice with one snapshot gives equal results.
    """

    def __init__(self, scenario: ScenarioDefinition, rules: RulesConfig | None = None):
        self.scenario = scenario
        self.rules = resolve_rules(rules)

    def check_goal(self, goal: GoalDefinition, state: GameState) -> bool:
        return check_goal(goal, state, self.rules)

    def get_goal_progress(self, goal: GoalDefinition, state: GameState) -> float:
        return get_goal_progress(goal, state)

    def get_goal_percentage(self, entry: GoalProgressEntry | None) -> int:
        return get_goal_percentage(entry, self.rules)

    def initial_progress(self) -> dict[str, GoalProgressEntry]:
        """Zeroed entries, for display before the first snapshot arrives."""
        return {
            goal.id: GoalProgressEntry(goal=goal, target=goal.target)
            for goal in self.scenario.goals
        }

    def update_goal_progress(self, state: GameState) -> GoalProgressUpdate:
        """Rebuild every goal's entry from the snapshot."""
        update = GoalProgressUpdate()

        for goal in self.scenario.goals:
            completed = self.check_goal(goal, state)
            update.progress[goal.id] = GoalProgressEntry(
                goal=goal,
                progress=self.get_goal_progress(goal, state),
                completed=completed,
                target=goal.target,
            )
            if completed:
                update.completed_goal_ids.append(goal.id)

        return update
