"""
Victory and defeat evaluation for GIGMASTER scenarios.

Terminal conditions are checked in a fixed order and the first match wins:

    1. Time limit expired (goals still outstanding)
    2. Bankruptcy
    3. Band dissolved (after the assembly grace period)
    4. All goals achieved
    5. Sandbox milestone (goal-less scenarios only)

Pure function of (state, completed goal ids, scenario). The evaluator keeps
no memory of earlier verdicts; latching a verdict is the host's call.
"""

from __future__ import annotations

from typing import Iterable

from ..config import RulesConfig, resolve_rules
from ..state.schema import (
    FinalStats,
    GameState,
    ScenarioDefinition,
    Verdict,
    VerdictStatus,
)


class VictoryEvaluator:
    """Decides ongoing / victory / defeat from the current inputs."""

    def __init__(self, rules: RulesConfig | None = None):
        self.rules = resolve_rules(rules)

    def evaluate(
        self,
        state: GameState,
        completed_goal_ids: Iterable[str],
        scenario: ScenarioDefinition,
    ) -> Verdict | None:
        """
        Evaluate terminal conditions.

        Args:
            state: Current game-state snapshot
            completed_goal_ids: Goal ids the tracker reports as complete
            scenario: Active scenario definition

        Returns:
            Verdict, or None while the game is ongoing
        """
        completed = set(completed_goal_ids)
        total_goals = len(scenario.goals)
        goals_completed = sum(1 for goal_id in scenario.goal_ids if goal_id in completed)
        all_goals_done = all(goal_id in completed for goal_id in scenario.goal_ids)

        time_limit = scenario.special_rules.time_limit
        if time_limit and state.week > time_limit and not all_goals_done:
            return self._defeat(
                "Time limit expired",
                f"You ran out of time! {goals_completed}/{total_goals} goals completed.",
                goals_completed,
                total_goals,
            )

        if state.money < 0:
            return self._defeat(
                "Bankruptcy",
                "Your band went bankrupt. Game over.",
                goals_completed,
                total_goals,
            )

        if not state.band_members and state.week > self.rules["band_grace_weeks"]:
            return self._defeat(
                "Band Dissolved",
                "Your band fell apart. Everyone quit.",
                goals_completed,
                total_goals,
            )

        if total_goals > 0 and all_goals_done:
            return Verdict(
                status=VerdictStatus.VICTORY,
                reason="All goals achieved!",
                message="You've successfully completed all scenario objectives!",
                goals_completed=goals_completed,
                total_goals=total_goals,
                final_stats=FinalStats.from_state(state),
            )

        milestone = self.rules["sandbox_milestone_week"]
        if total_goals == 0 and state.week >= milestone:
            return Verdict(
                status=VerdictStatus.VICTORY,
                reason="Milestone reached!",
                message=f"You've reached week {milestone} in sandbox mode!",
                goals_completed=0,
                total_goals=0,
                final_stats=FinalStats.from_state(state),
            )

        return None

    @staticmethod
    def _defeat(reason: str, message: str, goals_completed: int, total_goals: int) -> Verdict:
        return Verdict(
            status=VerdictStatus.DEFEAT,
            reason=reason,
            message=message,
            goals_completed=goals_completed,
            total_goals=total_goals,
        )


def evaluate_verdict(
    state: GameState,
    completed_goal_ids: Iterable[str],
    scenario: ScenarioDefinition,
    rules: RulesConfig | None = None,
) -> Verdict | None:
    """Convenience wrapper around VictoryEvaluator.evaluate."""
    return VictoryEvaluator(rules).evaluate(state, completed_goal_ids, scenario)
