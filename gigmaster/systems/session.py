"""
Scenario session for GIGMASTER's weekly tick.

Owns the state the pure systems hand back and sequences each tick:
    chains (triggers, then expiry) → goal progress → verdict

Design principles:
- Session sequences and delegates; the systems decide.
- Chain, goal and verdict logic stay pure; only the session emits events.
- A reached verdict is latched until reset().

Usage:
    session = ScenarioSession(get_scenario("indie-breakout"))

    result = session.tick(GameState(week=3, money=400), triggers=["fan_letter"])
    apply_effects(result.stat_effects)          # host feeds these into next week
    queue_events(result.continuation_events)    # event-selection input

    if result.verdict:
        show_end_screen(result.verdict)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from ..config import RulesConfig, resolve_rules
from ..content.chains import ChainCatalog, DEFAULT_CHAIN_CATALOG
from ..state.event_bus import EventBus, EventType, get_event_bus
from ..state.schema import (
    ConsequenceState,
    GameState,
    GoalProgressEntry,
    ScenarioDefinition,
    Verdict,
)
from .consequences import ConsequenceChainEngine
from .goals import GoalProgressTracker
from .victory import VictoryEvaluator

logger = logging.getLogger(__name__)


class TransitionKind(str, Enum):
    STARTED = "started"
    ADVANCED = "advanced"
    COMPLETED = "completed"


@dataclass
class ChainTransition:
    """One chain moving during a tick."""
    chain_id: str
    kind: TransitionKind
    to_stage: str
    trigger: str
    week: int
    from_stage: str | None = None  # None when the chain just started
    expired: bool = False  # Forced by stage expiry rather than a gameplay trigger

    def model_dump(self) -> dict:
        """Serialize for JSON (matches Pydantic convention)."""
        return {
            "chain_id": self.chain_id,
            "kind": self.kind.value,
            "from_stage": self.from_stage,
            "to_stage": self.to_stage,
            "trigger": self.trigger,
            "week": self.week,
            "expired": self.expired,
        }


@dataclass
class TickResult:
    """Everything a tick produced, for the host to apply and display."""
    week: int
    transitions: list[ChainTransition] = field(default_factory=list)
    stat_effects: dict[str, float] = field(default_factory=dict)  # Summed over entered stages
    continuation_events: list[str] = field(default_factory=list)
    progress: dict[str, GoalProgressEntry] = field(default_factory=dict)
    completed_goal_ids: list[str] = field(default_factory=list)
    newly_completed_goal_ids: list[str] = field(default_factory=list)
    verdict: Verdict | None = None

    @property
    def is_terminal(self) -> bool:
        return self.verdict is not None


class ScenarioSession:
    """
    Host-side state holder for one playthrough.

    Not thread-safe: calls for one session must be serialized by the host.
    """

    def __init__(
        self,
        scenario: ScenarioDefinition,
        catalog: ChainCatalog | None = None,
        rules: RulesConfig | None = None,
        bus: EventBus | None = None,
    ):
        self.rules = resolve_rules(rules)
        self.engine = ConsequenceChainEngine(catalog if catalog is not None else DEFAULT_CHAIN_CATALOG)
        self.evaluator = VictoryEvaluator(self.rules)
        self._bus = bus if bus is not None else get_event_bus()
        self._load_scenario(scenario)

    def _load_scenario(self, scenario: ScenarioDefinition) -> None:
        self.scenario = scenario
        self.tracker = GoalProgressTracker(scenario, self.rules)
        self._consequences = ConsequenceState()
        self._progress = self.tracker.initial_progress()
        self._completed: list[str] = []
        self._verdict: Verdict | None = None

    # ─── Accessors ───────────────────────────────────────────

    @property
    def consequence_state(self) -> ConsequenceState:
        return self._consequences

    @property
    def progress(self) -> dict[str, GoalProgressEntry]:
        return dict(self._progress)

    @property
    def completed_goal_ids(self) -> list[str]:
        return list(self._completed)

    @property
    def verdict(self) -> Verdict | None:
        return self._verdict

    @property
    def is_victory(self) -> bool:
        return self._verdict is not None and self._verdict.is_victory

    @property
    def is_defeated(self) -> bool:
        return self._verdict is not None and self._verdict.is_defeat

    def get_goal_percentage(self, goal_id: str) -> int:
        """Progress-bar percentage for a goal id (0 for unknown ids)."""
        return self.tracker.get_goal_percentage(self._progress.get(goal_id))

    # ─── Lifecycle ───────────────────────────────────────────

    def reset(self, scenario: ScenarioDefinition | None = None) -> None:
        """
        Clear chains, progress and verdict.

        Args:
            scenario: Replacement scenario (keeps the current one if None)
        """
        self._load_scenario(scenario or self.scenario)
        logger.info("Session reset for scenario %s", self.scenario.id)
        self._bus.emit(EventType.SCENARIO_RESET, scenario_id=self.scenario.id)

    def tick(self, state: GameState, triggers: Iterable[str] = ()) -> TickResult:
        """
        Run one simulation tick.

        Args:
            state: This week's game-state snapshot
            triggers: Trigger ids fired since the last tick, in order

        Returns:
            TickResult; once a verdict has been reached, later ticks change
            nothing and return the latched verdict
        """
        result = TickResult(week=state.week)

        if self._verdict is not None:
            logger.debug("Tick at week %d ignored: verdict already reached", state.week)
            result.progress = dict(self._progress)
            result.completed_goal_ids = list(self._completed)
            result.verdict = self._verdict
            return result

        # ── 1. Chains: gameplay triggers, then stage expiry ──
        consequences = self._consequences.model_copy(update={"current_week": state.week})

        for trigger in triggers:
            for chain in self.engine.catalog:
                if not chain.recognizes(trigger):
                    continue
                consequences = self._advance(chain.id, trigger, consequences, result)

        for active in list(consequences.active_chains):
            if active.completed:
                continue
            if not self.engine.should_auto_progress_chain(active.chain_id, active, state.week):
                continue
            trigger = self.engine.expiry_trigger(active.chain_id, active)
            if trigger is None:
                logger.debug("Chain %s expired but next stage has no trigger", active.chain_id)
                continue
            consequences = self._advance(active.chain_id, trigger, consequences, result, expired=True)

        self._consequences = consequences
        result.continuation_events = self.engine.get_chain_continuation_events(consequences)

        # ── 2. Goals ─────────────────────────────────────────
        update = self.tracker.update_goal_progress(state)
        previously_completed = set(self._completed)
        result.newly_completed_goal_ids = [
            goal_id for goal_id in update.completed_goal_ids
            if goal_id not in previously_completed
        ]
        self._progress = update.progress
        self._completed = update.completed_goal_ids
        result.progress = dict(update.progress)
        result.completed_goal_ids = list(update.completed_goal_ids)

        for goal_id in result.newly_completed_goal_ids:
            self._bus.emit(
                EventType.GOAL_COMPLETED,
                scenario_id=self.scenario.id,
                week=state.week,
                goal_id=goal_id,
            )

        # ── 3. Verdict ───────────────────────────────────────
        verdict = self.evaluator.evaluate(state, update.completed_goal_ids, self.scenario)
        if verdict is not None:
            self._verdict = verdict
            logger.info(
                "Scenario %s ended in %s at week %d: %s",
                self.scenario.id, verdict.status.value, state.week, verdict.reason,
            )
            self._bus.emit(
                EventType.VERDICT_REACHED,
                scenario_id=self.scenario.id,
                week=state.week,
                status=verdict.status.value,
                reason=verdict.reason,
            )
        result.verdict = verdict

        return result

    # ─── Chain bookkeeping ───────────────────────────────────

    def _advance(
        self,
        chain_id: str,
        trigger: str,
        consequences: ConsequenceState,
        result: TickResult,
        expired: bool = False,
    ) -> ConsequenceState:
        """Offer one trigger to one chain and record any movement."""
        before = consequences.get_active(chain_id)
        updated = self.engine.progress_chain(chain_id, trigger, consequences)
        if updated is consequences:
            return consequences

        after = updated.get_active(chain_id)
        if after is None:
            return updated

        if before is None:
            kind = TransitionKind.STARTED
        elif after.completed and not before.completed:
            kind = TransitionKind.COMPLETED
        else:
            kind = TransitionKind.ADVANCED

        transition = ChainTransition(
            chain_id=chain_id,
            kind=kind,
            from_stage=before.current_stage if before else None,
            to_stage=after.current_stage,
            trigger=trigger,
            week=updated.current_week,
            expired=expired,
        )
        result.transitions.append(transition)

        if kind != TransitionKind.COMPLETED:
            stage = self.engine.get_chain_stage(chain_id, updated)
            if stage is not None:
                for stat, delta in stage.effects.items():
                    result.stat_effects[stat] = result.stat_effects.get(stat, 0) + delta

        logger.info(
            "Chain %s %s at week %d (%s -> %s, trigger=%s)",
            chain_id, kind.value, transition.week,
            transition.from_stage, transition.to_stage, trigger,
        )

        event_type = {
            TransitionKind.STARTED: EventType.CHAIN_STARTED,
            TransitionKind.ADVANCED: EventType.CHAIN_ADVANCED,
            TransitionKind.COMPLETED: EventType.CHAIN_COMPLETED,
        }[kind]
        self._bus.emit(
            event_type,
            scenario_id=self.scenario.id,
            week=transition.week,
            chain_id=chain_id,
            from_stage=transition.from_stage,
            to_stage=transition.to_stage,
            trigger=trigger,
            expired=expired,
        )

        return updated
