"""Deterministic replay of recorded ticks and transcript rendering."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from ..config import RulesConfig
from ..content.chains import ChainCatalog
from ..content.loader import ContentError, read_yaml
from ..content.scenarios import get_scenario
from ..state.event_bus import EventBus
from ..state.schema import ConsequenceState, GameState, ScenarioDefinition, Verdict
from ..systems.session import ScenarioSession, TickResult

logger = logging.getLogger(__name__)


class ReplayTick(BaseModel):
    """One recorded tick: the snapshot and the triggers fired before it."""
    state: GameState
    triggers: list[str] = Field(default_factory=list)


class ReplayScript(BaseModel):
    """A recorded playthrough."""
    scenario: str | ScenarioDefinition = "sandbox"  # Built-in id or inline definition
    ticks: list[ReplayTick] = Field(default_factory=list)

    def resolve_scenario(self) -> ScenarioDefinition | None:
        if isinstance(self.scenario, ScenarioDefinition):
            return self.scenario
        return get_scenario(self.scenario)


@dataclass
class ReplayTranscript:
    """Outcome of a replay, tick by tick."""

    scenario: ScenarioDefinition
    results: list[TickResult] = field(default_factory=list)
    consequence_state: ConsequenceState = field(default_factory=ConsequenceState)
    goal_percentages: dict[str, int] = field(default_factory=dict)

    @property
    def verdict(self) -> Verdict | None:
        return self.results[-1].verdict if self.results else None

    @property
    def final_week(self) -> int:
        return self.results[-1].week if self.results else 0

    def to_markdown(self) -> str:
        """Convert transcript to markdown format."""
        lines = [
            "# Replay Transcript",
            "",
            f"- **Scenario:** {self.scenario.name or self.scenario.id}",
            f"- **Ticks:** {len(self.results)}",
            f"- **Final week:** {self.final_week}",
            "",
            "---",
            "",
        ]

        for result in self.results:
            lines.append(f"## Week {result.week}")
            lines.append("")

            if result.transitions:
                lines.append("*Chains:*")
                for t in result.transitions:
                    source = "expired" if t.expired else t.trigger
                    lines.append(
                        f"- {t.chain_id}: {t.kind.value} {t.from_stage or '-'} -> {t.to_stage} ({source})"
                    )
                lines.append("")

            if result.stat_effects:
                effects = ", ".join(f"{k} {v:+g}" for k, v in result.stat_effects.items())
                lines.append(f"*Effects:* {effects}")
                lines.append("")

            if result.newly_completed_goal_ids:
                lines.append(f"*Goals completed:* {', '.join(result.newly_completed_goal_ids)}")
                lines.append("")

            if result.continuation_events:
                lines.append(f"*Continuation events:* {', '.join(result.continuation_events)}")
                lines.append("")

        lines.append("## Outcome")
        lines.append("")
        verdict = self.verdict
        if verdict:
            lines.append(f"- **Result:** {verdict.status.value} ({verdict.reason})")
            lines.append(f"- **Goals:** {verdict.goals_completed}/{verdict.total_goals}")
            lines.append(f"- {verdict.message}")
        else:
            lines.append("- **Result:** ongoing")
        for goal_id, percent in self.goal_percentages.items():
            lines.append(f"- {goal_id}: {percent}%")
        lines.append("")

        return "\n".join(lines)

    def save(self, path: Path) -> Path:
        """Write the markdown transcript. Returns the file path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_markdown(), encoding="utf-8")
        return path

    def to_dict(self) -> dict:
        """Serialize for JSON."""
        verdict = self.verdict
        return {
            "scenario": self.scenario.id,
            "final_week": self.final_week,
            "verdict": verdict.model_dump(mode="json") if verdict else None,
            "ticks": [
                {
                    "week": result.week,
                    "transitions": [t.model_dump() for t in result.transitions],
                    "stat_effects": dict(result.stat_effects),
                    "continuation_events": list(result.continuation_events),
                    "newly_completed_goal_ids": list(result.newly_completed_goal_ids),
                }
                for result in self.results
            ],
            "consequence_state": self.consequence_state.model_dump(mode="json"),
            "goal_percentages": dict(self.goal_percentages),
        }

    def save_json(self, path: Path) -> Path:
        """Write the transcript as JSON. Returns the file path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        return path


def load_replay(path: Path | str) -> ReplayScript:
    """Load a replay script from YAML."""
    data = read_yaml(path)
    if not isinstance(data, dict):
        raise ContentError(path, "expected a mapping at top level")

    try:
        script = ReplayScript.model_validate(data)
    except ValidationError as e:
        raise ContentError(path, str(e)) from e

    if script.resolve_scenario() is None:
        raise ContentError(path, f"unknown scenario {script.scenario!r}")

    return script


def run_replay(
    script: ReplayScript,
    catalog: ChainCatalog | None = None,
    rules: RulesConfig | None = None,
) -> ReplayTranscript:
    """
    Feed a script's ticks through a fresh session.

    Stops after the first tick that produces a verdict. Uses a private
    event bus so replays never reach process-wide listeners.
    """
    scenario = script.resolve_scenario()
    if scenario is None:
        raise ValueError(f"Unknown scenario: {script.scenario!r}")

    session = ScenarioSession(scenario, catalog=catalog, rules=rules, bus=EventBus())
    transcript = ReplayTranscript(scenario=scenario)

    for tick in script.ticks:
        result = session.tick(tick.state, tick.triggers)
        transcript.results.append(result)
        if result.verdict is not None:
            break

    transcript.consequence_state = session.consequence_state
    transcript.goal_percentages = {
        goal_id: session.get_goal_percentage(goal_id) for goal_id in scenario.goal_ids
    }
    logger.info("Replayed %d ticks of %s", len(transcript.results), scenario.id)
    return transcript
