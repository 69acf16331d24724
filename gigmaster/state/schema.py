"""
Pydantic models for GIGMASTER scenario and consequence state.

Definitions (goals, scenarios, chains) are authored content.
Snapshots and consequence state are threaded through the engine by the host;
engine functions return updated copies and never mutate what they are given.
"""

from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class GoalType(str, Enum):
    """Goal tags understood by the progress tracker."""
    TOTAL_STREAMS = "totalStreams"
    STAY_INDEPENDENT = "stayIndependent"
    SIGN_MAJOR_LABEL = "signMajorLabel"
    NUMBER_ONE_ALBUM = "numberOneAlbum"
    TOUR_REGIONS = "tourRegions"
    GO_VIRAL = "goViral"
    SURVIVE_WEEKS = "surviveWeeks"
    MAINTAIN_FAME = "maintainFame"
    TOTAL_HITS = "totalHits"
    SOCIAL_FOLLOWERS = "socialFollowers"
    PLAYLIST_PLACEMENTS = "playlistPlacements"
    TOP_TEN_HITS = "topTenHits"
    WITHIN_WEEKS = "withinWeeks"
    EARN_MONEY = "earnMoney"
    MAX_BAND_SIZE = "maxBandSize"
    GRAMMAR_WINS = "grammarWins"  # Sic: content ships this tag, it counts Grammy wins


class VerdictStatus(str, Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"


# -----------------------------------------------------------------------------
# Scenarios and goals
# -----------------------------------------------------------------------------

class GoalDefinition(BaseModel):
    """A single scenario objective."""
    id: str
    type: str  # Usually a GoalType value; unknown tags never complete
    target: bool | int | float | None = None
    label: str = ""

    @property
    def goal_type(self) -> GoalType | None:
        try:
            return GoalType(self.type)
        except ValueError:
            return None

    @property
    def is_binary(self) -> bool:
        """True when the target is a flag rather than a quantity."""
        return self.target is None or isinstance(self.target, bool)


class SpecialRules(BaseModel):
    """Scenario rule switches. Only time_limit affects evaluation."""
    model_config = ConfigDict(extra="allow")

    time_limit: int | None = None  # Last playable week


class ScenarioDefinition(BaseModel):
    """A play mode: goal set plus special rules."""
    id: str = "custom"
    name: str = ""
    description: str = ""
    initial_money: float = 0
    initial_fame: float = 0
    goals: list[GoalDefinition] = Field(default_factory=list)
    special_rules: SpecialRules = Field(default_factory=SpecialRules)

    @property
    def goal_ids(self) -> list[str]:
        return [goal.id for goal in self.goals]

    @property
    def is_sandbox(self) -> bool:
        return not self.goals


# -----------------------------------------------------------------------------
# Game-state snapshot
# -----------------------------------------------------------------------------

# Snapshot keys may be snake_case or camelCase (total_streams or totalStreams)
SNAPSHOT_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Album(BaseModel):
    model_config = SNAPSHOT_CONFIG

    title: str = ""
    chart_position: int | None = None


class Song(BaseModel):
    model_config = SNAPSHOT_CONFIG

    title: str = ""
    popularity: float = 0
    chart_position: int | None = None


class BandMember(BaseModel):
    """Roster entry. Only the count matters to the engine."""
    model_config = ConfigDict(extra="allow")

    name: str = ""
    role: str = ""


class GameState(BaseModel):
    """
    Read-only snapshot supplied by the host each tick.

    Absent numbers are 0, absent lists empty, absent flags false.
    """
    model_config = SNAPSHOT_CONFIG

    week: int = 0
    money: float = 0
    fame: float = 0

    total_streams: int = 0
    has_signed_label: bool = False
    label_tier: str | None = None  # "indie" / "major"
    is_viral: bool = False

    albums: list[Album] = Field(default_factory=list)
    songs: list[Song] = Field(default_factory=list)
    band_members: list[BandMember] = Field(default_factory=list)
    tour_regions: list[str] = Field(default_factory=list)
    playlist_placements: list[Any] = Field(default_factory=list)

    social_media_followers: int = 0
    grammy_wins: int = 0


# -----------------------------------------------------------------------------
# Progress and verdicts
# -----------------------------------------------------------------------------

class GoalProgressEntry(BaseModel):
    """Progress toward one goal, rebuilt from the snapshot every update."""
    goal: GoalDefinition
    progress: float = 0
    completed: bool = False
    target: bool | int | float | None = None


class FinalStats(BaseModel):
    """End-of-run summary attached to victories."""
    week: int = 0
    fame: float = 0
    money: float = 0
    album_count: int = 0
    band_size: int = 0

    @classmethod
    def from_state(cls, state: GameState) -> "FinalStats":
        return cls(
            week=state.week,
            fame=state.fame,
            money=state.money,
            album_count=len(state.albums),
            band_size=len(state.band_members),
        )


class Verdict(BaseModel):
    """Terminal outcome of a play session."""
    status: VerdictStatus
    reason: str
    message: str
    goals_completed: int = 0
    total_goals: int = 0
    final_stats: FinalStats | None = None  # Victories only

    @property
    def is_victory(self) -> bool:
        return self.status == VerdictStatus.VICTORY

    @property
    def is_defeat(self) -> bool:
        return self.status == VerdictStatus.DEFEAT


# -----------------------------------------------------------------------------
# Consequence chains
# -----------------------------------------------------------------------------

class StageDuration(BaseModel):
    """Residency window for a stage, in weeks."""
    min: int = 0  # Content contract only; the engine reads max
    max: int = 1


class ChainStage(BaseModel):
    """One step of a consequence chain."""
    id: str
    duration: StageDuration = Field(default_factory=StageDuration)
    effects: dict[str, float] = Field(default_factory=dict)  # stat -> delta
    triggers: list[str] = Field(default_factory=list)  # Any one enters this stage
    continuation_events: list[str] = Field(default_factory=list)


class ChainDefinition(BaseModel):
    """Ordered stages of a narrative arc. Index 0 is the entry stage."""
    id: str
    name: str = ""
    stages: list[ChainStage] = Field(default_factory=list)

    @property
    def first_stage(self) -> ChainStage | None:
        return self.stages[0] if self.stages else None

    def stage_index(self, stage_id: str) -> int | None:
        for i, stage in enumerate(self.stages):
            if stage.id == stage_id:
                return i
        return None

    def get_stage(self, stage_id: str) -> ChainStage | None:
        index = self.stage_index(stage_id)
        return self.stages[index] if index is not None else None

    def recognizes(self, trigger: str) -> bool:
        """Whether any stage of this chain lists the trigger."""
        return any(trigger in stage.triggers for stage in self.stages)


class ActiveChain(BaseModel):
    """Runtime instance of a chain. At most one per chain id."""
    chain_id: str
    current_stage: str
    stage_start_week: int = 0
    triggers: list[str] = Field(default_factory=list)  # History since chain start
    completed: bool = False
    completed_week: int | None = None

    def weeks_in_stage(self, current_week: int) -> int:
        return current_week - self.stage_start_week


class ConsequenceState(BaseModel):
    """Host-owned chain state, replaced wholesale by each reducer call."""
    active_chains: list[ActiveChain] = Field(default_factory=list)
    current_week: int = 0

    def get_active(self, chain_id: str) -> ActiveChain | None:
        for chain in self.active_chains:
            if chain.chain_id == chain_id:
                return chain
        return None
