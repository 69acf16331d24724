"""Tests for the scenario session tick sequencing."""

import pytest
from gigmaster.state import EventType, GameState, get_event_bus
from gigmaster.state.schema import VerdictStatus
from gigmaster.systems import ScenarioSession, TransitionKind
from gigmaster.systems.consequences import STAGE_EXPIRED_TRIGGER


def snapshot(week: int, **kwargs) -> GameState:
    defaults = {"money": 100, "band_members": [{}]}
    defaults.update(kwargs)
    return GameState(week=week, **defaults)


class TestTickChains:
    """Trigger routing and expiry."""

    def test_trigger_starts_matching_chain(self, session):
        result = session.tick(snapshot(1), ["substance_use"])

        assert len(result.transitions) == 1
        t = result.transitions[0]
        assert t.chain_id == "addiction_spiral"
        assert t.kind == TransitionKind.STARTED
        assert t.from_stage is None
        assert t.to_stage == "experimentation"
        assert t.week == 1
        assert session.consequence_state.current_week == 1

    def test_entered_stage_effects_reported(self, session):
        result = session.tick(snapshot(1), ["substance_use", "fan_letter"])
        assert result.stat_effects == {
            "addiction_risk": 10,
            "creativity": 5,
            "stress": 0,  # -5 addiction, +5 stalker
            "paranoia": 5,
        }

    def test_continuation_events_after_tick(self, session):
        result = session.tick(snapshot(1), ["fan_letter"])
        assert result.continuation_events == ["repeated_contact", "escalating_interest"]

    def test_triggers_apply_in_order(self, session):
        result = session.tick(snapshot(1), ["substance_use", "continued_use"])
        assert [t.kind for t in result.transitions] == [TransitionKind.STARTED, TransitionKind.ADVANCED]
        active = session.consequence_state.get_active("addiction_spiral")
        assert active.current_stage == "regular_use"

    def test_unrecognized_trigger_does_not_complete_last_stage(self, session):
        session.tick(snapshot(1), ["fan_letter"])
        session.tick(snapshot(2), ["personal_details_known"])
        session.tick(snapshot(3), ["the_shrine"])
        session.tick(snapshot(4), ["violence"])
        assert session.consequence_state.get_active("stalker_obsession").current_stage == "crisis_point"

        result = session.tick(snapshot(5), ["substance_use"])
        assert not session.consequence_state.get_active("stalker_obsession").completed
        assert [t.chain_id for t in result.transitions] == ["addiction_spiral"]

    def test_recognized_trigger_completes_last_stage(self, session):
        for week, trigger in enumerate(
            ["fan_letter", "personal_details_known", "the_shrine", "violence", "fan_letter"],
            start=1,
        ):
            result = session.tick(snapshot(week), [trigger])

        stalker = session.consequence_state.get_active("stalker_obsession")
        assert stalker.completed is True
        assert stalker.completed_week == 5
        assert result.transitions[-1].kind == TransitionKind.COMPLETED
        assert result.stat_effects == {}
        assert result.continuation_events == []

    def test_stage_expiry_forces_advance(self, session):
        session.tick(snapshot(1), ["substance_use"])  # experimentation, max 3
        assert session.tick(snapshot(3)).transitions == []

        result = session.tick(snapshot(4))
        assert len(result.transitions) == 1
        t = result.transitions[0]
        assert t.expired is True
        assert t.trigger == "continued_use"
        assert t.to_stage == "regular_use"
        assert session.consequence_state.get_active("addiction_spiral").stage_start_week == 4

    def test_expired_last_stage_completes(self, session):
        session.tick(snapshot(1), ["fan_letter"])
        session.tick(snapshot(2), ["personal_details_known"])
        session.tick(snapshot(3), ["the_shrine"])
        session.tick(snapshot(4), ["violence"])  # crisis_point, max 3

        result = session.tick(snapshot(7))
        assert result.transitions[0].kind == TransitionKind.COMPLETED
        assert result.transitions[0].trigger == STAGE_EXPIRED_TRIGGER
        assert session.consequence_state.get_active("stalker_obsession").completed

    def test_completed_chain_is_not_expired_again(self, session):
        session.tick(snapshot(1), ["fan_letter"])
        session.tick(snapshot(2), ["personal_details_known"])
        session.tick(snapshot(3), ["the_shrine"])
        session.tick(snapshot(4), ["violence"])
        session.tick(snapshot(7))  # crisis_point expires and completes

        result = session.tick(snapshot(9))
        assert result.transitions == []
        assert session.consequence_state.get_active("stalker_obsession").completed_week == 7

    def test_expiry_follows_activation_order(self, session):
        session.tick(snapshot(1), ["fan_letter"])  # first_contact, max 2
        session.tick(snapshot(2), ["substance_use"])  # experimentation, max 3

        result = session.tick(snapshot(5))
        assert [t.chain_id for t in result.transitions] == ["stalker_obsession", "addiction_spiral"]
        assert all(t.expired for t in result.transitions)


class TestTickGoals:
    """Goal progress and verdicts through the session."""

    def test_end_to_end_victory(self, session):
        result = session.tick(GameState(money=1000, week=5, band_members=[{}], albums=[]))

        assert result.progress["g1"].completed is True
        assert result.completed_goal_ids == ["g1"]
        assert result.newly_completed_goal_ids == ["g1"]
        assert result.verdict.status == VerdictStatus.VICTORY
        assert result.verdict.goals_completed == 1
        assert result.verdict.total_goals == 1
        assert session.is_victory
        assert not session.is_defeated

    def test_goal_percentage_by_id(self, session):
        session.tick(snapshot(2, money=250))
        assert session.get_goal_percentage("g1") == 25
        assert session.get_goal_percentage("unknown") == 0

    def test_newly_completed_only_once(self, two_goal_scenario, bus):
        session = ScenarioSession(two_goal_scenario, bus=bus)
        first = session.tick(snapshot(1))
        second = session.tick(snapshot(2))

        assert first.newly_completed_goal_ids == ["indie"]
        assert second.newly_completed_goal_ids == []

    def test_verdict_is_latched(self, session):
        defeat = session.tick(snapshot(2, money=-10)).verdict
        assert defeat.reason == "Bankruptcy"

        later = session.tick(snapshot(3, money=5000), ["substance_use"])
        assert later.verdict == defeat
        assert later.transitions == []
        assert session.is_defeated
        assert session.consequence_state.active_chains == []

    def test_reset_clears_everything(self, session, two_goal_scenario):
        session.tick(snapshot(1), ["substance_use"])
        session.tick(snapshot(2, money=-1))
        assert session.verdict is not None

        session.reset(two_goal_scenario)

        assert session.verdict is None
        assert session.scenario is two_goal_scenario
        assert session.consequence_state.active_chains == []
        assert set(session.progress) == {"streams", "indie"}
        assert session.completed_goal_ids == []

    def test_reset_keeps_scenario_by_default(self, session, money_scenario):
        session.reset()
        assert session.scenario is money_scenario

    def test_initial_progress_before_first_tick(self, session):
        assert session.progress["g1"].progress == 0
        assert session.get_goal_percentage("g1") == 0


class TestSessionEvents:
    """Event bus emission."""

    def test_chain_and_verdict_events(self, session, bus):
        session.tick(snapshot(1), ["substance_use"])
        session.tick(snapshot(2, money=1000))

        started = bus.get_history(EventType.CHAIN_STARTED)
        assert len(started) == 1
        assert started[0].data["chain_id"] == "addiction_spiral"
        assert started[0].scenario_id == "test-money"

        goals = bus.get_history(EventType.GOAL_COMPLETED)
        assert [e.data["goal_id"] for e in goals] == ["g1"]

        verdicts = bus.get_history(EventType.VERDICT_REACHED)
        assert verdicts[0].data["status"] == "victory"
        assert verdicts[0].week == 2

    def test_reset_event(self, session, bus):
        session.reset()
        assert len(bus.get_history(EventType.SCENARIO_RESET)) == 1

    def test_private_bus_isolated_from_global(self, session):
        session.tick(snapshot(1), ["fan_letter"])
        assert get_event_bus().get_history() == []

    def test_history_by_scenario_on_shared_bus(self, money_scenario, two_goal_scenario, bus):
        ScenarioSession(money_scenario, bus=bus).tick(snapshot(1), ["fan_letter"])
        ScenarioSession(two_goal_scenario, bus=bus).tick(snapshot(1), ["accept_bribe"])

        started = bus.get_history(EventType.CHAIN_STARTED, scenario_id="test-streams")
        assert [e.data["chain_id"] for e in started] == ["corruption_path"]
        assert len(bus.get_history(scenario_id="test-money")) == 1

    def test_defaults_to_global_bus(self, money_scenario):
        session = ScenarioSession(money_scenario)
        session.tick(snapshot(1), ["fan_letter"])
        assert len(get_event_bus().get_history(EventType.CHAIN_STARTED)) == 1


class TestDeterminism:
    """Identical inputs give identical outputs."""

    def test_replayed_ticks_match(self, two_goal_scenario, bus):
        ticks = [
            (snapshot(1), ["substance_use", "accept_bribe"]),
            (snapshot(3, total_streams=5000), ["repeated_corruption"]),
            (snapshot(6, total_streams=70000), []),
            (snapshot(9, total_streams=120000), ["media_attention"]),
        ]

        def run():
            session = ScenarioSession(two_goal_scenario, bus=bus)
            return [session.tick(state, triggers) for state, triggers in ticks]

        assert run() == run()
