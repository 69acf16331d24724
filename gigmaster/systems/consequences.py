"""
Consequence chain engine for GIGMASTER.

Advances multi-stage narrative arcs (addiction, corruption, fame, stalker)
against the chain catalog.

Pure reducer design: (chain_id, trigger, ConsequenceState) -> ConsequenceState
No globals, no side effects, no mutation of input state. The host owns the
state between calls and must treat each returned state as the only live one.

Invariants:
- At most one instance per chain id
- Stages only move forward, one step per matching trigger
- A completed instance stays completed and is never removed here
"""

from __future__ import annotations

from ..content.chains import ChainCatalog, DEFAULT_CHAIN_CATALOG
from ..state.schema import (
    ActiveChain,
    ChainDefinition,
    ChainStage,
    ConsequenceState,
)

# Synthetic trigger used to push an expired last stage to completion.
STAGE_EXPIRED_TRIGGER = "stage_expired"


class ConsequenceChainEngine:
    """
    Stateless chain progression over a catalog.

    The only thing held between calls is the (immutable) catalog.
    """

    def __init__(self, catalog: ChainCatalog | None = None):
        self.catalog = catalog if catalog is not None else DEFAULT_CHAIN_CATALOG

    def progress_chain(
        self,
        chain_id: str,
        trigger: str,
        consequence_state: ConsequenceState,
    ) -> ConsequenceState:
        """
        Offer a trigger to one chain.

        - No instance yet: start at the entry stage if the trigger is one of
          its triggers, otherwise nothing happens.
        - Running instance: advance one stage if the trigger belongs to the
          next stage; on the last stage, any trigger completes the chain.
        - Completed instance or unknown chain id: nothing happens.

        Args:
            chain_id: Catalog id of the chain
            trigger: Trigger identifier emitted by gameplay
            consequence_state: Current state (not modified)

        Returns:
            Updated copy of the state, or the input itself when nothing changed
        """
        chain = self.catalog.get(chain_id)
        if chain is None or not chain.stages:
            return consequence_state

        week = consequence_state.current_week
        existing = consequence_state.get_active(chain_id)

        if existing is None:
            entry = chain.stages[0]
            if trigger not in entry.triggers:
                return consequence_state
            started = ActiveChain(
                chain_id=chain_id,
                current_stage=entry.id,
                stage_start_week=week,
                triggers=[trigger],
            )
            return consequence_state.model_copy(
                update={"active_chains": [*consequence_state.active_chains, started]}
            )

        if existing.completed:
            return consequence_state

        next_stage = self.next_stage(chain, existing)
        if next_stage is not None:
            if trigger not in next_stage.triggers:
                return consequence_state
            updated = existing.model_copy(update={
                "current_stage": next_stage.id,
                "stage_start_week": week,
                "triggers": [*existing.triggers, trigger],
            })
        else:
            updated = existing.model_copy(update={
                "completed": True,
                "completed_week": week,
            })

        return consequence_state.model_copy(update={
            "active_chains": [
                updated if c.chain_id == chain_id else c
                for c in consequence_state.active_chains
            ]
        })

    def should_auto_progress_chain(
        self,
        chain_id: str,
        active_chain: ActiveChain | None,
        current_week: int,
    ) -> bool:
        """
        Whether the current stage has reached its maximum residency.

        True once weeks in stage >= duration.max. The minimum duration is not
        consulted here, and neither is the completed flag: skipping finished
        chains is up to the caller.
        """
        chain = self.catalog.get(chain_id)
        if chain is None or active_chain is None:
            return False

        stage = chain.get_stage(active_chain.current_stage)
        if stage is None:
            return False

        return active_chain.weeks_in_stage(current_week) >= stage.duration.max

    def get_chain_stage(
        self,
        chain_id: str,
        consequence_state: ConsequenceState,
    ) -> ChainStage | None:
        """
        Stage definition the chain's instance currently sits on.

        Falls back to the entry stage if the recorded stage id is not in the
        chain. None when the chain is unknown or has no instance.
        """
        chain = self.catalog.get(chain_id)
        if chain is None:
            return None

        active = consequence_state.get_active(chain_id)
        if active is None:
            return None

        return chain.get_stage(active.current_stage) or chain.first_stage

    def get_chain_continuation_events(
        self,
        consequence_state: ConsequenceState,
    ) -> list[str]:
        """
        Continuation event ids for every running (non-completed) chain.

        Chains in activation order, events in stage order. Duplicates across
        chains are kept; de-duplication is up to the consumer.
        """
        events: list[str] = []
        for active in consequence_state.active_chains:
            chain = self.catalog.get(active.chain_id)
            if chain is None or active.completed:
                continue
            stage = chain.get_stage(active.current_stage)
            if stage is not None:
                events.extend(stage.continuation_events)
        return events

    # ─── Helpers ─────────────────────────────────────────────

    @staticmethod
    def next_stage(chain: ChainDefinition, active_chain: ActiveChain) -> ChainStage | None:
        """Stage after the instance's current one, or None on the last stage."""
        index = chain.stage_index(active_chain.current_stage)
        next_index = 0 if index is None else index + 1
        if next_index < len(chain.stages):
            return chain.stages[next_index]
        return None

    def expiry_trigger(self, chain_id: str, active_chain: ActiveChain) -> str | None:
        """
        Synthetic trigger that forces an expired stage forward.

        The next stage's first trigger, or STAGE_EXPIRED_TRIGGER on the last
        stage (which completes the chain). None for unknown chains.
        """
        chain = self.catalog.get(chain_id)
        if chain is None:
            return None

        next_stage = self.next_stage(chain, active_chain)
        if next_stage is None:
            return STAGE_EXPIRED_TRIGGER
        return next_stage.triggers[0] if next_stage.triggers else None
