"""
Consequence chain catalog.

Slow-burn narrative arcs: each chain walks forward through its stages as
gameplay emits matching triggers, or when a stage outstays its maximum
duration. Stage effects are stat deltas the host applies; continuation
events are event ids handed to the event-selection system.
"""

from typing import Iterable, Iterator

from ..state.schema import ChainDefinition


# Raw chain data, keyed by chain id. Durations are in weeks.
CONSEQUENCE_CHAINS: dict[str, dict] = {
    "addiction_spiral": {
        "id": "addiction_spiral",
        "name": "Addiction Spiral",
        "stages": [
            {
                "id": "experimentation",
                "duration": {"min": 1, "max": 3},
                "effects": {"addiction_risk": 10, "creativity": 5, "stress": -5},
                "triggers": ["substance_use"],
                "continuation_events": ["tolerance_building", "hiding_usage"],
            },
            {
                "id": "regular_use",
                "duration": {"min": 2, "max": 5},
                "effects": {"addiction_risk": 20, "creativity": 10, "health": -5, "stress": -10},
                "triggers": ["continued_use", "tolerance_increase", "tolerance_building"],
                "continuation_events": ["dependency_warning", "relationship_strain"],
            },
            {
                "id": "dependency",
                "duration": {"min": 3, "max": 8},
                "effects": {"addiction_risk": 40, "health": -15, "stress": 20, "depression": 10},
                "triggers": ["withdrawal_symptoms", "failed_attempts_to_quit"],
                "continuation_events": ["rock_bottom", "intervention_opportunity"],
            },
            {
                "id": "crisis",
                "duration": {"min": 1, "max": 4},
                "effects": {"addiction_risk": 60, "health": -30, "stress": 40, "depression": 25},
                "triggers": ["overdose_scare", "arrest", "health_crisis"],
                "continuation_events": ["recovery_attempt", "fatal_outcome"],
            },
        ],
    },
    "corruption_path": {
        "id": "corruption_path",
        "name": "Corruption Path",
        "stages": [
            {
                "id": "first_compromise",
                "duration": {"min": 1, "max": 2},
                "effects": {"moral_integrity": -10, "money": 5000, "paranoia": 5},
                "triggers": ["accept_bribe", "small_corruption"],
                "continuation_events": ["bigger_offer", "guilt_opportunity"],
            },
            {
                "id": "moral_flexibility",
                "duration": {"min": 2, "max": 4},
                "effects": {"moral_integrity": -20, "money": 15000, "paranoia": 15},
                "triggers": ["repeated_corruption", "escalating_deals"],
                "continuation_events": ["criminal_connection", "redemption_opportunity"],
            },
            {
                "id": "active_corruption",
                "duration": {"min": 3, "max": 6},
                "effects": {"moral_integrity": -35, "money": 50000, "paranoia": 30, "stress": 20},
                "triggers": ["major_crime", "criminal_involvement"],
                "continuation_events": ["deep_involvement", "investigation_risk"],
            },
            {
                "id": "deep_involvement",
                "duration": {"min": 4, "max": 10},
                "effects": {"moral_integrity": -50, "money": 200000, "paranoia": 50, "stress": 40},
                "triggers": ["criminal_enterprise", "violence_orders"],
                "continuation_events": ["exposure", "criminal_empire"],
            },
        ],
    },
    "fame_corruption": {
        "id": "fame_corruption",
        "name": "Fame Corruption",
        "stages": [
            {
                "id": "ego_inflation",
                "duration": {"min": 2, "max": 4},
                "effects": {"stress": -10, "fame": 20},
                "triggers": ["success", "media_attention"],
                "continuation_events": ["entitlement_events", "diva_behavior"],
            },
            {
                "id": "reality_disconnect",
                "duration": {"min": 3, "max": 6},
                "effects": {"stress": 15, "depression": 10, "paranoia": 20},
                "triggers": ["isolation", "poor_judgment"],
                "continuation_events": ["burned_bridges", "loneliness_events"],
            },
            {
                "id": "complete_narcissism",
                "duration": {"min": 4, "max": 12},
                "effects": {"stress": 30, "depression": 25, "paranoia": 35},
                "triggers": ["career_destruction", "relationship_loss"],
                "continuation_events": ["redemption_opportunity", "rock_bottom"],
            },
        ],
    },
    "stalker_obsession": {
        "id": "stalker_obsession",
        "name": "Stalker Obsession",
        "stages": [
            {
                "id": "first_contact",
                "duration": {"min": 1, "max": 2},
                "effects": {"paranoia": 5, "stress": 5},
                "triggers": ["fan_letter", "backstage_encounter"],
                "continuation_events": ["repeated_contact", "escalating_interest"],
            },
            {
                "id": "escalating_interest",
                "duration": {"min": 2, "max": 4},
                "effects": {"paranoia": 15, "stress": 15},
                "triggers": ["personal_details_known", "unwanted_presence"],
                "continuation_events": ["dangerous_behavior", "threats_made"],
            },
            {
                "id": "dangerous_behavior",
                "duration": {"min": 2, "max": 5},
                "effects": {"paranoia": 30, "stress": 30, "depression": 15},
                "triggers": ["stalking_incident", "the_shrine"],
                "continuation_events": ["crisis_point", "violence_risk"],
            },
            {
                "id": "crisis_point",
                "duration": {"min": 1, "max": 3},
                "effects": {"paranoia": 50, "stress": 50, "depression": 30},
                "triggers": ["confinement", "violence"],
                "continuation_events": ["resolution", "tragic_end"],
            },
        ],
    },
}


class ChainCatalog:
    """
    Immutable registry of chain definitions, keyed by chain id.

    Iteration follows registration order. Extending returns a new catalog.
    """

    def __init__(self, definitions: Iterable[ChainDefinition] = ()):
        self._chains: dict[str, ChainDefinition] = {}
        for definition in definitions:
            self._chains[definition.id] = definition

    @classmethod
    def from_definitions(cls, data: dict[str, dict] | Iterable[dict]) -> "ChainCatalog":
        """Build a catalog from raw dicts (as authored or loaded from YAML)."""
        raw = data.values() if isinstance(data, dict) else data
        return cls(ChainDefinition.model_validate(item) for item in raw)

    def get(self, chain_id: str) -> ChainDefinition | None:
        return self._chains.get(chain_id)

    def ids(self) -> list[str]:
        return list(self._chains)

    def extend(self, *definitions: ChainDefinition) -> "ChainCatalog":
        """New catalog with extra chains. A reused id replaces the old chain in place."""
        return ChainCatalog([*self._chains.values(), *definitions])

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._chains

    def __iter__(self) -> Iterator[ChainDefinition]:
        return iter(list(self._chains.values()))

    def __len__(self) -> int:
        return len(self._chains)

    def __repr__(self) -> str:
        return f"ChainCatalog({self.ids()!r})"


DEFAULT_CHAIN_CATALOG = ChainCatalog.from_definitions(CONSEQUENCE_CHAINS)
