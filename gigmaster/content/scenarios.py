"""
Built-in scenarios.

Each scenario bundles a goal list with special rules. Mode flags in
special_rules (management_mode, first_person_mode, ...) are read by the
host's UI layer; only time_limit matters to verdict evaluation.
"""

from ..state.schema import ScenarioDefinition


SCENARIOS: list[ScenarioDefinition] = [
    ScenarioDefinition.model_validate({
        "id": "band-manager",
        "name": "Band Manager",
        "description": (
            "Manage your band from the top. Make strategic decisions, build your "
            "roster, write songs, book gigs, and guide your band to success."
        ),
        "initial_money": 1000,
        "initial_fame": 0,
        "goals": [
            {"id": "success", "type": "maintainFame", "target": 200, "label": "Reach 200 Fame"},
            {"id": "hits", "type": "totalHits", "target": 10, "label": "Score 10 Hits"},
            {"id": "survive", "type": "surviveWeeks", "target": 50, "label": "Manage for 50 Weeks"},
        ],
        "special_rules": {"management_mode": True, "full_control": True},
    }),
    ScenarioDefinition.model_validate({
        "id": "band-leader",
        "name": "Band Leader",
        "description": (
            "Start your own band as the leader. Create your character, name your "
            "band, and audition members."
        ),
        "initial_money": 1000,
        "initial_fame": 0,
        "goals": [
            {"id": "build", "type": "maxBandSize", "target": 4, "label": "Build a 4+ Member Band"},
            {"id": "success", "type": "maintainFame", "target": 100, "label": "Reach 100 Fame"},
            {"id": "survive", "type": "surviveWeeks", "target": 50, "label": "Lead for 50 Weeks"},
        ],
        "special_rules": {
            "band_leader_mode": True,
            "first_person_narrative": True,
            "character_creation": True,
            "audition_required": True,
        },
    }),
    ScenarioDefinition.model_validate({
        "id": "band-member",
        "name": "Band Member",
        "description": (
            "Experience life as a member of an established band. Focus on "
            "dialogue, choices, and relationships. Pre-made band included."
        ),
        "initial_money": 500,
        "initial_fame": 25,
        "goals": [
            {"id": "survive", "type": "surviveWeeks", "target": 50, "label": "Survive 50 Weeks in the Band"},
            {"id": "independent", "type": "stayIndependent", "target": True, "label": "Never Sign to a Label"},
        ],
        "special_rules": {"first_person_mode": True, "pre_made_band": True, "simplified_ui": True},
    }),
    ScenarioDefinition.model_validate({
        "id": "indie-breakout",
        "name": "Indie Breakout",
        "description": "Hit 100,000 streams without a label deal before the year is out.",
        "initial_money": 750,
        "initial_fame": 0,
        "goals": [
            {"id": "streams", "type": "totalStreams", "target": 100000, "label": "100,000 Streams"},
            {"id": "independent", "type": "stayIndependent", "target": True, "label": "Stay Independent"},
        ],
        "special_rules": {"time_limit": 52},
    }),
    ScenarioDefinition.model_validate({
        "id": "sandbox",
        "name": "Sandbox",
        "description": "No objectives. Reach week 100 to mark the milestone.",
        "initial_money": 1000,
        "initial_fame": 0,
        "goals": [],
    }),
]


def get_scenario(scenario_id: str) -> ScenarioDefinition | None:
    """Look up a built-in scenario by id."""
    for scenario in SCENARIOS:
        if scenario.id == scenario_id:
            return scenario
    return None
