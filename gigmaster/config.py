"""
Rules configuration.

Thresholds used by goal tracking and verdict evaluation, stored as JSON.
Defaults reproduce the shipped game rules.
"""

import json
import logging
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)


class RulesConfig(TypedDict, total=False):
    """Tunable rule thresholds."""
    band_grace_weeks: int  # No "band dissolved" defeat up to and including this week
    sandbox_milestone_week: int  # Week that wins a goal-less scenario
    hit_popularity: float  # Songs above this popularity count as hits
    top_ten_position: int  # Chart positions at or above this count as top ten
    percentage_cap: int  # Highest percentage an incomplete goal may show


DEFAULT_RULES: RulesConfig = {
    "band_grace_weeks": 5,
    "sandbox_milestone_week": 100,
    "hit_popularity": 50,
    "top_ten_position": 10,
    "percentage_cap": 99,
}


def resolve_rules(rules: RulesConfig | None = None) -> RulesConfig:
    """Overlay partial rules on the defaults."""
    merged = DEFAULT_RULES.copy()
    if rules:
        merged.update(rules)
    return merged


def load_rules(path: Path | str) -> RulesConfig:
    """Load rules from file, or return defaults if missing or unreadable."""
    path = Path(path)

    if not path.exists():
        return DEFAULT_RULES.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("Ignoring unreadable rules file %s: %s", path, e)
        return DEFAULT_RULES.copy()

    if not isinstance(saved, dict):
        logger.warning("Ignoring rules file %s: expected a JSON object", path)
        return DEFAULT_RULES.copy()

    # Unknown keys are dropped
    known = {k: v for k, v in saved.items() if k in DEFAULT_RULES}
    return resolve_rules(known)


def save_rules(rules: RulesConfig, path: Path | str) -> bool:
    """Save rules to file. Returns True on success."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(dict(rules), f, indent=2)
        return True
    except IOError as e:
        logger.warning("Could not save rules to %s: %s", path, e)
        return False
