"""
YAML loading for externally authored content.

Scenario and chain files are written offline by content authors. They are
parsed with PyYAML and validated through the state models; anything that
fails either step raises ContentError at load time, never mid-tick.

Scenario file:
    id: festival-run
    name: Festival Run
    goals:
      - {id: regions, type: tourRegions, target: 3}
    special_rules:
      time_limit: 30

Chain file (a list, or a mapping keyed by chain id):
    - id: burnout
      name: Burnout
      stages:
        - id: fatigue
          duration: {min: 1, max: 3}
          effects: {stress: 10}
          triggers: [overwork]
          continuation_events: [missed_rehearsal]
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..state.schema import ChainDefinition, ScenarioDefinition
from .chains import ChainCatalog, DEFAULT_CHAIN_CATALOG

logger = logging.getLogger(__name__)


class ContentError(Exception):
    """Authored content could not be read or is malformed."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


def read_yaml(path: Path | str) -> Any:
    """Parse a YAML file, wrapping I/O and syntax errors in ContentError."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ContentError(path, f"cannot read file ({e})") from e
    except yaml.YAMLError as e:
        raise ContentError(path, f"invalid YAML ({e})") from e


def load_scenario(path: Path | str) -> ScenarioDefinition:
    """Load a single scenario definition."""
    data = read_yaml(path)
    if not isinstance(data, dict):
        raise ContentError(path, "expected a mapping at top level")

    try:
        scenario = ScenarioDefinition.model_validate(data)
    except ValidationError as e:
        raise ContentError(path, str(e)) from e

    logger.info("Loaded scenario %s (%d goals) from %s", scenario.id, len(scenario.goals), path)
    return scenario


def load_chain_definitions(path: Path | str) -> list[ChainDefinition]:
    """Load chain definitions from a list or an id-keyed mapping."""
    data = read_yaml(path)
    if isinstance(data, dict):
        items = []
        for chain_id, body in data.items():
            if not isinstance(body, dict):
                raise ContentError(path, f"chain {chain_id!r} must be a mapping")
            items.append({"id": chain_id, **body})
    elif isinstance(data, list):
        items = data
    else:
        raise ContentError(path, "expected a list or mapping of chains")

    try:
        definitions = [ChainDefinition.model_validate(item) for item in items]
    except ValidationError as e:
        raise ContentError(path, str(e)) from e

    for definition in definitions:
        if not definition.stages:
            raise ContentError(path, f"chain {definition.id!r} has no stages")

    return definitions


def load_chain_catalog(
    path: Path | str,
    base: ChainCatalog | None = DEFAULT_CHAIN_CATALOG,
) -> ChainCatalog:
    """
    Load chains from YAML on top of a base catalog.

    Args:
        path: YAML file of chain definitions
        base: Catalog to extend (None for a catalog of only the file's chains)

    Returns:
        New ChainCatalog; the base is left untouched
    """
    definitions = load_chain_definitions(path)
    catalog = (base or ChainCatalog()).extend(*definitions)
    logger.info("Loaded %d chains from %s", len(definitions), path)
    return catalog
