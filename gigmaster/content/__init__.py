"""Authored content: chain catalog, built-in scenarios, YAML loaders."""

from .chains import CONSEQUENCE_CHAINS, ChainCatalog, DEFAULT_CHAIN_CATALOG
from .scenarios import SCENARIOS, get_scenario
from .loader import (
    ContentError,
    load_scenario,
    load_chain_definitions,
    load_chain_catalog,
)

__all__ = [
    "CONSEQUENCE_CHAINS",
    "ChainCatalog",
    "DEFAULT_CHAIN_CATALOG",
    "SCENARIOS",
    "get_scenario",
    "ContentError",
    "load_scenario",
    "load_chain_definitions",
    "load_chain_catalog",
]
