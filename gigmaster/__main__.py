"""
Command-line entry point for GIGMASTER engine tooling.

Usage:
    python -m gigmaster scenarios
    python -m gigmaster replay run.yaml [--rules rules.json] [--markdown out.md] [--json out.json]

Exit codes:
    0 - Replay finished (any verdict, or still ongoing)
    2 - Content could not be loaded
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_rules
from .content import ContentError, DEFAULT_CHAIN_CATALOG, SCENARIOS, load_chain_catalog
from .simulation import ReplayTranscript, load_replay, run_replay

logger = logging.getLogger(__name__)

console = Console()

THEME = {
    "victory": "green3",
    "defeat": "dark_red",
    "chain": "medium_purple",
    "goal": "steel_blue",
    "dim": "dim",
}


def show_scenarios() -> None:
    """List built-in scenarios and their goals."""
    table = Table(title="Scenarios", header_style=THEME["goal"])
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Time limit", justify="right")
    table.add_column("Goals")

    for scenario in SCENARIOS:
        goals = "\n".join(
            g.label or f"{g.type} {g.target}" for g in scenario.goals
        ) or "[dim]none (sandbox)[/dim]"
        limit = scenario.special_rules.time_limit
        table.add_row(scenario.id, scenario.name, str(limit) if limit else "-", goals)

    console.print(table)


def show_transcript(transcript: ReplayTranscript) -> None:
    """Render a replay as a tick table plus outcome line."""
    table = Table(title=f"Replay: {transcript.scenario.name or transcript.scenario.id}")
    table.add_column("Week", justify="right")
    table.add_column("Chains", style=THEME["chain"])
    table.add_column("Effects")
    table.add_column("Goals completed", style=THEME["goal"])

    for result in transcript.results:
        chains = "\n".join(
            f"{t.chain_id} {t.kind.value} → {t.to_stage}" + (" (expired)" if t.expired else "")
            for t in result.transitions
        )
        effects = ", ".join(f"{k} {v:+g}" for k, v in result.stat_effects.items())
        table.add_row(
            str(result.week),
            chains,
            effects,
            ", ".join(result.newly_completed_goal_ids),
        )

    console.print(table)

    verdict = transcript.verdict
    if verdict is None:
        console.print(f"[{THEME['dim']}]Ongoing after week {transcript.final_week}[/]")
    else:
        style = THEME["victory"] if verdict.is_victory else THEME["defeat"]
        console.print(
            f"[bold {style}]{verdict.status.value.upper()}[/] {verdict.reason} "
            f"({verdict.goals_completed}/{verdict.total_goals} goals) - {verdict.message}"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gigmaster",
        description="Scenario and consequence engine tooling",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("scenarios", help="List built-in scenarios")

    replay = sub.add_parser("replay", help="Replay a recorded tick script")
    replay.add_argument("script", type=Path, help="Replay YAML file")
    replay.add_argument("--rules", type=Path, help="Rules JSON overriding defaults")
    replay.add_argument("--chains", type=Path, help="Extra chain definitions (YAML)")
    replay.add_argument("--markdown", type=Path, help="Also write a markdown transcript")
    replay.add_argument("--json", type=Path, help="Also write a JSON transcript")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )

    if args.command == "scenarios":
        show_scenarios()
        return 0

    try:
        script = load_replay(args.script)
        catalog = load_chain_catalog(args.chains) if args.chains else DEFAULT_CHAIN_CATALOG
    except ContentError as e:
        console.print(f"[{THEME['defeat']}]Cannot load content:[/] {escape(str(e))}")
        return 2

    rules = load_rules(args.rules) if args.rules else None
    transcript = run_replay(script, catalog=catalog, rules=rules)
    show_transcript(transcript)

    if args.markdown:
        path = transcript.save(args.markdown)
        console.print(f"[{THEME['dim']}]Transcript written to {path}[/]")

    if args.json:
        path = transcript.save_json(args.json)
        console.print(f"[{THEME['dim']}]JSON transcript written to {path}[/]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
