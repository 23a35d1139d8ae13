"""
Command line interface for the ChillAI SDK.

Examples
--------
Train the reference agent with the quick profile::

    python cli.py run --profile quick --save-name seeker

Inspect a saved network::

    python cli.py inspect seeker
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from chillai import ChillAI
from chillai.diagnostics.doctor import run_doctor
from chillai.exceptions import ChillAIError
from chillai.utils.profiles import list_profiles


def _default_config_path(path: str) -> Path:
    candidate = Path(path)
    if candidate.exists():
        return candidate
    raise FileNotFoundError(f"Configuration file not found: {candidate}")


def _run_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Dict[str, Any]] = {}

    def put(section: str, key: str, value: Optional[Any]) -> None:
        if value is not None:
            overrides.setdefault(section, {})[key] = value

    put("training", "generations", args.generations)
    put("training", "population_size", args.population)
    put("training", "selection_strategy", args.strategy)
    put("training", "seed", args.seed)
    if args.save_name:
        put("persistence", "save_name", args.save_name)
        put("persistence", "save_on_completion", True)
    if args.load:
        put("persistence", "load_on_start", True)
    put("persistence", "directory", args.networks_dir)
    return overrides


def _run_command(args: argparse.Namespace) -> None:
    config_source = _default_config_path(args.config) if args.config else None
    # Command line flags win over the config file, so the file becomes the base layer.
    chill = ChillAI(
        agent=args.agent,
        profile=args.profile,
        global_config=config_source,
        config=_run_overrides(args) or None,
        run_name=args.run_name,
    )
    result = chill.run()
    print(json.dumps({"run_id": result.run_id, "metrics": result.metrics}, indent=2))
    network = result.artifacts.get("network")
    if network:
        print(f"Best network saved to: {network}")


def _list_networks(args: argparse.Namespace) -> None:
    names = ChillAI.list_networks(args.networks_dir)
    if not names:
        print("No networks saved yet.")
        return
    for name in names:
        print(name)


def _inspect_command(args: argparse.Namespace) -> None:
    summary = ChillAI.inspect_network(args.name, args.networks_dir)
    print(json.dumps(summary, indent=2))


def _doctor_command(args: argparse.Namespace) -> None:
    results = run_doctor(networks_dir=args.networks_dir)
    for item in results:
        status = (item.get("status") or "unknown").upper()
        check = item.get("check", "")
        details = item.get("details")
        print(f"[{status}] {check}")
        if details:
            print(f"  {details}")


def _describe_config_command(args: argparse.Namespace) -> None:
    if args.key:
        print(ChillAI.explain(args.key))
        return
    ChillAI.describe_config(section=args.section, as_markdown=args.markdown, to_console=True)


def _generate_config_docs_command(args: argparse.Namespace) -> None:
    path = ChillAI.generate_config_docs(Path(args.output))
    print(f"Configuration reference generated at {path.resolve()}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chillai", description="ChillAI neuroevolution CLI")
    subparsers = parser.add_subparsers(dest="command")

    profile_choices = sorted(list_profiles().keys())

    run_parser = subparsers.add_parser("run", help="Train a population headlessly.")
    run_parser.add_argument("--config", help="Optional configuration file (YAML/JSON).")
    run_parser.add_argument("--agent", help="Registered agent name (default: agent.name from the config).")
    run_parser.add_argument("--profile", choices=profile_choices, help="Apply a configuration profile before overrides.")
    run_parser.add_argument("--generations", type=int, help="Override training.generations.")
    run_parser.add_argument("--population", type=int, help="Override training.population_size.")
    run_parser.add_argument("--strategy", choices=["top_half", "top_two", "top"], help="Override training.selection_strategy.")
    run_parser.add_argument("--seed", type=int, help="Seed for reproducible runs.")
    run_parser.add_argument("--save-name", help="Save the best network to this slot when training finishes.")
    run_parser.add_argument("--load", action="store_true", help="Seed the population from --save-name when it exists.")
    run_parser.add_argument("--networks-dir", help="Directory holding saved networks.")
    run_parser.add_argument("--run-name", help="Optional custom name used for run directories (slugified).")
    run_parser.set_defaults(func=_run_command)

    list_parser = subparsers.add_parser("list-networks", help="List saved networks.")
    list_parser.add_argument("--networks-dir", default="networks", help="Directory holding saved networks.")
    list_parser.set_defaults(func=_list_networks)

    inspect_parser = subparsers.add_parser("inspect", help="Display the shape of a saved network.")
    inspect_parser.add_argument("name", help="Save slot name.")
    inspect_parser.add_argument("--networks-dir", default="networks", help="Directory holding saved networks.")
    inspect_parser.set_defaults(func=_inspect_command)

    doctor_parser = subparsers.add_parser("doctor", help="Run environment diagnostics.")
    doctor_parser.add_argument("--networks-dir", default="networks", help="Directory holding saved networks.")
    doctor_parser.set_defaults(func=_doctor_command)

    describe_parser = subparsers.add_parser("describe-config", help="Display ChillAI configuration schema.")
    describe_parser.add_argument("--section", help="Optional configuration section to filter.")
    describe_parser.add_argument("--markdown", action="store_true", help="Render the output as markdown.")
    describe_parser.add_argument("--key", help="Explain a single configuration key instead of listing the table.")
    describe_parser.set_defaults(func=_describe_config_command)

    config_doc_parser = subparsers.add_parser("generate-config-docs", help="Write CONFIG.md from the schema.")
    config_doc_parser.add_argument("--output", default="CONFIG.md", help="Destination markdown file (default: CONFIG.md).")
    config_doc_parser.set_defaults(func=_generate_config_docs_command)

    return parser


def main(argv: Optional[list] = None) -> None:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0].startswith("--"):
        argv = ["run", *argv]
    if not argv:
        parser.print_help()
        return
    parsed = parser.parse_args(argv)
    if not hasattr(parsed, "func"):
        parser.print_help()
        return
    try:
        parsed.func(parsed)
    except (ChillAIError, FileNotFoundError, KeyError, ValueError) as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
