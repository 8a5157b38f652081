"""
protolink CLI - Run and inspect the object-model scenarios.

Commands:
    protolink scenarios             - List available scenarios
    protolink run <name>            - Run a scenario and print its narration
    protolink inspect <name>        - Show the resulting Node's slots and chain
    protolink hash <from> <to>      - Hash a sender/recipient pair

Nothing is persisted between invocations.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .scenarios import SCENARIOS, ScenarioResult, describe_value, run_scenario
from ..domain import Node, ObjectModelError, WritePolicy
from ..hashing import fold_hash32, format_number
from ..resolution.chain_resolver import prototype_chain

logger = logging.getLogger(__name__)


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_flags(node: Node, key: str) -> str:
    """Format a slot's flags as a compact badge, e.g. [wec] or [-e-]."""
    slot = node.slots[key]
    return "[{}{}{}]".format(
        "w" if slot.writable else "-",
        "e" if slot.enumerable else "-",
        "c" if slot.configurable else "-",
    )


def format_node(node: Node) -> str:
    """Format own slots and the delegate chain of a Node."""
    lines = [f"Node: {node!r}", "=" * 50, "", "OWN SLOTS:"]

    if not node.slots:
        lines.append("  (none)")
    for key, slot in node.slots.items():
        lines.append(f"  {format_flags(node, key)} {key}: {describe_value(slot.value)}")

    lines.append("")
    lines.append("DELEGATE CHAIN:")
    chain = prototype_chain(node)
    if not chain:
        lines.append("  (end of chain)")
    for depth, ancestor in enumerate(chain, start=1):
        lines.append(f"  {depth}. {ancestor!r}")

    return "\n".join(lines)


def _unknown_scenario(name: str) -> int:
    print(f"Scenario not found: {name}")
    print()
    print("Available scenarios:")
    for known in SCENARIOS:
        print(f"  {known}")
    return 1


def _run(args: argparse.Namespace) -> Optional[ScenarioResult]:
    policy = WritePolicy.STRICT if args.strict else WritePolicy.SILENT
    return run_scenario(args.name, policy)


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_scenarios(args: argparse.Namespace) -> int:
    """List available scenarios."""
    print("protolink - Scenarios")
    print("=" * 50)
    for name, (description, _) in SCENARIOS.items():
        print(f"  {name:<14} {description}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Run a scenario and print its narration."""
    try:
        result = _run(args)
    except ObjectModelError as e:
        print("ERROR: Scenario failed")
        print(f"Reason: {e}")
        return 1

    if result is None:
        return _unknown_scenario(args.name)

    print(f"Scenario: {result.name}")
    print("=" * 50)
    for line in result.lines:
        print(f"  {line}")
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    """Show the Node a scenario builds."""
    try:
        result = _run(args)
    except ObjectModelError as e:
        print("ERROR: Scenario failed")
        print(f"Reason: {e}")
        return 1

    if result is None:
        return _unknown_scenario(args.name)

    print(format_node(result.subject))
    return 0


def cmd_hash(args: argparse.Namespace) -> int:
    """Hash a sender/recipient pair."""
    folded = fold_hash32(args.sender + args.recipient)
    print(f"fold:   {folded}")
    print(f"hash:   {format_number(float(folded * folded))}")
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="protolink",
        description="protolink - Explicit prototype chains, descriptors and mixins",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Scenarios command
    scenarios_parser = subparsers.add_parser(
        "scenarios",
        help="List available scenarios",
    )
    scenarios_parser.set_defaults(func=cmd_scenarios)

    # Run and inspect commands
    for command, handler, help_text in (
        ("run", cmd_run, "Run a scenario"),
        ("inspect", cmd_inspect, "Show the Node a scenario builds"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("name", help="Scenario name")
        sub.add_argument(
            "--strict",
            action="store_true",
            help="Raise on writes to read-only properties instead of ignoring them",
        )
        sub.set_defaults(func=handler)

    # Hash command
    hash_parser = subparsers.add_parser(
        "hash",
        help="Hash a sender/recipient pair",
    )
    hash_parser.add_argument("sender", help="Sender address")
    hash_parser.add_argument("recipient", help="Recipient address")
    hash_parser.set_defaults(func=cmd_hash)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    logger.debug("Running command %s", args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
