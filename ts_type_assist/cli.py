"""Command-line interface for ts-type-assist."""

import argparse
import logging
import sys
from pathlib import Path

from ts_type_assist.assignment import add_type_to_variable, build_assignment
from ts_type_assist.models import ExpressionStatement, VariableDeclaration
from ts_type_assist.resolver.type_resolver import resolve_expression_type
from ts_type_assist.settings import MAX_ALIAS_DEPTH, DeclarationKeyword, TypeAssistSettings
from ts_type_assist.source_index import parse_source_file

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="ts-type-assist",
        description="Infer type annotations for curried TypeScript function chains",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log resolution details to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # resolve subcommand
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Print the resolved type of an expression as JSON",
    )
    resolve_parser.add_argument("file", help="TypeScript source file")
    resolve_parser.add_argument(
        "expression",
        help="Reference followed by calls, e.g. 'add(1)(2)'",
    )

    # assign subcommand
    assign_parser = subparsers.add_parser(
        "assign",
        help="Assign the expression statement at a line to a typed variable",
    )
    assign_parser.add_argument("file", help="TypeScript source file")
    assign_parser.add_argument("--line", "-l", type=int, required=True, help="1-based line number")

    # annotate subcommand
    annotate_parser = subparsers.add_parser(
        "annotate",
        help="Add the resolved type to the variable declared at a line",
    )
    annotate_parser.add_argument("file", help="TypeScript source file")
    annotate_parser.add_argument("--line", "-l", type=int, required=True, help="1-based line number")

    for subparser in (resolve_parser, assign_parser, annotate_parser):
        _add_settings_arguments(subparser)

    return parser


def _add_settings_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--declaration",
        choices=[k.value for k in DeclarationKeyword],
        default=DeclarationKeyword.CONST.value,
        help="Keyword for synthesized variables (default: const)",
    )
    parser.add_argument(
        "--no-semicolon",
        action="store_true",
        help="Do not end statements with a semicolon",
    )
    parser.add_argument(
        "--placeholder",
        default="val",
        help="Name of the synthesized variable (default: val)",
    )
    parser.add_argument(
        "--max-alias-depth",
        type=int,
        default=MAX_ALIAS_DEPTH,
        help=f"Aliases to follow before giving up (default: {MAX_ALIAS_DEPTH})",
    )


def settings_from_args(parsed: argparse.Namespace) -> TypeAssistSettings:
    return TypeAssistSettings(
        declaration_keyword=DeclarationKeyword(parsed.declaration),
        end_with_semicolon=not parsed.no_semicolon,
        placeholder_name=parsed.placeholder,
        max_alias_depth=parsed.max_alias_depth,
    )


def run_resolve(index, expression: str, settings: TypeAssistSettings) -> int:
    """Run the resolve command."""
    resolution = resolve_expression_type(expression, index, settings)
    if resolution is None:
        print(f"No type suggestion for: {expression}", file=sys.stderr)
        return 1
    print(resolution.to_json())
    return 0


def run_assign(index, line: int, settings: TypeAssistSettings) -> int:
    """Run the assign command."""
    statement = index.statement_at(line)
    if statement is None or not isinstance(statement.node, ExpressionStatement):
        print(f"No expression statement at line {line}", file=sys.stderr)
        return 1

    expression = statement.node.text
    resolution = resolve_expression_type(expression, index, settings)
    if resolution is None:
        print(f"No type suggestion for: {expression}", file=sys.stderr)
        return 1
    print(build_assignment(expression, resolution, settings))
    return 0


def run_annotate(index, line: int, settings: TypeAssistSettings) -> int:
    """Run the annotate command."""
    statement = index.statement_at(line)
    if statement is None or not isinstance(statement.node, VariableDeclaration):
        print(f"No variable declaration at line {line}", file=sys.stderr)
        return 1

    annotated = add_type_to_variable(statement.node, index, settings)
    if annotated is None:
        print(f"No type to add to {statement.node.name}", file=sys.stderr)
        return 1
    print(annotated)
    return 0


def run_cli(args: list[str]) -> int:
    """Run the CLI with the given arguments.

    Args:
        args: Command-line arguments (without program name)

    Returns:
        Exit code (0 when a suggestion was printed, non-zero otherwise)
    """
    try:
        parsed = create_parser().parse_args(args)
    except SystemExit as e:
        return e.code if e.code else 1

    setup_logging(parsed.verbose)

    if parsed.command is None:
        # No command - show help
        create_parser().print_help(sys.stderr)
        return 1

    try:
        index = parse_source_file(Path(parsed.file))
    except OSError as e:
        logger.error(f"Could not read {parsed.file}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    settings = settings_from_args(parsed)
    if parsed.command == "resolve":
        return run_resolve(index, parsed.expression, settings)
    elif parsed.command == "assign":
        return run_assign(index, parsed.line, settings)
    elif parsed.command == "annotate":
        return run_annotate(index, parsed.line, settings)

    return 1


def main():
    """Entry point for the CLI."""
    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
