"""Main CLI entry point for the xml-tree-codec command-line tool.

Provides parsing of XML files into JSON trees, composition of JSON trees back
into XML, and validation of XML files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from xml_tree_codec import __version__
from xml_tree_codec.api import parse_file
from xml_tree_codec.shared import (
    ComposerConfig,
    ConfigError,
    ParserConfig,
    SourceNotFoundError,
    alphabetical,
    get_logger,
)
from xml_tree_codec.tree import XMLComposer

PARSER_FLAGS = (
    "preserve_attributes",
    "preserve_document_node",
    "preserve_whitespace",
    "lower_case",
    "force_arrays",
)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-tree-codec",
        description="Convert XML documents to nested trees and back"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse XML files into JSON trees")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to parse"
    )
    for flag in PARSER_FLAGS:
        parse_parser.add_argument(
            "--" + flag.replace("_", "-"),
            action="store_true",
            help=f"Enable the {flag} parser option"
        )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Compose command
    compose_parser = subparsers.add_parser("compose", help="Compose a JSON tree into XML")
    compose_parser.add_argument(
        "json_file",
        type=Path,
        help="JSON file holding the tree"
    )
    compose_parser.add_argument(
        "--root",
        help="Document element name (default: the tree's first key)"
    )
    compose_parser.add_argument(
        "--indent",
        help="Indentation string (default: tab)"
    )
    compose_parser.add_argument(
        "--compact",
        action="store_true",
        help="Render without indentation or line breaks"
    )
    compose_parser.add_argument(
        "--sort-names",
        action="store_true",
        help="Sort child element names alphabetically"
    )
    compose_parser.add_argument(
        "--sort-attributes",
        action="store_true",
        help="Sort attribute names alphabetically"
    )
    compose_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate XML files")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to validate"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def process_file(path: Path, config: ParserConfig) -> Dict[str, Any]:
    """Parse one file into a JSON-ready report."""
    try:
        result = parse_file(path, config)
    except SourceNotFoundError as e:
        return {"file": str(path), "success": False, "error": str(e)}

    report: Dict[str, Any] = {
        "file": str(path),
        "success": result.success,
        "document_name": result.document_name,
        "processing_time_ms": result.performance.processing_time_ms,
    }
    if result.success:
        report["tree"] = result.tree
    else:
        report["error"] = result.error_message
        report["line"] = result.error.line if result.error else None
    return report


def write_output(text: str, output: Optional[Path]) -> int:
    """Write ``text`` to ``output`` or stdout."""
    if output is None:
        print(text)
        return 0
    try:
        output.write_text(text)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1
    print(f"Results written to {output}", file=sys.stderr)
    return 0


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    config = ParserConfig(**{flag: getattr(args, flag) for flag in PARSER_FLAGS})
    results = [process_file(path, config) for path in args.paths]

    status = write_output(json.dumps(results, indent=2), args.output)
    if status:
        return status
    return 0 if all(r["success"] for r in results) else 1


def build_composer_config(args: argparse.Namespace) -> ComposerConfig:
    """Translate compose options into a composer configuration."""
    config = ComposerConfig.compact() if args.compact else ComposerConfig()
    overrides: Dict[str, Any] = {}
    if args.indent is not None:
        overrides["indent_string"] = args.indent
    if args.sort_names:
        overrides["name_sorter"] = alphabetical
    if args.sort_attributes:
        overrides["attribute_sorter"] = alphabetical
    return config.override(**overrides) if overrides else config


def cmd_compose(args: argparse.Namespace) -> int:
    """Handle compose command."""
    logger = get_logger(__name__, None, "cli_compose")

    try:
        tree = json.loads(args.json_file.read_text())
    except FileNotFoundError:
        print(f"File not found: {args.json_file}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in {args.json_file}: {e}", file=sys.stderr)
        return 1

    if args.root is None and not isinstance(tree, dict):
        print("A root name is required when the tree is not an object", file=sys.stderr)
        return 1

    xml = XMLComposer(build_composer_config(args)).compose(tree, args.root)
    logger.debug("Composed tree", extra={"source": str(args.json_file), "length": len(xml)})
    return write_output(xml.rstrip("\n"), args.output)


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    results: List[Dict[str, Any]] = []

    for path in args.paths:
        report = process_file(path, ParserConfig())
        validation_result: Dict[str, Any] = {"file": str(path), "valid": report["success"]}
        if not report["success"]:
            validation_result["error"] = report["error"]
        results.append(validation_result)

    # Output results
    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        valid_count = sum(1 for r in results if r["valid"])
        print(f"Validated {len(results)} files, {valid_count} valid")
        print("-" * 50)

        for result in results:
            status = "✓" if result["valid"] else "✗"
            print(f"{status} {result['file']}")
            if not result["valid"]:
                print(f"   Error: {result['error']}")

    return 0 if all(r["valid"] for r in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    # Route to appropriate command handler
    try:
        if args.command == "parse":
            return cmd_parse(args)
        elif args.command == "compose":
            return cmd_compose(args)
        elif args.command == "validate":
            return cmd_validate(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
