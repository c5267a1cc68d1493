"""Main CLI entry point for the mini-xml-tree command-line tool.

Provides parsing to JSON, canonical re-formatting and well-formedness checks
for XML files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from mini_xml_tree import __version__
from mini_xml_tree.api import XMLTreeParser, serialize
from mini_xml_tree.shared import ConfigError, ParserConfig, XMLTreeError
from mini_xml_tree.shared.logging import get_logger

XML_SUFFIXES = (".xml",)


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.parser_config = ParserConfig.strict()
        self.output_format = "json"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Recognised keys: ``parser_preset`` (``strict`` or ``lenient``),
        ``output_format`` and ``parser`` (a ``ParserConfig`` dictionary applied
        on top of the preset).

        Raises:
            ConfigError: If the file cannot be read or is not valid JSON
        """
        config = cls()
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

        preset = data.get("parser_preset")
        if preset == "lenient":
            config.parser_config = ParserConfig.lenient()
        elif preset not in (None, "strict"):
            raise ConfigError(f"Unknown parser preset: {preset}")

        if "parser" in data:
            if not isinstance(data["parser"], dict):
                raise ConfigError("The 'parser' section must be a JSON object")
            config.parser_config = config.parser_config.override(**data["parser"])
        config.output_format = data.get("output_format", config.output_format)
        return config


class XMLProcessor:
    """Core XML processing logic for CLI operations."""

    def __init__(self, config: CLIConfig) -> None:
        self.config = config
        self.parser = XMLTreeParser(config=config.parser_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def find_xml_files(self, path: Path) -> Iterator[Path]:
        """Yield ``path`` itself or the XML files below a directory."""
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if candidate.is_file() and candidate.suffix.lower() in XML_SUFFIXES:
                    yield candidate
        else:
            yield path

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse a single XML file and describe the outcome."""
        try:
            root = self.parser.parse(file_path)
        except (XMLTreeError, OSError) as e:
            self.logger.warning(
                "Failed to process file",
                extra={"file": str(file_path), "error_type": type(e).__name__}
            )
            return {
                "file": str(file_path),
                "success": False,
                "error_type": type(e).__name__,
                "error": str(e),
            }

        return {
            "file": str(file_path),
            "success": True,
            "root": root.name,
            "tree": root.to_dict(),
            "xml": serialize(root),
        }

    def batch_process(self, paths: List[Path]) -> List[Dict[str, Any]]:
        """Process every file reachable from ``paths``."""
        return [
            self.process_single_file(file_path)
            for path in paths
            for file_path in self.find_xml_files(path)
        ]


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="mini-xml-tree",
        description="Parse, re-format and check XML fragments"
    )

    parser.add_argument("--version", action="version", version=__version__)
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
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Close elements left open at end of input instead of failing"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse XML files and print their trees")
    parse_parser.add_argument("paths", nargs="+", type=Path, help="XML files or directories")
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default=None,
        help="Output format (default: json)"
    )

    format_parser = subparsers.add_parser("format", help="Re-serialize XML files")
    format_parser.add_argument("paths", nargs="+", type=Path, help="XML files or directories")
    format_parser.add_argument(
        "--output-dir", "-d",
        type=Path,
        help="Write formatted files here instead of printing them"
    )

    check_parser = subparsers.add_parser("check", help="Check that XML files parse")
    check_parser.add_argument("paths", nargs="+", type=Path, help="XML files or directories")

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format processing results for output."""
    if format_type == "json":
        return json.dumps(
            [{key: value for key, value in r.items() if key != "xml"} for r in results],
            indent=2,
        )

    lines = []
    for result in results:
        if result["success"]:
            lines.append(f"{result['file']}: ok <{result['root']}>")
        else:
            lines.append(f"{result['file']}: {result['error_type']}: {result['error']}")
    return "\n".join(lines)


def _exit_code(results: List[Dict[str, Any]]) -> int:
    if not results:
        return 1
    return 0 if all(r["success"] for r in results) else 1


def cmd_parse(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle parse command."""
    output_format = args.format or config.output_format
    results = XMLProcessor(config).batch_process(args.paths)
    print(format_results(results, output_format))
    return _exit_code(results)


def cmd_format(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle format command."""
    results = XMLProcessor(config).batch_process(args.paths)
    for result in results:
        if not result["success"]:
            print(f"{result['file']}: {result['error_type']}: {result['error']}", file=sys.stderr)
            continue
        if args.output_dir:
            args.output_dir.mkdir(parents=True, exist_ok=True)
            target = args.output_dir / Path(result["file"]).name
            target.write_text(result["xml"], encoding="utf-8")
        else:
            print(result["xml"])
    return _exit_code(results)


def cmd_check(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle check command."""
    results = XMLProcessor(config).batch_process(args.paths)
    print(format_results(results, "text"))
    return _exit_code(results)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.CRITICAL)
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.lenient:
        config.parser_config = config.parser_config.override(strict_end_of_input=False)

    handlers = {
        "parse": cmd_parse,
        "format": cmd_format,
        "check": cmd_check,
    }
    try:
        return handlers[args.command](args, config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
