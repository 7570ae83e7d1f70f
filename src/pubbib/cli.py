"""Command-line interface for pubbib."""

import argparse
import logging
import sys
from pathlib import Path

from .authors import format_authors
from .config import WorkspaceConfig
from .exceptions import PubbibError
from .parser import parse_file
from .render import render_page
from .serialize import entries_to_bibtex, entries_to_json, load_entries_json


def setup_logging(verbosity: int = 0) -> None:
    """Configure logging for the CLI application.

    Args:
        verbosity: Logging verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
    """
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s:%(lineno)d – %(message)s",
    )


def _resolve_paths(
    args: argparse.Namespace, config: WorkspaceConfig, default_output: Path
) -> tuple[Path, Path]:
    input_path = Path(args.input) if args.input else config.bib_path
    output_path = Path(args.output) if args.output else default_output
    return input_path, output_path


def _write_output(output_path: Path, content: str | bytes) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        output_path.write_bytes(content)
    else:
        output_path.write_text(content, encoding="utf-8")


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse a .bib file and write the entries as JSON."""
    config = WorkspaceConfig.from_workspace(Path(args.workspace))
    input_path, output_path = _resolve_paths(args, config, config.json_path)
    logger = logging.getLogger(__name__)

    try:
        entries = parse_file(input_path)
        _write_output(output_path, entries_to_json(entries))

        logger.info(f"✓ Parsed {len(entries)} entries")
        logger.info(f"✓ Saved to: {output_path}")
        sys.exit(0)

    except (FileNotFoundError, ValueError, PubbibError) as e:
        logger.error(f"Parse error: {e}")
        sys.exit(1)


def cmd_render(args: argparse.Namespace) -> None:
    """Render entries as an HTML page grouped by year."""
    config = WorkspaceConfig.from_workspace(Path(args.workspace))
    input_path, output_path = _resolve_paths(args, config, config.html_path)
    title = args.title or config.page_title
    logger = logging.getLogger(__name__)

    try:
        if args.from_json:
            json_path = Path(args.input) if args.input else config.json_path
            entries = load_entries_json(json_path)
        else:
            entries = parse_file(input_path)

        _write_output(output_path, render_page(entries, title=title))

        logger.info(f"✓ Rendered {len(entries)} entries")
        logger.info(f"✓ Saved to: {output_path}")
        sys.exit(0)

    except (FileNotFoundError, ValueError, PubbibError) as e:
        logger.error(f"Render error: {e}")
        sys.exit(1)


def cmd_export(args: argparse.Namespace) -> None:
    """Rewrite a .bib file in normalized form."""
    config = WorkspaceConfig.from_workspace(Path(args.workspace))
    input_path, output_path = _resolve_paths(args, config, config.export_path)
    logger = logging.getLogger(__name__)

    try:
        entries = parse_file(input_path)
        _write_output(output_path, entries_to_bibtex(entries))

        logger.info(f"✓ Exported {len(entries)} entries")
        logger.info(f"✓ Saved to: {output_path}")
        sys.exit(0)

    except (FileNotFoundError, ValueError, PubbibError) as e:
        logger.error(f"Export error: {e}")
        sys.exit(1)


def cmd_authors(args: argparse.Namespace) -> None:
    """Print a shortened author list."""
    print(format_authors(args.authors))
    sys.exit(0)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pubbib",
        description="Turn a BibTeX file into a publication list: parse, render, export.",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (use -v for INFO, -vv for DEBUG)",
    )

    parser.add_argument(
        "--workspace",
        type=str,
        default=".",
        help="Path to the workspace directory (default: current directory)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse subcommand
    parse_parser = subparsers.add_parser("parse", help="Parse a .bib file into JSON entries")
    parse_parser.add_argument(
        "-i", "--input", type=str, help="Input .bib file (default: publications.bib)"
    )
    parse_parser.add_argument(
        "-o", "--output", type=str, help="Output file path (default: build/publications.json)"
    )
    parse_parser.set_defaults(func=cmd_parse)

    # render subcommand
    render_parser = subparsers.add_parser("render", help="Render entries as HTML grouped by year")
    render_parser.add_argument(
        "-i",
        "--input",
        type=str,
        help="Input .bib file, or JSON dump with --from-json (default: publications.bib)",
    )
    render_parser.add_argument(
        "-o", "--output", type=str, help="Output file path (default: build/publications.html)"
    )
    render_parser.add_argument("--title", type=str, help="Page title (default: Publications)")
    render_parser.add_argument(
        "--from-json",
        action="store_true",
        help="Read entries from a JSON dump written by 'parse' instead of a .bib file",
    )
    render_parser.set_defaults(func=cmd_render)

    # export subcommand
    export_parser = subparsers.add_parser("export", help="Write entries back as normalized BibTeX")
    export_parser.add_argument(
        "-i", "--input", type=str, help="Input .bib file (default: publications.bib)"
    )
    export_parser.add_argument(
        "-o", "--output", type=str, help="Output file path (default: build/publications.bib)"
    )
    export_parser.set_defaults(func=cmd_export)

    # authors subcommand
    authors_parser = subparsers.add_parser("authors", help="Shorten an author list for display")
    authors_parser.add_argument("authors", help="Author field value, names joined by ' and '")
    authors_parser.set_defaults(func=cmd_authors)

    return parser


def main() -> None:
    """Main entry point for the pubbib CLI."""
    parser = create_parser()
    args = parser.parse_args()

    # Setup logging based on verbosity
    setup_logging(args.verbose)

    # Handle case where no subcommand is provided
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    # Execute the subcommand
    args.func(args)


if __name__ == "__main__":
    main()
