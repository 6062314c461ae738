"""Command-line interface for resumebind."""

import argparse
import json
import sys
from pathlib import Path

import uvicorn

from .config import settings


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="resumebind - Placeholder binding engine for resume templates"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Extract command
    extract_parser = subparsers.add_parser(
        "extract", help="List the placeholders of template files"
    )
    extract_parser.add_argument("files", nargs="+", type=Path, help="Template files")
    extract_parser.add_argument(
        "--json", action="store_true", help="Print a JSON report with per-file counts"
    )

    # Suggest command
    suggest_parser = subparsers.add_parser(
        "suggest", help="Suggest data fields for the placeholders of template files"
    )
    suggest_parser.add_argument("files", nargs="+", type=Path, help="Template files")
    suggest_parser.add_argument(
        "--threshold",
        type=float,
        default=settings.match_threshold,
        help=f"Minimum confidence (default: {settings.match_threshold})",
    )
    suggest_parser.add_argument(
        "--schema", type=Path, help="JSON resume schema (default: built-in resume schema)"
    )
    suggest_parser.add_argument(
        "--candidates", action="store_true", help="Show ranked alternatives per placeholder"
    )

    args = parser.parse_args()

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "extract":
        run_extract(args.files, args.json)
    elif args.command == "suggest":
        run_suggest(args.files, args.threshold, args.schema, args.candidates)
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "resumebind.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
        log_level="debug" if settings.debug else "info",
    )


def _read_sources(files: list[Path]) -> dict[str, str]:
    sources = {}
    for path in files:
        try:
            sources[str(path)] = path.read_text(encoding="utf-8")
        except OSError as e:
            print(f"Cannot read {path}: {e}", file=sys.stderr)
            sys.exit(1)
    return sources


def run_extract(files: list[Path], as_json: bool):
    """Print the distinct placeholders of template files."""
    from .placeholders import PlaceholderExtractor

    report = PlaceholderExtractor().extract_from_sources(_read_sources(files))

    if as_json:
        print(json.dumps(report.model_dump(), indent=2))
        return

    for token in report.placeholders:
        print(token)


def run_suggest(files: list[Path], threshold: float, schema_path: Path, candidates: bool):
    """Print the suggested field for each placeholder of template files."""
    from .fields import RESUME_SCHEMA, fields_from_schema
    from .matching import BindingMatcher
    from .placeholders import PlaceholderExtractor

    schema = RESUME_SCHEMA
    if schema_path is not None:
        try:
            schema = json.loads(schema_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            print(f"Cannot load schema {schema_path}: {e}", file=sys.stderr)
            sys.exit(1)

    report = PlaceholderExtractor().extract_from_sources(_read_sources(files))
    matcher = BindingMatcher(fields_from_schema(schema), threshold=threshold)
    matched = {m.placeholder: m for m in matcher.process_placeholders(report.placeholders)}

    for token in report.placeholders:
        found = matched.get(token)
        if found is None:
            print(f"{token}\t(no suggestion)")
        else:
            print(f"{token}\t{found.field}\t{found.confidence:.0%}")

        if candidates:
            for candidate in matcher.rank(token, limit=settings.suggestion_limit):
                print(f"    {candidate.field}\t{candidate.confidence:.0%}\t{candidate.reasoning}")


if __name__ == "__main__":
    main()
