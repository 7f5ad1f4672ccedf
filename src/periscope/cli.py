# src/periscope/cli.py
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from periscope.config import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_PROBE_NEEDLE,
    ScanSettings,
    load_settings,
    parse_extensions,
    parse_names,
    parse_size,
)
from periscope.core.scanner import ScanError, take_snapshot
from periscope.core.tree import render_tree
from periscope.models import FileRecord
from periscope.probe import DEFAULT_URL, ProbeError, format_report, probe
from periscope.server import run
from periscope.utils.tokenizer import Tokenizer


def _add_scan_options(parser: argparse.ArgumentParser):
    parser.add_argument("root_dir", type=str, nargs="?", default=None, help="Directory to snapshot (default: cwd)")
    parser.add_argument("-e", "--extensions", type=str, default=None, help="Comma-separated allow-listed extensions")
    parser.add_argument("--exclude", type=str, default=None, help="Comma-separated directory names to skip")
    parser.add_argument("--max-size", type=str, default=None, help="Files must be smaller than this many bytes")
    parser.add_argument(
        "--exclude-pattern", action="append", default=None, metavar="PATTERN",
        help="Extra gitignore-style directory pattern to skip (repeatable)",
    )


def create_arg_parser():
    parser = argparse.ArgumentParser(
        description="Serve a JSON snapshot of a source tree for an in-browser workspace viewer."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP snapshot service")
    _add_scan_options(serve)
    serve.add_argument("--host", type=str, default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)

    scan = sub.add_parser("scan", help="Take one snapshot and print it")
    _add_scan_options(scan)
    scan.add_argument("--json", action="store_true", help="Print the raw {\"files\": [...]} document")
    scan.add_argument("--tree", action="store_true", help="Also print the snapshot tree")

    check = sub.add_parser("probe", help="GET a running service once and look for a filename")
    check.add_argument("--url", type=str, default=DEFAULT_URL)
    check.add_argument("--needle", type=str, default=DEFAULT_PROBE_NEEDLE)
    check.add_argument("--timeout", type=float, default=10.0)
    return parser


def resolve_settings(args: argparse.Namespace) -> ScanSettings:
    """Environment first, then command-line flags on top."""
    settings = load_settings()
    if args.root_dir:
        settings.root = Path(args.root_dir)
    if args.extensions:
        settings.extensions = parse_extensions(args.extensions)
    if args.exclude:
        settings.excluded_dirs = parse_names(args.exclude)
    if args.max_size:
        settings.max_file_size = parse_size(args.max_size)
    if args.exclude_pattern:
        settings.exclude_patterns = list(args.exclude_pattern)
    settings.root = settings.root.resolve()
    return settings


def print_summary(records: List[FileRecord], settings: ScanSettings, show_tree: bool):
    print(f"--- periscope ---")
    print(f"Root:       {settings.root}")
    print(f"Extensions: {', '.join(sorted(settings.extensions))}")

    if not records:
        print("No matching files found.")
        return

    sized = sorted(((Tokenizer.count(r.content), r.path) for r in records), reverse=True)
    total_tokens = sum(t for t, _ in sized)

    print("\n--- Top 10 Largest Files (Est. Tokens) ---")
    print(f"{'Rank':<5} | {'Tokens':<10} | {'File Path'}")
    print("-" * 60)
    for i, (tokens, path) in enumerate(sized[:10]):
        print(f"{i+1:<5} | {tokens:<10} | {path}")
    print("-" * 60)
    print(f"Total files: {len(records)}")
    print(f"Total tokens: {total_tokens}")

    if show_tree:
        print()
        print(render_tree([r.path for r in records], settings.root.name or "root"), end="")


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "probe":
            try:
                result = probe(args.url, args.needle, args.timeout)
            except ProbeError as e:
                print(str(e), file=sys.stderr)
                return 1
            print(format_report(result))
            return 0 if result.found else 1

        settings = resolve_settings(args)

        if args.command == "serve":
            run(settings, host=args.host, port=args.port)
            return 0

        records = take_snapshot(settings)
        if args.json:
            print(json.dumps({"files": [r.to_dict() for r in records]}))
        else:
            print_summary(records, settings, args.tree)
        return 0

    except ScanError as e:
        print(f"Error: scan failed: {e}", file=sys.stderr)
        return 1

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nCancelled.")
        return 1


def run_cli():
    sys.exit(main())


if __name__ == "__main__":
    run_cli()
