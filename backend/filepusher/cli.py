#!/usr/bin/env python3
"""
File Pusher CLI - Thin entrypoint for operator commands.

Commands:
- run:     Scan watched folders forever and serve the monitoring API
- scan:    Run one scan tick and wait for the archives it started
- archive: Archive a single path now

Design Principles:
==================
- CLI is a dispatcher only
- Surface errors verbatim from the layer that raised them
- Exit non-zero on failure

Exit Codes:
===========
- 0: Success
- 1: Configuration error
- 2: Archive error
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from .archive.engine import ArchiveEngine
from .archive.errors import ArchiveError
from .archive.models import ArchiveJobState
from .config.errors import ConfigError
from .config.settings import DEFAULT_EXCLUDE_EXTENSIONS, load_settings, parse_extensions
from .main import build_runtime, create_app

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_ARCHIVE_ERROR = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def _load_runtime(config_path: str):
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)
    return build_runtime(settings)


def cmd_run(args: argparse.Namespace) -> NoReturn:
    """
    Scan forever and serve the monitoring API until interrupted.

    Exit codes:
        0: Shutdown via signal (normal)
        1: Configuration error
    """
    import uvicorn

    runtime = _load_runtime(args.config)
    app = create_app(runtime)

    runtime.scheduler.start()
    try:
        uvicorn.run(app, host=runtime.settings.monitor_host, port=runtime.settings.monitor_port)
    except KeyboardInterrupt:
        print("\nFile pusher stopped by user.", file=sys.stderr)
    finally:
        runtime.shutdown(wait=True)
    sys.exit(EXIT_OK)


def cmd_scan(args: argparse.Namespace) -> NoReturn:
    """
    Run a single scan tick over every watched folder.

    Exit codes:
        0: Scan finished and every archive started by it succeeded
        1: Configuration error
        2: An archive job failed
    """
    runtime = _load_runtime(args.config)
    try:
        results = runtime.engine.scan_all_folders()
        runtime.archive_engine.wait_idle()
    finally:
        runtime.shutdown(wait=True)

    for result in results:
        print(
            f"{result.watched_folder}: {len(result.created)} new, "
            f"{len(result.ready)} ready, {len(result.submitted)} archiving, "
            f"{len(result.errors)} error(s)"
        )

    failed = [
        job for job in runtime.archive_engine.recent_jobs()
        if job.state == ArchiveJobState.FAILED
    ]
    for job in failed:
        print(f"✗ Archive failed: {job.source_path}: {job.error}", file=sys.stderr)
    sys.exit(EXIT_ARCHIVE_ERROR if failed else EXIT_OK)


def cmd_archive(args: argparse.Namespace) -> NoReturn:
    """
    Archive one path synchronously.

    Exit codes:
        0: Archive written (or already present)
        2: Archive failed or source missing
    """
    try:
        excluded = parse_extensions(args.exclude)
    except ValueError as e:
        print(f"WARNING: {e}, using defaults: {DEFAULT_EXCLUDE_EXTENSIONS}", file=sys.stderr)
        excluded = parse_extensions(DEFAULT_EXCLUDE_EXTENSIONS)

    engine = ArchiveEngine(excluded_extensions=excluded, compress=not args.no_compress, max_workers=1)
    try:
        job = engine.archive_now(Path(args.path))
    except ArchiveError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(EXIT_ARCHIVE_ERROR)
    finally:
        engine.shutdown()

    if job is None:
        print(f"Archive already exists: {args.path}")
        sys.exit(EXIT_OK)

    if job.state == ArchiveJobState.DONE:
        print(f"✓ {job.target_archive_path} ({job.entry_count} member(s))")
        sys.exit(EXIT_OK)

    print(f"✗ Archive failed: {job.error}", file=sys.stderr)
    sys.exit(EXIT_ARCHIVE_ERROR)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='filepusher',
        description='File Pusher - watched folder stabilization and archiving',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', required=True, help='Command to execute')

    # Run command
    parser_run = subparsers.add_parser(
        'run',
        help='Scan watched folders periodically and serve the monitoring API'
    )
    parser_run.add_argument(
        'config',
        help='Path to JSON configuration file'
    )
    parser_run.set_defaults(func=cmd_run)

    # Scan command
    parser_scan = subparsers.add_parser(
        'scan',
        help='Run one scan tick and wait for started archives'
    )
    parser_scan.add_argument(
        'config',
        help='Path to JSON configuration file'
    )
    parser_scan.set_defaults(func=cmd_scan)

    # Archive command
    parser_archive = subparsers.add_parser(
        'archive',
        help='Archive a single file or directory now'
    )
    parser_archive.add_argument(
        'path',
        help='File or directory to archive'
    )
    parser_archive.add_argument(
        '--no-compress',
        action='store_true',
        help='Write a plain tar instead of tar + bzip2'
    )
    parser_archive.add_argument(
        '--exclude',
        default=DEFAULT_EXCLUDE_EXTENSIONS,
        help=f'Comma-separated extensions to skip (default: {DEFAULT_EXCLUDE_EXTENSIONS})'
    )
    parser_archive.set_defaults(func=cmd_archive)

    return parser


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """
    Main CLI entrypoint.

    Parses arguments and dispatches to subcommands.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    args.func(args)


if __name__ == '__main__':
    main()
