#!/usr/bin/env python3
"""
Todo Digest - In-memory todo list with a daily weather & image email.

Command-line entry point:
  - Warm the store with current weather and a random image
  - Start the digest scheduler (sends once now, then daily at DIGEST_HOUR:DIGEST_MINUTE)
  - Serve the web UI

Usage:
    python main.py                      # Serve with scheduler
    python main.py --send-now           # Send one digest and exit
    python main.py --show-config        # Show configuration and exit
    python main.py --no-startup-digest  # Serve without the immediate digest

Examples:
    # Development run on another port, verbose logs
    python main.py --port 8080 -v

    # Check mail settings end to end
    python main.py --send-now
"""

import argparse
import logging
import sys

from src.config import (
    LOG_LEVEL,
    WEB_HOST,
    WEB_PORT,
    print_config_summary,
    validate_config,
)
from src.pipeline import DigestPipeline, PipelineResult
from src.scheduler import DigestScheduler
from src.store import StateStore

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="todo-digest",
        description="Serve the todo list and send a daily weather & todo digest.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                           Serve UI, send digest now and daily
  %(prog)s --send-now                Send one digest and exit
  %(prog)s --no-startup-digest       Serve without the immediate digest
  %(prog)s --port 8080 -v            Verbose logs, custom port
        """,
    )

    # Modes
    parser.add_argument(
        "--send-now",
        action="store_true",
        help="Run one digest cycle synchronously and exit",
    )

    parser.add_argument(
        "--no-startup-digest",
        action="store_true",
        help="Do not send a digest immediately at startup",
    )

    # Server options
    parser.add_argument(
        "--host",
        default=None,
        help=f"Address to bind the web server to (default: {WEB_HOST})",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        metavar="PORT",
        help=f"Port for the web server (default: {WEB_PORT})",
    )

    # Output options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logs",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show warnings and errors",
    )

    # Info options
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0",
    )

    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging for the process."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = getattr(logging, LOG_LEVEL, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Todo Digest Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def send_now(store: StateStore, quiet: bool = False) -> int:
    """Run one digest cycle. Exit code 0 if the email was sent."""
    result: PipelineResult = DigestPipeline(store).run()

    if not quiet:
        print(result.to_summary())

    return 0 if result.email_sent else 1


def serve(store: StateStore, args) -> int:
    """Warm the store, start the scheduler and run the web server."""
    from web.app import init_app

    logger = logging.getLogger("todo_digest")

    pipeline = DigestPipeline(store)

    # Initial environment so the first page render has weather/image
    pipeline.refresh_environment()

    scheduler = DigestScheduler(pipeline.run)
    scheduler.start(run_immediately=not args.no_startup_digest)

    app = init_app(store, scheduler)
    host = args.host or WEB_HOST
    port = args.port or WEB_PORT

    logger.info(f"Serving on http://{host}:{port}")
    try:
        app.run(host=host, port=port, threaded=True, use_reloader=False)
    finally:
        scheduler.stop()

    return 0


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.show_config:
        show_config()
        return 0

    configure_logging(verbose=args.verbose, quiet=args.quiet)

    for error in validate_config():
        logging.getLogger("todo_digest").warning(f"Config: {error}")

    store = StateStore()

    try:
        if args.send_now:
            return send_now(store, quiet=args.quiet)
        return serve(store, args)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
