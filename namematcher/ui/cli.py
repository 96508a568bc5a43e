"""Command-line interface for the name matcher."""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from ..core.errors import NameMatcherError
from ..core.models import MatchQuery
from ..matching.engine import NameMatchingEngine
from ..utils.config import NameMatcherConfig, load_config
from ..utils.tls import resolve_ssl_options

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Set up root logging for command-line use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


async def _run_with_engine(config: NameMatcherConfig, action):
    """Start an engine, run action(engine), and close it."""
    engine = NameMatchingEngine.from_config(config)
    try:
        await asyncio.wait_for(engine.start(), config.ready_timeout)
        return await action(engine)
    finally:
        await engine.close()


def serve_command(args: argparse.Namespace, config: NameMatcherConfig) -> int:
    """Execute the serve command.

    Args:
        args: Parsed command-line arguments
        config: Loaded configuration

    Returns:
        Exit code (0 for success, 1 for error)
    """
    import uvicorn
    from ..web.api.main import create_app

    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port

    ssl_options = resolve_ssl_options(config.ssl)
    app = create_app(config)
    logger.info(f"Server starting at {config.host}:{config.port} ({config.environment.value})")
    uvicorn.run(app, host=config.host, port=config.port, **ssl_options)
    return 0


def add_command(args: argparse.Namespace, config: NameMatcherConfig) -> int:
    """Execute the add command."""
    async def action(engine: NameMatchingEngine):
        return await engine.add_name(args.first, args.last)

    asyncio.run(_run_with_engine(config, action))
    print(f"Added: {args.first} {args.last}")
    return 0


def match_command(args: argparse.Namespace, config: NameMatcherConfig) -> int:
    """Execute the match command."""
    async def action(engine: NameMatchingEngine):
        return engine.match_name(MatchQuery(first=args.first, last=args.last))

    result = asyncio.run(_run_with_engine(config, action))

    print(f"\nMatches for {args.first} {args.last}:")
    print("-" * 60)
    print(f"First names: {', '.join(result.first) if result.first else '(none)'}")
    print(f"Last names:  {', '.join(result.last) if result.last else '(none)'}")
    print("-" * 60)
    return 0


def stats_command(args: argparse.Namespace, config: NameMatcherConfig) -> int:
    """Execute the stats command."""
    async def action(engine: NameMatchingEngine):
        return engine.index.stats()

    stats = asyncio.run(_run_with_engine(config, action))

    print("\n" + "=" * 60)
    print("NAME STORE STATISTICS")
    print("=" * 60)
    for namespace, count in stats.items():
        print(f"{namespace + ':':<24}{count:,}")
    print("=" * 60 + "\n")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='namematcher',
        description='Fuzzy matching of personal names against a known-name corpus.',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--version',
        action='version',
        version='%(prog)s 0.1.0'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '-c', '--config',
        help='Path to a JSON configuration file'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands'
    )

    serve_parser = subparsers.add_parser(
        'serve',
        help='Run the HTTP server'
    )
    serve_parser.add_argument('--host', help='Interface to bind (overrides config)')
    serve_parser.add_argument('--port', type=int, help='Port to listen on (overrides config)')

    add_parser = subparsers.add_parser(
        'add',
        help='Add a name to the known-name store'
    )
    add_parser.add_argument('first', help='First name')
    add_parser.add_argument('last', help='Last name')

    match_parser = subparsers.add_parser(
        'match',
        help='Match a name against the known-name store'
    )
    match_parser.add_argument('first', help='First name')
    match_parser.add_argument('last', help='Last name')

    subparsers.add_parser(
        'stats',
        help='Show the number of stored names per bucket'
    )

    return parser


COMMANDS = {
    'serve': serve_command,
    'add': add_command,
    'match': match_command,
    'stats': stats_command,
}


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # If no command specified, print help
    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
        return COMMANDS[args.command](args, config)
    except (NameMatcherError, OSError, ValueError, asyncio.TimeoutError) as e:
        print(f"Error: {str(e) or type(e).__name__}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
