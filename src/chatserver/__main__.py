"""
=============================================================================
CHAT SERVER CLI ENTRY POINT
=============================================================================

    # Run with defaults (0.0.0.0:2000, 50 clients)
    python -m chatserver

    # Custom port
    python -m chatserver 3000

    # Localhost only, small room, verbose
    python -m chatserver 3000 --host 127.0.0.1 --max-clients 5 -l DEBUG

    # Also keep a log file
    python -m chatserver --log-file chat.log

Environment variables (CHAT_PORT etc., see ServerConfig.from_env) provide
the defaults; command-line arguments override them.

Exit status is 1 if the server can't start (bad configuration, port in
use) or the readiness wait fails, 0 after Ctrl+C.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig, LOG_LEVELS
from .core import ChatServerError
from .server import ChatServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatserver",
        description="Multi-user text chat server over raw TCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m chatserver                      # Run with defaults
  python -m chatserver 3000                 # Custom port
  python -m chatserver --max-clients 10     # Smaller room
  telnet localhost 2000                     # Connect
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "port",
        nargs="?",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--max-clients", "-m",
        type=int,
        default=defaults.max_clients,
        help=f"Maximum simultaneous connections (default: {defaults.max_clients})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--log-file",
        default=defaults.log_file,
        help="Also write logs to this file"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"chatserver {__version__}"
    )

    return parser


def main(argv=None):
    """
    Parse arguments, build the server, run it until Ctrl+C.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: bad environment configuration: {e}", file=sys.stderr)
        sys.exit(1)

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        max_clients=args.max_clients,
        buffer_size=defaults.buffer_size,
        log_level=args.log_level,
        log_file=args.log_file,
        server_name=defaults.server_name,
    )

    try:
        server = ChatServer(config)
        server.run()
    except (ChatServerError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
