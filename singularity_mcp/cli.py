"""
singularity-mcp command line: start the MCP server for the Singularity API.
"""

import argparse
import logging
import sys

from singularity_mcp import config
from singularity_mcp.exceptions import AdapterError, ConfigError
from singularity_mcp.server import SingularityMcpServer

HELP_TEXT = """\
Usage: singularity-mcp [options]

Options:
  --baseUrl, -u <url>       Singularity API base URL
                            (default: SINGULARITY_BASE_URL or https://api.singularity-app.com)
  --accessToken, -t <tok>   Bearer token (default: SINGULARITY_ACCESS_TOKEN)
  --verbose, -v             Enable request and lifecycle logging (stderr)
  --noLog, -n               Disable logging even if SINGULARITY_LOG is set
  --logLevel, -l <level>    debug, info, warn, error (default: info)
  --transport <name>        stdio, sse, streamable-http (default: stdio)
  --host <host>             Bind host for sse/streamable-http (default: 127.0.0.1)
  --port <port>             Bind port for sse/streamable-http (default: 8808)
  --version                 Show version number
  --help, -h                Show this help

Logs always go to stderr; stdout carries the stdio protocol.
"""


class _ArgumentParser(argparse.ArgumentParser):
    """Parser that raises ConfigError instead of printing usage and exiting."""

    def error(self, message):
        raise ConfigError(f"[ERROR] {message}")


def _port(value):
    try:
        port = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer between 1 and 65535") from exc
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError("must be an integer between 1 and 65535")
    return port


def build_parser():
    parser = _ArgumentParser(
        prog="singularity-mcp",
        add_help=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    parser.add_argument("--version", action="store_true")
    parser.add_argument("--baseUrl", "-u", dest="base_url")
    parser.add_argument("--accessToken", "-t", dest="access_token")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--noLog", "-n", action="store_true", dest="no_log")
    parser.add_argument("--logLevel", "-l", dest="log_level", choices=config.LOG_LEVELS)
    parser.add_argument("--transport", choices=config.TRANSPORTS, default="stdio")
    parser.add_argument("--host")
    parser.add_argument("--port", type=_port)
    return parser


def _resolve_logging(ns):
    if ns.verbose and ns.no_log:
        raise ConfigError("[ERROR] --verbose and --noLog are mutually exclusive.")
    if ns.no_log:
        return False
    if ns.verbose:
        return True
    return config.LOG_ENABLED


def configure_logging(enabled):
    """Send singularity_mcp log records to stderr."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if enabled else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    try:
        ns = build_parser().parse_args(argv)
        if ns.show_help:
            print(HELP_TEXT)
            sys.exit(0)
        if ns.version:
            print(f"singularity-mcp {config.VERSION}")
            sys.exit(0)

        enabled = _resolve_logging(ns)
        configure_logging(enabled)
        server = SingularityMcpServer(
            base_url=ns.base_url,
            access_token=ns.access_token,
            enable_logging=enabled,
            log_level=ns.log_level,
            host=ns.host,
            port=ns.port,
        )
        server.run(ns.transport)
    except AdapterError as e:
        print(str(e), file=sys.stderr)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
