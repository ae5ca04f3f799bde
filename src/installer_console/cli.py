"""
CLI argument parsing: serve the console, or render a single page to stdout.
"""

import argparse
from pathlib import Path
from typing import Optional

from .serializers import Format


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="installer-console",
        description="Web console pages for the OSGi installer state and configurations.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: INFO, or INSTALLER_CONSOLE_LOG_LEVEL)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the console HTTP server")
    serve.add_argument("--host", type=str, default=None, help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: 8080)")
    serve.add_argument(
        "--state",
        dest="state_file",
        type=Path,
        metavar="FILE",
        default=None,
        help="Installation state snapshot (JSON) to report on",
    )
    serve.add_argument(
        "--configurations",
        dest="configurations_file",
        type=Path,
        metavar="FILE",
        default=None,
        help="JSON file mapping PIDs to configuration properties",
    )

    report = sub.add_parser("report", help="Render the resource state report to stdout")
    report.add_argument(
        "--state",
        dest="state_file",
        type=Path,
        metavar="FILE",
        default=None,
        help="Installation state snapshot (JSON)",
    )
    report.add_argument(
        "--format",
        choices=("html", "txt"),
        default="txt",
        help="Output format (default: txt)",
    )

    printer = sub.add_parser("print-config", help="Render the configuration printer page to stdout")
    printer.add_argument(
        "--configurations",
        dest="configurations_file",
        type=Path,
        metavar="FILE",
        default=None,
        help="JSON file mapping PIDs to configuration properties",
    )
    printer.add_argument("--pid", type=str, default=None, help="PID of the configuration to print")
    printer.add_argument(
        "--format",
        type=str,
        default=None,
        help=f"Serialization format: {', '.join(f.value for f in Format)} (default: JSON)",
    )

    return parser.parse_args(argv)
