"""
CLI entry point. Parses args and delegates to the web app or a renderer.
"""

import sys
from typing import Optional

from ._util import configure_logging
from .cli import parse_args
from .config import load_settings


def _serve(settings) -> None:
    import uvicorn

    from .web import app_from_settings

    uvicorn.run(app_from_settings(settings), host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())


def _report(settings, fmt: str) -> None:
    from .providers import SnapshotInfoProvider
    from .renderers import installer_report, make_env

    state = SnapshotInfoProvider(settings.state_file).get_installation_state()
    if fmt == "html":
        installer_report.render_html(state, make_env(), sys.stdout)
    else:
        installer_report.print_configuration(state, sys.stdout, "txt")


def _print_config(settings, pid: Optional[str], format_name: Optional[str]) -> None:
    from .providers import FileConfigurationAdmin
    from .renderers import config_printer, make_env

    config_printer.render(
        FileConfigurationAdmin(settings.configurations_file),
        make_env(),
        sys.stdout,
        pid=pid,
        format_name=format_name,
    )


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(
            log_level=args.log_level,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            state_file=getattr(args, "state_file", None),
            configurations_file=getattr(args, "configurations_file", None),
        )
        configure_logging(settings.log_level)

        if args.command == "serve":
            _serve(settings)
        elif args.command == "report":
            _report(settings, args.format)
        elif args.command == "print-config":
            _print_config(settings, args.pid, args.format)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
