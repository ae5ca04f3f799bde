"""HTTP endpoints for the two console plugins."""

import io
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse

from .config import Settings
from .providers import (
    ConfigurationAdmin,
    FileConfigurationAdmin,
    InfoProvider,
    SnapshotInfoProvider,
)
from .renderers import config_printer, installer_report, make_env

logger = logging.getLogger(__name__)

LABEL = "osgi-installer"
CONFIG_PRINTER_LABEL = "osgi-installer-config-printer"
RES_LOC = f"{LABEL}/res/ui/"
STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(
    info_provider: InfoProvider,
    configuration_admin: ConfigurationAdmin,
) -> FastAPI:
    app = FastAPI(title="OSGi Installer Console")
    env = make_env()

    @app.get(f"/{LABEL}", response_class=HTMLResponse)
    def installer_page() -> HTMLResponse:
        out = io.StringIO()
        installer_report.render_html(info_provider.get_installation_state(), env, out)
        return HTMLResponse(out.getvalue())

    @app.get(f"/{LABEL}/configprinter", response_class=PlainTextResponse)
    def installer_status(mode: str = Query("")) -> PlainTextResponse:
        out = io.StringIO()
        if mode in installer_report.PRINTER_MODES:
            installer_report.print_configuration(info_provider.get_installation_state(), out, mode)
        return PlainTextResponse(out.getvalue())

    @app.get(f"/{RES_LOC}list.css")
    def installer_css() -> FileResponse:
        return FileResponse(STATIC_DIR / "list.css", media_type="text/css")

    @app.get(f"/{CONFIG_PRINTER_LABEL}", response_class=HTMLResponse)
    def config_printer_page(
        pid: Optional[str] = None,
        format: Optional[str] = None,
    ) -> HTMLResponse:
        out = io.StringIO()
        config_printer.render(configuration_admin, env, out, pid=pid, format_name=format)
        return HTMLResponse(out.getvalue())

    return app


def app_from_settings(settings: Settings) -> FastAPI:
    logger.info("Serving state from %s, configurations from %s",
                settings.state_file, settings.configurations_file)
    return create_app(
        SnapshotInfoProvider(settings.state_file),
        FileConfigurationAdmin(settings.configurations_file),
    )
