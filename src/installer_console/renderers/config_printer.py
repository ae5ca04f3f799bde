"""Configuration printer: a PID/format form plus the serialized configuration for that PID."""

import io
from typing import Optional, TextIO

from jinja2 import Environment
from markupsafe import Markup

from .. import serializers
from ..providers import ConfigurationAdmin
from ..serializers import Format

TITLE = "OSGi Installer Configuration Printer"
DESCRIPTION = (
    "To emit the current configuration for a specific OSGi service just enter its PID, "
    "select a serialization format and click 'Print'"
)
PARAMETER_PID = "pid"
PARAMETER_FORMAT = "format"


def _serialized(properties: dict, fmt: Format) -> Markup:
    buf = io.BytesIO()
    serializers.create(fmt).serialize(properties, buf)
    return Markup(buf.getvalue().decode("utf-8"))


def render(
    configuration_admin: ConfigurationAdmin,
    env: Environment,
    out: TextIO,
    pid: Optional[str] = None,
    format_name: Optional[str] = None,
) -> None:
    """Write the printer form; when a PID is given, look it up and print it in the chosen format."""
    fmt = serializers.resolve_format(format_name)
    ctx = {
        "title": TITLE,
        "description": DESCRIPTION,
        "param_pid": PARAMETER_PID,
        "param_format": PARAMETER_FORMAT,
        "pid": pid or "",
        "formats": list(Format),
        "selected": fmt,
        "lookup": False,
    }
    if pid is not None and pid.strip():
        ctx["lookup"] = True
        configuration = configuration_admin.get_configuration(pid)
        if configuration.properties is None:
            ctx["not_found"] = Markup("No configuration for pid '{}' found!").format(pid)
        else:
            ctx["serialized"] = _serialized(configuration.properties, fmt)
    out.write(env.get_template("config_printer.html.j2").render(ctx))
