"""
Renderers consume a request-scoped snapshot and a Jinja2 environment, writing to an output stream.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def make_env() -> Environment:
    """Jinja2 environment shared by the HTML renderers. Autoescape is always on."""
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=True,
        keep_trailing_newline=True,
    )
