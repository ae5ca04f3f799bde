"""Resource state renderer: grouped HTML tables for the console, plain text for status dumps.

Both outputs walk the same three categories (active, processed, untransformed).
Resources are grouped by type up front, so a state whose lists are not sorted
by type still yields one section per type, in order of first appearance.
"""

from typing import Callable, Dict, Iterable, List, Optional, TextIO, Tuple, TypeVar

from jinja2 import Environment
from markupsafe import Markup, escape
from pydantic import BaseModel, Field

from .._util import format_date
from ..schema import (
    ATTR_INSTALL_EXCLUDED,
    ATTR_INSTALL_INFO,
    InstallationState,
    RegisteredResource,
    Resource,
    ResourceGroup,
    ResourceState,
    ResourceType,
)

BANNER = "Apache Sling OSGi Installer"
PRINTER_MODES = ("zip", "txt")

_RESOURCE_HEADERS = ["Entity ID", "Digest/Priority", "URL (Version)", "State", "Error"]
_UNTRANSFORMED_HEADERS = ["Digest/Priority", "URL"]

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

def group_by_type(
    items: Iterable[T],
    type_of: Callable[[T], ResourceType],
) -> List[Tuple[ResourceType, List[T]]]:
    """Bucket items by resource type, keeping first-appearance order of types and items."""
    buckets: Dict[ResourceType, List[T]] = {}
    for item in items:
        buckets.setdefault(type_of(item), []).append(item)
    return list(buckets.items())


def _group_type(group: ResourceGroup) -> ResourceType:
    return group.winner.type


def _resource_type(rsrc: RegisteredResource) -> ResourceType:
    return rsrc.type


# ---------------------------------------------------------------------------
# Cell values
# ---------------------------------------------------------------------------

def entity_id_label(rsrc: RegisteredResource, alias: Optional[str] = None) -> str:
    """Entity id without its namespace prefix, alias on a second line."""
    entity_id = rsrc.entity_id.split(":", 1)[-1]
    return entity_id if alias is None else f"{entity_id}\n{alias}"


def url_label(rsrc: Resource) -> str:
    if rsrc.version is not None:
        return f"{rsrc.url} ({rsrc.version})"
    return rsrc.url


def state_label(rsrc: Resource) -> str:
    """State name; INSTALLED reads EXCLUDED and/or gets a (*) marker from the install attributes."""
    label = rsrc.state.value
    if rsrc.state == ResourceState.INSTALLED:
        if rsrc.get_attribute(ATTR_INSTALL_EXCLUDED) is not None:
            label = "EXCLUDED"
        if rsrc.get_attribute(ATTR_INSTALL_INFO) is not None:
            label += "(*)"
    return label


def error_label(rsrc: Resource) -> str:
    return rsrc.error if rsrc.error is not None else ""


def info_label(rsrc: RegisteredResource) -> str:
    return f"{rsrc.digest}/{rsrc.priority}"


def _annotations(rsrc: Resource) -> List[str]:
    notes = []
    for key in (ATTR_INSTALL_EXCLUDED, ATTR_INSTALL_INFO):
        value = rsrc.get_attribute(key)
        if value is not None:
            notes.append(str(value))
    return notes


# ---------------------------------------------------------------------------
# Sections (shared by both HTML passes)
# ---------------------------------------------------------------------------

class ReportSection(BaseModel):
    """One table: all resources of a single type within a category."""

    anchor: str
    label: str
    heading: str
    headers: List[str]
    rows: List[dict] = Field(default_factory=list)


class ReportCategory(BaseModel):
    key: str
    title: str
    sections: List[ReportSection] = Field(default_factory=list)


def _section(key: str, title: str, rtype: ResourceType, headers: List[str]) -> ReportSection:
    return ReportSection(
        anchor=f"{key}-{rtype.label}",
        label=rtype.label,
        heading=f"{title} - {rtype.label}",
        headers=headers,
    )


def _active_category(groups: List[ResourceGroup]) -> ReportCategory:
    category = ReportCategory(key="active", title="Active Resources")
    for rtype, members in group_by_type(groups, _group_type):
        section = _section(category.key, category.title, rtype, _RESOURCE_HEADERS)
        for group in members:
            rsrc = group.winner
            section.rows.append({"kind": "main", "cells": [
                entity_id_label(rsrc, group.alias),
                info_label(rsrc),
                url_label(rsrc),
                rsrc.state.value,
                error_label(rsrc),
            ]})
        category.sections.append(section)
    return category


def _state_cell(rsrc: Resource) -> Markup:
    cell = escape(state_label(rsrc))
    if rsrc.state == ResourceState.INSTALLED and rsrc.last_change > 0:
        cell += Markup("<br/>") + format_date(rsrc.last_change)
    return cell


def _processed_category(groups: List[ResourceGroup]) -> ReportCategory:
    category = ReportCategory(key="processed", title="Processed Resources")
    for rtype, members in group_by_type(groups, _group_type):
        section = _section(category.key, category.title, rtype, _RESOURCE_HEADERS)
        for group in members:
            first = group.winner
            section.rows.append({"kind": "main", "cells": [
                entity_id_label(first, group.alias),
                info_label(first),
                url_label(first),
                _state_cell(first),
                error_label(first),
            ]})
            for note in _annotations(first):
                section.rows.append({"kind": "note", "cells": [note]})
            for rsrc in group.alternatives:
                section.rows.append({"kind": "alt", "cells": [
                    info_label(rsrc),
                    url_label(rsrc),
                    rsrc.state.value,
                    error_label(rsrc),
                ]})
        category.sections.append(section)
    return category


def _untransformed_category(resources: List[RegisteredResource]) -> ReportCategory:
    category = ReportCategory(key="untransformed", title="Untransformed Resources")
    for rtype, members in group_by_type(resources, _resource_type):
        section = _section(category.key, category.title, rtype, _UNTRANSFORMED_HEADERS)
        for rsrc in members:
            section.rows.append({"kind": "main", "cells": [info_label(rsrc), rsrc.url]})
        category.sections.append(section)
    return category


def build_categories(state: InstallationState) -> List[ReportCategory]:
    return [
        _active_category(state.active_resources),
        _processed_category(state.installed_resources),
        _untransformed_category(state.untransformed_resources),
    ]


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

def render_html(state: InstallationState, env: Environment, out: TextIO) -> None:
    """Write the status line and table of contents, then the tables they link to."""
    categories = build_categories(state)
    ctx = {"banner": BANNER, "empty": state.is_empty(), "categories": categories}
    toc = env.get_template("installer_toc.html.j2").render(ctx)
    tables = env.get_template("installer_tables.html.j2").render(ctx)
    out.write(toc)
    out.write(tables)


# ---------------------------------------------------------------------------
# Plain text (configuration printer)
# ---------------------------------------------------------------------------

def _heading(out: TextIO, text: str, underline: str) -> None:
    out.write(f"{text}\n{underline * len(text)}\n")


def print_configuration(state: InstallationState, out: TextIO, mode: str) -> None:
    """Write the plain-text status report. Only the zip and txt modes produce output."""
    if mode not in PRINTER_MODES:
        return
    _heading(out, BANNER, "=")

    _heading(out, "Active Resources", "-")
    sections = group_by_type(state.active_resources, _group_type)
    for rtype, groups in sections:
        out.write(f"{rtype.label}:\n")
        for group in groups:
            rsrc = group.winner
            out.write(
                f"- {entity_id_label(rsrc, group.alias)}: {info_label(rsrc)}, "
                f"{url_label(rsrc)}, {rsrc.state.value}, {error_label(rsrc)}\n"
            )
    if not sections:
        out.write("none\n")
    out.write("\n")

    _heading(out, "Processed Resources", "-")
    sections = group_by_type(state.installed_resources, _group_type)
    for rtype, groups in sections:
        out.write(f"{rtype.label}:\n")
        for group in groups:
            first = group.winner
            out.write(
                f"* {entity_id_label(first, group.alias)}: {info_label(first)}, "
                f"{url_label(first)}, {state_label(first)}, {error_label(first)}\n"
            )
            for note in _annotations(first):
                out.write(f"  : {note}\n")
            for rsrc in group.alternatives:
                out.write(
                    f"  - {info_label(rsrc)}, {url_label(rsrc)}, "
                    f"{rsrc.state.value}, {error_label(rsrc)}\n"
                )
    if not sections:
        out.write("none\n")
    out.write("\n")

    _heading(out, "Untransformed Resources", "-")
    sections = group_by_type(state.untransformed_resources, _resource_type)
    for rtype, resources in sections:
        out.write(f"{rtype.label}:\n")
        for rsrc in resources:
            out.write(f"- {info_label(rsrc)}, {rsrc.url}\n")
    if not sections:
        out.write("none\n")
