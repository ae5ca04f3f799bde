"""
Installation state schema.

Strongly typed contract between data sources and renderers.
Providers produce data that fits into this schema; renderers consume it.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Resource attribute names set by the installer tasks
ATTR_INSTALL_EXCLUDED = "Bundle-InstallExcluded"
ATTR_INSTALL_INFO = "Bundle-InstallInfo"


class ResourceType(str, Enum):
    BUNDLE = "bundle"
    CONFIG = "config"
    FILE = "file"
    PROPERTIES = "properties"

    @property
    def label(self) -> str:
        """Plural heading used for report sections."""
        return _TYPE_LABELS[self]


_TYPE_LABELS = {
    ResourceType.BUNDLE: "Bundles",
    ResourceType.CONFIG: "Configurations",
    ResourceType.FILE: "Files",
    ResourceType.PROPERTIES: "Properties",
}


class ResourceState(str, Enum):
    INSTALL = "INSTALL"
    UNINSTALL = "UNINSTALL"
    INSTALLED = "INSTALLED"
    UNINSTALLED = "UNINSTALLED"
    IGNORED = "IGNORED"


# --- Resources ---


class RegisteredResource(BaseModel):
    """A resource as registered with the installer, before any processing."""

    type: ResourceType
    entity_id: str = ""  # e.g. "bundle:org.example.core"
    url: str
    digest: str = ""
    priority: int = 0


class Resource(RegisteredResource):
    """A transformed resource tracked through its lifecycle."""

    version: Optional[str] = None
    state: ResourceState = ResourceState.INSTALL
    error: Optional[str] = None
    last_change: int = -1  # ms since epoch, -1 if never changed
    attributes: Dict[str, Any] = Field(default_factory=dict)

    def get_attribute(self, key: str) -> Any:
        return self.attributes.get(key)


class ResourceGroup(BaseModel):
    """Competing resources for one entity; the first one wins."""

    resources: List[Resource] = Field(min_length=1)
    alias: Optional[str] = None

    @property
    def winner(self) -> Resource:
        return self.resources[0]

    @property
    def alternatives(self) -> List[Resource]:
        return self.resources[1:]


class InstallationState(BaseModel):
    """Point-in-time snapshot of everything the installer tracks."""

    active_resources: List[ResourceGroup] = Field(default_factory=list)
    installed_resources: List[ResourceGroup] = Field(default_factory=list)
    untransformed_resources: List[RegisteredResource] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.active_resources
            or self.installed_resources
            or self.untransformed_resources
        )


# --- Configuration admin ---


class Configuration(BaseModel):
    """A configuration object; properties is None when nothing is stored for the pid."""

    pid: str
    properties: Optional[Dict[str, Any]] = None
