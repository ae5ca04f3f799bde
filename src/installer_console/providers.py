"""
Data sources consumed by the console plugins.

The installer and the configuration store are external; these protocols are
all the renderers see. File-backed implementations read a fresh copy on every
call so each request works on its own snapshot.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

from .schema import Configuration, InstallationState

logger = logging.getLogger(__name__)


class InfoProvider(Protocol):
    def get_installation_state(self) -> InstallationState: ...


class ConfigurationAdmin(Protocol):
    def get_configuration(self, pid: str) -> Configuration: ...


def load_state(path: Path) -> InstallationState:
    """Load and validate an installation state snapshot from JSON."""
    return InstallationState.model_validate_json(Path(path).read_text())


def save_state(state: InstallationState, path: Path) -> None:
    """Serialize an installation state snapshot to JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(state.model_dump_json(indent=2))


class StaticInfoProvider:
    """Serves a fixed in-memory state."""

    def __init__(self, state: Optional[InstallationState] = None) -> None:
        self._state = state or InstallationState()

    def get_installation_state(self) -> InstallationState:
        return self._state.model_copy(deep=True)


class SnapshotInfoProvider:
    """Reads the state from a snapshot file written by the installer."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get_installation_state(self) -> InstallationState:
        if not self.path.exists():
            logger.warning("State snapshot %s not found, reporting no resources", self.path)
            return InstallationState()
        return load_state(self.path)


class InMemoryConfigurationAdmin:
    """Configuration store backed by a pid -> properties mapping."""

    def __init__(self, configurations: Optional[Mapping[str, Dict[str, Any]]] = None) -> None:
        self._configurations = dict(configurations or {})

    def get_configuration(self, pid: str) -> Configuration:
        properties = self._configurations.get(pid)
        return Configuration(
            pid=pid,
            properties=dict(properties) if properties is not None else None,
        )


class FileConfigurationAdmin:
    """Configuration store backed by a JSON file mapping pid -> properties."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get_configuration(self, pid: str) -> Configuration:
        if not self.path.exists():
            logger.warning("Configuration file %s not found", self.path)
            return Configuration(pid=pid)
        data = json.loads(self.path.read_text())
        return InMemoryConfigurationAdmin(data).get_configuration(pid)
