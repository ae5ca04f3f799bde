"""Tests for the state/configuration providers and the schema they produce."""

import json

import pytest
from pydantic import ValidationError

from installer_console.providers import (
    FileConfigurationAdmin,
    InMemoryConfigurationAdmin,
    SnapshotInfoProvider,
    StaticInfoProvider,
    load_state,
    save_state,
)
from installer_console.schema import (
    InstallationState,
    RegisteredResource,
    Resource,
    ResourceGroup,
    ResourceState,
    ResourceType,
)


def _state() -> InstallationState:
    return InstallationState(
        installed_resources=[ResourceGroup(
            resources=[
                Resource(type=ResourceType.CONFIG, entity_id="config:a", url="file:/a.cfg",
                         state=ResourceState.INSTALLED, last_change=1700000000000,
                         attributes={"Bundle-InstallInfo": "note"}),
                Resource(type=ResourceType.CONFIG, entity_id="config:a", url="file:/b.cfg"),
            ],
            alias="a~alias",
        )],
        untransformed_resources=[RegisteredResource(type=ResourceType.FILE, url="file:/x")],
    )


def test_resource_type_labels():
    assert [t.label for t in ResourceType] == ["Bundles", "Configurations", "Files", "Properties"]


def test_group_must_not_be_empty():
    with pytest.raises(ValidationError):
        ResourceGroup(resources=[])


def test_group_winner_and_alternatives():
    group = _state().installed_resources[0]
    assert group.winner.url == "file:/a.cfg"
    assert [r.url for r in group.alternatives] == ["file:/b.cfg"]


def test_is_empty():
    assert InstallationState().is_empty() is True
    assert _state().is_empty() is False


def test_state_file_roundtrip(tmp_path):
    path = tmp_path / "nested" / "state.json"
    save_state(_state(), path)
    assert load_state(path) == _state()
    assert SnapshotInfoProvider(path).get_installation_state() == _state()


def test_snapshot_provider_missing_file(tmp_path, caplog):
    provider = SnapshotInfoProvider(tmp_path / "missing.json")
    assert provider.get_installation_state().is_empty()
    assert "not found" in caplog.text


def test_snapshot_provider_rejects_empty_group(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"active_resources": [{"resources": []}]}))
    with pytest.raises(ValidationError):
        SnapshotInfoProvider(path).get_installation_state()


def test_static_provider_returns_copies():
    provider = StaticInfoProvider(_state())
    first = provider.get_installation_state()
    first.untransformed_resources.clear()
    assert len(provider.get_installation_state().untransformed_resources) == 1


def test_in_memory_configuration_admin():
    admin = InMemoryConfigurationAdmin({"com.example.Foo": {"x": "1"}})
    assert admin.get_configuration("com.example.Foo").properties == {"x": "1"}
    missing = admin.get_configuration("com.example.Bar")
    assert missing.pid == "com.example.Bar"
    assert missing.properties is None


def test_file_configuration_admin(tmp_path):
    path = tmp_path / "configurations.json"
    path.write_text(json.dumps({"com.example.Foo": {"port": 8080}}))
    admin = FileConfigurationAdmin(path)
    assert admin.get_configuration("com.example.Foo").properties == {"port": 8080}
    assert admin.get_configuration("other").properties is None


def test_file_configuration_admin_missing_file(tmp_path):
    admin = FileConfigurationAdmin(tmp_path / "nope.json")
    assert admin.get_configuration("com.example.Foo").properties is None
