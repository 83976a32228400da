"""
Unit Tests for core value objects, entities and the Result type
"""

from pathlib import Path

import pytest

from dockmigrate.core.entities import (
    ContainerSnapshot,
    NetworkSet,
    StagingLayout,
    VolumeMount,
    VolumeSet,
)
from dockmigrate.core.exceptions import (
    ArchiveIOError,
    InvalidHostnameError,
    InvalidPortError,
    MigrationError,
    UsageError,
)
from dockmigrate.core.result import Result
from dockmigrate.core.value_objects import ContainerIdentity, HostConnection


class TestResult:
    """Test suite for Result."""

    def test_success_without_value(self):
        result = Result.success()
        assert result.is_success
        assert result.value is None
        assert bool(result) is True

    def test_failure_carries_error(self):
        error = ArchiveIOError("disk full", path="/tmp/a.tar.gz")
        result = Result.failure(error)
        assert result.is_failure
        assert not result
        assert result.error is error
        with pytest.raises(ValueError):
            _ = result.value

    def test_success_has_no_error(self):
        with pytest.raises(ValueError):
            _ = Result.success(3).error

    def test_failure_requires_error(self):
        with pytest.raises(ValueError):
            Result(_ok=False)

    def test_error_keeps_state(self):
        error = MigrationError("nope", state="stopping")
        assert Result.failure(error).error.state == "stopping"
        assert error.kind == "MigrationError"


class TestHostConnection:
    """Test suite for HostConnection."""

    def test_defaults(self):
        host = HostConnection("dest.example.com")
        assert host.username == "root"
        assert host.port == 22
        assert host.destination == "root@dest.example.com"
        assert str(host) == "root@dest.example.com"

    def test_ipv6_destination_is_bracketed(self):
        host = HostConnection("fd00::12", "deploy")
        assert host.destination == "deploy@[fd00::12]"
        assert host.remote_path("/tmp/x") == "deploy@[fd00::12]:/tmp/x"

    def test_remote_path(self):
        host = HostConnection("10.0.0.5", "admin")
        assert host.remote_path("/tmp/tmp.abc/web.compose.yml") == "admin@10.0.0.5:/tmp/tmp.abc/web.compose.yml"

    @pytest.mark.parametrize("hostname", ["", "bad host", "-leading.example.com", "a" * 254])
    def test_invalid_hostname(self, hostname):
        with pytest.raises(InvalidHostnameError):
            HostConnection(hostname)

    @pytest.mark.parametrize("username", ["", "bad user", "user@other", "user:secret", "-oProxyCommand=x"])
    def test_invalid_username(self, username):
        with pytest.raises(InvalidHostnameError):
            HostConnection("dest.example.com", username)

    @pytest.mark.parametrize("username", ["first.last", "Admin", "1user", "svc_deploy-2", "DOMAIN\\ops"])
    def test_common_logins_accepted(self, username):
        host = HostConnection("10.0.0.5", username)
        assert host.destination == f"{username}@10.0.0.5"

    @pytest.mark.parametrize("port", [0, 65536, True, "22"])
    def test_invalid_port(self, port):
        with pytest.raises(InvalidPortError):
            HostConnection("dest.example.com", "root", port)

    def test_validation_errors_are_usage_errors(self):
        with pytest.raises(UsageError) as exc_info:
            HostConnection("dest.example.com", "root", 0)
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.field == "port"


class TestContainerIdentity:
    """Test suite for ContainerIdentity."""

    def test_valid_identity(self, target_host):
        identity = ContainerIdentity("web_1.prod", target_host)
        assert identity.source_host == "localhost"
        assert str(identity) == "web_1.prod (localhost -> root@dest.example.com)"

    @pytest.mark.parametrize("name", ["", "-web", "web app", "web/1"])
    def test_invalid_name(self, name, target_host):
        with pytest.raises(UsageError):
            ContainerIdentity(name, target_host)

    def test_is_immutable(self, target_host):
        identity = ContainerIdentity("web", target_host)
        with pytest.raises(AttributeError):
            identity.name = "db"


class TestVolumeSet:
    """Test suite for VolumeSet and NetworkSet."""

    def test_from_mounts_orders_and_deduplicates(self):
        volumes = VolumeSet.from_mounts([
            VolumeMount("/var/lib/db", "db"),
            VolumeMount("/data", "data"),
            VolumeMount("/var/lib/db", "db-copy"),
            VolumeMount("/etc/app"),
        ])
        assert volumes.destinations == ("/data", "/etc/app", "/var/lib/db")
        assert volumes.names == ("data", "db")
        assert len(volumes) == 3

    def test_empty_set_is_falsy(self):
        assert not VolumeSet()
        assert VolumeSet.from_mounts([]).destinations == ()

    def test_duplicate_destination_rejected(self):
        with pytest.raises(ValueError):
            VolumeSet((VolumeMount("/data", "a"), VolumeMount("/data", "b")))

    def test_volume_backing_two_destinations(self):
        volumes = VolumeSet.from_mounts([
            VolumeMount("/data", "web-data"),
            VolumeMount("/backup", "web-data"),
            VolumeMount("/logs", "web-logs"),
        ])
        assert volumes.destinations == ("/backup", "/data", "/logs")
        assert volumes.names == ("web-data", "web-logs")

    def test_network_set_drops_host_network(self):
        networks = NetworkSet.from_names(["frontend", "host", "backend", "", "frontend"])
        assert tuple(networks) == ("backend", "frontend")
        assert "host" not in networks
        assert "backend" in networks

    def test_snapshot_with_compose(self):
        snapshot = ContainerSnapshot(container="web", image_name="nginx:1.25")
        updated = snapshot.with_compose("services: {}")
        assert snapshot.compose_document is None
        assert updated.compose_document == "services: {}"
        assert updated.image_name == "nginx:1.25"


class TestStagingLayout:
    """Test suite for StagingLayout."""

    def test_artifact_names_and_paths(self):
        layout = StagingLayout("web", Path("/work/migrate-temp"), "/tmp/tmp.abc")
        assert layout.archive.local_path == Path("/work/migrate-temp/web-volumes.tar.gz")
        assert layout.archive.remote_path == "/tmp/tmp.abc/web-volumes.tar.gz"
        assert layout.archive.name == "web-volumes.tar.gz"
        assert layout.compose.remote_path == "/tmp/tmp.abc/web.compose.yml"
        assert layout.checkpoint_path == Path("/work/migrate-temp/web.checkpoint.json")
