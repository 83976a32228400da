"""
dockmigrate Test Configuration and Fixtures

This module provides common fixtures for dockmigrate tests.
"""

import logging

import pytest

from dockmigrate.config import MigrateConfig, StagingSettings
from dockmigrate.core.value_objects import ContainerIdentity, HostConnection, RunConfig
from tests.fixtures.doubles import (
    FakeComposeGenerator,
    FakeRemoteExecutor,
    RecordingSourceRuntime,
    RecordingTargetRuntime,
)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() so caplog keeps seeing package records."""
    yield
    package_logger = logging.getLogger("dockmigrate")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def calls():
    """Shared, ordered log of every call made on the test doubles."""
    return []


@pytest.fixture
def staging_dir(tmp_path):
    return tmp_path / "migrate-temp"


@pytest.fixture
def settings(staging_dir):
    """Default settings with staging under the test's temporary directory."""
    return MigrateConfig(staging=StagingSettings(local_dir=str(staging_dir)))


@pytest.fixture
def target_host():
    return HostConnection(hostname="dest.example.com", username="root")


@pytest.fixture
def run_config(settings, target_host):
    return RunConfig(identity=ContainerIdentity(name="web", target=target_host), settings=settings)


@pytest.fixture
def source_runtime(calls):
    return RecordingSourceRuntime(calls)


@pytest.fixture
def target_runtime(calls):
    return RecordingTargetRuntime(calls)


@pytest.fixture
def remote_executor(calls):
    return FakeRemoteExecutor(calls)


@pytest.fixture
def compose_generator(calls):
    return FakeComposeGenerator(calls)
