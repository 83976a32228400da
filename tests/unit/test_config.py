"""
Unit Tests for configuration loading and logging setup
"""

import io
import json
import logging

import pytest

from dockmigrate.config import (
    EnvironmentLoader,
    MigrateConfig,
    RuntimeFamily,
    get_config,
    load_dotenv_if_exists,
)
from dockmigrate.core.exceptions import UsageError
from dockmigrate.logging_config import StructuredFormatter, configure_logging


class TestEnvironmentLoader:
    """Test suite for EnvironmentLoader."""

    def test_defaults(self):
        config = EnvironmentLoader({}).load()
        assert config.runtime.family is RuntimeFamily.DOCKER
        assert config.runtime.helper_image == "ubuntu:24.04"
        assert config.runtime.engine_url == "unix:///var/run/docker.sock"
        assert config.runtime.socket_path == "/var/run/docker.sock"
        assert config.runtime.stop_timeout == 10
        assert config.ssh.port == 22
        assert config.ssh.key_file is None
        assert config.ssh.batch_mode is False
        assert config.staging.local_dir == "migrate-temp"
        assert config.logging.level == "INFO"

    def test_bare_and_prefixed_keys(self):
        config = EnvironmentLoader({
            "IMAGE": "debian:12",
            "DOCKMIGRATE_SSH_PORT": "2222",
            "DOCKMIGRATE_SSH_BATCH_MODE": "yes",
            "LOCAL_TMP": "/srv/staging",
        }).load()
        assert config.runtime.helper_image == "debian:12"
        assert config.ssh.port == 2222
        assert config.ssh.batch_mode is True
        assert config.staging.local_dir == "/srv/staging"

    def test_bare_key_wins_over_prefixed(self):
        config = EnvironmentLoader({"STOP_TIMEOUT": "30", "DOCKMIGRATE_STOP_TIMEOUT": "5"}).load()
        assert config.runtime.stop_timeout == 30

    def test_podman_family(self):
        config = EnvironmentLoader({"DOCKER": "podman"}).load()
        assert config.runtime.binary == "podman"
        assert config.runtime.engine_url == "unix:///run/podman/podman.sock"
        assert config.runtime.socket_path == "/run/podman/podman.sock"

    def test_explicit_engine_url(self):
        config = EnvironmentLoader({"DOCKER_HOST_URL": "unix:///home/me/docker.sock"}).load()
        assert config.runtime.socket_path == "/home/me/docker.sock"

    def test_unknown_family_is_usage_error(self):
        with pytest.raises(UsageError) as exc_info:
            EnvironmentLoader({"DOCKER": "lxc"}).load()
        assert exc_info.value.field == "DOCKER"

    def test_invalid_values_fall_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dockmigrate.config"):
            config = EnvironmentLoader({
                "SSH_PORT": "twenty-two",
                "LOG_LEVEL": "chatty",
                "LOG_FORMAT": "xml",
            }).load()
        assert config.ssh.port == 22
        assert config.logging.level == "INFO"
        assert config.logging.format == "plain"
        assert "Invalid integer value for SSH_PORT" in caplog.text

    def test_summary(self):
        summary = MigrateConfig().get_summary()
        assert summary["runtime"]["family"] == "docker"
        assert summary["ssh"]["connect_timeout"] == 30


class TestDotenv:
    """Test suite for .env loading."""

    def test_missing_env_file(self, tmp_path):
        assert load_dotenv_if_exists(tmp_path) is False

    def test_env_file_does_not_override(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("DOCKMIGRATE_SSH_PORT=2200\nDOCKMIGRATE_IMAGE=alpine:3\n")
        monkeypatch.setenv("DOCKMIGRATE_IMAGE", "debian:12")
        # Registered so that the value python-dotenv sets is removed afterwards
        monkeypatch.setenv("DOCKMIGRATE_SSH_PORT", "unset")
        monkeypatch.delenv("DOCKMIGRATE_SSH_PORT")
        monkeypatch.delenv("SSH_PORT", raising=False)
        monkeypatch.delenv("IMAGE", raising=False)
        monkeypatch.chdir(tmp_path)

        config = get_config()

        assert config.ssh.port == 2200
        assert config.runtime.helper_image == "debian:12"

    def test_explicit_environ_skips_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("DOCKMIGRATE_SSH_PORT=2200\n")
        monkeypatch.chdir(tmp_path)
        assert get_config({}).ssh.port == 22


class TestLogging:
    """Test suite for logging setup."""

    def test_structured_formatter_includes_extra(self):
        record = logging.LogRecord("dockmigrate.test", logging.INFO, __file__, 1,
                                   "[2/12] Stopping source container", (), None)
        record.state = "stopping"
        record.container = "web"

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["message"] == "[2/12] Stopping source container"
        assert entry["state"] == "stopping"
        assert entry["container"] == "web"
        assert "pathname" not in entry

    def test_configure_logging_plain(self):
        stream = io.StringIO()
        logger = configure_logging("DEBUG", "plain", stream=stream)
        logging.getLogger("dockmigrate.services").debug("hello")
        assert logger.level == logging.DEBUG
        assert "DEBUG hello" in stream.getvalue()

    def test_configure_logging_replaces_handlers(self):
        configure_logging("INFO", "plain", stream=io.StringIO())
        stream = io.StringIO()
        logger = configure_logging("INFO", "json", stream=stream)
        logging.getLogger("dockmigrate.cli").info("done")
        assert len(logger.handlers) == 1
        assert json.loads(stream.getvalue().strip())["message"] == "done"
