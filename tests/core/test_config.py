"""Tests for peercli.core.config - PeerSettings and global settings management."""

from __future__ import annotations

import pytest

from peercli.core.config import PeerSettings, clear_settings_cache, get_settings
from peercli.core.exceptions import ConfigException


class TestPeerSettingsDefaults:
    def test_connection_defaults(self):
        settings = PeerSettings()
        assert settings.tls_enabled is False
        assert settings.peer_address == ""
        assert settings.tls_root_cert_file == ""
        assert settings.orderer_endpoint == ""

    def test_logging_defaults(self):
        settings = PeerSettings()
        assert settings.log_level == "INFO"
        assert settings.log_format == ""
        assert settings.log_file is None

    def test_no_default_peers(self):
        settings = PeerSettings()
        assert settings.default_peer_addresses == []
        assert settings.default_tls_root_cert_files == []


class TestPeerSettingsEnvironment:
    """Environment variables override defaults."""

    def test_peer_env(self, monkeypatch):
        monkeypatch.setenv("CORE_PEER_TLS_ENABLED", "true")
        monkeypatch.setenv("CORE_PEER_ADDRESS", "peer0.org1.example.com:7051")
        monkeypatch.setenv("CORE_PEER_TLS_ROOTCERT_FILE", "/etc/peer/ca.crt")
        monkeypatch.setenv("ORDERER_ADDRESS", "orderer.example.com:7050")

        settings = PeerSettings()
        assert settings.tls_enabled is True
        assert settings.default_peer_addresses == ["peer0.org1.example.com:7051"]
        assert settings.default_tls_root_cert_files == ["/etc/peer/ca.crt"]
        assert settings.orderer_endpoint == "orderer.example.com:7050"

    def test_logging_env(self, monkeypatch):
        monkeypatch.setenv("PEERCLI_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PEERCLI_LOG_FORMAT", "json")
        monkeypatch.setenv("PEERCLI_LOG_FILE", "/tmp/peercli.log")

        settings = PeerSettings()
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"
        assert settings.log_file == "/tmp/peercli.log"


class TestGlobalSettings:
    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_clear_cache(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("CORE_PEER_ADDRESS", "peer1:7051")
        assert get_settings().peer_address == ""

        clear_settings_cache()
        second = get_settings()
        assert second is not first
        assert second.peer_address == "peer1:7051"

    def test_invalid_value_raises_config_exception(self, monkeypatch):
        """A malformed environment value names the offending variable."""
        monkeypatch.setenv("CORE_PEER_TLS_ENABLED", "maybe")
        with pytest.raises(ConfigException, match="CORE_PEER_TLS_ENABLED") as exc_info:
            get_settings()
        assert exc_info.value.missing_vars == ["CORE_PEER_TLS_ENABLED"]
        assert exc_info.value.details == {"missing_vars": ["CORE_PEER_TLS_ENABLED"]}

    def test_failed_load_is_not_cached(self, monkeypatch):
        monkeypatch.setenv("CORE_PEER_TLS_ENABLED", "maybe")
        with pytest.raises(ConfigException):
            get_settings()
        monkeypatch.setenv("CORE_PEER_TLS_ENABLED", "false")
        assert get_settings().tls_enabled is False
