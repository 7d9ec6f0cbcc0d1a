"""Global test fixtures for the peercli test suite."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from peercli.core.config import clear_settings_cache

# Environment variables read by PeerSettings
_SETTINGS_ENV_VARS = (
    "CORE_PEER_TLS_ENABLED",
    "CORE_PEER_ADDRESS",
    "CORE_PEER_TLS_ROOTCERT_FILE",
    "ORDERER_ADDRESS",
    "PEERCLI_LOG_LEVEL",
    "PEERCLI_LOG_FORMAT",
    "PEERCLI_LOG_FILE",
)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Start every test from default settings."""
    for var in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def collections_file(tmp_path) -> Path:
    """A collection config file with two collections."""
    path = tmp_path / "collections_config.json"
    path.write_text(
        json.dumps(
            [
                {
                    "name": "clientModelHashCollectionOrg1MSP",
                    "policy": "OR('Org1MSP.member','AdminMSP.member')",
                    "requiredPeerCount": 0,
                    "maxPeerCount": 3,
                    "blockToLive": 1000000,
                    "memberOnlyRead": True,
                    "memberOnlyWrite": True,
                },
                {
                    "name": "globalModelHashCollection",
                    "policy": "OR('Org1MSP.member','Org2MSP.member')",
                    "requiredPeerCount": 0,
                    "maxPeerCount": 3,
                    "blockToLive": 1000000,
                    "memberOnlyRead": True,
                    "memberOnlyWrite": True,
                },
            ],
            indent=2,
        )
    )
    return path
