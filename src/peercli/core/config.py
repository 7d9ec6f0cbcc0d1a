# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Core configuration - centralized settings for the peercli package.

Settings that the peer CLI traditionally reads from its process-wide
configuration (TLS flag, default peer address and root cert, orderer
endpoint) flow through this module. Validators never read it directly:
the CLI layer copies the values into explicit parameter objects.

Usage:
    from peercli.core.config import get_settings
    settings = get_settings()

    tls_enabled = settings.tls_enabled
"""

from __future__ import annotations

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigException


class PeerSettings(BaseSettings):
    """Peer CLI settings.

    Peer connection settings use the ``CORE_PEER_`` names the peer binary
    understands; CLI-only settings use the ``PEERCLI_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # PEER CONNECTION SETTINGS
    # ==========================================================================

    tls_enabled: bool = Field(
        default=False,
        description="Use TLS when connecting to peers",
        validation_alias="CORE_PEER_TLS_ENABLED",
    )
    peer_address: str = Field(
        default="",
        description="Default peer endpoint when no --peerAddresses are given",
        validation_alias="CORE_PEER_ADDRESS",
    )
    tls_root_cert_file: str = Field(
        default="",
        description="TLS root cert file for the default peer endpoint",
        validation_alias="CORE_PEER_TLS_ROOTCERT_FILE",
    )
    orderer_endpoint: str = Field(
        default="",
        description="Ordering service endpoint",
        validation_alias="ORDERER_ADDRESS",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="PEERCLI_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="PEERCLI_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="PEERCLI_LOG_FILE",
    )

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def default_peer_addresses(self) -> list[str]:
        """Peer addresses to use when none are passed on the command line."""
        return [self.peer_address] if self.peer_address else []

    @property
    def default_tls_root_cert_files(self) -> list[str]:
        """Root cert files paired with ``default_peer_addresses``."""
        return [self.tls_root_cert_file] if self.tls_root_cert_file else []


# ==========================================================================
# GLOBAL SETTINGS INSTANCE (lazy loaded)
# ==========================================================================

_settings: PeerSettings | None = None


def get_settings() -> PeerSettings:
    """Get the global settings instance.

    Returns:
        The singleton PeerSettings instance.

    Raises:
        ConfigException: If an environment variable holds an invalid value.
    """
    global _settings
    if _settings is None:
        try:
            _settings = PeerSettings()
        except ValidationError as exc:
            invalid = [str(error["loc"][0]) for error in exc.errors() if error.get("loc")]
            raise ConfigException(
                f"Invalid environment configuration: {', '.join(invalid) or exc}",
                missing_vars=invalid,
            ) from exc
    return _settings


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    global _settings
    _settings = None
