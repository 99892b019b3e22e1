"""
Configuration module for the bridge federator.

This module provides type-safe configuration dataclasses with validation for a
federator that watches Cross events on a source chain and votes them on the
destination chain's Federation contract. Configuration is loaded from
environment variables with sensible defaults where appropriate.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import urlparse

from web3 import Web3

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Blocks to wait before acting on an event, keyed by source chain id.
# Chains not listed (ganache, regtest) need no confirmations.
CHAIN_CONFIRMATIONS: Mapping[int, int] = MappingProxyType({
    1: 5760,   # Ethereum mainnet, ~24h
    56: 2880,  # BSC mainnet, ~24h
    97: 10,    # BSC testnet
    42: 10,    # Kovan
})

CHECKPOINT_FILENAME = "lastBlock.txt"


def _validate_rpc_url(rpc_url: str, name: str) -> None:
    if not rpc_url:
        raise ConfigurationError(f"{name} is required")

    parsed = urlparse(rpc_url)
    if parsed.scheme not in ('http', 'https'):
        raise ConfigurationError(
            f"Invalid RPC URL scheme for {name}: {parsed.scheme}. "
            "Expected http or https"
        )


def _checksum(instance: object, attr: str, name: str) -> None:
    """Validate an address attribute and store its checksummed form."""
    address = getattr(instance, attr)
    if not address:
        raise ConfigurationError(f"{name} is required")

    if not Web3.is_address(address):
        raise ConfigurationError(f"Invalid {name}: {address}")

    checksummed = Web3.to_checksum_address(address)
    if checksummed != address:
        # Use object.__setattr__ since dataclass is frozen
        object.__setattr__(instance, attr, checksummed)


def _env_int(name: str, default: str) -> int:
    value = os.environ.get(name, default)
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


def _env_float(name: str, default: str) -> float:
    value = os.environ.get(name, default)
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


@dataclass(frozen=True, slots=True)
class SourceChainConfig:
    """Configuration for the source chain.

    Attributes:
        rpc_url: HTTP(S) RPC endpoint for the source chain
        bridge_address: Checksummed address of the Bridge contract emitting Cross events
        from_block: Floor height; blocks at or below it are never scanned
    """

    rpc_url: str
    bridge_address: str
    from_block: int = 0

    def __post_init__(self) -> None:
        """Validate source chain configuration."""
        _validate_rpc_url(self.rpc_url, "Source RPC URL (SOURCE_RPC_URL)")
        _checksum(self, 'bridge_address', "source bridge address (SOURCE_BRIDGE_ADDRESS)")

        if self.from_block < 0:
            raise ConfigurationError(f"From block must be non-negative, got {self.from_block}")


@dataclass(frozen=True, slots=True)
class TargetChainConfig:
    """Configuration for the destination chain.

    Attributes:
        rpc_url: HTTP(S) RPC endpoint for the destination chain
        bridge_address: Checksummed address of the destination Bridge contract
        federation_address: Checksummed address of the Federation contract
    """

    rpc_url: str
    bridge_address: str
    federation_address: str

    def __post_init__(self) -> None:
        """Validate target chain configuration."""
        _validate_rpc_url(self.rpc_url, "Target RPC URL (TARGET_RPC_URL)")
        _checksum(self, 'bridge_address', "target bridge address (TARGET_BRIDGE_ADDRESS)")
        _checksum(self, 'federation_address', "federation address (FEDERATION_ADDRESS)")


@dataclass(frozen=True, slots=True)
class MonitoringConfig:
    """Configuration for pass scheduling, paging and retries."""
    polling_interval: int = 60  # seconds between passes
    request_timeout: int = 30  # HTTP request timeout in seconds
    retry_count: int = 3  # attempts per pass before failing fatally
    retry_interval: float = 3.0  # seconds between attempts
    page_size: int = 1000  # max blocks per log query

    def __post_init__(self) -> None:
        """Validate monitoring configuration."""
        if self.polling_interval <= 0:
            raise ConfigurationError(f"Polling interval must be positive, got {self.polling_interval}")

        if self.request_timeout <= 0:
            raise ConfigurationError(f"Request timeout must be positive, got {self.request_timeout}")

        if self.retry_count < 1:
            raise ConfigurationError(f"Retry count must be at least 1, got {self.retry_count}")
        if self.retry_count > 10:
            raise ConfigurationError(f"Retry count too high (max 10), got {self.retry_count}")

        if self.retry_interval < 0:
            raise ConfigurationError(f"Retry interval must be non-negative, got {self.retry_interval}")

        if self.page_size < 1:
            raise ConfigurationError(f"Page size must be positive, got {self.page_size}")


@dataclass(frozen=True, slots=True)
class FederatorConfig:
    """Main configuration for the federator.

    Attributes:
        source_chain: Configuration for the source chain
        target_chain: Configuration for the destination chain
        monitoring: Configuration for scheduling and retries
        storage_path: Directory holding the checkpoint file
        local_mode: Sign transactions locally instead of through ROFL
        private_key: Signing key for local mode
        federator_address: Address votes are cast from in ROFL mode
    """

    source_chain: SourceChainConfig
    target_chain: TargetChainConfig
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    storage_path: str = "./db"
    local_mode: bool = False
    private_key: str | None = None
    federator_address: str | None = None

    def __post_init__(self) -> None:
        """Validate federator configuration."""
        if not self.storage_path:
            raise ConfigurationError("Storage path is required (STORAGE_PATH)")

        if self.local_mode and not self.private_key:
            raise ConfigurationError(
                "Local mode requires PRIVATE_KEY environment variable"
            )

        if self.private_key:
            # 64 hex chars, optionally with 0x prefix
            key = self.private_key.removeprefix('0x')
            if len(key) != 64:
                raise ConfigurationError(
                    f"Invalid private key length. Expected 64 hex characters, got {len(key)}"
                )
            try:
                int(key, 16)
            except ValueError:
                raise ConfigurationError(
                    "Invalid private key format. Must be hexadecimal"
                ) from None

        if not self.local_mode:
            _checksum(self, 'federator_address', "federator address (FEDERATOR_ADDRESS)")

    @classmethod
    def from_env(cls, local_mode: bool = False) -> "FederatorConfig":
        """
        Load configuration from environment variables.

        Args:
            local_mode: Sign and send transactions with a local private key

        Returns:
            FederatorConfig instance with loaded values

        Raises:
            ConfigurationError: If required environment variables are missing or invalid
        """
        source_chain = SourceChainConfig(
            rpc_url=os.environ.get("SOURCE_RPC_URL", ""),
            bridge_address=os.environ.get("SOURCE_BRIDGE_ADDRESS", ""),
            from_block=_env_int("SOURCE_FROM_BLOCK", "0"),
        )

        target_chain = TargetChainConfig(
            rpc_url=os.environ.get("TARGET_RPC_URL", ""),
            bridge_address=os.environ.get("TARGET_BRIDGE_ADDRESS", ""),
            federation_address=os.environ.get("FEDERATION_ADDRESS", ""),
        )

        monitoring = MonitoringConfig(
            polling_interval=_env_int("POLLING_INTERVAL", "60"),
            request_timeout=_env_int("REQUEST_TIMEOUT", "30"),
            retry_count=_env_int("RETRY_COUNT", "3"),
            retry_interval=_env_float("RETRY_INTERVAL", "3.0"),
            page_size=_env_int("PAGE_SIZE", "1000"),
        )

        return cls(
            source_chain=source_chain,
            target_chain=target_chain,
            monitoring=monitoring,
            storage_path=os.environ.get("STORAGE_PATH", "./db"),
            local_mode=local_mode,
            private_key=os.environ.get("PRIVATE_KEY") if local_mode else None,
            federator_address=None if local_mode else os.environ.get("FEDERATOR_ADDRESS"),
        )

    def log_config(self) -> None:
        """Log the configuration in a readable format (hiding sensitive data)."""
        logger.info("=" * 60)
        logger.info("Bridge Federator Configuration")
        logger.info("=" * 60)

        logger.info("Source Chain:")
        logger.info(f"  RPC URL: {self.source_chain.rpc_url}")
        logger.info(f"  Bridge: {self.source_chain.bridge_address}")
        logger.info(f"  From Block: {self.source_chain.from_block}")

        logger.info("Target Chain:")
        logger.info(f"  RPC URL: {self.target_chain.rpc_url}")
        logger.info(f"  Bridge: {self.target_chain.bridge_address}")
        logger.info(f"  Federation: {self.target_chain.federation_address}")

        logger.info("Monitoring Settings:")
        logger.info(f"  Polling Interval: {self.monitoring.polling_interval} seconds")
        logger.info(f"  Request Timeout: {self.monitoring.request_timeout} seconds")
        logger.info(f"  Retry Count: {self.monitoring.retry_count}")
        logger.info(f"  Retry Interval: {self.monitoring.retry_interval} seconds")
        logger.info(f"  Page Size: {self.monitoring.page_size} blocks")

        logger.info(f"Storage Path: {self.storage_path}")
        logger.info(f"Mode: {'LOCAL' if self.local_mode else 'ROFL'}")
        if self.local_mode:
            logger.info(f"  Private Key: {'[SET]' if self.private_key else '[NOT SET]'}")
        else:
            logger.info(f"  Federator Address: {self.federator_address}")
        logger.info("=" * 60)
