"""
Federator service.

This module wires the federator components from configuration and runs passes
periodically, standing in for the external scheduler that invokes one pass at
a time.
"""

import asyncio
import logging

from web3 import Web3

from .checkpoint_store import CheckpointStore
from .config import FederatorConfig
from .decision_engine import VoteDecisionEngine
from .event_source import EventSource
from .federation import FederationContract
from .federator import Federator
from .models import PassResult
from .transaction_sender import LocalTransactionSender, RoflTransactionSender, TransactionSender
from .utils.appd_client import AppdClient
from .utils.contract_utility import ContractUtility
from .vote_submitter import VoteSubmitter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class FederatorService:
    """
    Builds the federator from configuration and schedules its passes.

    This class focuses on wiring and lifecycle management, delegating the
    pass itself to the Federator run controller.
    """

    def __init__(self, config: FederatorConfig):
        """
        Initialize the federator service.

        Args:
            config: Federator configuration
        """
        self.config = config
        self.local_mode = config.local_mode
        self.running = False
        self.passes = 0

        self._init_utilities()

        self.event_source = EventSource(
            w3=self.source_util.w3,
            bridge=self.source_util.get_contract("Bridge", config.source_chain.bridge_address)
        )
        self.federation = FederationContract(
            self.target_util.get_contract("Federation", config.target_chain.federation_address)
        )
        self.vote_submitter = VoteSubmitter(
            federation=self.federation,
            sender=self.sender,
            target_bridge_address=config.target_chain.bridge_address
        )
        self.engine = VoteDecisionEngine(
            federation=self.federation,
            submitter=self.vote_submitter,
            federator_address=self.sender.address
        )
        self.federator = Federator(
            event_source=self.event_source,
            engine=self.engine,
            checkpoint_store=CheckpointStore(config.storage_path),
            floor_height=config.source_chain.from_block,
            monitoring=config.monitoring
        )

        # Async coordination
        self.shutdown_event = asyncio.Event()

    def _init_utilities(self) -> None:
        """Initialize chain connections and the transaction sender."""
        timeout = self.config.monitoring.request_timeout
        self.source_util = ContractUtility(self.config.source_chain.rpc_url, request_timeout=timeout)

        self.sender: TransactionSender
        if self.local_mode:
            self.target_util = ContractUtility(
                self.config.target_chain.rpc_url,
                secret=self.config.private_key,
                request_timeout=timeout
            )
            self.sender = LocalTransactionSender(self.target_util)
        else:
            self.target_util = ContractUtility(self.config.target_chain.rpc_url, request_timeout=timeout)
            self.sender = RoflTransactionSender(AppdClient(), self.config.federator_address)

        logger.info(
            f"Initialized {'local' if self.local_mode else 'ROFL'} transaction sender "
            f"for federator {self.sender.address}"
        )

    @classmethod
    def from_env(cls, local_mode: bool = False) -> "FederatorService":
        """
        Create a FederatorService instance from environment variables.

        Args:
            local_mode: Sign transactions with a local private key

        Returns:
            Configured FederatorService instance

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        config = FederatorConfig.from_env(local_mode=local_mode)
        config.log_config()
        return cls(config)

    async def run_once(self) -> PassResult:
        """Run a single federator pass."""
        result = await self.federator.run()
        self.passes += 1
        return result

    async def run(self) -> None:
        """
        Run passes every polling interval until stopped.

        Raises:
            FatalFederatorError: If a pass fails fatally
        """
        self.running = True
        interval = self.config.monitoring.polling_interval
        logger.info(f"Federator starting, running a pass every {interval}s")

        try:
            while self.running:
                await self.run_once()
                logger.info(f"Status: {self.passes} passes, votes {self.engine.get_stats()}")

                try:
                    await asyncio.wait_for(self.shutdown_event.wait(), timeout=interval)
                    break  # Shutdown requested
                except asyncio.TimeoutError:
                    pass  # Next pass
        finally:
            self.running = False
            logger.info("Federator stopped")

    def stop(self) -> None:
        """Stop the service after the current pass."""
        self.running = False
        self.shutdown_event.set()
