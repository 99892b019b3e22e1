#!/usr/bin/env python3
"""Transaction sending for the federator.

This module hands encoded calls to the destination chain, supporting both
local mode (key held by the process, signed through web3 middleware) and
production mode (signed and submitted by ROFL appd).
"""

import logging
from typing import TYPE_CHECKING, Protocol

from web3 import Web3
from web3.types import HexBytes, TxParams, TxReceipt, Wei

from .errors import SubmissionError

if TYPE_CHECKING:
    from .utils.appd_client import AppdClient
    from .utils.contract_utility import ContractUtility

logger = logging.getLogger(__name__)

VOTE_GAS_LIMIT = 3_000_000


class TransactionSender(Protocol):
    """Sends a transaction on the destination chain."""

    @property
    def address(self) -> str: ...

    async def send(self, to: str, data: str, value: int = 0) -> str: ...


class LocalTransactionSender:
    """Signs with a local key and waits for the transaction to be mined."""

    def __init__(
        self,
        contract_util: "ContractUtility",
        gas_limit: int = VOTE_GAS_LIMIT,
        receipt_timeout: int = 120
    ) -> None:
        """
        Initialize the sender.

        Args:
            contract_util: Contract utility initialized with a signing key
            gas_limit: Gas limit for every transaction
            receipt_timeout: Seconds to wait for the receipt
        """
        if not contract_util.address:
            raise ValueError("LocalTransactionSender requires a contract utility with a signing key")
        self.contract_util = contract_util
        self.gas_limit = gas_limit
        self.receipt_timeout = receipt_timeout

    @property
    def address(self) -> str:
        return self.contract_util.address

    async def send(self, to: str, data: str, value: int = 0) -> str:
        """
        Send a transaction and wait for a successful receipt.

        Returns:
            Transaction hash

        Raises:
            SubmissionError: If sending fails or the transaction reverts
        """
        w3 = self.contract_util.w3
        try:
            tx_params: TxParams = {
                'from': self.address,
                'to': Web3.to_checksum_address(to),
                'data': data,
                'value': Wei(value),
                'gas': self.gas_limit,
                'gasPrice': w3.eth.gas_price
            }
            tx_hash: HexBytes = w3.eth.send_transaction(tx_params)
            logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")

            receipt: TxReceipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except Exception as e:
            raise SubmissionError(f"Local transaction to {to} failed: {e}") from e

        if (status := receipt.get('status', 0)) != 1:
            raise SubmissionError(
                f"Transaction {Web3.to_hex(tx_hash)} failed with status={status}"
            )

        logger.info(f"Transaction confirmed in block {receipt['blockNumber']}")
        return Web3.to_hex(tx_hash)


class RoflTransactionSender:
    """Hands transactions to ROFL appd, which signs with the app's key."""

    def __init__(self, appd_client: "AppdClient", address: str, gas_limit: int = VOTE_GAS_LIMIT) -> None:
        """
        Initialize the sender.

        Args:
            appd_client: Client for the ROFL appd API
            address: On-chain address of the ROFL app key
            gas_limit: Gas limit for every transaction
        """
        self.appd_client = appd_client
        self._address = Web3.to_checksum_address(address)
        self.gas_limit = gas_limit

    @property
    def address(self) -> str:
        return self._address

    async def send(self, to: str, data: str, value: int = 0) -> str:
        tx_params: TxParams = {
            'to': Web3.to_checksum_address(to),
            'data': data,
            'value': Wei(value),
            'gas': self.gas_limit
        }
        logger.debug(f"Submitting transaction to ROFL with gas={self.gas_limit}")
        await self.appd_client.submit_tx(tx_params)
        # ROFL does not report a transaction hash
        return "ROFL_SUBMITTED"
