#!/usr/bin/env python3
"""Unit tests for the transaction senders."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from web3 import Web3
from web3.types import Wei

from federator.errors import SubmissionError
from federator.transaction_sender import (
    VOTE_GAS_LIMIT,
    LocalTransactionSender,
    RoflTransactionSender,
)

from conftest import FEDERATION_ADDRESS, FEDERATOR_ADDRESS


@pytest.fixture
def mock_contract_util():
    """Create a mock ContractUtility with a signing account."""
    mock = MagicMock()
    mock.address = FEDERATOR_ADDRESS
    mock.w3.eth.gas_price = Wei(1000000000)  # 1 gwei
    mock.w3.eth.send_transaction = MagicMock(return_value=b"\x12" * 32)
    mock.w3.eth.wait_for_transaction_receipt = MagicMock(
        return_value={'status': 1, 'blockNumber': 4242}
    )
    return mock


@pytest.fixture
def mock_appd_client():
    mock = MagicMock()
    mock.submit_tx = AsyncMock(return_value={"ok": b""})
    return mock


class TestLocalTransactionSender:
    """Test suite for LocalTransactionSender."""

    def test_requires_signing_key(self, mock_contract_util):
        mock_contract_util.address = None

        with pytest.raises(ValueError):
            LocalTransactionSender(mock_contract_util)

    @pytest.mark.asyncio
    async def test_send_success(self, mock_contract_util):
        sender = LocalTransactionSender(mock_contract_util)

        tx_hash = await sender.send(FEDERATION_ADDRESS.lower(), "0xdeadbeef", 0)

        assert tx_hash == "0x" + "12" * 32
        assert sender.address == FEDERATOR_ADDRESS
        mock_contract_util.w3.eth.send_transaction.assert_called_once_with({
            'from': FEDERATOR_ADDRESS,
            'to': FEDERATION_ADDRESS,
            'data': "0xdeadbeef",
            'value': Wei(0),
            'gas': VOTE_GAS_LIMIT,
            'gasPrice': Wei(1000000000)
        })
        mock_contract_util.w3.eth.wait_for_transaction_receipt.assert_called_once_with(
            b"\x12" * 32, timeout=120
        )

    @pytest.mark.asyncio
    async def test_reverted_transaction(self, mock_contract_util):
        mock_contract_util.w3.eth.wait_for_transaction_receipt.return_value = {
            'status': 0, 'blockNumber': 4242
        }

        with pytest.raises(SubmissionError, match="status=0"):
            await LocalTransactionSender(mock_contract_util).send(FEDERATION_ADDRESS, "0xdeadbeef")

    @pytest.mark.asyncio
    async def test_send_failure(self, mock_contract_util):
        mock_contract_util.w3.eth.send_transaction.side_effect = ValueError("insufficient funds for gas")

        with pytest.raises(SubmissionError, match="insufficient funds"):
            await LocalTransactionSender(mock_contract_util).send(FEDERATION_ADDRESS, "0xdeadbeef")


class TestRoflTransactionSender:
    """Test suite for RoflTransactionSender."""

    @pytest.mark.asyncio
    async def test_send_via_appd(self, mock_appd_client):
        sender = RoflTransactionSender(mock_appd_client, FEDERATOR_ADDRESS.lower(), gas_limit=500000)

        result = await sender.send(FEDERATION_ADDRESS, "0xdeadbeef", 0)

        assert result == "ROFL_SUBMITTED"
        assert sender.address == Web3.to_checksum_address(FEDERATOR_ADDRESS)
        mock_appd_client.submit_tx.assert_awaited_once_with({
            'to': FEDERATION_ADDRESS,
            'data': "0xdeadbeef",
            'value': Wei(0),
            'gas': 500000
        })

    @pytest.mark.asyncio
    async def test_appd_failure_propagates(self, mock_appd_client):
        mock_appd_client.submit_tx.side_effect = SubmissionError("ROFL transaction failed: nonce")

        with pytest.raises(SubmissionError, match="nonce"):
            await RoflTransactionSender(mock_appd_client, FEDERATOR_ADDRESS).send(
                FEDERATION_ADDRESS, "0xdeadbeef"
            )
