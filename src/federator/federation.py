"""
Calls against the destination chain's Federation contract.
"""

import logging

from web3 import Web3
from web3.contract import Contract

from .errors import QueryError
from .models import CrossEvent, VoteState

logger = logging.getLogger(__name__)


class FederationContract:
    """Read-only calls and vote encoding for the Federation contract."""

    def __init__(self, contract: Contract):
        self.contract = contract

    @property
    def address(self) -> str:
        return self.contract.address

    def get_transaction_id(self, event: CrossEvent) -> str:
        """
        Ask the contract for the identity of a crossing.

        Returns:
            The bytes32 transaction id as a 0x-prefixed hex string
        """
        try:
            transaction_id = self.contract.functions.getTransactionId(*event.vote_args()).call()
        except Exception as e:
            raise QueryError(f"getTransactionId failed for tx {event.transaction_hash}: {e}") from e
        if not transaction_id:
            raise QueryError(f"getTransactionId returned nothing for tx {event.transaction_hash}")
        return Web3.to_hex(transaction_id) if isinstance(transaction_id, bytes) else transaction_id

    def was_processed(self, transaction_id: str) -> bool:
        try:
            return bool(self.contract.functions.transactionWasProcessed(transaction_id).call())
        except Exception as e:
            raise QueryError(f"transactionWasProcessed failed for {transaction_id}: {e}") from e

    def has_voted(self, transaction_id: str, federator_address: str) -> bool:
        try:
            return bool(
                self.contract.functions.hasVoted(transaction_id).call({'from': federator_address})
            )
        except Exception as e:
            raise QueryError(f"hasVoted failed for {transaction_id}: {e}") from e

    def get_vote_state(self, transaction_id: str, federator_address: str) -> VoteState:
        """Query both flags; ``voted_by_us`` is not queried once processed."""
        if self.was_processed(transaction_id):
            return VoteState(processed=True, voted_by_us=False)
        return VoteState(
            processed=False,
            voted_by_us=self.has_voted(transaction_id, federator_address)
        )

    def encode_vote(self, event: CrossEvent) -> str:
        """Calldata for ``voteTransaction`` with the event's fields."""
        return self.contract.encode_abi("voteTransaction", args=list(event.vote_args()))
