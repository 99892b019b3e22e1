"""
Casting votes on the Federation contract.
"""

import logging

from .errors import SubmissionError
from .federation import FederationContract
from .models import CrossEvent
from .transaction_sender import TransactionSender

logger = logging.getLogger(__name__)


class VoteSubmitter:
    """Encodes ``voteTransaction`` calls and hands them to a transaction sender."""

    def __init__(
        self,
        federation: FederationContract,
        sender: TransactionSender,
        target_bridge_address: str | None = None
    ) -> None:
        """
        Initialize the VoteSubmitter.

        Args:
            federation: Federation contract on the destination chain
            sender: Sender signing and broadcasting the vote
            target_bridge_address: Destination bridge, only used in logs
        """
        self.federation = federation
        self.sender = sender
        self.target_bridge_address = target_bridge_address

    async def submit(self, event: CrossEvent, transaction_id: str) -> str:
        """
        Vote for a crossing. Votes are never retried here.

        Args:
            event: The crossing to vote for
            transaction_id: Identity of the crossing, used for logging

        Returns:
            Transaction hash reported by the sender

        Raises:
            SubmissionError: If the vote could not be encoded or sent
        """
        logger.info(
            f"Voting transfer {event.amount} of {event.symbol} through destination bridge "
            f"{self.target_bridge_address} to receiver {event.receiver}"
        )
        try:
            data = self.federation.encode_vote(event)
        except Exception as e:
            raise SubmissionError(
                f"Exception encoding vote for tx:{event.transaction_hash} block:{event.block_hash}: {e}"
            ) from e

        logger.debug(
            f"voteTransaction({', '.join(str(arg) for arg in event.vote_args())})"
        )
        try:
            tx_hash = await self.sender.send(self.federation.address, data, 0)
        except Exception as e:
            raise SubmissionError(
                f"Exception voting tx:{event.transaction_hash} block:{event.block_hash} "
                f"token {event.symbol}: {e}"
            ) from e

        logger.info(
            f"Voted transaction:{event.transaction_hash} of block:{event.block_hash} "
            f"token {event.symbol} to Federation contract with transaction id:{transaction_id}"
        )
        return tx_hash
