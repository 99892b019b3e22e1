"""
Vote decisions for Cross events.

This module decides, event by event, whether the federator still has to vote
on a crossing, keeping that logic separate from the pass orchestration.
"""

import logging
from collections.abc import Sequence

from .errors import FederatorError
from .federation import FederationContract
from .models import BlockRange, CrossEvent, VoteTally
from .vote_submitter import VoteSubmitter

logger = logging.getLogger(__name__)


class VoteDecisionEngine:
    """Votes on every crossing not yet processed nor voted by this federator."""

    def __init__(
        self,
        federation: FederationContract,
        submitter: VoteSubmitter,
        federator_address: str
    ) -> None:
        """Initialize the decision engine.

        Args:
            federation: Federation contract holding the vote state
            submitter: VoteSubmitter used to cast votes
            federator_address: Address whose votes ``hasVoted`` is checked for
        """
        self.federation = federation
        self.submitter = submitter
        self.federator_address = federator_address
        self.totals = VoteTally()

    async def process_event(self, event: CrossEvent) -> VoteTally:
        """
        Decide on a single crossing, voting if needed.

        Returns:
            A tally with exactly one counter set
        """
        logger.info(
            f"Processing event log: tx {event.transaction_hash} "
            f"log {event.log_index} block {event.block_number}"
        )
        transaction_id = self.federation.get_transaction_id(event)
        logger.info(f"Got transaction id: {transaction_id}")

        state = self.federation.get_vote_state(transaction_id, self.federator_address)
        if state.processed:
            logger.debug(
                f"Block: {event.block_hash} Tx: {event.transaction_hash} "
                f"token: {event.symbol} was already processed"
            )
            return VoteTally(already_processed=1)

        if state.voted_by_us:
            logger.debug(
                f"Block: {event.block_hash} Tx: {event.transaction_hash} "
                f"token: {event.symbol} has already been voted by us"
            )
            return VoteTally(already_voted=1)

        logger.info(
            f"Voting tx: {event.transaction_hash} block: {event.block_hash} token: {event.symbol}"
        )
        await self.submitter.submit(event, transaction_id)
        return VoteTally(voted=1)

    async def process(self, events: Sequence[CrossEvent], block_range: BlockRange) -> VoteTally:
        """
        Process the events of one block range sequentially, in the given order.

        Args:
            events: Events of the range in discovery order
            block_range: The range the events came from

        Returns:
            Tally of the decisions taken for the range

        Raises:
            FederatorError: The first failure, with event and range context;
                the remaining events of the range are not processed
        """
        tally = VoteTally()
        for event in events:
            try:
                tally.add(await self.process_event(event))
            except FederatorError as e:
                raise e.with_context(
                    f"Exception processing logs of blocks {block_range} "
                    f"at tx {event.transaction_hash} log {event.log_index}"
                ) from e

        self.totals.add(tally)
        if tally.total:
            logger.info(
                f"Blocks {block_range}: {tally.voted} voted, "
                f"{tally.already_processed} already processed, "
                f"{tally.already_voted} already voted"
            )
        return tally

    def get_stats(self) -> dict:
        """
        Get totals across every range processed so far.

        Returns:
            Dictionary with vote counters
        """
        return {
            'voted': self.totals.voted,
            'already_processed': self.totals.already_processed,
            'already_voted': self.totals.already_voted
        }
