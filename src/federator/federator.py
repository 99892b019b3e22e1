"""
Run controller for one federator pass.

A pass plans the confirmed, unprocessed block ranges, scans each of them for
Cross events, votes where needed and checkpoints each range once it has been
fully processed. Failed passes are retried from scratch a bounded number of
times before failing fatally.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from .checkpoint_store import CheckpointStore
from .config import MonitoringConfig
from .decision_engine import VoteDecisionEngine
from .errors import FatalFederatorError, FederatorError
from .event_source import EventSource
from .models import PassResult, RunState
from .range_planner import confirmations_for_chain, plan_ranges, safe_height

logger = logging.getLogger(__name__)


class Federator:
    """
    Drives passes over the source chain.

    All collaborators are injected so that chain access, vote submission and
    storage can be replaced in tests.
    """

    def __init__(
        self,
        event_source: EventSource,
        engine: VoteDecisionEngine,
        checkpoint_store: CheckpointStore,
        floor_height: int = 0,
        monitoring: MonitoringConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ) -> None:
        """
        Initialize the run controller.

        Args:
            event_source: Source chain reader
            engine: Decision engine voting on events
            checkpoint_store: Store of the last processed block
            floor_height: Blocks at or below this height are never scanned
            monitoring: Page size and retry settings
            sleep: Coroutine used to wait between attempts
        """
        self.event_source = event_source
        self.engine = engine
        self.checkpoint_store = checkpoint_store
        self.floor_height = floor_height
        self.monitoring = monitoring or MonitoringConfig()
        self._sleep = sleep
        self.state = RunState.IDLE

    async def run(self) -> PassResult:
        """
        Run one pass, retrying failed attempts.

        Returns:
            Result of the successful attempt

        Raises:
            FatalFederatorError: If attempts are exhausted or a fatal error occurred
        """
        retry_count = self.monitoring.retry_count
        attempt = 0
        while True:
            attempt += 1
            self.state = RunState.RUNNING
            try:
                result = await self._run_pass()
            except Exception as e:
                # Unexpected exceptions get the same retries as failed queries
                if isinstance(e, FederatorError) and not e.retryable:
                    self.state = RunState.FAILED_FATAL
                    logger.critical(f"Fatal error running federator: {e}", exc_info=True)
                    raise FatalFederatorError(f"Fatal error running federator: {e}", attempt) from e

                self.state = RunState.FAILED_RETRYABLE
                logger.error(
                    f"Exception running federator (attempt {attempt}/{retry_count}): {e}",
                    exc_info=True
                )
                if attempt >= retry_count:
                    self.state = RunState.FAILED_FATAL
                    logger.critical(f"Federator failed after {attempt} attempts")
                    raise FatalFederatorError(
                        f"Federator failed after {attempt} attempts: {e}", attempt
                    ) from e
                await self._sleep(self.monitoring.retry_interval)
                continue

            self.state = RunState.SUCCESS
            return result

    async def _run_pass(self) -> PassResult:
        current_height = self.event_source.get_current_height()
        chain_id = self.event_source.get_chain_id()
        confirmations = confirmations_for_chain(chain_id)
        logger.info(f"Running to block {safe_height(current_height, confirmations)}")

        checkpoint = self.checkpoint_store.load()
        ranges = plan_ranges(
            current_height,
            confirmations,
            checkpoint,
            self.floor_height,
            self.monitoring.page_size
        )
        if not ranges:
            return PassResult.no_work()

        logger.debug(f"Running from block {ranges[0].from_block}")
        result = PassResult(last_checkpoint=checkpoint)
        for page, block_range in enumerate(ranges, start=1):
            logger.debug(
                f"Page {page} getting events from block "
                f"{block_range.from_block} to {block_range.to_block}"
            )
            events = self.event_source.fetch(block_range)
            tally = await self.engine.process(events, block_range)
            self.checkpoint_store.save(block_range.to_block)

            result.ranges_processed += 1
            result.events_seen += len(events)
            result.tally.add(tally)
            result.last_checkpoint = block_range.to_block

        logger.info(
            f"Pass complete: {result.ranges_processed} ranges, {result.events_seen} events, "
            f"{result.tally.voted} votes, checkpoint {result.last_checkpoint}"
        )
        return result
