"""
Block range planning.

Turns the current chain height, the chain's confirmation depth and the last
checkpoint into the ordered list of block ranges one pass has to scan.
"""

import logging

from .config import CHAIN_CONFIRMATIONS
from .errors import ConfigurationError
from .models import BlockRange

logger = logging.getLogger(__name__)


def confirmations_for_chain(chain_id: int) -> int:
    """Confirmation depth for a source chain; unknown chains need none."""
    return CHAIN_CONFIRMATIONS.get(int(chain_id), 0)


def safe_height(current_height: int, confirmations: int) -> int:
    """Highest block considered safe from reorganization."""
    return current_height - confirmations


def plan_ranges(
    current_height: int,
    confirmations: int,
    checkpoint: int | None,
    floor_height: int,
    page_size: int,
) -> list[BlockRange]:
    """
    Split the unprocessed, confirmed part of the chain into pages.

    Args:
        current_height: Latest block number of the source chain
        confirmations: Blocks to stay behind the chain head
        checkpoint: Last fully processed height, None if never saved
        floor_height: Blocks at or below this height are never scanned
        page_size: Maximum number of blocks per range

    Returns:
        Contiguous, non-overlapping ranges covering
        ``[max(checkpoint, floor_height) + 1, current_height - confirmations]``;
        an empty list when there is nothing to do.

    Raises:
        ConfigurationError: If page_size is not positive
    """
    if page_size < 1:
        raise ConfigurationError(f"Page size must be positive, got {page_size}")

    to_block = safe_height(current_height, confirmations)
    if to_block <= 0:
        logger.debug(f"Chain height {current_height} has not reached {confirmations} confirmations")
        return []

    last_processed = floor_height if checkpoint is None else max(checkpoint, floor_height)
    from_block = last_processed + 1
    if from_block > to_block:
        logger.warning(
            f"Current chain height {to_block} is the same or lesser than "
            f"the last block processed {last_processed}"
        )
        return []

    ranges = []
    start = from_block
    while start <= to_block:
        end = min(start + page_size - 1, to_block)
        ranges.append(BlockRange(start, end))
        start = end + 1

    logger.debug(f"Total pages {len(ranges)}, blocks per page {page_size}")
    return ranges
