"""
Source chain reads: chain height, chain id and Cross event logs.
"""

import logging
from collections.abc import Mapping
from typing import Any

from web3 import Web3
from web3.contract import Contract
from web3.types import EventData

from .errors import QueryError
from .models import BlockRange, CrossEvent


def _to_hex(value: Any) -> str:
    match value:
        case bytes() | bytearray():
            return Web3.to_hex(value)
        case str() if value.startswith('0x'):
            return value
        case str():
            return '0x' + value
        case _:
            raise TypeError(f"Unexpected hash type: {type(value)}")


def parse_cross_event(event: EventData) -> CrossEvent:
    """
    Build a CrossEvent from a decoded Cross log.

    Raises:
        QueryError: If the log misses fields or carries unexpected types
    """
    try:
        args: Mapping[str, Any] = event['args']
        return CrossEvent(
            token_address=args['_tokenAddress'],
            receiver=args['_to'],
            amount=int(args['_amount']),
            symbol=args['_symbol'],
            decimals=int(args['_decimals']),
            granularity=int(args['_granularity']),
            block_hash=_to_hex(event['blockHash']),
            transaction_hash=_to_hex(event['transactionHash']),
            log_index=int(event['logIndex']),
            block_number=int(event.get('blockNumber', 0)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise QueryError(f"Malformed Cross log {event!r}: {e}") from e


class EventSource:
    """
    Reads the source chain and its bridge contract.

    Failed or absent results always raise QueryError; an empty list of logs
    is only ever returned when the node answered with no logs.
    """

    def __init__(self, w3: Web3, bridge: Contract, event_name: str = "Cross"):
        """
        Initialize the event source.

        Args:
            w3: Web3 connection to the source chain
            bridge: Bridge contract bound on the source chain
            event_name: Name of the event to fetch
        """
        self.w3 = w3
        self.bridge = bridge
        self.event_name = event_name

        if not hasattr(self.bridge.events, event_name):
            raise ValueError(f"Event {event_name} not found in contract ABI")
        self.event_obj = getattr(self.bridge.events, event_name)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def get_current_height(self) -> int:
        try:
            height = self.w3.eth.block_number
        except Exception as e:
            raise QueryError(f"Failed to get block number: {e}") from e
        if height is None:
            raise QueryError("Node returned no block number")
        return int(height)

    def get_chain_id(self) -> int:
        try:
            chain_id = self.w3.eth.chain_id
        except Exception as e:
            raise QueryError(f"Failed to get chain id: {e}") from e
        if chain_id is None:
            raise QueryError("Node returned no chain id")
        return int(chain_id)

    def fetch(self, block_range: BlockRange) -> list[CrossEvent]:
        """
        Get the Cross events emitted in ``block_range``, in node order.

        Raises:
            QueryError: If the logs could not be obtained or decoded
        """
        self.logger.debug(
            f"Getting {self.event_name} events from block "
            f"{block_range.from_block} to {block_range.to_block}"
        )
        try:
            logs = self.event_obj.get_logs(
                from_block=block_range.from_block,
                to_block=block_range.to_block
            )
        except Exception as e:
            raise QueryError(f"Failed to obtain the logs for blocks {block_range}: {e}") from e

        if logs is None:
            raise QueryError(f"Failed to obtain the logs for blocks {block_range}: no result")

        events = [parse_cross_event(log) for log in logs]
        self.logger.info(f"Found {len(events)} logs in blocks {block_range}")
        return events
