"""
Shared data models for the federator.

This module contains data classes and types used across the federator components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class CrossEvent:
    """Represents a Cross event emitted by the source chain bridge.

    Attributes:
        token_address: Address of the token on the source chain
        receiver: Address receiving the tokens on the destination chain
        amount: Amount crossed, in the token's smallest unit
        symbol: Token symbol
        decimals: Token decimal precision
        granularity: Token granularity
        block_hash: Hash of the block holding the event (0x-prefixed)
        transaction_hash: Hash of the transaction emitting the event (0x-prefixed)
        log_index: Index of the log within the block
        block_number: Block number, informational only
    """
    token_address: str
    receiver: str
    amount: int
    symbol: str
    decimals: int
    granularity: int
    block_hash: str
    transaction_hash: str
    log_index: int
    block_number: int = 0

    def vote_args(self) -> tuple[Any, ...]:
        """Arguments shared by ``getTransactionId`` and ``voteTransaction``."""
        return (
            self.token_address,
            self.receiver,
            self.amount,
            self.symbol,
            self.block_hash,
            self.transaction_hash,
            self.log_index,
            self.decimals,
            self.granularity,
        )


@dataclass(frozen=True, slots=True)
class BlockRange:
    """Inclusive range of source chain blocks."""
    from_block: int
    to_block: int

    def __len__(self) -> int:
        return self.to_block - self.from_block + 1

    def __str__(self) -> str:
        return f"[{self.from_block}, {self.to_block}]"


@dataclass(frozen=True, slots=True)
class VoteState:
    """Vote status of a transaction as reported by the Federation contract."""
    processed: bool
    voted_by_us: bool


@dataclass(slots=True)
class VoteTally:
    """Counts of decisions taken while processing events."""
    voted: int = 0
    already_processed: int = 0
    already_voted: int = 0

    @property
    def total(self) -> int:
        return self.voted + self.already_processed + self.already_voted

    def add(self, other: "VoteTally") -> None:
        self.voted += other.voted
        self.already_processed += other.already_processed
        self.already_voted += other.already_voted


@dataclass(slots=True)
class PassResult:
    """Outcome of one successful federator pass."""
    ranges_processed: int = 0
    events_seen: int = 0
    tally: VoteTally = field(default_factory=VoteTally)
    last_checkpoint: int | None = None

    @property
    def had_work(self) -> bool:
        return self.ranges_processed > 0

    @classmethod
    def no_work(cls) -> "PassResult":
        return cls()


class RunState(Enum):
    """States of the run controller."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED_RETRYABLE = "failed_retryable"
    FAILED_FATAL = "failed_fatal"
