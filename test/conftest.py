"""Shared fixtures and in-memory chain fakes for federator tests."""

import pytest
from web3 import Web3

from federator.checkpoint_store import CheckpointStore
from federator.decision_engine import VoteDecisionEngine
from federator.errors import QueryError
from federator.models import BlockRange, CrossEvent, VoteState
from federator.vote_submitter import VoteSubmitter

FEDERATOR_ADDRESS = Web3.to_checksum_address("0x" + "ab" * 20)
FEDERATION_ADDRESS = Web3.to_checksum_address("0x" + "cd" * 20)


def make_event(block_number: int = 500, log_index: int = 0, amount: int = 10**18) -> CrossEvent:
    """Build a Cross event located at ``block_number``."""
    return CrossEvent(
        token_address="0x" + "11" * 20,
        receiver="0x" + "22" * 20,
        amount=amount,
        symbol="tRIF",
        decimals=18,
        granularity=1,
        block_hash="0x" + f"{block_number:064x}",
        transaction_hash="0x" + f"{block_number:060x}{log_index:04x}",
        log_index=log_index,
        block_number=block_number,
    )


class FakeEventSource:
    """Source chain with a fixed height and events indexed by block."""

    def __init__(self, height: int = 2000, chain_id: int = 97, events: list[CrossEvent] | None = None):
        self.height = height
        self.chain_id = chain_id
        self.events = list(events or [])
        self.fetched: list[BlockRange] = []
        self.height_failures = 0
        self.fetch_failures = 0

    def get_current_height(self) -> int:
        if self.height_failures:
            self.height_failures -= 1
            raise QueryError("Failed to get block number: connection refused")
        return self.height

    def get_chain_id(self) -> int:
        return self.chain_id

    def fetch(self, block_range: BlockRange) -> list[CrossEvent]:
        if self.fetch_failures:
            self.fetch_failures -= 1
            raise QueryError(f"Failed to obtain the logs for blocks {block_range}: no result")
        self.fetched.append(block_range)
        return [
            event for event in self.events
            if block_range.from_block <= event.block_number <= block_range.to_block
        ]


class FakeFederation:
    """Federation contract keeping votes in memory."""

    def __init__(self, quorum: int = 2):
        self.address = FEDERATION_ADDRESS
        self.quorum = quorum
        self.votes: dict[str, set[str]] = {}
        self.processed: set[str] = set()
        self._pending: dict[str, str] = {}

    def get_transaction_id(self, event: CrossEvent) -> str:
        return Web3.to_hex(Web3.keccak(text=repr(event.vote_args())))

    def was_processed(self, transaction_id: str) -> bool:
        return transaction_id in self.processed

    def has_voted(self, transaction_id: str, federator_address: str) -> bool:
        return federator_address in self.votes.get(transaction_id, set())

    def get_vote_state(self, transaction_id: str, federator_address: str) -> VoteState:
        if self.was_processed(transaction_id):
            return VoteState(processed=True, voted_by_us=False)
        return VoteState(processed=False, voted_by_us=self.has_voted(transaction_id, federator_address))

    def encode_vote(self, event: CrossEvent) -> str:
        transaction_id = self.get_transaction_id(event)
        data = "0x" + transaction_id[2:] + "00"
        self._pending[data] = transaction_id
        return data

    def record_vote(self, data: str, sender: str) -> None:
        transaction_id = self._pending[data]
        voters = self.votes.setdefault(transaction_id, set())
        if sender in voters:
            raise AssertionError(f"Duplicate vote for {transaction_id}")
        voters.add(sender)
        if len(voters) >= self.quorum:
            self.processed.add(transaction_id)


class FakeSender:
    """Transaction sender delivering votes straight to a FakeFederation."""

    def __init__(self, federation: FakeFederation, address: str = FEDERATOR_ADDRESS):
        self.federation = federation
        self.address = address
        self.sent: list[tuple[str, str, int]] = []

    async def send(self, to: str, data: str, value: int = 0) -> str:
        self.sent.append((to, data, value))
        self.federation.record_vote(data, self.address)
        return "0x" + f"{len(self.sent):064x}"


@pytest.fixture
def federation():
    return FakeFederation()


@pytest.fixture
def sender(federation):
    return FakeSender(federation)


@pytest.fixture
def engine(federation, sender):
    submitter = VoteSubmitter(federation=federation, sender=sender)
    return VoteDecisionEngine(federation=federation, submitter=submitter, federator_address=sender.address)


@pytest.fixture
def checkpoint_store(tmp_path):
    return CheckpointStore(tmp_path / "db")
