"""
Bridge federator package.

Watches a source chain bridge for Cross events and votes them on the
destination chain's Federation contract.
"""

from .checkpoint_store import CheckpointStore
from .config import FederatorConfig
from .decision_engine import VoteDecisionEngine
from .errors import (
    ConfigurationError,
    FatalFederatorError,
    FederatorError,
    QueryError,
    StorageError,
    SubmissionError,
)
from .event_source import EventSource
from .federator import Federator
from .models import BlockRange, CrossEvent, PassResult
from .range_planner import confirmations_for_chain, plan_ranges
from .service import FederatorService

__all__ = [
    "BlockRange",
    "CheckpointStore",
    "ConfigurationError",
    "CrossEvent",
    "EventSource",
    "FatalFederatorError",
    "Federator",
    "FederatorConfig",
    "FederatorError",
    "FederatorService",
    "PassResult",
    "QueryError",
    "StorageError",
    "SubmissionError",
    "VoteDecisionEngine",
    "confirmations_for_chain",
    "plan_ranges",
]
__version__ = "0.1.0"
