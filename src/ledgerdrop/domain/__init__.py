"""Domain layer - core business logic."""

from .errors import (
    LedgerdropError,
    MaterializeError,
    ParseError,
    ParseErrorKind,
    RouteError,
)
from .models import (
    DocumentReference,
    FinalReport,
    IngestConfig,
    ProcessingOutcome,
    TransactionBatch,
    TransactionInput,
    TransactionKind,
)

__all__ = [
    "DocumentReference",
    "FinalReport",
    "IngestConfig",
    "LedgerdropError",
    "MaterializeError",
    "ParseError",
    "ParseErrorKind",
    "ProcessingOutcome",
    "RouteError",
    "TransactionBatch",
    "TransactionInput",
    "TransactionKind",
]
