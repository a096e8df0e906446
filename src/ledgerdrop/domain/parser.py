"""Batch document parsing."""

import json
import logging
from typing import Any

from ..ports.documents import DocumentStorePort
from .errors import ParseError, ParseErrorKind
from .models import DocumentReference, TransactionBatch, TransactionInput

logger = logging.getLogger(__name__)


def _entries(data: dict[str, Any], key: str) -> list[TransactionInput]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f'"{key}" must be a list, got {type(raw).__name__}')
    return [TransactionInput.from_dict(entry) for entry in raw]


def decode_batch(content: str | bytes) -> TransactionBatch:
    """Decode JSON document content into a transaction batch.

    Missing "invoices" or "creditMemos" keys are treated as empty lists.
    Raises ParseError(MALFORMED_CONTENT) for invalid JSON or a wrong shape.
    """
    try:
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(
                f"Document must be a JSON object, got {type(data).__name__}"
            )
        return TransactionBatch(
            invoices=_entries(data, "invoices"),
            credit_memos=_entries(data, "creditMemos"),
        )
    except (ValueError, TypeError, RecursionError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors;
        # RecursionError comes from deeply nested arrays or objects
        raise ParseError(
            ParseErrorKind.MALFORMED_CONTENT, f"Invalid JSON structure: {e}", e
        ) from e


class BatchParser:
    """Loads documents from the store and decodes them."""

    def __init__(self, documents: DocumentStorePort) -> None:
        self.documents = documents

    def parse(self, ref: DocumentReference) -> TransactionBatch:
        try:
            content = self.documents.load(ref.id)
        except Exception as e:
            raise ParseError(
                ParseErrorKind.LOAD_FAILED, f"Cannot load {ref.name}: {e}", e
            ) from e

        batch = decode_batch(content)
        logger.debug(
            f"Parsed {ref.name}: {len(batch.invoices)} invoice(s), "
            f"{len(batch.credit_memos)} credit memo(s)"
        )
        return batch
