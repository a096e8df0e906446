"""Domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

DEFAULT_FALLBACK_ITEM = 6741
DEFAULT_CREDIT_MEMO_LINE_FIELDS = {
    "custcol12": 1,  # resolved by
    "custcol_dept_at_fault": 1,
    "custcol_error_type": 1,
    "custcol14": 1,  # collected by
    "custcol16": 1,  # dispatch method
}
DEFAULT_REPORT_PREFIX = "create_tx_report_"


class TransactionKind(str, Enum):
    """Kind of financial record a transaction is materialized as."""

    INVOICE = "invoice"
    CREDIT_MEMO = "creditmemo"

    @property
    def label(self) -> str:
        return "Invoice" if self is TransactionKind.INVOICE else "Credit Memo"


@dataclass(frozen=True)
class DocumentReference:
    """A pending input document."""

    id: str
    name: str


@dataclass
class TransactionInput:
    """One invoice or credit memo entry of a batch document."""

    customer: Any
    subsidiary: Any
    ar_account: Any
    amount: Any
    trandate: str | None = None
    item: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransactionInput":
        if not isinstance(data, Mapping):
            raise ValueError(
                f"Transaction entry must be an object, got {type(data).__name__}"
            )
        return cls(
            customer=data.get("customer"),
            subsidiary=data.get("subsidiary"),
            ar_account=data.get("arAccount"),
            amount=data.get("amount"),
            trandate=data.get("trandate"),
            item=data.get("item"),
        )


@dataclass
class TransactionBatch:
    """Decoded content of one document."""

    invoices: list[TransactionInput] = field(default_factory=list)
    credit_memos: list[TransactionInput] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.invoices) + len(self.credit_memos)


@dataclass
class ProcessingOutcome:
    """Result of attempting every transaction in one document."""

    document_name: str
    document_id: str
    created_invoice_ids: list[str] = field(default_factory=list)
    created_credit_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    location: str | None = None  # Where the document ended up

    @classmethod
    def for_document(cls, ref: DocumentReference) -> "ProcessingOutcome":
        return cls(document_name=ref.name, document_id=ref.id)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "documentName": self.document_name,
            "documentId": self.document_id,
            "createdInvoiceIds": list(self.created_invoice_ids),
            "createdCreditIds": list(self.created_credit_ids),
            "errors": list(self.errors),
            "location": self.location,
        }


@dataclass(frozen=True)
class FinalReport:
    """Summary of one ingestion run."""

    timestamp: datetime
    results: tuple[ProcessingOutcome, ...] = ()

    @property
    def files_processed(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> list[ProcessingOutcome]:
        return [r for r in self.results if not r.success]

    def artifact_name(self, prefix: str = DEFAULT_REPORT_PREFIX) -> str:
        """Unique artifact name derived from the report timestamp."""
        stamp = self.timestamp.isoformat().replace(":", "-").replace(".", "-")
        return f"{prefix}{stamp}.json"

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "filesProcessed": self.files_processed,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True)
class IngestConfig:
    """Immutable pipeline configuration handed to the domain services."""

    input_location: str = "input"
    success_location: str = "success"
    error_location: str = "error"
    fallback_item: Any = DEFAULT_FALLBACK_ITEM
    credit_memo_line_fields: Mapping[str, Any] = field(
        default_factory=lambda: dict(DEFAULT_CREDIT_MEMO_LINE_FIELDS)
    )
    enable_sourcing: bool = True
    ignore_mandatory_fields: bool = True
    report_prefix: str = DEFAULT_REPORT_PREFIX

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "credit_memo_line_fields",
            MappingProxyType(dict(self.credit_memo_line_fields)),
        )
