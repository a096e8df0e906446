"""Unit tests for domain models."""

from datetime import datetime, timezone

import pytest

from ledgerdrop.domain.models import (
    DocumentReference,
    FinalReport,
    IngestConfig,
    ProcessingOutcome,
    TransactionInput,
    TransactionKind,
)


class TestProcessingOutcome:
    """Tests for ProcessingOutcome."""

    def test_defaults(self) -> None:
        outcome = ProcessingOutcome.for_document(DocumentReference("7", "a.json"))
        assert outcome.document_id == "7"
        assert outcome.document_name == "a.json"
        assert outcome.created_invoice_ids == []
        assert outcome.created_credit_ids == []
        assert outcome.errors == []
        assert outcome.location is None

    def test_success_when_no_errors(self) -> None:
        outcome = ProcessingOutcome("a.json", "7", created_invoice_ids=["1"])
        assert outcome.success is True

    def test_failure_when_has_errors(self) -> None:
        outcome = ProcessingOutcome("a.json", "7", created_invoice_ids=["1"])
        outcome.errors.append("Credit Memo error: boom")
        assert outcome.success is False

    def test_to_dict_uses_report_keys(self) -> None:
        outcome = ProcessingOutcome(
            "a.json", "7", ["1"], ["2"], ["Invoice error: x"], location="error"
        )
        assert outcome.to_dict() == {
            "documentName": "a.json",
            "documentId": "7",
            "createdInvoiceIds": ["1"],
            "createdCreditIds": ["2"],
            "errors": ["Invoice error: x"],
            "location": "error",
        }


class TestFinalReport:
    """Tests for FinalReport."""

    STAMP = datetime(2025, 10, 20, 8, 30, 15, 123000, tzinfo=timezone.utc)

    def test_empty_report(self) -> None:
        report = FinalReport(timestamp=self.STAMP)
        assert report.files_processed == 0
        assert report.to_dict() == {
            "timestamp": "2025-10-20T08:30:15.123000+00:00",
            "filesProcessed": 0,
            "results": [],
        }

    def test_failed_lists_outcomes_with_errors(self) -> None:
        ok = ProcessingOutcome("a.json", "a.json")
        bad = ProcessingOutcome("b.json", "b.json", errors=["Invalid JSON structure"])
        report = FinalReport(timestamp=self.STAMP, results=(ok, bad))
        assert report.files_processed == 2
        assert report.failed == [bad]

    def test_artifact_name_has_no_colons_or_dots_in_stamp(self) -> None:
        name = FinalReport(timestamp=self.STAMP).artifact_name()
        assert name == "create_tx_report_2025-10-20T08-30-15-123000+00-00.json"

    def test_artifact_name_custom_prefix(self) -> None:
        name = FinalReport(timestamp=self.STAMP).artifact_name("run_")
        assert name.startswith("run_2025-10-20")


class TestTransactionInput:
    """Tests for TransactionInput.from_dict."""

    def test_maps_document_keys(self) -> None:
        entry = TransactionInput.from_dict(
            {
                "customer": 123,
                "subsidiary": 1,
                "arAccount": 456,
                "amount": 500,
                "trandate": "2025-10-20",
                "item": 999,
            }
        )
        assert entry == TransactionInput(123, 1, 456, 500, "2025-10-20", 999)

    def test_optional_fields_default_to_none(self) -> None:
        entry = TransactionInput.from_dict({"customer": 1, "amount": 10})
        assert entry.trandate is None
        assert entry.item is None
        assert entry.ar_account is None

    def test_rejects_non_object(self) -> None:
        with pytest.raises(ValueError, match="must be an object"):
            TransactionInput.from_dict([1, 2])  # type: ignore[arg-type]


class TestIngestConfig:
    """Tests for IngestConfig."""

    def test_defaults(self) -> None:
        config = IngestConfig()
        assert config.fallback_item == 6741
        assert config.input_location == "input"
        assert config.success_location == "success"
        assert config.error_location == "error"
        assert set(config.credit_memo_line_fields) == {
            "custcol12",
            "custcol_dept_at_fault",
            "custcol_error_type",
            "custcol14",
            "custcol16",
        }

    def test_line_fields_are_read_only(self) -> None:
        source = {"custcol12": 1}
        config = IngestConfig(credit_memo_line_fields=source)
        source["custcol12"] = 2
        assert config.credit_memo_line_fields["custcol12"] == 1
        with pytest.raises(TypeError):
            config.credit_memo_line_fields["custcol12"] = 3  # type: ignore[index]


class TestTransactionKind:
    def test_labels(self) -> None:
        assert TransactionKind.INVOICE.label == "Invoice"
        assert TransactionKind.CREDIT_MEMO.label == "Credit Memo"
