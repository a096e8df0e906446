"""Shared test fixtures."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ledgerdrop.adapters.documents import FilesystemDocumentStore
from ledgerdrop.adapters.records import InMemoryRecordStore
from ledgerdrop.domain.models import IngestConfig, TransactionInput, TransactionKind
from ledgerdrop.ports.documents import DocumentStorePort
from ledgerdrop.ports.records import RecordHandle, RecordStorePort

CREDIT_FIELDS = {"custcol12": 7, "custcol_error_type": 3}


@pytest.fixture
def ingest_config() -> IngestConfig:
    """Pipeline config with distinct test values."""
    return IngestConfig(fallback_item=42, credit_memo_line_fields=CREDIT_FIELDS)


@pytest.fixture
def folders(tmp_path: Path) -> dict[str, Path]:
    locations = {name: tmp_path / name for name in ("input", "success", "error")}
    for path in locations.values():
        path.mkdir()
    return locations


@pytest.fixture
def document_store(folders: dict[str, Path]) -> FilesystemDocumentStore:
    return FilesystemDocumentStore(folders)


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    """Record store that knows customers 1 and 2."""
    return InMemoryRecordStore(
        known_customers=[1, 2],
        mandatory_line_fields={TransactionKind.CREDIT_MEMO: CREDIT_FIELDS},
    )


@pytest.fixture
def write_document(folders: dict[str, Path]):
    """Write a batch document into the input folder."""

    def _write(name: str, content: dict | str) -> Path:
        path = folders["input"] / name
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def sample_invoice() -> TransactionInput:
    return TransactionInput(
        customer=1, subsidiary=1, ar_account=456, amount=500, trandate="2025-10-20", item=999
    )


@pytest.fixture
def mock_documents() -> MagicMock:
    """Mock document store port."""
    mock = MagicMock(spec=DocumentStorePort)
    mock.load.return_value = "{}"
    mock.create.return_value = "report.json"
    return mock


@pytest.fixture
def mock_handle() -> MagicMock:
    mock = MagicMock(spec=RecordHandle)
    mock.save.return_value = "101"
    return mock


@pytest.fixture
def mock_records(mock_handle: MagicMock) -> MagicMock:
    """Mock record store port."""
    mock = MagicMock(spec=RecordStorePort)
    mock.create_record.return_value = mock_handle
    return mock
