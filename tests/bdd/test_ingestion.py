"""BDD step definitions for batch ingestion."""

import json
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from ledgerdrop.adapters.documents import FilesystemDocumentStore
from ledgerdrop.adapters.records import InMemoryRecordStore
from ledgerdrop.domain.models import IngestConfig, ProcessingOutcome
from ledgerdrop.domain.services import IngestionService


@scenario("features/ingestion.feature", "Single invoice document succeeds")
def test_single_invoice() -> None:
    pass


@scenario("features/ingestion.feature", "Failing credit memo sends the document to error")
def test_failing_credit_memo() -> None:
    pass


@scenario("features/ingestion.feature", "Unparseable document")
def test_unparseable_document() -> None:
    pass


@scenario("features/ingestion.feature", "Nothing to process")
def test_nothing_to_process() -> None:
    pass


@pytest.fixture
def context(tmp_path: Path) -> dict:
    """Shared test context with temp directory."""
    return {"tmp_path": tmp_path}


def outcome_for(context: dict, name: str) -> ProcessingOutcome:
    for outcome in context["report"].results:
        if outcome.document_name == name:
            return outcome
    raise AssertionError(f"No outcome for {name}")


@given("an ingestion service over empty input, success and error folders")
def setup_folders(context: dict) -> None:
    folders = {name: context["tmp_path"] / name for name in ("input", "success", "error")}
    for path in folders.values():
        path.mkdir()
    context["folders"] = folders


@given(parsers.parse("the record store knows customers {first:d} and {second:d}"))
def setup_service(context: dict, first: int, second: int) -> None:
    context["records"] = InMemoryRecordStore(known_customers=[first, second])
    context["service"] = IngestionService(
        documents=FilesystemDocumentStore(context["folders"]),
        records=context["records"],
        config=IngestConfig(),
    )


@given(parsers.parse('a document "{name}" with content:'))
def given_document(context: dict, name: str, docstring: str) -> None:
    (context["folders"]["input"] / name).write_text(docstring)


@when("I run the ingestion")
def run_ingestion(context: dict) -> None:
    context["report"], context["report_id"] = context["service"].run()


@then(
    parsers.re(
        r'the outcome for "(?P<name>[^"]+)" should have (?P<invoices>\d+) invoices? '
        r"and (?P<credits>\d+) credit memos?"
    )
)
def outcome_counts(context: dict, name: str, invoices: str, credits: str) -> None:
    outcome = outcome_for(context, name)
    assert len(outcome.created_invoice_ids) == int(invoices)
    assert len(outcome.created_credit_ids) == int(credits)


@then(parsers.parse('the outcome for "{name}" should have no errors'))
def outcome_no_errors(context: dict, name: str) -> None:
    assert outcome_for(context, name).errors == []


@then(parsers.re(r'the outcome for "(?P<name>[^"]+)" should have (?P<count>\d+) errors?$'))
def outcome_error_count(context: dict, name: str, count: str) -> None:
    assert len(outcome_for(context, name).errors) == int(count)


@then(parsers.parse('the outcome for "{name}" should have error "{error}"'))
def outcome_has_error(context: dict, name: str, error: str) -> None:
    errors = outcome_for(context, name).errors
    assert any(e.startswith(error) for e in errors), (
        f"Expected error '{error}', got: {errors}"
    )


@then(parsers.parse('"{name}" should be in the "{folder}" folder'))
def document_in_folder(context: dict, name: str, folder: str) -> None:
    for location, path in context["folders"].items():
        assert (path / name).exists() == (location == folder), (
            f"{name} expected only in {folder}"
        )
    assert outcome_for(context, name).location == folder


@then("the created invoice should still exist")
def invoice_persisted(context: dict) -> None:
    outcome = outcome_for(context, "mixed.json")
    for record_id in outcome.created_invoice_ids:
        assert record_id in context["records"].records


@then(parsers.parse("the report should list {count:d} files"))
def report_count(context: dict, count: int) -> None:
    assert context["report"].files_processed == count
    assert len(context["report"].results) == count


@then(parsers.parse('the report should be stored in the "{folder}" folder'))
def report_stored(context: dict, folder: str) -> None:
    path = context["folders"][folder] / context["report_id"]
    data = json.loads(path.read_text())
    assert data["filesProcessed"] == len(context["report"].results)
    assert "timestamp" in data
