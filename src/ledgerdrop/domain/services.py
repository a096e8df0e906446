"""Domain services - orchestrate the ingestion pipeline."""

import json
import logging
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from ..ports.documents import DocumentStorePort
from ..ports.records import RecordStorePort
from .errors import MaterializeError, ParseError, RouteError
from .materializer import TransactionMaterializer
from .models import (
    DocumentReference,
    FinalReport,
    IngestConfig,
    ProcessingOutcome,
    TransactionInput,
    TransactionKind,
)
from .parser import BatchParser

logger = logging.getLogger(__name__)

REPORT_CONTENT_TYPE = "application/json"


class DocumentLocator:
    """Enumerates pending documents in a location."""

    def __init__(self, documents: DocumentStorePort, location: str) -> None:
        self.documents = documents
        self.location = location

    def locate(self) -> Iterator[DocumentReference]:
        """Yield a reference per document present in the location.

        Listing failures propagate: without a listing there is nothing to run.
        """
        for doc in self.documents.list(self.location):
            yield DocumentReference(id=doc.id, name=doc.name)


class FileRouter:
    """Moves documents between locations."""

    def __init__(self, documents: DocumentStorePort) -> None:
        self.documents = documents

    def move(self, ref: DocumentReference, location: str) -> None:
        try:
            self.documents.set_location(ref.id, location)
        except Exception as e:
            raise RouteError(ref.id, location, str(e)) from e
        logger.debug(f"Moved {ref.name} to {location}")


class DocumentProcessor:
    """Processes one document: parse, create records, route."""

    def __init__(
        self,
        parser: BatchParser,
        materializer: TransactionMaterializer,
        router: FileRouter,
        config: IngestConfig,
    ) -> None:
        self.parser = parser
        self.materializer = materializer
        self.router = router
        self.config = config

    def process(self, ref: DocumentReference) -> ProcessingOutcome:
        """Process a document through the full pipeline.

        Pipeline:
            1. Load and decode the batch
            2. Create invoices, in document order
            3. Create credit memos, in document order
            4. Move to success, or to error if anything failed

        A failed transaction never stops the remaining ones. Records created
        before a failure are kept even though the document goes to error.
        """
        outcome = ProcessingOutcome.for_document(ref)
        logger.info(f"Processing: {ref.name}")

        try:
            batch = self.parser.parse(ref)
        except ParseError as e:
            logger.error(f"File {ref.name}: {e.message}")
            outcome.errors.append(e.message)
            self.route_to_error(ref, outcome)
            return outcome
        except Exception as e:
            logger.exception(f"File {ref.name}: {e}")
            outcome.errors.append(str(e) or type(e).__name__)
            self.route_to_error(ref, outcome)
            return outcome

        self._create_all(TransactionKind.INVOICE, batch.invoices, outcome)
        self._create_all(TransactionKind.CREDIT_MEMO, batch.credit_memos, outcome)

        if outcome.errors:
            self.route_to_error(ref, outcome)
        else:
            try:
                self.router.move(ref, self.config.success_location)
                outcome.location = self.config.success_location
            except RouteError as e:
                logger.error(f"File {ref.name}: {e}")
                outcome.errors.append(f"Route error: {e.message}")
                self.route_to_error(ref, outcome)

        status = "success" if outcome.success else "errors"
        logger.info(f"File processed: {ref.name} ({status})")
        return outcome

    def _create_all(
        self,
        kind: TransactionKind,
        entries: list[TransactionInput],
        outcome: ProcessingOutcome,
    ) -> None:
        created = (
            outcome.created_invoice_ids
            if kind is TransactionKind.INVOICE
            else outcome.created_credit_ids
        )
        for entry in entries:
            try:
                created.append(self.materializer.create(kind, entry))
            except MaterializeError as e:
                logger.warning(f"{outcome.document_name}: {kind.label} error: {e.message}")
                outcome.errors.append(f"{kind.label} error: {e.message}")

    def route_to_error(self, ref: DocumentReference, outcome: ProcessingOutcome) -> None:
        """Best-effort move to the error location.

        A failure here is logged and never replaces the recorded errors.
        """
        try:
            self.router.move(ref, self.config.error_location)
            outcome.location = self.config.error_location
            logger.warning(f"Moved to error: {ref.name}")
        except RouteError as e:
            logger.error(f"Move to error failed for {ref.name}: {e}")


class ReportAggregator:
    """Collects outcomes into a report and stores it."""

    def __init__(self, documents: DocumentStorePort, config: IngestConfig) -> None:
        self.documents = documents
        self.config = config

    def aggregate(
        self, outcomes: Iterable[ProcessingOutcome], now: datetime | None = None
    ) -> FinalReport:
        return FinalReport(
            timestamp=now or datetime.now(timezone.utc),
            results=tuple(outcomes),
        )

    def publish(self, report: FinalReport) -> str | None:
        """Store the report in the success location.

        Returns id of the stored report, or None if it could not be written.
        """
        content = json.dumps(report.to_dict(), indent=2)
        logger.info(f"Process Report: {content}")

        name = report.artifact_name(self.config.report_prefix)
        try:
            report_id = self.documents.create(
                name, REPORT_CONTENT_TYPE, content, self.config.success_location
            )
        except Exception as e:
            logger.error(f"Failed to write report {name}: {e}")
            return None

        logger.info(f"Report written: {name}")
        return report_id


class IngestionService:
    """Runs the pipeline over every pending document."""

    def __init__(
        self,
        documents: DocumentStorePort,
        records: RecordStorePort,
        config: IngestConfig,
        workers: int = 4,
    ) -> None:
        self.config = config
        self.records = records
        self.workers = max(1, workers)
        self.locator = DocumentLocator(documents, config.input_location)
        self.processor = DocumentProcessor(
            parser=BatchParser(documents),
            materializer=TransactionMaterializer(records, config),
            router=FileRouter(documents),
            config=config,
        )
        self.aggregator = ReportAggregator(documents, config)

    def run(self) -> tuple[FinalReport, str | None]:
        """Process all pending documents and publish the report.

        Returns the report and id of the stored report artifact.
        """
        logger.info(f"Searching for documents in {self.config.input_location}")
        refs = list(self.locator.locate())
        logger.info(f"Found {len(refs)} file(s)")

        outcomes = self.process_all(refs)
        report = self.aggregator.aggregate(outcomes)
        return report, self.aggregator.publish(report)

    def process_all(self, refs: list[DocumentReference]) -> list[ProcessingOutcome]:
        """Process documents concurrently; waits for all of them."""
        if not refs:
            return []
        with ThreadPoolExecutor(max_workers=min(self.workers, len(refs))) as pool:
            return list(pool.map(self._process_one, refs))

    def _process_one(self, ref: DocumentReference) -> ProcessingOutcome:
        try:
            return self.processor.process(ref)
        except Exception as e:
            logger.exception(f"Unexpected failure processing {ref.name}: {e}")
            outcome = ProcessingOutcome.for_document(ref)
            outcome.errors.append(str(e) or type(e).__name__)
            self.processor.route_to_error(ref, outcome)
            return outcome

    def close(self) -> None:
        self.records.close()

    def process_document(self, name: str) -> ProcessingOutcome:
        """Process a single pending document by name."""
        for ref in self.locator.locate():
            if ref.name == name:
                return self._process_one(ref)
        raise LookupError(f"No pending document named {name!r}")
