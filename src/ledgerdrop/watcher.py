"""Filesystem watcher running an ingestion pass when documents arrive."""

import fnmatch
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .adapters.documents import FilesystemDocumentStore
from .adapters.records import create_record_store
from .config import Settings
from .domain.models import FinalReport
from .domain.services import IngestionService

logger = logging.getLogger(__name__)


def create_ingestion_service(settings: Settings) -> IngestionService:
    """Create an IngestionService with configured adapters."""
    return IngestionService(
        documents=FilesystemDocumentStore(settings.folders.locations),
        records=create_record_store(settings.records),
        config=settings.ingest_config(),
        workers=settings.run.workers,
    )


class InputHandler(FileSystemEventHandler):
    """Flags arriving input documents."""

    def __init__(self, patterns: list[str], pending: threading.Event) -> None:
        self.patterns = patterns
        self.pending = pending

    def on_created(self, event: FileSystemEvent) -> None:
        self._flag(event, str(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        self._flag(event, str(event.dest_path))

    def _flag(self, event: FileSystemEvent, src: str) -> None:
        if event.is_directory:
            return
        name = Path(src).name
        if any(fnmatch.fnmatch(name, p) for p in self.patterns):
            logger.info(f"New file detected: {name}")
            self.pending.set()


def run_pass(service: IngestionService) -> FinalReport | None:
    """Run one ingestion pass, logging instead of raising."""
    try:
        report, _ = service.run()
    except Exception as e:
        logger.exception(f"Ingestion pass failed: {e}")
        return None
    logger.info(
        f"Pass complete: {report.files_processed} file(s), "
        f"{len(report.failed)} with errors"
    )
    return report


def watch_loop(
    pending: threading.Event,
    stop: threading.Event,
    on_pending: Callable[[], object],
    settle_seconds: float,
) -> None:
    """Call on_pending after each burst of arrivals, one call at a time."""
    while not stop.is_set():
        if not pending.wait(timeout=1):
            continue
        # Let the burst of arrivals finish before listing
        stop.wait(settle_seconds)
        pending.clear()
        if stop.is_set():
            break
        on_pending()


def run_watcher(settings: Settings) -> None:
    """Run the input folder watcher daemon."""
    input_dir = settings.folders.locations[settings.folders.input]
    service = create_ingestion_service(settings)

    logger.info(f"Watching: {input_dir}")
    logger.info(f"Patterns: {settings.watch.patterns}")

    pending = threading.Event()
    stop = threading.Event()
    observer = Observer()
    observer.schedule(
        InputHandler(settings.watch.patterns, pending), str(input_dir), recursive=False
    )

    try:
        # Initial scan
        run_pass(service)
        observer.start()
        watch_loop(pending, stop, lambda: run_pass(service), settings.watch.settle_seconds)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        stop.set()
        if observer.is_alive():
            observer.stop()
            observer.join()
        service.close()
