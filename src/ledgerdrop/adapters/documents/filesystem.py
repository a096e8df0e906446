"""Document store adapter using local filesystem folders as locations."""

import logging
import re
import shutil
from collections.abc import Mapping
from pathlib import Path

from ...ports.documents import DocumentStorePort, StoredDocument

logger = logging.getLogger(__name__)


def sanitize_filename(name: str, max_length: int = 180) -> str:
    """Remove/replace characters invalid in filenames."""
    # Remove null bytes
    name = name.replace("\x00", "")
    # Replace path traversal attempts
    name = name.replace("..", "_")
    name = re.sub(r'[<>:"/\\|?*]', "_", name)
    name = name.strip(". ")
    if len(name) > max_length:
        stem, dot, suffix = name.rpartition(".")
        if dot and len(suffix) < 10:
            name = stem[: max_length - len(suffix) - 1] + "." + suffix
        else:
            name = name[:max_length]
    return name or "Untitled"


def _unique_path(dest: Path) -> Path:
    """Append " (n)" to the stem until the path is free."""
    counter = 1
    candidate = dest
    while candidate.exists():
        candidate = dest.with_name(f"{dest.stem} ({counter}){dest.suffix}")
        counter += 1
    return candidate


class FilesystemDocumentStore(DocumentStorePort):
    """Document store where each location is a directory.

    Document ids are file names. A document is looked up in the locations
    in configuration order, so the input folder takes precedence.
    """

    def __init__(self, locations: Mapping[str, Path]) -> None:
        self.locations = {name: Path(path) for name, path in locations.items()}

    def _dir(self, location: str) -> Path:
        try:
            return self.locations[location]
        except KeyError:
            raise ValueError(f"Unknown location: {location}") from None

    def _find(self, document_id: str) -> Path:
        for directory in self.locations.values():
            path = directory / document_id
            if path.is_file():
                return path
        raise FileNotFoundError(f"Document not found: {document_id}")

    def list(self, location: str) -> list[StoredDocument]:
        directory = self._dir(location)
        if not directory.is_dir():
            raise FileNotFoundError(f"Location directory not found: {directory}")
        return [
            StoredDocument(id=path.name, name=path.name)
            for path in sorted(directory.iterdir())
            if path.is_file() and not path.name.startswith(".")
        ]

    def load(self, document_id: str) -> bytes:
        return self._find(document_id).read_bytes()

    def set_location(self, document_id: str, location: str) -> None:
        target = self._dir(location)
        path = self._find(document_id)
        if path.parent == target:
            return

        target.mkdir(parents=True, exist_ok=True)
        dest = _unique_path(target / path.name)
        shutil.move(str(path), dest)
        logger.info(f"Moved {document_id} -> {location}/{dest.name}")

    def create(
        self, name: str, content_type: str, content: str, location: str
    ) -> str:
        target = self._dir(location)
        target.mkdir(parents=True, exist_ok=True)
        dest = _unique_path(target / sanitize_filename(name))
        dest.write_text(content, encoding="utf-8")
        logger.debug(f"Created {dest.name} ({content_type}) in {location}")
        return dest.name
