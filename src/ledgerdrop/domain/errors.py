"""Domain errors."""

from enum import Enum


class LedgerdropError(Exception):
    """Base class for pipeline errors."""


class ParseErrorKind(str, Enum):
    """Why a document could not be turned into a transaction batch."""

    LOAD_FAILED = "load_failed"
    MALFORMED_CONTENT = "malformed_content"


class ParseError(LedgerdropError):
    """Document content could not be loaded or decoded."""

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause


class MaterializeError(LedgerdropError):
    """A single transaction record could not be built or saved."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RouteError(LedgerdropError):
    """A document could not be moved to its target location."""

    def __init__(self, document_id: str, location: str, message: str) -> None:
        super().__init__(f"Cannot move {document_id} to {location}: {message}")
        self.document_id = document_id
        self.location = location
        self.message = message
