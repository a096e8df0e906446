"""Record store adapter using the NetSuite REST record API."""

import logging
from datetime import date
from typing import Any

import httpx

from ...domain.models import TransactionKind
from ...ports.records import RecordHandle, RecordStorePort

logger = logging.getLogger(__name__)

RECORD_TYPES = {
    TransactionKind.INVOICE: "invoice",
    TransactionKind.CREDIT_MEMO: "creditMemo",
}
REFERENCE_FIELDS = {"entity", "subsidiary", "account", "item"}
RENAMED_FIELDS = {"trandate": "tranDate"}


class NetSuiteError(Exception):
    """Error response from NetSuite."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _to_rest(name: str, value: Any) -> tuple[str, Any]:
    if name in REFERENCE_FIELDS:
        return name, {"id": str(value)}
    if isinstance(value, date):
        value = value.isoformat()
    return RENAMED_FIELDS.get(name, name), value


def _error_message(response: httpx.Response) -> str:
    try:
        details = response.json().get("o:errorDetails") or []
    except ValueError:
        details = []
    if details and details[0].get("detail"):
        return details[0]["detail"]
    return f"HTTP {response.status_code}: {response.text[:200]}"


class NetSuiteRecordHandle(RecordHandle):
    """Builds the REST payload locally; save() is a single POST."""

    def __init__(self, client: httpx.Client, record_type: str) -> None:
        self.client = client
        self.record_type = record_type
        self.body: dict[str, Any] = {}
        self.lines: dict[str, list[dict[str, Any]]] = {}
        self._current: dict[str, dict[str, Any]] = {}

    def set_field(self, name: str, value: Any) -> None:
        key, rest_value = _to_rest(name, value)
        self.body[key] = rest_value

    def add_line(self, sublist: str) -> None:
        self._current[sublist] = {}

    def set_line_field(self, sublist: str, name: str, value: Any) -> None:
        key, rest_value = _to_rest(name, value)
        self._current[sublist][key] = rest_value

    def commit_line(self, sublist: str) -> None:
        self.lines.setdefault(sublist, []).append(self._current.pop(sublist))

    def save(
        self, enable_sourcing: bool = True, ignore_mandatory_fields: bool = False
    ) -> str:
        payload = dict(self.body)
        for sublist, lines in self.lines.items():
            payload[sublist] = {"items": lines}

        # REST always sources; mandatory field checks cannot be relaxed here
        logger.debug(
            f"POST {self.record_type} (enable_sourcing={enable_sourcing}, "
            f"ignore_mandatory_fields={ignore_mandatory_fields})"
        )
        response = self.client.post(f"/{self.record_type}", json=payload)
        if response.is_error:
            raise NetSuiteError(_error_message(response), response.status_code)

        location = response.headers.get("Location", "")
        record_id = location.rstrip("/").rsplit("/", 1)[-1]
        if not record_id:
            raise NetSuiteError("NetSuite response missing record location")
        return record_id


class NetSuiteRecordStore(RecordStorePort):
    """Record store backed by NetSuite's REST web services."""

    def __init__(
        self,
        account_id: str,
        token: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not base_url:
            if not account_id:
                raise ValueError("NetSuite account_id or base_url is required")
            host = account_id.lower().replace("_", "-")
            base_url = f"https://{host}.suitetalk.api.netsuite.com/services/rest/record/v1"
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    def create_record(self, kind: TransactionKind) -> NetSuiteRecordHandle:
        return NetSuiteRecordHandle(self.client, RECORD_TYPES[kind])

    def close(self) -> None:
        self.client.close()
