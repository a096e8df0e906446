"""Transaction materialization - turns batch entries into saved records."""

import logging
from datetime import date, datetime
from typing import Any

from ..ports.records import RecordStorePort
from .errors import MaterializeError
from .models import IngestConfig, TransactionInput, TransactionKind

logger = logging.getLogger(__name__)

ITEM_SUBLIST = "item"


def parse_trandate(value: Any) -> date:
    """Parse an ISO date (or datetime) string into a date."""
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise MaterializeError(f"Invalid trandate: {value!r}") from None


class TransactionMaterializer:
    """Creates invoices and credit memos through the record store."""

    def __init__(self, records: RecordStorePort, config: IngestConfig) -> None:
        self.records = records
        self.config = config

    def create(self, kind: TransactionKind, data: TransactionInput) -> str:
        """Build and save one record.

        Returns the new record id. Any failure is raised as MaterializeError;
        a failed record is never saved.
        """
        try:
            return self._create(kind, data)
        except MaterializeError:
            raise
        except Exception as e:
            raise MaterializeError(str(e) or type(e).__name__) from e

    def _create(self, kind: TransactionKind, data: TransactionInput) -> str:
        trandate = parse_trandate(data.trandate) if data.trandate else None

        rec = self.records.create_record(kind)
        rec.set_field("entity", data.customer)
        rec.set_field("subsidiary", data.subsidiary)
        rec.set_field("account", data.ar_account)
        if trandate:
            rec.set_field("trandate", trandate)

        rec.add_line(ITEM_SUBLIST)
        rec.set_line_field(ITEM_SUBLIST, "item", data.item or self.config.fallback_item)
        rec.set_line_field(ITEM_SUBLIST, "amount", data.amount)
        if kind is TransactionKind.CREDIT_MEMO:
            # Sublist mandatory fields are not bypassed by ignore_mandatory_fields
            for name, value in self.config.credit_memo_line_fields.items():
                rec.set_line_field(ITEM_SUBLIST, name, value)
        rec.commit_line(ITEM_SUBLIST)

        record_id = rec.save(
            enable_sourcing=self.config.enable_sourcing,
            ignore_mandatory_fields=self.config.ignore_mandatory_fields,
        )
        logger.info(f"Created {kind.label} {record_id} for customer {data.customer}")
        return str(record_id)
