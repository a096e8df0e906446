"""Record store adapters."""

from ...config import RecordProvider, RecordsConfig
from ...ports.records import RecordStorePort
from .memory import InMemoryRecordStore
from .netsuite import NetSuiteRecordStore

__all__ = ["InMemoryRecordStore", "NetSuiteRecordStore", "create_record_store"]


def create_record_store(config: RecordsConfig) -> RecordStorePort:
    """Create record store adapter based on configuration."""
    if config.provider == RecordProvider.MEMORY:
        return InMemoryRecordStore()
    elif config.provider == RecordProvider.NETSUITE:
        return NetSuiteRecordStore(
            account_id=config.account_id,
            token=config.token,
            base_url=config.base_url,
            timeout=config.timeout,
        )
    else:
        raise ValueError(f"Unknown record provider: {config.provider}")
