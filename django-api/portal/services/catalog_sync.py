"""One-way synchronization of the tour catalog from an external export."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from portal.domain.errors import StorageUnavailableError
from portal.stores.adapters import product_from_record
from portal.stores.interfaces import CatalogStore

logger = logging.getLogger(__name__)


class CatalogSource(ABC):
    """Where raw catalog records come from."""

    @abstractmethod
    def fetch_records(self) -> list[dict[str, Any]]:
        """Return records shaped ``{"id": ..., "fields": {...}}``."""
        ...


class JsonFileCatalogSource(CatalogSource):
    """Reads a JSON export: a list of records or ``{"records": [...]}``."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def fetch_records(self) -> list[dict[str, Any]]:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageUnavailableError("Catalog export could not be read") from exc
        if isinstance(payload, dict):
            payload = payload.get("records", [])
        if not isinstance(payload, list):
            raise StorageUnavailableError("Catalog export has an unexpected shape")
        return payload


class CatalogSyncService:
    def __init__(self, source: CatalogSource, store: CatalogStore) -> None:
        self._source = source
        self._store = store

    def sync(self) -> int:
        """Upsert every well-formed record; return how many were written."""
        products = []
        for record in self._source.fetch_records():
            try:
                products.append(product_from_record(record))
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.warning(
                    "Skipping malformed catalog record",
                    extra={"record_id": record.get("id") if isinstance(record, dict) else None},
                )
        count = self._store.upsert_products(products)
        logger.info("Catalog synced", extra={"count": count})
        return count
