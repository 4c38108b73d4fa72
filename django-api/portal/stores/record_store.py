"""Read receipts kept as tabular records in a JSON file.

Rows use the external read-log layout, ``{"id", "createdTime", "fields"}``,
so an exported read-log table can be pointed at directly. Every upsert
rewrites the whole file, which makes it non-atomic across processes.
"""

import json
import logging
import threading
import uuid
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from portal.domain import NoticeReadLog, UserId, UserRecord
from portal.domain.errors import StorageUnavailableError
from portal.stores.adapters import read_log_from_record
from portal.stores.interfaces import AccessStore, ReadLogStore

logger = logging.getLogger(__name__)

# Serializes rewrites of the file within this process.
_rewrite_lock = threading.Lock()


def _new_record_id() -> str:
    return "rec" + uuid.uuid4().hex[:14]


class JsonFileReadLogStore(ReadLogStore):
    """Read-log table stored as ``{"records": [...]}`` on disk.

    User and agency labels are copied onto each row from the access store
    when the receipt is written, like a lookup column in the source table.
    """

    atomic_upsert = False

    def __init__(self, path: str | Path, access: AccessStore) -> None:
        self._path = Path(path)
        self._access = access

    def _load(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageUnavailableError("Read log file could not be read") from exc
        if isinstance(payload, dict):
            payload = payload.get("records", [])
        if not isinstance(payload, list):
            raise StorageUnavailableError("Read log file has an unexpected shape")
        return payload

    def _save(self, records: list[dict[str, Any]]) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp.write_text(
                json.dumps({"records": records}, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            tmp.replace(self._path)
        except OSError as exc:
            raise StorageUnavailableError("Read log file could not be written") from exc

    def _parsed(
        self, records: list[dict[str, Any]]
    ) -> Iterator[tuple[dict[str, Any], NoticeReadLog]]:
        for record in records:
            try:
                yield record, read_log_from_record(record)
            except (AttributeError, TypeError, ValueError):
                logger.warning(
                    "Skipping malformed read log record", extra={"path": str(self._path)}
                )

    def _logs(self) -> list[NoticeReadLog]:
        return [log for _, log in self._parsed(self._load())]

    def _find_user(self, user_id: str) -> UserRecord | None:
        try:
            parsed = UserId.from_string(user_id)
        except ValueError:
            return None
        return self._access.find_user_by_id(parsed)

    def _fields_for(self, user_id: str, notice_id: str, confirmed_at: datetime) -> dict:
        fields: dict[str, Any] = {
            "Usuário": [user_id],
            "Aviso": [notice_id],
            "Confirmado_em": confirmed_at.isoformat(),
        }
        user = self._find_user(user_id)
        if user is None:
            return fields
        fields["Nome"] = user.name or user.email
        if user.agency_id is not None:
            fields["Agência"] = [str(user.agency_id)]
            agency = self._access.find_agency_by_id(user.agency_id)
            if agency is not None:
                fields["Nome da Agência"] = agency.name
        return fields

    def find_log(self, user_id: str, notice_id: str) -> NoticeReadLog | None:
        for log in self._logs():
            if log.user_id == user_id and log.notice_id == notice_id:
                return log
        return None

    def upsert_log(
        self, user_id: str, notice_id: str, confirmed_at: datetime
    ) -> NoticeReadLog:
        fields = self._fields_for(user_id, notice_id, confirmed_at)
        with _rewrite_lock:
            records = self._load()
            record = next(
                (
                    r
                    for r, log in self._parsed(records)
                    if log.user_id == user_id and log.notice_id == notice_id
                ),
                None,
            )
            if record is None:
                record = {
                    "id": _new_record_id(),
                    "createdTime": datetime.now(timezone.utc).isoformat(),
                    "fields": fields,
                }
                records.append(record)
            else:
                record["fields"] = fields
            self._save(records)
        return read_log_from_record(record)

    def list_logs_by_user(self, user_id: str) -> list[NoticeReadLog]:
        return [log for log in self._logs() if log.user_id == user_id]

    def list_logs_by_notice(self, notice_id: str) -> list[NoticeReadLog]:
        logs = [log for log in self._logs() if log.notice_id == notice_id]
        return sorted(logs, key=lambda log: log.confirmed_at, reverse=True)
