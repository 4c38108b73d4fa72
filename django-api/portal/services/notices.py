"""Mural notices and read-receipt tracking.

A (user, notice) pair is either unconfirmed or confirmed. Confirming again
refreshes the timestamp of the existing receipt; there is never a second row.
"""

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from portal.domain import Notice, NoticeReadLog, Reader
from portal.domain.errors import (
    AcknowledgmentStorageError,
    NoticeNotFoundError,
    StorageUnavailableError,
    ValidationFailedError,
)
from portal.stores.interfaces import NoticeStore, ReadLogStore

logger = logging.getLogger(__name__)


class KeyedLock:
    """In-process mutex per key; entries are dropped once nobody holds them."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[tuple, list] = {}

    @contextmanager
    def hold(self, key: tuple) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


# Shared by every NoticeService so requests handled by this process serialize.
_confirm_locks = KeyedLock()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_id(value: str | None, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationFailedError(f"Missing {field}", field=field)
    return value


def _key(value: str | None) -> str | None:
    return value.strip().lower() if value and value.strip() else None


def _same_agency(
    log: NoticeReadLog, agency_key: str | None, name_key: str | None
) -> bool:
    log_agency = _key(log.agency_id)
    if log_agency:
        return log_agency == agency_key
    return name_key is not None and _key(log.agency_name) == name_key


class NoticeService:
    """Lists mural notices and tracks who confirmed reading them."""

    def __init__(
        self,
        read_logs: ReadLogStore,
        notices: NoticeStore,
        clock: Callable[[], datetime] = _utcnow,
        locks: KeyedLock | None = None,
    ) -> None:
        self._read_logs = read_logs
        self._notices = notices
        self._clock = clock
        self._locks = locks if locks is not None else _confirm_locks

    def list_mural(self) -> list[Notice]:
        """Active notices: pinned first, then by priority, then newest."""
        notices = self._notices.list_active_notices()
        notices.sort(key=lambda n: n.published_at, reverse=True)
        notices.sort(key=lambda n: (n.is_pinned, n.priority.rank), reverse=True)
        return notices

    def confirm(self, user_id: str, notice_id: str) -> NoticeReadLog:
        """Record that the user read the notice, or refresh the existing receipt.

        Raises:
            ValidationFailedError: If either id is missing.
            NoticeNotFoundError: If the notice does not exist.
            AcknowledgmentStorageError: If the read-log storage fails.
        """
        user_id = _require_id(user_id, "user_id")
        notice_id = _require_id(notice_id, "notice_id")

        try:
            if self._notices.get_notice(notice_id) is None:
                raise NoticeNotFoundError(notice_id)
            if self._read_logs.atomic_upsert:
                log = self._read_logs.upsert_log(user_id, notice_id, self._clock())
            else:
                # Only guards against duplicates within this process.
                with self._locks.hold((user_id, notice_id)):
                    log = self._read_logs.upsert_log(user_id, notice_id, self._clock())
        except StorageUnavailableError as exc:
            raise AcknowledgmentStorageError() from exc

        logger.info(
            "Notice read confirmed",
            extra={"user_id": user_id, "notice_id": notice_id},
        )
        return log

    def readers_of(
        self,
        notice_id: str,
        is_admin: bool,
        scope_agency_id: str | None = None,
        scope_agency_name: str | None = None,
    ) -> list[Reader]:
        """Who confirmed the notice, newest first.

        Non-admins only see readers from their own agency. A receipt that
        carries an agency id is matched by id; only receipts without one fall
        back to the agency name. A storage failure yields an empty list.
        """
        notice_id = _require_id(notice_id, "notice_id")
        try:
            logs = self._read_logs.list_logs_by_notice(notice_id)
        except StorageUnavailableError:
            logger.exception(
                "Reader lookup failed", extra={"notice_id": notice_id}
            )
            return []

        if not is_admin:
            agency_key = _key(scope_agency_id)
            name_key = _key(scope_agency_name)
            if not (agency_key or name_key):
                return []
            logs = [log for log in logs if _same_agency(log, agency_key, name_key)]

        logs = sorted(logs, key=lambda log: log.confirmed_at, reverse=True)
        return [
            Reader(
                user_name=log.user_name,
                confirmed_at=log.confirmed_at,
                agency_name=log.agency_name or "",
            )
            for log in logs
        ]

    def read_logs_for(self, user_id: str) -> list[NoticeReadLog]:
        """The caller's receipts, one per notice.

        Raises:
            ValidationFailedError: If the user id is missing.
            AcknowledgmentStorageError: If the read-log storage fails.
        """
        user_id = _require_id(user_id, "user_id")
        try:
            logs = self._read_logs.list_logs_by_user(user_id)
        except StorageUnavailableError as exc:
            raise AcknowledgmentStorageError() from exc

        latest: dict[str, NoticeReadLog] = {}
        for log in logs:
            current = latest.get(log.notice_id)
            if current is None or log.confirmed_at > current.confirmed_at:
                latest[log.notice_id] = log
        return list(latest.values())
