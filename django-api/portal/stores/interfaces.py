"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Any failure of the
underlying storage is raised as StorageUnavailableError.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from portal.domain import (
    AgencyId,
    AgencyRecord,
    CatalogProduct,
    Notice,
    NoticeReadLog,
    ReservationRecord,
    UserId,
    UserRecord,
)


class AccessStore(ABC):
    """Interface for agency and user persistence operations."""

    @abstractmethod
    def find_user_by_email(self, email: str) -> UserRecord | None:
        """Return the user whose email matches case-insensitively, or None."""
        ...

    @abstractmethod
    def find_user_by_id(self, user_id: UserId) -> UserRecord | None:
        ...

    @abstractmethod
    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by email."""
        ...

    @abstractmethod
    def create_user(self, user: UserRecord) -> UserRecord:
        ...

    @abstractmethod
    def update_user(self, user: UserRecord) -> UserRecord:
        ...

    @abstractmethod
    def find_agency_by_id(self, agency_id: AgencyId) -> AgencyRecord | None:
        ...

    @abstractmethod
    def list_agencies(self) -> list[AgencyRecord]:
        """Return all agencies, newest first."""
        ...

    @abstractmethod
    def create_agency(self, agency: AgencyRecord) -> AgencyRecord:
        ...

    @abstractmethod
    def update_agency(self, agency: AgencyRecord) -> AgencyRecord:
        ...


class CatalogStore(ABC):
    """Interface for the read-only tour catalog."""

    @abstractmethod
    def list_products(self) -> list[CatalogProduct]:
        """Return all products ordered by destination ascending."""
        ...

    @abstractmethod
    def get_product(self, product_id: str) -> CatalogProduct | None:
        ...

    @abstractmethod
    def upsert_products(self, products: list[CatalogProduct]) -> int:
        """Create or overwrite products keyed by id. Used only by the sync job."""
        ...


class ReadLogStore(ABC):
    """Interface for notice read receipts."""

    #: True when upsert_log is atomic per (user, notice) across processes.
    atomic_upsert: bool = True

    @abstractmethod
    def find_log(self, user_id: str, notice_id: str) -> NoticeReadLog | None:
        ...

    @abstractmethod
    def upsert_log(
        self, user_id: str, notice_id: str, confirmed_at: datetime
    ) -> NoticeReadLog:
        """Create the receipt for the pair or refresh its timestamp."""
        ...

    @abstractmethod
    def list_logs_by_user(self, user_id: str) -> list[NoticeReadLog]:
        ...

    @abstractmethod
    def list_logs_by_notice(self, notice_id: str) -> list[NoticeReadLog]:
        ...


class NoticeStore(ABC):
    """Interface for mural notices."""

    @abstractmethod
    def list_active_notices(self) -> list[Notice]:
        ...

    @abstractmethod
    def get_notice(self, notice_id: str) -> Notice | None:
        ...


class ReservationStore(ABC):
    """Interface for reservation requests."""

    @abstractmethod
    def create_reservation(self, record: ReservationRecord) -> str:
        """Persist the reservation and return its id."""
        ...
