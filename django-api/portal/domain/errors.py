"""Domain error codes for the portal module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    UNAUTHORIZED = "UNAUTHORIZED"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    VALIDATION = "VALIDATION"
    AGENCY_NOT_FOUND = "AGENCY_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    NOTICE_NOT_FOUND = "NOTICE_NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class UnauthenticatedError(DomainError):
    """Raised when no verified identity accompanies the request."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UNAUTHENTICATED,
            message="Authentication required",
        )


class UnauthorizedError(DomainError):
    """Raised when the identity is unknown, inactive, or lacks a capability."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(code=ErrorCode.UNAUTHORIZED, message=message)


class StorageUnavailableError(DomainError):
    """Raised when a storage collaborator call fails."""

    def __init__(self, message: str = "Storage unavailable") -> None:
        super().__init__(code=ErrorCode.STORAGE_UNAVAILABLE, message=message)


class AcknowledgmentStorageError(StorageUnavailableError):
    def __init__(self) -> None:
        super().__init__(message="Acknowledgment storage unavailable")


class ValidationFailedError(DomainError):
    """Raised for malformed input, before any storage call."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message)
        self.field = field


class AgencyNotFoundError(DomainError):
    def __init__(self, agency_id: str) -> None:
        super().__init__(code=ErrorCode.AGENCY_NOT_FOUND, message="Agency not found")
        self.agency_id = agency_id


class UserNotFoundError(DomainError):
    def __init__(self, user_id: str) -> None:
        super().__init__(code=ErrorCode.USER_NOT_FOUND, message="User not found")
        self.user_id = user_id


class ProductNotFoundError(DomainError):
    def __init__(self, product_id: str) -> None:
        super().__init__(code=ErrorCode.PRODUCT_NOT_FOUND, message="Product not found")
        self.product_id = product_id


class NoticeNotFoundError(DomainError):
    def __init__(self, notice_id: str) -> None:
        super().__init__(code=ErrorCode.NOTICE_NOT_FOUND, message="Notice not found")
        self.notice_id = notice_id


class InvalidTransitionError(DomainError):
    """Raised when an agency status change is not allowed from its current state."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot move agency from {current} to {target}",
        )


class DuplicateEmailError(DomainError):
    def __init__(self, email: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_EMAIL,
            message="A user with this email already exists",
        )
        self.email = email
