"""Capability resolution for authenticated identities.

Services:
- Depend only on interfaces (stores)
- Never cache; every call reflects stored state at call time
"""

import logging
from decimal import Decimal

from portal.domain import Role, UserCapabilities, UserStatus
from portal.domain.errors import UnauthenticatedError, UnauthorizedError
from portal.domain.value_objects import normalize_email
from portal.stores.interfaces import AccessStore

logger = logging.getLogger(__name__)

INTERNAL_ROLES = frozenset({Role.ADMIN, Role.INTERNAL_SELLER})


class CapabilityService:
    """Resolves a verified email into the caller's effective permissions."""

    def __init__(self, store: AccessStore) -> None:
        self._store = store

    def resolve(self, email: str) -> UserCapabilities | None:
        """Return the caller's capabilities, or None if unknown or inactive.

        Internal roles receive every flag-gated capability regardless of the
        stored flags; flags only matter for partner agencies.
        """
        normalized = normalize_email(email or "")
        if not normalized:
            return None

        user = self._store.find_user_by_email(normalized)
        if user is None or user.status is not UserStatus.ACTIVE:
            return None

        agency = None
        if user.agency_id is not None:
            agency = self._store.find_agency_by_id(user.agency_id)

        is_internal = user.role in INTERNAL_ROLES
        return UserCapabilities(
            id=user.id,
            email=user.email,
            name=user.name,
            commission_rate=agency.commission_rate if agency else Decimal("0"),
            can_reserve=is_internal or user.flag_reserva,
            can_access_mural=is_internal or user.flag_mural,
            can_access_exchange=is_internal or user.flag_exchange,
            is_internal=is_internal,
            is_admin=user.role is Role.ADMIN,
            agency_id=user.agency_id,
            agency_name=agency.name if agency else None,
            allowed_destinations=user.allowed_destinations,
        )

    def require(self, email: str | None) -> UserCapabilities:
        """Resolve or raise.

        Raises:
            UnauthenticatedError: If no verified email was supplied.
            UnauthorizedError: If the user is unknown or inactive.
        """
        if not email:
            raise UnauthenticatedError()
        capabilities = self.resolve(email)
        if capabilities is None:
            logger.warning("Access denied for unknown or inactive user")
            raise UnauthorizedError(
                "Your email is not on the list of authorized agents."
            )
        return capabilities
