"""Trusted-header authentication.

The portal never authenticates users itself. An upstream identity provider
verifies the user and forwards the verified email in a configured header.
"""

from dataclasses import dataclass

from django.conf import settings
from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request


@dataclass(frozen=True)
class VerifiedIdentity:
    email: str

    @property
    def is_authenticated(self) -> bool:
        return True


def _meta_key(header: str) -> str:
    return "HTTP_" + header.upper().replace("-", "_")


class TrustedEmailAuthentication(BaseAuthentication):
    """Reads the verified email from ``settings.PORTAL_IDENTITY_HEADER``."""

    def authenticate(self, request: Request):
        email = request.META.get(_meta_key(settings.PORTAL_IDENTITY_HEADER), "")
        email = email.strip()
        if not email:
            return None
        return VerifiedIdentity(email=email), None

    def authenticate_header(self, request: Request) -> str:
        return settings.PORTAL_IDENTITY_HEADER


def identity_email(request: Request) -> str | None:
    user = getattr(request, "user", None)
    if isinstance(user, VerifiedIdentity):
        return user.email
    return None
