"""Django signals keeping stored emails in canonical form."""

from django.db.models.signals import pre_save
from django.dispatch import receiver

from portal.domain.value_objects import normalize_email
from portal.models import PortalUser, Reservation


@receiver(pre_save, sender=PortalUser)
def normalize_user_email(sender, instance, **kwargs):
    """Store user emails trimmed and lowercased so lookups and uniqueness agree."""
    instance.email = normalize_email(instance.email or "")


@receiver(pre_save, sender=Reservation)
def normalize_agent_email(sender, instance, **kwargs):
    instance.agent_email = normalize_email(instance.agent_email or "")
