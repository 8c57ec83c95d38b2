"""
Signals for membership app
"""
import logging

from django.db.models.signals import post_delete
from django.dispatch import receiver

from .models import MembershipTier
from .services import validate_tier_configuration

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=MembershipTier)
def check_tiers_after_delete(sender, instance, **kwargs):
    """Report the gap a deleted tier leaves behind; clean() does not run on delete"""
    problems = validate_tier_configuration(MembershipTier.snapshots())
    if problems:
        logger.error(
            "Tier %s deleted, configuration is now invalid: %s",
            instance.tier_name, "; ".join(problems),
        )
