"""
Membership service for tier lookups and tier re-evaluation.
"""
import logging

from django.db import transaction

from ..models import MembershipTier, TierChangeLog
from .tier_classifier import classify, tier_progress, validate_tier_configuration

logger = logging.getLogger(__name__)


class MembershipService:
    """Service class for membership operations"""

    @staticmethod
    def get_tiers():
        """
        Ordered tier snapshots.

        A broken configuration is logged, not raised: classification falls
        back to the first matching tier and members outside every range get
        no tier. Tier writes are validated in ``MembershipTier.clean`` and
        ``setup_membership_tiers``.
        """
        tiers = MembershipTier.snapshots()
        problems = validate_tier_configuration(tiers)
        if problems:
            logger.error("Membership tier configuration is invalid: %s", "; ".join(problems))
        return tiers

    @staticmethod
    def resolve_tier(user, tiers=None):
        """Classify the user's current points balance"""
        if tiers is None:
            tiers = MembershipService.get_tiers()
        return classify(user.loyalty_points, tiers)

    @staticmethod
    def refresh_member_tier(user, reason="Points balance changed", tiers=None):
        """
        Re-classify ``user`` and persist ``current_tier`` when it moved.

        Must run inside the transaction that changed the balance; the caller
        holds the row lock on ``user``.
        """
        tier = MembershipService.resolve_tier(user, tiers)
        new_tier_id = tier.id if tier else None

        if new_tier_id == user.current_tier_id:
            return tier

        with transaction.atomic():
            old_tier_id = user.current_tier_id
            user.current_tier_id = new_tier_id
            user.save(update_fields=['current_tier', 'updated_at'])

            TierChangeLog.objects.create(
                user=user,
                from_tier_id=old_tier_id,
                to_tier_id=new_tier_id,
                reason=reason,
                points_at_change=user.loyalty_points,
            )

        logger.info(
            "Tier change for user %s: %s -> %s at %s points (%s)",
            user.pk, old_tier_id, new_tier_id, user.loyalty_points, reason,
        )
        return tier

    @staticmethod
    def get_loyalty_status(user):
        """Points, current tier and progress to the next tier"""
        tiers = MembershipService.get_tiers()
        progress = tier_progress(user.loyalty_points, tiers)
        return {
            'loyalty_points': user.loyalty_points,
            'total_spent': user.total_spent,
            'current_tier': progress.current_tier,
            'next_tier': progress.next_tier,
            'remaining_points': progress.remaining_points,
            'progress_percentage': progress.progress_percentage,
            'tiers': tiers,
        }

    @staticmethod
    def get_change_history(user, limit=10):
        """Get user's tier change history"""
        return TierChangeLog.objects.select_related('from_tier', 'to_tier').filter(user=user)[:limit]
