from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.common.exceptions import TierConfigurationError
from apps.membership.models import MembershipTier
from apps.membership.services import ensure_valid_tier_configuration


class Command(BaseCommand):
    help = 'Set up the default membership tiers with contiguous point ranges'

    TIERS = [
        {
            'tier_level': 1,
            'tier_name': 'Bronze',
            'min_points': 0,
            'max_points': 99,
            'benefits_description': 'Basic member benefits',
        },
        {
            'tier_level': 2,
            'tier_name': 'Silver',
            'min_points': 100,
            'max_points': 499,
            'benefits_description': 'Access to tier-specific vouchers and priority support',
        },
        {
            'tier_level': 3,
            'tier_name': 'Gold',
            'min_points': 500,
            'max_points': 1999,
            'benefits_description': 'Gold vouchers and birthday treats',
        },
        {
            'tier_level': 4,
            'tier_name': 'Platinum',
            'min_points': 2000,
            'max_points': None,
            'benefits_description': 'All benefits plus exclusive menu previews',
        },
    ]

    def handle(self, *args, **options):
        """Create or update membership tiers"""
        created_count = 0
        updated_count = 0

        with transaction.atomic():
            for tier_data in self.TIERS:
                tier, created = MembershipTier.objects.update_or_create(
                    tier_level=tier_data['tier_level'],
                    defaults=tier_data,
                )

                if created:
                    created_count += 1
                    self.stdout.write(self.style.SUCCESS(f'Created tier: {tier.tier_name}'))
                else:
                    updated_count += 1
                    self.stdout.write(self.style.WARNING(f'Updated tier: {tier.tier_name}'))

            try:
                ensure_valid_tier_configuration(MembershipTier.snapshots())
            except TierConfigurationError as e:
                # Roll back: existing extra tiers conflict with the defaults
                raise CommandError(f'Tier configuration is invalid: {e}')

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully set up membership tiers: {created_count} created, {updated_count} updated'
            )
        )
