"""
Membership status and tier views.
"""
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import success_response
from ..models import MembershipTier
from ..serializers import (
    LoyaltyStatusSerializer, MembershipTierSerializer, TierChangeLogSerializer
)
from ..services import MembershipService


class MembershipStatusView(APIView):
    """Get current loyalty status and progress to the next tier"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        status_data = MembershipService.get_loyalty_status(request.user)
        return success_response(LoyaltyStatusSerializer(status_data).data)


class TierListView(APIView):
    """List membership tiers in level order"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        tiers = MembershipTier.objects.order_by('tier_level')
        return success_response(MembershipTierSerializer(tiers, many=True).data)


class TierChangeHistoryView(APIView):
    """Get tier change history"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        changes = MembershipService.get_change_history(request.user)
        return success_response(TierChangeLogSerializer(changes, many=True).data)
