from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import paginated_response
from ..services import PointsService
from ..serializers import LoyaltyTransactionSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_points_transactions(request):
    """Get the member's points ledger, newest first"""
    transactions = PointsService.get_transactions(request.user)
    transaction_type = request.query_params.get('type')
    if transaction_type:
        transactions = transactions.filter(transaction_type=transaction_type)
    return paginated_response(transactions, LoyaltyTransactionSerializer, request)
