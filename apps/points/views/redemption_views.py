"""
Points redemption views.

These endpoints only preview a redemption; points are spent when an order
is placed.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import success_response, error_response
from ..services import (
    REDEMPTION_MESSAGES, authorize_redemption, get_loyalty_settings, max_redeemable_points
)
from ..serializers import (
    PointsRedemptionSerializer, RedemptionResultSerializer, MaxRedeemableQuerySerializer
)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def validate_points_redemption(request):
    """Check how many points may be spent on a cart"""
    serializer = PointsRedemptionSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid input', errors=serializer.errors)

    result = authorize_redemption(
        serializer.validated_data['points'],
        request.user.loyalty_points,
        serializer.validated_data['subtotal'],
        get_loyalty_settings(),
    )
    data = RedemptionResultSerializer(result).data
    if result.is_rejected:
        return error_response(REDEMPTION_MESSAGES[result.reason], errors=data, reason=result.reason.value)
    return success_response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_max_redeemable_points(request):
    """Get maximum points that can be redeemed for an order"""
    serializer = MaxRedeemableQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return error_response('order_amount parameter is required', errors=serializer.errors)

    settings = get_loyalty_settings()
    order_amount = serializer.validated_data['order_amount']
    points = max_redeemable_points(request.user.loyalty_points, order_amount, settings)
    return success_response({
        'available_points': request.user.loyalty_points,
        'max_redeemable_points': points,
        'discount_amount': str(authorize_redemption(
            points, request.user.loyalty_points, order_amount, settings
        ).discount_amount),
    })
