"""
Voucher check and rewards views.
"""
import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import success_response, error_response
from ..models import Voucher
from ..serializers import (
    VoucherCheckSerializer, VoucherValidationSerializer, RewardSerializer,
    VoucherClaimSerializer, UserVoucherSerializer
)
from ..services import VOUCHER_MESSAGES, VoucherService, cart_subtotal

logger = logging.getLogger(__name__)


class VoucherCheckView(APIView):
    """Check a voucher code against the cart; nothing is recorded"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = VoucherCheckSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid voucher check data", serializer.errors)

        lines = serializer.cart_lines()
        subtotal = cart_subtotal(lines)
        result = VoucherService.check_voucher(
            request.user,
            serializer.validated_data['code'],
            subtotal,
            serializer.validated_data['order_type'],
            lines,
        )

        data = VoucherValidationSerializer(result).data
        data['subtotal'] = str(subtotal)
        if not result.valid:
            return error_response(VOUCHER_MESSAGES[result.reason], errors=data, reason=result.reason.value)
        return success_response(data, 'Voucher applied')


class RewardListView(APIView):
    """Vouchers that can be claimed with points"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        rewards = VoucherService.list_rewards(request.user)
        return success_response({
            'loyalty_points': request.user.loyalty_points,
            'rewards': RewardSerializer(rewards, many=True).data,
        })


class RewardClaimView(APIView):
    """Exchange points for a reward voucher"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = VoucherClaimSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid input", serializer.errors)

        try:
            user_voucher = VoucherService.claim_voucher(request.user, serializer.validated_data['voucher_id'])
        except Voucher.DoesNotExist:
            return error_response("Voucher not found", status_code=status.HTTP_404_NOT_FOUND, reason='NOT_FOUND')

        return success_response({
            'voucher': UserVoucherSerializer(user_voucher).data,
            'loyalty_points': request.user.loyalty_points,
        }, 'Voucher redeemed successfully')


class MyVoucherListView(APIView):
    """Claimed vouchers of the current member"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        include_used = request.query_params.get('include_used') in ('1', 'true', 'True')
        vouchers = VoucherService.get_user_vouchers(request.user, include_used=include_used)
        return success_response(UserVoucherSerializer(vouchers, many=True).data)
