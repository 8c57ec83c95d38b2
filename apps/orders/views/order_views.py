"""
Checkout and order query views.
"""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated, IsAdminUser

from apps.common.utils import success_response, error_response, paginated_response
from ..models import Order
from ..serializers import (
    OrderCreateSerializer, OrderListSerializer, OrderSerializer, PriceBreakdownSerializer
)
from ..services import CheckoutService

logger = logging.getLogger(__name__)


class OrderListCreateView(APIView):
    """Place an order, or list the member's orders"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        orders = Order.objects.filter(user=request.user)
        order_status = request.query_params.get('status')
        if order_status:
            orders = orders.filter(status=order_status)
        return paginated_response(orders, OrderListSerializer, request, 'Orders retrieved successfully')

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            logger.info("Order validation failed for user %s: %s", request.user.pk, serializer.errors)
            return error_response("Invalid order data", serializer.errors)

        data = serializer.validated_data
        # CheckoutRejected propagates to the exception handler with its reason code
        order = CheckoutService.place_order(
            request.user,
            data['order_type'],
            serializer.cart_lines(),
            voucher_code=data['voucher_code'],
            points_to_redeem=data['points_to_redeem'],
            notes=data['notes'],
        )
        return success_response(
            OrderSerializer(order).data, 'Order created successfully', status.HTTP_201_CREATED
        )


class OrderQuoteView(APIView):
    """Preview the price of a cart with a voucher and points applied"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid order data", serializer.errors)

        data = serializer.validated_data
        breakdown, _ = CheckoutService.quote(
            request.user,
            data['order_type'],
            serializer.cart_lines(),
            voucher_code=data['voucher_code'],
            points_to_redeem=data['points_to_redeem'],
        )
        return success_response(PriceBreakdownSerializer(breakdown).data)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        order = get_object_or_404(Order.objects.prefetch_related('items'), pk=pk, user=request.user)
        return success_response(OrderSerializer(order).data)


class CompleteOrderView(APIView):
    """Complete an order and credit loyalty points (staff only)"""
    permission_classes = [IsAdminUser]

    def post(self, request, pk):
        order = get_object_or_404(Order, pk=pk)
        order = CheckoutService.complete_order(order)
        logger.info("Order %s completed by %s", order.order_number, request.user.username)
        return success_response(OrderSerializer(order).data, 'Order completed')
