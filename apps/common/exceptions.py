"""
Loyalty engine exceptions and the DRF exception handler.

Expected rejections (expired voucher, not enough points, ...) are returned as
typed results carrying a reason code. The exceptions below are for the cases
where the caller handed the engine something it cannot reason about.
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


class LoyaltyError(Exception):
    """Base class for loyalty engine failures"""


class InvalidSnapshotError(LoyaltyError, ValueError):
    """A settings, tier, voucher or member snapshot is incomplete or malformed"""


class TierConfigurationError(LoyaltyError):
    """Configured membership tiers overlap, leave gaps, or are otherwise inconsistent"""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__('; '.join(self.problems) or 'Invalid tier configuration')


class CheckoutRejected(LoyaltyError):
    """A checkout step refused the order; ``reason`` is a stable reason code"""

    def __init__(self, reason, message=''):
        self.reason = getattr(reason, 'value', reason)
        super().__init__(message or self.reason)


class SettlementConflict(LoyaltyError):
    """The member's balance changed under a running settlement"""


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error responses
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is None and isinstance(exc, LoyaltyError):
        response = _loyalty_error_response(exc)

    if response is not None and not isinstance(exc, LoyaltyError):
        # Log the exception
        logger.error(f"API Exception: {exc}", exc_info=True)

        # Create custom error response format
        custom_response_data = {
            'code': response.status_code,
            'msg': 'An error occurred',
            'errors': response.data
        }

        # Handle specific error types
        if response.status_code == status.HTTP_400_BAD_REQUEST:
            custom_response_data['msg'] = 'Validation error'
        elif response.status_code == status.HTTP_401_UNAUTHORIZED:
            custom_response_data['msg'] = 'Authentication required'
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            custom_response_data['msg'] = 'Permission denied'
        elif response.status_code == status.HTTP_404_NOT_FOUND:
            custom_response_data['msg'] = 'Resource not found'
        elif response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            custom_response_data['msg'] = 'Method not allowed'
        elif response.status_code >= 500:
            custom_response_data['msg'] = 'Internal server error'
            # Don't expose internal errors in production
            request = context.get('request')
            if not hasattr(request, 'user') or not request.user.is_staff:
                custom_response_data['errors'] = {'detail': 'Internal server error'}

        response.data = custom_response_data

    return response


def _loyalty_error_response(exc):
    if isinstance(exc, CheckoutRejected):
        return Response({
            'code': status.HTTP_400_BAD_REQUEST,
            'msg': str(exc),
            'reason': exc.reason,
        }, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, SettlementConflict):
        return Response({
            'code': status.HTTP_409_CONFLICT,
            'msg': 'Loyalty balance changed, please retry',
        }, status=status.HTTP_409_CONFLICT)

    # Snapshot and tier configuration problems are operator errors
    logger.error(f"Loyalty configuration error: {exc}", exc_info=True)
    return Response({
        'code': status.HTTP_500_INTERNAL_SERVER_ERROR,
        'msg': 'Loyalty configuration error',
    }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
