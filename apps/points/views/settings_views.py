"""
Loyalty settings views.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from apps.common.utils import success_response, error_response
from ..models import LoyaltySetting
from ..serializers import LoyaltySettingSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def loyalty_settings(request):
    """Read the loyalty programme settings, or update them (staff only)"""
    if request.method == 'GET':
        return success_response(LoyaltySettingSerializer(LoyaltySetting.load()).data)

    if not request.user.is_staff:
        return error_response('Permission denied', status_code=status.HTTP_403_FORBIDDEN)

    with transaction.atomic():
        setting = LoyaltySetting.objects.select_for_update().get(pk=LoyaltySetting.load().pk)
        serializer = LoyaltySettingSerializer(setting, data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response('Invalid input', errors=serializer.errors)

        try:
            setting.update_values(serializer.validated_data, user=request.user)
        except DjangoValidationError as e:
            return error_response('Invalid input', errors=e.message_dict)

    logger.info(
        "Loyalty settings updated to v%s by %s: %s",
        setting.version, request.user.username, sorted(serializer.validated_data),
    )
    return success_response(LoyaltySettingSerializer(setting).data, 'Loyalty settings updated')
