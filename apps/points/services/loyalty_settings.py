"""
Loyalty settings snapshot and provider.

The programme configuration is read once per request or transaction and
handed around as an immutable ``LoyaltySettings`` value.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from apps.common.exceptions import InvalidSnapshotError
from apps.common.money import to_decimal


@dataclass(frozen=True)
class LoyaltySettings:
    is_enabled: bool = True
    points_per_item: Decimal = Decimal('1')
    point_value_idr: Decimal = Decimal('1000')
    min_points_to_redeem: int = 10
    max_points_per_transaction: Optional[int] = None
    max_redemption_percentage: int = 50
    version: int = 1

    def __post_init__(self):
        # Normalise numeric inputs given as int/str
        object.__setattr__(self, 'points_per_item', to_decimal(self.points_per_item))
        object.__setattr__(self, 'point_value_idr', to_decimal(self.point_value_idr))

        if self.points_per_item < 0:
            raise InvalidSnapshotError("points_per_item must not be negative")
        if self.point_value_idr <= 0:
            raise InvalidSnapshotError("point_value_idr must be positive")
        if self.min_points_to_redeem is None or self.min_points_to_redeem < 0:
            raise InvalidSnapshotError("min_points_to_redeem must not be negative")
        if self.max_points_per_transaction is not None and self.max_points_per_transaction < 0:
            raise InvalidSnapshotError("max_points_per_transaction must not be negative")
        if not 0 <= self.max_redemption_percentage <= 100:
            raise InvalidSnapshotError("max_redemption_percentage must be between 0 and 100")


def get_loyalty_settings():
    """Current settings snapshot; creates the default row when missing"""
    from ..models import LoyaltySetting
    return LoyaltySetting.load().to_snapshot()
