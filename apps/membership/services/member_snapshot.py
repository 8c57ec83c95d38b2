"""
Immutable view of a member's loyalty state.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from apps.common.exceptions import InvalidSnapshotError


@dataclass(frozen=True)
class MemberSnapshot:
    user_id: Any
    loyalty_points: int = 0
    total_spent: Decimal = Decimal('0')
    tier_id: Optional[Any] = None
    previous_order_count: int = 0

    def __post_init__(self):
        if self.loyalty_points is None or self.loyalty_points < 0:
            raise InvalidSnapshotError(f"loyalty_points must be non-negative, got {self.loyalty_points!r}")
        if self.previous_order_count < 0:
            raise InvalidSnapshotError("previous_order_count must be non-negative")
