"""
Points accrual for completed orders.
"""
from apps.common.exceptions import InvalidSnapshotError
from apps.common.money import floor_int

COMPLETED = 'completed'


def accrue(item_count, settings):
    """
    Points earned for ``item_count`` items: ``points_per_item * item_count``
    rounded down. Zero while the programme is disabled.
    """
    if item_count is None or item_count < 0:
        raise InvalidSnapshotError(f"item_count must be non-negative, got {item_count!r}")

    if not settings.is_enabled or item_count == 0:
        return 0

    return floor_int(settings.points_per_item * item_count)


def accrue_for_order(order_status, item_count, settings):
    """Accrual guarded by order state: only completed orders earn points"""
    if order_status != COMPLETED:
        return 0
    return accrue(item_count, settings)
