"""
Tier classification over an ordered set of membership tiers.

Tiers are contiguous point ranges ordered by ``tier_level``. A missing
``max_points`` means the range is unbounded above. Everything here works on
``TierSnapshot`` values and never touches the database.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence

from apps.common.exceptions import InvalidSnapshotError, TierConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierSnapshot:
    id: Any
    tier_level: int
    tier_name: str
    min_points: int
    max_points: Optional[int] = None
    benefits_description: str = ''

    def contains(self, points: int) -> bool:
        if points < self.min_points:
            return False
        return self.max_points is None or points <= self.max_points


@dataclass(frozen=True)
class TierProgress:
    current_tier: Optional[TierSnapshot]
    next_tier: Optional[TierSnapshot]
    points: int
    remaining_points: int
    progress_percentage: Decimal


def ordered_tiers(tiers: Iterable[TierSnapshot]) -> List[TierSnapshot]:
    return sorted(tiers, key=lambda tier: tier.tier_level)


def classify(points: int, tiers: Iterable[TierSnapshot]) -> Optional[TierSnapshot]:
    """
    Return the tier whose range contains ``points``, or None.

    Tiers are scanned by ascending ``tier_level`` and the first match wins, so
    overlapping (misconfigured) ranges resolve to the lowest level. None is a
    normal outcome for members below the lowest tier.
    """
    if points is None or points < 0:
        raise InvalidSnapshotError(f"points must be a non-negative integer, got {points!r}")

    for tier in ordered_tiers(tiers):
        if tier.contains(points):
            return tier

    logger.debug("No tier matches %s points", points)
    return None


def validate_tier_configuration(tiers: Sequence[TierSnapshot]) -> List[str]:
    """
    List the problems of a tier configuration; an empty list means well formed.

    Well formed tiers have unique levels, ``min_points <= max_points``, and
    each tier starts exactly one point after the previous one ends. Only the
    highest tier may be unbounded.
    """
    problems = []
    tiers = ordered_tiers(tiers)

    seen_levels = set()
    for tier in tiers:
        if tier.tier_level in seen_levels:
            problems.append(f"Duplicate tier level {tier.tier_level}")
        seen_levels.add(tier.tier_level)
        if tier.min_points < 0:
            problems.append(f"{tier.tier_name}: min_points must not be negative")
        if tier.max_points is not None and tier.min_points > tier.max_points:
            problems.append(
                f"{tier.tier_name}: min_points {tier.min_points} exceeds max_points {tier.max_points}"
            )

    for lower, upper in zip(tiers, tiers[1:]):
        if lower.max_points is None:
            problems.append(f"{lower.tier_name}: only the highest tier may be unbounded")
            continue
        expected = lower.max_points + 1
        if upper.min_points < expected:
            problems.append(f"{lower.tier_name} and {upper.tier_name} overlap")
        elif upper.min_points > expected:
            problems.append(
                f"Gap between {lower.tier_name} and {upper.tier_name}: "
                f"points {expected}-{upper.min_points - 1} have no tier"
            )

    return problems


def ensure_valid_tier_configuration(tiers: Sequence[TierSnapshot]) -> None:
    problems = validate_tier_configuration(tiers)
    if problems:
        raise TierConfigurationError(problems)


def tier_progress(points: int, tiers: Iterable[TierSnapshot]) -> TierProgress:
    """Current tier, the next one up, and how far the member is towards it"""
    tiers = ordered_tiers(tiers)
    current = classify(points, tiers)

    if current is None:
        upcoming = [tier for tier in tiers if tier.min_points > points]
    else:
        upcoming = [tier for tier in tiers if tier.tier_level > current.tier_level]
    next_tier = upcoming[0] if upcoming else None

    if next_tier is None:
        return TierProgress(current, None, points, 0, Decimal('100'))

    floor_points = current.min_points if current else 0
    span = next_tier.min_points - floor_points
    if span > 0:
        percentage = Decimal(points - floor_points) * 100 / Decimal(span)
    else:
        percentage = Decimal('0')
    percentage = min(Decimal('100'), max(Decimal('0'), percentage)).quantize(Decimal('0.01'))

    return TierProgress(
        current_tier=current,
        next_tier=next_tier,
        points=points,
        remaining_points=max(0, next_tier.min_points - points),
        progress_percentage=percentage,
    )
