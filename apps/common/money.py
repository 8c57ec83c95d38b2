"""
Money helpers shared by the pricing and loyalty code.
"""
from decimal import Decimal, ROUND_HALF_UP, ROUND_DOWN

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_decimal(value):
    """Coerce int/str/float/Decimal to Decimal without float artefacts"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value, rounding=ROUND_HALF_UP):
    return to_decimal(value).quantize(CENT, rounding=rounding)


def floor_int(value):
    """Round a non-negative amount down to a whole number"""
    return int(to_decimal(value).to_integral_value(rounding=ROUND_DOWN))


def clamp(value, lower, upper):
    return max(lower, min(value, upper))
