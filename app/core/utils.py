from decimal import Decimal, ROUND_HALF_UP, getcontext

getcontext().prec = 28
CENTS = Decimal("0.01")
ZERO = Decimal("0")

def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value instead of binary noise
    return Decimal(str(value))

def qround(d: Decimal) -> Decimal:
    return to_decimal(d).quantize(CENTS, rounding=ROUND_HALF_UP)

def display_amount(d: Decimal, tolerance: Decimal = CENTS) -> Decimal:
    """Round for output, clamping values within tolerance of zero to 0.00 (never -0.00)."""
    d = to_decimal(d)
    if abs(d) < tolerance:
        return ZERO.quantize(CENTS)
    rounded = qround(d)
    if rounded == 0:
        return ZERO.quantize(CENTS)
    return rounded
