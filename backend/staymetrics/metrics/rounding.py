"""Revenue rounding policies for per-night proration."""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

CENT = Decimal("0.01")


class RoundingPolicy(str, Enum):
    """How prorated revenue is rounded to money.

    - ``exact``: no quantization, full Decimal precision.
    - ``cents``: every allocation is rounded to the cent on its own. Summing a
      stay's allocations across periods may be off by a cent.
    - ``conserving``: the price is rounded to the cent once, then the cumulative
      revenue at each period boundary is rounded to the cent and an allocation
      is the difference between its two boundaries. The pieces of a stay add
      back up to its cent-rounded price exactly.
    """

    EXACT = "exact"
    CENTS = "cents"
    CONSERVING = "conserving"


def to_cents(amount: Decimal) -> Decimal:
    """Round a money amount half-up to two decimal places."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def prorate(
    price: Decimal,
    total_nights: int,
    first_night: int,
    nights: int,
    policy: RoundingPolicy = RoundingPolicy.EXACT,
) -> Decimal:
    """Return the share of ``price`` earned by ``nights`` consecutive nights.

    ``first_night`` is the zero-based index of the first of those nights
    within the stay. Callers guarantee ``total_nights > 0``.
    """
    if policy is RoundingPolicy.CONSERVING:
        price = to_cents(price)
        upper = to_cents(price * (first_night + nights) / total_nights)
        lower = to_cents(price * first_night / total_nights)
        return upper - lower

    share = price * nights / total_nights
    if policy is RoundingPolicy.CENTS:
        return to_cents(share)
    return share
