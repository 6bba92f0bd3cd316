"""
Court fee (žyminis mokestis) schedule for small civil claims.
"""
from decimal import Decimal, ROUND_HALF_UP

FEE_TIERS = (
    (Decimal("290"), 14),
    (Decimal("580"), 28),
    (Decimal("1450"), 43),
    (Decimal("2900"), 72),
)
PROPORTIONAL_RATE = Decimal("0.03")
FEE_CAP = 145


def calculate_court_fee(claim_amount) -> int:
    """
    Fee in whole EUR for a claim amount in EUR.

    Flat tiers up to 2900 EUR, then 3% of the claim rounded half-up and
    capped at 145 EUR.
    """
    amount = Decimal(str(claim_amount))
    for upper_bound, fee in FEE_TIERS:
        if amount <= upper_bound:
            return fee
    proportional = (amount * PROPORTIONAL_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return min(int(proportional), FEE_CAP)
