"""
Financial Derivation

Net values of a booking are derived, never entered:

    net_of_commissions = gross - commission - bank_fee
    net_of_vat         = net_of_commissions - vat

Both are rounded half-up to cents. Municipal tax is recorded but does not
take part in either figure.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


@dataclass(frozen=True)
class NetValues:
    net_of_commissions: Decimal | None
    net_of_vat: Decimal | None


def to_decimal(value) -> Decimal:
    """Missing amounts count as zero."""

    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def derive_net_values(gross, commission=None, bank_fee=None, vat=None) -> NetValues:
    """
    Derive both net figures.

    Without a gross value there is nothing to derive and both are None.

    Example:
        >>> derive_net_values(Decimal("130"), Decimal("20"), Decimal("2.50"), Decimal("6"))
        NetValues(net_of_commissions=Decimal('107.50'), net_of_vat=Decimal('101.50'))
    """
    if gross is None or gross == "":
        return NetValues(None, None)

    net_of_commissions = round_cents(to_decimal(gross) - to_decimal(commission) - to_decimal(bank_fee))
    net_of_vat = round_cents(net_of_commissions - to_decimal(vat))
    return NetValues(net_of_commissions, net_of_vat)


def confirmation_problems(gross, platform) -> list[str]:
    """Reasons a booking with these values cannot be confirmed (empty if it can)."""

    problems = []
    if gross is None or to_decimal(gross) <= 0:
        problems.append("A confirmed booking needs a gross value greater than zero")
    if not (platform or "").strip():
        problems.append("A confirmed booking needs a platform")
    return problems
