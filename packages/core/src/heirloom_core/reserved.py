"""Reserved portion (forced share) evaluation.

Every legal heir is guaranteed half of their statutory share of the after-tax
estate. An heir is flagged as under-reserved once allocation has started
(any asset has left the pool) and the assets placed directly on that heir are
worth strictly less than the reserved amount. Assets placed on the heir's
spouse or children slots do not count toward the heir's own total.
"""

from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Iterable, Sequence

from .models import (
    Asset,
    ExtendedSlotLocation,
    HeirLocation,
    HeirRecord,
    ReservedStatus,
)

RESERVED_RATIO = Fraction(1, 2)


def _round(value: Fraction) -> int:
    exact = Decimal(value.numerator) / Decimal(value.denominator)
    return int(exact.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def reserved_share(legal_share: Fraction) -> Fraction:
    """Reserved portion as a fraction of the estate."""
    return Fraction(legal_share) * RESERVED_RATIO


def reserved_amount(legal_share: Fraction, after_tax_estate: int) -> Fraction:
    """Exact reserved amount; callers round only for display."""
    return reserved_share(legal_share) * after_tax_estate


def allocation_started(assets: Iterable[Asset]) -> bool:
    """True once at least one asset has been placed outside the pool."""
    return any(not a.in_pool for a in assets)


def received_by(heir_id: str, assets: Iterable[Asset]) -> int:
    """Sum of assets placed directly on the heir."""
    return sum(
        a.amount for a in assets
        if isinstance(a.location, HeirLocation) and a.location.heir_id == heir_id
    )


def extended_received_by(heir_id: str, assets: Iterable[Asset]) -> int:
    """Sum of assets placed on the heir's spouse and children slots."""
    return sum(
        a.amount for a in assets
        if isinstance(a.location, ExtendedSlotLocation) and a.location.heir_id == heir_id
    )


def evaluate_reserved_status(
    heirs: Sequence[HeirRecord],
    assets: Sequence[Asset],
    after_tax_estate: int,
) -> list[ReservedStatus]:
    """
    Check each heir's received total against the reserved portion.

    Args:
        heirs: Resolved heir records (non-heir records are reported, never flagged)
        assets: Every asset in the ledger
        after_tax_estate: Estate value after estate tax

    Returns:
        One ReservedStatus per heir record, in the same order
    """
    started = allocation_started(assets)
    statuses = []
    for heir in heirs:
        received = received_by(heir.id, assets)
        reserved = reserved_amount(heir.legal_share, after_tax_estate)
        statuses.append(
            ReservedStatus(
                heir_id=heir.id,
                name=heir.name,
                is_heir=heir.is_heir,
                received=received,
                extended_received=extended_received_by(heir.id, assets),
                expected_amount=_round(heir.legal_share * after_tax_estate),
                reserved_amount=_round(reserved),
                is_under_reserved=heir.is_heir and started and received < reserved,
            )
        )
    return statuses
