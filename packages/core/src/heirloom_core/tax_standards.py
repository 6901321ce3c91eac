"""Statutory estate tax figures (Taiwan, TWD).

Deduction amounts and the progressive bracket table used by the estate tax
calculator. The brackets are expressed with the quick-deduction method:
``tax = taxable * rate - quick_deduction`` for the bracket that contains the
taxable amount. The quick deductions are chosen so that adjacent brackets
agree at their shared boundary.

Updated: 2024 schedule
"""

from decimal import Decimal

from .models import AssetType, TaxBracket


# =============================================================================
# VERSION TRACKING
# =============================================================================

TAX_STANDARDS_VERSION = "TW-2024"


def get_tax_standards_version() -> str:
    """Return current estate tax standards version."""
    return TAX_STANDARDS_VERSION


# =============================================================================
# DEDUCTIONS
# =============================================================================

EXEMPTION = 13_330_000
FUNERAL_DEDUCTION = 1_380_000
SPOUSE_DEDUCTION = 5_530_000
PARENT_DEDUCTION = 1_380_000  # per living parent
CHILD_DEDUCTION = 560_000  # per living child


# =============================================================================
# BRACKETS
# =============================================================================

ESTATE_TAX_BRACKETS = (
    TaxBracket(upper_bound=56_210_000, rate=Decimal("0.10"), quick_deduction=0),
    TaxBracket(upper_bound=112_420_000, rate=Decimal("0.15"), quick_deduction=2_810_500),
    TaxBracket(upper_bound=None, rate=Decimal("0.20"), quick_deduction=8_431_500),
)


def default_brackets() -> list[TaxBracket]:
    """Return a fresh copy of the statutory bracket table."""
    return [b.model_copy() for b in ESTATE_TAX_BRACKETS]


# =============================================================================
# ASSET DEFAULTS
# =============================================================================
# Amounts used when an asset is added from the palette without entering a value.

DEFAULT_ASSET_AMOUNTS = {
    AssetType.CASH: 1_000_000,
    AssetType.STOCK: 2_000_000,
    AssetType.PROPERTY: 10_000_000,
    AssetType.INSURANCE: 3_000_000,
}
