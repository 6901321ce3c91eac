"""Heirloom Core - Statutory inheritance allocation and estate tax engine."""

__version__ = "0.1.0"

from .config import DisplayConfig, HeirloomConfig, TaxConfig, configure_logging
from .exceptions import ConfigurationError, HeirloomError, ValidationError
from .formatting import format_share
from .heirs import HeirResolver, resolve_heirs
from .ledger import AllocationLedger, parse_amount, parse_edit_amount
from .models import (
    # Family
    FamilyComposition,
    Gender,
    LivingCounts,
    Person,
    PersonStatus,
    Relation,
    # Estate
    Asset,
    AssetType,
    EstateSummary,
    ExtendedSlotKind,
    ExtendedSlotLocation,
    HeirLocation,
    HeirRecord,
    OperationResult,
    POOL,
    PoolLocation,
    ReservedStatus,
    TaxResult,
    parse_location,
)
from .reserved import (
    allocation_started,
    evaluate_reserved_status,
    reserved_amount,
    reserved_share,
)
from .session import EstateSession
from .tax_calculator import EstateTaxCalculator
from .tax_standards import TAX_STANDARDS_VERSION

__all__ = [
    # Engine
    "EstateSession",
    "HeirResolver",
    "resolve_heirs",
    "AllocationLedger",
    "parse_amount",
    "parse_edit_amount",
    "EstateTaxCalculator",
    "reserved_share",
    "reserved_amount",
    "allocation_started",
    "evaluate_reserved_status",
    "format_share",
    # Models
    "FamilyComposition",
    "Gender",
    "LivingCounts",
    "Person",
    "PersonStatus",
    "Relation",
    "Asset",
    "AssetType",
    "EstateSummary",
    "ExtendedSlotKind",
    "ExtendedSlotLocation",
    "HeirLocation",
    "HeirRecord",
    "OperationResult",
    "POOL",
    "PoolLocation",
    "ReservedStatus",
    "TaxResult",
    "parse_location",
    # Config
    "HeirloomConfig",
    "TaxConfig",
    "DisplayConfig",
    "configure_logging",
    "TAX_STANDARDS_VERSION",
    # Errors
    "HeirloomError",
    "ValidationError",
    "ConfigurationError",
]
