"""Data models for heirloom-core.

This package provides:
- Family composition and people (family.py)
- Assets, allocation locations, heir records and results (estate.py)
- Calculation audit entries (audit.py)
"""

from heirloom_core.models.family import (
    # Enumerations
    Gender,
    PersonStatus,
    Relation,
    # People
    Person,
    FamilyComposition,
    LivingCounts,
    # Well-known ids
    SPOUSE_ID,
    FATHER_ID,
    MOTHER_ID,
    generate_person_id,
)

from heirloom_core.models.estate import (
    # Enumerations
    AssetType,
    ExtendedSlotKind,
    # Locations
    POOL,
    POOL_KEY,
    Location,
    PoolLocation,
    HeirLocation,
    ExtendedSlotLocation,
    parse_location,
    # Assets and heirs
    Asset,
    HeirRecord,
    # Tax
    TaxBracket,
    DeductionSet,
    TaxResult,
    # Allocation results
    ReservedStatus,
    OperationResult,
    EstateSummary,
)

from heirloom_core.models.audit import AuditEntry

__all__ = [
    # Enumerations
    "Gender",
    "PersonStatus",
    "Relation",
    "AssetType",
    "ExtendedSlotKind",
    # People
    "Person",
    "FamilyComposition",
    "LivingCounts",
    "SPOUSE_ID",
    "FATHER_ID",
    "MOTHER_ID",
    "generate_person_id",
    # Locations
    "POOL",
    "POOL_KEY",
    "Location",
    "PoolLocation",
    "HeirLocation",
    "ExtendedSlotLocation",
    "parse_location",
    # Assets and heirs
    "Asset",
    "HeirRecord",
    # Tax
    "TaxBracket",
    "DeductionSet",
    "TaxResult",
    # Results
    "ReservedStatus",
    "OperationResult",
    "EstateSummary",
    # Audit
    "AuditEntry",
]
