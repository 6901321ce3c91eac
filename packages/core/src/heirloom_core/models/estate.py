"""Estate models: assets, allocation locations, heir records and results.

Allocation targets are a tagged variant rather than concatenated strings:

- ``PoolLocation``: the unallocated asset pool
- ``HeirLocation``: a legal heir
- ``ExtendedSlotLocation``: an heir's own spouse or one of the heir's children

Each location still has a ``key`` string (``"pool"``, ``"{heir_id}"``,
``"{heir_id}_spouse"``, ``"{heir_id}_child_{index}"``) for callers that
address drop targets by string; ``parse_location`` converts back.
"""

import re
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Annotated, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field, model_validator

from heirloom_core.models.audit import AuditEntry
from heirloom_core.models.family import Person


POOL_KEY = "pool"


# =============================================================================
# ENUMERATIONS
# =============================================================================

class AssetType(str, Enum):
    """Kinds of estate assets, in pool display order."""
    CASH = "cash"
    STOCK = "stock"
    PROPERTY = "property"
    INSURANCE = "insurance"

    @property
    def rank(self) -> int:
        return list(AssetType).index(self)


class ExtendedSlotKind(str, Enum):
    """Which member of an heir's own household an extended slot stands for."""
    SPOUSE = "spouse"
    CHILD = "child"


# =============================================================================
# LOCATIONS
# =============================================================================

class PoolLocation(BaseModel):
    """The unallocated pool."""
    model_config = {"frozen": True}

    kind: Literal["pool"] = "pool"

    @property
    def key(self) -> str:
        return POOL_KEY


class HeirLocation(BaseModel):
    """Allocation directly to an heir."""
    model_config = {"frozen": True}

    kind: Literal["heir"] = "heir"
    heir_id: str = Field(min_length=1)

    @property
    def key(self) -> str:
        return self.heir_id


class ExtendedSlotLocation(BaseModel):
    """Allocation to an heir's spouse or child.

    These slots model indirect distribution through an heir's household.
    Amounts placed here do not count toward the heir's own received total.
    """
    model_config = {"frozen": True}

    kind: Literal["extended"] = "extended"
    heir_id: str = Field(min_length=1)
    slot: ExtendedSlotKind
    index: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_index(self) -> "ExtendedSlotLocation":
        if self.slot == ExtendedSlotKind.CHILD and self.index is None:
            raise ValueError("child slots need an index")
        if self.slot == ExtendedSlotKind.SPOUSE and self.index is not None:
            raise ValueError("spouse slots take no index")
        return self

    @property
    def key(self) -> str:
        if self.slot == ExtendedSlotKind.SPOUSE:
            return f"{self.heir_id}_spouse"
        return f"{self.heir_id}_child_{self.index}"


Location = Annotated[
    Union[PoolLocation, HeirLocation, ExtendedSlotLocation],
    Field(discriminator="kind"),
]

POOL = PoolLocation()

_SPOUSE_SLOT_RE = re.compile(r"^(?P<heir>.+)_spouse$")
_CHILD_SLOT_RE = re.compile(r"^(?P<heir>.+)_child_(?P<index>\d+)$")


def parse_location(key: str) -> Union[PoolLocation, HeirLocation, ExtendedSlotLocation]:
    """Decode a location key string into its tagged form.

    Examples:
        >>> parse_location("pool")
        PoolLocation(kind='pool')
        >>> parse_location("a1b2_child_0").index
        0
    """
    if key == POOL_KEY:
        return POOL
    match = _SPOUSE_SLOT_RE.match(key)
    if match:
        return ExtendedSlotLocation(heir_id=match["heir"], slot=ExtendedSlotKind.SPOUSE)
    match = _CHILD_SLOT_RE.match(key)
    if match:
        return ExtendedSlotLocation(
            heir_id=match["heir"],
            slot=ExtendedSlotKind.CHILD,
            index=int(match["index"]),
        )
    return HeirLocation(heir_id=key)


# =============================================================================
# ASSETS
# =============================================================================

class Asset(BaseModel):
    """A discrete estate asset. Amounts are whole currency units (TWD)."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "3f9a1c2e",
                    "asset_type": "property",
                    "amount": 20000000,
                    "location": {"kind": "pool"},
                    "name": "Taipei apartment",
                }
            ]
        }
    }

    id: str = Field(default_factory=lambda: uuid4().hex[:8])
    asset_type: AssetType
    amount: int = Field(ge=0)
    location: Location = Field(default_factory=PoolLocation)
    name: Optional[str] = None

    @property
    def in_pool(self) -> bool:
        return isinstance(self.location, PoolLocation)

    @property
    def location_key(self) -> str:
        return self.location.key


# =============================================================================
# HEIRS
# =============================================================================

class HeirRecord(Person):
    """A family member as seen by the statutory share computation.

    Records are derived from a FamilyComposition and never edited directly.
    """
    model_config = {"frozen": True}

    is_heir: bool
    share_numerator: int = Field(ge=0)
    share_denominator: int = Field(gt=0)
    relation_label: str

    @classmethod
    def from_person(
        cls,
        person: Person,
        share: Fraction,
        relation_label: str,
        is_heir: bool = True,
    ) -> "HeirRecord":
        return cls(
            **person.model_dump(),
            is_heir=is_heir,
            share_numerator=share.numerator,
            share_denominator=share.denominator,
            relation_label=relation_label,
        )

    @property
    def legal_share(self) -> Fraction:
        """Statutory share as an exact fraction of the estate."""
        return Fraction(self.share_numerator, self.share_denominator)

    @computed_field
    @property
    def share_label(self) -> str:
        """Share as written on an heir card, e.g. "1/3" or "1/1"."""
        return f"{self.share_numerator}/{self.share_denominator}"


# =============================================================================
# TAX
# =============================================================================

class TaxBracket(BaseModel):
    """One bracket of the quick-deduction schedule.

    ``upper_bound`` is inclusive; ``None`` marks the catch-all top bracket.
    """
    upper_bound: Optional[int] = Field(default=None, gt=0)
    rate: Decimal = Field(ge=0, le=1)
    quick_deduction: int = Field(default=0, ge=0)

    def applies_to(self, taxable: int) -> bool:
        return self.upper_bound is None or taxable <= self.upper_bound


class DeductionSet(BaseModel):
    """Deductions applied to the gross estate before tax."""
    model_config = {"frozen": True}

    exemption: int = 0
    funeral: int = 0
    spouse: int = 0
    parents: int = 0
    children: int = 0
    other: int = 0

    @computed_field
    @property
    def total(self) -> int:
        return (
            self.exemption + self.funeral + self.spouse
            + self.parents + self.children + self.other
        )


class TaxResult(BaseModel):
    """Estate tax computation result with its audit trail."""
    model_config = {"frozen": True}

    total_estate: int
    deductions: DeductionSet
    taxable_amount: int
    marginal_rate: Decimal
    quick_deduction: int
    tax: int
    after_tax_estate: int
    standards_version: str
    audit_log: tuple[AuditEntry, ...] = ()


# =============================================================================
# ALLOCATION RESULTS
# =============================================================================

class ReservedStatus(BaseModel):
    """Per-heir allocation check against the reserved portion."""
    model_config = {"frozen": True}

    heir_id: str
    name: str
    is_heir: bool
    received: int = Field(description="Sum of assets placed directly on the heir")
    extended_received: int = Field(
        default=0,
        description="Sum of assets placed on the heir's spouse/children slots",
    )
    expected_amount: int = Field(description="Statutory share of the after-tax estate")
    reserved_amount: int = Field(description="Half of the expected amount")
    is_under_reserved: bool


class OperationResult(BaseModel):
    """Outcome of a ledger operation that may be rejected with a reason."""
    accepted: bool
    asset_id: Optional[str] = None
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.accepted


class EstateSummary(BaseModel):
    """Everything a caller needs to render the allocation board."""
    model_config = {"frozen": True}

    total_estate: int
    tax: TaxResult
    after_tax_estate: int
    heirs: tuple[HeirRecord, ...]
    reserved_statuses: tuple[ReservedStatus, ...]
    pool_assets: tuple[Asset, ...]

    @computed_field
    @property
    def has_heirs(self) -> bool:
        return any(h.is_heir for h in self.heirs)
