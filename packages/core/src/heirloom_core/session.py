"""Estate planning session.

An ``EstateSession`` is the single owner of the mutable state behind one
planning board: the family composition, the asset ledger and the manual
"other" deduction. All edits go through its methods and each one runs to
completion before the next. A session is not thread-safe; callers that share
one across threads must serialize access themselves.

Derived values (heir records, tax, reserved statuses) are recomputed from
scratch and cached against a structural snapshot of the inputs, so repeated
reads between edits do not recompute. Heir records, tax results, reserved
statuses and the summary itself are frozen, so the cached values used for
placement checks cannot be edited through a returned object.
"""

from typing import Any, Optional, Union

import structlog

from .config import HeirloomConfig
from .exceptions import ValidationError
from .formatting import format_share
from .heirs import HeirResolver
from .ledger import AllocationLedger, LocationLike, parse_edit_amount
from .models import (
    POOL,
    Asset,
    AssetType,
    EstateSummary,
    ExtendedSlotKind,
    ExtendedSlotLocation,
    FamilyComposition,
    Gender,
    HeirLocation,
    HeirRecord,
    OperationResult,
    Person,
    PersonStatus,
    Relation,
    ReservedStatus,
    TaxResult,
)
from .reserved import evaluate_reserved_status
from .tax_calculator import EstateTaxCalculator

logger = structlog.get_logger()

PARENT_ROLES = ("father", "mother")


class EstateSession:
    """
    Owned, in-memory state for one inheritance plan.

    Example:
        session = EstateSession()
        session.set_spouse(True)
        session.add_child("Alice")
        result = session.add_asset(AssetType.CASH, 5_000_000)
        session.move_asset(result.asset_id, session.heirs()[0].id)
        summary = session.summary()
    """

    def __init__(
        self,
        family: Optional[FamilyComposition] = None,
        assets: Optional[list[Asset]] = None,
        config: Optional[HeirloomConfig] = None,
    ):
        self.config = config or HeirloomConfig()
        self.family = family.model_copy(deep=True) if family else FamilyComposition.initial()
        self.ledger = AllocationLedger(assets)
        self.other_deduction = 0

        self._resolver = HeirResolver()
        self._calculator = EstateTaxCalculator(self.config.tax)
        self._heirs_cache: Optional[tuple[str, list[HeirRecord]]] = None
        self._summary_cache: Optional[tuple[tuple, EstateSummary]] = None

    # ------------------------------------------------------------------
    # Family editing
    # ------------------------------------------------------------------

    def _require_person(self, person_id: str) -> Person:
        person = self.family.find(person_id)
        if person is None:
            raise ValidationError(
                f"No family member with id {person_id!r}",
                field="person_id",
                value=person_id,
            )
        return person

    def _release_non_heirs(self) -> None:
        """Return assets placed directly on people who are no longer heirs."""
        heir_ids = {h.id for h in self.heirs() if h.is_heir}
        stale = {
            a.location.heir_id for a in self.ledger.assets
            if isinstance(a.location, HeirLocation) and a.location.heir_id not in heir_ids
        }
        for holder_id in stale:
            self.ledger.release_holder(holder_id, include_extended=False)

    def set_decedent_name(self, name: str) -> None:
        self.family.decedent_name = name.strip()

    def set_spouse(self, present: bool) -> None:
        """Toggle between "has a spouse" (alive) and "no spouse" (absent)."""
        self.set_person_status(
            self.family.spouse.id,
            PersonStatus.ALIVE if present else PersonStatus.ABSENT,
        )

    def set_spouse_status(self, status: Union[PersonStatus, str]) -> None:
        self.set_person_status(self.family.spouse.id, status)

    def set_parent_status(self, role: str, status: Union[PersonStatus, str]) -> None:
        if role not in PARENT_ROLES:
            raise ValidationError(
                f"Unknown parent role {role!r}",
                field="role",
                value=role,
                constraint=f"one of {PARENT_ROLES}",
            )
        self.set_person_status(getattr(self.family, role).id, status)

    def set_person_status(self, person_id: str, status: Union[PersonStatus, str]) -> None:
        """Change a family member's status.

        Assets held by anyone who stops being an heir as a result are returned
        to the pool.
        """
        person = self._require_person(person_id)
        person.status = PersonStatus(status)
        logger.info("person_status_set", person_id=person_id, status=person.status.value)
        self._release_non_heirs()

    def _add_relative(
        self,
        members: list[Person],
        relation: Relation,
        label: str,
        name: Optional[str],
        gender: Optional[Gender],
    ) -> Person:
        person = Person(
            name=name or f"{label} {len(members) + 1}",
            gender=gender,
            relation=relation,
        )
        members.append(person)
        logger.info("relative_added", person_id=person.id, relation=relation.value)
        self._release_non_heirs()
        return person

    def _remove_relative(self, members: list[Person], person_id: str) -> bool:
        for person in members:
            if person.id == person_id:
                members.remove(person)
                self.ledger.release_holder(person_id)
                logger.info("relative_removed", person_id=person_id)
                self._release_non_heirs()
                return True
        return False

    def add_child(self, name: Optional[str] = None, gender: Optional[Gender] = None) -> Person:
        return self._add_relative(self.family.children, Relation.CHILD, "Child", name, gender)

    def remove_child(self, child_id: str) -> bool:
        """Remove a child; assets allocated to them return to the pool."""
        return self._remove_relative(self.family.children, child_id)

    def rename_child(self, child_id: str, name: str) -> None:
        self._rename(self.family.children, child_id, name)

    def add_sibling(self, name: Optional[str] = None, gender: Optional[Gender] = None) -> Person:
        return self._add_relative(self.family.siblings, Relation.SIBLING, "Sibling", name, gender)

    def remove_sibling(self, sibling_id: str) -> bool:
        return self._remove_relative(self.family.siblings, sibling_id)

    def rename_sibling(self, sibling_id: str, name: str) -> None:
        self._rename(self.family.siblings, sibling_id, name)

    def _rename(self, members: list[Person], person_id: str, name: str) -> None:
        for person in members:
            if person.id == person_id:
                person.name = name.strip()
                return
        raise ValidationError(
            f"No family member with id {person_id!r}",
            field="person_id",
            value=person_id,
        )

    def set_extended_family(
        self,
        person_id: str,
        has_spouse: bool,
        child_count: int = 0,
    ) -> None:
        """Describe a relative's own household (their spouse and children)."""
        if child_count < 0:
            raise ValidationError(
                "Child count cannot be negative",
                field="child_count",
                value=child_count,
                constraint=">= 0",
            )
        person = self._require_person(person_id)
        person.has_spouse = has_spouse
        person.has_children = child_count > 0
        person.child_count = child_count

    def extended_slots(self, heir_id: str) -> list[ExtendedSlotLocation]:
        """Extended slots offered for a relative, from their household fields."""
        person = self._require_person(heir_id)
        slots = []
        if person.has_spouse:
            slots.append(ExtendedSlotLocation(heir_id=heir_id, slot=ExtendedSlotKind.SPOUSE))
        if person.has_children:
            slots.extend(
                ExtendedSlotLocation(heir_id=heir_id, slot=ExtendedSlotKind.CHILD, index=i)
                for i in range(person.child_count)
            )
        return slots

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def add_asset(
        self,
        asset_type: Union[AssetType, str],
        amount: Any,
        name: Optional[str] = None,
        unit: int = 1,
    ) -> OperationResult:
        return self.ledger.add_asset(asset_type, amount, name=name, unit=unit)

    def add_default_asset(self, asset_type: Union[AssetType, str]) -> OperationResult:
        return self.ledger.add_default_asset(asset_type)

    def move_asset(self, asset_id: str, target: LocationLike) -> bool:
        """Move an asset, validating person targets against the current heirs."""
        return self.ledger.move_asset(asset_id, target, self.heirs())

    def return_to_pool(self, asset_id: str) -> bool:
        return self.ledger.move_asset(asset_id, POOL, self.heirs())

    def delete_asset(self, asset_id: str) -> bool:
        return self.ledger.delete_asset(asset_id)

    def set_amount(self, asset_id: str, new_amount: Any) -> bool:
        return self.ledger.set_amount(asset_id, new_amount)

    def reset_allocation(self) -> None:
        self.ledger.reset_allocation()

    def set_other_deduction(self, amount: Any) -> bool:
        """Set the manual "other" deduction; negatives are treated as zero.

        Non-numeric or fractional input is rejected and leaves the deduction
        unchanged.
        """
        try:
            self.other_deduction = parse_edit_amount(amount)
        except ValidationError as e:
            logger.info("other_deduction_rejected", value=str(amount), reason=e.message)
            return False
        return True

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def heirs(self) -> list[HeirRecord]:
        key = self.family.model_dump_json()
        if self._heirs_cache is None or self._heirs_cache[0] != key:
            self._heirs_cache = (key, self._resolver.resolve(self.family))
        return list(self._heirs_cache[1])

    def tax(self) -> TaxResult:
        return self.summary().tax

    def reserved_statuses(self) -> list[ReservedStatus]:
        return list(self.summary().reserved_statuses)

    def share_label(self, heir: HeirRecord) -> str:
        """Readable share for display, per the display settings."""
        display = self.config.display
        return format_share(
            heir.legal_share,
            max_denominator=display.fraction_max_denominator,
            tolerance=display.fraction_tolerance,
            percent_decimals=display.percent_decimals,
        )

    def summary(self) -> EstateSummary:
        """Recompute (or reuse) every derived value for the current state."""
        key = (self.family.model_dump_json(), self.ledger.snapshot(), self.other_deduction)
        if self._summary_cache is not None and self._summary_cache[0] == key:
            return self._summary_cache[1]

        heirs = self.heirs()
        assets = self.ledger.assets
        tax = self._calculator.compute_tax(
            self.ledger.total_amount(),
            self.family.living_counts(),
            self.other_deduction,
        )
        summary = EstateSummary(
            total_estate=tax.total_estate,
            tax=tax,
            after_tax_estate=tax.after_tax_estate,
            heirs=tuple(heirs),
            reserved_statuses=tuple(
                evaluate_reserved_status(heirs, assets, tax.after_tax_estate)
            ),
            pool_assets=tuple(a.model_copy() for a in self.ledger.pool_assets()),
        )
        self._summary_cache = (key, summary)
        return summary
