"""Tests for reserved portion evaluation."""

from fractions import Fraction

import pytest

from heirloom_core import (
    Asset,
    AssetType,
    ExtendedSlotKind,
    ExtendedSlotLocation,
    FamilyComposition,
    HeirLocation,
    Person,
    PersonStatus,
    Relation,
    allocation_started,
    evaluate_reserved_status,
    reserved_amount,
    reserved_share,
    resolve_heirs,
)


def cash(amount: int, location=None) -> Asset:
    if location is None:
        return Asset(asset_type=AssetType.CASH, amount=amount)
    return Asset(asset_type=AssetType.CASH, amount=amount, location=location)


@pytest.fixture
def spouse_and_child_heirs():
    """Spouse and one child, 1/2 each."""
    family = FamilyComposition()
    family.spouse.status = PersonStatus.ALIVE
    family.children = [Person(id="c1", name="Child 1", relation=Relation.CHILD)]
    return resolve_heirs(family)


@pytest.fixture
def ghost_spouse_heirs():
    """Deceased spouse (non-heir) and one child."""
    family = FamilyComposition()
    family.spouse.status = PersonStatus.DECEASED
    family.children = [Person(id="c1", name="Child 1", relation=Relation.CHILD)]
    return resolve_heirs(family)


def by_id(statuses) -> dict:
    return {s.heir_id: s for s in statuses}


class TestReservedFormulas:
    """Reserved share and amount are half of the statutory entitlement."""

    def test_reserved_share(self):
        assert reserved_share(Fraction(1, 3)) == Fraction(1, 6)
        assert reserved_share(Fraction(1)) == Fraction(1, 2)

    def test_reserved_amount(self):
        assert reserved_amount(Fraction(1, 2), 1000) == 250
        assert reserved_amount(Fraction(1, 3), 1000) == Fraction(500, 3)

    def test_allocation_started(self):
        assert allocation_started([cash(10), cash(20)]) is False
        assert allocation_started([cash(10), cash(20, HeirLocation(heir_id="c1"))]) is True
        assert allocation_started([]) is False


class TestReservedStatus:
    """Test suite for evaluate_reserved_status."""

    def test_nobody_flagged_before_allocation(self, spouse_and_child_heirs):
        """With every asset in the pool, no heir is flagged."""
        statuses = evaluate_reserved_status(
            spouse_and_child_heirs, [cash(600), cash(400)], after_tax_estate=1000
        )

        assert len(statuses) == 2
        assert not any(s.is_under_reserved for s in statuses)
        assert all(s.received == 0 for s in statuses)

    def test_flags_after_allocation_starts(self, spouse_and_child_heirs):
        """Once anything is allocated, heirs below half their share are flagged."""
        assets = [cash(100, HeirLocation(heir_id="spouse")), cash(900)]
        statuses = by_id(
            evaluate_reserved_status(spouse_and_child_heirs, assets, after_tax_estate=1000)
        )

        assert statuses["spouse"].received == 100
        assert statuses["spouse"].reserved_amount == 250
        assert statuses["spouse"].expected_amount == 500
        assert statuses["spouse"].is_under_reserved is True
        # The child received nothing while allocation is under way
        assert statuses["c1"].is_under_reserved is True

    def test_exactly_reserved_is_not_flagged(self, spouse_and_child_heirs):
        """The comparison is strict: receiving exactly the reserve is fine."""
        assets = [
            cash(250, HeirLocation(heir_id="spouse")),
            cash(750, HeirLocation(heir_id="c1")),
        ]
        statuses = by_id(
            evaluate_reserved_status(spouse_and_child_heirs, assets, after_tax_estate=1000)
        )

        assert statuses["spouse"].is_under_reserved is False
        assert statuses["c1"].is_under_reserved is False

    def test_extended_slot_does_not_count(self, spouse_and_child_heirs):
        """Assets on a child's household slots are not the child's own."""
        slot = ExtendedSlotLocation(heir_id="c1", slot=ExtendedSlotKind.CHILD, index=0)
        assets = [cash(400, slot), cash(600, HeirLocation(heir_id="spouse"))]
        statuses = by_id(
            evaluate_reserved_status(spouse_and_child_heirs, assets, after_tax_estate=1000)
        )

        assert statuses["c1"].received == 0
        assert statuses["c1"].extended_received == 400
        assert statuses["c1"].is_under_reserved is True

    def test_non_heir_never_flagged(self, ghost_spouse_heirs):
        """A ghost spouse record is reported but never flagged."""
        assets = [cash(10, HeirLocation(heir_id="c1")), cash(990)]
        statuses = by_id(
            evaluate_reserved_status(ghost_spouse_heirs, assets, after_tax_estate=1000)
        )

        assert statuses["spouse"].is_heir is False
        assert statuses["spouse"].reserved_amount == 0
        assert statuses["spouse"].is_under_reserved is False
        assert statuses["c1"].is_under_reserved is True

    def test_exact_comparison_before_rounding(self):
        """Reserve of 166.67 is reported as 167; 166 is under, 167 is not."""
        family = FamilyComposition()
        family.spouse.status = PersonStatus.ALIVE
        family.children = [
            Person(id="c1", name="Child 1", relation=Relation.CHILD),
            Person(id="c2", name="Child 2", relation=Relation.CHILD),
        ]
        heirs = resolve_heirs(family)

        under = by_id(
            evaluate_reserved_status(
                heirs, [cash(166, HeirLocation(heir_id="c1"))], after_tax_estate=1000
            )
        )
        enough = by_id(
            evaluate_reserved_status(
                heirs, [cash(167, HeirLocation(heir_id="c1"))], after_tax_estate=1000
            )
        )

        assert under["c1"].reserved_amount == 167
        assert under["c1"].is_under_reserved is True
        assert enough["c1"].is_under_reserved is False
