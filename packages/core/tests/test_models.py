"""Tests for family, estate and audit models."""

import json
from fractions import Fraction

import pytest
from pydantic import ValidationError as PydanticValidationError

from heirloom_core import (
    POOL,
    Asset,
    AssetType,
    ConfigurationError,
    ExtendedSlotKind,
    ExtendedSlotLocation,
    FamilyComposition,
    HeirLocation,
    HeirloomError,
    HeirRecord,
    Person,
    PersonStatus,
    PoolLocation,
    Relation,
    ValidationError,
    parse_location,
)
from heirloom_core.models import AuditEntry


class TestLocations:
    """Tests for the tagged location variant."""

    def test_keys(self):
        assert POOL.key == "pool"
        assert HeirLocation(heir_id="c1").key == "c1"
        assert ExtendedSlotLocation(heir_id="c1", slot=ExtendedSlotKind.SPOUSE).key == "c1_spouse"
        assert (
            ExtendedSlotLocation(heir_id="c1", slot=ExtendedSlotKind.CHILD, index=2).key
            == "c1_child_2"
        )

    @pytest.mark.parametrize("key", ["pool", "father", "a1b2c3d4_spouse", "a1b2c3d4_child_10"])
    def test_parse_location_inverts_key(self, key):
        assert parse_location(key).key == key

    def test_parse_location_kinds(self):
        assert isinstance(parse_location("pool"), PoolLocation)
        assert parse_location("mother") == HeirLocation(heir_id="mother")
        slot = parse_location("c1_child_0")
        assert slot.heir_id == "c1"
        assert slot.slot == ExtendedSlotKind.CHILD
        assert slot.index == 0

    def test_child_slot_requires_index(self):
        with pytest.raises(PydanticValidationError):
            ExtendedSlotLocation(heir_id="c1", slot=ExtendedSlotKind.CHILD)

    def test_spouse_slot_rejects_index(self):
        with pytest.raises(PydanticValidationError):
            ExtendedSlotLocation(heir_id="c1", slot=ExtendedSlotKind.SPOUSE, index=0)

    def test_empty_heir_id_rejected(self):
        with pytest.raises(PydanticValidationError):
            HeirLocation(heir_id="")


class TestAsset:
    """Tests for the Asset model."""

    def test_defaults(self):
        asset = Asset(asset_type=AssetType.CASH, amount=100)

        assert asset.in_pool
        assert asset.location_key == "pool"
        assert len(asset.id) == 8

    def test_negative_amount_rejected(self):
        with pytest.raises(PydanticValidationError):
            Asset(asset_type=AssetType.CASH, amount=-1)

    def test_type_rank(self):
        assert [t.rank for t in AssetType] == [0, 1, 2, 3]
        assert AssetType.CASH.rank < AssetType.PROPERTY.rank

    def test_location_round_trips_through_json(self):
        """The discriminated union restores the right location kind."""
        asset = Asset(
            asset_type=AssetType.PROPERTY,
            amount=20_000_000,
            location=ExtendedSlotLocation(heir_id="c1", slot=ExtendedSlotKind.CHILD, index=1),
        )
        data = json.loads(asset.model_dump_json())

        assert data["location"]["kind"] == "extended"
        restored = Asset.model_validate(data)
        assert restored.location == asset.location


class TestFamily:
    """Tests for the family composition model."""

    def test_initial_family(self):
        family = FamilyComposition.initial()

        assert family.spouse.status == PersonStatus.ABSENT
        assert family.father.is_alive
        assert family.mother.is_alive
        assert family.children == []

    def test_living_counts(self):
        family = FamilyComposition.initial()
        family.spouse.status = PersonStatus.ALIVE
        family.mother.status = PersonStatus.DECEASED
        family.children = [
            Person(name="A", relation=Relation.CHILD),
            Person(name="B", relation=Relation.CHILD, status=PersonStatus.DECEASED),
        ]

        counts = family.living_counts()

        assert counts.spouse_alive is True
        assert counts.parent_count == 1
        assert counts.child_count == 1
        assert counts.sibling_count == 0

    def test_find(self):
        family = FamilyComposition()
        child = Person(name="A", relation=Relation.CHILD)
        family.children.append(child)

        assert family.find(child.id) is child
        assert family.find("spouse") is family.spouse
        assert family.find("missing") is None

    def test_exists_vs_alive(self):
        person = Person(name="X", relation=Relation.SPOUSE, status=PersonStatus.DECEASED)

        assert person.exists is True
        assert person.is_alive is False

    def test_name_stripped(self):
        assert Person(name="  Lin  ", relation=Relation.CHILD).name == "Lin"


class TestHeirRecord:
    """Tests for heir records."""

    def test_from_person(self):
        person = Person(id="c1", name="Child 1", relation=Relation.CHILD)
        record = HeirRecord.from_person(person, Fraction(1, 3), "Child")

        assert record.id == "c1"
        assert record.is_heir is True
        assert record.legal_share == Fraction(1, 3)
        assert record.share_label == "1/3"
        assert record.model_dump()["share_label"] == "1/3"

    def test_whole_share_label(self):
        person = Person(id="spouse", name="Spouse", relation=Relation.SPOUSE)
        record = HeirRecord.from_person(person, Fraction(1), "Spouse")

        assert record.share_label == "1/1"


class TestAuditEntry:
    """Tests for AuditEntry model."""

    def test_timestamp_is_utc(self):
        entry = AuditEntry(step="exemption", input_value="-", output_value="13330000", source="test")

        assert entry.timestamp.tzinfo is not None
        assert entry.notes is None


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_validation_error_details(self):
        error = ValidationError("Bad amount", field="amount", value="-5", constraint="> 0")

        assert isinstance(error, HeirloomError)
        assert str(error) == "Bad amount"
        assert error.recoverable is True
        assert error.details == {"field": "amount", "value": "-5", "constraint": "> 0"}

    def test_configuration_error_details(self):
        error = ConfigurationError("Bad brackets", config_key="brackets", expected="ascending")

        assert error.recoverable is False
        assert error.details["config_key"] == "brackets"
        assert "ConfigurationError" in repr(error)
