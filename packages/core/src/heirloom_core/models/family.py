"""Family composition models.

A family is described from the decedent's point of view: one spouse slot,
a father and a mother slot, and ordered lists of children and siblings.
Slots that were never filled in carry ``PersonStatus.ABSENT``.
"""

from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field, field_validator


SPOUSE_ID = "spouse"
FATHER_ID = "father"
MOTHER_ID = "mother"


def generate_person_id() -> str:
    """Return a short random id for a child or sibling."""
    return uuid4().hex[:8]


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Gender(str, Enum):
    """Gender of a family member."""
    MALE = "male"
    FEMALE = "female"


class PersonStatus(str, Enum):
    """Whether a family role is filled and whether that person is alive."""
    ABSENT = "absent"
    ALIVE = "alive"
    DECEASED = "deceased"


class Relation(str, Enum):
    """Relation of a family member to the decedent."""
    SPOUSE = "spouse"
    PARENT = "parent"
    CHILD = "child"
    SIBLING = "sibling"


# =============================================================================
# PEOPLE
# =============================================================================

class Person(BaseModel):
    """A member of the decedent's family.

    The ``has_spouse``/``has_children``/``child_count`` fields describe the
    person's own household. They only decide which extended slots are offered
    for that person when allocating assets; they never make anyone an heir.
    """
    id: str = Field(default_factory=generate_person_id)
    name: str
    gender: Optional[Gender] = None
    status: PersonStatus = PersonStatus.ALIVE
    relation: Relation
    has_spouse: bool = False
    has_children: bool = False
    child_count: int = Field(default=0, ge=0)

    @property
    def is_alive(self) -> bool:
        return self.status == PersonStatus.ALIVE

    @property
    def exists(self) -> bool:
        """True when the role slot is populated (alive or deceased)."""
        return self.status != PersonStatus.ABSENT

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


def _default_spouse() -> Person:
    return Person(
        id=SPOUSE_ID, name="Spouse", status=PersonStatus.ABSENT,
        relation=Relation.SPOUSE,
    )


def _default_father() -> Person:
    return Person(
        id=FATHER_ID, name="Father", gender=Gender.MALE,
        status=PersonStatus.ABSENT, relation=Relation.PARENT,
    )


def _default_mother() -> Person:
    return Person(
        id=MOTHER_ID, name="Mother", gender=Gender.FEMALE,
        status=PersonStatus.ABSENT, relation=Relation.PARENT,
    )


class LivingCounts(BaseModel):
    """Counts of living relatives, as used by the estate tax deductions."""
    spouse_alive: bool = False
    parent_count: int = Field(default=0, ge=0, le=2)
    child_count: int = Field(default=0, ge=0)
    sibling_count: int = Field(default=0, ge=0)


class FamilyComposition(BaseModel):
    """The decedent's family.

    Children and siblings keep insertion order, which is used only for
    display numbering ("Child 1", "Child 2", ...). Share computation does not
    depend on it.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "decedent_name": "Decedent",
                    "spouse": {"id": "spouse", "name": "Spouse", "status": "alive", "relation": "spouse"},
                    "children": [
                        {"id": "c1", "name": "Child 1", "status": "alive", "relation": "child"},
                    ],
                }
            ]
        }
    }

    decedent_name: str = "Decedent"
    spouse: Person = Field(default_factory=_default_spouse)
    father: Person = Field(default_factory=_default_father)
    mother: Person = Field(default_factory=_default_mother)
    children: list[Person] = Field(default_factory=list)
    siblings: list[Person] = Field(default_factory=list)

    @classmethod
    def initial(cls) -> "FamilyComposition":
        """Starting family for a new session: no spouse, both parents alive."""
        family = cls()
        family.father.status = PersonStatus.ALIVE
        family.mother.status = PersonStatus.ALIVE
        return family

    @computed_field
    @property
    def living_children(self) -> list[Person]:
        return [c for c in self.children if c.is_alive]

    @computed_field
    @property
    def living_parents(self) -> list[Person]:
        return [p for p in (self.father, self.mother) if p.is_alive]

    @computed_field
    @property
    def living_siblings(self) -> list[Person]:
        return [s for s in self.siblings if s.is_alive]

    def members(self) -> list[Person]:
        """Every person record, populated or not, in display order."""
        return [self.spouse, self.father, self.mother, *self.children, *self.siblings]

    def find(self, person_id: str) -> Optional[Person]:
        for person in self.members():
            if person.id == person_id:
                return person
        return None

    def living_counts(self) -> LivingCounts:
        return LivingCounts(
            spouse_alive=self.spouse.is_alive,
            parent_count=len(self.living_parents),
            child_count=len(self.living_children),
            sibling_count=len(self.living_siblings),
        )
