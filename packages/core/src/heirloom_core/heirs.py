"""Statutory heir resolution.

Heirs are determined by priority class. The first class with at least one
living member inherits together with a living spouse; lower classes are
skipped entirely:

1. Children: spouse and each living child share equally (1/N each)
2. Parents: spouse takes 1/2, living parents split the other 1/2
   (without a spouse, living parents split the whole estate)
3. Siblings: same pattern as parents
4. Spouse alone: the whole estate

A spouse who exists but does not inherit (a deceased spouse) is still
returned as a non-heir record so callers can show the slot. No other
non-participating relative is returned.
"""

from fractions import Fraction
from typing import Optional

import structlog

from .models import MOTHER_ID, FamilyComposition, HeirRecord, Person, Relation

logger = structlog.get_logger()


RELATION_LABELS = {
    Relation.SPOUSE: "Spouse",
    Relation.CHILD: "Child",
    Relation.SIBLING: "Sibling",
}

SPOUSE_HALF = Fraction(1, 2)


def relation_label(person: Person) -> str:
    """Label shown on an heir card ("Father", "Mother", "Child", ...)."""
    if person.relation == Relation.PARENT:
        return "Mother" if person.id == MOTHER_ID else "Father"
    return RELATION_LABELS[person.relation]


class HeirResolver:
    """Derive heir records and statutory shares from a family composition."""

    def resolve(self, family: FamilyComposition) -> list[HeirRecord]:
        """
        Determine the active heir class and each heir's statutory share.

        Args:
            family: The decedent's family

        Returns:
            Heir records, spouse first, then the active class in family order.
            Empty when nobody inherits and no spouse slot is populated.
        """
        spouse = family.spouse if family.spouse.is_alive else None
        children = family.living_children
        parents = family.living_parents
        siblings = family.living_siblings

        if children:
            records = self._equal_shares(spouse, children)
            heir_class = "children"
        elif parents:
            records = self._spouse_half(spouse, parents)
            heir_class = "parents"
        elif siblings:
            records = self._spouse_half(spouse, siblings)
            heir_class = "siblings"
        elif spouse is not None:
            records = [self._record(spouse, Fraction(1))]
            heir_class = "spouse_alone"
        else:
            records = []
            heir_class = "none"

        if spouse is None and family.spouse.exists:
            records.append(
                self._record(family.spouse, Fraction(0), is_heir=False)
            )

        logger.debug(
            "heirs_resolved",
            heir_class=heir_class,
            heirs=[r.id for r in records if r.is_heir],
        )
        return records

    def _record(self, person: Person, share: Fraction, is_heir: bool = True) -> HeirRecord:
        return HeirRecord.from_person(person, share, relation_label(person), is_heir=is_heir)

    def _equal_shares(
        self,
        spouse: Optional[Person],
        children: list[Person],
    ) -> list[HeirRecord]:
        heir_count = len(children) + (1 if spouse is not None else 0)
        share = Fraction(1, heir_count)
        members = ([spouse] if spouse is not None else []) + children
        return [self._record(p, share) for p in members]

    def _spouse_half(
        self,
        spouse: Optional[Person],
        relatives: list[Person],
    ) -> list[HeirRecord]:
        if spouse is None:
            share = Fraction(1, len(relatives))
            return [self._record(p, share) for p in relatives]

        share = (1 - SPOUSE_HALF) / len(relatives)
        return [self._record(spouse, SPOUSE_HALF)] + [
            self._record(p, share) for p in relatives
        ]


def resolve_heirs(family: FamilyComposition) -> list[HeirRecord]:
    """Convenience wrapper around ``HeirResolver().resolve``."""
    return HeirResolver().resolve(family)
