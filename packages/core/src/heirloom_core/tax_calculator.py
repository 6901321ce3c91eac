"""Progressive estate tax calculation.

The gross estate is reduced by the statutory deductions (exemption, funeral,
and per-relative deductions keyed off living family members), and the
remaining taxable base is taxed with the quick-deduction bracket method.

All steps are logged for an audit trail.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import structlog

from .config import TaxConfig
from .exceptions import ConfigurationError
from .models import AuditEntry, DeductionSet, LivingCounts, TaxBracket, TaxResult
from .tax_standards import get_tax_standards_version

logger = structlog.get_logger()


def _to_whole_units(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def verify_brackets(brackets: list[TaxBracket]) -> None:
    """Check that a bracket table is usable.

    The table must be ascending, end with exactly one catch-all bracket, and
    produce the same tax from both neighbouring formulas at every boundary.

    Raises:
        ConfigurationError: If any of these conditions fails.
    """
    if not brackets or brackets[-1].upper_bound is not None:
        raise ConfigurationError(
            "Tax brackets must end with a catch-all bracket",
            config_key="brackets",
            expected="upper_bound=None on the last bracket",
        )

    previous_bound = 0
    for lower, upper in zip(brackets, brackets[1:]):
        bound = lower.upper_bound
        if bound is None or bound <= previous_bound:
            raise ConfigurationError(
                "Tax bracket upper bounds must be strictly ascending",
                config_key="brackets",
                expected="ascending upper_bound values",
                actual=bound,
            )
        previous_bound = bound

        below = bound * lower.rate - lower.quick_deduction
        above = bound * upper.rate - upper.quick_deduction
        if below != above:
            raise ConfigurationError(
                "Quick deductions are not continuous at a bracket boundary",
                config_key="brackets",
                expected=f"equal tax at {bound}",
                actual=f"{below} vs {above}",
            )


class EstateTaxCalculator:
    """
    Calculate estate tax from the gross estate and the living family.

    Deductions:
    - Basic exemption and funeral deduction, always applied
    - Spouse deduction, once if the spouse is alive
    - Per-parent deduction for each living parent
    - Per-child deduction for each living child
    - A manually entered "other" deduction

    The taxable base is taxed with ``taxable * rate - quick_deduction`` for the
    first bracket whose upper bound is at least the taxable base.
    """

    def __init__(self, config: Optional[TaxConfig] = None):
        """
        Initialize calculator with a tax configuration.

        Args:
            config: Deduction amounts and brackets (default: statutory figures)

        Raises:
            ConfigurationError: If the configured brackets are unusable.
        """
        self.config = config or TaxConfig()
        verify_brackets(self.config.brackets)
        self.standards_version = get_tax_standards_version()
        self._audit_log: list[AuditEntry] = []

    def _log_step(
        self,
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit log."""
        entry = AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        )
        self._audit_log.append(entry)
        logger.debug(
            "tax_calculation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def bracket_for(self, taxable: int) -> TaxBracket:
        """Return the bracket whose range contains ``taxable``."""
        for bracket in self.config.brackets:
            if bracket.applies_to(taxable):
                return bracket
        # verify_brackets guarantees a catch-all
        return self.config.brackets[-1]

    def compute_tax_on_taxable(self, taxable: int) -> int:
        """Apply the bracket formula to an already-deducted taxable base."""
        taxable = max(0, taxable)
        bracket = self.bracket_for(taxable)
        tax = Decimal(taxable) * bracket.rate - bracket.quick_deduction
        return max(0, _to_whole_units(tax))

    def compute_deductions(
        self,
        living_counts: LivingCounts,
        manual_other_deduction: int = 0,
    ) -> DeductionSet:
        """Derive the deduction set for a family.

        A negative manual deduction is treated as zero.
        """
        cfg = self.config
        return DeductionSet(
            exemption=cfg.exemption,
            funeral=cfg.funeral_deduction,
            spouse=cfg.spouse_deduction if living_counts.spouse_alive else 0,
            parents=cfg.parent_deduction * living_counts.parent_count,
            children=cfg.child_deduction * living_counts.child_count,
            other=max(0, manual_other_deduction),
        )

    def compute_tax(
        self,
        total_estate: int,
        living_counts: LivingCounts,
        manual_other_deduction: int = 0,
    ) -> TaxResult:
        """
        Calculate estate tax.

        Args:
            total_estate: Sum of all asset amounts
            living_counts: Living spouse/parents/children used for deductions
            manual_other_deduction: Additional deduction entered by the user

        Returns:
            TaxResult with deductions, bracket, tax and audit trail
        """
        self._audit_log = []
        total_estate = max(0, total_estate)

        self._log_step(
            step="total_estate",
            input_value=str(total_estate),
            output_value=str(total_estate),
            source="Sum of asset amounts",
        )

        deductions = self.compute_deductions(living_counts, manual_other_deduction)

        self._log_step(
            step="exemption",
            input_value="always applied",
            output_value=str(deductions.exemption),
            source=f"Estate tax standards {self.standards_version}",
        )
        self._log_step(
            step="funeral_deduction",
            input_value="always applied",
            output_value=str(deductions.funeral),
            source=f"Estate tax standards {self.standards_version}",
        )
        self._log_step(
            step="spouse_deduction",
            input_value=f"spouse_alive={living_counts.spouse_alive}",
            output_value=str(deductions.spouse),
            source=f"Estate tax standards {self.standards_version}",
        )
        self._log_step(
            step="parent_deduction",
            input_value=f"{living_counts.parent_count} x {self.config.parent_deduction}",
            output_value=str(deductions.parents),
            source=f"Estate tax standards {self.standards_version}",
        )
        self._log_step(
            step="child_deduction",
            input_value=f"{living_counts.child_count} x {self.config.child_deduction}",
            output_value=str(deductions.children),
            source=f"Estate tax standards {self.standards_version}",
        )
        if deductions.other > 0:
            self._log_step(
                step="other_deduction",
                input_value=str(manual_other_deduction),
                output_value=str(deductions.other),
                source="User provided",
            )

        self._log_step(
            step="total_deduction",
            input_value="sum of deductions",
            output_value=str(deductions.total),
            source="Calculated",
        )

        taxable = max(0, total_estate - deductions.total)
        self._log_step(
            step="taxable_amount",
            input_value=f"max(0, {total_estate} - {deductions.total})",
            output_value=str(taxable),
            source="Calculated",
        )

        bracket = self.bracket_for(taxable)
        tax = self.compute_tax_on_taxable(taxable)
        self._log_step(
            step="estate_tax",
            input_value=f"{taxable} x {bracket.rate} - {bracket.quick_deduction}",
            output_value=str(tax),
            source="Quick-deduction bracket method",
            notes=(
                f"bracket up to {bracket.upper_bound}"
                if bracket.upper_bound is not None else "top bracket"
            ),
        )

        after_tax = max(0, total_estate - tax)

        logger.info(
            "estate_tax_computed",
            total_estate=total_estate,
            taxable=taxable,
            rate=str(bracket.rate),
            tax=tax,
        )

        return TaxResult(
            total_estate=total_estate,
            deductions=deductions,
            taxable_amount=taxable,
            marginal_rate=bracket.rate,
            quick_deduction=bracket.quick_deduction,
            tax=tax,
            after_tax_estate=after_tax,
            standards_version=self.standards_version,
            audit_log=tuple(self._audit_log),
        )
