"""Audit trail model for calculation transparency.

Each estate tax computation records its steps (deductions, taxable base,
bracket, tax) so a result can be explained line by line.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class AuditEntry(BaseModel):
    """Single step of a calculation.

    Attributes:
        timestamp: When this entry was created (UTC)
        step: Machine-readable step name (e.g. "spouse_deduction")
        input_value: What went into the step
        output_value: What came out of it
        source: Where the rule or figure comes from
        notes: Additional context
    """
    model_config = {"frozen": True}

    timestamp: datetime = Field(default_factory=_utc_now)
    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None
