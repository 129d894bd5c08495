"""
Data models for DRG description separation.

A DRG description such as "ACUTE LEUKEMIA W/O MAJOR O.R. PROCEDURE W MCC"
carries a clinical category and, optionally, a complication qualifier.
These models describe the rules that recognize qualifiers and the rows
produced when descriptions are separated.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class ComplicationLabel:
    """Labels assigned to the recognized complication qualifiers."""

    WITH_CC = "with CC"
    WITH_MCC = "with MCC"
    WITH_CC_MCC = "with CC/MCC"
    WITHOUT_CC = "without CC"
    WITHOUT_MCC = "without MCC"
    WITHOUT_CC_MCC = "without CC/MCC"


class ComplicationPattern(BaseModel):
    """A suffix that marks a complication qualifier, and the label it maps to."""

    suffix: str = Field(
        ...,
        description="Qualifier text at the end of a DRG description, e.g., 'W CC/MCC'"
    )
    label: str = Field(
        ...,
        description="Complication label recorded when the suffix matches, e.g., 'with CC/MCC'"
    )

    @field_validator('suffix')
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        """Normalize suffix to upper case with single spaces."""
        v = " ".join(v.split()).upper()
        if not v:
            raise ValueError("Pattern suffix cannot be empty")
        return v

    @field_validator('label')
    @classmethod
    def validate_label(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Pattern label cannot be empty")
        return v


class SeparatedDRG(BaseModel):
    """One separated DRG description."""

    msdrg: Optional[str] = Field(None, description="Original DRG description")
    msdrg_base: Optional[str] = Field(
        None,
        description="Description with complication (and optionally age) qualifiers removed"
    )
    msdrg_complication: Optional[str] = Field(
        None,
        description="Complication label, or None when no qualifier was recognized"
    )
