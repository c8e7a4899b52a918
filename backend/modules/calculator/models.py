"""
Calculator module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class FormulaSet(str, Enum):
    """Supported pivot formula sets."""

    CLASSIC = "classic"
    CAMARILLA = "camarilla"


class PivotRequest(BaseModel):
    """One session's OHLC prices."""

    open: float = Field(..., allow_inf_nan=False, description="Opening price")
    high: float = Field(..., allow_inf_nan=False, description="Session high")
    low: float = Field(..., allow_inf_nan=False, description="Session low")
    close: float = Field(..., allow_inf_nan=False, description="Closing price")
    formula: Optional[FormulaSet] = Field(
        None, description="Formula set; both are returned when omitted"
    )

    @model_validator(mode="after")
    def check_range(self) -> "PivotRequest":
        if self.high < self.low:
            raise ValueError("high must be greater than or equal to low")
        return self


class PivotLevels(BaseModel):
    """Pivot with four resistance and four support levels."""

    pivot: float
    r1: float
    r2: float
    r3: float
    r4: float
    s1: float
    s2: float
    s3: float
    s4: float


class PivotResponse(BaseModel):
    """Levels for the requested formula set(s)."""

    classic: Optional[PivotLevels] = None
    camarilla: Optional[PivotLevels] = None
