"""
Calculator module.

Classic and Camarilla pivot levels from one session's OHLC prices.
"""

from .models import FormulaSet, PivotLevels, PivotRequest, PivotResponse
from .pivots import calculate, camarilla_levels, classic_levels

__all__ = [
    "FormulaSet",
    "PivotLevels",
    "PivotRequest",
    "PivotResponse",
    "calculate",
    "camarilla_levels",
    "classic_levels",
]
