"""
Pivot point formulas.

The open price is accepted for completeness but neither formula set
uses it.
"""

from .models import FormulaSet, PivotLevels, PivotRequest, PivotResponse

# Camarilla multipliers for levels 1..4
CAMARILLA_MULTIPLIERS = (1.1 / 12, 1.1 / 6, 1.1 / 4, 1.1 / 2)


def classic_levels(high: float, low: float, close: float) -> PivotLevels:
    pp = (high + low + close) / 3
    spread = high - low
    return PivotLevels(
        pivot=pp,
        r1=2 * pp - low,
        s1=2 * pp - high,
        r2=pp + spread,
        s2=pp - spread,
        r3=pp + 2 * spread,
        s3=pp - 2 * spread,
        r4=pp + 3 * spread,
        s4=pp - 3 * spread,
    )


def camarilla_levels(high: float, low: float, close: float) -> PivotLevels:
    spread = high - low
    m1, m2, m3, m4 = CAMARILLA_MULTIPLIERS
    return PivotLevels(
        pivot=(high + low + close) / 3,
        r1=close + spread * m1,
        r2=close + spread * m2,
        r3=close + spread * m3,
        r4=close + spread * m4,
        s1=close - spread * m1,
        s2=close - spread * m2,
        s3=close - spread * m3,
        s4=close - spread * m4,
    )


def calculate(request: PivotRequest) -> PivotResponse:
    """Compute the requested formula set, or both."""
    response = PivotResponse()
    if request.formula in (None, FormulaSet.CLASSIC):
        response.classic = classic_levels(request.high, request.low, request.close)
    if request.formula in (None, FormulaSet.CAMARILLA):
        response.camarilla = camarilla_levels(request.high, request.low, request.close)
    return response
