"""
Headline band classification.

Maps the final index onto a named band for display. Decision order
matters: first match wins (highest band first).
"""

from morale.config import BandThresholds


def classify_band(score: float, thresholds: BandThresholds = BandThresholds()) -> str:
    """
    Bands:
        High             : score >= high
        Solid            : score >= solid
        Needs attention  : score >= attention
        Low              : everything else
    """
    if score >= thresholds.high:
        return "High"

    if score >= thresholds.solid:
        return "Solid"

    if score >= thresholds.attention:
        return "Needs attention"

    return "Low"
