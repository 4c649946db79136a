"""
Life Morale Index: deterministic scoring engine for the 24-question survey
and 168-hour weekly time map.

Architecture:
    config: Calibration, RI, cross-lift, ELI ceiling and band parameters
    schema: Input/output records and request boundary validation
    scoring: Calibration curve and dimension averages
    timemap: Time-weighted blend, cross-lift, derived sleep quality
    residual: Residual influence and emotional ceiling
    rankings: Top drainers / uplifters
    bands: Headline band classification
    pipeline: Orchestration: validate → calibrate → blend → adjust → rank → report

Public API:
    score(filepath)          → CLI mode
    score_data(payload)      → UI / backend mode
    generate_report(result)  → formatted report
"""

from morale.config import MoraleConfig
from morale.pipeline import generate_report, score, score_data
from morale.schema import InvalidRequestError

__version__ = "1.0.0"

__all__ = [
    "InvalidRequestError",
    "MoraleConfig",
    "generate_report",
    "score",
    "score_data",
]
