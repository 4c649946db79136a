"""
Centralized configuration for the calibration curve, residual influence,
cross-lift and emotional ceiling.

Every tunable constant lives here. A request may override a subset of these
through `MoraleConfig.with_overrides`; everything else keeps its named default.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional


logger = logging.getLogger(__name__)


WEEK_HOURS = 168.0


# ---------------------------------------------------------------------------
# Calibration curve
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CalibrationParams:
    """
    Exponential saturation curve mapping raw 1-10 answers onto [0, max].

    calibrated = max * (1 - e^(-k * x/10)) / (1 - e^(-k))
    """

    k: float = 1.936428228
    max: float = 8.75           # "no life is a perfect 10"
    raw_min: float = 1.0
    raw_max: float = 10.0

    def __post_init__(self):
        if not self.k > 0:
            raise ValueError(f"Calibration steepness k must be > 0, got {self.k}")
        if not self.max > 0:
            raise ValueError(f"Calibration max must be > 0, got {self.max}")


# ---------------------------------------------------------------------------
# Residual influence
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResidualParams:
    """
    Residual Influence (RI) 1-10 → internal effect.

    Below neutral: (ri - neutral) * drain_step   (RI 1  → -0.30)
    Above neutral: (ri - neutral) * lift_step    (RI 10 → +0.30)
    """

    global_multiplier: float = 1.0
    neutral: float = 5.0
    drain_step: float = 0.075
    lift_step: float = 0.06
    ri_min: float = 1.0
    ri_max: float = 10.0


# ---------------------------------------------------------------------------
# Cross-lift
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CrossLiftParams:
    """Spillover from uplifting Relationships/Health/Leisure time into Work quality."""

    enabled: bool = False
    alpha: float = 20.0
    quality_floor: float = 1.0
    quality_ceiling: float = 10.0


# ---------------------------------------------------------------------------
# Emotional ceiling
# ---------------------------------------------------------------------------

CEILING_MODELS = ("baseline", "centered")


@dataclass(frozen=True)
class CeilingParams:
    """
    Emotional Load Index (ELI) → ceiling multiplier applied to the RI-adjusted score.

    baseline: LMC = 10 - slope * ELI, multiplier = LMC / 10
    centered: multiplier = 1 - swing * (ELI - neutral) / (eli_max - neutral)
    """

    model: str = "baseline"
    slope: float = 0.2
    swing: float = 0.10
    neutral: float = 5.0
    default_eli: float = 5.0
    eli_min: float = 1.0
    eli_max: float = 10.0

    def __post_init__(self):
        if self.model not in CEILING_MODELS:
            raise ValueError(
                f"Unknown ELI ceiling model {self.model!r}, expected one of {CEILING_MODELS}"
            )


# ---------------------------------------------------------------------------
# Headline bands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BandThresholds:
    """Lower bounds for labelling the final index."""

    high: float = 7.5
    solid: float = 6.0
    attention: float = 4.5


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MoraleConfig:
    """Complete engine configuration. Pass to the pipeline to override defaults."""

    calibration: CalibrationParams = field(default_factory=CalibrationParams)
    residual: ResidualParams = field(default_factory=ResidualParams)
    cross_lift: CrossLiftParams = field(default_factory=CrossLiftParams)
    ceiling: CeilingParams = field(default_factory=CeilingParams)
    bands: BandThresholds = field(default_factory=BandThresholds)
    week_hours: float = WEEK_HOURS
    top_n: int = 3

    def with_overrides(self, overrides: Any) -> "MoraleConfig":
        """
        Apply a request's `config` object on top of this config.

        Recognised keys: calibration.{k,max}, ri.globalMultiplier,
        crossLift.{enabled,alpha}, eli.model. Anything invalid is ignored
        and the current value kept.
        """
        if not isinstance(overrides, Mapping):
            if overrides is not None:
                logger.warning("Ignoring non-object config override: %r", overrides)
            return self

        cfg = self

        cal = _section(overrides, "calibration")
        k = _number(cal.get("k"), "calibration.k")
        cap = _number(cal.get("max"), "calibration.max")
        try:
            cfg = replace(cfg, calibration=replace(
                cfg.calibration,
                k=cfg.calibration.k if k is None else k,
                max=cfg.calibration.max if cap is None else cap,
            ))
        except ValueError as exc:
            logger.warning("Ignoring calibration override: %s", exc)

        ri = _section(overrides, "ri")
        mult = _number(ri.get("globalMultiplier"), "ri.globalMultiplier")
        if mult is not None:
            cfg = replace(cfg, residual=replace(cfg.residual, global_multiplier=mult))

        cl = _section(overrides, "crossLift")
        enabled = cl.get("enabled")
        if enabled is not None and not isinstance(enabled, bool):
            logger.warning("Ignoring non-boolean crossLift.enabled: %r", enabled)
            enabled = None
        alpha = _number(cl.get("alpha"), "crossLift.alpha")
        cfg = replace(cfg, cross_lift=replace(
            cfg.cross_lift,
            enabled=cfg.cross_lift.enabled if enabled is None else enabled,
            alpha=cfg.cross_lift.alpha if alpha is None else alpha,
        ))

        eli = _section(overrides, "eli")
        model = eli.get("model")
        if model is not None:
            try:
                cfg = replace(cfg, ceiling=replace(cfg.ceiling, model=model))
            except ValueError as exc:
                logger.warning("Ignoring ELI override: %s", exc)

        return cfg


def _section(overrides: Mapping, key: str) -> Dict:
    value = overrides.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        logger.warning("Ignoring non-object config.%s: %r", key, value)
        return {}
    return dict(value)


def _number(value: Any, name: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        logger.warning("Ignoring non-numeric config %s: %r", name, value)
        return None
    return float(value)
