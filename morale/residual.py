"""
Residual Influence and the emotional ceiling.

RI describes how much a category's mood carries over into the rest of the
week. It is turned into a bounded internal effect, weighted by each
category's share of the week, and applied as a multiplicative nudge.
The ELI ceiling is applied last.
"""

from typing import Union

import numpy as np
import pandas as pd

from morale.config import CeilingParams, MoraleConfig, ResidualParams
from morale.schema import SLEEP


ArrayLike = Union[float, np.ndarray, pd.Series]


def ri_to_internal(ri: ArrayLike, params: ResidualParams = ResidualParams()) -> ArrayLike:
    """
    Map RI 1-10 onto [-0.30, +0.30] with 5 as exact zero.

    Draining steps are larger than uplifting ones:
        RI 1 → -0.30, RI 5 → 0.0, RI 10 → +0.30
    Works element-wise on arrays and Series.
    """
    delta = np.asarray(ri, dtype=np.float64) - params.neutral
    effect = np.where(delta < 0, delta * params.drain_step, delta * params.lift_step)

    if isinstance(ri, pd.Series):
        return pd.Series(effect, index=ri.index)
    if np.ndim(effect) == 0:
        return float(effect)
    return effect


def blend_denominator(frame: pd.DataFrame, cfg: MoraleConfig) -> float:
    """The week, or the blended hours when the week is over-allocated."""
    return max(cfg.week_hours, float(frame["blend_hours"].sum()))


def compute_net_ri(frame: pd.DataFrame, cfg: MoraleConfig) -> float:
    """
    Hours-weighted sum of internal RI effects over the whole week.

    Uses the blended hours (Other carries the derived unallocated awake
    hours). Sleep does not contribute. Stays within [-0.30, +0.30].
    """
    awake = frame.drop(index=SLEEP, errors="ignore")
    effects = ri_to_internal(awake["ri"], cfg.residual)
    return float((awake["blend_hours"] / blend_denominator(frame, cfg) * effects).sum())


def apply_residual(raw_lms: float, net_ri: float, params: ResidualParams) -> float:
    """rawLMS * (1 + globalMultiplier * netRI)."""
    return raw_lms * (1.0 + params.global_multiplier * net_ri)


def ceiling_multiplier(eli: float, params: CeilingParams) -> float:
    """
    Multiplier applied to the RI-adjusted score.

    baseline: (10 - slope * ELI) / 10        ELI 1 → 0.98, ELI 5 → 0.90
    centered: 1 - swing * (ELI - 5) / 5      ELI 5 → 1.00, ELI 10 → 0.90
    """
    eli = float(np.clip(eli, params.eli_min, params.eli_max))

    if params.model == "centered":
        span = params.eli_max - params.neutral
        return 1.0 - params.swing * (eli - params.neutral) / span

    ceiling = params.eli_max - params.slope * eli
    return ceiling / params.eli_max
