"""
Time-weighted blend over the 168-hour week.

Dimension averages become category qualities, unallocated awake hours are
absorbed by an "Other" bucket, sleep quality is derived from the awake
hours, and everything is blended by hours into the raw Life Morale Score.

The working structure is a category-indexed DataFrame:

    hours        hours logged by the user
    ri           residual influence rating
    blend_hours  hours that actually enter the blend
    quality      quality assigned to those hours
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np
import pandas as pd

from morale.config import CrossLiftParams, MoraleConfig
from morale.residual import blend_denominator, ri_to_internal
from morale.schema import (
    ALLOCATED_CATEGORIES,
    COMMUTE,
    HEALTH,
    LEISURE,
    OTHER,
    RELATIONSHIPS,
    SLEEP,
    TIME_CATEGORIES,
    WORK,
    MoraleInput,
)


logger = logging.getLogger(__name__)


# Category → dimension whose average sets its quality
CATEGORY_DIMENSIONS = {
    WORK: "Autonomy",
    COMMUTE: "Peace",
    HEALTH: "Vitality",
    RELATIONSHIPS: "Connection",
    LEISURE: "Fulfillment",
}

# Categories whose uplifting RI spills over into Work
CROSS_LIFT_SOURCES = (RELATIONSHIPS, HEALTH, LEISURE)

# Sleep is restorative by default and pulled down by the waking week
SLEEP_ANCHOR = 10.0


@dataclass(frozen=True)
class TimeBlend:
    """Result of blending one set of qualities over the week."""

    frame: pd.DataFrame
    awake_hours: float
    allocated_awake: float
    other_awake: float
    awake_average: float
    raw_lms: float

    @property
    def qualities(self) -> Dict[str, float]:
        q = self.frame["quality"]
        return {c: float(q[c]) for c in (SLEEP,) + ALLOCATED_CATEGORIES + (OTHER,)}


# ---------------------------------------------------------------------------
# Frame construction
# ---------------------------------------------------------------------------

def build_time_frame(inp: MoraleInput, cfg: MoraleConfig) -> pd.DataFrame:
    """
    One row per known category. Categories the user did not log get 0 hours
    and neutral RI.
    """
    frame = pd.DataFrame(
        {"hours": 0.0, "ri": cfg.residual.neutral},
        index=pd.Index(TIME_CATEGORIES, name="category"),
    )
    for row in inp.time_map:
        frame.loc[row.category, "hours"] = row.hours
        frame.loc[row.category, "ri"] = row.ri

    awake_hours = max(0.0, cfg.week_hours - frame.at[SLEEP, "hours"])
    allocated = float(frame.loc[list(ALLOCATED_CATEGORIES), "hours"].sum())

    # Sleep and the allocated categories blend as logged; Chores, Growth and
    # the user's own Other row are folded into the derived Other bucket.
    frame["blend_hours"] = 0.0
    frame.loc[[SLEEP] + list(ALLOCATED_CATEGORIES), "blend_hours"] = (
        frame.loc[[SLEEP] + list(ALLOCATED_CATEGORIES), "hours"]
    )
    frame.at[OTHER, "blend_hours"] = max(0.0, awake_hours - allocated)
    return frame


# ---------------------------------------------------------------------------
# Qualities
# ---------------------------------------------------------------------------

def category_qualities(
    dimension_averages: Mapping[str, Optional[float]],
    overall_average: Optional[float],
) -> Dict[str, float]:
    """
    Quality per awake category from its dimension, falling back to the
    overall answer average, then to 0 when nothing was answered.
    """
    fallback = 0.0 if overall_average is None else overall_average

    qualities = {}
    for category, dim in CATEGORY_DIMENSIONS.items():
        value = dimension_averages.get(dim)
        qualities[category] = fallback if value is None else value
    qualities[OTHER] = fallback
    return qualities


def scenario_qualities(
    scenario_averages: Mapping[str, Optional[float]],
    scenario_overall: Optional[float],
    current: Mapping[str, float],
) -> Dict[str, float]:
    """
    What-if qualities. A category whose scenario dimension has no data keeps
    its current quality.
    """
    qualities = {}
    for category, dim in CATEGORY_DIMENSIONS.items():
        value = scenario_averages.get(dim)
        qualities[category] = current[category] if value is None else value
    qualities[OTHER] = current[OTHER] if scenario_overall is None else scenario_overall
    return qualities


def apply_cross_lift(
    work_quality: float,
    frame: pd.DataFrame,
    awake_hours: float,
    cfg: MoraleConfig,
) -> float:
    """
    Nudge Work quality up by spillover from uplifting leisure-type time.

        uplift = alpha * Σ(share_of_awake_c * max(0, RI_c)) * (10 - workQ) / 10

    Only positive RI spills over. The (10 - workQ) factor makes the uplift
    vanish as Work quality reaches 10. The result is clamped to [1, 10].
    """
    cl: CrossLiftParams = cfg.cross_lift
    if not cl.enabled:
        return work_quality

    sources = frame.loc[list(CROSS_LIFT_SOURCES)]
    if awake_hours > 0:
        shares = sources["hours"] / awake_hours
    else:
        shares = pd.Series(0.0, index=sources.index)
    positive_ri = ri_to_internal(sources["ri"], cfg.residual).clip(lower=0.0)

    headroom = (cl.quality_ceiling - work_quality) / cl.quality_ceiling
    uplift = cl.alpha * float((shares * positive_ri).sum()) * headroom
    lifted = float(np.clip(work_quality + uplift, cl.quality_floor, cl.quality_ceiling))

    logger.debug("Cross-lift: work quality %.3f → %.3f", work_quality, lifted)
    return lifted


# ---------------------------------------------------------------------------
# Blend
# ---------------------------------------------------------------------------

def blend_week(
    base_frame: pd.DataFrame,
    qualities: Mapping[str, float],
    cfg: MoraleConfig,
) -> TimeBlend:
    """
    Time-weighted average quality across the full week.

    Sleep quality = (10 + average awake quality) / 2
    rawLMS        = Σ(blend_hours * quality) / max(168, Σ blend_hours)
    """
    frame = base_frame.copy()
    awake_hours = max(0.0, cfg.week_hours - frame.at[SLEEP, "hours"])
    allocated = float(frame.loc[list(ALLOCATED_CATEGORIES), "hours"].sum())
    other_awake = float(frame.at[OTHER, "blend_hours"])

    frame["quality"] = 0.0
    for category, value in qualities.items():
        frame.at[category, "quality"] = value
    frame.at[WORK, "quality"] = apply_cross_lift(
        frame.at[WORK, "quality"], frame, awake_hours, cfg
    )

    awake = frame.drop(index=SLEEP)
    awake_weighted = float((awake["blend_hours"] * awake["quality"]).sum())
    # Equal to awake_hours unless the awake categories are over-allocated
    awake_blended = float(awake["blend_hours"].sum())
    awake_average = awake_weighted / awake_blended if awake_blended > 0 else 0.0

    frame.at[SLEEP, "quality"] = (SLEEP_ANCHOR + awake_average) / 2.0

    weighted = float((frame["blend_hours"] * frame["quality"]).sum())
    raw_lms = weighted / blend_denominator(frame, cfg)

    logger.debug(
        "Blend: awake=%.1f allocated=%.1f other=%.1f awake_avg=%.3f raw=%.3f",
        awake_hours, allocated, other_awake, awake_average, raw_lms,
    )

    return TimeBlend(
        frame=frame,
        awake_hours=awake_hours,
        allocated_awake=allocated,
        other_awake=other_awake,
        awake_average=awake_average,
        raw_lms=raw_lms,
    )
