"""
Calibration and dimension aggregation.

Raw 1-10 answers are pushed through a saturating exponential curve onto
[0, max], then averaged per life dimension. Unanswered questions are carried
as NaN internally and never count towards an average.
"""

from typing import Dict, Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from morale.config import CalibrationParams
from morale.schema import DIMENSIONS, QUESTION_DIMENSIONS


def calibrate(
    score: Optional[float],
    params: CalibrationParams = CalibrationParams(),
) -> Optional[float]:
    """Calibrate a single answer. None in, None out."""
    if score is None:
        return None
    return float(calibrate_scores([score], params)[0])


def calibrate_scores(
    scores: Iterable[Optional[float]],
    params: CalibrationParams,
) -> np.ndarray:
    """
    Vectorised calibration curve.

        calibrated = max * (1 - e^(-k * x/10)) / (1 - e^(-k))

    x is clamped to [1, 10] first. At x = 10 numerator and denominator are
    the same expression, so the result is exactly `max`. expm1 keeps both
    terms non-zero for tiny k, where the curve tends to linear max * x/10.
    """
    x = np.array([np.nan if s is None else s for s in scores], dtype=np.float64)
    x = np.clip(x, params.raw_min, params.raw_max)   # NaN passes through clip

    num = -np.expm1(-params.k * (x / params.raw_max))
    den = -np.expm1(-params.k)
    return params.max * (num / den)


def _nan_to_none(value: float) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def to_optional_list(values: np.ndarray) -> list:
    """NaN → None, for the output boundary."""
    return [_nan_to_none(v) for v in values]


def compute_dimension_averages(calibrated: Sequence[float]) -> Dict[str, Optional[float]]:
    """
    Mean calibrated value per dimension, skipping unanswered questions.

    A dimension with no answers maps to None ("no data"), never 0.
    """
    series = pd.Series(np.asarray(calibrated, dtype=np.float64)[: len(QUESTION_DIMENSIONS)])
    labels = list(QUESTION_DIMENSIONS[: len(series)])
    means = series.groupby(labels).mean()

    return {dim: _nan_to_none(means.get(dim, np.nan)) for dim in DIMENSIONS}


def compute_overall_average(calibrated: Sequence[float]) -> Optional[float]:
    """Mean over every answered question, or None when nothing was answered."""
    return _nan_to_none(pd.Series(np.asarray(calibrated, dtype=np.float64)).mean())
