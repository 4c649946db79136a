"""
Input/output records and the request boundary.

`parse_request` turns a decoded JSON object into a `MoraleInput`, coercing
every field-level problem to a safe default. Only a request that is not an
object at all is rejected.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)


QUESTION_COUNT = 24


# ---------------------------------------------------------------------------
# Dimensions and questions
# ---------------------------------------------------------------------------

DIMENSIONS = ("Fulfillment", "Connection", "Autonomy", "Vitality", "Peace")

DIMENSION_INDICES: Dict[str, Tuple[int, ...]] = {
    "Fulfillment": (0, 1, 2, 3, 4),
    "Connection": (5, 6, 7, 8, 9),
    "Autonomy": (10, 11, 12, 13, 14),
    "Vitality": (15, 16, 17, 18, 19),
    "Peace": (20, 21, 22, 23),
}

# Question index → dimension label
QUESTION_DIMENSIONS: Tuple[str, ...] = tuple(
    dim for dim in DIMENSIONS for _ in DIMENSION_INDICES[dim]
)

QUESTIONS: Tuple[str, ...] = (
    "Life direction / sense of trajectory",
    "Alignment with personal values",
    "Sense of purpose / meaning",
    "Personal growth / learning",
    "Pride in overcoming challenges",
    "Emotional connection to close people",
    "Support from family / friends",
    "Romantic / intimate fulfillment",
    "Contribution / helping others",
    "Authentic self-expression",
    "Control over time / schedule",
    "Work meaning / responsibility quality",
    "Manageable workload / routine",
    "Freedom to choose / autonomy",
    "Financial security",
    "Physical health & energy",
    "Rest & sleep quality",
    "Nutrition & self-care",
    "Motivation to care for body",
    "Comfort / confidence in own skin",
    "Stress / anxiety management",
    "Emotional balance / calm",
    "Hopefulness about the future",
    "Inner peace / contentment",
)


# ---------------------------------------------------------------------------
# Time categories
# ---------------------------------------------------------------------------

SLEEP = "Sleep"
WORK = "Work"
COMMUTE = "Commute"
RELATIONSHIPS = "Relationships"
LEISURE = "Leisure"
HEALTH = "Health"
CHORES = "Chores"
GROWTH = "Growth"
OTHER = "Other"

TIME_CATEGORIES = (
    SLEEP, WORK, COMMUTE, RELATIONSHIPS, LEISURE, HEALTH, CHORES, GROWTH, OTHER,
)

# Awake categories whose hours are blended with their own quality
ALLOCATED_CATEGORIES = (WORK, COMMUTE, HEALTH, RELATIONSHIPS, LEISURE)

CATEGORY_ALIASES = {c.lower(): c for c in TIME_CATEGORIES}
CATEGORY_ALIASES["gym"] = HEALTH


def normalize_category(label: Any) -> Optional[str]:
    """Canonical category name for a label, or None if unrecognised."""
    if not isinstance(label, str):
        return None
    return CATEGORY_ALIASES.get(label.strip().lower())


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Answer:
    score: Optional[float] = None
    note: Optional[str] = None
    scenario_score: Optional[float] = None


@dataclass(frozen=True)
class TimeRow:
    category: str
    hours: float = 0.0
    ri: float = 5.0


@dataclass(frozen=True)
class MoraleInput:
    """A validated request: exactly QUESTION_COUNT answers, one row per known category."""

    answers: Tuple[Answer, ...]
    time_map: Tuple[TimeRow, ...]
    eli: float = 5.0
    config_overrides: Optional[Mapping] = None


@dataclass(frozen=True)
class RankedAnswer:
    index: int
    score: float
    note: Optional[str] = None

    def to_dict(self) -> Dict:
        out: Dict[str, Any] = {"index": self.index, "score": self.score}
        if self.note is not None:
            out["note"] = self.note
        return out


@dataclass(frozen=True)
class ScenarioResult:
    raw_lms: float
    ri_adjusted: float
    final_lmi: float
    calibrated: Tuple[Optional[float], ...] = ()
    dimension_averages: Dict[str, Optional[float]] = field(default_factory=dict)


@dataclass(frozen=True)
class MoraleResult:
    """Everything the engine computes for one request. Never mutated."""

    final_lmi: float
    raw_lms: float
    ri_adjusted: float
    calibrated: Tuple[Optional[float], ...]
    dimension_averages: Dict[str, Optional[float]]
    overall_average: Optional[float]
    top_drainers: Tuple[RankedAnswer, ...]
    top_uplifters: Tuple[RankedAnswer, ...]
    band: str
    dominant_drainer_dimension: Optional[str]
    dominant_uplifter_dimension: Optional[str]
    breakdown: Dict[str, Any]
    scenario: ScenarioResult
    eli: float

    def to_dict(self) -> Dict:
        """JSON-ready view using the collaborator's field names."""
        return {
            "finalLMI": self.final_lmi,
            "rawLMS": self.raw_lms,
            "riAdjusted": self.ri_adjusted,
            "topDrainers": [r.to_dict() for r in self.top_drainers],
            "topUplifters": [r.to_dict() for r in self.top_uplifters],
            "calibrated": {
                "current": list(self.calibrated),
                "scenario": list(self.scenario.calibrated),
            },
            "sectionAverages": {
                "current": dict(self.dimension_averages),
                "scenario": dict(self.scenario.dimension_averages),
            },
            "overallAverage": self.overall_average,
            "scenario": {
                "rawLMS": self.scenario.raw_lms,
                "riAdjusted": self.scenario.ri_adjusted,
                "finalLMI": self.scenario.final_lmi,
            },
            "band": self.band,
            "dominantDimension": {
                "drainers": self.dominant_drainer_dimension,
                "uplifters": self.dominant_uplifter_dimension,
            },
            "breakdown": dict(self.breakdown),
            "ELI": self.eli,
        }


# ---------------------------------------------------------------------------
# Boundary validation
# ---------------------------------------------------------------------------

class InvalidRequestError(ValueError):
    """The request could not be interpreted as an LMI request at all."""


def _finite(value: Any) -> Optional[float]:
    """A finite float, or None for anything non-numeric (bools included)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def _parse_answer(item: Any, i: int) -> Answer:
    if not isinstance(item, Mapping):
        if item is not None:
            logger.warning("Answer %d is not an object, treating as unanswered", i)
        return Answer()

    score = _finite(item.get("score"))
    if score is None and item.get("score") is not None:
        logger.warning("Answer %d has non-numeric score %r, treating as unanswered", i, item.get("score"))

    scenario = _finite(item.get("scenarioScore"))
    note = item.get("note")
    if note is not None and not isinstance(note, str):
        note = str(note)
    return Answer(score=score, note=note or None, scenario_score=scenario)


def _parse_answers(raw: Any) -> Tuple[Answer, ...]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("answers is not a list, treating as empty")
        raw = []
    if len(raw) > QUESTION_COUNT:
        logger.warning("Ignoring %d answers beyond index %d", len(raw) - QUESTION_COUNT, QUESTION_COUNT - 1)

    answers = [_parse_answer(item, i) for i, item in enumerate(raw[:QUESTION_COUNT])]
    answers.extend(Answer() for _ in range(QUESTION_COUNT - len(answers)))
    return tuple(answers)


def _parse_time_map(raw: Any, ri_min: float = 1.0, ri_max: float = 10.0) -> Tuple[TimeRow, ...]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("timeMap is not a list, treating as empty")
        raw = []

    rows: Dict[str, TimeRow] = {}
    for item in raw:
        if not isinstance(item, Mapping):
            logger.warning("Dropping non-object time row: %r", item)
            continue
        category = normalize_category(item.get("category"))
        if category is None:
            logger.warning("Dropping time row with unknown category %r", item.get("category"))
            continue
        if category in rows:
            logger.warning("Duplicate time row for %s, keeping the first", category)
            continue

        hours = _finite(item.get("hours"))
        hours = 0.0 if hours is None else max(0.0, hours)
        ri = _finite(item.get("ri"))
        ri = 5.0 if ri is None else _clamp(ri, ri_min, ri_max)
        rows[category] = TimeRow(category=category, hours=hours, ri=ri)

    return tuple(rows.values())


def parse_request(payload: Any, eli_default: float = 5.0,
                  eli_range: Tuple[float, float] = (1.0, 10.0),
                  ri_range: Tuple[float, float] = (1.0, 10.0)) -> MoraleInput:
    """
    Validate a decoded request body.

    Raises InvalidRequestError only when the payload is not an object.
    """
    if not isinstance(payload, Mapping):
        raise InvalidRequestError(
            f"Request body must be an object with answers and timeMap, got {type(payload).__name__}"
        )

    eli = _finite(payload.get("ELI"))
    if eli is None:
        if payload.get("ELI") is not None:
            logger.warning("ELI %r is not numeric, using %s", payload.get("ELI"), eli_default)
        eli = eli_default
    eli = _clamp(eli, *eli_range)

    return MoraleInput(
        answers=_parse_answers(payload.get("answers")),
        time_map=_parse_time_map(payload.get("timeMap"), *ri_range),
        eli=eli,
        config_overrides=payload.get("config"),
    )
