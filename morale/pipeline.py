"""
Pipeline orchestration: validate → calibrate → aggregate → blend → adjust → rank → report.

This is the only module with I/O (request file loading, report formatting).
All scoring logic is delegated to scoring, timemap, residual, rankings, bands.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from morale.bands import classify_band
from morale.config import MoraleConfig
from morale.rankings import dominant_dimension, rank_answers
from morale.residual import apply_residual, ceiling_multiplier, compute_net_ri
from morale.schema import (
    DIMENSIONS,
    QUESTIONS,
    InvalidRequestError,
    MoraleInput,
    MoraleResult,
    ScenarioResult,
    parse_request,
)
from morale.scoring import (
    calibrate_scores,
    compute_dimension_averages,
    compute_overall_average,
    to_optional_list,
)
from morale.timemap import (
    blend_week,
    build_time_frame,
    category_qualities,
    scenario_qualities,
)


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request loading (CLI mode only)
# ---------------------------------------------------------------------------

def load_request(filepath: Union[str, Path]) -> Any:
    """Load a JSON request body from disk."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Request file not found: {path}")

    with open(path, "r") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidRequestError(f"Request file is not valid JSON: {exc}") from exc


# ---------------------------------------------------------------------------
# Core scoring (PURE FUNCTION, NO FILE I/O)
# ---------------------------------------------------------------------------

def _score_input(inp: MoraleInput, cfg: MoraleConfig) -> MoraleResult:
    """
    Core computation over a validated input.

    Stateless. Never raises for partial data.
    """

    # Stage 1: Calibrate
    current = calibrate_scores((a.score for a in inp.answers), cfg.calibration)
    scenario = calibrate_scores((a.scenario_score for a in inp.answers), cfg.calibration)

    # Stage 2: Dimension averages
    dims = compute_dimension_averages(current)
    overall = compute_overall_average(current)
    dims_s = compute_dimension_averages(scenario)
    overall_s = compute_overall_average(scenario)

    # Stage 3: Time-weighted blend
    frame = build_time_frame(inp, cfg)
    qualities = category_qualities(dims, overall)
    blend = blend_week(frame, qualities, cfg)
    blend_s = blend_week(frame, scenario_qualities(dims_s, overall_s, qualities), cfg)

    # Stage 4: Residual influence + emotional ceiling
    net_ri = compute_net_ri(blend.frame, cfg)
    multiplier = ceiling_multiplier(inp.eli, cfg.ceiling)

    ri_adjusted = apply_residual(blend.raw_lms, net_ri, cfg.residual)
    final_lmi = ri_adjusted * multiplier
    ri_adjusted_s = apply_residual(blend_s.raw_lms, net_ri, cfg.residual)
    final_lmi_s = ri_adjusted_s * multiplier

    # Stage 5: Rankings on raw answers
    drainers, uplifters = rank_answers(inp.answers, cfg.top_n)

    logger.debug(
        "Scored request: raw=%.3f net_ri=%.4f ri_adjusted=%.3f final=%.3f",
        blend.raw_lms, net_ri, ri_adjusted, final_lmi,
    )

    return MoraleResult(
        final_lmi=final_lmi,
        raw_lms=blend.raw_lms,
        ri_adjusted=ri_adjusted,
        calibrated=tuple(to_optional_list(current)),
        dimension_averages=dims,
        overall_average=overall,
        top_drainers=drainers,
        top_uplifters=uplifters,
        band=classify_band(final_lmi, cfg.bands),
        dominant_drainer_dimension=dominant_dimension(drainers),
        dominant_uplifter_dimension=dominant_dimension(uplifters),
        breakdown={
            "awakeHours": blend.awake_hours,
            "allocatedAwake": blend.allocated_awake,
            "otherAwake": blend.other_awake,
            "awakeAverage": blend.awake_average,
            "qualities": blend.qualities,
            "netRI": net_ri,
            "ceilingMultiplier": multiplier,
            "crossLift": cfg.cross_lift.enabled,
            "eliModel": cfg.ceiling.model,
        },
        scenario=ScenarioResult(
            raw_lms=blend_s.raw_lms,
            ri_adjusted=ri_adjusted_s,
            final_lmi=final_lmi_s,
            calibrated=tuple(to_optional_list(scenario)),
            dimension_averages=dims_s,
        ),
        eli=inp.eli,
    )


# ---------------------------------------------------------------------------
# Public Entry Points
# ---------------------------------------------------------------------------

def score_data(
    payload: Any,
    cfg: MoraleConfig | None = None,
) -> MoraleResult:
    """
    Backend / UI integration entry point.

    Accepts a decoded request body: {answers, timeMap, ELI, config?}.
    Raises InvalidRequestError only when the body is not an object.
    """
    if cfg is None:
        cfg = MoraleConfig()

    inp = parse_request(
        payload,
        eli_default=cfg.ceiling.default_eli,
        eli_range=(cfg.ceiling.eli_min, cfg.ceiling.eli_max),
        ri_range=(cfg.residual.ri_min, cfg.residual.ri_max),
    )
    cfg = cfg.with_overrides(inp.config_overrides)
    return _score_input(inp, cfg)


def score(
    filepath: Union[str, Path],
    cfg: MoraleConfig | None = None,
) -> MoraleResult:
    """
    CLI-compatible entry point.
    Reads a JSON request file and scores it.
    """
    return score_data(load_request(filepath), cfg)


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def _fmt(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def generate_report(result: MoraleResult) -> str:
    """Format the scoring result as a human-readable text report."""
    b = result.breakdown
    sc = result.scenario

    lines = [
        "LIFE MORALE REPORT",
        "=" * 58,
        "",
        f"  Life Morale Index   : {result.final_lmi:.2f} ({result.band})",
        f"  Raw Morale Score    : {result.raw_lms:.2f}",
        f"  RI Adjusted         : {result.ri_adjusted:.2f} (net RI: {b['netRI']:+.4f})",
        f"  ELI Ceiling         : x{b['ceilingMultiplier']:.3f} (ELI {result.eli:g}, {b['eliModel']})",
        f"  Awake / Other Hours : {b['awakeHours']:.1f} / {b['otherAwake']:.1f}",
        f"  Cross-Lift          : {'on' if b['crossLift'] else 'off'}",
        "",
        "  Dimension Averages:",
    ]

    for dim in DIMENSIONS:
        lines.append(f"    {dim:15s} : {_fmt(result.dimension_averages.get(dim))}")

    lines.append("")
    lines.append("  Category Qualities:")
    for category, quality in b["qualities"].items():
        lines.append(f"    {category:15s} : {quality:.2f}")

    for title, items, dominant in (
        ("Top Drainers", result.top_drainers, result.dominant_drainer_dimension),
        ("Top Uplifters", result.top_uplifters, result.dominant_uplifter_dimension),
    ):
        if not items:
            continue
        lines.append("")
        lines.append(f"  {title} ({dominant}):")
        for item in items:
            text = f"    - Q{item.index + 1} {QUESTIONS[item.index]}: {item.score:g}"
            if item.note:
                text += f" ({item.note})"
            lines.append(text)

    if sc.final_lmi != result.final_lmi:
        lines.append("")
        lines.append(
            f"  Scenario            : {sc.final_lmi:.2f} "
            f"({sc.final_lmi - result.final_lmi:+.2f} vs current)"
        )

    lines.append("")
    lines.append("=" * 58)
    return "\n".join(lines)
