"""Text and dict renderings of TDEE results."""

from __future__ import annotations

from dataclasses import asdict
from enum import Enum
from typing import Any

from adaptive_tdee.tracking.models import (
    AdaptiveTDEEResult,
    EstimateSource,
    TDEEEstimate,
    TDEETrendPoint,
)

_SOURCE_LABELS = {
    EstimateSource.FORMULA: "formula (Mifflin-St Jeor)",
    EstimateSource.HYBRID: "hybrid (formula + your data)",
    EstimateSource.OBSERVED: "observed (your data)",
}


def _plain(value: Any) -> Any:
    """Convert enums and dates inside asdict() output to JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def estimate_to_dict(estimate: TDEEEstimate) -> dict:
    """Convert a TDEEEstimate to a dict for JSON output."""
    data = _plain(asdict(estimate))
    data["confidence"] = round(estimate.confidence, 3)
    return data


def result_to_dict(result: AdaptiveTDEEResult) -> dict:
    """Convert an AdaptiveTDEEResult to a dict for JSON output."""
    return {
        "estimate": estimate_to_dict(result.estimate),
        "trend_data": [_plain(asdict(p)) for p in result.trend_data],
        "days_logged_this_week": result.days_logged_this_week,
        "total_days_with_data": result.total_days_with_data,
        "insights": [_plain(asdict(i)) for i in result.insights],
    }


def insight_to_dict(insight: Any) -> dict:
    """Convert a generated Insight to a dict, leaving out unset optional fields."""
    data = _plain(asdict(insight))
    return {k: v for k, v in data.items() if v is not None}


def to_plain_dict(record: Any) -> dict:
    """asdict() for any of the engine's dataclasses, with enums and dates flattened."""
    return _plain(asdict(record))


def format_estimate_report(result: AdaptiveTDEEResult) -> str:
    """Format a TDEE result as text."""
    est = result.estimate
    direction = {
        "increasing": "gaining",
        "decreasing": "losing",
        "stable": "holding steady",
    }[est.trend.value]

    lines = [
        "Total Daily Energy Expenditure (TDEE) Estimate",
        "=" * 50,
        f"Estimated TDEE:      {est.tdee} kcal/day",
        f"BMR:                 {est.bmr} kcal/day (x{est.activity_multiplier:.2f} activity)",
        f"Source:              {_SOURCE_LABELS[est.estimate_source]}",
        f"Confidence:          {est.confidence * 100:.0f}% ({est.data_points} days of data)",
        f"Weight trend:        {est.weekly_weight_change_kg:+.2f} kg/week ({direction})",
        f"Recommended intake:  {est.recommended_intake} kcal/day",
    ]

    flags = []
    if est.metabolic_adaptation:
        flags.append("metabolic adaptation")
    if est.plateau_detected:
        flags.append("plateau")
    if flags:
        lines.append(f"Flags:               {', '.join(flags)}")

    if result.insights:
        lines.append("")
        lines.append("Notes:")
        for insight in result.insights:
            lines.append(f"  - {insight.title}: {insight.message}")

    return "\n".join(lines)


def format_trend_report(points: list[TDEETrendPoint]) -> str:
    """Format rolling TDEE points as a text table."""
    if not points:
        return "Not enough aligned data for a TDEE trend (need 7 days with weight and intake)."

    lines = [
        f"{'Date':<12}{'TDEE':>8}{'Weight':>10}{'Blend':>8}",
        "-" * 38,
    ]
    for p in points:
        lines.append(
            f"{p.date.isoformat():<12}{p.tdee:>8}{p.smoothed_weight:>10.1f}{p.confidence:>8.2f}"
        )
    return "\n".join(lines)
