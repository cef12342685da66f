"""Prioritized behavioral insights built on the analytics package."""

from __future__ import annotations

from adaptive_tdee.insights.generator import RULES, generate_insights, next_week_focus
from adaptive_tdee.insights.models import Insight, InsightInput, InsightType

__all__ = [
    "Insight",
    "InsightInput",
    "InsightType",
    "RULES",
    "generate_insights",
    "next_week_focus",
]
