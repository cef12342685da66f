"""Adaptive TDEE estimation and behavioral analytics from daily logs."""

__version__ = "0.1.0"
