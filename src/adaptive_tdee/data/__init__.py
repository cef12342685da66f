"""CSV loaders for weight, intake, sleep and workout logs."""

from adaptive_tdee.data.loader import (
    LogLoader,
    load_daily_logs_csv,
    load_intake_csv,
    load_sleep_csv,
    load_weight_csv,
    load_workouts_csv,
)

__all__ = [
    "LogLoader",
    "load_daily_logs_csv",
    "load_intake_csv",
    "load_sleep_csv",
    "load_weight_csv",
    "load_workouts_csv",
]
