"""Load weight, intake and behavior logs from CSV files."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import pandas as pd

from adaptive_tdee.analytics.models import DailyLog, SleepSample, WorkoutSample, to_date
from adaptive_tdee.tracking.models import IntakeSample, WeightSample

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _optional(row: pd.Series, column: str, default: Any = None) -> Any:
    """Value of an optional column, or ``default`` when absent or NaN."""
    value = row.get(column)
    if value is None or pd.isna(value):
        return default
    return value


def _parse_date(value: Any) -> date:
    if isinstance(value, pd.Timestamp):
        return value.date()
    return to_date(str(value).strip()[:10])


class LogLoader:
    """Reads the CSV exports the engine works from.

    Every load method validates required columns, then converts row by row.
    Rows with a missing required value, an unparseable date or an invalid
    number are skipped and counted in ``skipped`` under the file kind.
    """

    WEIGHT_COLUMNS = ["date", "weight_kg"]
    INTAKE_COLUMNS = ["date", "calories"]
    DAILY_LOG_COLUMNS = ["date", "calories"]
    DAILY_LOG_OPTIONAL = ["protein", "carbs", "fat", "goal", "protein_goal"]
    SLEEP_COLUMNS = ["date", "hours"]
    SLEEP_OPTIONAL = ["quality"]
    WORKOUT_COLUMNS = ["date", "duration"]
    WORKOUT_OPTIONAL = ["calories", "type"]

    def __init__(self):
        self.loaded: dict[str, int] = {}
        self.skipped: dict[str, int] = {}

    def load_weights(self, csv_path: Path) -> list[WeightSample]:
        """Load weigh-ins.

        CSV format:
            date,weight_kg
            2025-01-15,82.4

        Raises:
            ValueError: If required columns are missing
        """
        return self._load(
            csv_path,
            "weights",
            self.WEIGHT_COLUMNS,
            lambda row: WeightSample(
                date=_parse_date(row["date"]),
                weight_kg=float(row["weight_kg"]),
            ),
        )

    def load_intakes(self, csv_path: Path) -> list[IntakeSample]:
        """Load daily calorie totals.

        CSV format:
            date,calories
            2025-01-15,2150

        Raises:
            ValueError: If required columns are missing
        """
        return self._load(
            csv_path,
            "intakes",
            self.INTAKE_COLUMNS,
            lambda row: IntakeSample(
                date=_parse_date(row["date"]),
                calories=float(row["calories"]),
            ),
        )

    def load_daily_logs(self, csv_path: Path) -> list[DailyLog]:
        """Load daily nutrition logs with targets.

        CSV format:
            date,calories,protein,carbs,fat,goal,protein_goal
            2025-01-15,2150,140,210,70,2200,150

        Macro and goal columns are optional and default to 0.

        Raises:
            ValueError: If required columns are missing
        """
        return self._load(
            csv_path,
            "daily_logs",
            self.DAILY_LOG_COLUMNS,
            lambda row: DailyLog(
                date=_parse_date(row["date"]),
                calories=float(row["calories"]),
                **{col: float(_optional(row, col, 0.0)) for col in self.DAILY_LOG_OPTIONAL},
            ),
        )

    def load_sleep(self, csv_path: Path) -> list[SleepSample]:
        """Load nightly sleep.

        CSV format:
            date,hours,quality
            2025-01-15,7.5,82

        Raises:
            ValueError: If required columns are missing
        """

        def convert(row: pd.Series) -> SleepSample:
            quality = _optional(row, "quality")
            return SleepSample(
                date=_parse_date(row["date"]),
                hours=float(row["hours"]),
                quality=float(quality) if quality is not None else None,
            )

        return self._load(csv_path, "sleep", self.SLEEP_COLUMNS, convert)

    def load_workouts(self, csv_path: Path) -> list[WorkoutSample]:
        """Load workouts.

        CSV format:
            date,duration,calories,type
            2025-01-15,45,320,strength

        Raises:
            ValueError: If required columns are missing
        """

        def convert(row: pd.Series) -> WorkoutSample:
            kind = _optional(row, "type")
            return WorkoutSample(
                date=_parse_date(row["date"]),
                duration=float(row["duration"]),
                calories=float(_optional(row, "calories", 0.0)),
                type=str(kind) if kind is not None else None,
            )

        return self._load(csv_path, "workouts", self.WORKOUT_COLUMNS, convert)

    def _load(
        self,
        csv_path: Path,
        kind: str,
        required: list[str],
        convert: Callable[[pd.Series], T],
    ) -> list[T]:
        df = pd.read_csv(csv_path)

        # Validate required columns
        missing = set(required) - set(df.columns)
        if missing:
            raise ValueError(
                f"Missing required columns in {csv_path}: {sorted(missing)}. "
                f"Required columns are: {required}"
            )

        records: list[T] = []
        skipped = 0
        for _, row in df.iterrows():
            if any(pd.isna(row[col]) for col in required):
                skipped += 1
                continue
            try:
                records.append(convert(row))
            except ValueError:
                skipped += 1

        self.loaded[kind] = len(records)
        self.skipped[kind] = skipped
        if skipped:
            logger.info("Skipped %d of %d rows in %s", skipped, len(df), csv_path)

        return records


def load_weight_csv(csv_path: Path, loader: Optional[LogLoader] = None) -> list[WeightSample]:
    """Convenience function to load weigh-ins from CSV."""
    return (loader or LogLoader()).load_weights(csv_path)


def load_intake_csv(csv_path: Path, loader: Optional[LogLoader] = None) -> list[IntakeSample]:
    """Convenience function to load calorie totals from CSV."""
    return (loader or LogLoader()).load_intakes(csv_path)


def load_daily_logs_csv(csv_path: Path, loader: Optional[LogLoader] = None) -> list[DailyLog]:
    """Convenience function to load daily nutrition logs from CSV."""
    return (loader or LogLoader()).load_daily_logs(csv_path)


def load_sleep_csv(csv_path: Path, loader: Optional[LogLoader] = None) -> list[SleepSample]:
    """Convenience function to load sleep logs from CSV."""
    return (loader or LogLoader()).load_sleep(csv_path)


def load_workouts_csv(csv_path: Path, loader: Optional[LogLoader] = None) -> list[WorkoutSample]:
    """Convenience function to load workouts from CSV."""
    return (loader or LogLoader()).load_workouts(csv_path)
