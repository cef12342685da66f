"""Engine settings and configuration management.

Settings are plain dataclasses with the engine's tuned defaults. They can be
loaded from (and saved to) a YAML file, and are passed explicitly to the
functions that use them; there is no process-wide settings instance.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml


class EngineError(Exception):
    """Base exception for adaptive_tdee errors."""

    pass


class ConfigError(EngineError):
    """Raised when a configuration file is malformed."""

    pass


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".adaptive_tdee"


def default_config_path() -> Path:
    """Return the default config file path."""
    return _default_config_dir() / "config.yaml"


@dataclass(frozen=True)
class EstimatorConfig:
    """Constants of the energy-balance estimator."""

    kcal_per_kg: float = 7700.0  # Energy per kg of body mass change (fat + lean mix)
    weight_ewma_alpha: float = 0.15
    regression_window: int = 14
    min_data_points: int = 7  # Below this, formula only
    full_confidence_points: int = 28  # Observed data fully trusted from here
    adaptation_threshold: float = 0.10  # Fraction below formula that flags adaptation
    adaptation_min_confidence: float = 0.3
    plateau_threshold_kg_per_week: float = 0.1
    plateau_min_days: int = 14
    trend_window: int = 7  # Sliding window for the TDEE chart
    formula_only_confidence: float = 0.15
    min_tdee: float = 800.0
    max_tdee: float = 6000.0
    min_recommended_intake: int = 1200


@dataclass(frozen=True)
class AnalyticsConfig:
    """Thresholds of the behavioral analytics."""

    plateau_window_days: int = 14
    plateau_change_threshold: float = 0.005  # 0.5% coefficient of variation
    adherence_period_days: int = 7


@dataclass(frozen=True)
class InsightConfig:
    """Insight generator options."""

    max_insights: int = 10


@dataclass(frozen=True)
class ProfileDefaults:
    """Biometric defaults used by the command line when options are omitted."""

    height_cm: float = 175.0
    age: int = 30
    gender: str = "male"
    activity_level: str = "moderate"
    goal_type: str = "maintain"
    weekly_goal: str = "maintain"


@dataclass(frozen=True)
class Settings:
    """Main engine settings."""

    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    insights: InsightConfig = field(default_factory=InsightConfig)
    profile: ProfileDefaults = field(default_factory=ProfileDefaults)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.adaptive_tdee/config.yaml

        Returns:
            Settings instance

        Raises:
            ConfigError: If the file has unknown keys or values of the wrong type
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Cannot parse {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping at top level")

        unknown = set(data) - {"estimator", "analytics", "insights", "profile"}
        if unknown:
            raise ConfigError(f"Unknown config sections: {sorted(unknown)}")

        return cls(
            estimator=_parse_section(EstimatorConfig, data.get("estimator")),
            analytics=_parse_section(AnalyticsConfig, data.get("analytics")),
            insights=_parse_section(InsightConfig, data.get("insights")),
            profile=_parse_section(ProfileDefaults, data.get("profile")),
        )

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.adaptive_tdee/config.yaml
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Settings as nested plain dicts."""
        return asdict(self)


def _parse_section(section_cls: type, raw: Optional[dict]) -> Any:
    """Build a config section from a YAML mapping, coercing numeric types."""
    if raw is None:
        return section_cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"Section for {section_cls.__name__} must be a mapping")

    known = {f.name: f for f in fields(section_cls)}
    unknown = set(raw) - set(known)
    if unknown:
        raise ConfigError(f"Unknown keys for {section_cls.__name__}: {sorted(unknown)}")

    defaults = section_cls()
    values = {}
    for name, value in raw.items():
        caster = type(getattr(defaults, name))
        try:
            values[name] = caster(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {name}: {value!r}") from e

    return section_cls(**values)
