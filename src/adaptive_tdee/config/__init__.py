"""Configuration management."""

from adaptive_tdee.config.settings import (
    AnalyticsConfig,
    ConfigError,
    EngineError,
    EstimatorConfig,
    InsightConfig,
    ProfileDefaults,
    Settings,
    default_config_path,
)

__all__ = [
    "AnalyticsConfig",
    "ConfigError",
    "EngineError",
    "EstimatorConfig",
    "InsightConfig",
    "ProfileDefaults",
    "Settings",
    "default_config_path",
]
