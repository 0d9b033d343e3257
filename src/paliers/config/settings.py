"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".paliers"


def _default_db_path() -> Path:
    """Return the default database path."""
    return _default_config_dir() / "paliers.db"


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=_default_db_path)


@dataclass
class TrackingConfig:
    """Weight tracking defaults."""

    default_palier_step: float = 5.0
    speech_locale: str = "fr-FR"


@dataclass
class ChartConfig:
    """Chart projection options."""

    padding: float = 4.0  # kg above max and below min
    date_format: str = "%d/%m/%Y"


@dataclass
class ExportConfig:
    """Backup export options."""

    filename: str = "sauvegarde-poids.json"


@dataclass
class LoggingConfig:
    """Logging options."""

    level: str = "WARNING"


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    chart: ChartConfig = field(default_factory=ChartConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.paliers/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        if "database" in data:
            db_data = data["database"] or {}
            if "path" in db_data:
                settings.database.path = Path(db_data["path"]).expanduser()

        if "tracking" in data:
            tracking_data = data["tracking"] or {}
            if "default_palier_step" in tracking_data:
                settings.tracking.default_palier_step = float(
                    tracking_data["default_palier_step"]
                )
            if "speech_locale" in tracking_data:
                settings.tracking.speech_locale = tracking_data["speech_locale"]

        if "chart" in data:
            chart_data = data["chart"] or {}
            if "padding" in chart_data:
                settings.chart.padding = float(chart_data["padding"])
            if "date_format" in chart_data:
                settings.chart.date_format = chart_data["date_format"]

        if "export" in data:
            export_data = data["export"] or {}
            if "filename" in export_data:
                settings.export.filename = export_data["filename"]

        if "logging" in data:
            logging_data = data["logging"] or {}
            if "level" in logging_data:
                settings.logging.level = str(logging_data["level"]).upper()

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.paliers/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {
                "path": str(self.database.path),
            },
            "tracking": {
                "default_palier_step": self.tracking.default_palier_step,
                "speech_locale": self.tracking.speech_locale,
            },
            "chart": {
                "padding": self.chart.padding,
                "date_format": self.chart.date_format,
            },
            "export": {
                "filename": self.export.filename,
            },
            "logging": {
                "level": self.logging.level,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
