"""
Configuration management using Pydantic models.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.best_window_calculator import DEFAULT_TOP_N
from .domain.time_slot import DEFAULT_INTERVAL_MINUTES, MINUTES_PER_DAY


class DefaultsConfig(BaseModel):
    """Default settings for summaries."""
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    top_n: int = DEFAULT_TOP_N

    @field_validator("interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        """Ensure the slot interval splits a day into whole slots."""
        if value <= 0 or MINUTES_PER_DAY % value != 0:
            raise ValueError(
                f"interval_minutes must be a positive divisor of {MINUTES_PER_DAY}, got {value}"
            )
        return value

    @field_validator("top_n")
    @classmethod
    def validate_top_n(cls, value: int) -> int:
        """Ensure at least one window is reported."""
        if value < 1:
            raise ValueError(f"top_n must be at least 1, got {value}")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    meetings_dir: Path = Path("meetings")

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if not config.meetings_dir.is_absolute():
            config = config.model_copy(
                update={"meetings_dir": config_path.parent / config.meetings_dir}
            )
        return config

    @classmethod
    def load_or_default(cls, config_path: Path) -> "AppConfig":
        """Load the config file if present, otherwise use defaults."""
        if config_path.exists():
            return cls.load_from_yaml(config_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
