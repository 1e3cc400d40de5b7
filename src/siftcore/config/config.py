"""
Configuration management for SiftCore using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, List, Optional, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

SUPPORTED_PARSERS = ("html.parser", "lxml", "html5lib")

# --- Nested Configuration Models ---


class ScoringSettings(BaseModel):
    """Thresholds used by the clutter-removal pass."""

    removal_threshold: float = Field(
        default=0.0,
        description="Blocks whose non-content score falls below this value are removed on the first pass.",
    )
    relaxed_removal_threshold: float = Field(
        default=-20.0,
        description="Looser removal threshold used by the relaxed retry pass.",
    )

    @model_validator(mode="after")
    def validate_ordering(self) -> "ScoringSettings":
        """The relaxed pass must never remove more than the first pass."""
        if self.relaxed_removal_threshold > self.removal_threshold:
            raise ValueError("relaxed_removal_threshold must be <= removal_threshold")
        return self


class SiftOptions(BaseModel):
    """Per-invocation extraction options."""

    debug: bool = Field(default=False, description="Keep diagnostic attributes and skip wrapper flattening.")
    url: Optional[str] = Field(default=None, description="URL of the page, used for dispatch and metadata.")
    markdown: bool = Field(default=False, description="Replace the HTML content with its markdown rendering.")
    separate_markdown: bool = Field(
        default=False, description="Keep the HTML content and also return a markdown rendering."
    )
    remove_images: bool = Field(default=False, description="Drop images and other media from the content.")
    remove_exact_selectors: bool = Field(default=True, description="Remove elements matching exact clutter selectors.")
    remove_partial_selectors: bool = Field(
        default=True, description="Remove elements whose class/id/data attributes contain clutter tokens."
    )
    remove_hidden_elements: bool = Field(
        default=True, description="Remove elements hidden by inline style or attribute."
    )
    remove_small_images: bool = Field(default=True, description="Remove tracking pixels and tiny icons.")
    exact_selectors: List[str] = Field(default_factory=list, description="Additional CSS selectors to remove.")
    partial_selectors: List[str] = Field(
        default_factory=list, description="Additional attribute substrings marking clutter."
    )
    use_site_extractors: bool = Field(default=True, description="Try publisher-specific extractors first.")
    min_word_count: int = Field(
        default=200, ge=0, description="Below this word count a relaxed retry pass is attempted."
    )
    parser: str = Field(default="html.parser", description="BeautifulSoup tree builder used for raw HTML input.")
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)

    @field_validator("parser")
    @classmethod
    def validate_parser(cls, v: str) -> str:
        if v not in SUPPORTED_PARSERS:
            raise ValueError(f"parser must be one of {SUPPORTED_PARSERS}")
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON.")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics for each parse.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "SiftCore"
    version: str = "0.1.0"
    extraction: SiftOptions = Field(default_factory=SiftOptions)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="SIFT_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for name in ("siftcore.yaml", "siftcore.yml", "config.yaml", "config.yml"):
        path = current_dir / name
        if path.exists():
            return path
    return None


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    A proxy for the Config object that delays its loading and validation
    until an attribute is first accessed.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        if self.__class__._config is None:
            with self.__class__._lock:
                if self.__class__._config is None:
                    self.__class__._config = self._load_config_with_fallback()
        return getattr(self.__class__._config, name)

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded configuration so the next access reloads it."""
        with cls._lock:
            cls._config = None

    def _load_config_with_fallback(self) -> Config:
        """Load configuration from file or fall back to defaults."""
        config_path = find_config_file()
        if config_path:
            try:
                log.info("Lazy loading configuration from: %s", config_path)
                return Config.from_yaml(config_path)
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. Falling back to default settings.",
                    config_path,
                    e,
                    exc_info=log.getEffectiveLevel() <= logging.DEBUG,
                )
        else:
            log.debug("No config file found. Using default settings for lazy load.")

        try:
            return Config()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e


# --- Global Settings Instance ---
settings: "Config" = cast("Config", LazyConfig())
