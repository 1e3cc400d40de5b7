from .config import Config, LazyConfig, MonitoringConfig, ScoringSettings, SiftOptions, find_config_file, settings

__all__ = ["Config", "LazyConfig", "MonitoringConfig", "ScoringSettings", "SiftOptions", "find_config_file", "settings"]
