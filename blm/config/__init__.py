from .loader import DEFAULT_CONFIG, BLMConfig, ConfigError, load_config

__all__ = [
    "BLMConfig",
    "ConfigError",
    "DEFAULT_CONFIG",
    "load_config",
]
