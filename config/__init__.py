"""Configuration package for the mock interview service."""
from .routing import AppConfig, LlmRoute, load_config, resolve_registry
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "load_config",
    "resolve_registry",
    "Settings",
    "settings",
]
