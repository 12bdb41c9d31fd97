"""Application configuration helpers."""

from __future__ import annotations

from cartguard.common.logging import configure_logging

from .cart import CartConfig, CartRoutes, build_cart_resilience, get_cart_config
from .env import env_float, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

__all__ = [
    "CartConfig",
    "CartRoutes",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "build_cart_resilience",
    "configure_logging",
    "env_float",
    "env_int",
    "get_cart_config",
    "optional_env_var",
    "require_env_vars",
]
