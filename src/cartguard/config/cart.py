"""Storefront cart endpoint configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_float, env_int, optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

CART_TIMEOUT_SECONDS = 10.0
CART_RETRY_TOTAL = 0


@dataclass(frozen=True, slots=True)
class CartRoutes:
    """Paths of the cart endpoints relative to the store URL."""

    cart: str = "/cart.js"
    change: str = "/cart/change.js"


@dataclass(frozen=True, slots=True)
class CartConfig:
    """Holds the storefront cart endpoint configuration."""

    store_url: str
    resilience: ResilienceConfig
    routes: CartRoutes = field(default_factory=CartRoutes)


def build_cart_resilience(
    store_url: str,
    *,
    cookie: str | None = None,
    timeout_seconds: float = CART_TIMEOUT_SECONDS,
    retry_total: int = CART_RETRY_TOTAL,
) -> ResilienceConfig:
    # line-indexed writes are not idempotent, so only reads are ever retried
    headers = {"Accept": "application/json"}
    if cookie:
        headers["Cookie"] = cookie
    return ResilienceConfig(
        name="cart",
        base_url=store_url,
        timeout_seconds=timeout_seconds,
        retry=RetryPolicy(total=retry_total, allowed_methods=frozenset({"GET"})),
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        default_headers=headers,
    )


def get_cart_config(*, resilience: ResilienceConfig | None = None) -> CartConfig:
    values = require_env_vars(("CARTGUARD_STORE_URL",))
    store_url = values["CARTGUARD_STORE_URL"].strip().rstrip("/")
    return CartConfig(
        store_url=store_url,
        resilience=resilience
        or build_cart_resilience(
            store_url,
            cookie=optional_env_var("CARTGUARD_CART_COOKIE"),
            timeout_seconds=env_float("CARTGUARD_TIMEOUT_SECONDS", CART_TIMEOUT_SECONDS),
            retry_total=env_int("CARTGUARD_RETRY_TOTAL", CART_RETRY_TOTAL),
        ),
    )
