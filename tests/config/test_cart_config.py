from __future__ import annotations

import pytest

from cartguard.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_cart_config,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    assert require_env_vars(["EXAMPLE_VAR"])["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["EXAMPLE_VAR"])

    assert "EXAMPLE_VAR" in str(exc.value)


def test_cart_config_requires_store_url() -> None:
    with pytest.raises(MissingConfigurationError, match="CARTGUARD_STORE_URL"):
        get_cart_config()


def test_cart_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTGUARD_STORE_URL", "https://boutique.example/fr/ ")

    config = get_cart_config()

    assert config.store_url == "https://boutique.example/fr"
    assert config.resilience.base_url == "https://boutique.example/fr"
    assert config.resilience.timeout_seconds == 10.0
    assert config.resilience.retry.total == 0
    assert config.routes.cart == "/cart.js"
    assert config.routes.change == "/cart/change.js"
    assert config.resilience.default_headers is not None
    assert "Cookie" not in config.resilience.default_headers


def test_cart_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTGUARD_STORE_URL", "https://boutique.example")
    monkeypatch.setenv("CARTGUARD_CART_COOKIE", "cart=c1-abc")
    monkeypatch.setenv("CARTGUARD_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("CARTGUARD_RETRY_TOTAL", "3")

    config = get_cart_config()

    assert config.resilience.timeout_seconds == 2.5
    assert config.resilience.retry.total == 3
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["Cookie"] == "cart=c1-abc"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("CARTGUARD_TIMEOUT_SECONDS", "soon"),
        ("CARTGUARD_TIMEOUT_SECONDS", "0"),
        ("CARTGUARD_RETRY_TOTAL", "1.5"),
        ("CARTGUARD_RETRY_TOTAL", "-1"),
    ],
)
def test_cart_config_rejects_invalid_numbers(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv("CARTGUARD_STORE_URL", "https://boutique.example")
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        get_cart_config()
