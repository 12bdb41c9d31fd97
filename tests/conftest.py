from __future__ import annotations

import pytest

from tests.helpers.cart import FakeCartService, RecordingNotifier


@pytest.fixture(autouse=True)
def _isolated_cart_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CARTGUARD_STORE_URL",
        "CARTGUARD_CART_COOKIE",
        "CARTGUARD_TIMEOUT_SECONDS",
        "CARTGUARD_RETRY_TOTAL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def empty_service() -> FakeCartService:
    return FakeCartService()
