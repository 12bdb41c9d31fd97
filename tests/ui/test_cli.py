from __future__ import annotations

import functools
import io

import pytest

from cartguard.app import CartInspection, check_cart
from cartguard.config import MissingConfigurationError
from cartguard.domain.errors import TransportError
from cartguard.domain.events import ItemAdded
from cartguard.domain.reconciliation import evaluate, plan
from cartguard.ui import cli as cli_module
from cartguard.ui.console import ConsoleNotifier, format_inspection
from tests.helpers.cart import FakeCartService, make_line, make_snapshot


def test_check_without_trigger(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_check(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "check_cart", fake_check)

    cli_module.main(["check"])

    assert captured["trigger"] is None
    assert isinstance(captured["notifier"], ConsoleNotifier)


def test_check_with_trigger(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_check(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "check_cart", fake_check)

    cli_module.main(["check", "--product-id", "10", "--variant-id", "100"])

    assert captured["trigger"] == ItemAdded(product_id=10, variant_id=100)


def test_inspect_prints_plan(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    snapshot = make_snapshot(make_line(30, 7, max_quantity=5, title="Th&eacute; vert"))
    report = evaluate(snapshot)

    def fake_inspect(**_: object) -> CartInspection:
        return CartInspection(snapshot=snapshot, report=report, actions=plan(report))

    monkeypatch.setattr(cli_module, "inspect_cart", fake_inspect)

    cli_module.main(["inspect"])

    out = capsys.readouterr().out
    assert "1. Thé vert (product 30, qty 7, max 5, incompatible [])" in out
    assert "set line 1 to quantity 5" in out


def test_invalid_product_id_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check", "--product-id", "0"])

    assert excinfo.value.code == 2


def test_missing_configuration_exits_with_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_check(**_: object) -> None:
        raise MissingConfigurationError("Missing configuration for: CARTGUARD_STORE_URL")

    monkeypatch.setattr(cli_module, "check_cart", fake_check)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check"])

    assert excinfo.value.code == 2


def test_unreachable_cart_exits_with_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_inspect(**_: object) -> None:
        raise TransportError("GET /cart.js failed")

    monkeypatch.setattr(cli_module, "inspect_cart", fake_inspect)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["inspect"])

    assert excinfo.value.code == 1


def test_format_inspection_for_consistent_cart() -> None:
    snapshot = make_snapshot(make_line(10))
    report = evaluate(snapshot)

    text = format_inspection(CartInspection(snapshot=snapshot, report=report, actions=()))

    assert text.splitlines()[-1] == "No changes needed"


def test_console_notifier_writes_to_stream() -> None:
    stream = io.StringIO()

    ConsoleNotifier(stream).notify("hello")

    assert stream.getvalue() == "hello\n"


def test_check_exits_with_failure_when_cart_is_unreachable(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service = FakeCartService([make_line(10)], failing_reads=1)
    monkeypatch.setattr(cli_module, "check_cart", functools.partial(check_cart, service=service))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["check"])

    assert excinfo.value.code == 1
    assert service.changes == []
