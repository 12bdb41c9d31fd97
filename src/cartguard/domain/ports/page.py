"""Ports for the page the guard runs on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cartguard.domain.model import FormDirective, ProductForm


@runtime_checkable
class Notifier(Protocol):
    """Blocking user notification; returns once the user acknowledged it."""

    def notify(self, message: str) -> None: ...


@runtime_checkable
class ProductPage(Protocol):
    def forms(self) -> Sequence[ProductForm]: ...

    def render(self, directives: Sequence[FormDirective]) -> None: ...
