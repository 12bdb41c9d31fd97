"""Port for the remote cart service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cartguard.domain.model import CartSnapshot


@runtime_checkable
class CartService(Protocol):
    """Read-all and per-line mutation access to the remote cart.

    Implementations raise ``TransportError`` for every read or write failure.
    """

    async def read(self) -> CartSnapshot: ...

    async def change_line(self, line: int, quantity: int) -> None:
        """Set the quantity of the 1-based ``line``; ``0`` removes it."""
        ...
