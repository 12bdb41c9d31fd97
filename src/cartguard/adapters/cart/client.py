"""HTTP client for the storefront AJAX cart API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Unpack

import httpx
from pydantic import ValidationError

from cartguard.adapters.http_resilience import ResilientClient
from cartguard.config.cart import get_cart_config
from cartguard.domain.errors import TransportError

from .schema import CartChangeRequest, CartPayload
from .translator import translate_cart

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from cartguard.adapters.http_resilience import RequestOptions
    from cartguard.config.cart import CartConfig
    from cartguard.config.http_resilience import ResilienceConfig
    from cartguard.domain.model import CartSnapshot
    from cartguard.domain.ports import CartService

log = getLogger(__name__)


class CartAPIError(TransportError):
    """Raised when the cart endpoint returns an unexpected response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StorefrontCartClient:
    """``CartService`` implementation over ``/cart.js`` and ``/cart/change.js``.

    Reads and writes share one ``ResilientClient``, opened on first use, so the
    configured rate limit spans the whole cycle. Close it with ``aclose`` or use
    the client as an async context manager.
    """

    def __init__(
        self,
        *,
        config: CartConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_cart_config()
        self._resilience = self._config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> StorefrontCartClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def read(self) -> CartSnapshot:
        payload = await self._perform_request("GET", self._config.routes.cart)
        try:
            cart = CartPayload.model_validate(payload)
        except ValidationError as exc:
            raise CartAPIError(f"Unexpected cart payload: {exc}") from exc
        return translate_cart(cart)

    async def change_line(self, line: int, quantity: int) -> None:
        request = CartChangeRequest(line=line, quantity=quantity)
        await self._perform_request(
            "POST",
            self._config.routes.change,
            json=request.model_dump(),
        )
        log.debug("Changed cart line %s to quantity %s", line, quantity)

    async def _perform_request(
        self,
        method: str,
        path: str,
        **kwargs: Unpack[RequestOptions],
    ) -> dict[str, object]:
        try:
            response = await self._session().request(method, path, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise CartAPIError(
                f"{method} {path} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise CartAPIError(f"{method} {path} returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise CartAPIError(f"{method} {path} returned an unexpected payload")
        return payload

    def _session(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        return self._client


if TYPE_CHECKING:
    _service_check: CartService = StorefrontCartClient()
