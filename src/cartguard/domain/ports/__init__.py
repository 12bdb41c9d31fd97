"""Domain port definitions for adapters."""

from __future__ import annotations

from .cart import CartService
from .page import Notifier, ProductPage

__all__ = ["CartService", "Notifier", "ProductPage"]
