"""Pydantic models describing the storefront AJAX cart payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CartBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LineItemPayload(CartBaseModel):
    product_id: int
    variant_id: int
    quantity: int = Field(ge=1)
    title: str = ""
    final_line_price: int = 0
    requires_shipping: bool = True
    properties: dict[str, str] = Field(default_factory=dict)

    @field_validator("properties", mode="before")
    @classmethod
    def _stringify_properties(cls, value: object) -> object:
        # the storefront sends null for lines without properties and keeps
        # whatever JSON type the theme posted for each value
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            return value
        mapping_value = cast(Mapping[object, object], value)
        return {
            str(key): item if isinstance(item, str) else str(item)
            for key, item in mapping_value.items()
            if item is not None
        }


class CartPayload(CartBaseModel):
    token: str | None = None
    item_count: int = 0
    items: list[LineItemPayload] = Field(default_factory=list)
    cart_level_discount_applications: list[dict[str, object]] = Field(default_factory=list)


class CartChangeRequest(CartBaseModel):
    line: int = Field(ge=1)
    quantity: int = Field(ge=0)
