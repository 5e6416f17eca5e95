"""Pydantic request schemas for the Ordering API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

# --- Catalogue ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Espresso Machine",
                    "description": "15-bar pump, stainless steel",
                    "price": 249.0,
                    "stock": 12,
                    "category": "kitchen",
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    category: str | None = Field(None, max_length=100)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)


class AdjustStockRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"delta": 5, "reason": "Restock from supplier"}]}}

    delta: int
    reason: str | None = Field(None, max_length=255)


class CreateServiceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    category: str | None = Field(None, max_length=100)


class UpdateServiceRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    is_active: bool | None = None


# --- Cart & orders ---


class CartLineRequest(BaseModel):
    """One product or one service, never both."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"product_id": "1b4e28ba-2fa1-11d2-883f-0016d3cca427", "quantity": 2},
                {"service_id": "6fa459ea-ee8a-3ca4-894e-db77e160355e", "appointment": "2026-05-01T10:00:00"},
            ]
        }
    }

    product_id: str | None = None
    service_id: str | None = None
    quantity: int = Field(1, ge=1)
    appointment: datetime | None = None

    @model_validator(mode="after")
    def exactly_one_reference(self):
        if bool(self.product_id) == bool(self.service_id):
            raise ValueError("Provide either product_id or service_id")
        return self


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CreateOrderRequest(BaseModel):
    items: list[CartLineRequest] = Field(..., min_length=1)


class UpdateOrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "shipped"}]}}

    status: str = Field(..., min_length=1, max_length=20)
