from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderItemIn(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    selected_color: Optional[str] = None
    selected_size: Optional[str] = None


class OrderCreate(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=120)
    customer_phone: str = Field(..., min_length=3, max_length=30)
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    customer_message: Optional[str] = None
    delivery_time: Optional[str] = None
    items: List[OrderItemIn] = Field(..., min_length=1)

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def strip_required(cls, value: str) -> str:
        candidate = value.strip()
        if not candidate:
            raise ValueError("Field cannot be blank")
        return candidate


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    unit_price: int
    subtotal: int
    selected_color: Optional[str] = None
    selected_size: Optional[str] = None


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: str
    verified_at: Optional[datetime] = None
    notes: Optional[str] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: str
    customer_address: Optional[str] = None
    customer_message: Optional[str] = None
    delivery_time: Optional[str] = None
    total_amount: int
    stock_applied_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    order_items: List[OrderItemOut] = Field(default_factory=list)


class StatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]


class VerifyRequest(BaseModel):
    notes: Optional[str] = None


class BulkDeleteRequest(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    confirmation: Optional[str] = None


class BulkDeleteResponse(BaseModel):
    orders_deleted: int
    items_deleted: int


class RevenuePeriodRow(BaseModel):
    period: str
    revenue: int
    order_count: int
    verified_count: int


class RevenueSummary(BaseModel):
    total_orders: int
    total_products: int
    approved_orders: int
    low_stock_products: int
    total_verified_revenue: int
    total_pending_revenue: int


class TopProduct(BaseModel):
    product_id: Optional[int] = None
    name: Optional[str] = None
    total: int
