# backend/ceahub/schemas/sales.py
from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SaleCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sale_count: int = Field(alias="saleCount")
    sale_names: str = Field(alias="saleNames")

    @field_validator("sale_count", mode="before")
    @classmethod
    def parse_sale_count(cls, v: Any) -> int:
        # Accept 3 or "3"; reject booleans, fractions and non-numeric text.
        if isinstance(v, bool) or v is None:
            raise ValueError("saleCount must be an integer greater than 0")
        if isinstance(v, str):
            v = v.strip()
            if not v.lstrip("-").isdigit():
                raise ValueError("saleCount must be an integer greater than 0")
            v = int(v)
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError("saleCount must be an integer greater than 0")
            v = int(v)
        if not isinstance(v, int) or v <= 0:
            raise ValueError("saleCount must be an integer greater than 0")
        return v

    @field_validator("sale_names")
    @classmethod
    def validate_sale_names(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("saleNames is required")
        return v


class SaleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    agent_id: UUID
    sale_count: int
    sale_names: str
    status: str
    created_at: datetime
    updated_at: datetime


class AdminSaleOut(SaleOut):
    agent_name: str = "Unknown Agent"
    agent_internal_id: str = "N/A"


class SalesSummaryOut(BaseModel):
    period: str
    pending_sales: int
    confirmed_sales: int
    amount_earned: str


class TopPerformerOut(BaseModel):
    rank: int
    id: UUID
    name: str
    agent_internal_id: str = "N/A"
    confirmed_sales: int
