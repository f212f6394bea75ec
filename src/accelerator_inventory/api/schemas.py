"""API response schemas (FastAPI/Pydantic)."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class AcceleratorModel(BaseModel):
    vendor: str
    model: str
    id: str = Field(..., description="PCI bus address of the card")


class InventoryResponseModel(BaseModel):
    devices: List[AcceleratorModel] = Field(default_factory=list)
    count: int = 0


class HealthResponseModel(BaseModel):
    status: str
    vendors: int
