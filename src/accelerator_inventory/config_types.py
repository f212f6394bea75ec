"""Typed schemas for the accelerator mapping file."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ModelEntry(BaseModel):
    """One PCI device ID mapped to a marketing model name."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, protected_namespaces=())

    pci_id: str = Field(..., alias="pciID")
    model_name: str = Field(..., alias="modelName")


class VendorModelsConfig(BaseModel):
    """A vendor entry of the mapping file (``vendorName``/``vendorID``/``models``).

    IDs are kept exactly as written; ``0x10de`` and ``10de`` are different keys.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    vendor_name: str = Field(..., alias="vendorName")
    vendor_id: str = Field(..., alias="vendorID")
    models: List[ModelEntry] = Field(default_factory=list)
