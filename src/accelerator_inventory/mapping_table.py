"""Vendor/device ID lookup table for accelerator classification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, NamedTuple, Optional

from .config_loader import ConfigLoaderError, load_vendor_models
from .config_types import VendorModelsConfig

logger = logging.getLogger(__name__)


class MappingValidationError(ConfigLoaderError):
    """Raised when the mapping records cannot form a consistent table."""


class DuplicateVendorError(MappingValidationError):
    def __init__(self, vendor_id: str) -> None:
        super().__init__(f"mapping file contains duplicate of vendor id {vendor_id}")
        self.vendor_id = vendor_id


class DuplicateDeviceError(MappingValidationError):
    def __init__(self, vendor_id: str, device_id: str) -> None:
        super().__init__(
            f"mapping file contains duplicate of device id {device_id} for vendor id {vendor_id}"
        )
        self.vendor_id = vendor_id
        self.device_id = device_id


class ModelMatch(NamedTuple):
    vendor_name: str
    model_name: str


@dataclass(frozen=True)
class VendorRecord:
    """A vendor and the device IDs (as read from sysfs) of its monitored models."""

    vendor_name: str
    vendor_id: str
    device_models: Mapping[str, str]

    def model_for(self, device_id: str) -> Optional[str]:
        return self.device_models.get(device_id)


@dataclass(frozen=True)
class MappingTable:
    """Immutable vendor ID -> VendorRecord mapping.

    Keys are compared verbatim; no case folding or ``0x`` stripping happens, so
    the mapping file must spell IDs the way the enumeration source does.
    """

    vendors: Mapping[str, VendorRecord]

    def get_vendor(self, vendor_id: str) -> Optional[VendorRecord]:
        return self.vendors.get(vendor_id)

    def lookup(self, vendor_id: str, device_id: str) -> Optional[ModelMatch]:
        """Return the vendor/model names for an ID pair, or ``None`` if not monitored."""

        vendor = self.vendors.get(vendor_id)
        if vendor is None:
            return None
        model_name = vendor.model_for(device_id)
        if model_name is None:
            return None
        return ModelMatch(vendor.vendor_name, model_name)

    @property
    def vendor_ids(self) -> list[str]:
        return list(self.vendors)

    def __len__(self) -> int:
        return len(self.vendors)

    def __iter__(self) -> Iterator[VendorRecord]:
        return iter(self.vendors.values())


def build_mapping_table(records: Iterable[VendorModelsConfig]) -> MappingTable:
    """Build the lookup table, failing on the first duplicate vendor or device ID.

    An empty record list is valid and produces a table that matches nothing.
    """

    vendors: Dict[str, VendorRecord] = {}
    for record in records:
        if record.vendor_id in vendors:
            raise DuplicateVendorError(record.vendor_id)
        device_models: Dict[str, str] = {}
        for model in record.models:
            if model.pci_id in device_models:
                raise DuplicateDeviceError(record.vendor_id, model.pci_id)
            device_models[model.pci_id] = model.model_name
        vendors[record.vendor_id] = VendorRecord(
            vendor_name=record.vendor_name,
            vendor_id=record.vendor_id,
            device_models=MappingProxyType(device_models),
        )

    logger.debug(
        "built accelerator mapping vendors=%d models=%d",
        len(vendors),
        sum(len(v.device_models) for v in vendors.values()),
    )
    return MappingTable(vendors=MappingProxyType(vendors))


def load_mapping_table(path: Path | None = None) -> MappingTable:
    """Load the mapping file and build the table in one step (startup helper)."""

    table = build_mapping_table(load_vendor_models(path))
    logger.info("loaded accelerator mapping from %s with %d vendors", path or "default config", len(table))
    return table
