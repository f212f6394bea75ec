"""PCI enumeration and accelerator classification (one poll = one sysfs scan)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Union

from ..mapping_table import MappingTable

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

VENDOR_ATTRIBUTE = "vendor"
DEVICE_ATTRIBUTE = "device"


class EnumerationRootError(RuntimeError):
    """Raised when the device enumeration root cannot be listed."""


@dataclass(frozen=True)
class DeviceRecord:
    """A recognized accelerator found during one poll."""

    vendor: str
    model: str
    bus_address: str


def pci_devices_path(sysfs_root: PathLike) -> Path:
    """Return ``<sysfs>/bus/pci/devices`` for a sysfs mount point."""

    return Path(sysfs_root) / "bus" / "pci" / "devices"


def _list_entries(root: Path) -> List[str]:
    try:
        with os.scandir(root) as it:
            return [entry.name for entry in it]
    except OSError as exc:
        raise EnumerationRootError(f"failed to read from {str(root)!r}: {exc}") from exc


def read_attribute(root: Path, bus_address: str, attribute: str) -> str:
    """Read a single-token sysfs attribute, stripped of surrounding whitespace."""

    return (root / bus_address / attribute).read_text(encoding="utf-8").strip()


def poll(enumeration_root: PathLike, table: MappingTable) -> Iterator[DeviceRecord]:
    """Scan the enumeration root and lazily yield every recognized accelerator.

    The root is listed eagerly, so an unreadable root raises
    :class:`EnumerationRootError` from this call and nothing is yielded. After
    that, entries whose attributes cannot be read are logged and skipped, and
    entries absent from ``table`` are skipped without logging.
    """

    root = Path(enumeration_root)
    entries = _list_entries(root)
    return _classify(root, entries, table)


def _classify(root: Path, entries: List[str], table: MappingTable) -> Iterator[DeviceRecord]:
    for bus_address in entries:
        try:
            vendor_id = read_attribute(root, bus_address, VENDOR_ATTRIBUTE)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("failed to get pci vendor ID name=%s err=%s", bus_address, exc)
            continue
        try:
            device_id = read_attribute(root, bus_address, DEVICE_ATTRIBUTE)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("failed to get pci device ID name=%s err=%s", bus_address, exc)
            continue

        match = table.lookup(vendor_id, device_id)
        if match is None:
            continue

        logger.debug(
            "accelerator device found vendor=%s model=%s id=%s",
            match.vendor_name,
            match.model_name,
            bus_address,
        )
        yield DeviceRecord(vendor=match.vendor_name, model=match.model_name, bus_address=bus_address)


class AcceleratorPoller:
    """Binds one enumeration root to the mapping table it exclusively uses."""

    def __init__(self, devices_path: PathLike, table: MappingTable) -> None:
        self.devices_path = Path(devices_path)
        self.table = table

    @classmethod
    def from_sysfs(cls, sysfs_root: PathLike, table: MappingTable) -> "AcceleratorPoller":
        return cls(pci_devices_path(sysfs_root), table)

    def poll(self) -> Iterator[DeviceRecord]:
        return poll(self.devices_path, self.table)

    def snapshot(self) -> List[DeviceRecord]:
        """Run a full poll and materialize the records."""

        return list(self.poll())
