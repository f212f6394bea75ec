from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"


class FakePciBus:
    """Builds a ``<sysfs>/bus/pci/devices`` tree under a temporary directory."""

    def __init__(self, sysfs_root: Path) -> None:
        self.sysfs_root = sysfs_root
        self.devices_path = sysfs_root / "bus" / "pci" / "devices"
        self.devices_path.mkdir(parents=True)

    def add(self, address: str, vendor: Optional[str], device: Optional[str]) -> Path:
        entry = self.devices_path / address
        entry.mkdir()
        # sysfs attributes end with a newline
        if vendor is not None:
            (entry / "vendor").write_text(f"{vendor}\n", encoding="utf-8")
        if device is not None:
            (entry / "device").write_text(f"{device}\n", encoding="utf-8")
        return entry


@pytest.fixture
def pci_bus(tmp_path: Path) -> FakePciBus:
    return FakePciBus(tmp_path / "sys")


@pytest.fixture
def data_file() -> Callable[[str], Path]:
    def _resolve(name: str) -> Path:
        return DATA_DIR / name

    return _resolve
