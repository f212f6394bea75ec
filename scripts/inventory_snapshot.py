#!/usr/bin/env python3
"""Print the accelerators currently visible on the PCI bus.

Usage examples:
  uv run -- python scripts/inventory_snapshot.py --json
  uv run -- python scripts/inventory_snapshot.py --mapping-file my.yaml --check

Notes:
  - Defaults come from ACCELINV_MAPPING_FILE / ACCELINV_SYSFS_PATH.
  - --check only validates the mapping file and exits.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from accelerator_inventory.collector.poller import AcceleratorPoller, EnumerationRootError
from accelerator_inventory.config_loader import ConfigLoaderError
from accelerator_inventory.mapping_table import load_mapping_table
from accelerator_inventory.settings import get_runtime_settings


def main() -> int:
    settings = get_runtime_settings()
    ap = argparse.ArgumentParser()
    ap.add_argument("--mapping-file", type=Path, default=settings.mapping_file)
    ap.add_argument("--sysfs", type=Path, default=settings.sysfs_path, help="sysfs mount point")
    ap.add_argument("--json", action="store_true", help="emit JSON instead of a table")
    ap.add_argument("--check", action="store_true", help="validate the mapping file and exit")
    args = ap.parse_args()

    try:
        table = load_mapping_table(args.mapping_file)
    except ConfigLoaderError as exc:
        print(f"invalid mapping file: {exc}", file=sys.stderr)
        return 2

    if args.check:
        models = sum(len(vendor.device_models) for vendor in table)
        print(f"OK {args.mapping_file} ({len(table)} vendors, {models} models)")
        return 0

    poller = AcceleratorPoller.from_sysfs(args.sysfs, table)
    try:
        records = poller.snapshot()
    except EnumerationRootError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.json:
        payload = [
            {"vendor": r.vendor, "model": r.model, "id": r.bus_address} for r in records
        ]
        print(json.dumps(payload, indent=2))
        return 0

    lines: List[str] = [f"{'ID':<16} {'VENDOR':<10} MODEL"]
    lines.extend(f"{r.bus_address:<16} {r.vendor:<10} {r.model}" for r in records)
    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
