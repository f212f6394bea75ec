"""High-level wiring: mapping table -> poller -> Prometheus registry."""

from __future__ import annotations

import logging
from typing import Optional, TypedDict

from prometheus_client.registry import CollectorRegistry

from ..mapping_table import MappingTable, load_mapping_table
from ..settings import RuntimeSettings, get_runtime_settings
from .metrics import build_registry
from .poller import AcceleratorPoller

logger = logging.getLogger(__name__)


class ServiceContext(TypedDict):
    table: MappingTable
    poller: AcceleratorPoller
    registry: CollectorRegistry


def build_service_context(
    settings: Optional[RuntimeSettings] = None,
    *,
    table: Optional[MappingTable] = None,
) -> ServiceContext:
    """Load the mapping once and wire the collector for repeated scrapes.

    A malformed or duplicated mapping file raises here, so the collector is
    never constructed with a partial table.
    """

    runtime = settings or get_runtime_settings()
    if table is None:
        table = load_mapping_table(runtime.mapping_file)
    poller = AcceleratorPoller.from_sysfs(runtime.sysfs_path, table)
    logger.info(
        "accelerator collector ready devices_path=%s vendors=%d",
        poller.devices_path,
        len(table),
    )
    return ServiceContext(table=table, poller=poller, registry=build_registry(poller))
