"""Prometheus collector exposing the accelerator inventory."""

from __future__ import annotations

import logging
import time
from typing import Iterable, Iterator

from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector, CollectorRegistry

from .poller import AcceleratorPoller, DeviceRecord, EnumerationRootError

logger = logging.getLogger(__name__)

NAMESPACE = "node"
COLLECTOR_NAME = "accelerator"
CARD_INFO_METRIC = f"{NAMESPACE}_accelerator_card_info"
CARD_INFO_HELP = "Accelerator card info including vendor, model and pci id (address)"
CARD_INFO_LABELS = ("vendor", "model", "id")


def card_info_family(records: Iterable[DeviceRecord]) -> GaugeMetricFamily:
    """One sample of value 1 per recognized card.

    Exported as a gauge: a counter family would be exposed as
    ``node_accelerator_card_info_total`` and break existing queries on the name.
    """

    family = GaugeMetricFamily(CARD_INFO_METRIC, CARD_INFO_HELP, labels=CARD_INFO_LABELS)
    for record in records:
        family.add_metric([record.vendor, record.model, record.bus_address], 1)
    return family


class AcceleratorCollector(Collector):
    """Runs one poll per scrape and reports it with scrape success/duration gauges.

    A failed poll (unreadable enumeration root) drops the card family for that
    scrape and sets ``node_scrape_collector_success`` to 0.
    """

    def __init__(self, poller: AcceleratorPoller) -> None:
        self.poller = poller

    def describe(self) -> Iterator[Metric]:
        yield card_info_family(())

    def collect(self) -> Iterator[Metric]:
        start = time.perf_counter()
        success = 1
        try:
            records = self.poller.snapshot()
        except EnumerationRootError as exc:
            logger.error("collector failed name=%s err=%s", COLLECTOR_NAME, exc)
            success = 0
        else:
            logger.debug("collector succeeded name=%s devices=%d", COLLECTOR_NAME, len(records))
            yield card_info_family(records)
        duration = time.perf_counter() - start

        duration_family = GaugeMetricFamily(
            f"{NAMESPACE}_scrape_collector_duration_seconds",
            "node_exporter: Duration of a collector scrape.",
            labels=["collector"],
        )
        duration_family.add_metric([COLLECTOR_NAME], duration)
        yield duration_family

        success_family = GaugeMetricFamily(
            f"{NAMESPACE}_scrape_collector_success",
            "node_exporter: Whether a collector succeeded.",
            labels=["collector"],
        )
        success_family.add_metric([COLLECTOR_NAME], success)
        yield success_family


def build_registry(poller: AcceleratorPoller) -> CollectorRegistry:
    """Create a dedicated registry holding only the accelerator collector."""

    registry = CollectorRegistry(auto_describe=False)
    registry.register(AcceleratorCollector(poller))
    return registry
