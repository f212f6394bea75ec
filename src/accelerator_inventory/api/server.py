"""FastAPI server exposing the accelerator inventory as metrics and JSON."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ..collector.poller import EnumerationRootError
from ..collector.service import ServiceContext, build_service_context
from ..settings import get_runtime_settings
from .schemas import AcceleratorModel, HealthResponseModel, InventoryResponseModel

logger = logging.getLogger(__name__)
settings = get_runtime_settings()
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
app = FastAPI(title="Accelerator Inventory")


def get_context() -> ServiceContext:
    if not hasattr(get_context, "_cache"):
        get_context._cache = build_service_context(settings)
    return get_context._cache


@app.get("/metrics")
def metrics(context: ServiceContext = Depends(get_context)) -> Response:
    return Response(content=generate_latest(context["registry"]), media_type=CONTENT_TYPE_LATEST)


@app.get("/api/accelerators", response_model=InventoryResponseModel)
def list_accelerators(context: ServiceContext = Depends(get_context)) -> InventoryResponseModel:
    try:
        records = context["poller"].snapshot()
    except EnumerationRootError as exc:
        logger.error("accelerator poll failed: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    devices = [
        AcceleratorModel(vendor=r.vendor, model=r.model, id=r.bus_address) for r in records
    ]
    return InventoryResponseModel(devices=devices, count=len(devices))


@app.get("/healthz", response_model=HealthResponseModel)
def healthz(context: ServiceContext = Depends(get_context)) -> HealthResponseModel:
    return HealthResponseModel(status="ok", vendors=len(context["table"]))
