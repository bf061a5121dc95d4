"""HTTP route definitions for the exporter."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response

from datastore.metric_store import MetricStore
from services.exporter import SnapshotExporter

router = APIRouter()


def get_store(request: Request) -> MetricStore:
    return request.app.state.store


def get_exporter(request: Request) -> SnapshotExporter:
    return request.app.state.exporter


@router.get(
    "/metrics",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    summary="Latest air-quality readings in Prometheus text format.",
)
def metrics(
    store: MetricStore = Depends(get_store),
    exporter: SnapshotExporter = Depends(get_exporter),
) -> Response:
    payload = exporter.render(store.snapshot())
    return Response(content=payload, media_type=exporter.content_type)
