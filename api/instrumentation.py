"""
Request metrics and the /metrics endpoint, shared by every service app.
"""

import time
from typing import Callable

from fastapi import FastAPI, Request, Response

from shared.metrics import PipelineMetrics


def install_metrics(app: FastAPI, get_metrics: Callable[[], PipelineMetrics]) -> None:
    """
    Count and time every request, and serve the registry at GET /metrics.

    get_metrics is looked up per request so tests can swap the instance
    through the app's reset_api_state.
    """

    @app.middleware("http")
    async def record_request_metrics(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        # Route templates keep label cardinality bounded (/api/bookings/{booking_id})
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        get_metrics().record_http_request(
            request.method, endpoint, response.status_code, time.perf_counter() - start
        )
        return response

    @app.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        metrics = get_metrics()
        return Response(content=metrics.render(), media_type=metrics.content_type())
