import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from starlette.responses import Response

from infrastructure.http.errors import to_http_exception
from infrastructure.http.schemas import RunMaintenanceRequest, RunMaintenanceResponse
from infrastructure.http.workflow_service import execute_workflow
from infrastructure.observability.context import run_scope
from infrastructure.observability.logging_utils import configure_logging, log_event


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="Maintenance PR Bot API")

RUN_ID_HEADER = "X-Request-ID"


@app.middleware("http")
async def run_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    with run_scope(request.headers.get(RUN_ID_HEADER)) as run_id:
        request.state.run_id = run_id
        started = time.perf_counter()
        response = await call_next(request)
        response.headers[RUN_ID_HEADER] = run_id
        log_event(
            logger,
            logging.INFO,
            "http.request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=f"{(time.perf_counter() - started) * 1000:.1f}",
        )
        return response


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/maintenance/run", response_model=RunMaintenanceResponse, status_code=status.HTTP_200_OK)
def run_maintenance(payload: RunMaintenanceRequest, request: Request) -> RunMaintenanceResponse:
    # Endpoint sincrono roda no threadpool: o run id e reaplicado aqui.
    with run_scope(getattr(request.state, "run_id", None)):
        try:
            return execute_workflow(payload)
        except Exception as error:
            log_event(logger, logging.ERROR, "http.workflow.endpoint_failed", error=str(error))
            raise to_http_exception(error)
