from __future__ import annotations

import logging
import time
from typing import Any, List
from uuid import uuid4

from fastapi import Body, FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .analysis import analyze_graph, build_critical_path
from .cycles import check_dependency, find_dependency_cycles
from .logging_utils import configure_logging, log_event
from .metrics import metrics
from .models import (
    BlockedStatus,
    CriticalPath,
    CriticalPathRequest,
    CycleReport,
    DependencyValidationRequest,
    DependencyValidationResponse,
    GraphAnalysis,
    Task,
    TaskSetRequest,
    TopologicalOrder,
)
from .ordering import sort_topologically
from .queries import get_affected_tasks_on_delete, get_blocking_dependencies, get_dependent_tasks
from .settings import get_settings

ERROR_EXAMPLE = {
    "application/json": {
        "example": {
            "error": {
                "code": "not_found",
                "message": "Task not found in snapshot",
                "details": {"resource": "task", "id": 42},
            }
        }
    }
}

TASKS_EXAMPLE = [
    {"id": 1, "title": "Draft policy", "dependencies": [], "status": "done"},
    {"id": 2, "title": "Review policy", "dependencies": [1], "status": "in_progress"},
    {"id": 3, "title": "Publish policy", "dependencies": [2], "status": "pending"},
]

app = FastAPI(title="TaskGraph")

configure_logging()
logger = logging.getLogger(__name__)



def _error_payload(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return payload


def _raise_http_error(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> None:
    raise HTTPException(
        status_code=status_code,
        detail=_error_payload(code=code, message=message, details=details),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        payload = exc.detail
    else:
        payload = _error_payload(code="http_error", message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=payload)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_payload(
            code="validation_error",
            message="Validation failed",
            details={"issues": jsonable_encoder(exc.errors())},
        ),
    )


@app.middleware("http")
async def request_context_middleware(request: Request, call_next: Any) -> JSONResponse:
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID", str(uuid4()))
    request.state.request_id = request_id

    log_event(
        logger,
        "request.started",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - start) * 1000, 3)
    response.headers["X-Request-ID"] = request_id
    metrics.record_request(response.status_code, duration_ms)
    log_event(
        logger,
        "request.completed",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    return response


def _assert_within_task_limit(request: TaskSetRequest) -> None:
    max_tasks = get_settings().max_tasks_per_request
    if len(request.tasks) > max_tasks:
        _raise_http_error(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Task snapshot exceeds the configured size limit",
            details={"max_tasks": max_tasks, "task_count": len(request.tasks)},
        )


def _assert_task_in_snapshot(request: TaskSetRequest, task_id: int) -> None:
    if not any(task.id == task_id for task in request.tasks):
        _raise_http_error(
            status_code=status.HTTP_404_NOT_FOUND,
            code="not_found",
            message="Task not found in snapshot",
            details={"resource": "task", "id": task_id},
        )


def _record_operation(http_request: Request, operation: str, started: float, **fields: Any) -> None:
    duration_ms = round((time.perf_counter() - started) * 1000, 3)
    metrics.record_operation(operation, duration_ms)
    log_event(
        logger,
        f"graph.{operation}",
        request_id=getattr(http_request.state, "request_id", None),
        duration_ms=duration_ms,
        **fields,
    )


@app.get("/health/live", summary="Liveness check endpoint")
async def liveness_check() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health/ready", summary="Readiness check endpoint")
async def readiness_check() -> dict[str, str]:
    get_settings()
    return {"status": "ready"}


@app.get("/metrics", summary="In-process request and graph operation counters")
async def read_metrics() -> dict[str, object]:
    return metrics.snapshot()


@app.post(
    "/graph/dependencies/validate",
    response_model=DependencyValidationResponse,
    summary="Check whether a proposed dependency may be added",
)
def validate_dependency_edge(
    http_request: Request,
    request: DependencyValidationRequest = Body(
        ...,
        example={"tasks": TASKS_EXAMPLE, "from_task_id": 1, "to_task_id": 3},
    ),
) -> DependencyValidationResponse:
    _assert_within_task_limit(request)
    started = time.perf_counter()
    rejection = check_dependency(request.tasks, request.from_task_id, request.to_task_id)
    _record_operation(
        http_request,
        "validate_dependency",
        started,
        task_count=len(request.tasks),
        from_task_id=request.from_task_id,
        to_task_id=request.to_task_id,
        rejection=rejection.value if rejection else None,
    )
    if rejection is None:
        return DependencyValidationResponse(valid=True)
    return DependencyValidationResponse(valid=False, code=rejection, reason=rejection.message)


@app.post("/graph/cycles", response_model=CycleReport, summary="List dependency cycles in a snapshot")
def list_dependency_cycles(
    http_request: Request,
    request: TaskSetRequest = Body(..., example={"tasks": TASKS_EXAMPLE}),
) -> CycleReport:
    _assert_within_task_limit(request)
    started = time.perf_counter()
    cycles = find_dependency_cycles(request.tasks)
    _record_operation(
        http_request,
        "find_cycles",
        started,
        task_count=len(request.tasks),
        cycle_count=len(cycles),
    )
    return CycleReport(cycles=cycles, has_cycle=bool(cycles))


@app.post(
    "/graph/tasks/{task_id}/blocked",
    response_model=BlockedStatus,
    summary="Report whether a task is blocked by incomplete dependencies",
    responses={404: {"description": "Not Found", "content": ERROR_EXAMPLE}},
)
def read_blocked_status(
    task_id: int,
    http_request: Request,
    request: TaskSetRequest = Body(..., example={"tasks": TASKS_EXAMPLE}),
) -> BlockedStatus:
    _assert_within_task_limit(request)
    _assert_task_in_snapshot(request, task_id)
    settings = get_settings()
    started = time.perf_counter()
    blocking = get_blocking_dependencies(
        task_id,
        request.tasks,
        complete_status=settings.complete_status,
        missing_policy=settings.missing_dependency_policy,
    )
    _record_operation(
        http_request,
        "is_task_blocked",
        started,
        task_count=len(request.tasks),
        task_id=task_id,
        blocked=bool(blocking),
    )
    return BlockedStatus(task_id=task_id, blocked=bool(blocking), blocking_dependency_ids=blocking)


@app.post(
    "/graph/tasks/{task_id}/dependents",
    response_model=List[Task],
    summary="List tasks that directly depend on a task",
    responses={404: {"description": "Not Found", "content": ERROR_EXAMPLE}},
)
def list_dependent_tasks(
    task_id: int,
    http_request: Request,
    request: TaskSetRequest = Body(..., example={"tasks": TASKS_EXAMPLE}),
) -> list[Task]:
    _assert_within_task_limit(request)
    _assert_task_in_snapshot(request, task_id)
    started = time.perf_counter()
    dependents = get_dependent_tasks(request.tasks, task_id)
    _record_operation(
        http_request,
        "get_dependents",
        started,
        task_count=len(request.tasks),
        task_id=task_id,
        dependent_count=len(dependents),
    )
    return dependents


@app.post(
    "/graph/tasks/{task_id}/affected-on-delete",
    response_model=List[Task],
    summary="List tasks left with a dangling dependency if a task is deleted",
    responses={404: {"description": "Not Found", "content": ERROR_EXAMPLE}},
)
def list_affected_tasks_on_delete(
    task_id: int,
    http_request: Request,
    request: TaskSetRequest = Body(..., example={"tasks": TASKS_EXAMPLE}),
) -> list[Task]:
    _assert_within_task_limit(request)
    _assert_task_in_snapshot(request, task_id)
    started = time.perf_counter()
    affected = get_affected_tasks_on_delete(request.tasks, task_id)
    _record_operation(
        http_request,
        "get_affected_on_delete",
        started,
        task_count=len(request.tasks),
        task_id=task_id,
        affected_count=len(affected),
    )
    return affected


@app.post("/graph/critical-path", response_model=CriticalPath, summary="Longest dependency chain")
def read_critical_path(
    http_request: Request,
    request: CriticalPathRequest = Body(
        ...,
        example={"tasks": TASKS_EXAMPLE, "weight_by_duration": False},
    ),
) -> CriticalPath:
    _assert_within_task_limit(request)
    started = time.perf_counter()
    critical_path = build_critical_path(request.tasks, weight_by_duration=request.weight_by_duration)
    _record_operation(
        http_request,
        "critical_path",
        started,
        task_count=len(request.tasks),
        path_length=len(critical_path.task_ids),
        weight_by_duration=request.weight_by_duration,
    )
    return critical_path


@app.post(
    "/graph/topological-order",
    response_model=TopologicalOrder,
    summary="Execution order with every dependency first",
)
def read_topological_order(
    http_request: Request,
    request: TaskSetRequest = Body(..., example={"tasks": TASKS_EXAMPLE}),
) -> TopologicalOrder:
    _assert_within_task_limit(request)
    started = time.perf_counter()
    result = sort_topologically(request.tasks)
    _record_operation(
        http_request,
        "topological_order",
        started,
        task_count=len(request.tasks),
        is_acyclic=result.is_acyclic,
    )
    return result


@app.post("/graph/analysis", response_model=GraphAnalysis, summary="All derived graph views at once")
def read_graph_analysis(
    http_request: Request,
    request: CriticalPathRequest = Body(
        ...,
        example={"tasks": TASKS_EXAMPLE, "weight_by_duration": False},
    ),
) -> GraphAnalysis:
    _assert_within_task_limit(request)
    settings = get_settings()
    started = time.perf_counter()
    analysis = analyze_graph(
        request.tasks,
        complete_status=settings.complete_status,
        missing_policy=settings.missing_dependency_policy,
        weight_by_duration=request.weight_by_duration,
    )
    _record_operation(
        http_request,
        "analysis",
        started,
        task_count=analysis.task_count,
        cycle_count=len(analysis.cycles),
        blocked_count=len(analysis.blocked_task_ids),
    )
    return analysis
