from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from functools import lru_cache


class Environment(StrEnum):
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class MissingDependencyPolicy(StrEnum):
    """How a dependency id that is absent from the task set is treated."""

    IGNORE = "ignore"
    BLOCK = "block"


DEFAULT_COMPLETE_STATUS = "done"
DEFAULT_MAX_TASKS = 500


@dataclass(frozen=True)
class Settings:
    environment: Environment
    host: str
    port: int
    log_level: str
    log_format: str
    complete_status: str
    missing_dependency_policy: MissingDependencyPolicy
    max_tasks_per_request: int



def _get_environment() -> Environment:
    value = os.environ.get("TASKGRAPH_ENV", Environment.DEV).strip().lower()
    try:
        return Environment(value)
    except ValueError as exc:
        valid = ", ".join(env.value for env in Environment)
        raise ValueError(f"TASKGRAPH_ENV must be one of: {valid}") from exc



def _get_missing_dependency_policy() -> MissingDependencyPolicy:
    value = os.environ.get(
        "TASKGRAPH_MISSING_DEPENDENCY_POLICY", MissingDependencyPolicy.IGNORE
    ).strip().lower()
    try:
        return MissingDependencyPolicy(value)
    except ValueError as exc:
        valid = ", ".join(policy.value for policy in MissingDependencyPolicy)
        raise ValueError(f"TASKGRAPH_MISSING_DEPENDENCY_POLICY must be one of: {valid}") from exc



def _get_max_tasks() -> int:
    value = int(os.environ.get("TASKGRAPH_MAX_TASKS", str(DEFAULT_MAX_TASKS)))
    if value <= 0:
        raise ValueError("TASKGRAPH_MAX_TASKS must be greater than 0")
    return value



def _get_complete_status() -> str:
    value = os.environ.get("TASKGRAPH_COMPLETE_STATUS", DEFAULT_COMPLETE_STATUS).strip()
    if not value:
        raise ValueError("TASKGRAPH_COMPLETE_STATUS must not be empty")
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        environment=_get_environment(),
        host=os.environ.get("TASKGRAPH_HOST", "0.0.0.0"),
        port=int(os.environ.get("TASKGRAPH_PORT", "8000")),
        log_level=os.environ.get("TASKGRAPH_LOG_LEVEL", "INFO").upper(),
        log_format=os.environ.get("TASKGRAPH_LOG_FORMAT", "json").strip().lower(),
        complete_status=_get_complete_status(),
        missing_dependency_policy=_get_missing_dependency_policy(),
        max_tasks_per_request=_get_max_tasks(),
    )
