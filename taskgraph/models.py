from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel


class DependencyRejection(str, Enum):
    SELF_DEPENDENCY = "SELF_DEPENDENCY"
    DUPLICATE = "DUPLICATE"
    CIRCULAR = "CIRCULAR"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES: dict[DependencyRejection, str] = {
    DependencyRejection.SELF_DEPENDENCY: "A task cannot depend on itself",
    DependencyRejection.DUPLICATE: "This dependency already exists",
    DependencyRejection.CIRCULAR: "Adding this dependency would create a circular dependency",
}


class Task(SQLModel):
    id: int
    title: str
    dependencies: list[int] = Field(default_factory=list)
    status: Optional[str] = None
    estimated_duration_minutes: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("title must not be empty")
        return stripped

    @field_validator("dependencies", mode="before")
    @classmethod
    def validate_dependencies(cls, value: object) -> list[int]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("dependencies must be a list")

        for dependency_id in value:
            if isinstance(dependency_id, bool) or not isinstance(dependency_id, int):
                raise ValueError("dependencies must only contain integers")
        return list(value)

    @field_validator("estimated_duration_minutes")
    @classmethod
    def estimated_duration_must_be_positive(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("estimated_duration_minutes must be greater than 0")
        return value


class TaskSetRequest(SQLModel):
    tasks: list[Task]

    @model_validator(mode="after")
    def task_ids_must_be_unique(self) -> "TaskSetRequest":
        seen: set[int] = set()
        duplicates: list[int] = []
        for task in self.tasks:
            if task.id in seen and task.id not in duplicates:
                duplicates.append(task.id)
            seen.add(task.id)
        if duplicates:
            raise ValueError(f"task ids must be unique, duplicated: {duplicates}")
        return self


class DependencyValidationRequest(TaskSetRequest):
    from_task_id: int
    to_task_id: int


class DependencyValidationResponse(SQLModel):
    valid: bool
    code: Optional[DependencyRejection] = None
    reason: Optional[str] = None


class CycleReport(SQLModel):
    cycles: list[str] = Field(default_factory=list)
    has_cycle: bool = False


class BlockedStatus(SQLModel):
    task_id: int
    blocked: bool
    blocking_dependency_ids: list[int] = Field(default_factory=list)


class CriticalPathRequest(TaskSetRequest):
    weight_by_duration: bool = False


class CriticalPath(SQLModel):
    task_ids: list[int] = Field(default_factory=list)
    length: int = 0
    weight_by_duration: bool = False


class TopologicalOrder(SQLModel):
    order: list[int] = Field(default_factory=list)
    cycles: list[str] = Field(default_factory=list)
    is_acyclic: bool = True


class GraphAnalysis(SQLModel):
    task_count: int
    cycles: list[str] = Field(default_factory=list)
    topological_order: list[int] = Field(default_factory=list)
    critical_path: CriticalPath
    blocked_task_ids: list[int] = Field(default_factory=list)
    missing_dependencies: dict[int, list[int]] = Field(default_factory=dict)
