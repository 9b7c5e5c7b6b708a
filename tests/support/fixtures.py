from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TaskFixture:
    id: int
    title: str
    dependencies: list[int] = field(default_factory=list)
    status: Optional[str] = None
    estimated_duration_minutes: Optional[int] = None


def build_task(task_id: int, *dependencies: int, **overrides: object) -> TaskFixture:
    fields: dict[str, object] = {"title": f"Task {task_id}", "dependencies": list(dependencies)}
    fields.update(overrides)
    return TaskFixture(id=task_id, **fields)


def build_chain(length: int) -> list[TaskFixture]:
    """1 <- 2 <- 3 ... where each task depends on the previous one."""
    return [
        build_task(task_id) if task_id == 1 else build_task(task_id, task_id - 1)
        for task_id in range(1, length + 1)
    ]


def build_diamond() -> list[TaskFixture]:
    """1 fans out to 2 and 3, which both feed 4."""
    return [
        build_task(1),
        build_task(2, 1),
        build_task(3, 1),
        build_task(4, 2, 3),
    ]


def apply_dependency(tasks: list[TaskFixture], from_task_id: int, to_task_id: int) -> list[TaskFixture]:
    return [
        TaskFixture(
            id=task.id,
            title=task.title,
            dependencies=[*task.dependencies, to_task_id] if task.id == from_task_id else list(task.dependencies),
            status=task.status,
            estimated_duration_minutes=task.estimated_duration_minutes,
        )
        for task in tasks
    ]


def build_task_payload(task_id: int, **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": task_id,
        "title": f"Task {task_id}",
        "dependencies": [],
        "status": "pending",
        "estimated_duration_minutes": 60,
    }
    payload.update(overrides)
    return payload


def build_chain_payload(length: int, **overrides: object) -> list[dict[str, object]]:
    return [
        build_task_payload(
            task_id,
            dependencies=[] if task_id == 1 else [task_id - 1],
            **overrides,
        )
        for task_id in range(1, length + 1)
    ]
