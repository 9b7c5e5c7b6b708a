"""Adjacency helpers shared by the dependency graph algorithms.

Every helper derives its view from the task snapshot it is given. Dependency
ids that do not belong to the snapshot are dropped from the adjacency, and
duplicate ids within one dependency list collapse to their first occurrence.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, TypeVar


class TaskLike(Protocol):
    id: int
    title: str
    dependencies: list[int]
    status: Optional[str]


TaskT = TypeVar("TaskT", bound=TaskLike)


def index_tasks(tasks: Sequence[TaskT]) -> dict[int, TaskT]:
    return {task.id: task for task in tasks}


def unique_ids(values: Sequence[int]) -> list[int]:
    seen: set[int] = set()
    result: list[int] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def build_dependency_map(tasks: Sequence[TaskLike]) -> dict[int, list[int]]:
    """Map each task id to the in-set ids it depends on, in declaration order."""
    task_ids = {task.id for task in tasks}
    return {
        task.id: [
            dependency_id
            for dependency_id in unique_ids(task.dependencies or [])
            if dependency_id in task_ids
        ]
        for task in tasks
    }


def build_dependents_map(tasks: Sequence[TaskLike]) -> dict[int, list[int]]:
    """Map each task id to the ids of tasks that depend on it, in task order."""
    dependents: dict[int, list[int]] = {task.id: [] for task in tasks}
    for task_id, dependency_ids in build_dependency_map(tasks).items():
        for dependency_id in dependency_ids:
            if task_id not in dependents[dependency_id]:
                dependents[dependency_id].append(task_id)
    return dependents


def find_missing_dependencies(tasks: Sequence[TaskLike]) -> dict[int, list[int]]:
    task_ids = {task.id for task in tasks}
    missing: dict[int, list[int]] = {}
    for task in tasks:
        dangling = [
            dependency_id
            for dependency_id in unique_ids(task.dependencies or [])
            if dependency_id not in task_ids
        ]
        if dangling:
            missing[task.id] = dangling
    return missing
