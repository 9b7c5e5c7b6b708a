from __future__ import annotations

from typing import Sequence

from .graph import TaskLike, TaskT, index_tasks, unique_ids
from .settings import DEFAULT_COMPLETE_STATUS, MissingDependencyPolicy


def _blocking_dependencies(
    task: TaskLike,
    tasks_by_id: dict[int, TaskLike],
    complete_status: str,
    missing_policy: MissingDependencyPolicy,
) -> list[int]:
    blocking: list[int] = []
    for dependency_id in unique_ids(task.dependencies or []):
        dependency = tasks_by_id.get(dependency_id)
        if dependency is None:
            if missing_policy == MissingDependencyPolicy.BLOCK:
                blocking.append(dependency_id)
            continue
        if dependency.status != complete_status:
            blocking.append(dependency_id)
    return blocking


def get_blocking_dependencies(
    task_id: int,
    tasks: Sequence[TaskLike],
    complete_status: str = DEFAULT_COMPLETE_STATUS,
    missing_policy: MissingDependencyPolicy = MissingDependencyPolicy.IGNORE,
) -> list[int]:
    """Return the dependency ids of ``task_id`` that are not yet complete.

    Dependency ids absent from ``tasks`` count as blocking only under
    ``MissingDependencyPolicy.BLOCK``. An unknown ``task_id`` has no blockers.
    """
    tasks_by_id = index_tasks(tasks)
    task = tasks_by_id.get(task_id)
    if task is None:
        return []
    return _blocking_dependencies(task, tasks_by_id, complete_status, missing_policy)


def is_task_blocked(
    task_id: int,
    tasks: Sequence[TaskLike],
    complete_status: str = DEFAULT_COMPLETE_STATUS,
    missing_policy: MissingDependencyPolicy = MissingDependencyPolicy.IGNORE,
) -> bool:
    return bool(get_blocking_dependencies(task_id, tasks, complete_status, missing_policy))


def get_blocked_tasks(
    tasks: Sequence[TaskLike],
    complete_status: str = DEFAULT_COMPLETE_STATUS,
    missing_policy: MissingDependencyPolicy = MissingDependencyPolicy.IGNORE,
) -> list[int]:
    tasks_by_id = index_tasks(tasks)
    return [
        task.id
        for task in tasks
        if _blocking_dependencies(task, tasks_by_id, complete_status, missing_policy)
    ]


def get_dependent_tasks(tasks: Sequence[TaskT], task_id: int) -> list[TaskT]:
    """Tasks that list ``task_id`` as a direct dependency."""
    return [task for task in tasks if task_id in (task.dependencies or [])]


def get_affected_tasks_on_delete(tasks: Sequence[TaskT], task_id: int) -> list[TaskT]:
    """Tasks left holding a dangling reference if ``task_id`` were deleted.

    Only reports; cascading the removal or refusing the delete is up to the caller.
    """
    return get_dependent_tasks(tasks, task_id)
