from __future__ import annotations

from typing import Iterator, Optional, Sequence

from .graph import TaskLike, build_dependency_map, index_tasks
from .models import DependencyRejection


def _has_cycle(adjacency: dict[int, list[int]]) -> bool:
    visited: set[int] = set()

    for root in adjacency:
        if root in visited:
            continue

        visited.add(root)
        on_stack: set[int] = {root}
        stack: list[tuple[int, Iterator[int]]] = [(root, iter(adjacency.get(root, [])))]
        while stack:
            node, neighbors = stack[-1]
            descended = False
            for neighbor in neighbors:
                if neighbor in on_stack:
                    return True
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                on_stack.add(neighbor)
                stack.append((neighbor, iter(adjacency.get(neighbor, []))))
                descended = True
                break
            if not descended:
                stack.pop()
                on_stack.discard(node)

    return False


def would_create_cycle(tasks: Sequence[TaskLike], from_task_id: int, to_task_id: int) -> bool:
    """Return True when adding ``from_task_id -> to_task_id`` leaves the graph cyclic.

    A graph that is already cyclic reports True whatever the candidate edge is.
    """
    adjacency = build_dependency_map(tasks)
    dependencies = adjacency.setdefault(from_task_id, [])
    if to_task_id not in dependencies:
        adjacency[from_task_id] = [*dependencies, to_task_id]
    return _has_cycle(adjacency)


def check_dependency(
    tasks: Sequence[TaskLike], from_task_id: int, to_task_id: int
) -> Optional[DependencyRejection]:
    if from_task_id == to_task_id:
        return DependencyRejection.SELF_DEPENDENCY

    from_task = index_tasks(tasks).get(from_task_id)
    if from_task is not None and to_task_id in (from_task.dependencies or []):
        return DependencyRejection.DUPLICATE

    if would_create_cycle(tasks, from_task_id, to_task_id):
        return DependencyRejection.CIRCULAR

    return None


def validate_dependency(tasks: Sequence[TaskLike], from_task_id: int, to_task_id: int) -> Optional[str]:
    """Return the reason a proposed dependency must be rejected, or None when it is valid."""
    rejection = check_dependency(tasks, from_task_id, to_task_id)
    if rejection is None:
        return None
    return rejection.message


def _describe_cycle(cycle: list[int], tasks_by_id: dict[int, TaskLike]) -> str:
    names: list[str] = []
    for task_id in cycle:
        task = tasks_by_id.get(task_id)
        names.append(f'"{task.title}" (ID: {task_id})' if task else f"Task {task_id}")
    return f"Cycle detected: {' → '.join(names)}"


def find_dependency_cycles(tasks: Sequence[TaskLike]) -> list[str]:
    """Describe every cycle closed by a back edge of a depth-first walk.

    This is one report per back edge, not a minimal cycle basis.
    """
    adjacency = build_dependency_map(tasks)
    tasks_by_id = index_tasks(tasks)
    cycles: list[str] = []
    visited: set[int] = set()

    for root in adjacency:
        if root in visited:
            continue

        visited.add(root)
        path: list[int] = [root]
        stack: list[Iterator[int]] = [iter(adjacency[root])]
        while stack:
            descended = False
            for neighbor in stack[-1]:
                if neighbor in visited:
                    if neighbor in path:
                        cycle = path[path.index(neighbor):] + [neighbor]
                        cycles.append(_describe_cycle(cycle, tasks_by_id))
                    continue
                visited.add(neighbor)
                path.append(neighbor)
                stack.append(iter(adjacency[neighbor]))
                descended = True
                break
            if not descended:
                stack.pop()
                path.pop()

    return cycles
