from __future__ import annotations

from collections import deque
from typing import Iterator, Sequence

from .cycles import find_dependency_cycles
from .graph import TaskLike, build_dependency_map, build_dependents_map
from .models import TopologicalOrder


def sort_topologically(tasks: Sequence[TaskLike]) -> TopologicalOrder:
    cycles = find_dependency_cycles(tasks)
    if cycles:
        return TopologicalOrder(order=[], cycles=cycles, is_acyclic=False)

    dependencies = build_dependency_map(tasks)
    dependents = build_dependents_map(tasks)
    in_degree = {task_id: len(dependency_ids) for task_id, dependency_ids in dependencies.items()}

    queue = deque(task_id for task_id, degree in in_degree.items() if degree == 0)
    order: list[int] = []
    while queue:
        current = queue.popleft()
        order.append(current)
        for dependent_id in dependents[current]:
            in_degree[dependent_id] -= 1
            if in_degree[dependent_id] == 0:
                queue.append(dependent_id)

    if len(order) != len(in_degree):
        return TopologicalOrder(order=[], cycles=cycles, is_acyclic=False)
    return TopologicalOrder(order=order, cycles=[], is_acyclic=True)


def get_topological_order(tasks: Sequence[TaskLike]) -> list[int]:
    """Task ids with every dependency ahead of its dependents; empty when the graph is cyclic."""
    return sort_topologically(tasks).order


def _task_weights(tasks: Sequence[TaskLike], weight_by_duration: bool) -> dict[int, int]:
    if not weight_by_duration:
        return {task.id: 1 for task in tasks}
    return {task.id: getattr(task, "estimated_duration_minutes", None) or 0 for task in tasks}


def _longest_chains_from(
    start: int,
    dependents: dict[int, list[int]],
    weights: dict[int, int],
    best: dict[int, tuple[int, list[int]]],
) -> None:
    # Post-order walk; an edge back onto the current walk is skipped so cyclic input terminates.
    on_stack: set[int] = {start}
    stack: list[tuple[int, Iterator[int]]] = [(start, iter(dependents.get(start, [])))]
    while stack:
        node, children = stack[-1]
        descended = False
        for child in children:
            if child in best or child in on_stack:
                continue
            on_stack.add(child)
            stack.append((child, iter(dependents.get(child, []))))
            descended = True
            break
        if descended:
            continue

        stack.pop()
        on_stack.discard(node)
        tail_weight, tail = 0, []
        for child in dependents.get(node, []):
            chain = best.get(child)
            if chain is not None and chain[0] > tail_weight:
                tail_weight, tail = chain
        best[node] = (weights.get(node, 0) + tail_weight, [node, *tail])


def get_critical_path(tasks: Sequence[TaskLike], weight_by_duration: bool = False) -> list[int]:
    """Return the longest dependency chain, first task first.

    Chains are measured in tasks, or in summed ``estimated_duration_minutes``
    when ``weight_by_duration`` is set. Ties go to the chain found first when
    walking start tasks, then their dependents, in task order.
    """
    if not tasks:
        return []

    dependents = build_dependents_map(tasks)
    weights = _task_weights(tasks, weight_by_duration)
    start_ids = [task.id for task in tasks if not task.dependencies]
    if not start_ids:
        start_ids = [task.id for task in tasks]

    best: dict[int, tuple[int, list[int]]] = {}
    longest_weight, longest = -1, []
    for start_id in start_ids:
        if start_id not in best:
            _longest_chains_from(start_id, dependents, weights, best)
        weight, chain = best[start_id]
        if weight > longest_weight:
            longest_weight, longest = weight, chain
    return list(longest)


def critical_path_length(
    tasks: Sequence[TaskLike], path: Sequence[int], weight_by_duration: bool = False
) -> int:
    weights = _task_weights(tasks, weight_by_duration)
    return sum(weights.get(task_id, 0) for task_id in path)
