from __future__ import annotations

from typing import Sequence

from .graph import TaskLike, find_missing_dependencies
from .models import CriticalPath, GraphAnalysis
from .ordering import critical_path_length, get_critical_path, sort_topologically
from .queries import get_blocked_tasks
from .settings import DEFAULT_COMPLETE_STATUS, MissingDependencyPolicy


def build_critical_path(tasks: Sequence[TaskLike], weight_by_duration: bool = False) -> CriticalPath:
    task_ids = get_critical_path(tasks, weight_by_duration=weight_by_duration)
    return CriticalPath(
        task_ids=task_ids,
        length=critical_path_length(tasks, task_ids, weight_by_duration=weight_by_duration),
        weight_by_duration=weight_by_duration,
    )


def analyze_graph(
    tasks: Sequence[TaskLike],
    complete_status: str = DEFAULT_COMPLETE_STATUS,
    missing_policy: MissingDependencyPolicy = MissingDependencyPolicy.IGNORE,
    weight_by_duration: bool = False,
) -> GraphAnalysis:
    """Derive every dashboard view of the graph from one snapshot."""
    topological = sort_topologically(tasks)
    return GraphAnalysis(
        task_count=len(tasks),
        cycles=topological.cycles,
        topological_order=topological.order,
        critical_path=build_critical_path(tasks, weight_by_duration=weight_by_duration),
        blocked_task_ids=get_blocked_tasks(tasks, complete_status, missing_policy),
        missing_dependencies=find_missing_dependencies(tasks),
    )
