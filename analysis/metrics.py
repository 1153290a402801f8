"""
Metrics calculation and analysis for assignment results.
"""
import numpy as np
from typing import List, Dict, Optional
from config import SchedulerConfig
from models import Task, User, AssignmentResult
from assignment.eligibility import select_eligible


def compute_detailed_metrics(
    tasks: List[Task],
    users: List[User],
    result: AssignmentResult,
    scheduler_config: Optional[SchedulerConfig] = None,
) -> Dict[str, float]:
    """
    Compute performance metrics for an assignment result.

    Args:
        tasks: Task snapshot the result was computed from
        users: User snapshot the result was computed from
        result: The assignment result
        scheduler_config: Supplies the priority weights

    Returns:
        Dict of metric names to metric values
    """
    scheduler_config = scheduler_config or SchedulerConfig()
    task_map = {task.id: task for task in tasks}
    mapping = result.as_mapping()

    def weight(task: Task) -> int:
        return scheduler_config.priority_weights.get(
            task.priority, scheduler_config.default_priority_weight
        )

    # 1. Task Coverage (Higher is better)
    # Share of the candidate tasks that received a user
    candidates = select_eligible(tasks).candidates
    task_coverage = (
        len([t for t in candidates if t.id in mapping]) / len(candidates) * 100
        if candidates
        else 0.0
    )

    # 2. Resource Utilization (Higher is better)
    # Load after the run over total capacity
    added = {user.id: 0 for user in users}
    for task_id, user_id in mapping.items():
        if task_id in task_map and user_id in added:
            added[user_id] += task_map[task_id].story_points

    total_capacity = sum(user.capacity for user in users)
    total_load = sum(user.current_load + added[user.id] for user in users)
    resource_utilization = (
        total_load / total_capacity * 100 if total_capacity > 0 else 0.0
    )

    # 3. Workload Balance Ratio (Lower is better)
    # Std deviation of per-user load ratio over its mean
    ratios = np.array(
        [
            (user.current_load + added[user.id]) / user.capacity
            for user in users
            if user.capacity > 0
        ],
        dtype=float,
    )
    mean_ratio = float(np.mean(ratios)) if ratios.size else 0.0
    workload_balance_ratio = (
        float(np.std(ratios)) / mean_ratio if mean_ratio != 0 else 0.0
    )

    # 4. Assigned Priority Ratio (Higher is better)
    total_priority = sum(weight(t) for t in candidates)
    assigned_priority = sum(weight(t) for t in candidates if t.id in mapping)
    assigned_priority_ratio = (
        assigned_priority / total_priority * 100 if total_priority else 0.0
    )

    return {
        "task_coverage": task_coverage,
        "resource_utilization": resource_utilization,
        "workload_balance_ratio": workload_balance_ratio,
        "assigned_priority_ratio": assigned_priority_ratio,
        "assigned_points": float(sum(added.values())),
    }


def compare_assignment_methods(
    method_metrics: Dict[str, Dict[str, float]]
) -> Dict[str, str]:
    """
    Compare assignment methods based on multiple metrics.

    Args:
        method_metrics: Dictionary mapping method names to metric dictionaries

    Returns:
        Dict mapping metric names to best method names
    """
    if not method_metrics:
        return {}

    best_methods = {}
    all_metrics = set()

    for metrics in method_metrics.values():
        all_metrics.update(metrics.keys())

    for metric in sorted(all_metrics):
        best_method = None
        best_value = None

        for method, metrics in method_metrics.items():
            if metric not in metrics:
                continue

            value = metrics[metric]

            # For workload_balance_ratio, lower is better
            if metric == "workload_balance_ratio":
                if best_value is None or value < best_value:
                    best_value = value
                    best_method = method
            else:
                if best_value is None or value > best_value:
                    best_value = value
                    best_method = method

        if best_method:
            best_methods[metric] = best_method

    return best_methods
