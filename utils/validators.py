"""
Validation utilities for tasks, dependencies and assignment results.
"""
import networkx as nx
from typing import List, Dict, Set
from models import Task, User, TaskStatus, AssignmentResult
from utils.logger import logger


def build_dependency_graph(tasks: List[Task]) -> nx.DiGraph:
    """Directed graph with an edge dependency -> dependent for every link."""
    graph = nx.DiGraph()
    for task in tasks:
        graph.add_node(task.id)
        for dep in task.dependencies:
            graph.add_edge(dep, task.id)
    return graph


def validate_tasks(tasks: List[Task]) -> bool:
    """Validate tasks for circular dependencies."""
    graph = build_dependency_graph(tasks)

    # Check if the graph is a DAG (Directed Acyclic Graph)
    if not nx.is_directed_acyclic_graph(graph):
        cycle = nx.find_cycle(graph)
        logger.error(f"Tasks have circular dependencies: {cycle}")
        return False

    return True


def would_create_cycle(task_id: str, dependency_id: str, tasks: List[Task]) -> bool:
    """
    Check whether making ``task_id`` depend on ``dependency_id`` closes a cycle.

    Walks the dependency chain of ``dependency_id`` with an explicit stack and
    visited set; a cycle exists if the walk reaches ``task_id``.
    """
    if task_id == dependency_id:
        return True

    deps_by_id: Dict[str, List[str]] = {t.id: t.dependencies for t in tasks}
    visited: Set[str] = set()
    stack = [dependency_id]

    while stack:
        current = stack.pop()
        if current == task_id:
            return True
        if current in visited:
            continue
        visited.add(current)
        stack.extend(d for d in deps_by_id.get(current, []) if d not in visited)

    return False


def validate_assignments(
    tasks: List[Task], users: List[User], result: AssignmentResult
) -> bool:
    """
    Validate an assignment result against the pre-run snapshot.

    Checks:
    1. Every pair names a known task and user
    2. No task appears in more than one pair
    3. The user has every skill the task requires
    4. No user's committed points exceed their spare capacity
    5. Every assigned task had all dependencies done

    Args:
        tasks: Task snapshot the result was computed from
        users: User snapshot the result was computed from
        result: The result to check

    Returns:
        bool: True if the result is valid, False otherwise
    """
    task_map = {task.id: task for task in tasks}
    user_map = {user.id: user for user in users}

    workloads = {user.id: 0 for user in users}
    seen_tasks = set()

    for pair in result.assigned_tasks:
        task = task_map.get(pair.task_id)
        user = user_map.get(pair.user_id)

        if task is None:
            logger.error(f"Task {pair.task_id} not found in tasks list.")
            return False

        if user is None:
            logger.error(f"User {pair.user_id} not found in users list.")
            return False

        if pair.task_id in seen_tasks:
            logger.error(f"Task {pair.task_id} is assigned more than once.")
            return False
        seen_tasks.add(pair.task_id)

        if not user.has_required_skills(task):
            logger.error(
                f"User {user.id} lacks required skills for task {task.id}. "
                f"User skills: {sorted(user.skills)}, "
                f"Task requires: {sorted(task.required_skills)}"
            )
            return False

        workloads[user.id] += task.story_points
        if user.current_load + workloads[user.id] > user.capacity:
            logger.error(
                f"User {user.id} is overloaded. Load: {user.current_load} + "
                f"{workloads[user.id]} points, Capacity: {user.capacity}."
            )
            return False

        for dep_id in task.dependencies:
            dep = task_map.get(dep_id)
            if dep is None or dep.status != TaskStatus.DONE:
                logger.error(
                    f"Task {task.id} depends on task {dep_id} which is not done."
                )
                return False

    return True
