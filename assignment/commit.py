"""
Applying an assignment result to a task/user snapshot.
"""
from typing import List, Tuple
from models import Task, User, TaskStatus, AssignmentResult, copy_task, copy_user
from utils.logger import logger


def apply_assignments(
    tasks: List[Task], users: List[User], result: AssignmentResult
) -> Tuple[List[Task], List[User]]:
    """
    Return new task and user lists with the result's pairs committed.

    Assigned tasks get their assignee and move to in-progress; each user's
    current load grows by the points of the tasks they received. The inputs
    are left untouched.

    Args:
        tasks: Task snapshot the result was computed from
        users: User snapshot the result was computed from
        result: Result of an assignment run

    Returns:
        Tuple of (updated tasks, updated users)
    """
    mapping = result.as_mapping()
    points = {t.id: t.story_points for t in tasks}

    added_load = {}
    for task_id, user_id in mapping.items():
        if task_id not in points:
            logger.warning(f"Result mentions unknown task {task_id}; skipped.")
            continue
        added_load[user_id] = added_load.get(user_id, 0) + points[task_id]

    new_tasks = [
        copy_task(t, assignee_id=mapping[t.id], status=TaskStatus.IN_PROGRESS)
        if t.id in mapping
        else copy_task(t)
        for t in tasks
    ]
    new_users = [
        copy_user(u, current_load=u.current_load + added_load.get(u.id, 0))
        for u in users
    ]
    return new_tasks, new_users
