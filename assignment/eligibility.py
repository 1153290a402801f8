"""
Eligibility filtering: which tasks may enter an assignment run.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Optional
from models import Task, TaskStatus


@dataclass
class EligibilitySplit:
    """Partition of the candidate tasks of one run."""

    candidates: List[Task] = field(default_factory=list)
    assignable: List[Task] = field(default_factory=list)
    blocked: List[Task] = field(default_factory=list)


def index_tasks(tasks: List[Task]) -> Dict[str, Task]:
    """Map task ids to tasks. The first occurrence of a duplicate id wins."""
    index: Dict[str, Task] = {}
    for task in tasks:
        index.setdefault(task.id, task)
    return index


def dependencies_met(task: Task, task_index: Dict[str, Task]) -> bool:
    """
    Check that every dependency of a task is done.

    A dependency id that does not resolve to a known task counts as unmet.
    """
    for dep_id in task.dependencies:
        dep = task_index.get(dep_id)
        if dep is None or dep.status != TaskStatus.DONE:
            return False
    return True


def select_eligible(
    tasks: List[Task], all_tasks: Optional[List[Task]] = None
) -> EligibilitySplit:
    """
    Split the todo, unowned tasks into assignable and dependency-blocked.

    Args:
        tasks: Tasks to consider
        all_tasks: Tasks used to resolve dependency ids (defaults to ``tasks``)

    Returns:
        EligibilitySplit with input order preserved in every partition
    """
    task_index = index_tasks(all_tasks if all_tasks is not None else tasks)
    split = EligibilitySplit()

    for task in tasks:
        if not task.is_candidate():
            continue
        split.candidates.append(task)
        if dependencies_met(task, task_index):
            split.assignable.append(task)
        else:
            split.blocked.append(task)

    return split
