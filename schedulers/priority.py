"""
Priority-score scheduler for assignable tasks.
"""
from typing import List, Dict, Optional
from config import SchedulerConfig
from models import Task
from schedulers.interfaces import Scheduler


class PriorityScheduler(Scheduler):
    """
    Orders tasks by a deterministic priority score.

    The score favours, in decreasing weight: the task's declared priority,
    the number of tasks waiting on it, its size, and having few dependencies.
    Equal scores keep their input order.
    """

    def __init__(
        self,
        tasks: List[Task],
        all_tasks: Optional[List[Task]] = None,
        config: Optional[SchedulerConfig] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            tasks: Tasks to order
            all_tasks: Full task set used to count dependents (defaults to ``tasks``)
            config: Score coefficients
        """
        self.tasks = list(tasks)
        self.config = config or SchedulerConfig()
        self.dependents = self._count_dependents(
            all_tasks if all_tasks is not None else tasks
        )

    @staticmethod
    def _count_dependents(tasks: List[Task]) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for task in tasks:
            for dep_id in set(task.dependencies):
                if dep_id != task.id:
                    counts[dep_id] = counts.get(dep_id, 0) + 1
        return counts

    def priority_weight(self, priority: str) -> int:
        return self.config.priority_weights.get(
            priority, self.config.default_priority_weight
        )

    def dependents_count(self, task: Task) -> int:
        """Number of other tasks listing this one as a dependency."""
        return self.dependents.get(task.id, 0)

    def priority_score(self, task: Task) -> int:
        """priority * 1000 + dependents * 100 + points * 10 - deps * 5 by default."""
        cfg = self.config
        return (
            self.priority_weight(task.priority) * cfg.priority_factor
            + self.dependents_count(task) * cfg.dependents_factor
            + task.story_points * cfg.points_factor
            - len(task.dependencies) * cfg.dependency_penalty
        )

