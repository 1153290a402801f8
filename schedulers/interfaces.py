"""
Interfaces for schedulers.
"""
from abc import ABC, abstractmethod
from typing import List
from models import Task
from utils.logger import logger


class Scheduler(ABC):
    """
    Base scheduler: orders ``self.tasks`` by a per-task score.

    Subclasses only supply ``priority_score``; higher scores come first and
    equal scores keep their input order.
    """

    tasks: List[Task]

    @abstractmethod
    def priority_score(self, task: Task) -> int:
        """Score one task; higher is scheduled earlier."""

    def schedule(self) -> List[Task]:
        """Return the tasks sorted by descending score (stable)."""
        scores = {id(t): self.priority_score(t) for t in self.tasks}
        ordered = sorted(self.tasks, key=lambda t: -scores[id(t)])
        logger.debug(
            f"{type(self).__name__} order: "
            + ", ".join(f"{t.id}={scores[id(t)]}" for t in ordered)
        )
        return ordered
