"""
Interfaces for task assignment models.
"""
from abc import ABC, abstractmethod
from typing import List
from models import Task, User, AssignmentResult


class AssignmentModel(ABC):
    """Base interface for task assignment models."""

    @abstractmethod
    def assign(self, tasks: List[Task], users: List[User]) -> AssignmentResult:
        """
        Assign tasks to users.

        Args:
            tasks: Full task snapshot, including done and in-progress tasks
            users: Users available for assignment

        Returns:
            AssignmentResult describing the pairs made and the tasks left over
        """
        pass
