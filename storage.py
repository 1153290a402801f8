"""
Board repository: where the boundary layer reads and writes tasks and users.

The assignment engine never touches a repository; only callers do.
"""
import threading
from abc import ABC, abstractmethod
from typing import List, Optional
from models import Task, User, copy_task, copy_user
from utils.generators import sample_board


class BoardRepository(ABC):
    """Storage interface for the task board."""

    @abstractmethod
    def list_tasks(self) -> List[Task]:
        raise NotImplementedError

    @abstractmethod
    def get_task(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    @abstractmethod
    def upsert_task(self, task: Task) -> Task:
        raise NotImplementedError

    @abstractmethod
    def list_users(self) -> List[User]:
        raise NotImplementedError

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def upsert_user(self, user: User) -> User:
        raise NotImplementedError


class InMemoryBoardRepository(BoardRepository):
    """
    Process-local repository. Reads hand out copies so callers can never
    mutate the stored records behind the lock.
    """

    def __init__(
        self,
        tasks: Optional[List[Task]] = None,
        users: Optional[List[User]] = None,
    ):
        self.lock = threading.RLock()
        self._tasks = {t.id: copy_task(t) for t in tasks or []}
        self._users = {u.id: copy_user(u) for u in users or []}

    @classmethod
    def with_sample_board(cls) -> "InMemoryBoardRepository":
        tasks, users = sample_board()
        return cls(tasks, users)

    def list_tasks(self) -> List[Task]:
        with self.lock:
            return [copy_task(t) for t in self._tasks.values()]

    def get_task(self, task_id: str) -> Optional[Task]:
        with self.lock:
            task = self._tasks.get(task_id)
            return copy_task(task) if task else None

    def upsert_task(self, task: Task) -> Task:
        with self.lock:
            self._tasks[task.id] = copy_task(task)
            return copy_task(task)

    def list_users(self) -> List[User]:
        with self.lock:
            return [copy_user(u) for u in self._users.values()]

    def get_user(self, user_id: str) -> Optional[User]:
        with self.lock:
            user = self._users.get(user_id)
            return copy_user(user) if user else None

    def upsert_user(self, user: User) -> User:
        with self.lock:
            self._users[user.id] = copy_user(user)
            return copy_user(user)
