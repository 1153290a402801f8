"""
Core data models for the task assignment engine.
"""
from dataclasses import dataclass, field, replace
from typing import Set, List, Optional, Dict, Any


class TaskStatus:
    """Allowed task states on the board."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    ALL = (TODO, IN_PROGRESS, DONE)

    # Spellings used by the board front-end
    ALIASES = {"to-do": TODO, "in_progress": IN_PROGRESS}

    @classmethod
    def normalize(cls, value: str) -> str:
        """Map a wire spelling onto one of the canonical states."""
        status = cls.ALIASES.get(value, value)
        if status not in cls.ALL:
            raise ValueError(f"Unknown task status: {value!r}")
        return status


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    if key not in data or data[key] is None:
        raise ValueError(f"{kind} is missing required field {key!r}")
    return data[key]


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field {key!r} must be an integer, got {value!r}")
    return value


@dataclass
class Task:
    """Task model representing a work item waiting for an assignee."""

    id: str
    title: str = ""
    description: str = ""
    status: str = TaskStatus.TODO
    priority: str = "medium"
    story_points: int = 1
    assignee_id: Optional[str] = None
    required_skills: Set[str] = field(default_factory=set)
    dependencies: List[str] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"Task({self.id}, status={self.status}, priority={self.priority}, "
            f"points={self.story_points}, skills={sorted(self.required_skills)}, "
            f"deps={self.dependencies})"
        )

    def is_candidate(self) -> bool:
        """A task can be scheduled only while it is todo and nobody owns it."""
        return self.status == TaskStatus.TODO and not self.assignee_id

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "storyPoints": self.story_points,
            "requiredSkills": sorted(self.required_skills),
            "dependencies": list(self.dependencies),
        }
        if self.assignee_id:
            data["assigneeId"] = self.assignee_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Build a task from its camelCase wire form."""
        return cls(
            id=str(_require(data, "id", "Task")),
            title=data.get("title") or "",
            description=data.get("description") or "",
            status=TaskStatus.normalize(data.get("status") or TaskStatus.TODO),
            priority=data.get("priority") or "medium",
            story_points=_as_int(_require(data, "storyPoints", "Task"), "storyPoints"),
            assignee_id=data.get("assigneeId") or None,
            required_skills=set(data.get("requiredSkills") or []),
            dependencies=list(data.get("dependencies") or []),
        )


@dataclass
class User:
    """User model representing a worker that can receive tasks."""

    id: str
    name: str = ""
    email: str = ""
    role: str = ""
    skills: Set[str] = field(default_factory=set)
    capacity: int = 0
    current_load: int = 0
    avatar_url: str = ""

    def __repr__(self) -> str:
        return (
            f"User({self.id}, skills={sorted(self.skills)}, "
            f"load={self.current_load}/{self.capacity})"
        )

    def spare_capacity(self) -> int:
        """Points the user can still take on."""
        return self.capacity - self.current_load

    def has_required_skills(self, task: Task) -> bool:
        """Check that the user holds every skill the task requires."""
        return task.required_skills.issubset(self.skills)

    def has_capacity_for(self, task: Task) -> bool:
        """Check the task fits in the user's spare capacity."""
        return self.spare_capacity() >= task.story_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "skills": sorted(self.skills),
            "capacity": self.capacity,
            "currentLoad": self.current_load,
            "avatarUrl": self.avatar_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Build a user from its camelCase wire form."""
        return cls(
            id=str(_require(data, "id", "User")),
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=data.get("role") or "",
            skills=set(data.get("skills") or []),
            capacity=_as_int(_require(data, "capacity", "User"), "capacity"),
            current_load=_as_int(data.get("currentLoad", 0), "currentLoad"),
            avatar_url=data.get("avatarUrl") or "",
        )


@dataclass(frozen=True)
class Assignment:
    """A single task to user pairing."""

    task_id: str
    user_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"taskId": self.task_id, "userId": self.user_id}


@dataclass(frozen=True)
class AssignmentResult:
    """Outcome of one assignment run."""

    success: bool
    assigned_tasks: List[Assignment] = field(default_factory=list)
    unassigned_tasks: List[str] = field(default_factory=list)
    message: str = ""

    def as_mapping(self) -> Dict[str, str]:
        """Return a task id to user id dictionary."""
        return {a.task_id: a.user_id for a in self.assigned_tasks}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "assignedTasks": [a.to_dict() for a in self.assigned_tasks],
            "unassignedTasks": list(self.unassigned_tasks),
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssignmentResult":
        return cls(
            success=bool(data.get("success")),
            assigned_tasks=[
                Assignment(task_id=a["taskId"], user_id=a["userId"])
                for a in data.get("assignedTasks") or []
            ],
            unassigned_tasks=list(data.get("unassignedTasks") or []),
            message=data.get("message") or "",
        )


def copy_task(task: Task, **changes: Any) -> Task:
    """Return a copy of a task with its collections detached from the original."""
    changes.setdefault("required_skills", set(task.required_skills))
    changes.setdefault("dependencies", list(task.dependencies))
    return replace(task, **changes)


def copy_user(user: User, **changes: Any) -> User:
    """Return a copy of a user with its skill set detached from the original."""
    changes.setdefault("skills", set(user.skills))
    return replace(user, **changes)
