"""
FastAPI boundary for the task board and the assignment engine.

The app owns no data of its own: every handler goes through the
``BoardRepository`` it was created with.
"""
import threading
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, field_validator

from assignment.commit import apply_assignments
from assignment.max_flow import MaxFlowAssigner
from config import AppConfig
from models import Task, User, TaskStatus
from storage import BoardRepository, InMemoryBoardRepository
from utils.logger import logger
from utils.validators import would_create_cycle


# ---------------------------------------------------------------------------
# Pydantic request models
# ---------------------------------------------------------------------------

class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TaskPayload(_WireModel):
    id: str
    title: str = ""
    description: str = ""
    status: str = TaskStatus.TODO
    priority: str = "medium"
    story_points: int = Field(alias="storyPoints", ge=1)
    assignee_id: Optional[str] = Field(default=None, alias="assigneeId")
    required_skills: List[str] = Field(default_factory=list, alias="requiredSkills")
    dependencies: List[str] = Field(default_factory=list)

    @field_validator("status")
    @classmethod
    def _status(cls, value: str) -> str:
        return TaskStatus.normalize(value)

    def to_task(self) -> Task:
        return Task.from_dict(self.model_dump(by_alias=True))


class UserPayload(_WireModel):
    id: str
    name: str = ""
    email: str = ""
    role: str = ""
    skills: List[str] = Field(default_factory=list)
    capacity: int = Field(ge=0)
    current_load: int = Field(default=0, alias="currentLoad", ge=0)
    avatar_url: str = Field(default="", alias="avatarUrl")

    def to_user(self) -> User:
        return User.from_dict(self.model_dump(by_alias=True))


class AssignTasksRequest(_WireModel):
    tasks: List[TaskPayload]
    users: List[UserPayload]


class CreateTaskRequest(_WireModel):
    title: str = "New Task"
    description: str = ""
    status: str = TaskStatus.TODO
    priority: str = "medium"
    story_points: int = Field(default=1, alias="storyPoints", ge=1)
    assignee_id: Optional[str] = Field(default=None, alias="assigneeId")
    required_skills: List[str] = Field(default_factory=list, alias="requiredSkills")
    dependencies: List[str] = Field(default_factory=list)

    @field_validator("status")
    @classmethod
    def _status(cls, value: str) -> str:
        return TaskStatus.normalize(value)


class UpdateTaskRequest(_WireModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    story_points: Optional[int] = Field(default=None, alias="storyPoints", ge=1)
    assignee_id: Optional[str] = Field(default=None, alias="assigneeId")
    required_skills: Optional[List[str]] = Field(default=None, alias="requiredSkills")

    @field_validator("status")
    @classmethod
    def _status(cls, value: Optional[str]) -> Optional[str]:
        return TaskStatus.normalize(value) if value is not None else None


class DependenciesRequest(_WireModel):
    dependencies: List[str]


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def _next_task_id(tasks: List[Task]) -> str:
    taken = {t.id for t in tasks}
    n = len(tasks) + 1
    while f"t{n}" in taken:
        n += 1
    return f"t{n}"


def create_app(
    repository: Optional[BoardRepository] = None,
    config: Optional[AppConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        repository: Board storage; defaults to an in-memory sample board.
        config: Application configuration.

    Returns:
        Configured FastAPI app.
    """
    config = config or AppConfig()
    repo = repository or InMemoryBoardRepository.with_sample_board()
    engine = MaxFlowAssigner(config.engine, config.scheduler)
    # Serialises read-solve-write cycles against the repository
    commit_lock = threading.Lock()

    app = FastAPI(
        title="Task Assignment Engine",
        description="Max-flow task assignment for the task board",
        version="1.0.0",
    )
    app.state.repository = repo

    if config.server.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/api/tasks")
    def list_tasks() -> List[Dict[str, Any]]:
        return [t.to_dict() for t in repo.list_tasks()]

    @app.get("/api/users")
    def list_users() -> List[Dict[str, Any]]:
        return [u.to_dict() for u in repo.list_users()]

    @app.post("/api/tasks", status_code=201)
    def create_task(body: CreateTaskRequest) -> Dict[str, Any]:
        with commit_lock:
            data = body.model_dump(by_alias=True)
            data["id"] = _next_task_id(repo.list_tasks())
            task = repo.upsert_task(Task.from_dict(data))
        logger.info(f"Created task {task.id}")
        return task.to_dict()

    @app.put("/api/tasks/{task_id}")
    def update_task(task_id: str, body: UpdateTaskRequest) -> Dict[str, Any]:
        with commit_lock:
            existing = repo.get_task(task_id)
            if existing is None:
                raise HTTPException(
                    status_code=404, detail=f"Task with ID {task_id} not found"
                )
            data = existing.to_dict()
            for key, value in body.model_dump(by_alias=True, exclude_unset=True).items():
                # An explicit null only makes sense for clearing the assignee
                if value is not None or key == "assigneeId":
                    data[key] = value
            task = repo.upsert_task(Task.from_dict(data))
        return task.to_dict()

    @app.put("/api/tasks/{task_id}/dependencies")
    def set_dependencies(task_id: str, body: DependenciesRequest) -> Dict[str, Any]:
        with commit_lock:
            tasks = repo.list_tasks()
            known = {t.id: t for t in tasks}
            if task_id not in known:
                raise HTTPException(
                    status_code=404, detail=f"Task with ID {task_id} not found"
                )
            for dep_id in body.dependencies:
                if dep_id not in known:
                    raise HTTPException(
                        status_code=400, detail=f"Unknown dependency {dep_id}"
                    )
                if would_create_cycle(task_id, dep_id, tasks):
                    raise HTTPException(
                        status_code=400,
                        detail=f"Depending on {dep_id} would create a cycle",
                    )
            task = known[task_id]
            task.dependencies = list(dict.fromkeys(body.dependencies))
            task = repo.upsert_task(task)
        return task.to_dict()

    @app.post("/api/assign-tasks")
    def assign_tasks(body: AssignTasksRequest) -> Dict[str, Any]:
        tasks = [p.to_task() for p in body.tasks]
        users = [p.to_user() for p in body.users]
        return engine.assign(tasks, users).to_dict()

    @app.post("/api/assign-tasks/commit")
    def commit_assignments() -> Dict[str, Any]:
        with commit_lock:
            tasks = repo.list_tasks()
            users = repo.list_users()
            result = engine.assign(tasks, users)
            new_tasks, new_users = apply_assignments(tasks, users, result)

            assigned_ids = set(result.as_mapping())
            for task in new_tasks:
                if task.id in assigned_ids:
                    repo.upsert_task(task)
            for user in new_users:
                repo.upsert_user(user)

        logger.info(f"Committed {len(result.assigned_tasks)} assignments.")
        return result.to_dict()

    return app
