import dataclasses

import pytest

from models import (
    Assignment,
    AssignmentResult,
    Task,
    TaskStatus,
    User,
    copy_task,
    copy_user,
)
from tests.factories import make_task, make_user


class TestTaskModel:
    def test_from_dict_reads_wire_keys(self):
        task = Task.from_dict(
            {
                "id": "t1",
                "title": "Auth",
                "status": "to-do",
                "priority": "high",
                "storyPoints": 8,
                "requiredSkills": ["backend", "security"],
                "dependencies": ["t0"],
            }
        )
        assert task.status == TaskStatus.TODO
        assert task.story_points == 8
        assert task.required_skills == {"backend", "security"}
        assert task.dependencies == ["t0"]
        assert task.assignee_id is None
        assert task.is_candidate()

    def test_to_dict_omits_missing_assignee(self):
        data = make_task("t1", skills=["b", "a"], points=3).to_dict()
        assert "assigneeId" not in data
        assert data["requiredSkills"] == ["a", "b"]
        assert data["storyPoints"] == 3

    def test_to_dict_roundtrip_keeps_assignee(self):
        task = make_task("t2", status=TaskStatus.IN_PROGRESS, assignee="u1")
        again = Task.from_dict(task.to_dict())
        assert again == task
        assert not again.is_candidate()

    def test_missing_points_rejected(self):
        with pytest.raises(ValueError, match="storyPoints"):
            Task.from_dict({"id": "t1"})

    def test_boolean_points_rejected(self):
        with pytest.raises(ValueError):
            Task.from_dict({"id": "t1", "storyPoints": True})

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError, match="status"):
            Task.from_dict({"id": "t1", "storyPoints": 1, "status": "blocked"})


class TestUserModel:
    def test_predicates(self):
        user = make_user("u1", skills=["backend", "api"], capacity=10, load=4)
        assert user.spare_capacity() == 6
        assert user.has_required_skills(make_task("t1", skills=["backend"]))
        assert not user.has_required_skills(make_task("t2", skills=["backend", "security"]))
        assert user.has_capacity_for(make_task("t3", points=6))
        assert not user.has_capacity_for(make_task("t4", points=7))

    def test_task_without_skills_fits_anyone(self):
        assert make_user("u1").has_required_skills(make_task("t1"))

    def test_from_dict_defaults_load(self):
        user = User.from_dict({"id": "u1", "skills": ["x"], "capacity": 5})
        assert user.current_load == 0
        assert user.to_dict()["currentLoad"] == 0

    def test_missing_capacity_rejected(self):
        with pytest.raises(ValueError, match="capacity"):
            User.from_dict({"id": "u1"})


class TestAssignmentResult:
    def test_to_dict_shape(self):
        result = AssignmentResult(
            success=False,
            assigned_tasks=[Assignment("t1", "u1")],
            unassigned_tasks=["t2"],
            message="done",
        )
        assert result.to_dict() == {
            "success": False,
            "assignedTasks": [{"taskId": "t1", "userId": "u1"}],
            "unassignedTasks": ["t2"],
            "message": "done",
        }
        assert AssignmentResult.from_dict(result.to_dict()) == result
        assert result.as_mapping() == {"t1": "u1"}

    def test_result_is_immutable(self):
        result = AssignmentResult(success=True)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.success = False


def test_copies_detach_collections():
    task = make_task("t1", skills=["a"], deps=["t0"])
    user = make_user("u1", skills=["a"])
    task_copy = copy_task(task, status=TaskStatus.DONE)
    user_copy = copy_user(user, current_load=3)

    task_copy.required_skills.add("b")
    task_copy.dependencies.append("t9")
    user_copy.skills.add("b")

    assert task.required_skills == {"a"}
    assert task.dependencies == ["t0"]
    assert task.status == TaskStatus.TODO
    assert user.skills == {"a"}
    assert user.current_load == 0
