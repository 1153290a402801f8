from assignment.greedy import GreedyAssigner
from assignment.max_flow import ALL_BLOCKED_MESSAGE, MaxFlowAssigner
from models import Assignment, TaskStatus
from utils.generators import DataGenerator
from utils.validators import validate_assignments
from tests.factories import make_task, make_user


def test_first_fit_can_miss_a_matching_max_flow_finds():
    # "wide" outranks "narrow" and grabs the only user who can do "narrow"
    tasks = [
        make_task("wide", skills=["x"], priority="high"),
        make_task("narrow", skills=["x", "y"]),
    ]
    users = [
        make_user("both", skills=["x", "y"], capacity=1),
        make_user("xonly", skills=["x"], capacity=1),
    ]
    greedy = GreedyAssigner().assign(tasks, users)
    optimal = MaxFlowAssigner().assign(tasks, users)

    assert greedy.assigned_tasks == [Assignment("wide", "both")]
    assert greedy.unassigned_tasks == ["narrow"]
    assert not greedy.success
    assert optimal.success
    assert optimal.as_mapping() == {"wide": "xonly", "narrow": "both"}


def test_running_load_is_respected():
    tasks = [make_task(f"t{i}", points=4) for i in range(3)]
    users = [make_user("u1", capacity=10, load=1)]
    result = GreedyAssigner().assign(tasks, users)
    assert [a.task_id for a in result.assigned_tasks] == ["t0", "t1"]
    assert result.unassigned_tasks == ["t2"]
    assert validate_assignments(tasks, users, result)


def test_blocked_only_board():
    tasks = [make_task("t1", status=TaskStatus.IN_PROGRESS), make_task("t2", deps=["t1"])]
    result = GreedyAssigner().assign(tasks, [make_user("u1")])
    assert result.message == ALL_BLOCKED_MESSAGE
    assert result.unassigned_tasks == ["t2"]


def test_generated_boards_stay_safe():
    for seed in range(5):
        tasks, users = DataGenerator(seed=seed).generate_scenario(20, 5)
        result = GreedyAssigner().assign(tasks, users)
        assert validate_assignments(tasks, users, result)
