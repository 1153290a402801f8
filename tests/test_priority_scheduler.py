from config import SchedulerConfig
from models import TaskStatus
from schedulers.priority import PriorityScheduler
from tests.factories import make_task


def test_score_formula():
    root = make_task("root", priority="high", points=5, status=TaskStatus.DONE)
    child = make_task("child", priority="medium", points=8, deps=["root"])
    other = make_task("other", priority="low", points=3, deps=["root", "child"])
    scheduler = PriorityScheduler([child, other], [root, child, other])

    # 3*1000 + 2 dependents*100 + 5*10 - 0
    assert scheduler.priority_score(root) == 3250
    # 2*1000 + 1 dependent*100 + 8*10 - 1*5
    assert scheduler.priority_score(child) == 2175
    # 1*1000 + 0 + 3*10 - 2*5
    assert scheduler.priority_score(other) == 1020


def test_unknown_priority_weighs_like_low():
    scheduler = PriorityScheduler([])
    assert scheduler.priority_weight("urgent") == 1
    assert scheduler.priority_weight("low") == 1
    assert scheduler.priority_weight("high") == 3


def test_sorted_descending_with_stable_ties():
    tasks = [
        make_task("a", priority="low", points=5),
        make_task("b", priority="medium", points=5),
        make_task("c", priority="medium", points=5),
        make_task("d", priority="high", points=1),
        make_task("e", priority="low", points=5),
    ]
    ordered = PriorityScheduler(tasks).schedule()
    assert [t.id for t in ordered] == ["d", "b", "c", "a", "e"]


def test_dependents_counted_over_full_snapshot():
    blocker = make_task("blocker", points=1)
    waiting = [make_task(f"w{i}", deps=["blocker"]) for i in range(3)]
    plain = make_task("plain", points=20)
    scheduler = PriorityScheduler([plain, blocker], [blocker, plain] + waiting)

    assert scheduler.dependents_count(blocker) == 3
    # 2000 + 300 + 10 beats 2000 + 200
    assert [t.id for t in scheduler.schedule()] == ["blocker", "plain"]


def test_repeated_dependency_counts_one_dependent():
    blocker = make_task("blocker")
    dup = make_task("dup", deps=["blocker", "blocker"])
    scheduler = PriorityScheduler([blocker], [blocker, dup])
    assert scheduler.dependents_count(blocker) == 1


def test_custom_coefficients():
    config = SchedulerConfig(priority_factor=0, points_factor=1)
    tasks = [make_task("small", priority="high", points=1), make_task("big", points=9)]
    ordered = PriorityScheduler(tasks, config=config).schedule()
    assert [t.id for t in ordered] == ["big", "small"]


def test_input_list_not_reordered():
    tasks = [make_task("a", priority="low"), make_task("b", priority="high")]
    PriorityScheduler(tasks).schedule()
    assert [t.id for t in tasks] == ["a", "b"]
