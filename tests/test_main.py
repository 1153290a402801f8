import json

from main import main, run_assignment, load_board
from config import AppConfig
from utils.generators import sample_board


def _write_board(path, tasks, users):
    path.write_text(
        json.dumps(
            {"tasks": [t.to_dict() for t in tasks], "users": [u.to_dict() for u in users]}
        )
    )


def test_run_assignment_with_comparison():
    tasks, users = sample_board()
    summary = run_assignment(tasks, users, AppConfig(), compare=True)

    assert len(summary["result"]["assignedTasks"]) == 2
    assert set(summary["metrics"]) == {"max_flow", "greedy"}
    assert "task_coverage" in summary["best_methods"]
    assert summary["greedy"]["message"].startswith("Task assignment completed")


def test_cli_writes_summary(tmp_path):
    board = tmp_path / "board.json"
    tasks, users = sample_board()
    _write_board(board, tasks, users)
    out = tmp_path / "summary.json"

    code = main(["--input", str(board), "--output", str(out), "--log-level", "WARNING"])

    # t3, t6, t7 and t8 stay unassigned on the sample board
    assert code == 1
    summary = json.loads(out.read_text())
    assert {a["taskId"] for a in summary["result"]["assignedTasks"]} == {"t1", "t4"}
    assert "max_flow" in summary["metrics"]


def test_cli_full_success(tmp_path):
    board = tmp_path / "board.json"
    board.write_text(
        json.dumps(
            {
                "tasks": [{"id": "t1", "storyPoints": 2, "requiredSkills": ["go"]}],
                "users": [{"id": "u1", "skills": ["go"], "capacity": 5}],
            }
        )
    )
    assert main(["--input", str(board), "--output", str(tmp_path / "o.json")]) == 0


def test_cli_bad_board(tmp_path):
    board = tmp_path / "board.json"
    board.write_text(json.dumps({"tasks": [{"id": "t1"}], "users": []}))
    assert main(["--input", str(board)]) == 2
    assert main(["--input", str(tmp_path / "missing.json")]) == 2


def test_cli_generated_board(tmp_path):
    out = tmp_path / "summary.json"
    code = main(["--generate", "12", "3", "--compare", "--output", str(out)])
    assert code in (0, 1)
    assert "greedy" in json.loads(out.read_text())


def test_load_board_roundtrip(tmp_path):
    board = tmp_path / "board.json"
    tasks, users = sample_board()
    _write_board(board, tasks, users)
    loaded_tasks, loaded_users = load_board(str(board))
    assert [t.to_dict() for t in loaded_tasks] == [t.to_dict() for t in tasks]
    assert [u.to_dict() for u in loaded_users] == [u.to_dict() for u in users]
