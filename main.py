"""
Command-line entry point for the task assignment engine.
"""
import os
import argparse
import json
import logging
from typing import List, Dict, Optional, Tuple, Any

from models import Task, User, AssignmentResult
from config import AppConfig
from utils.logger import logger, setup_logger
from utils.generators import DataGenerator, sample_board
from utils.validators import validate_tasks, validate_assignments
from assignment.max_flow import MaxFlowAssigner
from assignment.greedy import GreedyAssigner
from analysis.metrics import compute_detailed_metrics, compare_assignment_methods


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Path to a JSON configuration file with flat keys

    Returns:
        AppConfig: Application configuration
    """
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, "r") as f:
                config_dict = json.load(f)
            return AppConfig.from_dict(config_dict)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")
            logger.info("Using default configuration.")
            return AppConfig()
    if config_path:
        logger.warning(f"Config file {config_path} not found; using defaults.")
    return AppConfig()


def load_board(path: str) -> Tuple[List[Task], List[User]]:
    """
    Read a board snapshot ``{"tasks": [...], "users": [...]}`` from JSON.

    Raises:
        ValueError: if the file does not describe a valid board
    """
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Board file must contain a JSON object")
    tasks = [Task.from_dict(t) for t in data.get("tasks") or []]
    users = [User.from_dict(u) for u in data.get("users") or []]
    return tasks, users


def run_assignment(
    tasks: List[Task],
    users: List[User],
    config: AppConfig,
    compare: bool = False,
) -> Dict[str, Any]:
    """
    Run the max-flow engine on a snapshot, optionally against the greedy baseline.

    Args:
        tasks: Task snapshot
        users: User snapshot
        config: Application configuration
        compare: Also run the greedy baseline and compare metrics

    Returns:
        Dict[str, Any]: Serializable run summary
    """
    if not validate_tasks(tasks):
        logger.warning("Dependency cycle found; tasks on it will stay blocked.")

    result = MaxFlowAssigner(config.engine, config.scheduler).assign(tasks, users)
    if not validate_assignments(tasks, users, result):
        logger.error("Max-flow result failed validation.")

    summary: Dict[str, Any] = {
        "result": result.to_dict(),
        "metrics": {
            "max_flow": compute_detailed_metrics(tasks, users, result, config.scheduler)
        },
    }

    if compare:
        greedy = GreedyAssigner(config.scheduler).assign(tasks, users)
        summary["greedy"] = greedy.to_dict()
        summary["metrics"]["greedy"] = compute_detailed_metrics(
            tasks, users, greedy, config.scheduler
        )
        summary["best_methods"] = compare_assignment_methods(summary["metrics"])
        logger.info(f"Best methods by metric: {summary['best_methods']}")

    return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Task Assignment Engine")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", help="Board JSON file with tasks and users")
    source.add_argument(
        "--generate",
        nargs=2,
        type=int,
        metavar=("TASKS", "USERS"),
        help="Generate a random board of this size",
    )
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument(
        "--compare", action="store_true", help="Compare with the greedy baseline"
    )
    parser.add_argument("--output", help="Write the run summary as JSON here")
    parser.add_argument("--plot", help="Write the assignment network image here")
    parser.add_argument("--excel", help="Write an Excel report here")
    parser.add_argument(
        "--serve", action="store_true", help="Serve the HTTP API instead"
    )
    parser.add_argument("--host", help="HTTP host (overrides config)")
    parser.add_argument("--port", type=int, help="HTTP port (overrides config)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    setup_logger(level=getattr(logging, args.log_level or config.log_level))

    if args.serve:
        import uvicorn
        from server import create_app

        uvicorn.run(
            create_app(config=config),
            host=args.host or config.server.host,
            port=args.port or config.server.port,
        )
        return 0

    if args.input:
        try:
            tasks, users = load_board(args.input)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read board from {args.input}: {e}")
            return 2
    elif args.generate:
        tasks, users = DataGenerator(seed=config.seed).generate_scenario(*args.generate)
    else:
        tasks, users = sample_board()

    summary = run_assignment(tasks, users, config, compare=args.compare)

    if args.output:
        with open(args.output, "w") as f:
            json.dump(summary, f, indent=2)
        logger.info(f"Run summary saved to {args.output}")
    else:
        print(json.dumps(summary["result"], indent=2))

    if args.plot or args.excel:
        from visualization import draw_assignment_network, export_to_excel

        result = AssignmentResult.from_dict(summary["result"])
        if args.plot:
            draw_assignment_network(tasks, users, result, args.plot)
        if args.excel:
            export_to_excel(
                args.excel, tasks, users, result, summary["metrics"]["max_flow"]
            )

    return 0 if summary["result"]["success"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
