"""
Utility functions for generating tasks and users.
"""
import random
from typing import List, Dict, Optional, Tuple, Any
from faker import Faker
from models import Task, User, TaskStatus
from utils.logger import logger


DEFAULT_GENERATOR_CONFIG: Dict[str, Any] = {
    "skills": [
        "backend", "frontend", "react", "api", "database",
        "security", "devops", "testing", "design",
    ],
    "priorities": ["low", "medium", "high"],
    "story_points": [1, 2, 3, 5, 8, 13],
    "max_skills_per_task": 2,
    "user_skills_min": 2,
    "user_skills_max": 4,
    "user_capacity_min": 10,
    "user_capacity_max": 25,
    "done_ratio": 0.2,
    "in_progress_ratio": 0.1,
    "dependency_ratio": 0.3,
    "max_dependencies": 2,
}


class DataGenerator:
    """Generator for test data including tasks and users."""

    def __init__(self, seed: int = 42, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the generator with a specific seed and optional configuration.

        Args:
            seed: Random seed for reproducibility
            config: Optional overrides for DEFAULT_GENERATOR_CONFIG
        """
        self.seed = seed
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.rng = random.Random(seed)
        self.config = dict(DEFAULT_GENERATOR_CONFIG)
        if config:
            self.config.update(config)

    def generate_tasks(self, num_tasks: int) -> List[Task]:
        """
        Generate tasks whose dependencies only point at earlier tasks.

        Args:
            num_tasks: Number of tasks to generate

        Returns:
            List[Task]: Generated tasks, acyclic by construction
        """
        skills = self.config["skills"]
        tasks = []

        for i in range(num_tasks):
            roll = self.rng.random()
            if roll < self.config["done_ratio"]:
                status = TaskStatus.DONE
            elif roll < self.config["done_ratio"] + self.config["in_progress_ratio"]:
                status = TaskStatus.IN_PROGRESS
            else:
                status = TaskStatus.TODO

            dependencies = []
            if i > 0 and self.rng.random() < self.config["dependency_ratio"]:
                count = self.rng.randint(1, min(i, self.config["max_dependencies"]))
                dependencies = [
                    f"t{d + 1}" for d in sorted(self.rng.sample(range(i), count))
                ]

            task = Task(
                id=f"t{i + 1}",
                title=self.fake.catch_phrase(),
                description=self.fake.sentence(),
                status=status,
                priority=self.rng.choice(self.config["priorities"]),
                story_points=self.rng.choice(self.config["story_points"]),
                required_skills=set(
                    self.rng.sample(
                        skills, self.rng.randint(1, self.config["max_skills_per_task"])
                    )
                ),
                dependencies=dependencies,
            )
            tasks.append(task)
            logger.debug(f"Created task: {task}")

        logger.info(
            f"Generated {len(tasks)} tasks, "
            f"{sum(1 for t in tasks if t.dependencies)} with dependencies."
        )
        return tasks

    def generate_users(self, num_users: int) -> List[User]:
        """
        Generate users with a few skills each and some load already taken.

        Args:
            num_users: Number of users to generate

        Returns:
            List[User]: Generated users
        """
        skills = self.config["skills"]
        users = []

        for i in range(num_users):
            capacity = self.rng.randint(
                self.config["user_capacity_min"], self.config["user_capacity_max"]
            )
            user = User(
                id=f"u{i + 1}",
                name=self.fake.name(),
                email=self.fake.email(),
                role=self.fake.job(),
                skills=set(
                    self.rng.sample(
                        skills,
                        self.rng.randint(
                            self.config["user_skills_min"],
                            self.config["user_skills_max"],
                        ),
                    )
                ),
                capacity=capacity,
                current_load=self.rng.randint(0, capacity // 2),
            )
            users.append(user)
            logger.debug(f"Created user: {user}")

        logger.info(f"Generated {len(users)} users.")
        return users

    def generate_scenario(
        self, num_tasks: int, num_users: int
    ) -> Tuple[List[Task], List[User]]:
        """Generate both tasks and users in one call."""
        users = self.generate_users(num_users)
        tasks = self.generate_tasks(num_tasks)
        return tasks, users


def sample_board() -> Tuple[List[Task], List[User]]:
    """The demo board the front-end starts with."""
    tasks = [
        Task(
            id="t1",
            title="Implement user authentication",
            description="Add login and registration functionality with JWT",
            status=TaskStatus.TODO,
            priority="high",
            story_points=8,
            required_skills={"backend", "security"},
        ),
        Task(
            id="t2",
            title="Design dashboard UI",
            description="Create wireframes and mockups for the main dashboard",
            status=TaskStatus.IN_PROGRESS,
            priority="medium",
            story_points=5,
            assignee_id="u2",
            required_skills={"design", "frontend"},
        ),
        Task(
            id="t3",
            title="Implement task board component",
            description="Create a drag-and-drop task board",
            status=TaskStatus.TODO,
            priority="medium",
            story_points=13,
            required_skills={"frontend", "react"},
            dependencies=["t2"],
        ),
        Task(
            id="t4",
            title="Set up CI/CD pipeline",
            description="Configure automated testing and deployment",
            status=TaskStatus.TODO,
            priority="low",
            story_points=5,
            required_skills={"devops"},
        ),
        Task(
            id="t5",
            title="Implement API endpoints for tasks",
            description="Create REST API endpoints for CRUD operations on tasks",
            status=TaskStatus.DONE,
            priority="high",
            story_points=8,
            assignee_id="u1",
            required_skills={"backend", "api"},
        ),
        Task(
            id="t6",
            title="Write unit tests for backend",
            description="Increase test coverage for backend services",
            status=TaskStatus.TODO,
            priority="medium",
            story_points=5,
            required_skills={"testing", "backend"},
            dependencies=["t5"],
        ),
        Task(
            id="t7",
            title="Implement dependency visualization",
            description="Add visual indicators for task dependencies",
            status=TaskStatus.TODO,
            priority="medium",
            story_points=8,
            required_skills={"frontend", "react"},
            dependencies=["t3"],
        ),
        Task(
            id="t8",
            title="Optimize database queries",
            description="Improve performance of database queries for task listing",
            status=TaskStatus.TODO,
            priority="low",
            story_points=5,
            required_skills={"backend", "database"},
            dependencies=["t5"],
        ),
    ]
    users = [
        User(
            id="u1",
            name="John Doe",
            email="john@example.com",
            role="Backend Developer",
            skills={"backend", "api", "database", "security"},
            capacity=20,
            current_load=8,
        ),
        User(
            id="u2",
            name="Jane Smith",
            email="jane@example.com",
            role="UI/UX Designer",
            skills={"design", "frontend", "ui", "ux"},
            capacity=15,
            current_load=5,
        ),
        User(
            id="u3",
            name="Bob Johnson",
            email="bob@example.com",
            role="Frontend Developer",
            skills={"frontend", "react", "javascript"},
            capacity=18,
            current_load=0,
        ),
        User(
            id="u4",
            name="Alice Williams",
            email="alice@example.com",
            role="DevOps Engineer",
            skills={"devops", "aws", "kubernetes", "ci/cd"},
            capacity=12,
            current_load=0,
        ),
    ]
    return tasks, users
