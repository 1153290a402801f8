"""
Greedy first-fit task assignment, kept as a baseline for comparisons.
"""
from typing import List, Dict, Optional
from config import SchedulerConfig
from models import Task, User, Assignment, AssignmentResult
from assignment.eligibility import select_eligible
from assignment.interfaces import AssignmentModel
from assignment.max_flow import NO_TASKS_MESSAGE, ALL_BLOCKED_MESSAGE
from schedulers.priority import PriorityScheduler
from utils.logger import logger


class GreedyAssigner(AssignmentModel):
    """
    Greedy task assignment model.

    Walks the tasks in priority order and hands each one to the first user
    that has the skills and still has room, counting the points already given
    out during this run. Fast, but it can miss matchings that max flow finds.
    """

    def __init__(self, scheduler_config: Optional[SchedulerConfig] = None):
        self.scheduler_config = scheduler_config or SchedulerConfig()

    def assign(self, tasks: List[Task], users: List[User]) -> AssignmentResult:
        """
        Assign tasks to users using a first-fit pass.

        Args:
            tasks: Full task snapshot
            users: Users to assign to

        Returns:
            AssignmentResult shaped like the max-flow engine's
        """
        split = select_eligible(tasks)
        if not split.candidates:
            return AssignmentResult(success=True, message=NO_TASKS_MESSAGE)
        if not split.assignable:
            return AssignmentResult(
                success=False,
                unassigned_tasks=[t.id for t in split.candidates],
                message=ALL_BLOCKED_MESSAGE,
            )

        ordered = PriorityScheduler(
            split.assignable, tasks, self.scheduler_config
        ).schedule()

        # Points handed out during this run
        committed: Dict[str, int] = {u.id: 0 for u in users}
        assigned = []
        unassigned = []

        for task in ordered:
            chosen = None
            for user in users:
                if not user.has_required_skills(task):
                    continue
                available = user.spare_capacity() - committed[user.id]
                if available >= task.story_points:
                    chosen = user
                    break

            if chosen is None:
                unassigned.append(task.id)
                continue

            committed[chosen.id] += task.story_points
            assigned.append(Assignment(task_id=task.id, user_id=chosen.id))

        unassigned += [t.id for t in split.blocked]
        logger.info(
            f"Greedy pass assigned {len(assigned)} of {len(ordered)} assignable tasks."
        )
        return AssignmentResult(
            success=len(assigned) == len(ordered),
            assigned_tasks=assigned,
            unassigned_tasks=unassigned,
            message=(
                f"Task assignment completed with {len(assigned)} tasks assigned "
                f"and {len(unassigned)} tasks unassigned"
            ),
        )
