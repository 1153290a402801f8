"""
Maximum bipartite matching assignment built on a max-flow network.

Vertex layout of the network for T tasks and U users:

    0            source
    1 .. T       tasks, in scheduler order
    T+1 .. T+U   users, in input order
    T+U+1        sink
"""
import heapq
import itertools
from dataclasses import dataclass, field
from typing import List, Dict, FrozenSet, Optional, Set, Tuple
from config import EngineConfig, SchedulerConfig, SINK_POLICY_CONSTANT
from models import Task, User, Assignment, AssignmentResult
from assignment.eligibility import select_eligible
from assignment.flow_network import FlowNetwork, FlowEdge
from assignment.interfaces import AssignmentModel
from schedulers.priority import PriorityScheduler
from utils.logger import logger

NO_TASKS_MESSAGE = "No unassigned tasks to process"
ALL_BLOCKED_MESSAGE = "All unassigned tasks have unmet dependencies"


@dataclass
class AssignmentNetwork:
    """Flow network plus the index arrays needed to read it back."""

    network: FlowNetwork
    tasks: List[Task]
    users: List[User]
    sink_edges: List[FlowEdge] = field(default_factory=list)
    # Sink capacities as built, before any search node tightens them
    ceilings: List[int] = field(default_factory=list)
    # (task position, user position) -> task -> user edge
    pair_edges: Dict[Tuple[int, int], FlowEdge] = field(default_factory=dict)
    # User position -> task positions admitted to that user
    admitted: Dict[int, List[int]] = field(default_factory=dict)

    @property
    def source(self) -> int:
        return 0

    @property
    def sink(self) -> int:
        return len(self.tasks) + len(self.users) + 1

    def task_vertex(self, i: int) -> int:
        return i + 1

    def user_vertex(self, j: int) -> int:
        return len(self.tasks) + j + 1


def fit_count(spare: int, points: List[int]) -> int:
    """Most tasks that fit in ``spare`` points, taking the smallest first."""
    count = 0
    for p in sorted(points):
        if p > spare:
            break
        spare -= p
        count += 1
    return count


def sink_ceiling(
    user: User, admitted_tasks: List[Task], config: EngineConfig
) -> int:
    """
    Capacity of the user -> sink edge.

    The "derived" policy allows as many tasks as fit into the user's spare
    capacity when the smallest admitted tasks are taken first. The "constant"
    policy uses the fixed ceiling from the configuration.
    """
    if not admitted_tasks:
        return 0
    if config.sink_policy == SINK_POLICY_CONSTANT:
        ceiling = config.sink_capacity
    else:
        ceiling = fit_count(
            user.spare_capacity(), [t.story_points for t in admitted_tasks]
        )
    # More than one slot per admitted task is never usable
    return min(ceiling, len(admitted_tasks))


def build_network(
    tasks: List[Task], users: List[User], config: Optional[EngineConfig] = None
) -> AssignmentNetwork:
    """
    Build the layered source -> tasks -> users -> sink network.

    A task -> user edge exists only when the user has every required skill and
    enough spare capacity (measured against the load before this run).

    Args:
        tasks: Assignable tasks in scheduler order
        users: Candidate users
        config: Engine configuration

    Returns:
        AssignmentNetwork ready to be solved
    """
    config = config or EngineConfig()
    n_tasks, n_users = len(tasks), len(users)
    graph = AssignmentNetwork(
        network=FlowNetwork(n_tasks + n_users + 2), tasks=tasks, users=users
    )

    for i in range(n_tasks):
        graph.network.add_edge(graph.source, graph.task_vertex(i), 1)

    edge_count = 0
    for i, task in enumerate(tasks):
        for j, user in enumerate(users):
            if user.has_required_skills(task) and user.has_capacity_for(task):
                graph.pair_edges[(i, j)] = graph.network.add_edge(
                    graph.task_vertex(i), graph.user_vertex(j), 1
                )
                graph.admitted.setdefault(j, []).append(i)
                edge_count += 1
            else:
                logger.debug(f"No edge {task.id} -> {user.id}")

    for j, user in enumerate(users):
        admitted_tasks = [tasks[i] for i in graph.admitted.get(j, [])]
        ceiling = sink_ceiling(user, admitted_tasks, config)
        graph.ceilings.append(ceiling)
        graph.sink_edges.append(
            graph.network.add_edge(graph.user_vertex(j), graph.sink, ceiling)
        )

    logger.debug(
        f"Built network with {graph.network.vertex_count} vertices and "
        f"{edge_count} task-user edges."
    )
    return graph


def extract_assignments(graph: AssignmentNetwork) -> List[Tuple[int, int]]:
    """
    Read the matched (task position, user position) pairs off a solved network.
    """
    n_tasks, n_users = len(graph.tasks), len(graph.users)
    pairs = []
    for i in range(n_tasks):
        for edge in graph.network.edges_from(graph.task_vertex(i)):
            if edge.flow > 0 and n_tasks < edge.to <= n_tasks + n_users:
                pairs.append((i, edge.to - n_tasks - 1))
    return pairs


def _overloaded_users(
    graph: AssignmentNetwork, pairs: List[Tuple[int, int]]
) -> Dict[int, List[int]]:
    """Map each overloaded user position to the task positions matched to it."""
    matched: Dict[int, List[int]] = {}
    for i, j in pairs:
        matched.setdefault(j, []).append(i)

    overloaded = {}
    for j, task_positions in matched.items():
        points = sum(graph.tasks[i].story_points for i in task_positions)
        if points > graph.users[j].spare_capacity():
            overloaded[j] = task_positions
    return overloaded


def _trim_overloads(
    graph: AssignmentNetwork, pairs: List[Tuple[int, int]]
) -> List[Tuple[int, int]]:
    """Keep pairs in scheduler order while each user's points still fit."""
    used: Dict[int, int] = {}
    kept = []
    for i, j in pairs:
        points = graph.tasks[i].story_points
        if used.get(j, 0) + points <= graph.users[j].spare_capacity():
            used[j] = used.get(j, 0) + points
            kept.append((i, j))
    return kept


def _solve_with_closed(
    graph: AssignmentNetwork, closed: FrozenSet[Tuple[int, int]]
) -> List[Tuple[int, int]]:
    """Run a fresh max flow with the ``closed`` task -> user edges removed."""
    for pair, edge in graph.pair_edges.items():
        edge.capacity = 0 if pair in closed else 1
    for j, edge in enumerate(graph.sink_edges):
        open_points = [
            graph.tasks[i].story_points
            for i in graph.admitted.get(j, [])
            if (i, j) not in closed
        ]
        edge.capacity = min(
            graph.ceilings[j], fit_count(graph.users[j].spare_capacity(), open_points)
        )
    graph.network.reset_flow()
    graph.network.max_flow(graph.source, graph.sink)
    return extract_assignments(graph)


def _branch_order(
    graph: AssignmentNetwork,
    j: int,
    task_positions: List[int],
    closed: FrozenSet[Tuple[int, int]],
) -> List[int]:
    """
    Order the matched tasks of overloaded user ``j`` for branching.

    Tasks another user could still take come first, so flow can move there;
    then larger tasks, which free the most points; then later positions.
    """

    def has_other_user(i: int) -> bool:
        return any(
            other != j and (i, other) not in closed
            for (task, other) in graph.pair_edges
            if task == i
        )

    return sorted(
        task_positions,
        key=lambda i: (not has_other_user(i), -graph.tasks[i].story_points, -i),
    )


def solve(
    graph: AssignmentNetwork, config: Optional[EngineConfig] = None
) -> List[Tuple[int, int]]:
    """
    Solve the network and return pairs that respect every user's spare capacity.

    A max flow only bounds how many tasks each user takes, not their points,
    so a user can come back overloaded. This runs a best-first branch and
    bound over closed task -> user edges: every search node is a max flow,
    whose value bounds any capacity-safe matching that avoids the node's
    closed edges. An overloaded user must give up at least one of its matched
    tasks, so the node branches once per matched task, closing that edge.
    A node whose flow cannot beat the best safe matching found so far is
    dropped. ``config.max_rounds`` caps the number of max flows; when it runs
    out, the best safe matching found so far is returned.

    Args:
        graph: Network from ``build_network``
        config: Engine configuration

    Returns:
        List of (task position, user position) pairs
    """
    config = config or EngineConfig()
    best: List[Tuple[int, int]] = []
    seen: Set[FrozenSet[Tuple[int, int]]] = set()
    counter = itertools.count()
    # Entries: (-upper bound, tie breaker, closed edges)
    heap = [(-len(graph.tasks), next(counter), frozenset())]
    rounds = 0

    while heap:
        neg_bound, _, closed = heapq.heappop(heap)
        if -neg_bound <= len(best):
            break
        if rounds >= config.max_rounds:
            logger.warning(
                f"Capacity search stopped after {config.max_rounds} rounds; "
                f"keeping the best matching found ({len(best)} pairs)."
            )
            break
        rounds += 1

        pairs = _solve_with_closed(graph, closed)
        if len(pairs) <= len(best):
            continue

        overloaded = _overloaded_users(graph, pairs)
        if not overloaded:
            best = pairs
            logger.debug(f"Safe matching of {len(best)} pairs in round {rounds}.")
            continue

        trimmed = _trim_overloads(graph, pairs)
        if len(trimmed) > len(best):
            best = trimmed

        j = min(overloaded)
        logger.debug(
            f"User {graph.users[j].id} overloaded in round {rounds}; branching on "
            f"{len(overloaded[j])} matched tasks."
        )
        for i in _branch_order(graph, j, overloaded[j], closed):
            child = closed | {(i, j)}
            if child not in seen:
                seen.add(child)
                heapq.heappush(heap, (-len(pairs), next(counter), child))

    logger.debug(f"Capacity search finished after {rounds} round(s).")
    return best


class MaxFlowAssigner(AssignmentModel):
    """
    Assigns tasks through a maximum bipartite matching.

    Tasks whose dependencies are not done never enter the network. The rest
    are ordered by priority score, matched to users with the right skills and
    spare capacity, and the matching with the most pairs is returned.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        scheduler_config: Optional[SchedulerConfig] = None,
    ):
        self.config = config or EngineConfig()
        self.scheduler_config = scheduler_config or SchedulerConfig()

    def assign(self, tasks: List[Task], users: List[User]) -> AssignmentResult:
        """
        Assign tasks to users using max flow.

        Args:
            tasks: Full task snapshot
            users: Users available for assignment

        Returns:
            AssignmentResult for this snapshot
        """
        split = select_eligible(tasks)

        if not split.candidates:
            logger.info("No unassigned todo tasks; nothing to do.")
            return AssignmentResult(success=True, message=NO_TASKS_MESSAGE)

        if not split.assignable:
            logger.info(
                f"All {len(split.candidates)} candidate tasks are blocked by dependencies."
            )
            return AssignmentResult(
                success=False,
                unassigned_tasks=[t.id for t in split.candidates],
                message=ALL_BLOCKED_MESSAGE,
            )

        ordered = PriorityScheduler(
            split.assignable, tasks, self.scheduler_config
        ).schedule()
        logger.info(
            f"Assigning {len(ordered)} tasks to {len(users)} users "
            f"({len(split.blocked)} blocked by dependencies)."
        )

        graph = build_network(ordered, users, self.config)
        pairs = solve(graph, self.config)

        assigned = [
            Assignment(task_id=ordered[i].id, user_id=users[j].id) for i, j in pairs
        ]
        matched_ids = {a.task_id for a in assigned}
        unassigned = [t.id for t in ordered if t.id not in matched_ids]
        unassigned += [t.id for t in split.blocked]

        result = AssignmentResult(
            success=len(pairs) == len(ordered),
            assigned_tasks=assigned,
            unassigned_tasks=unassigned,
            message=(
                f"Task assignment completed with {len(assigned)} tasks assigned "
                f"and {len(unassigned)} tasks unassigned"
            ),
        )
        logger.info(result.message)
        return result
