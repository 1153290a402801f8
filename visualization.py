"""
Report outputs for assignment runs.

This module draws the task/user network of a run and exports the run to an
Excel workbook. Both write files only; nothing here is interactive.
"""
import os
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx
from typing import List, Dict, Optional
from openpyxl import Workbook
from openpyxl.styles import PatternFill, Font, Alignment

from models import Task, User, AssignmentResult
from assignment.eligibility import select_eligible
from utils.logger import logger


STATUS_COLORS = {
    "assigned": "#2ecc71",  # Green
    "unassigned": "#e67e22",  # Orange
    "blocked": "#e74c3c",  # Red
    "other": "#bdc3c7",  # Gray
}
USER_COLOR = "#3498db"  # Blue


def _ensure_parent_dir(filename: str) -> None:
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)


def draw_assignment_network(
    tasks: List[Task],
    users: List[User],
    result: AssignmentResult,
    filename: str,
) -> nx.DiGraph:
    """
    Draw tasks on the left, users on the right, with dependency edges between
    tasks and assignment edges from tasks to users.

    Args:
        tasks: Task snapshot of the run
        users: User snapshot of the run
        result: The run's result
        filename: Image file to write

    Returns:
        nx.DiGraph: The graph that was drawn
    """
    split = select_eligible(tasks)
    blocked_ids = {t.id for t in split.blocked}
    mapping = result.as_mapping()

    G = nx.DiGraph()
    pos: Dict[str, tuple] = {}
    node_colors = []

    for i, task in enumerate(tasks):
        node = f"task:{task.id}"
        G.add_node(node, label=f"{task.id}\n{task.story_points}pt")
        pos[node] = (0.0, -float(i))
        if task.id in mapping:
            node_colors.append(STATUS_COLORS["assigned"])
        elif task.id in blocked_ids:
            node_colors.append(STATUS_COLORS["blocked"])
        elif task.is_candidate():
            node_colors.append(STATUS_COLORS["unassigned"])
        else:
            node_colors.append(STATUS_COLORS["other"])

    # Spread users over the same height as the task column
    span = max(len(tasks) - 1, 1)
    step = span / max(len(users) - 1, 1)
    for j, user in enumerate(users):
        node = f"user:{user.id}"
        G.add_node(node, label=f"{user.id}\n{user.current_load}/{user.capacity}")
        pos[node] = (3.0, -j * step if len(users) > 1 else -span / 2)
        node_colors.append(USER_COLOR)

    dependency_edges = []
    for task in tasks:
        for dep_id in task.dependencies:
            if f"task:{dep_id}" in pos:
                dependency_edges.append((f"task:{dep_id}", f"task:{task.id}"))
    assignment_edges = [
        (f"task:{task_id}", f"user:{user_id}")
        for task_id, user_id in mapping.items()
        if f"task:{task_id}" in pos and f"user:{user_id}" in pos
    ]
    G.add_edges_from(dependency_edges, kind="dependency")
    G.add_edges_from(assignment_edges, kind="assignment")

    fig, ax = plt.subplots(figsize=(10, max(4, len(tasks) * 0.6)))

    nx.draw_networkx_nodes(
        G, pos, ax=ax, node_size=1200, node_color=node_colors, edgecolors="black"
    )
    nx.draw_networkx_labels(
        G, pos, ax=ax, labels=nx.get_node_attributes(G, "label"), font_size=8
    )
    nx.draw_networkx_edges(
        G,
        pos,
        ax=ax,
        edgelist=dependency_edges,
        edge_color="gray",
        style="dashed",
        connectionstyle="arc3,rad=0.3",
        arrowstyle="-|>",
    )
    nx.draw_networkx_edges(
        G,
        pos,
        ax=ax,
        edgelist=assignment_edges,
        edge_color=STATUS_COLORS["assigned"],
        width=2.0,
        arrowstyle="-|>",
    )

    legend = [
        mpatches.Patch(color=color, label=name.title())
        for name, color in STATUS_COLORS.items()
    ]
    legend.append(mpatches.Patch(color=USER_COLOR, label="User"))
    ax.legend(handles=legend, loc="upper right", fontsize=8)
    ax.set_title(result.message or "Task Assignment", fontsize=12)
    ax.axis("off")
    fig.tight_layout()

    _ensure_parent_dir(filename)
    fig.savefig(filename, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Assignment network saved as {filename}")
    return G


def export_to_excel(
    filename: str,
    tasks: List[Task],
    users: List[User],
    result: AssignmentResult,
    metrics: Optional[Dict[str, float]] = None,
) -> bool:
    """
    Export an assignment run to Excel.

    Args:
        filename: File to save the spreadsheet
        tasks: Task snapshot of the run
        users: User snapshot of the run
        result: The run's result
        metrics: Optional metrics to add as a sheet

    Returns:
        bool: True if export successful
    """
    wb = Workbook()

    header_fill = PatternFill(start_color="D0D0D0", end_color="D0D0D0", fill_type="solid")
    header_font = Font(bold=True)
    center_align = Alignment(horizontal="center")

    def style_header(ws) -> None:
        for cell in ws[1]:
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = center_align

    task_map = {t.id: t for t in tasks}
    mapping = result.as_mapping()

    # Assignments sheet
    ws1 = wb.active
    ws1.title = "Assignments"
    ws1.append(["TaskID", "Title", "Priority", "Points", "ReqSkills", "Assignee", "Outcome"])
    style_header(ws1)

    for task_id, user_id in mapping.items():
        task = task_map.get(task_id)
        ws1.append([
            task_id,
            task.title if task else "",
            task.priority if task else "",
            task.story_points if task else None,
            ",".join(sorted(task.required_skills)) if task else "",
            user_id,
            "assigned",
        ])
    for task_id in result.unassigned_tasks:
        task = task_map.get(task_id)
        ws1.append([
            task_id,
            task.title if task else "",
            task.priority if task else "",
            task.story_points if task else None,
            ",".join(sorted(task.required_skills)) if task else "",
            "",
            "unassigned",
        ])

    # Users sheet
    ws2 = wb.create_sheet("Users")
    ws2.append(["UserID", "Name", "Skills", "Capacity", "LoadBefore", "Added", "LoadAfter"])
    style_header(ws2)

    added = {u.id: 0 for u in users}
    for task_id, user_id in mapping.items():
        if task_id in task_map and user_id in added:
            added[user_id] += task_map[task_id].story_points
    for user in users:
        ws2.append([
            user.id,
            user.name,
            ",".join(sorted(user.skills)),
            user.capacity,
            user.current_load,
            added[user.id],
            user.current_load + added[user.id],
        ])

    if metrics:
        ws3 = wb.create_sheet("Metrics")
        ws3.append(["Metric", "Value"])
        style_header(ws3)
        for name, value in metrics.items():
            ws3.append([name, round(value, 3)])

    try:
        _ensure_parent_dir(filename)
        wb.save(filename)
    except OSError as e:
        logger.error(f"Error saving Excel report to {filename}: {e}")
        return False

    logger.info(f"Excel report saved as {filename}")
    return True
