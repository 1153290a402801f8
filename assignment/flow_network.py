"""
Flow network with an Edmonds-Karp maximum flow solver.

Vertices are plain integer indices. Every forward edge added to the network
gets a paired zero-capacity reverse edge so the residual graph can push flow
back along it.
"""
from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Tuple
from utils.logger import logger


@dataclass
class FlowEdge:
    """Directed edge of the network."""

    to: int
    capacity: int
    flow: int = 0
    # Index of the paired edge inside the adjacency list of ``to``
    reverse: int = -1

    def residual(self) -> int:
        return self.capacity - self.flow


class FlowNetwork:
    """Adjacency-list flow network solved with Edmonds-Karp."""

    def __init__(self, vertex_count: int):
        if vertex_count < 2:
            raise ValueError("A flow network needs at least a source and a sink")
        self.vertex_count = vertex_count
        self.edges: List[List[FlowEdge]] = [[] for _ in range(vertex_count)]

    def _check_vertex(self, v: int) -> None:
        if not 0 <= v < self.vertex_count:
            raise ValueError(f"Vertex {v} outside 0..{self.vertex_count - 1}")

    def add_edge(self, u: int, v: int, capacity: int) -> FlowEdge:
        """
        Add a forward edge u -> v and its residual partner v -> u.

        Returns:
            FlowEdge: the forward edge
        """
        self._check_vertex(u)
        self._check_vertex(v)
        if capacity < 0:
            raise ValueError(f"Negative capacity on edge {u}->{v}: {capacity}")

        forward = FlowEdge(to=v, capacity=capacity, reverse=len(self.edges[v]))
        backward = FlowEdge(to=u, capacity=0, reverse=len(self.edges[u]))
        # A self-loop shares one list, so the partner sits one slot further
        if u == v:
            forward.reverse += 1
        self.edges[u].append(forward)
        self.edges[v].append(backward)
        return forward

    def edges_from(self, u: int) -> List[FlowEdge]:
        self._check_vertex(u)
        return self.edges[u]

    def reset_flow(self) -> None:
        for adjacency in self.edges:
            for edge in adjacency:
                edge.flow = 0

    def _find_augmenting_path(
        self, source: int, sink: int
    ) -> Optional[List[Optional[Tuple[int, int]]]]:
        """
        Breadth-first search over edges with spare capacity.

        Returns:
            Parent pointers as (vertex, edge index) per vertex, or None when
            the sink cannot be reached.
        """
        parent: List[Optional[Tuple[int, int]]] = [None] * self.vertex_count
        visited = [False] * self.vertex_count
        visited[source] = True
        queue = deque([source])

        while queue:
            u = queue.popleft()
            for i, edge in enumerate(self.edges[u]):
                if not visited[edge.to] and edge.capacity > edge.flow:
                    visited[edge.to] = True
                    parent[edge.to] = (u, i)
                    if edge.to == sink:
                        return parent
                    queue.append(edge.to)

        return None

    def max_flow(self, source: int, sink: int) -> int:
        """
        Push flow from source to sink until no augmenting path remains.

        Flow already present on the network is kept and built upon.

        Returns:
            int: value of the flow added by this call
        """
        self._check_vertex(source)
        self._check_vertex(sink)
        if source == sink:
            return 0

        total = 0
        augmentations = 0
        parent = self._find_augmenting_path(source, sink)

        while parent is not None:
            # Bottleneck along the path
            amount = None
            v = sink
            while v != source:
                u, i = parent[v]
                residual = self.edges[u][i].residual()
                amount = residual if amount is None else min(amount, residual)
                v = u

            v = sink
            while v != source:
                u, i = parent[v]
                edge = self.edges[u][i]
                edge.flow += amount
                self.edges[v][edge.reverse].flow -= amount
                v = u

            total += amount
            augmentations += 1
            parent = self._find_augmenting_path(source, sink)

        logger.debug(f"Max flow {total} found with {augmentations} augmenting paths.")
        return total
