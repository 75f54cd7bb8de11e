"""
Undirected simple graph over arrangement points.

Nodes are point ids 0..n-1. Edges join points that are consecutive on some
line of the arrangement.
"""

from __future__ import annotations
from typing import Iterator, Sequence


class SimpleGraph:
    """
    Undirected graph without self loops or parallel edges.

    Example:
        >>> g = SimpleGraph(3)
        >>> g.add_edge(0, 1)
        True
        >>> g.add_edge(1, 0)
        False
        >>> g.edges()
        [(0, 1)]
    """

    def __init__(self, num_nodes: int = 0):
        if num_nodes < 0:
            raise ValueError(f"num_nodes cannot be negative, got {num_nodes}")
        self._adj: list[set[int]] = [set() for _ in range(num_nodes)]
        self._num_edges = 0

    def __repr__(self):
        return f"SimpleGraph(nodes={self.num_nodes}, edges={self.num_edges})"

    def __contains__(self, node: int) -> bool:
        return 0 <= node < len(self._adj)

    def __iter__(self) -> Iterator[int]:
        return iter(range(len(self._adj)))

    def _check_node(self, node: int) -> None:
        if node not in self:
            raise IndexError(f"Node {node} out of range (graph has {self.num_nodes} nodes)")

    @property
    def num_nodes(self) -> int:
        return len(self._adj)

    @property
    def num_edges(self) -> int:
        return self._num_edges

    def add_edge(self, u: int, v: int) -> bool:
        """
        Add an undirected edge.

        Returns:
            True if the edge is new, False if it was already present.
        """
        self._check_node(u)
        self._check_node(v)
        if u == v:
            raise ValueError(f"Self loop on node {u} is not allowed")
        if v in self._adj[u]:
            return False
        self._adj[u].add(v)
        self._adj[v].add(u)
        self._num_edges += 1
        return True

    def has_edge(self, u: int, v: int) -> bool:
        if u not in self or v not in self:
            return False
        return v in self._adj[u]

    def neighbors(self, node: int) -> list[int]:
        """Neighbors of a node in ascending order."""
        self._check_node(node)
        return sorted(self._adj[node])

    def degree(self, node: int) -> int:
        self._check_node(node)
        return len(self._adj[node])

    def edges(self) -> list[tuple[int, int]]:
        """All edges as (u, v) with u < v, sorted."""
        return sorted(
            (u, v)
            for u, adj in enumerate(self._adj)
            for v in adj
            if u < v
        )

    def to_dict(self) -> dict:
        return {
            "num_nodes": self.num_nodes,
            "edges": [list(e) for e in self.edges()],
        }


def build_graph(neighbors: Sequence[Sequence[int]]) -> SimpleGraph:
    """
    Build the arrangement graph from neighbor lists.

    Args:
        neighbors: neighbors[i] lists the points adjacent to point i

    Returns:
        Graph with one node per point and an edge per adjacent pair.
    """
    graph = SimpleGraph(len(neighbors))

    for i, adjacent in enumerate(neighbors):
        for j in adjacent:
            graph.add_edge(i, j)

    return graph
