"""
Vertex id mapping between dynamic networks and networkit snapshots.

Dynamic networks number their vertices ``1..N`` while networkit graphs use
consecutive node ids starting at ``0``. Every snapshot extracted from a
dynamic network carries an :class:`IDMapper` so that results computed on the
networkit graph can be reported in vertex ids again.
"""

from typing import Dict, Iterator, List


class IDMapper:
    """
    Bidirectional mapping between vertex ids and networkit node ids.

    Attributes
    ----------
    vertex_to_node : Dict[int, int]
        Maps vertex ids to networkit node ids
    node_to_vertex : Dict[int, int]
        Maps networkit node ids to vertex ids

    Examples
    --------
    >>> mapper = IDMapper.for_vertex_count(3)
    >>> mapper.get_internal(1)
    0
    >>> mapper.get_original(2)
    3
    """

    def __init__(self) -> None:
        self.vertex_to_node: Dict[int, int] = {}
        self.node_to_vertex: Dict[int, int] = {}

    @classmethod
    def for_vertex_count(cls, n_vertices: int) -> "IDMapper":
        """Map vertices ``1..n_vertices`` onto nodes ``0..n_vertices-1``."""
        mapper = cls()
        for vertex in range(1, n_vertices + 1):
            mapper.add_mapping(vertex, vertex - 1)
        return mapper

    def add_mapping(self, vertex: int, node: int) -> None:
        """
        Add a vertex/node pair.

        Raises
        ------
        TypeError
            If either id is not an integer
        ValueError
            If the node id is negative or either id is already mapped
        """
        if not isinstance(vertex, int) or not isinstance(node, int):
            raise TypeError(f"Vertex and node ids must be integers, got {type(vertex)}, {type(node)}")

        if node < 0:
            raise ValueError(f"Node id must be non-negative, got {node}")

        if vertex in self.vertex_to_node:
            raise ValueError(
                f"Vertex {vertex} already mapped to node {self.vertex_to_node[vertex]}"
            )
        if node in self.node_to_vertex:
            raise ValueError(
                f"Node {node} already mapped to vertex {self.node_to_vertex[node]}"
            )

        self.vertex_to_node[vertex] = node
        self.node_to_vertex[node] = vertex

    def get_internal(self, vertex: int) -> int:
        """Return the networkit node id of ``vertex``."""
        try:
            return self.vertex_to_node[vertex]
        except KeyError:
            raise KeyError(f"Vertex {vertex} not found in mapping")

    def get_original(self, node: int) -> int:
        """Return the vertex id of networkit node ``node``."""
        try:
            return self.node_to_vertex[node]
        except KeyError:
            raise KeyError(f"Node {node} not found in mapping")

    def get_original_batch(self, nodes: List[int]) -> List[int]:
        return [self.get_original(node) for node in nodes]

    def vertices(self) -> List[int]:
        """Vertex ids ordered by their node id."""
        return [self.node_to_vertex[node] for node in sorted(self.node_to_vertex)]

    def size(self) -> int:
        return len(self.vertex_to_node)

    def is_empty(self) -> bool:
        return not self.vertex_to_node

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, vertex: object) -> bool:
        return vertex in self.vertex_to_node

    def __iter__(self) -> Iterator[int]:
        return iter(self.vertices())

    def __repr__(self) -> str:
        return f"IDMapper(size={self.size()})"
