"""Algorithm families over the shared `Graph` model.

Every function takes a `Graph` plus parameters and returns a fresh result;
the input graph is never modified.
"""

from graphengine.algorithms.base import INF, APSPAlg, ColoringStrategy, Cost, MaxFlowAlg
from graphengine.algorithms.closure import transitive_closure
from graphengine.algorithms.coloring import (
    chromatic_number,
    exact_coloring,
    greedy_coloring,
    is_valid_coloring,
)
from graphengine.algorithms.connectivity import (
    articulation_points,
    bridges,
    is_strongly_connected,
    kosaraju,
    tarjan_scc,
)
from graphengine.algorithms.euler import (
    chinese_postman,
    eulerian_circuit,
    eulerian_path,
    hamiltonian_cycle,
    hamiltonian_path,
    has_eulerian_circuit,
    has_eulerian_path,
    has_hamiltonian_cycle,
    has_hamiltonian_path,
)
from graphengine.algorithms.ksp import ksp, yen_k_shortest_paths
from graphengine.algorithms.max_flow import calc_max_flow, dinic, edmonds_karp
from graphengine.algorithms.min_cut import stoer_wagner
from graphengine.algorithms.spanning_tree import kruskal, prim
from graphengine.algorithms.spf import (
    bellman_ford,
    bellman_ford_edges,
    check_non_negative,
    dijkstra,
    floyd_warshall,
    johnson,
    spfa,
)
from graphengine.algorithms.traversal import (
    bfs,
    bfs_distances,
    bipartition,
    connected_components,
    dfs,
    dfs_postorder,
    find_cycle_directed,
    has_cycle,
    has_cycle_directed,
    has_cycle_undirected,
    is_bipartite,
    is_connected,
    is_dag,
    topological_sort,
)
from graphengine.algorithms.types import (
    AllPairsResult,
    EdgeRef,
    FlowSummary,
    MinCutResult,
    Path,
    PostmanTour,
    ReachabilityMatrix,
    ShortestPathResult,
    SpanningTree,
)
from graphengine.algorithms.union_find import UnionFind

__all__ = [
    # Selectors and constants
    "APSPAlg",
    "ColoringStrategy",
    "Cost",
    "INF",
    "MaxFlowAlg",
    # Result types
    "AllPairsResult",
    "EdgeRef",
    "FlowSummary",
    "MinCutResult",
    "Path",
    "PostmanTour",
    "ReachabilityMatrix",
    "ShortestPathResult",
    "SpanningTree",
    "UnionFind",
    # Traversal
    "bfs",
    "bfs_distances",
    "bipartition",
    "connected_components",
    "dfs",
    "dfs_postorder",
    "find_cycle_directed",
    "has_cycle",
    "has_cycle_directed",
    "has_cycle_undirected",
    "is_bipartite",
    "is_connected",
    "is_dag",
    "topological_sort",
    # Shortest paths
    "bellman_ford",
    "bellman_ford_edges",
    "check_non_negative",
    "dijkstra",
    "floyd_warshall",
    "johnson",
    "ksp",
    "spfa",
    "yen_k_shortest_paths",
    # Spanning trees
    "kruskal",
    "prim",
    # Flows and cuts
    "calc_max_flow",
    "dinic",
    "edmonds_karp",
    "stoer_wagner",
    # Structure
    "articulation_points",
    "bridges",
    "chinese_postman",
    "chromatic_number",
    "eulerian_circuit",
    "eulerian_path",
    "exact_coloring",
    "greedy_coloring",
    "hamiltonian_cycle",
    "hamiltonian_path",
    "has_eulerian_circuit",
    "has_eulerian_path",
    "has_hamiltonian_cycle",
    "has_hamiltonian_path",
    "is_strongly_connected",
    "is_valid_coloring",
    "kosaraju",
    "tarjan_scc",
    "transitive_closure",
]
