"""
Dependency graph recovered from tree indentation.

Only used for summary statistics; the flattened record list does not depend on it.
"""

from typing import Dict, Set

import networkx as nx


class DependencyGraph:
    """Manages the parent -> child graph of artifacts seen in a tree."""

    def __init__(self) -> None:
        """Initialize an empty dependency graph."""
        self.graph = nx.DiGraph()
        self.max_depth = 0

    def add_artifact(self, key: str, depth: int = 0, direct: bool = False) -> None:
        """
        Add an artifact to the graph.

        An artifact is direct once any of its occurrences is declared at the
        top level of the tree or directly under a project.

        Args:
            key: Artifact key (``group:name``)
            depth: Tree depth of this occurrence
            direct: Whether this occurrence is a direct dependency
        """
        if key in self.graph:
            self.graph.nodes[key]["direct"] = self.graph.nodes[key]["direct"] or direct
        else:
            self.graph.add_node(key, direct=direct)
        self.max_depth = max(self.max_depth, depth)

    def add_dependency(self, parent_key: str, child_key: str) -> None:
        """
        Add a dependency relationship.

        Args:
            parent_key: Key of the artifact that pulls in the child
            child_key: Key of the dependency
        """
        if parent_key == child_key:
            return
        for key in (parent_key, child_key):
            if key not in self.graph:
                self.graph.add_node(key, direct=False)
        self.graph.add_edge(parent_key, child_key)

    def get_direct_dependencies(self) -> Set[str]:
        """Return keys of artifacts declared directly by the build."""
        return {key for key, direct in self.graph.nodes(data="direct") if direct}

    def get_statistics(self) -> Dict:
        """
        Get graph statistics.

        Returns:
            Dictionary with graph statistics
        """
        return {
            "total_artifacts": self.graph.number_of_nodes(),
            "total_edges": self.graph.number_of_edges(),
            "direct_dependencies": len(self.get_direct_dependencies()),
            "max_depth": self.max_depth,
        }
