"""Per-sample leaves of a lineage tree.

Each sample becomes a leaf hung below the deepest tree nodes whose
sub-population is present in that sample. This is the view reporting
collaborators use to show which clones make up each sample.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List

from clonearchitect.network.constraint_graph import ConstraintGraph, EdgeDirection
from clonearchitect.network.node import Node

if TYPE_CHECKING:
    from clonearchitect.lineage.tree import LineageTree


def make_sample_leaves(graph: ConstraintGraph) -> List[Node]:
    """Leaf nodes for every sample, numbered after the network's own nodes."""
    return [
        Node.leaf(graph.num_nodes + i, i, graph.num_samples)
        for i in range(graph.num_samples)
    ]


def attach_sample_leaves(
    graph: ConstraintGraph, tree: LineageTree
) -> Dict[Node, List[Node]]:
    """
    Find the parents of every sample leaf in ``tree``.

    Levels are scanned bottom-up. A node present in the sample becomes a parent
    unless one of the parents already chosen lies below it; among parents found
    on the same level, one that is an ancestor of another is dropped. A sample
    without any parent hangs from the root.

    Returns:
        Mapping of each leaf node to its parent nodes.
    """
    attachments: Dict[Node, List[Node]] = {}
    for leaf in make_sample_leaves(graph):
        parents: List[Node] = []
        chosen: List[Node] = []
        for level in range(leaf.level + 1, graph.num_samples + 1):
            same_level: List[Node] = []
            for candidate in graph.nodes_at_level(level):
                if candidate not in tree:
                    continue
                direction, _ = graph.admissible_direction(candidate, leaf)
                if direction is not EdgeDirection.FORWARD:
                    continue
                if any(tree.is_descendant(candidate, p) for p in parents):
                    continue
                same_level.append(candidate)
                parents.append(candidate)
            ancestors = {
                n1 for n1 in same_level for n2 in same_level if tree.is_descendant(n1, n2)
            }
            chosen.extend(n for n in same_level if n not in ancestors)
        attachments[leaf] = chosen or [graph.root]
    return attachments
