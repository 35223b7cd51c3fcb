"""Lineage tree display functionality for logs."""

from __future__ import annotations
from html import escape
from typing import TYPE_CHECKING, List

from clonearchitect.logger.base_logger import AlgorithmLogger
from clonearchitect.logger.formatting import format_edges, format_frequencies

if TYPE_CHECKING:
    from clonearchitect.lineage.tree import LineageTree
    from clonearchitect.network.node import Node


class LineageTreeLogger(AlgorithmLogger):
    """Renders lineage trees as indented text, one node per line."""

    def log_tree(self, tree: LineageTree, title: str = "Lineage Tree") -> None:
        if self.disabled:
            return
        self.subsection(title)
        text = "\n".join(self._tree_lines(tree, tree.root, 0))
        self.logger.info(text)
        self.logger.info(f"edges: {format_edges(tree.iter_edges())}")
        self.logger.info(f"error score: {tree.error_score:.6g}")
        self._html_content.append(f'<div class="lineage-tree">{escape(text)}</div>')

    def _tree_lines(self, tree: LineageTree, node: Node, depth: int) -> List[str]:
        lines = [f"{'    ' * depth}{node.label} {format_frequencies(node.frequencies)}"]
        for child in tree.children(node):
            lines.extend(self._tree_lines(tree, child, depth + 1))
        return lines
