"""
Documentation merger for records.

A record restates its ancestors' properties, so its documentation restates
their docs too: the class doc leads, then one parameter entry per documented
flattened property.
"""

from __future__ import annotations

from ..schema_graph.nodes import ClassNode, PropertyDecl
from .ir_nodes import DocBlock


class DocMerger:
    """Combines class and property documentation into one block."""

    def merge(self, node: ClassNode, flattened: list[PropertyDecl]) -> DocBlock:
        """
        Merge documentation.

        Args:
            node: The class being documented
            flattened: Its flattened properties, in component order

        Returns:
            DocBlock with the class doc as lead and one entry per documented property
        """
        lead = node.doc.strip() if node.doc and node.doc.strip() else None
        params = [(prop.name, prop.doc.strip()) for prop in flattened if prop.doc and prop.doc.strip()]
        return DocBlock(lead=lead, params=params)
