"""
Property flattener.

A record cannot inherit fields, so it restates every ancestor's properties.
The flattened sequence is the ancestor chain walked root-first, each level
contributing its own properties in declaration order.

Flattenings are memoized per class: a class extends its superclass's
memoized sequence with its own properties and is never flattened twice.
"""

from __future__ import annotations

import threading

from ..errors import SchemaError
from ..schema_graph.nodes import ClassNode, PropertyDecl
from .ir_nodes import ResolvedClass

# A property paired with the class declaring it
FlattenedProperty = tuple[PropertyDecl, ClassNode]


class PropertyFlattener:
    """Computes the ordered component list of a record."""

    def __init__(self):
        self._flattened: dict[ClassNode, tuple[FlattenedProperty, ...]] = {}
        self._lock = threading.Lock()

    def flatten(self, resolved: ResolvedClass) -> list[PropertyDecl]:
        """
        Flatten the properties of a class that has a record.

        Args:
            resolved: The resolved class

        Returns:
            Properties of the whole chain, root ancestor first

        Raises:
            SchemaError: If the class has no record, or two classes in its
                chain declare the same property
        """
        if not resolved.has_record:
            raise SchemaError(
                f"Class '{resolved.qualified_name}' has no record to flatten",
                class_name=resolved.qualified_name,
            )
        return [prop for prop, _ in self.flatten_node(resolved.node)]

    def flatten_node(self, node: ClassNode) -> tuple[FlattenedProperty, ...]:
        """
        Flatten any class, pairing each property with its declaring class.

        Raises:
            SchemaError: On a duplicate property name in the chain
        """
        cached = self._flattened.get(node)
        if cached is not None:
            return cached

        inherited = self.flatten_node(node.superclass) if node.superclass is not None else ()
        flattened = self._extend(node, inherited)
        with self._lock:
            return self._flattened.setdefault(node, flattened)

    def _extend(self, node: ClassNode, inherited: tuple[FlattenedProperty, ...]) -> tuple[FlattenedProperty, ...]:
        """Append a class's own properties to its superclass's flattening."""
        declared_by = {prop.name: level for prop, level in inherited}
        own: list[FlattenedProperty] = []
        for prop in node.own_properties:
            previous = declared_by.get(prop.name)
            if previous is not None:
                raise SchemaError(
                    f"Property '{prop.name}' of '{node.qualified_name}' is declared by both "
                    f"'{previous.qualified_name}' and '{node.qualified_name}'",
                    class_name=node.qualified_name,
                    property_name=prop.name,
                    declaring_classes=(previous.qualified_name, node.qualified_name),
                )
            declared_by[prop.name] = node
            own.append((prop, node))
        return inherited + tuple(own)

    def chain(self, node: ClassNode) -> list[ClassNode]:
        """Return the ancestor chain root-first, ending with the class itself."""
        return list(reversed(node.ancestors())) + [node]

    def declaring_classes(self, node: ClassNode) -> dict[str, ClassNode]:
        """Map each flattened property name to the class declaring it."""
        return {prop.name: level for prop, level in self.flatten_node(node)}
