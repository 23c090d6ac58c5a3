"""
Hierarchy resolver.

Decomposes each schema class into an optional interface (abstract and
open classes) and an optional record (open and final classes). Records
cannot extend each other, so substitutability goes through interfaces: a
record implements its own interface and every ancestor's.

Classes are resolved ancestors first. Results are memoized per class
identity behind a lock, so disjoint inheritance trees can be resolved on
worker threads.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from ..errors import SchemaError
from ..schema_graph.nodes import ClassKind, ClassNode, SchemaGraph, TypeKind
from .ir_nodes import ResolvedClass, TypeName
from .name_resolver import NameMapping, NameResolver
from .property_flattener import PropertyFlattener

logger = logging.getLogger(__name__)


class HierarchyResolver:
    """Computes interface and record identities for every class of a graph."""

    def __init__(self, interface_prefix: str = "I", flattener: PropertyFlattener | None = None):
        """
        Initialize the resolver.

        Args:
            interface_prefix: Marker prepended to non-module interface names
            flattener: Used to reject duplicate properties in a chain
        """
        self.name_resolver = NameResolver(interface_prefix)
        self.flattener = flattener or PropertyFlattener()

        # Set during resolution
        self.graph: SchemaGraph | None = None
        self.naming: NameMapping | None = None

        self._resolved: dict[ClassNode, ResolvedClass] = {}
        self._lock = threading.Lock()

    def resolve(self, graph: SchemaGraph, max_workers: int | None = None) -> dict[ClassNode, ResolvedClass]:
        """
        Resolve every class of a graph.

        Args:
            graph: The schema graph
            max_workers: Resolve disjoint inheritance trees on this many threads

        Returns:
            Mapping from class to its resolution, in ancestor-first order

        Raises:
            SchemaError: On cyclic ancestry, an undeclared superclass or type,
                an invalid superclass, or a duplicate property in a chain
        """
        order = self.ancestor_first_order(graph)
        self._check_type_references(graph)

        if graph is not self.graph:
            self.graph = graph
            self.naming = self.name_resolver.resolve_names(graph)
            self._resolved = {}

        if max_workers is not None and max_workers > 1:
            trees = self._partition(order)
            logger.debug("Resolving %d inheritance trees on %d workers", len(trees), max_workers)
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                futures = [pool.submit(self._resolve_all, tree) for tree in trees]
                for future in futures:
                    future.result()
        else:
            self._resolve_all(order)

        return {node: self._resolved[node] for node in order}

    def ancestor_first_order(self, graph: SchemaGraph) -> list[ClassNode]:
        """
        Order classes so that every class comes after its ancestors.

        Classes keep their declaration order where ancestry allows it.

        Raises:
            SchemaError: On cyclic ancestry or an invalid superclass
        """
        order: list[ClassNode] = []
        done: set[ClassNode] = set()

        for node in graph.classes:
            path: list[ClassNode] = []
            current = node
            while current is not None and current not in done:
                if current in path:
                    cycle = path[path.index(current) :] + [current]
                    names = [c.qualified_name for c in cycle]
                    raise SchemaError(
                        f"Cyclic ancestry: {' -> '.join(names)}",
                        class_name=current.qualified_name,
                        declaring_classes=tuple(names[:-1]),
                    )
                self._check_module(current, graph)
                self._check_superclass(current, graph)
                path.append(current)
                current = current.superclass

            for ancestor in reversed(path):
                order.append(ancestor)
                done.add(ancestor)

        return order

    def _check_module(self, node: ClassNode, graph: SchemaGraph) -> None:
        module = graph.module_of(node)
        if module is None or (node.is_module and module is not node):
            raise SchemaError(
                f"Class '{node.qualified_name}' belongs to undeclared module '{node.module}'",
                class_name=node.qualified_name,
            )

    def _check_superclass(self, node: ClassNode, graph: SchemaGraph) -> None:
        superclass = node.superclass
        if superclass is None:
            return
        if superclass not in graph:
            raise SchemaError(
                f"Class '{node.qualified_name}' extends undeclared class '{superclass.qualified_name}'",
                class_name=node.qualified_name,
            )
        if superclass.is_module != node.is_module:
            what = "module" if node.is_module else "class"
            raise SchemaError(
                f"The {what} '{node.qualified_name}' cannot extend '{superclass.qualified_name}'",
                class_name=node.qualified_name,
            )
        if superclass.kind == ClassKind.FINAL:
            raise SchemaError(
                f"Class '{node.qualified_name}' extends final class '{superclass.qualified_name}'",
                class_name=node.qualified_name,
            )

    def _check_type_references(self, graph: SchemaGraph) -> None:
        """Every class-typed property must point at a class of this graph."""
        for node in graph.classes:
            for prop in node.own_properties:
                stack = [prop.type]
                while stack:
                    type_ref = stack.pop()
                    stack.extend(type_ref.type_args)
                    if type_ref.kind != TypeKind.CLASS:
                        continue
                    if type_ref.target is None or type_ref.target not in graph:
                        raise SchemaError(
                            f"Property '{prop.name}' of '{node.qualified_name}' references undeclared type '{type_ref.name}'",
                            class_name=node.qualified_name,
                            property_name=prop.name,
                        )

    def _partition(self, order: list[ClassNode]) -> list[list[ClassNode]]:
        """Split an ancestor-first order into independent inheritance trees."""
        trees: dict[ClassNode, list[ClassNode]] = {}
        for node in order:
            ancestors = node.ancestors()
            root = ancestors[-1] if ancestors else node
            trees.setdefault(root, []).append(node)
        return list(trees.values())

    def _resolve_all(self, nodes: list[ClassNode]) -> None:
        for node in nodes:
            self._resolve_one(node)

    def _resolve_one(self, node: ClassNode) -> ResolvedClass:
        """Resolve one class, reusing the memoized result if there is one."""
        existing = self._resolved.get(node)
        if existing is not None:
            return existing

        parent = self._resolve_one(node.superclass) if node.superclass is not None else None

        # Rejects duplicate property names anywhere in the chain
        properties = self.flattener.flatten_node(node)

        interface = self.naming.interfaces.get(node) if node.kind.has_interface else None
        record = self.naming.records.get(node) if node.kind.has_record else None

        contracts: list[TypeName] = [interface] if interface else []
        if parent is not None:
            contracts.extend(c for c in parent.contracts if c not in contracts)

        resolved = ResolvedClass(
            node=node,
            qualified_name=node.qualified_name,
            interface=interface,
            interface_extends=parent.interface if interface and parent else None,
            record=record,
            implements=list(contracts) if record else [],
            contracts=contracts,
            properties=properties,
            container=self.naming.containers[node.module],
        )
        logger.debug(
            "Resolved '%s': interface=%s extends=%s record=%s implements=%s",
            node.qualified_name,
            interface,
            resolved.interface_extends,
            record,
            [str(c) for c in resolved.implements],
        )

        with self._lock:
            return self._resolved.setdefault(node, resolved)
