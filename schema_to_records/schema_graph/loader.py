"""
Schema document loader that builds a SchemaGraph.

Reads the JSON form of a schema:

    {
      "modules": [
        {
          "name": "shapes",
          "kind": "final",
          "doc": "Shapes module.",
          "extends": null,
          "properties": [{"name": "title", "type": "String"}],
          "classes": [
            {"name": "Shape", "kind": "abstract", "properties": [...]},
            {"name": "Circle", "extends": "Shape", "properties": [...]}
          ]
        }
      ]
    }

Nodes are created in a first pass and linked in a second one, so a
superclass may be declared after its subclass. Cycles are left in place for
the resolver to report.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from ..errors import SchemaError
from .nodes import (
    CONTAINER_ARITY,
    PRIMITIVE_TYPES,
    ClassKind,
    ClassNode,
    PropertyDecl,
    SchemaGraph,
    TypeKind,
    TypeRef,
)

logger = logging.getLogger(__name__)

# Module, class and property names
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SchemaLoader:
    """Loads a schema document into a SchemaGraph."""

    def load(self, document: dict[str, Any]) -> SchemaGraph:
        """
        Load a schema document.

        Args:
            document: The parsed JSON schema document

        Returns:
            A linked SchemaGraph

        Raises:
            SchemaError: If the document is malformed or references undeclared classes
        """
        modules = document.get("modules") if isinstance(document, dict) else None
        if not isinstance(modules, list):
            raise SchemaError("Schema document must contain a 'modules' list")

        graph = SchemaGraph()
        # (node, raw definition) pairs kept for the linking pass
        pending: list[tuple[ClassNode, dict[str, Any]]] = []

        for module_def in modules:
            module_node = self._create_node(module_def, module_name=None)
            if graph.get(module_node.qualified_name) is not None:
                raise SchemaError(f"Duplicate module '{module_node.name}'", class_name=module_node.name)
            graph.modules.append(module_node)
            graph.classes.append(module_node)
            pending.append((module_node, module_def))

            for class_def in self._list(module_def, "classes", module_node.name):
                class_node = self._create_node(class_def, module_name=module_node.name)
                if graph.get(class_node.qualified_name) is not None:
                    raise SchemaError(
                        f"Duplicate class '{class_node.qualified_name}'",
                        class_name=class_node.qualified_name,
                    )
                graph.classes.append(class_node)
                pending.append((class_node, class_def))

        for node, raw in pending:
            self._link(node, raw, graph)

        logger.debug("Loaded %d modules, %d classes", len(graph.modules), len(graph.classes))
        return graph

    def _create_node(self, raw: Any, module_name: str | None) -> ClassNode:
        """Create an unlinked node from its raw definition."""
        what = "Module" if module_name is None else f"Class in module '{module_name}'"
        if not isinstance(raw, dict):
            raise SchemaError(f"{what} must be an object, got {type(raw).__name__}")

        name = raw.get("name")
        if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
            raise SchemaError(f"{what} has an invalid name {name!r}")

        kind_str = raw.get("kind", ClassKind.FINAL.value)
        try:
            kind = ClassKind(kind_str)
        except ValueError:
            raise SchemaError(f"Unknown class kind '{kind_str}' for '{name}'", class_name=name) from None

        is_module = module_name is None
        node = ClassNode(
            name=name,
            kind=kind,
            doc=self._optional_string(raw, "doc", name),
            is_module=is_module,
            module=name if is_module else module_name,
        )
        self._optional_string(raw, "extends", node.qualified_name)

        seen: set[str] = set()
        for prop_def in self._list(raw, "properties", node.qualified_name):
            prop = self._create_property(prop_def, node)
            if prop.name in seen:
                raise SchemaError(
                    f"Property '{prop.name}' declared twice in '{node.qualified_name}'",
                    class_name=node.qualified_name,
                    property_name=prop.name,
                    declaring_classes=(node.qualified_name,),
                )
            seen.add(prop.name)
            node.own_properties.append(prop)

        return node

    def _create_property(self, raw: Any, node: ClassNode) -> PropertyDecl:
        owner = node.qualified_name
        if not isinstance(raw, dict):
            raise SchemaError(f"Property of '{owner}' must be an object, got {type(raw).__name__}", class_name=owner)

        name = raw.get("name")
        if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
            raise SchemaError(f"Property of '{owner}' has an invalid name {name!r}", class_name=owner)

        type_text = raw.get("type")
        if not isinstance(type_text, str):
            raise SchemaError(
                f"Property '{name}' of '{owner}' needs a type string, got {type_text!r}",
                class_name=owner,
                property_name=name,
            )

        return PropertyDecl(
            name=name,
            type=self.parse_type(type_text, owner),
            nullable=bool(raw.get("nullable", False)),
            doc=self._optional_string(raw, "doc", owner),
        )

    def _list(self, raw: dict[str, Any], key: str, owner: str) -> list[Any]:
        value = raw.get(key, [])
        if not isinstance(value, list):
            raise SchemaError(f"'{key}' of '{owner}' must be a list", class_name=owner)
        return value

    def _optional_string(self, raw: dict[str, Any], key: str, owner: str) -> str | None:
        value = raw.get(key)
        if value is not None and not isinstance(value, str):
            raise SchemaError(f"'{key}' of '{owner}' must be a string", class_name=owner)
        return value

    def _link(self, node: ClassNode, raw: dict[str, Any], graph: SchemaGraph) -> None:
        """Resolve the superclass and class-typed properties of a node."""
        extends = raw.get("extends")
        if extends:
            superclass = self._lookup(extends, node, graph)
            if superclass is None:
                raise SchemaError(
                    f"Class '{node.qualified_name}' extends undeclared class '{extends}'",
                    class_name=node.qualified_name,
                )
            node.superclass = superclass

        for prop in node.own_properties:
            self._link_type(prop.type, node, prop, graph)

    def _link_type(self, type_ref: TypeRef, node: ClassNode, prop: PropertyDecl, graph: SchemaGraph) -> None:
        if type_ref.kind == TypeKind.CLASS:
            target = self._lookup(type_ref.name, node, graph)
            if target is None:
                raise SchemaError(
                    f"Property '{prop.name}' of '{node.qualified_name}' references undeclared type '{type_ref.name}'",
                    class_name=node.qualified_name,
                    property_name=prop.name,
                )
            type_ref.target = target
            type_ref.name = target.qualified_name
        for arg in type_ref.type_args:
            self._link_type(arg, node, prop, graph)

    def _lookup(self, name: str, context: ClassNode, graph: SchemaGraph) -> ClassNode | None:
        """Find a class by name, trying the context's module first."""
        if "." not in name:
            local = graph.get(f"{context.module}.{name}")
            if local is not None:
                return local
        return graph.get(name)

    def parse_type(self, text: str, owner: str = "") -> TypeRef:
        """
        Parse a type expression such as ``Map<String, List<shapes.Circle>>?``.

        Args:
            text: The type expression
            owner: Qualified name of the declaring class (for error messages)

        Returns:
            An unlinked TypeRef
        """
        text = text.strip()
        if not text:
            raise SchemaError(f"Empty type expression in '{owner}'", class_name=owner)

        if text.endswith("?"):
            return TypeRef(kind=TypeKind.NULLABLE, type_args=[self.parse_type(text[:-1], owner)])

        if "<" in text:
            if not text.endswith(">"):
                raise SchemaError(f"Malformed type expression '{text}' in '{owner}'", class_name=owner)
            name, _, inner = text[:-1].partition("<")
            name = name.strip()
            if name not in CONTAINER_ARITY:
                raise SchemaError(f"Unknown container type '{name}' in '{owner}'", class_name=owner)
            args = [self.parse_type(part, owner) for part in self._split_type_args(inner, owner)]
            if len(args) != CONTAINER_ARITY[name]:
                raise SchemaError(
                    f"Container '{name}' expects {CONTAINER_ARITY[name]} type argument(s) in '{owner}'",
                    class_name=owner,
                )
            return TypeRef(kind=TypeKind.CONTAINER, name=name, type_args=args)

        if text in PRIMITIVE_TYPES:
            return TypeRef(kind=TypeKind.PRIMITIVE, name=text)

        return TypeRef(kind=TypeKind.CLASS, name=text)

    def _split_type_args(self, inner: str, owner: str) -> list[str]:
        """Split comma-separated type arguments at nesting depth zero."""
        parts = []
        depth = 0
        current = ""
        for char in inner:
            if char == "<":
                depth += 1
            elif char == ">":
                depth -= 1
                if depth < 0:
                    raise SchemaError(f"Unbalanced '>' in type arguments '{inner}' in '{owner}'", class_name=owner)
            if char == "," and depth == 0:
                parts.append(current)
                current = ""
            else:
                current += char
        if depth != 0:
            raise SchemaError(f"Unbalanced '<' in type arguments '{inner}' in '{owner}'", class_name=owner)
        parts.append(current)
        return parts
