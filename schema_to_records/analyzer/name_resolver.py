"""
Name resolver for interface and record identities.

Allocates every generated type name up front, in declaration order, so
that the hierarchy resolver only has to look names up. Each module is a
namespace: its container type names are registered first, then each
class's interface and record. A name that is already taken gets the
smallest integer suffix (2, 3, ...) that makes it unique.
"""

from __future__ import annotations

import keyword
import logging
from dataclasses import dataclass, field

from ..config import JAVA_RESERVED_WORDS
from ..schema_graph.nodes import ClassKind, ClassNode, SchemaGraph
from ..utils import to_pascal_case
from .ir_nodes import TypeName

logger = logging.getLogger(__name__)

# Lower-cased words that cannot be used as a type name in any target
RESERVED_TYPE_NAMES = JAVA_RESERVED_WORDS | {kw.lower() for kw in keyword.kwlist}

# Platform types the generated Java refers to by simple name
SHADOWED_TYPE_NAMES = {"Boolean", "Consumer", "Double", "List", "Long", "Map", "Number", "Object", "Override", "Record", "Set", "String"}

# Suffix appended to reserved and shadowing type names
RESERVED_SUFFIX = "Type"

# Suffix of the record of an open module (the interface takes the module's name)
OPEN_MODULE_RECORD_SUFFIX = "Impl"

# Names used by the copy-with protocol, never given to schema types
PROTOCOL_NAMES = ("Wither", "Memento")


@dataclass
class NameMapping:
    """Result of name resolution."""

    # Module name -> container type name
    containers: dict[str, str] = field(default_factory=dict)

    # Allocated identities per class
    interfaces: dict[ClassNode, TypeName] = field(default_factory=dict)
    records: dict[ClassNode, TypeName] = field(default_factory=dict)


class NameResolver:
    """Derives interface and record names from class names and kinds."""

    def __init__(self, interface_prefix: str = "I"):
        """
        Initialize the resolver.

        Args:
            interface_prefix: Marker prepended to non-module interface names
        """
        self.interface_prefix = interface_prefix

    def resolve_names(self, graph: SchemaGraph) -> NameMapping:
        """
        Resolve all names in the graph.

        Args:
            graph: The schema graph

        Returns:
            NameMapping with an identity for every interface and record
        """
        mapping = NameMapping()
        containers: set[str] = set(PROTOCOL_NAMES)

        for module in graph.modules:
            container = self._unique(self._escape(to_pascal_case(module.name)), containers)
            taken: set[str] = set(PROTOCOL_NAMES) | {container}
            mapping.containers[module.name] = container

            if module.kind == ClassKind.FINAL:
                mapping.records[module] = TypeName(container, container)
            elif module.kind == ClassKind.OPEN:
                mapping.interfaces[module] = TypeName(container, container)
                record = self._unique(container + OPEN_MODULE_RECORD_SUFFIX, taken)
                mapping.records[module] = TypeName(record, container)
            else:
                mapping.interfaces[module] = TypeName(container, container)

            for node in graph.classes_of(module):
                if node.kind.has_interface:
                    name = self._unique(self._escape(self.interface_prefix + node.name), taken)
                    mapping.interfaces[node] = TypeName(name, container)
                if node.kind.has_record:
                    name = self._unique(self._escape(node.name), taken)
                    mapping.records[node] = TypeName(name, container)

            logger.debug("Module '%s' allocates names %s", module.name, sorted(taken))

        return mapping

    def _unique(self, base: str, taken: set[str]) -> str:
        """Claim a name in a namespace, suffixing it when already taken."""
        name = base
        counter = 2
        while name in taken:
            name = f"{base}{counter}"
            counter += 1
        if name != base:
            logger.debug("Name '%s' is taken, using '%s'", base, name)
        taken.add(name)
        return name

    def _escape(self, name: str) -> str:
        """Suffix names that clash with a reserved word or a platform type of a target language."""
        if name.lower() in RESERVED_TYPE_NAMES or name in SHADOWED_TYPE_NAMES:
            return name + RESERVED_SUFFIX
        return name
