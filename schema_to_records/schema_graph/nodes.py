"""
Schema graph node definitions.

These nodes represent the validated input class hierarchy. A graph is built
once per run and is never mutated by the generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ClassKind(str, Enum):
    """Extensibility of a schema class."""

    FINAL = "final"  # Concrete, cannot be extended
    OPEN = "open"  # Concrete, can be extended
    ABSTRACT = "abstract"  # Not instantiable, can be extended

    @property
    def has_interface(self) -> bool:
        return self in (ClassKind.ABSTRACT, ClassKind.OPEN)

    @property
    def has_record(self) -> bool:
        return self in (ClassKind.OPEN, ClassKind.FINAL)


class TypeKind(Enum):
    """Kind of a property type."""

    PRIMITIVE = "primitive"  # Boolean, Int, Float, Number, String, Any
    CLASS = "class"  # Reference to a schema class
    CONTAINER = "container"  # List<T>, Set<T>, Map<K, V>
    NULLABLE = "nullable"  # T?


PRIMITIVE_TYPES = {"Boolean", "Int", "Float", "Number", "String", "Any"}

CONTAINER_ARITY = {"List": 1, "Set": 1, "Map": 2}


@dataclass
class TypeRef:
    """A semantic type reference."""

    kind: TypeKind = TypeKind.PRIMITIVE
    name: str = ""  # Primitive or container name; qualified class name for CLASS

    # For containers and the nullable wrapper
    type_args: list[TypeRef] = field(default_factory=list)

    # For CLASS references, set when the graph is linked
    target: ClassNode | None = field(default=None, compare=False, repr=False)

    def referenced_classes(self) -> list[ClassNode]:
        """Return every class this type mentions, outermost first."""
        found = [self.target] if self.kind == TypeKind.CLASS and self.target is not None else []
        for arg in self.type_args:
            found.extend(arg.referenced_classes())
        return found

    def __str__(self) -> str:
        if self.kind == TypeKind.NULLABLE:
            return f"{self.type_args[0]}?"
        if self.kind == TypeKind.CONTAINER:
            return f"{self.name}<{', '.join(str(a) for a in self.type_args)}>"
        return self.name


@dataclass
class PropertyDecl:
    """A property declared on a schema class."""

    name: str = ""
    type: TypeRef = field(default_factory=TypeRef)
    nullable: bool = False
    doc: str | None = None


@dataclass(eq=False)
class ClassNode:
    """A schema class or module.

    Nodes compare and hash by identity so that resolved artifacts can be
    memoized per class.
    """

    name: str = ""
    kind: ClassKind = ClassKind.FINAL
    superclass: ClassNode | None = field(default=None, repr=False)
    own_properties: list[PropertyDecl] = field(default_factory=list)
    doc: str | None = None

    # Modules are implicit classes that also contain other classes
    is_module: bool = False
    module: str = ""  # Name of the enclosing module (the module's own name for modules)

    @property
    def qualified_name(self) -> str:
        if self.is_module or not self.module:
            return self.name
        return f"{self.module}.{self.name}"

    def ancestors(self) -> list[ClassNode]:
        """Return superclasses nearest-first, stopping if a cycle is detected."""
        chain: list[ClassNode] = []
        seen = {id(self)}
        current = self.superclass
        while current is not None and id(current) not in seen:
            chain.append(current)
            seen.add(id(current))
            current = current.superclass
        return chain


@dataclass
class SchemaGraph:
    """The complete input hierarchy."""

    # Module nodes in declaration order
    modules: list[ClassNode] = field(default_factory=list)

    # Every node (modules and their classes) in declaration order
    classes: list[ClassNode] = field(default_factory=list)

    def get(self, qualified_name: str) -> ClassNode | None:
        """Look up a node by its qualified name."""
        for node in self.classes:
            if node.qualified_name == qualified_name:
                return node
        return None

    def classes_of(self, module: ClassNode) -> list[ClassNode]:
        """Return the non-module classes declared in a module, in declaration order."""
        return [c for c in self.classes if not c.is_module and c.module == module.name]

    def module_of(self, node: ClassNode) -> ClassNode | None:
        """Return the module node enclosing a class."""
        for module in self.modules:
            if module.name == node.module:
                return module
        return None

    def __contains__(self, node: object) -> bool:
        return any(node is c for c in self.classes)
