"""
IR (Intermediate Representation) node definitions.

These nodes are the structural decisions handed to a backend: which
interfaces and records exist, what they contain and how they relate.
Every name referenced by a descriptor is allocated by the same run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..schema_graph.nodes import ClassNode, PropertyDecl, TypeRef
from ..utils import doc_lines


@dataclass(frozen=True)
class TypeName:
    """A generated type identity: its simple name and the module container holding it."""

    name: str
    container: str

    @property
    def is_container(self) -> bool:
        return self.name == self.container

    @property
    def qualified(self) -> str:
        return self.name if self.is_container else f"{self.container}.{self.name}"

    def __str__(self) -> str:
        return self.qualified


@dataclass
class DocBlock:
    """Aggregate documentation: a lead block plus per-parameter entries."""

    lead: str | None = None
    params: list[tuple[str, str]] = field(default_factory=list)  # [(property name, doc), ...]

    def is_empty(self) -> bool:
        return not self.lead and not self.params

    def to_javadoc(self) -> list[str]:
        """Render as Javadoc comment lines, including the delimiters."""
        if self.is_empty():
            return []
        body = doc_lines(self.lead)
        if body and self.params:
            body.append("")
        for name, text in self.params:
            entry = doc_lines(text)
            body.append(f"@param {name} {entry[0]}")
            body.extend(f"    {line}" if line else "" for line in entry[1:])
        lines = ["/**"]
        # No comment terminator inside the block
        lines.extend(f" * {line.replace('*/', '*&#47;')}" if line else " *" for line in body)
        lines.append(" */")
        return lines

    def to_docstring(self) -> list[str]:
        """Render as Google-style docstring body lines (without quotes)."""
        body = doc_lines(self.lead)
        if self.params:
            if body:
                body.append("")
            body.append("Attributes:")
            for name, text in self.params:
                entry = doc_lines(text)
                body.append(f"    {name}: {entry[0]}")
                body.extend(f"        {line}" if line else "" for line in entry[1:])
        return body


@dataclass
class ComponentDescriptor:
    """One record component (a flattened property)."""

    name: str = ""
    type_ref: TypeRef | None = None
    nullable: bool = False
    doc: str | None = None

    # Qualified name of the schema class declaring the property
    declared_in: str = ""


@dataclass
class AccessorSignature:
    """An abstract accessor declared by an interface."""

    name: str = ""
    type_ref: TypeRef | None = None
    nullable: bool = False
    doc: str | None = None


@dataclass
class InterfaceDescriptor:
    """A capability contract: accessors only, no storage."""

    name: str = ""
    extends: TypeName | None = None
    methods: list[AccessorSignature] = field(default_factory=list)
    doc: DocBlock = field(default_factory=DocBlock)

    # Name of the module container type this interface lives in
    container: str = ""
    module: str = ""
    is_container: bool = False

    source: ClassNode | None = field(default=None, compare=False, repr=False)

    @property
    def type_name(self) -> TypeName:
        return TypeName(self.name, self.container)


@dataclass
class MementoDescriptor:
    """The mutable staging type used by a record's with method."""

    name: str = "Memento"
    record_name: str = ""
    fields: list[ComponentDescriptor] = field(default_factory=list)

    # Copy constructor from the record and the finalizer building a new record
    constructor_access: str = "private"
    finalizer_name: str = "build"
    finalizer_access: str = "private"


@dataclass
class WitherMethodDescriptor:
    """The public entry point of the copy-with protocol on a record."""

    name: str = "with"
    record_name: str = ""
    staging_name: str = ""  # e.g. "Circle.Memento"
    parameter_name: str = "setter"
    nullability_marker: str = ""


@dataclass
class WitherContractDescriptor:
    """The shared generic contract Wither<R, S>, emitted once per run."""

    name: str = "Wither"
    record_parameter: str = "R"
    staging_parameter: str = "S"
    record_bound: str = "Record"
    method_name: str = "with"
    parameter_name: str = "setter"
    nullability_marker: str = ""


@dataclass
class RecordDescriptor:
    """An immutable data carrier with the full flattened component list."""

    name: str = ""
    components: list[ComponentDescriptor] = field(default_factory=list)
    implements: list[TypeName] = field(default_factory=list)
    memento: MementoDescriptor | None = None
    wither: WitherMethodDescriptor | None = None
    doc: DocBlock = field(default_factory=DocBlock)

    # Fully-qualified opaque annotations (e.g. a builder annotation)
    decorations: list[str] = field(default_factory=list)

    container: str = ""
    module: str = ""
    is_container: bool = False

    source: ClassNode | None = field(default=None, compare=False, repr=False)

    @property
    def type_name(self) -> TypeName:
        return TypeName(self.name, self.container)


@dataclass
class ResolvedClass:
    """Resolution result for one schema class."""

    node: ClassNode | None = field(default=None, compare=False, repr=False)
    qualified_name: str = ""

    interface: TypeName | None = None
    interface_extends: TypeName | None = None  # Superclass interface, if any

    record: TypeName | None = None
    implements: list[TypeName] = field(default_factory=list)  # Own interface first, then ancestors nearest-first

    # Every interface of the class and its ancestors, nearest-first (set even without a record)
    contracts: list[TypeName] = field(default_factory=list)

    # Flattened properties paired with their declaring classes, root ancestor first
    properties: tuple[tuple[PropertyDecl, ClassNode], ...] = field(default=(), repr=False)

    # Container type of the enclosing module
    container: str = ""

    @property
    def interface_name(self) -> str | None:
        return self.interface.name if self.interface else None

    @property
    def record_name(self) -> str | None:
        return self.record.name if self.record else None

    @property
    def has_interface(self) -> bool:
        return self.interface is not None

    @property
    def has_record(self) -> bool:
        return self.record is not None

    @property
    def type_name(self) -> TypeName | None:
        """Type used when a property refers to this class: the contract if there is one."""
        return self.interface or self.record


@dataclass
class GenerationResult:
    """The complete structural output of a run."""

    interfaces: list[InterfaceDescriptor] = field(default_factory=list)
    records: list[RecordDescriptor] = field(default_factory=list)

    # Exactly one when withers are enabled
    wither_contract: WitherContractDescriptor | None = None

    # Resolution per class, in ancestor-first order
    resolved: dict[ClassNode, ResolvedClass] = field(default_factory=dict, compare=False, repr=False)

    def interface(self, name: str, container: str) -> InterfaceDescriptor | None:
        return next((i for i in self.interfaces if i.name == name and i.container == container), None)

    def record(self, name: str, container: str) -> RecordDescriptor | None:
        return next((r for r in self.records if r.name == name and r.container == container), None)
