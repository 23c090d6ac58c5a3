"""
Base class for AST-based code generation backends.

Defines the interface that all language-specific AST backends must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import jinja2

from ..analyzer.ir_nodes import GenerationResult, InterfaceDescriptor, RecordDescriptor, TypeName
from ..config import CodeGeneratorConfig
from ..errors import EmissionError
from ..schema_graph.nodes import TypeRef

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class AstBackend(ABC):
    """Abstract base class for AST-based code generation backends."""

    # Type mapping from schema primitives to language types
    TYPE_MAP: dict[str, str] = {}

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self.jinja_env = jinja2.Environment(lstrip_blocks=True, trim_blocks=True, keep_trailing_newline=True)

        # Set by generate()
        self.result: GenerationResult | None = None

    @abstractmethod
    def generate(self, result: GenerationResult, generation_comment: str = "") -> dict[str, str]:
        """
        Generate code from the generation result.

        Args:
            result: The resolved descriptors
            generation_comment: Comment line to put at the top of every file

        Returns:
            Mapping from relative output path to source code
        """

    @abstractmethod
    def translate_type(self, type_ref: TypeRef, nullable: bool = False, context: str = "") -> str:
        """
        Translate a schema type to a language-specific type string.

        Args:
            type_ref: The type reference
            nullable: Whether the property holding the type may be null
            context: Container type the reference is written in

        Returns:
            Language-specific type string
        """

    def render_template(self, name: str, **context) -> str:
        """Render a jinja2 template from the templates directory."""
        template = self.jinja_env.from_string((TEMPLATES_DIR / name).read_text(encoding="utf-8"))
        return template.render(**context)

    def ordered_descriptors(self) -> list[InterfaceDescriptor | RecordDescriptor]:
        """Return every descriptor in resolution order, a class's interface before its record."""
        interfaces = {i.source: i for i in self.result.interfaces}
        records = {r.source: r for r in self.result.records}

        descriptors: list[InterfaceDescriptor | RecordDescriptor] = []
        for node in self.result.resolved:
            if node in interfaces:
                descriptors.append(interfaces[node])
            if node in records:
                descriptors.append(records[node])
        return descriptors

    def referenced_type(self, type_ref: TypeRef) -> TypeName:
        """Return the generated type a class reference maps to: its interface if it has one."""
        resolution = self.result.resolved.get(type_ref.target) if type_ref.target is not None else None
        if resolution is None or resolution.type_name is None:
            raise EmissionError(f"Type '{type_ref.name}' has no generated counterpart")
        return resolution.type_name

    def member_name(self, name: str) -> str:
        """Escape a property name the target language does not accept."""
        return name

    def member_names(self, descriptor: InterfaceDescriptor | RecordDescriptor) -> dict[str, str]:
        """
        Allocate the emitted member names of a class's flattened properties.

        Names are claimed root-first, so an interface and every record
        implementing it agree on the names they share. An escaped name that
        is already taken is escaped again.

        Returns:
            Mapping from property name to member name
        """
        resolution = self.result.resolved.get(descriptor.source)
        if resolution is None:
            raise EmissionError(f"'{descriptor.name}' has no resolved schema class")

        names: dict[str, str] = {}
        taken: set[str] = set()
        for prop, _ in resolution.properties:
            name = self.member_name(prop.name)
            while name in taken:
                name = self.member_name(name + "_")
            taken.add(name)
            names[prop.name] = name
        return names

    def _get_comment_prefix(self) -> str:
        """Get the comment prefix for the language."""
        return "#" if self.FILE_EXTENSION == "py" else "//"
