"""
Java AST Serializer.

Converts Java AST nodes to properly-formatted Java source code.
Follows common Java style:
- K&R braces
- Configurable indentation (two spaces by default)
- Blank line between members
- Annotations on separate lines above type declarations
"""

from __future__ import annotations

from .java_ast_nodes import (
    JavaClass,
    JavaConstructor,
    JavaField,
    JavaFile,
    JavaInterface,
    JavaMethod,
    JavaParameter,
    JavaRecord,
    JavaTypeDeclaration,
)

# Record headers longer than this put one component per line
MAX_HEADER_LENGTH = 100


class JavaSerializer:
    """Serializes Java AST nodes to source code."""

    def __init__(self, indent: str = "  "):
        self.INDENT = indent

    def serialize(self, file: JavaFile) -> str:
        """Serialize a complete Java file to source code."""
        lines: list[str] = []

        if file.generation_comment:
            lines.append(file.generation_comment)
            lines.append("")

        if file.package:
            lines.append(f"package {file.package};")
            lines.append("")

        for directive in sorted(file.imports, key=lambda d: d.name):
            lines.append(f"import {directive.name};")
        if file.imports:
            lines.append("")

        for i, decl in enumerate(file.types):
            if i > 0:
                lines.append("")
            lines.extend(self._serialize_type(decl, 0))

        return "\n".join(lines) + "\n"

    def _serialize_type(self, decl: JavaTypeDeclaration, indent: int) -> list[str]:
        """Serialize a class, record or interface declaration with its members."""
        prefix = self.INDENT * indent
        lines = [f"{prefix}{line}" for line in decl.javadoc]

        for annotation in decl.annotations:
            lines.append(f"{prefix}{annotation.to_string()}")

        lines.extend(self._serialize_header(decl, prefix))

        blocks: list[list[str]] = []
        if isinstance(decl, JavaClass):
            if decl.fields:
                blocks.append([line for f in decl.fields for line in self._serialize_field(f, indent + 1)])
            for constructor in decl.constructors:
                blocks.append(self._serialize_constructor(constructor, indent + 1))
        for method in decl.methods:
            blocks.append(self._serialize_method(method, indent + 1))
        for nested in decl.nested_types:
            blocks.append(self._serialize_type(nested, indent + 1))

        for i, block in enumerate(blocks):
            if i > 0:
                lines.append("")
            lines.extend(block)

        lines.append(f"{prefix}}}")
        return lines

    def _serialize_header(self, decl: JavaTypeDeclaration, prefix: str) -> list[str]:
        """Serialize the declaration line(s) up to and including the opening brace."""
        modifiers = self._modifiers(decl.access.value, [m.value for m in decl.modifiers])

        if isinstance(decl, JavaInterface):
            header = f"{modifiers}interface {decl.name}"
            if decl.extends:
                header += f" extends {', '.join(decl.extends)}"
            return [f"{prefix}{header} {{"]

        if isinstance(decl, JavaRecord):
            implements = f" implements {', '.join(decl.implements)}" if decl.implements else ""
            components = [self._serialize_parameter(c) for c in decl.components]
            header = f"{prefix}{modifiers}record {decl.name}({', '.join(components)}){implements} {{"
            if len(header) <= MAX_HEADER_LENGTH or len(components) < 2:
                return [header]
            inner = prefix + self.INDENT * 2
            lines = [f"{prefix}{modifiers}record {decl.name}("]
            lines.extend(f"{inner}{c}," for c in components[:-1])
            lines.append(f"{inner}{components[-1]}){implements} {{")
            return lines

        return [f"{prefix}{modifiers}class {decl.name} {{"]

    def _serialize_field(self, field: JavaField, indent: int) -> list[str]:
        """Serialize a field declaration."""
        prefix = self.INDENT * indent
        modifiers = self._modifiers(field.access.value, [m.value for m in field.modifiers])
        return [f"{prefix}{modifiers}{field.type_name} {field.name};"]

    def _serialize_constructor(self, constructor: JavaConstructor, indent: int) -> list[str]:
        """Serialize a constructor."""
        prefix = self.INDENT * indent
        modifiers = self._modifiers(constructor.access.value, [])
        params = ", ".join(self._serialize_parameter(p) for p in constructor.parameters)
        lines = [f"{prefix}{modifiers}{constructor.class_name}({params}) {{"]
        lines.extend(f"{prefix}{self.INDENT}{statement}" for statement in constructor.body)
        lines.append(f"{prefix}}}")
        return lines

    def _serialize_method(self, method: JavaMethod, indent: int) -> list[str]:
        """Serialize a method; abstract methods end with a semicolon."""
        prefix = self.INDENT * indent
        lines = [f"{prefix}{line}" for line in method.javadoc]
        lines.extend(f"{prefix}{annotation.to_string()}" for annotation in method.annotations)

        modifiers = self._modifiers(method.access.value, [m.value for m in method.modifiers])
        params = ", ".join(self._serialize_parameter(p) for p in method.parameters)
        signature = f"{prefix}{modifiers}{method.return_type} {method.name}({params})"

        if method.body is None:
            lines.append(f"{signature};")
            return lines

        lines.append(f"{signature} {{")
        lines.extend(f"{prefix}{self.INDENT}{statement}" for statement in method.body)
        lines.append(f"{prefix}}}")
        return lines

    def _serialize_parameter(self, param: JavaParameter) -> str:
        final = "final " if param.is_final else ""
        return f"{final}{param.type_name} {param.name}"

    def _modifiers(self, access: str, modifiers: list[str]) -> str:
        """Join access and modifiers with a trailing space (empty when there are none)."""
        words = [w for w in [access, *modifiers] if w]
        return " ".join(words) + " " if words else ""
