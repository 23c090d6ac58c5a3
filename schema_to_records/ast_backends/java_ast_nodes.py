"""
Java AST node definitions.

These nodes represent the structure of Java source files for code generation.
They are used to build a Java AST which is then serialized to source code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class AccessModifier(str, Enum):
    """Java access modifiers."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    PACKAGE = ""  # Package-private or implicit (interface members)


class MemberModifier(str, Enum):
    """Java member modifiers."""

    STATIC = "static"
    FINAL = "final"
    ABSTRACT = "abstract"


@dataclass
class JavaNode:
    """Base class for all Java AST nodes."""

    pass


@dataclass
class JavaAnnotation(JavaNode):
    """Represents an annotation (e.g., @Builder)."""

    name: str = ""
    arguments: list[str] = field(default_factory=list)

    def to_string(self) -> str:
        """Convert to annotation string."""
        if self.arguments:
            return f"@{self.name}({', '.join(self.arguments)})"
        return f"@{self.name}"


@dataclass
class JavaParameter(JavaNode):
    """Represents a method/constructor parameter or a record component."""

    name: str = ""
    type_name: str = ""
    is_final: bool = False


@dataclass
class JavaField(JavaNode):
    """Represents a class field."""

    name: str = ""
    type_name: str = ""
    access: AccessModifier = AccessModifier.PUBLIC
    modifiers: list[MemberModifier] = field(default_factory=list)


@dataclass
class JavaConstructor(JavaNode):
    """Represents a class constructor."""

    class_name: str = ""
    access: AccessModifier = AccessModifier.PUBLIC
    parameters: list[JavaParameter] = field(default_factory=list)
    body: list[str] = field(default_factory=list)


@dataclass
class JavaMethod(JavaNode):
    """Represents a method. A method without a body is abstract."""

    name: str = ""
    return_type: str = "void"
    access: AccessModifier = AccessModifier.PUBLIC
    modifiers: list[MemberModifier] = field(default_factory=list)
    parameters: list[JavaParameter] = field(default_factory=list)
    body: list[str] | None = None
    javadoc: list[str] = field(default_factory=list)
    annotations: list[JavaAnnotation] = field(default_factory=list)


@dataclass
class JavaTypeDeclaration(JavaNode):
    """Common parts of classes, records and interfaces."""

    name: str = ""
    access: AccessModifier = AccessModifier.PUBLIC
    modifiers: list[MemberModifier] = field(default_factory=list)
    annotations: list[JavaAnnotation] = field(default_factory=list)
    javadoc: list[str] = field(default_factory=list)
    methods: list[JavaMethod] = field(default_factory=list)
    nested_types: list[JavaTypeDeclaration] = field(default_factory=list)


@dataclass
class JavaInterface(JavaTypeDeclaration):
    """Represents an interface declaration."""

    extends: list[str] = field(default_factory=list)


@dataclass
class JavaRecord(JavaTypeDeclaration):
    """Represents a record declaration."""

    components: list[JavaParameter] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)


@dataclass
class JavaClass(JavaTypeDeclaration):
    """Represents a class declaration."""

    fields: list[JavaField] = field(default_factory=list)
    constructors: list[JavaConstructor] = field(default_factory=list)


@dataclass
class ImportDirective(JavaNode):
    """Represents an import statement."""

    name: str = ""


@dataclass
class JavaFile(JavaNode):
    """Represents a complete Java source file."""

    package: str = ""
    imports: list[ImportDirective] = field(default_factory=list)
    generation_comment: str = ""
    types: list[JavaTypeDeclaration] = field(default_factory=list)
