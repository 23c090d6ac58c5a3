"""
Configuration for the record generator.
"""

from __future__ import annotations

import keyword
import re
from dataclasses import dataclass, fields

from .errors import ConfigurationError

# Nullability marker used when no override is configured
DEFAULT_NULLABILITY_MARKER = "org.checkerframework.checker.nullness.qual.NonNull"

SUPPORTED_LANGUAGES = ("java", "python")

_JAVA_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Java keywords and literals that cannot appear as a name segment
JAVA_RESERVED_WORDS = {
    "abstract",
    "assert",
    "boolean",
    "break",
    "byte",
    "case",
    "catch",
    "char",
    "class",
    "const",
    "continue",
    "default",
    "do",
    "double",
    "else",
    "enum",
    "extends",
    "false",
    "final",
    "finally",
    "float",
    "for",
    "goto",
    "if",
    "implements",
    "import",
    "instanceof",
    "int",
    "interface",
    "long",
    "native",
    "new",
    "null",
    "package",
    "private",
    "protected",
    "public",
    "return",
    "short",
    "static",
    "strictfp",
    "super",
    "switch",
    "synchronized",
    "this",
    "throw",
    "throws",
    "transient",
    "true",
    "try",
    "void",
    "volatile",
    "while",
    "_",
}


def is_qualified_java_name(name: str, min_segments: int = 1) -> bool:
    """Check that a name is a dotted sequence of valid Java identifiers."""
    segments = name.split(".")
    if len(segments) < min_segments:
        return False
    return all(_JAVA_IDENTIFIER.match(s) and s not in JAVA_RESERVED_WORDS for s in segments)


@dataclass
class CodeGeneratorConfig:
    """Configuration options for record generation."""

    # Master switch for the interface/record decomposition
    enable_records: bool = True

    # Emit the copy-with protocol (Wither contract, Memento, with method)
    enable_withers: bool = False

    # Attach an opaque builder annotation to every generated record
    enable_external_builder_annotation: bool = False
    external_builder_annotation: str = "lombok.Builder"

    # Fully-qualified nullability marker (None = built-in default)
    nullability_marker: str | None = None

    # Prefix marking non-module interface names
    interface_prefix: str = "I"

    # Java package for generated sources (empty = default package)
    java_package: str = ""

    # Emit merged documentation blocks
    generate_javadoc: bool = True

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Java indentation unit
    indent: str = "  "

    @property
    def effective_nullability_marker(self) -> str:
        """The marker written at every nullability annotation site."""
        return self.nullability_marker or DEFAULT_NULLABILITY_MARKER

    def validate(self) -> None:
        """
        Check option values and combinations.

        Raises:
            ConfigurationError: On the first malformed or conflicting option
        """
        if self.nullability_marker is not None and not is_qualified_java_name(self.nullability_marker, min_segments=2):
            raise ConfigurationError(
                f"Nullability marker '{self.nullability_marker}' is not a fully-qualified annotation name",
                option="nullability_marker",
            )

        if not self.enable_records:
            if self.enable_withers:
                raise ConfigurationError("Withers require record generation to be enabled", option="enable_withers")
            if self.enable_external_builder_annotation:
                raise ConfigurationError(
                    "The builder annotation requires record generation to be enabled",
                    option="enable_external_builder_annotation",
                )

        if self.enable_external_builder_annotation and not is_qualified_java_name(self.external_builder_annotation, min_segments=2):
            raise ConfigurationError(
                f"Builder annotation '{self.external_builder_annotation}' is not a fully-qualified annotation name",
                option="external_builder_annotation",
            )

        if self.java_package and not is_qualified_java_name(self.java_package):
            raise ConfigurationError(f"Invalid Java package '{self.java_package}'", option="java_package")

        if self.interface_prefix and (not self.interface_prefix.isidentifier() or keyword.iskeyword(self.interface_prefix)):
            raise ConfigurationError(f"Invalid interface prefix '{self.interface_prefix}'", option="interface_prefix")

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        known = {f.name for f in fields(config)}
        for k, v in d.items():
            if k in known:
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "enable_records": self.enable_records,
            "enable_withers": self.enable_withers,
            "enable_external_builder_annotation": self.enable_external_builder_annotation,
            "external_builder_annotation": self.external_builder_annotation,
            "nullability_marker": self.nullability_marker,
            "interface_prefix": self.interface_prefix,
            "java_package": self.java_package,
            "generate_javadoc": self.generate_javadoc,
            "add_generation_comment": self.add_generation_comment,
            "indent": self.indent,
        }
