"""
Error types raised by the record generator.

All errors are fatal for a generation run: nothing is written when one is raised.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for all generation failures."""

    pass


class SchemaError(GeneratorError):
    """Raised when the input schema graph is ill-formed.

    This can happen when:
    - Ancestry is cyclic
    - Two classes in one inheritance chain declare the same property
    - A superclass or a property type references an undeclared class
    - A class extends a module (or a module extends a class)

    Attributes:
        class_name: Qualified name of the offending class, if known
        property_name: Name of the offending property, if any
        declaring_classes: Qualified names of the classes involved in a conflict
    """

    def __init__(
        self,
        message: str,
        class_name: str | None = None,
        property_name: str | None = None,
        declaring_classes: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.class_name = class_name
        self.property_name = property_name
        self.declaring_classes = tuple(declaring_classes)


class ConfigurationError(GeneratorError):
    """Raised when generation options are malformed or conflict with each other.

    Attributes:
        option: Name of the offending option, if a single one is to blame
    """

    def __init__(self, message: str, option: str | None = None):
        super().__init__(message)
        self.option = option


class EmissionError(GeneratorError):
    """Raised when a backend cannot render a descriptor."""

    pass
