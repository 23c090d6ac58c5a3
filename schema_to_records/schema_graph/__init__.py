"""
Schema graph module.

Contains the input hierarchy nodes and the document loader.
"""

from __future__ import annotations

from .loader import SchemaLoader
from .nodes import (
    ClassKind,
    ClassNode,
    PropertyDecl,
    SchemaGraph,
    TypeKind,
    TypeRef,
)

__all__ = [
    "ClassKind",
    "ClassNode",
    "PropertyDecl",
    "SchemaGraph",
    "TypeKind",
    "TypeRef",
    "SchemaLoader",
]
