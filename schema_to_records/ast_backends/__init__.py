"""
AST backends.

Each backend turns the generation result into language-native AST nodes
and renders them to source files.
"""

from __future__ import annotations

from .base import AstBackend
from .java_ast_backend import JavaAstBackend
from .java_serializer import JavaSerializer
from .python_ast_backend import PythonAstBackend

__all__ = [
    "AstBackend",
    "JavaAstBackend",
    "JavaSerializer",
    "PythonAstBackend",
]
