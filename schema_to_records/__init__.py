"""Schema to Records

Generates interface/record pairs from a class hierarchy schema. Every
concrete class becomes an immutable record carrying its full flattened
property list, every extensible class also gets an interface, and records
can optionally offer a copy-with protocol. Supports Java and Python output.
"""

__version__ = "0.1.0"

from .config import CodeGeneratorConfig
from .errors import ConfigurationError, EmissionError, GeneratorError, SchemaError
from .generator import PipelineGenerator
from .schema_graph import SchemaGraph, SchemaLoader

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "SchemaGraph",
    "SchemaLoader",
    "GeneratorError",
    "SchemaError",
    "ConfigurationError",
    "EmissionError",
]
