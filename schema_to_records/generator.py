"""
Record generator - the pipeline from schema to source files.

1. Load: build a SchemaGraph from a schema document (or take a graph as is)
2. Analyze: resolve the hierarchy and build interface/record descriptors
3. AST Backend: build language-native AST nodes from the descriptors
4. Serialize: render the nodes to source files
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from . import __version__
from .analyzer import GenerationResult, RecordAnalyzer
from .ast_backends import AstBackend, JavaAstBackend, PythonAstBackend
from .cli_utils import PROGRAM_NAME, reconstruct_command_line
from .config import SUPPORTED_LANGUAGES, CodeGeneratorConfig
from .errors import ConfigurationError
from .schema_graph import SchemaGraph, SchemaLoader

logger = logging.getLogger(__name__)

# Called instead of the record pipeline when records are disabled
LegacyGenerator = Callable[[SchemaGraph, CodeGeneratorConfig], dict[str, str]]


class PipelineGenerator:
    """Generates interfaces and records for every class of a schema."""

    BACKENDS: dict[str, type[AstBackend]] = {
        "java": JavaAstBackend,
        "python": PythonAstBackend,
    }

    def __init__(
        self,
        schema: SchemaGraph | dict[str, Any],
        config: CodeGeneratorConfig | None = None,
        language: str = "java",
        legacy_generator: LegacyGenerator | None = None,
        max_workers: int | None = None,
    ):
        """
        Initialize the generator.

        Args:
            schema: A linked SchemaGraph, or a schema document to load
            config: Code generation configuration
            language: Target language ("java" or "python")
            legacy_generator: Generator used when record generation is disabled
            max_workers: Worker threads for hierarchy resolution (None = sequential)
        """
        self.schema = schema
        self.config = config or CodeGeneratorConfig()
        self.language = language
        self.legacy_generator = legacy_generator
        self.max_workers = max_workers

    def validate(self) -> None:
        """
        Check the configuration before anything is generated.

        Raises:
            ConfigurationError: If an option is malformed or the combination is not supported
        """
        self.config.validate()
        if self.language not in SUPPORTED_LANGUAGES:
            raise ConfigurationError(f"Unsupported language '{self.language}'", option="language")
        if not self.config.enable_records and self.legacy_generator is None:
            raise ConfigurationError(
                "Record generation is disabled and no legacy generator was provided",
                option="enable_records",
            )

    def load_graph(self) -> SchemaGraph:
        if isinstance(self.schema, SchemaGraph):
            return self.schema
        return SchemaLoader().load(self.schema)

    def analyze(self) -> GenerationResult:
        """Run the analysis phase only and return the descriptors."""
        self.validate()
        graph = self.load_graph()
        return RecordAnalyzer(self.config, max_workers=self.max_workers).analyze(graph)

    def generate(self) -> dict[str, str]:
        """
        Generate source files.

        Returns:
            Mapping from relative output path to file content

        Raises:
            ConfigurationError: On invalid options, before any work is done
            SchemaError: If the schema is ill-formed
            EmissionError: If a backend cannot render a descriptor
        """
        self.validate()

        if not self.config.enable_records:
            logger.info("Record generation disabled, delegating to the legacy generator")
            return self.legacy_generator(self.load_graph(), self.config)

        result = self.analyze()
        backend = self.BACKENDS[self.language](self.config)
        return backend.generate(result, self._generate_command_comment(backend))

    def _generate_command_comment(self, backend: AstBackend) -> str:
        """Generate a command line comment for the generated files."""
        if not self.config.add_generation_comment:
            return ""

        try:
            from .schema_to_records import schema_to_records as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = PROGRAM_NAME

        return f"{backend._get_comment_prefix()} Generated by {PROGRAM_NAME} v{__version__} : {command_line}"
