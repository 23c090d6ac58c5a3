"""
Record analyzer that transforms a SchemaGraph into descriptors.

Runs the hierarchy resolver, then builds one interface descriptor per
resolved interface and one record descriptor per resolved record, with
flattened components, merged docs and, when enabled, the copy-with
protocol.
"""

from __future__ import annotations

import logging

from ..config import CodeGeneratorConfig
from ..errors import SchemaError
from ..schema_graph.nodes import ClassNode, SchemaGraph
from .doc_merger import DocMerger
from .hierarchy_resolver import HierarchyResolver
from .ir_nodes import (
    AccessorSignature,
    ComponentDescriptor,
    DocBlock,
    GenerationResult,
    InterfaceDescriptor,
    RecordDescriptor,
    ResolvedClass,
    TypeName,
)
from .property_flattener import PropertyFlattener
from .wither_emitter import WitherEmitter

logger = logging.getLogger(__name__)


class RecordAnalyzer:
    """Analyzes a schema graph and builds the generation result."""

    def __init__(self, config: CodeGeneratorConfig, max_workers: int | None = None):
        """
        Initialize the analyzer.

        Args:
            config: Code generation configuration
            max_workers: Worker threads for hierarchy resolution (None = sequential)
        """
        self.config = config
        self.max_workers = max_workers
        self.flattener = PropertyFlattener()
        self.resolver = HierarchyResolver(config.interface_prefix, self.flattener)
        self.doc_merger = DocMerger()
        self.wither_emitter = WitherEmitter(config) if config.enable_withers else None

    def analyze(self, graph: SchemaGraph) -> GenerationResult:
        """
        Analyze the graph and build descriptors.

        Args:
            graph: The schema graph

        Returns:
            GenerationResult ready for a backend
        """
        resolved = self.resolver.resolve(graph, max_workers=self.max_workers)

        result = GenerationResult(resolved=resolved)
        for node, resolution in resolved.items():
            if resolution.has_interface:
                result.interfaces.append(self._build_interface(node, resolution))
            if resolution.has_record:
                result.records.append(self._build_record(node, resolution))

        if self.wither_emitter is not None:
            result.wither_contract = self.wither_emitter.contract()

        self._check_consistency(result)

        logger.info(
            "Resolved %d classes into %d interfaces and %d records",
            len(resolved),
            len(result.interfaces),
            len(result.records),
        )
        return result

    def _build_interface(self, node: ClassNode, resolution: ResolvedClass) -> InterfaceDescriptor:
        """Build the interface descriptor: one accessor per own property."""
        return InterfaceDescriptor(
            name=resolution.interface.name,
            extends=resolution.interface_extends,
            methods=[
                AccessorSignature(name=p.name, type_ref=p.type, nullable=p.nullable, doc=p.doc)
                for p in node.own_properties
            ],
            doc=DocBlock(lead=node.doc.strip() if node.doc and node.doc.strip() else None),
            container=resolution.container,
            module=node.module,
            is_container=resolution.interface.is_container,
            source=node,
        )

    def _build_record(self, node: ClassNode, resolution: ResolvedClass) -> RecordDescriptor:
        """Build the record descriptor with its flattened components."""
        flattened = resolution.properties
        properties = [prop for prop, _ in flattened]

        record = RecordDescriptor(
            name=resolution.record.name,
            components=[
                ComponentDescriptor(
                    name=prop.name,
                    type_ref=prop.type,
                    nullable=prop.nullable,
                    doc=prop.doc,
                    declared_in=level.qualified_name,
                )
                for prop, level in flattened
            ],
            implements=list(resolution.implements),
            doc=self.doc_merger.merge(node, properties),
            container=resolution.container,
            module=node.module,
            is_container=resolution.record.is_container,
            source=node,
        )

        if self.config.enable_external_builder_annotation:
            record.decorations.append(self.config.external_builder_annotation)

        if self.wither_emitter is not None:
            self.wither_emitter.attach(record)

        return record

    def _check_consistency(self, result: GenerationResult) -> None:
        """Every interface a descriptor references must have been allocated."""
        allocated = {i.type_name for i in result.interfaces}

        def check(reference: TypeName | None, owner: str) -> None:
            if reference is not None and reference not in allocated:
                raise SchemaError(f"'{owner}' references unallocated interface '{reference}'", class_name=owner)

        for interface in result.interfaces:
            check(interface.extends, interface.source.qualified_name)
        for record in result.records:
            for reference in record.implements:
                check(reference, record.source.qualified_name)
