"""
Analyzer module.

Contains hierarchy resolution, name resolution, property flattening,
documentation merging, the copy-with protocol and IR building.
"""

from __future__ import annotations

from .analyzer import RecordAnalyzer
from .doc_merger import DocMerger
from .hierarchy_resolver import HierarchyResolver
from .ir_nodes import (
    AccessorSignature,
    ComponentDescriptor,
    DocBlock,
    GenerationResult,
    InterfaceDescriptor,
    MementoDescriptor,
    RecordDescriptor,
    ResolvedClass,
    TypeName,
    WitherContractDescriptor,
    WitherMethodDescriptor,
)
from .name_resolver import NameMapping, NameResolver
from .property_flattener import PropertyFlattener
from .wither_emitter import WitherEmitter

__all__ = [
    "AccessorSignature",
    "ComponentDescriptor",
    "DocBlock",
    "GenerationResult",
    "InterfaceDescriptor",
    "MementoDescriptor",
    "RecordDescriptor",
    "ResolvedClass",
    "TypeName",
    "WitherContractDescriptor",
    "WitherMethodDescriptor",
    "NameMapping",
    "NameResolver",
    "HierarchyResolver",
    "PropertyFlattener",
    "DocMerger",
    "WitherEmitter",
    "RecordAnalyzer",
]
