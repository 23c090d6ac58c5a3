"""
Copy-with protocol descriptors.

A record R gets a mutable staging type R.Memento and a public ``with``
method: the method copies the record into a Memento, lets the caller's
setter change any of its fields, then builds a fresh R from it. The
original record is never touched. All records share one generic
``Wither<R, S>`` contract.
"""

from __future__ import annotations

from ..config import CodeGeneratorConfig
from .ir_nodes import (
    ComponentDescriptor,
    MementoDescriptor,
    RecordDescriptor,
    WitherContractDescriptor,
    WitherMethodDescriptor,
)


class WitherEmitter:
    """Builds the Wither contract and the per-record Memento and entry point."""

    def __init__(self, config: CodeGeneratorConfig):
        self.config = config
        self.marker = config.effective_nullability_marker

    def contract(self) -> WitherContractDescriptor:
        """Return the shared generic contract."""
        return WitherContractDescriptor(nullability_marker=self.marker)

    def memento(self, record: RecordDescriptor) -> MementoDescriptor:
        """Return the staging type of a record: one mutable field per component."""
        return MementoDescriptor(
            record_name=record.name,
            fields=[
                ComponentDescriptor(
                    name=c.name,
                    type_ref=c.type_ref,
                    nullable=c.nullable,
                    declared_in=c.declared_in,
                )
                for c in record.components
            ],
        )

    def entry_point(self, record: RecordDescriptor) -> WitherMethodDescriptor:
        """Return the public with method of a record."""
        memento = record.memento or self.memento(record)
        return WitherMethodDescriptor(
            record_name=record.name,
            staging_name=f"{record.name}.{memento.name}",
            nullability_marker=self.marker,
        )

    def attach(self, record: RecordDescriptor) -> None:
        """Attach the Memento and the with method to a record."""
        record.memento = self.memento(record)
        record.wither = self.entry_point(record)
