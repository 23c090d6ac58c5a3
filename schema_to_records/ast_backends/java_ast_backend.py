"""
Java AST-based code generation backend.

Generates Java interfaces and records from the generation result. Each
module becomes one source file whose top-level type is the module's
container; the module's other types are nested in it. The shared Wither
contract goes to its own file.
"""

from __future__ import annotations

import logging

from ..analyzer.ir_nodes import (
    DocBlock,
    GenerationResult,
    InterfaceDescriptor,
    RecordDescriptor,
    TypeName,
)
from ..config import JAVA_RESERVED_WORDS, CodeGeneratorConfig
from ..errors import EmissionError
from ..schema_graph.nodes import TypeKind, TypeRef
from .base import AstBackend
from .java_ast_nodes import (
    AccessModifier,
    ImportDirective,
    JavaAnnotation,
    JavaClass,
    JavaConstructor,
    JavaField,
    JavaFile,
    JavaInterface,
    JavaMethod,
    JavaParameter,
    JavaRecord,
    JavaTypeDeclaration,
    MemberModifier,
)
from .java_serializer import JavaSerializer

logger = logging.getLogger(__name__)

CONSUMER_IMPORT = "java.util.function.Consumer"

# Record components cannot be named after the methods of java.lang.Object
FORBIDDEN_COMPONENT_NAMES = {"clone", "finalize", "getClass", "hashCode", "notify", "notifyAll", "toString", "wait"}


class JavaAstBackend(AstBackend):
    """Java code generation backend using AST."""

    FILE_EXTENSION = "java"

    TYPE_MAP = {
        "Boolean": "boolean",
        "Int": "long",
        "Float": "double",
        "Number": "Number",
        "String": "String",
        "Any": "Object",
    }

    BOXED_TYPES = {
        "boolean": "Boolean",
        "long": "Long",
        "double": "Double",
    }

    CONTAINER_MAP = {
        "List": "java.util.List",
        "Set": "java.util.Set",
        "Map": "java.util.Map",
    }

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.serializer = JavaSerializer(indent=config.indent)

        # Imports of the file being built
        self.imports: set[str] = set()

    def generate(self, result: GenerationResult, generation_comment: str = "") -> dict[str, str]:
        """Generate one Java file per module, plus Wither.java when withers are enabled."""
        self.result = result
        files: dict[str, str] = {}

        for container, descriptors in self._group_by_container().items():
            self.imports = set()
            top = self._find_container_type(container, descriptors)
            declaration = self._build_declaration(top)
            for descriptor in descriptors:
                if descriptor is not top:
                    declaration.nested_types.append(self._build_declaration(descriptor))

            java_file = JavaFile(
                package=self.config.java_package,
                imports=[ImportDirective(name) for name in self.imports],
                generation_comment=generation_comment,
                types=[declaration],
            )
            path = self._output_path(container)
            files[path] = self.serializer.serialize(java_file)
            logger.debug("Rendered %s with %d nested types", path, len(declaration.nested_types))

        if result.wither_contract is not None:
            contract = result.wither_contract
            path = self._output_path(contract.name)
            files[path] = self.render_template(
                "java/Wither.java.jinja2",
                contract=contract,
                marker=contract.nullability_marker,
                package=self.config.java_package,
                generation_comment=generation_comment,
                indent=self.config.indent,
                consumer_import=CONSUMER_IMPORT,
            )

        logger.info("Generated %d Java files", len(files))
        return files

    def _group_by_container(self) -> dict[str, list[InterfaceDescriptor | RecordDescriptor]]:
        """Collect descriptors per module container, in resolution order."""
        groups: dict[str, list[InterfaceDescriptor | RecordDescriptor]] = {}
        for descriptor in self.ordered_descriptors():
            groups.setdefault(descriptor.container, []).append(descriptor)
        return groups

    def _find_container_type(self, container: str, descriptors: list) -> InterfaceDescriptor | RecordDescriptor:
        for descriptor in descriptors:
            if descriptor.is_container:
                return descriptor
        raise EmissionError(f"Module container '{container}' has no generated type")

    def _output_path(self, type_name: str) -> str:
        filename = f"{type_name}.{self.FILE_EXTENSION}"
        if not self.config.java_package:
            return filename
        return "/".join([*self.config.java_package.split("."), filename])

    def _build_declaration(self, descriptor: InterfaceDescriptor | RecordDescriptor) -> JavaTypeDeclaration:
        if isinstance(descriptor, InterfaceDescriptor):
            return self._build_interface(descriptor)
        return self._build_record(descriptor)

    def _build_interface(self, interface: InterfaceDescriptor) -> JavaInterface:
        """Build an interface with one abstract accessor per own property."""
        context = interface.container
        names = self.member_names(interface)
        methods = [
            JavaMethod(
                name=names[m.name],
                return_type=self.translate_type(m.type_ref, m.nullable, context),
                access=AccessModifier.PACKAGE,
                javadoc=self._javadoc(DocBlock(lead=m.doc)),
            )
            for m in interface.methods
        ]
        return JavaInterface(
            name=interface.name,
            javadoc=self._javadoc(interface.doc),
            methods=methods,
            extends=[self._reference(interface.extends, context)] if interface.extends else [],
        )

    def _build_record(self, record: RecordDescriptor) -> JavaRecord:
        """Build a record with its flattened components and, if present, its copy-with protocol."""
        context = record.container
        names = self.member_names(record)
        components = [
            JavaParameter(name=names[c.name], type_name=self.translate_type(c.type_ref, c.nullable, context))
            for c in record.components
        ]
        doc = DocBlock(lead=record.doc.lead, params=[(names[n], text) for n, text in record.doc.params])

        java_record = JavaRecord(
            name=record.name,
            javadoc=self._javadoc(doc),
            annotations=[self._decoration(d) for d in record.decorations],
            components=components,
            implements=[self._reference(t, context) for t in record.implements],
        )

        if record.memento is not None and record.wither is not None:
            contract_name = self.result.wither_contract.name if self.result.wither_contract else "Wither"
            java_record.implements.append(f"{contract_name}<{record.name}, {record.wither.staging_name}>")
            java_record.methods.append(self._build_with_method(record))
            java_record.nested_types.append(self._build_memento(record, components))

        return java_record

    def _build_with_method(self, record: RecordDescriptor) -> JavaMethod:
        """Build ``with``: copy into a Memento, let the setter change it, build a new record."""
        self.imports.add(CONSUMER_IMPORT)
        wither = record.wither
        memento = record.memento
        marker = f"@{wither.nullability_marker}"

        return JavaMethod(
            name=wither.name,
            return_type=f"{marker} {record.name}",
            annotations=[JavaAnnotation("Override")],
            parameters=[
                JavaParameter(
                    name=wither.parameter_name,
                    type_name=f"{marker} Consumer<{marker} {memento.name}>",
                    is_final=True,
                )
            ],
            body=[
                f"final var memento = new {memento.name}(this);",
                f"{wither.parameter_name}.accept(memento);",
                f"return memento.{memento.finalizer_name}();",
            ],
        )

    def _build_memento(self, record: RecordDescriptor, components: list[JavaParameter]) -> JavaClass:
        """Build the mutable staging class nested in a record."""
        memento = record.memento
        names = [c.name for c in components]
        return JavaClass(
            name=memento.name,
            modifiers=[MemberModifier.STATIC, MemberModifier.FINAL],
            javadoc=self._javadoc(DocBlock(lead=f"Mutable copy of a {{@link {record.name}}} used by {{@link #with}}.")),
            fields=[JavaField(name=c.name, type_name=c.type_name) for c in components],
            constructors=[
                JavaConstructor(
                    class_name=memento.name,
                    access=AccessModifier(memento.constructor_access),
                    parameters=[JavaParameter(name="source", type_name=record.name, is_final=True)],
                    body=[f"this.{name} = source.{name}();" for name in names],
                )
            ],
            methods=[
                JavaMethod(
                    name=memento.finalizer_name,
                    return_type=record.name,
                    access=AccessModifier(memento.finalizer_access),
                    body=[f"return new {record.name}({', '.join(names)});"],
                )
            ],
        )

    def _decoration(self, qualified_name: str) -> JavaAnnotation:
        """Import a decoration and use it by its simple name."""
        self.imports.add(qualified_name)
        return JavaAnnotation(qualified_name.rsplit(".", 1)[-1])

    def _javadoc(self, doc: DocBlock) -> list[str]:
        if not self.config.generate_javadoc:
            return []
        return doc.to_javadoc()

    def _reference(self, type_name: TypeName, context: str) -> str:
        """Name a generated type as seen from inside a container."""
        if type_name.container == context:
            return type_name.name
        return type_name.qualified

    def member_name(self, name: str) -> str:
        """Escape component and accessor names that Java does not accept."""
        if name in JAVA_RESERVED_WORDS or name in FORBIDDEN_COMPONENT_NAMES:
            return name + "_"
        return name

    def translate_type(self, type_ref: TypeRef, nullable: bool = False, context: str = "") -> str:
        """Translate a schema type to a Java type; nullable primitives and type arguments are boxed."""
        if type_ref.kind == TypeKind.NULLABLE:
            return self.translate_type(type_ref.type_args[0], True, context)

        if type_ref.kind == TypeKind.PRIMITIVE:
            java_type = self.TYPE_MAP.get(type_ref.name)
            if java_type is None:
                raise EmissionError(f"Unknown primitive type '{type_ref.name}'")
            return self.BOXED_TYPES.get(java_type, java_type) if nullable else java_type

        if type_ref.kind == TypeKind.CONTAINER:
            qualified = self.CONTAINER_MAP[type_ref.name]
            self.imports.add(qualified)
            args = ", ".join(self.translate_type(arg, True, context) for arg in type_ref.type_args)
            return f"{type_ref.name}<{args}>"

        return self._reference(self.referenced_type(type_ref), context)
