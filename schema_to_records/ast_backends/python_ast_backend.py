"""
Python AST-based code generation backend.

Generates one Python module from the generation result using the built-in
ast module. Interfaces become runtime-checkable Protocols and records become
frozen dataclasses implementing them.
"""

from __future__ import annotations

import ast
import collections
import keyword
import logging
import textwrap

from ..analyzer.ir_nodes import DocBlock, GenerationResult, InterfaceDescriptor, RecordDescriptor, TypeName
from ..config import CodeGeneratorConfig
from ..errors import EmissionError
from ..schema_graph.nodes import TypeKind, TypeRef
from .base import AstBackend

logger = logging.getLogger(__name__)

PYTHON_MODULE_FILE = "records.py"

# Names bound by the module prelude
PRELUDE_NAMES = {"annotations", "Any", "Callable", "Protocol", "TypeVar", "dataclass", "final", "runtime_checkable"}

# Members a record or its Memento define for the copy-with protocol
PROTOCOL_MEMBER_NAMES = ("Memento", "with_", "_of", "_build")

INDENT = "    "


class PythonAstBackend(AstBackend):
    """Python code generation backend using AST."""

    FILE_EXTENSION = "py"

    TYPE_MAP = {
        "Boolean": "bool",
        "Int": "int",
        "Float": "float",
        "Number": "float",
        "String": "str",
        "Any": "Any",
    }

    CONTAINER_MAP = {
        "List": "list",
        "Set": "set",
        "Map": "dict",
    }

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()

        # Generated type -> class name in the flat module
        self.names: dict[TypeName, str] = {}

    def generate(self, result: GenerationResult, generation_comment: str = "") -> dict[str, str]:
        """Generate the Python module."""
        self.result = result
        self.python_imports = {("dataclasses", "dataclass")}
        self.names = self._allocate_names()

        class_nodes: list[ast.stmt] = []
        for descriptor in self.ordered_descriptors():
            if isinstance(descriptor, InterfaceDescriptor):
                class_nodes.append(self._generate_interface(descriptor))
            else:
                class_nodes.append(self._generate_record(descriptor))

        module = ast.Module(body=class_nodes, type_ignores=[])
        ast.fix_missing_locations(module)
        code = ast.unparse(module)

        contract = result.wither_contract
        if contract is not None:
            self.python_imports.update({("typing", "Callable"), ("typing", "Protocol"), ("typing", "TypeVar")})

        prelude = self.render_template(
            "python/prelude.py.jinja2",
            generation_comment=generation_comment,
            imports=self._group_imports(),
            contract=contract,
            method_name=self.method_name(contract.method_name) if contract else "",
        )

        logger.info("Generated %d Python classes", len(class_nodes))
        return {PYTHON_MODULE_FILE: self._post_process_code(prelude, code)}

    def _allocate_names(self) -> dict[TypeName, str]:
        """Give every generated type a unique name in the flat module."""
        taken = set(PRELUDE_NAMES)
        contract = self.result.wither_contract
        if contract is not None:
            taken |= {contract.name, contract.record_parameter, contract.staging_parameter}

        names: dict[TypeName, str] = {}
        for descriptor in self.ordered_descriptors():
            type_name = descriptor.type_name
            name = type_name.name
            if name in taken:
                name = f"{type_name.container}{type_name.name}"
                if name in taken:
                    raise EmissionError(f"Cannot give '{type_name}' a unique Python name")
                logger.debug("Renamed '%s' to '%s' in the flat module", type_name, name)
            taken.add(name)
            names[type_name] = name
        return names

    def _group_imports(self) -> list[tuple[str, list[str]]]:
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)
        return [(module, sorted(import_groups[module])) for module in sorted(import_groups)]

    def _generate_interface(self, interface: InterfaceDescriptor) -> ast.ClassDef:
        """Generate a Protocol declaring the interface's own members."""
        self.python_imports.update({("typing", "Protocol"), ("typing", "runtime_checkable")})

        bases: list[ast.expr] = []
        if interface.extends is not None:
            bases.append(ast.Name(id=self.names[interface.extends], ctx=ast.Load()))
        bases.append(ast.Name(id="Protocol", ctx=ast.Load()))

        names = self.member_names(interface)
        doc = DocBlock(
            lead=interface.doc.lead,
            params=[(names[m.name], m.doc) for m in interface.methods if m.doc and m.doc.strip()],
        )
        body = self._docstring(doc, depth=1)
        for method in interface.methods:
            body.append(self._generate_field(names[method.name], self.translate_type(method.type_ref, method.nullable)))

        return ast.ClassDef(
            name=self.names[interface.type_name],
            bases=bases,
            keywords=[],
            body=body or [ast.Pass()],
            decorator_list=[ast.Name(id="runtime_checkable", ctx=ast.Load())],
        )

    def _generate_record(self, record: RecordDescriptor) -> ast.ClassDef:
        """Generate a frozen dataclass holding every flattened component."""
        self.python_imports.add(("typing", "final"))
        name = self.names[record.type_name]

        bases: list[ast.expr] = [ast.Name(id=self.names[t], ctx=ast.Load()) for t in record.implements]
        if record.memento is not None and record.wither is not None:
            contract = self.result.wither_contract.name if self.result.wither_contract else "Wither"
            bases.append(self._parse_expr(f'{contract}["{name}", "{name}.{record.memento.name}"]'))

        names = self.member_names(record)
        fields = [(names[c.name], self.translate_type(c.type_ref, c.nullable)) for c in record.components]
        doc = DocBlock(lead=record.doc.lead, params=[(names[n], text) for n, text in record.doc.params])

        body = self._docstring(doc, depth=1)
        body.extend(self._generate_field(field_name, type_str) for field_name, type_str in fields)

        if record.memento is not None and record.wither is not None:
            body.append(self._generate_memento(name, record, fields))
            body.append(self._generate_with_method(name, record))

        return ast.ClassDef(
            name=name,
            bases=bases,
            keywords=[],
            body=body or [ast.Pass()],
            decorator_list=[
                ast.Name(id="final", ctx=ast.Load()),
                self._parse_expr("dataclass(frozen=True)"),
            ],
        )

    def _generate_memento(self, record_name: str, record: RecordDescriptor, fields: list[tuple[str, str]]) -> ast.ClassDef:
        """Generate the mutable staging dataclass nested in a record."""
        memento = record.memento
        staging = f"{record_name}.{memento.name}"
        copied = ", ".join(f"{n}=source.{n}" for n, _ in fields)
        built = ", ".join(f"{n}=self.{n}" for n, _ in fields)

        body = self._docstring(DocBlock(lead=f"Mutable copy of a {record_name} used by ``{self.method_name(record.wither.name)}``."), depth=2)
        body.extend(self._generate_field(field_name, type_str) for field_name, type_str in fields)
        body.append(
            self._parse_function(
                f"""
                @classmethod
                def _of(cls, source: {record_name}) -> {staging}:
                    return cls({copied})
                """
            )
        )
        body.append(
            self._parse_function(
                f"""
                def _{memento.finalizer_name}(self) -> {record_name}:
                    return {record_name}({built})
                """
            )
        )

        return ast.ClassDef(
            name=memento.name,
            bases=[],
            keywords=[],
            body=body,
            decorator_list=[ast.Name(id="dataclass", ctx=ast.Load())],
        )

    def _generate_with_method(self, record_name: str, record: RecordDescriptor) -> ast.FunctionDef:
        """Generate ``with_``: copy into a Memento, let the setter change it, build a new record."""
        wither = record.wither
        staging = f"{record_name}.{record.memento.name}"
        setter = wither.parameter_name
        return self._parse_function(
            f"""
            def {self.method_name(wither.name)}(self, {setter}: Callable[[{staging}], None]) -> {record_name}:
                \"\"\"Return a copy of this record with the changes made by ``{setter}``.\"\"\"
                memento = {staging}._of(self)
                {setter}(memento)
                return memento._{record.memento.finalizer_name}()
            """
        )

    def _generate_field(self, name: str, type_str: str) -> ast.AnnAssign:
        """Generate an annotated member without a default."""
        return ast.AnnAssign(
            target=ast.Name(id=name, ctx=ast.Store()),
            annotation=self._parse_expr(type_str),
            value=None,
            simple=1,
        )

    def _docstring(self, doc: DocBlock, depth: int) -> list[ast.stmt]:
        """Build a docstring statement indented for the given nesting depth."""
        if not self.config.generate_javadoc or doc.is_empty():
            return []
        lines = doc.to_docstring()
        indent = INDENT * depth
        text = lines[0]
        if len(lines) > 1:
            text += "".join(f"\n{indent}{line}" if line else "\n" for line in lines[1:]) + f"\n{indent}"
        return [ast.Expr(value=ast.Constant(value=text))]

    def member_name(self, name: str) -> str:
        """Escape member names that Python or the copy-with protocol already use."""
        escaped = name + "_" if keyword.iskeyword(name) else name
        while escaped in PROTOCOL_MEMBER_NAMES:
            escaped += "_"
        return escaped

    def method_name(self, name: str) -> str:
        return name + "_" if keyword.iskeyword(name) else name

    def translate_type(self, type_ref: TypeRef, nullable: bool = False, context: str = "") -> str:
        """Translate IR type to Python type string."""
        result = self._translate_type_inner(type_ref)

        if nullable and not result.endswith(" | None"):
            result = f"{result} | None"

        return result

    def _translate_type_inner(self, type_ref: TypeRef) -> str:
        """Inner type translation without nullable handling."""
        if type_ref.kind == TypeKind.NULLABLE:
            return self.translate_type(type_ref.type_args[0], nullable=True)

        if type_ref.kind == TypeKind.PRIMITIVE:
            type_name = self.TYPE_MAP.get(type_ref.name)
            if type_name is None:
                raise EmissionError(f"Unknown primitive type '{type_ref.name}'")
            if type_name == "Any":
                self.python_imports.add(("typing", "Any"))
            return type_name

        if type_ref.kind == TypeKind.CONTAINER:
            args = ", ".join(self.translate_type(arg) for arg in type_ref.type_args)
            return f"{self.CONTAINER_MAP[type_ref.name]}[{args}]"

        return self.names[self.referenced_type(type_ref)]

    def _parse_expr(self, expr_str: str) -> ast.expr:
        """Parse an expression string into an AST expression."""
        return ast.parse(expr_str, mode="eval").body

    def _parse_function(self, source: str) -> ast.FunctionDef:
        """Parse a function definition written as an indented block."""
        return ast.parse(textwrap.dedent(source).strip()).body[0]

    def _post_process_code(self, prelude: str, code: str) -> str:
        """Join the prelude and the classes, with two blank lines before each top-level class."""
        result = prelude.rstrip("\n").split("\n")

        for line in code.split("\n"):
            if (line.startswith("@") or line.startswith("class ")) and not result[-1].startswith("@"):
                while result and result[-1] == "":
                    result.pop()
                result.extend(["", ""])
            result.append(line)

        return "\n".join(result).rstrip("\n") + "\n"
