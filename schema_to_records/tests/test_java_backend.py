"""
Tests for the Java backend: file layout, type translation, records,
interfaces and the copy-with protocol.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from schema_to_records import CodeGeneratorConfig, PipelineGenerator
from schema_to_records.ast_backends import JavaSerializer
from schema_to_records.ast_backends.java_ast_nodes import (
    AccessModifier,
    JavaFile,
    JavaInterface,
    JavaMethod,
    JavaParameter,
    JavaRecord,
)
from schema_to_records.config import DEFAULT_NULLABILITY_MARKER

TEST_DATA = Path(__file__).parent / "test_data"

CUSTOM_MARKER = "com.example.NonNull"


@pytest.fixture
def document():
    with open(TEST_DATA / "hierarchy.schema.json") as f:
        return json.load(f)


def generate(document, **options):
    options.setdefault("add_generation_comment", False)
    return PipelineGenerator(document, CodeGeneratorConfig(**options), language="java").generate()


class TestLayout:
    def test_one_file_per_module(self, document):
        assert sorted(generate(document)) == ["Geometry.java", "Shapes.java"]

    def test_wither_contract_file(self, document):
        assert sorted(generate(document, enable_withers=True)) == ["Geometry.java", "Shapes.java", "Wither.java"]

    def test_package_directory_and_clause(self, document):
        files = generate(document, enable_withers=True, java_package="com.example.model")
        assert sorted(files) == [
            "com/example/model/Geometry.java",
            "com/example/model/Shapes.java",
            "com/example/model/Wither.java",
        ]
        for source in files.values():
            assert source.startswith("package com.example.model;\n")

    def test_container_is_top_level_and_others_nested(self, document):
        source = generate(document)["Geometry.java"]
        assert "\npublic interface Geometry {\n" in source
        assert "\n  public interface IFoo {\n" in source
        assert "\n  public record NoneType(long one) implements INone, IFoo {\n" in source
        assert source.endswith("}\n")

    def test_final_module_container_is_a_record(self, document):
        source = generate(document)["Shapes.java"]
        assert "public record Shapes(String title) {" in source
        assert "\n  public record Point(double x, double y) {\n" in source

    def test_generation_comment(self, document):
        files = generate(document, add_generation_comment=True, enable_withers=True)
        for source in files.values():
            assert source.startswith("// Generated by schema_to_records v")


class TestTypes:
    def test_interface_accessors(self, document):
        source = generate(document)["Shapes.java"]
        assert "\n  public interface IShape {\n" in source
        assert "    Point origin();" in source
        assert "    List<String> tags();" in source

    def test_nullable_primitives_are_boxed(self, document):
        source = generate(document)["Geometry.java"]
        assert "public record Baz(long one, String two, Boolean three) implements IBar, INone, IFoo {" in source

    def test_generic_arguments_are_boxed(self, document):
        assert "Map<String, Long> weights" in generate(document)["Shapes.java"]

    def test_container_imports(self, document):
        source = generate(document)["Shapes.java"]
        assert "import java.util.List;\nimport java.util.Map;\n" in source
        assert "import java.util" not in generate(document)["Geometry.java"]

    def test_cross_module_reference_is_qualified(self, document):
        source = generate(document)["Shapes.java"]
        # geometry.Bar is open, so its interface is used
        assert "Geometry.IBar link" in source

    def test_interface_extends(self, document):
        source = generate(document)["Geometry.java"]
        assert "public interface INone extends IFoo {" in source
        assert "public interface IBar extends INone {" in source

    def test_javadoc(self, document):
        source = generate(document)["Geometry.java"]
        assert "   * Leaf of the chain.\n   *\n   * @param one The first value.\n   * @param three The third value.\n" in source
        assert "/**" not in generate(document, generate_javadoc=False)["Geometry.java"]

    def test_reserved_component_names(self):
        document = {
            "modules": [
                {
                    "name": "m",
                    "classes": [
                        {"name": "A", "properties": [{"name": "default", "type": "Int"}, {"name": "hashCode", "type": "Int"}]}
                    ],
                }
            ]
        }
        assert "record A(long default_, long hashCode_)" in generate(document)["M.java"]

    def test_platform_type_names_are_not_shadowed(self):
        document = {
            "modules": [
                {
                    "name": "m",
                    "classes": [
                        {"name": "String", "properties": [{"name": "text", "type": "String"}]},
                        {"name": "Holder", "properties": [{"name": "value", "type": "m.String"}, {"name": "plain", "type": "String"}]},
                    ],
                }
            ]
        }
        source = generate(document)["M.java"]
        assert "record StringType(String text)" in source
        assert "record Holder(StringType value, String plain)" in source

    def test_escaped_names_do_not_collide(self):
        document = {
            "modules": [
                {
                    "name": "m",
                    "classes": [
                        {"name": "Foo", "kind": "abstract", "properties": [{"name": "class", "type": "Int"}]},
                        {"name": "Bar", "extends": "Foo", "properties": [{"name": "class_", "type": "Int"}, {"name": "class__", "type": "Int"}]},
                    ],
                }
            ]
        }
        source = generate(document)["M.java"]
        assert "    long class_();\n" in source
        assert "record Bar(long class_, long class__, long class___) implements IFoo {" in source

        source = generate(document, enable_withers=True)["M.java"]
        assert "this.class___ = source.class___();" in source
        assert "return new Bar(class_, class__, class___);" in source


class TestDecorations:
    def test_builder_annotation_is_imported_and_applied(self, document):
        source = generate(document, enable_external_builder_annotation=True)["Shapes.java"]
        assert "import lombok.Builder;" in source
        assert "@Builder\npublic record Shapes(" in source
        assert "  @Builder\n  public record Circle(" in source
        assert "@Builder\n  public interface" not in source


class TestWithers:
    def test_contract(self, document):
        source = generate(document, enable_withers=True)["Wither.java"]
        m = f"@{DEFAULT_NULLABILITY_MARKER}"
        assert "import java.util.function.Consumer;" in source
        assert f"public interface Wither<{m} R extends {m} Record, {m} S> {{" in source
        assert f"  {m} R with({m} Consumer<{m} S> setter);" in source

    def test_marker_override_substituted_at_every_site(self, document):
        files = generate(document, enable_withers=True, nullability_marker=CUSTOM_MARKER)
        for source in files.values():
            assert DEFAULT_NULLABILITY_MARKER not in source
        # R, its Record bound, S, the return type, the setter and its type argument
        assert files["Wither.java"].count(f"@{CUSTOM_MARKER}") == 6

    def test_record_entry_point(self, document):
        source = generate(document, enable_withers=True, nullability_marker=CUSTOM_MARKER)["Geometry.java"]
        m = f"@{CUSTOM_MARKER}"
        assert "implements IBar, INone, IFoo, Wither<Baz, Baz.Memento> {" in source
        assert f"    @Override\n    public {m} Baz with(final {m} Consumer<{m} Memento> setter) {{\n" in source
        assert "      final var memento = new Memento(this);\n      setter.accept(memento);\n      return memento.build();\n" in source
        assert "import java.util.function.Consumer;" in source

    def test_memento(self, document):
        source = generate(document, enable_withers=True)["Geometry.java"]
        assert "    public static final class Memento {\n      public long one;\n      public String two;\n      public Boolean three;\n" in source
        assert "      private Memento(final Baz source) {\n        this.one = source.one();\n" in source
        assert "      private Baz build() {\n        return new Baz(one, two, three);\n      }\n" in source

    def test_zero_component_record(self):
        document = {"modules": [{"name": "m", "classes": [{"name": "Empty"}]}]}
        source = generate(document, enable_withers=True)["M.java"]
        assert "public record Empty() implements Wither<Empty, Empty.Memento> {" in source
        assert "private Memento(final Empty source) {\n" in source
        assert "return new Empty();" in source


class TestSerializer:
    def test_long_record_header_is_wrapped(self):
        components = [JavaParameter(name=f"component{i}", type_name="String") for i in range(6)]
        record = JavaRecord(name="Wide", components=components, implements=["IWide"])
        lines = JavaSerializer().serialize(JavaFile(types=[record])).splitlines()
        assert lines[0] == "public record Wide("
        assert lines[1] == "    String component0,"
        assert lines[6] == "    String component5) implements IWide {"
        assert lines[7] == "}"

    def test_abstract_method_and_blank_lines(self):
        interface = JavaInterface(
            name="IShape",
            methods=[
                JavaMethod(name="a", return_type="long", access=AccessModifier.PACKAGE),
                JavaMethod(name="b", return_type="long", access=AccessModifier.PACKAGE),
            ],
        )
        assert JavaSerializer(indent="    ").serialize(JavaFile(types=[interface])) == (
            "public interface IShape {\n    long a();\n\n    long b();\n}\n"
        )
