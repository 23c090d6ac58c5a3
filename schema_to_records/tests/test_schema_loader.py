#!/usr/bin/env python3

import json
from pathlib import Path

import pytest

from schema_to_records.errors import SchemaError
from schema_to_records.schema_graph import ClassKind, SchemaLoader, TypeKind

TEST_DATA = Path(__file__).parent / "test_data"


def load_hierarchy():
    with open(TEST_DATA / "hierarchy.schema.json") as f:
        return SchemaLoader().load(json.load(f))


def module(name, classes=(), **extra):
    return {"name": name, "classes": list(classes), **extra}


class TestSchemaLoader:
    """Loading schema documents into a graph"""

    def test_modules_and_classes_in_declaration_order(self):
        graph = load_hierarchy()
        assert [m.name for m in graph.modules] == ["geometry", "shapes"]
        assert [c.qualified_name for c in graph.classes] == [
            "geometry",
            "geometry.Foo",
            "geometry.None",
            "geometry.Bar",
            "geometry.Baz",
            "shapes",
            "shapes.Point",
            "shapes.Shape",
            "shapes.Circle",
            "shapes.Polygon",
        ]

    def test_kinds_default_to_final(self):
        graph = load_hierarchy()
        assert graph.get("geometry").kind == ClassKind.ABSTRACT
        assert graph.get("geometry.None").kind == ClassKind.OPEN
        assert graph.get("shapes.Point").kind == ClassKind.FINAL
        assert graph.get("shapes").is_module
        assert not graph.get("shapes.Point").is_module

    def test_superclasses_are_linked(self):
        graph = load_hierarchy()
        baz = graph.get("geometry.Baz")
        assert [a.name for a in baz.ancestors()] == ["Bar", "None", "Foo"]
        assert graph.get("shapes.Circle").superclass is graph.get("shapes.Shape")

    def test_class_types_are_linked_across_modules(self):
        graph = load_hierarchy()
        link = next(p for p in graph.get("shapes.Circle").own_properties if p.name == "link")
        assert link.type.kind == TypeKind.NULLABLE
        inner = link.type.type_args[0]
        assert inner.kind == TypeKind.CLASS
        assert inner.target is graph.get("geometry.Bar")
        assert str(link.type) == "geometry.Bar?"

    def test_local_names_resolve_in_the_enclosing_module(self):
        graph = load_hierarchy()
        origin = graph.get("shapes.Shape").own_properties[0]
        assert origin.type.target is graph.get("shapes.Point")
        assert origin.type.name == "shapes.Point"
        assert origin.doc == "Anchor of the shape."

    def test_nested_container_types(self):
        loader = SchemaLoader()
        type_ref = loader.parse_type("Map<String, List<Map<Int, Float?>>>?")
        assert type_ref.kind == TypeKind.NULLABLE
        outer = type_ref.type_args[0]
        assert outer.kind == TypeKind.CONTAINER
        assert outer.name == "Map"
        assert [a.name for a in outer.type_args] == ["String", "List"]
        assert str(type_ref) == "Map<String, List<Map<Int, Float?>>>?"

    def test_nullable_flag_is_read(self):
        document = {"modules": [module("m", properties=[{"name": "a", "type": "Int", "nullable": True}])]}
        prop = SchemaLoader().load(document).get("m").own_properties[0]
        assert prop.nullable
        assert prop.type.kind == TypeKind.PRIMITIVE

    def test_superclass_may_be_declared_later(self):
        document = {
            "modules": [
                module(
                    "m",
                    [
                        {"name": "Child", "extends": "Parent"},
                        {"name": "Parent", "kind": "open"},
                    ],
                )
            ]
        }
        graph = SchemaLoader().load(document)
        assert graph.get("m.Child").superclass is graph.get("m.Parent")


class TestSchemaLoaderErrors:
    """Malformed documents are rejected with SchemaError"""

    def test_missing_modules(self):
        with pytest.raises(SchemaError, match="modules"):
            SchemaLoader().load({})

    def test_unknown_kind(self):
        with pytest.raises(SchemaError, match="Unknown class kind 'sealed'"):
            SchemaLoader().load({"modules": [module("m", kind="sealed")]})

    def test_duplicate_class(self):
        with pytest.raises(SchemaError, match="Duplicate class 'm.A'"):
            SchemaLoader().load({"modules": [module("m", [{"name": "A"}, {"name": "A"}])]})

    def test_duplicate_module(self):
        with pytest.raises(SchemaError, match="Duplicate module"):
            SchemaLoader().load({"modules": [module("m"), module("m")]})

    def test_property_declared_twice_in_one_class(self):
        document = {"modules": [module("m", [{"name": "A", "properties": [{"name": "x", "type": "Int"}, {"name": "x", "type": "Int"}]}])]}
        with pytest.raises(SchemaError) as excinfo:
            SchemaLoader().load(document)
        assert excinfo.value.property_name == "x"
        assert excinfo.value.class_name == "m.A"

    def test_undeclared_superclass(self):
        document = {"modules": [module("m", [{"name": "A", "extends": "Missing"}])]}
        with pytest.raises(SchemaError, match="undeclared class 'Missing'") as excinfo:
            SchemaLoader().load(document)
        assert excinfo.value.class_name == "m.A"

    def test_undeclared_property_type(self):
        document = {"modules": [module("m", [{"name": "A", "properties": [{"name": "b", "type": "List<B>"}]}])]}
        with pytest.raises(SchemaError, match="undeclared type 'B'") as excinfo:
            SchemaLoader().load(document)
        assert excinfo.value.property_name == "b"

    @pytest.mark.parametrize(
        "expression",
        ["", "List<Int", "Tuple<Int>", "List<Int, Int>", "Map<String>", "Map<String, List<Int>>>"],
    )
    def test_malformed_type_expressions(self, expression):
        with pytest.raises(SchemaError):
            SchemaLoader().parse_type(expression, "m.A")

    @pytest.mark.parametrize(
        "document, message",
        [
            ([], "modules"),
            ({"modules": ["m"]}, "Module must be an object"),
            ({"modules": [{"name": "m", "classes": ["Foo"]}]}, "Class in module 'm' must be an object"),
            ({"modules": [{"name": "m", "classes": {"name": "Foo"}}]}, "'classes' of 'm' must be a list"),
            ({"modules": [module("m", [{"name": "A", "properties": "x"}])]}, "'properties' of 'm.A' must be a list"),
            ({"modules": [module("m", [{"name": "A", "properties": ["x"]}])]}, "Property of 'm.A' must be an object"),
            ({"modules": [module("m", [{"name": "A", "extends": 3}])]}, "'extends' of 'm.A' must be a string"),
            ({"modules": [module("m", [{"name": "A", "doc": ["text"]}])]}, "'doc' of 'A' must be a string"),
        ],
    )
    def test_malformed_structure(self, document, message):
        with pytest.raises(SchemaError, match=message):
            SchemaLoader().load(document)

    @pytest.mark.parametrize("name", [None, "", "my-field", "2d", "a.b", 7])
    def test_invalid_property_names(self, name):
        prop = {"type": "Int"} if name is None else {"name": name, "type": "Int"}
        document = {"modules": [module("m", [{"name": "A", "properties": [prop]}])]}
        with pytest.raises(SchemaError, match="invalid name") as excinfo:
            SchemaLoader().load(document)
        assert excinfo.value.class_name == "m.A"

    @pytest.mark.parametrize("name", ["", "Shape Base", "m.A", "-"])
    def test_invalid_class_and_module_names(self, name):
        with pytest.raises(SchemaError, match="invalid name"):
            SchemaLoader().load({"modules": [module("m", [{"name": name}])]})
        with pytest.raises(SchemaError, match="invalid name"):
            SchemaLoader().load({"modules": [module(name)]})

    @pytest.mark.parametrize("type_value", [None, 5, ["Int"]])
    def test_property_type_must_be_a_string(self, type_value):
        prop = {"name": "x"} if type_value is None else {"name": "x", "type": type_value}
        document = {"modules": [module("m", [{"name": "A", "properties": [prop]}])]}
        with pytest.raises(SchemaError, match="needs a type string") as excinfo:
            SchemaLoader().load(document)
        assert excinfo.value.property_name == "x"
