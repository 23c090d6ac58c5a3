#!/usr/bin/env python3

import unittest
from unittest import TestCase

from schema_to_records.analyzer import HierarchyResolver, PropertyFlattener, RecordAnalyzer
from schema_to_records.config import CodeGeneratorConfig
from schema_to_records.errors import SchemaError
from schema_to_records.schema_graph import SchemaLoader


def chain_document(baz_properties=None):
    """Foo(one) -> None() -> Bar(two) -> Baz(three)"""
    return {
        "modules": [
            {
                "name": "m",
                "classes": [
                    {"name": "Foo", "kind": "abstract", "properties": [{"name": "one", "type": "Int"}]},
                    {"name": "None", "kind": "open", "extends": "Foo"},
                    {"name": "Bar", "kind": "open", "extends": "None", "properties": [{"name": "two", "type": "String"}]},
                    {
                        "name": "Baz",
                        "extends": "Bar",
                        "properties": baz_properties or [{"name": "three", "type": "Boolean"}],
                    },
                ],
            }
        ]
    }


class TestPropertyFlattener(TestCase):
    def setUp(self):
        self.graph = SchemaLoader().load(chain_document())
        self.resolved = HierarchyResolver().resolve(self.graph)
        self.flattener = PropertyFlattener()

    def test_chain_is_root_first(self):
        baz = self.graph.get("m.Baz")
        self.assertEqual([n.name for n in self.flattener.chain(baz)], ["Foo", "None", "Bar", "Baz"])

    def test_flatten_concatenates_the_chain(self):
        baz = self.resolved[self.graph.get("m.Baz")]
        self.assertEqual([p.name for p in self.flattener.flatten(baz)], ["one", "two", "three"])

    def test_empty_intermediate_class_contributes_nothing(self):
        none = self.resolved[self.graph.get("m.None")]
        self.assertEqual([p.name for p in self.flattener.flatten(none)], ["one"])

    def test_declaring_classes(self):
        declared = self.flattener.declaring_classes(self.graph.get("m.Baz"))
        self.assertEqual({name: node.name for name, node in declared.items()}, {"one": "Foo", "two": "Bar", "three": "Baz"})

    def test_abstract_class_cannot_be_flattened_into_a_record(self):
        foo = self.resolved[self.graph.get("m.Foo")]
        with self.assertRaises(SchemaError):
            self.flattener.flatten(foo)

    def test_duplicate_names_both_declaring_classes(self):
        graph = SchemaLoader().load(chain_document(baz_properties=[{"name": "one", "type": "Int"}]))
        with self.assertRaises(SchemaError) as ctx:
            HierarchyResolver().resolve(graph)

        error = ctx.exception
        self.assertEqual(error.property_name, "one")
        self.assertEqual(error.class_name, "m.Baz")
        self.assertEqual(error.declaring_classes, ("m.Foo", "m.Baz"))
        self.assertIn("'m.Foo'", str(error))
        self.assertIn("'m.Baz'", str(error))


class CountingFlattener(PropertyFlattener):
    """Records every class whose flattening is actually computed."""

    def __init__(self):
        super().__init__()
        self.computed = []

    def _extend(self, node, inherited):
        self.computed.append(node.qualified_name)
        return super()._extend(node, inherited)


class TestFlatteningMemo(TestCase):
    def setUp(self):
        self.graph = SchemaLoader().load(chain_document())
        self.flattener = CountingFlattener()

    def test_each_class_is_flattened_once_per_analysis(self):
        analyzer = RecordAnalyzer(CodeGeneratorConfig(enable_withers=True))
        analyzer.flattener = self.flattener
        analyzer.resolver.flattener = self.flattener

        analyzer.analyze(self.graph)
        self.assertEqual(self.flattener.computed, ["m", "m.Foo", "m.None", "m.Bar", "m.Baz"])

        analyzer.analyze(self.graph)
        self.assertEqual(len(self.flattener.computed), 5)

    def test_resolution_carries_the_memoized_flattening(self):
        resolved = HierarchyResolver(flattener=self.flattener).resolve(self.graph)
        baz = self.graph.get("m.Baz")
        bar = self.graph.get("m.Bar")

        self.assertIs(resolved[baz].properties, self.flattener.flatten_node(baz))
        self.assertEqual(resolved[baz].properties[:2], resolved[bar].properties)
        self.assertEqual([level.name for _, level in resolved[baz].properties], ["Foo", "Bar", "Baz"])

    def test_descendant_reuses_the_ancestor_flattening(self):
        self.flattener.flatten_node(self.graph.get("m.Bar"))
        self.flattener.flatten_node(self.graph.get("m.Baz"))
        self.assertEqual(self.flattener.computed, ["m.Foo", "m.None", "m.Bar", "m.Baz"])


if __name__ == "__main__":
    unittest.main()
