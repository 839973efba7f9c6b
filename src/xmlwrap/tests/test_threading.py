# -*- coding: utf-8 -*-

"""
Tests for concurrent first registration of namespaces and wrappers.
"""

import unittest

from xmlwrap import QueryContext, XMLElement
from xmlwrap._querypath import NamespaceTable

from .common_imports import HelperTestCase, SAMPLE_XML


class ThreadingTestCase(HelperTestCase):
    def test_one_prefix_per_uri(self):
        table = NamespaceTable()
        prefixes = []

        def register():
            for i in range(50):
                prefixes.append(table.register('urn:ns%d' % i))

        self._run_threads(8, register)
        self.assertEqual(50, len(table))
        self.assertEqual(
            sorted('prefix_%d' % i for i in range(50)), sorted(set(prefixes)))
        self.assertEqual(
            dict(('urn:ns%d' % i, table.prefix_for('urn:ns%d' % i)) for i in range(50)),
            dict(table.items()))

    def test_one_wrapper_per_element(self):
        context = QueryContext(wrapper_class=XMLElement)
        root = self.parse(SAMPLE_XML)
        wrappers = []

        def identify():
            for element in root.iter():
                wrappers.append(context.identify(element))

        self._run_threads(8, identify)
        elements = list(root.iter())
        self.assertEqual(8 * len(elements), len(wrappers))
        self.assertEqual(len(elements), len(set(map(id, wrappers))))

    def test_concurrent_queries(self):
        context = QueryContext(wrapper_class=XMLElement)
        xml = XMLElement.from_string(SAMPLE_XML, context)
        results = []

        def query():
            for _ in range(20):
                results.append(xml.get_all('{urn:unused}x') + xml.get_all('a/b'))

        self._run_threads(4, query)
        first = results[0]
        self.assertEqual(3, len(first))
        for result in results:
            self.assertEqual(len(first), len(result))
            for a, b in zip(first, result):
                self.assertTrue(a is b)
        engine = context.engine_for(xml.element)
        self.assertEqual(1, len(engine.namespaces))


if __name__ == '__main__':
    unittest.main()
