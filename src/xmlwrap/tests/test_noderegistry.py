# -*- coding: utf-8 -*-

"""
Tests for the element -> wrapper registries.
"""

import gc
import unittest

from lxml import etree

from xmlwrap.noderegistry import (
    AttributeNodeRegistry, HANDLE_ATTRIBUTE, WeakNodeRegistry, make_registry,
    supports_weakref)

from .common_imports import HelperTestCase


class Handle(object):
    def __init__(self, element):
        self.element = element


class SlotHandle(object):
    __slots__ = ('element',)

    def __init__(self, element):
        self.element = element


class StatefulElement(etree.ElementBase):
    pass


class WeakNodeRegistryTestCase(HelperTestCase):
    def test_same_handle(self):
        root = self.parse('<a><b/><b/></a>')
        registry = WeakNodeRegistry(Handle)
        handle = registry.get_or_create(root[0])
        self.assertTrue(handle is registry.get_or_create(root[0]))
        self.assertTrue(handle.element is root[0])
        other = registry.get_or_create(root[1])
        self.assertFalse(handle is other)
        self.assertEqual(2, len(registry))

    def test_get(self):
        root = self.parse('<a><b/></a>')
        registry = WeakNodeRegistry(Handle)
        self.assertEqual(None, registry.get(root))
        self.assertFalse(root in registry)
        handle = registry.get_or_create(root)
        self.assertTrue(registry.get(root) is handle)
        self.assertTrue(root in registry)

    def test_entry_dropped_with_handle(self):
        root = self.parse('<a><b/></a>')
        registry = WeakNodeRegistry(Handle)
        handle = registry.get_or_create(root[0])
        self.assertEqual(1, len(registry))
        del handle
        gc.collect()
        self.assertEqual(0, len(registry))

    def test_element_released(self):
        registry = WeakNodeRegistry(Handle)
        handle = registry.get_or_create(etree.Element('a'))
        del handle
        gc.collect()
        self.assertEqual(0, len(registry))

    def test_clear(self):
        root = self.parse('<a><b/></a>')
        registry = WeakNodeRegistry(Handle)
        handle = registry.get_or_create(root)
        registry.clear()
        self.assertEqual(0, len(registry))
        self.assertFalse(handle is registry.get_or_create(root))


class AttributeNodeRegistryTestCase(HelperTestCase):
    def _parse_stateful(self, text):
        parser = etree.XMLParser()
        parser.set_element_class_lookup(
            etree.ElementDefaultClassLookup(element=StatefulElement))
        return etree.fromstring(text, parser)

    def test_same_handle(self):
        root = self._parse_stateful('<a><b/><b/></a>')
        registry = AttributeNodeRegistry(SlotHandle)
        handle = registry.get_or_create(root[0])
        self.assertTrue(handle is registry.get_or_create(root[0]))
        self.assertTrue(handle is getattr(root[0], HANDLE_ATTRIBUTE))
        self.assertFalse(handle is registry.get_or_create(root[1]))
        self.assertTrue(root[0] in registry)

    def test_plain_elements_rejected(self):
        root = self.parse('<a/>')
        registry = AttributeNodeRegistry(SlotHandle)
        self.assertEqual(None, registry.get(root))
        self.assertRaises(TypeError, registry.get_or_create, root)


class MakeRegistryTestCase(unittest.TestCase):
    def test_supports_weakref(self):
        self.assertTrue(supports_weakref(Handle))
        self.assertTrue(supports_weakref(None))
        self.assertFalse(supports_weakref(SlotHandle))

    def test_tier_selection(self):
        self.assertTrue(isinstance(make_registry(Handle), WeakNodeRegistry))
        self.assertTrue(isinstance(make_registry(Handle, Handle), WeakNodeRegistry))
        self.assertTrue(
            isinstance(make_registry(SlotHandle, SlotHandle), AttributeNodeRegistry))


if __name__ == '__main__':
    unittest.main()
