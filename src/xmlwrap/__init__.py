# this is a package

from xmlwrap.errors import (
    XmlWrapError, QuerySyntaxError, QueryEvaluationError,
    DetachedElementError, XMLParseError)
from xmlwrap._querypath import NamespaceTable, QueryEngine, is_simple_path
from xmlwrap.noderegistry import (
    WeakNodeRegistry, AttributeNodeRegistry, make_registry)
from xmlwrap.context import QueryContext, ElementHandle
from xmlwrap.builder import E, ElementFactory
from xmlwrap.element import XMLElement, default_context

__all__ = [
    'XmlWrapError', 'QuerySyntaxError', 'QueryEvaluationError',
    'DetachedElementError', 'XMLParseError',
    'NamespaceTable', 'QueryEngine', 'is_simple_path',
    'WeakNodeRegistry', 'AttributeNodeRegistry', 'make_registry',
    'QueryContext', 'ElementHandle',
    'E', 'ElementFactory',
    'XMLElement', 'default_context',
]
