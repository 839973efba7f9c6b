"""
Query contexts.

A ``QueryContext`` owns everything that has to be shared between
queries: one ``QueryEngine`` per document and the registry that maps
elements to their wrappers.  Pass it around explicitly; the wrapper API
falls back to ``xmlwrap.element.default_context`` only when no context
is given.
"""

import logging
import threading
import weakref
from itertools import islice

from lxml import etree

from xmlwrap._querypath import NS_PREFIX, QueryEngine
from xmlwrap.errors import DetachedElementError
from xmlwrap.noderegistry import make_registry

log = logging.getLogger(__name__)


def document_root(element):
    """Return the root element of the document that owns ``element``.

    lxml keeps elements that were removed from their tree in the original
    document, so they share its root.
    """
    if not etree.iselement(element) or not isinstance(element.tag, str):
        raise TypeError("expected an lxml element, got %r" % (element,))
    root = element.getroottree().getroot()
    if root is None:
        raise DetachedElementError(
            "element %r does not belong to a document" % element.tag)
    return root


class ElementHandle(object):
    """Minimal wrapper around an lxml element.

    Handles are compared by identity.  A handle keeps the query engine of
    its document alive, so registered namespace prefixes are kept as long
    as any handle of the document exists.
    """

    def __init__(self, element, context):
        self._element = element
        self._context = context
        self._engine = context.engine_for(element)

    @property
    def element(self):
        "The wrapped lxml element."
        return self._element

    @property
    def context(self):
        return self._context

    def __repr__(self):
        return '<%s %s at 0x%x>' % (
            self.__class__.__name__, self._element.tag, id(self))


class QueryContext(object):
    """Shared state for queries and element identity.

    The engine of a document, and with it the synthetic prefixes
    registered by Clark notation queries, lives as long as any wrapper of
    that document.  Queries run on plain lxml elements while no wrapper
    exists start with a fresh engine, so a ``prefix_N`` spelled out in
    such a query does not refer to an earlier registration.  Hold a
    wrapper (e.g. from ``identify()``) to keep prefixes between queries.

    Keyword arguments:

    wrapper_class
        class instantiated as ``wrapper_class(element, context)`` for
        every element that needs a wrapper (default: ``ElementHandle``)
    ns_prefix
        stem of the synthetic namespace prefixes
    fast_path
        set to False to send every query through the XPath engine
    """

    def __init__(self, wrapper_class=None, ns_prefix=NS_PREFIX, fast_path=True):
        if wrapper_class is None:
            wrapper_class = ElementHandle
        self.wrapper_class = wrapper_class
        self.ns_prefix = ns_prefix
        self.fast_path = fast_path
        # document root -> engine, kept alive by the handles of the document
        self._engines = weakref.WeakValueDictionary()
        self._engines_lock = threading.Lock()
        self._registry = make_registry(self._make_wrapper, wrapper_class)

    def _make_wrapper(self, element):
        return self.wrapper_class(element, self)

    @property
    def registry(self):
        return self._registry

    def engine_for(self, element):
        """Return the query engine of the document that owns ``element``.
        """
        root = document_root(element)
        engine = self._engines.get(root)
        if engine is None:
            with self._engines_lock:
                engine = self._engines.get(root)
                if engine is None:
                    engine = QueryEngine(
                        root.getroottree(), self.ns_prefix, self.fast_path)
                    self._engines[root] = engine
                    log.debug("created query engine for document of <%s>", root.tag)
        return engine

    def query(self, raw_query, element):
        return self.engine_for(element).query(raw_query, element)

    def query_all(self, raw_query, element, limit=None):
        """Return the elements matching ``raw_query`` relative to
        ``element``, at most ``limit`` of them if a limit is given.
        """
        results = self.query(raw_query, element)
        if limit is not None:
            results = islice(results, max(limit, 0))
        return list(results)

    def query_one(self, raw_query, element):
        return next(self.query(raw_query, element), None)

    def identify(self, element):
        """Return the wrapper of ``element``, creating it on first use.
        """
        if not etree.iselement(element):
            raise TypeError("expected an lxml element, got %r" % (element,))
        return self._registry.get_or_create(element)
