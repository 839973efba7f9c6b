#
# Namespace aware element queries.
#
# Queries are relative paths that may spell namespaced names in Clark
# notation ("{uri}local").  Each namespace URI gets a synthetic prefix
# that stays registered for the lifetime of the engine, so the rewritten
# query is plain prefixed XPath.
#
# Plain child paths ("a/b/ns:c") are resolved by walking the children of
# the context element.  Everything else is handed to lxml's XPath
# engine.  There's usually no reason to use this module directly; the
# QueryContext creates one engine per document for you.
#

import logging
import re
import threading

from lxml import etree

from xmlwrap.errors import QueryEvaluationError, QuerySyntaxError

log = logging.getLogger(__name__)

NS_PREFIX = 'prefix_'

clark_tokenizer = re.compile(r'\{(\S+?)\}')

# leading slash, "//", axis separator or anything beyond plain names
_needs_xpath = re.compile(r'^/|//|::|[\[|*.@]').search


def is_simple_path(query):
    """Return True if ``query`` is a relative child path that can be
    resolved without the XPath engine.
    """
    return _needs_xpath(query) is None


def _split_segment(segment):
    prefix, sep, local = segment.partition(':')
    if not sep:
        return None, segment
    return prefix, local


def _select_children(parent, tag):
    for child in parent:
        # comments and PIs have a factory function as tag
        if child.tag == tag:
            yield child


def _is_element(node):
    return etree.iselement(node) and isinstance(node.tag, str)


class NamespaceTable(object):
    """Bidirectional mapping between namespace URIs and synthetic prefixes.

    Prefixes are numbered in the order the URIs are first seen.  A URI
    keeps its prefix for the lifetime of the table.
    """

    def __init__(self, prefix=NS_PREFIX):
        self._stem = prefix
        self._prefixes = {}
        self._uris = {}
        self._lock = threading.Lock()

    def register(self, uri):
        """Return the prefix of ``uri``, allocating the next free one for
        URIs that were not seen before.
        """
        prefix = self._prefixes.get(uri)
        if prefix is not None:
            return prefix
        with self._lock:
            prefix = self._prefixes.get(uri)
            if prefix is None:
                prefix = '%s%d' % (self._stem, len(self._prefixes))
                self._uris[prefix] = uri
                self._prefixes[uri] = prefix
                log.debug("registered namespace %r as prefix %r", uri, prefix)
        return prefix

    def prefix_for(self, uri):
        return self._prefixes.get(uri)

    def uri_for(self, prefix):
        return self._uris.get(prefix)

    def nsmap(self):
        "Prefix to URI mapping as accepted by etree.XPath()."
        return dict(self._uris)

    def items(self):
        return list(self._prefixes.items())

    def __contains__(self, uri):
        return uri in self._prefixes

    def __len__(self):
        return len(self._prefixes)


class QueryEngine(object):
    """Evaluates queries against the elements of one document.

    The engine accumulates the namespaces of all queries it has seen, so
    reusing it for many queries on the same document is cheap.
    """

    def __init__(self, tree, ns_prefix=NS_PREFIX, fast_path=True):
        self._tree = tree
        self._namespaces = NamespaceTable(ns_prefix)
        self.fast_path = fast_path
        # (query, namespaces) -> compiled etree.XPath
        self._xpath_cache = {}

    @property
    def tree(self):
        return self._tree

    @property
    def namespaces(self):
        return self._namespaces

    def rewrite(self, raw_query):
        """Replace every ``{uri}`` in ``raw_query`` by a registered prefix.
        """
        if '{' not in raw_query:
            return raw_query
        register = self._namespaces.register
        return clark_tokenizer.sub(
            lambda match: register(match.group(1)) + ':', raw_query)

    def lookup_namespace(self, prefix, context=None):
        """Resolve a prefix, first from the registered ones, then from the
        declarations in scope at ``context`` (default: the document
        element).
        """
        uri = self._namespaces.uri_for(prefix)
        if uri is None:
            if context is None:
                context = self._tree.getroot()
            if context is not None:
                uri = context.nsmap.get(prefix)
        return uri

    def query(self, raw_query, context):
        """Iterate over the elements matching ``raw_query`` relative to
        ``context``.

        The iterator is single pass.  Syntax and evaluation errors of the
        XPath engine are raised from this call, before any element is
        produced.
        """
        query = self.rewrite(raw_query)
        if self.fast_path and is_simple_path(query):
            log.debug("resolving %r by child traversal", query)
            return self.iterchildpath(query, context)
        log.debug("resolving %r with XPath", query)
        return self.iterxpath(query, context, raw_query)

    def iterchildpath(self, query, context):
        """Resolve a simple child path one segment at a time.

        All matches of a segment are collected before descending into the
        next one, so results come out grouped by their parent in frontier
        order.  The last segment is streamed.
        """
        tags = [self._segment_tag(segment, context)
                for segment in query.split('/')]
        if None in tags:
            return
        frontier = [context]
        for tag in tags[:-1]:
            frontier = [child for parent in frontier
                        for child in _select_children(parent, tag)]
            if not frontier:
                return
        for parent in frontier:
            yield from _select_children(parent, tags[-1])

    def iterxpath(self, query, context, raw_query=None):
        nodes = self._evaluate(query, context, raw_query or query)
        if not isinstance(nodes, list):
            # booleans, numbers and strings select no elements
            return iter(())
        return (node for node in nodes if _is_element(node))

    def _segment_tag(self, segment, context):
        prefix, local = _split_segment(segment)
        if not local:
            return None
        if prefix is None:
            return local
        uri = self.lookup_namespace(prefix, context)
        if uri is None:
            return None
        return '{%s}%s' % (uri, local)

    def _compile(self, query, namespaces, raw_query):
        key = (query, tuple(sorted(namespaces.items())))
        try:
            return self._xpath_cache[key]
        except KeyError:
            pass
        if len(self._xpath_cache) > 100:
            self._xpath_cache.clear()
        try:
            xpath = etree.XPath(query, namespaces=namespaces, smart_strings=False)
        except etree.XPathSyntaxError as e:
            raise QuerySyntaxError(
                "invalid query %r: %s" % (raw_query, e), e.error_log) from e
        self._xpath_cache[key] = xpath
        return xpath

    def _evaluate(self, query, context, raw_query):
        namespaces = dict(
            (prefix, uri) for prefix, uri in context.nsmap.items() if prefix)
        namespaces.update(self._namespaces.nsmap())
        xpath = self._compile(query, namespaces, raw_query)
        try:
            return xpath(context)
        except etree.XPathEvalError as e:
            raise QueryEvaluationError(
                "cannot evaluate query %r: %s" % (raw_query, e), e.error_log) from e
