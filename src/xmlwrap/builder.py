"""
Element factory with namespace resolution.

Names and attributes are given the way they appear in a document, i.e.
``prefix:local``.  Namespaces come from ``xmlns`` / ``xmlns:prefix``
entries in the attributes or from the declarations in scope at the
parent element::

    >>> from lxml import etree
    >>> from xmlwrap.builder import E

    >>> etree.tostring(E("tag"))
    b'<tag/>'
    >>> etree.tostring(E("tag", "text", {"key": "value"}))
    b'<tag key="value">text</tag>'

    >>> feed = E("feed", attrs={"xmlns": "urn:atom", "xmlns:a": "urn:testns"})
    >>> link = E.link("Wow!", {"a:href": "urn"}, parent=feed)
    >>> link.tag
    '{urn:atom}link'
    >>> link.get("{urn:testns}href")
    'urn'
"""

from functools import partial

from lxml import etree

XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'


def _split_qname(name):
    prefix, sep, local = name.partition(':')
    if not sep:
        return None, name
    return prefix, local


def _split_attributes(attrs):
    """Separate namespace declarations from ordinary attributes.
    """
    nsmap = {}
    attributes = []
    if attrs:
        for name, value in attrs.items():
            if name == 'xmlns':
                nsmap[None] = value
            elif name.startswith('xmlns:'):
                nsmap[name[6:]] = value
            else:
                attributes.append((name, value))
    return nsmap, attributes


def _lookup_prefix(prefix, element):
    if prefix == 'xml':
        return XML_NAMESPACE
    if element is None:
        return None
    return element.nsmap.get(prefix)


class ElementFactory(object):
    """Element factory.

    ``E(name, value, attrs, parent)`` creates an element, ``E.name(...)``
    is a shortcut for ``E("name", ...)``.  With a parent, the new element
    is appended to it and reuses the namespace declarations in scope.

    Pass a ``parser`` to create root elements through its element class
    lookup.
    """

    def __init__(self, parser=None):
        if parser is not None:
            self._makeelement = parser.makeelement
        else:
            self._makeelement = etree.Element

    def __call__(self, name, value=None, attrs=None, parent=None):
        nsmap, attributes = _split_attributes(attrs)
        prefix, local = _split_qname(name)

        namespace = nsmap.get(prefix)
        if namespace is None:
            namespace = _lookup_prefix(prefix, parent)
        if namespace is None:
            if prefix is not None:
                raise ValueError("unbound namespace prefix in %r" % name)
            tag = local
        else:
            tag = '{%s}%s' % (namespace, local)

        if parent is None:
            elem = self._makeelement(tag, nsmap=nsmap or None)
        else:
            elem = etree.SubElement(parent, tag, nsmap=nsmap or None)

        if value is not None:
            elem.text = value

        for attr_name, attr_value in attributes:
            attr_prefix, attr_local = _split_qname(attr_name)
            if attr_prefix is not None:
                attr_ns = _lookup_prefix(attr_prefix, elem)
                if attr_ns is None:
                    raise ValueError(
                        "unbound namespace prefix in attribute %r" % attr_name)
                attr_name = '{%s}%s' % (attr_ns, attr_local)
            elem.set(attr_name, attr_value)

        return elem

    def __getattr__(self, tag):
        return partial(self, tag)


# create factory object
E = ElementFactory()
