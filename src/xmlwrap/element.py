"""
The ``XMLElement`` wrapper.

Wraps one lxml element and adds compact building, querying and
serialization methods::

    >>> from xmlwrap import XMLElement
    >>> movie = XMLElement.from_string('<movie><year>2010</year></movie>')
    >>> movie.get('year').as_text()
    '2010'
    >>> str(movie.add('title', 'Inception'))
    '<title>Inception</title>'
    >>> str(movie)
    '<movie><year>2010</year><title>Inception</title></movie>'
    >>> movie.get('title') is movie.get('title')
    True

Queries are relative XPath expressions.  Namespaced names can be written
in Clark notation, e.g. ``movie.get_all('{urn:cast}actor')``.
"""

from lxml import etree

from xmlwrap.builder import E
from xmlwrap.context import ElementHandle, QueryContext
from xmlwrap.errors import XMLParseError


def _make_parser(encoding=None):
    # parsers must not be shared between threads
    return etree.XMLParser(remove_blank_text=True, encoding=encoding)


class XMLElement(ElementHandle):
    """Wrapper around an lxml element.

    Do not instantiate directly, use one of the ``from_*`` / ``new_instance``
    class methods or ``QueryContext.identify()`` so that every element has
    exactly one wrapper.
    """

    @classmethod
    def from_string(cls, xml, context=None):
        """Parse an XML document and return its root element.

        Text strings are decoded already, so an encoding named in their
        XML declaration is ignored.  Byte strings are decoded as declared.
        Raises XMLParseError if the text is not well-formed.
        """
        if context is None:
            context = default_context
        if isinstance(xml, str):
            xml = xml.encode('utf-8')
            parser = _make_parser('utf-8')
        else:
            parser = _make_parser()
        try:
            root = etree.fromstring(xml, parser)
        except (etree.XMLSyntaxError, ValueError) as e:
            raise XMLParseError("Failed to parse XML string: %s" % e) from e
        if root is None:
            raise XMLParseError("Document element not found")
        return context.identify(root)

    @classmethod
    def from_element(cls, element, context=None):
        if context is None:
            context = default_context
        return context.identify(element)

    @classmethod
    def new_instance(cls, name, value=None, attrs=None, context=None):
        """Create the root element of a new document.

        ``name`` may carry a prefix that is declared in ``attrs`` through
        an ``xmlns:prefix`` entry.
        """
        if context is None:
            context = default_context
        return context.identify(E(name, value, attrs))

    def parent(self):
        """Return the parent element, or this element if it is the root.
        """
        parent = self._element.getparent()
        if parent is None:
            return self
        return self._context.identify(parent)

    def is_empty(self):
        "True if the element has neither children nor text."
        return not (len(self._element) or self._element.text)

    def add(self, name, value=None, attrs=None):
        """Append a new child element and return it.
        """
        return self._context.identify(
            E(name, value, attrs, parent=self._element))

    def get_all(self, xpath, limit=None):
        """Find the elements matching a query relative to this element.
        """
        identify = self._context.identify
        return [identify(element) for element
                in self._context.query_all(xpath, self._element, limit)]

    def get(self, xpath):
        """Find the first element matching a query, or None.
        """
        element = self._context.query_one(xpath, self._element)
        if element is None:
            return None
        return self._context.identify(element)

    def remove(self):
        """Remove this element from its parent.

        Text following the element stays in the document.  Has no effect
        on a root element.
        """
        element = self._element
        parent = element.getparent()
        if parent is None:
            return
        if element.tail:
            previous = element.getprevious()
            if previous is None:
                parent.text = (parent.text or '') + element.tail
            else:
                previous.tail = (previous.tail or '') + element.tail
        parent.remove(element)

    def as_text(self):
        return etree.tostring(
            self._element, method='text', encoding='unicode', with_tail=False)

    def as_xml(self, version='1.0', encoding='UTF-8', pretty_print=True):
        """Serialize this element and its children to a text string.

        Pass ``version=None`` to leave out the XML declaration.  The result
        is never encoded; ``encoding`` is only written into the declaration
        and names the encoding to use when storing the string.
        """
        xml = etree.tostring(
            self._element, encoding='unicode', pretty_print=pretty_print,
            with_tail=False)
        if version is None:
            return xml
        return '<?xml version="%s" encoding="%s"?>\n%s' % (version, encoding, xml)

    def __str__(self):
        return self.as_xml(None, pretty_print=False)


default_context = QueryContext(wrapper_class=XMLElement)
