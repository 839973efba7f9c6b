"""Exception classes raised by xmlwrap.

The query errors derive from their lxml counterparts, so code that
already catches ``etree.XPathError`` keeps working.
"""

from lxml import etree


class XmlWrapError(Exception):
    """Base class of all errors raised by xmlwrap itself."""


class QuerySyntaxError(XmlWrapError, etree.XPathSyntaxError):
    """The XPath engine rejected a query string."""


class QueryEvaluationError(XmlWrapError, etree.XPathEvalError):
    """A query compiled but could not be evaluated, e.g. because of an
    undefined namespace prefix.
    """


class DetachedElementError(XmlWrapError, ValueError):
    """The context element does not belong to any document."""


class XMLParseError(XmlWrapError, ValueError):
    pass
