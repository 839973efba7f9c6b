"""
Registries mapping lxml elements to their wrapper objects.

A registry guarantees that a live element always gets the same wrapper,
so wrappers can be compared with ``is`` and used as dict keys.  It must
not keep elements alive on its own account.

Two strategies are available:

``WeakNodeRegistry``
    holds the wrappers in a ``weakref.WeakValueDictionary`` keyed by the
    element.  An entry disappears as soon as nobody references the
    wrapper any more.  A wrapper that nobody can observe may then be
    recreated, which does not break identity for any caller.

``AttributeNodeRegistry``
    stores the wrapper on the element itself, for wrapper classes that
    do not support weak references.  Element and wrapper reference each
    other, so they are only reclaimed by the cyclic garbage collector.
    Plain lxml elements do not accept attributes; this needs a custom
    element class (a subclass of ``etree.ElementBase`` set up through an
    element class lookup).

The factory runs under the registry lock.  The lock is reentrant, so a
wrapper may look up other wrappers (e.g. of its parent) while it is
being created.
"""

import threading
import weakref

HANDLE_ATTRIBUTE = '_xmlwrap_handle'


def supports_weakref(wrapper_class):
    return wrapper_class is None or hasattr(wrapper_class, '__weakref__')


def make_registry(factory, wrapper_class=None):
    """Create the registry best suited for instances of ``wrapper_class``.

    ``factory`` is called with an element and returns its new wrapper.
    """
    if supports_weakref(wrapper_class):
        return WeakNodeRegistry(factory)
    return AttributeNodeRegistry(factory)


class WeakNodeRegistry(object):
    def __init__(self, factory):
        self._factory = factory
        self._handles = weakref.WeakValueDictionary()
        self._lock = threading.RLock()

    def get(self, element):
        return self._handles.get(element)

    def get_or_create(self, element):
        handle = self._handles.get(element)
        if handle is None:
            with self._lock:
                handle = self._handles.get(element)
                if handle is None:
                    handle = self._factory(element)
                    self._handles[element] = handle
        return handle

    def clear(self):
        self._handles.clear()

    def __contains__(self, element):
        return element in self._handles

    def __len__(self):
        return len(self._handles)


class AttributeNodeRegistry(object):
    def __init__(self, factory):
        self._factory = factory
        self._lock = threading.RLock()

    def get(self, element):
        return getattr(element, HANDLE_ATTRIBUTE, None)

    def get_or_create(self, element):
        handle = self.get(element)
        if handle is None:
            with self._lock:
                handle = self.get(element)
                if handle is None:
                    handle = self._factory(element)
                    try:
                        setattr(element, HANDLE_ATTRIBUTE, handle)
                    except AttributeError:
                        raise TypeError(
                            "%s objects cannot carry a wrapper reference, "
                            "use a custom element class" % type(element).__name__)
        return handle

    def __contains__(self, element):
        return self.get(element) is not None
