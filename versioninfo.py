import io
import os

__XMLWRAP_VERSION = None


def version():
    global __XMLWRAP_VERSION
    if __XMLWRAP_VERSION is None:
        with open(os.path.join(get_base_dir(), 'version.txt')) as f:
            __XMLWRAP_VERSION = f.read().strip()
    return __XMLWRAP_VERSION


def dev_status():
    _version = version()
    if 'a' in _version:
        return 'Development Status :: 3 - Alpha'
    elif 'b' in _version or 'c' in _version:
        return 'Development Status :: 4 - Beta'
    else:
        return 'Development Status :: 5 - Production/Stable'


def long_description():
    """Read the README shipped next to setup.py, if any.
    """
    path = os.path.join(get_base_dir(), 'README.rst')
    if not os.path.isfile(path):
        return ''
    with io.open(path, 'r', encoding='utf8') as f:
        return f.read()


def get_base_dir():
    return os.path.abspath(os.path.dirname(__file__))
