import os
import sys

from setuptools import setup

# make sure versioninfo is found next to this file, whatever the cwd
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import versioninfo

xmlwrap_version = versioninfo.version()


def read_requirements():
    path = os.path.join(versioninfo.get_base_dir(), 'requirements.txt')
    with open(path) as f:
        return [line.strip() for line in f
                if line.strip() and not line.lstrip().startswith('#')]


setup(
    name="xmlwrap",
    version=xmlwrap_version,
    license="BSD",
    description=(
        "Compact element wrapper for lxml with namespace aware queries"
        " and stable element identity."
    ),
    long_description=versioninfo.long_description(),
    long_description_content_type="text/x-rst",
    classifiers=[
        versioninfo.dev_status(),
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Topic :: Text Processing :: Markup :: XML',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ],
    python_requires='>=3.6',
    zip_safe=False,
    package_dir={'': 'src'},
    packages=['xmlwrap', 'xmlwrap.tests'],
    install_requires=read_requirements(),
    extras_require={
        'test': ['pytest'],
    },
)
