#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re

from setuptools import find_packages, setup

# XXX: read the version without importing the package, its dependencies are not installed yet
with open('jsonio/version.py') as fp:
    __version__ = re.search(r"BASE_VERSION = '([^']+)'", fp.read()).group(1)  # type: ignore[union-attr]

setup(
    name='jsonio',
    version=__version__,
    description='Typed JSON encoding with large binary payloads off-loaded to a blob store',
    license='Apache-2.0',
    python_requires='>=3.11',
    entry_points={
        'console_scripts': ['jsonio-cli=jsonio.cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(exclude=('jsonio_tests', 'jsonio_tests.*')),
    package_data={'jsonio.conf': ['*.yml']},
    install_requires=[
        'colorama',
        'configargparse',
        'numpy',
        'pydantic>=2',
        'pyyaml',
        'structlog',
        'typing_extensions',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
