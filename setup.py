#!/usr/bin/env python
# coding=utf-8

# THIS FILE IS PART OF THE CIVILTIME DATE AND TIME LIBRARY.
# Copyright (C) NIWA & British Crown (Met Office) & Contributors.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import codecs
import re
from os.path import join, dirname, abspath

from setuptools import setup, find_namespace_packages

here = abspath(dirname(__file__))


def read(*parts):
    with codecs.open(join(here, *parts), 'r') as fp:
        return fp.read()


def find_version(*file_paths):
    version_file = read(*file_paths)
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]",
                              version_file, re.M)
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Unable to find version string.")


install_requires = [
    'metomi-isodatetime>=1!3.0.0',
    'tzdata>=2023.3',
]
tests_require = [
    'coverage>=5.0.0',
    'flake8>=3.0.0',
    'pycodestyle>=2.5.0',
    'pytest-cov>=2.8.0',
    'pytest>=6',
]

extra_requires = {
    'tests': tests_require,
    'all': [],
}
extra_requires['all'] = (
    tests_require
    + list({
        req
        for key, reqs in extra_requires.items()
        if key != 'all'
        for req in reqs
    })
)


setup(
    name='civiltime',
    version=find_version("civiltime", "__init__.py"),
    description=(
        'Date/time parsing, timezone and calendar arithmetic compatible'
        ' with the PHP date functions'
    ),
    long_description=read('README.md'),
    long_description_content_type="text/markdown",
    license='GPLv3',
    python_requires='>=3.9',
    packages=find_namespace_packages(include=["civiltime", "civiltime.*"]),
    install_requires=install_requires,
    extras_require=extra_requires,
)
