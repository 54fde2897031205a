#  Copyright 2016-2023. Couchbase, Inc.
#  All Rights Reserved.
#
#  Licensed under the Apache License, Version 2.0 (the "License")
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

import os
import re

from setuptools import find_packages, setup

CBBUCKET_README = os.path.join(os.path.dirname(__file__), 'README.md')
CBBUCKET_INIT = os.path.join(os.path.dirname(__file__), 'cbbucket', '__init__.py')


def get_version():
    with open(CBBUCKET_INIT, 'r') as f:
        match = re.search(r"^__version__ = '([^']+)'", f.read(), re.M)
    if match is None:
        raise RuntimeError('Unable to determine the cbbucket version.')
    return match.group(1)


CBBUCKET_VERSION = get_version()

print(f'Python cbbucket version: {CBBUCKET_VERSION}')

setup(name='cbbucket',
      version=CBBUCKET_VERSION,
      python_requires='>=3.7',
      packages=find_packages(
          include=['cbbucket', 'cbbucket.*'],
          exclude=['cbbucket.tests']),
      install_requires=[],
      extras_require={
          'test': ['pytest', 'pytest-asyncio'],
      },
      author="Couchbase, Inc.",
      author_email="PythonPackage@couchbase.com",
      license="Apache License 2.0",
      description="Asynchronous bucket handle for Couchbase query, view and management requests",
      long_description=open(CBBUCKET_README, "r").read(),
      long_description_content_type='text/markdown',
      keywords=["couchbase", "nosql", "n1ql", "views", "asyncio"],
      classifiers=[
          "Development Status :: 4 - Beta",
          "License :: OSI Approved :: Apache Software License",
          "Intended Audience :: Developers",
          "Operating System :: OS Independent",
          "Programming Language :: Python",
          "Programming Language :: Python :: 3",
          "Programming Language :: Python :: Implementation :: CPython",
          "Framework :: AsyncIO",
          "Topic :: Database",
          "Topic :: Software Development :: Libraries",
          "Topic :: Software Development :: Libraries :: Python Modules"],
      )
