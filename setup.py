#!/usr/bin/python
# Copyright (c) 2010 OpenStack, LLC.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or
# implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os

import setuptools

project = 'swiftseg'


def parse_requirements(filename):
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), filename)
    with open(path) as fd:
        return [line.split('#', 1)[0].strip() for line in fd
                if line.strip() and not line.startswith('#')]


setuptools.setup(
    name=project,
    version='2026.1.0',
    description='Segmented uploads of large objects to OpenStack Swift',
    license='Apache License (2.0)',
    author='OpenStack',
    author_email='openstack-discuss@lists.openstack.org',
    url='https://opendev.org/',
    packages=setuptools.find_packages(exclude=['bin']),
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=parse_requirements('requirements.txt'),
    extras_require={'test': parse_requirements('test-requirements.txt')},
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
        'Environment :: OpenStack',
    ],
    entry_points={'console_scripts':
                  ['swiftseg-upload = swiftseg.cmd.upload:main'],
                  'oslo.config.opts':
                  ['swiftseg = swiftseg.opts:list_opts']},
    py_modules=[])
